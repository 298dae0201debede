from fastapi import APIRouter, Depends, HTTPException, Request, status

from carebridge.dependencies import RATE_LIMIT, get_llm_service, limiter
from carebridge.models.requests import PrescriptionRequest
from carebridge.models.responses import PrescriptionResponse
from carebridge.services.llm_service import LLMService

prescription_router = APIRouter(
    prefix="/api/prescription",
    tags=["Prescription"]
)


@prescription_router.post("/generate", response_model=PrescriptionResponse)
@limiter.limit(RATE_LIMIT)
async def generate_prescription(
    request: Request,
    body: PrescriptionRequest,
    llm_service: LLMService = Depends(get_llm_service),
):
    if not (body.symptoms or body.diagnosis or body.notes):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one of symptoms, diagnosis, or notes is required",
        )
    return await llm_service.generate_prescription(
        symptoms=body.symptoms,
        diagnosis=body.diagnosis,
        notes=body.notes,
        patient_info=body.patient_info,
    )
