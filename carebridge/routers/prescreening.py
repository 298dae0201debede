from fastapi import APIRouter, Depends, HTTPException, Request, status

from carebridge.dependencies import RATE_LIMIT, get_llm_service, limiter
from carebridge.models.requests import NextQuestionRequest, ReportRequest
from carebridge.models.responses import NextQuestionResponse, ReportResponse
from carebridge.services.llm_service import LLMService

prescreening_router = APIRouter(
    prefix="/api/prescreening",
    tags=["Pre-screening"]
)


@prescreening_router.post("/next-question", response_model=NextQuestionResponse)
@limiter.limit(RATE_LIMIT)
async def next_question(
    request: Request,
    body: NextQuestionRequest,
    llm_service: LLMService = Depends(get_llm_service),
):
    """
    Ask the next screening question. The dialogue is stateless: the client
    sends the whole conversation so far with every call.
    """
    return await llm_service.next_screening_question(body.department, body.conversation)


@prescreening_router.post("/generate-report", response_model=ReportResponse)
@limiter.limit(RATE_LIMIT)
async def generate_report(
    request: Request,
    body: ReportRequest,
    llm_service: LLMService = Depends(get_llm_service),
):
    if not body.conversation:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Conversation log is required")
    return await llm_service.generate_screening_report(
        body.conversation,
        date=body.appointment_details.date,
        time=body.appointment_details.time,
    )
