from fastapi import APIRouter, Depends, HTTPException, Request, status

from carebridge.dependencies import RATE_LIMIT, get_llm_service, limiter
from carebridge.models.requests import TranscriptRequest
from carebridge.models.responses import SummaryResponse, TranscriptAnalysisResponse
from carebridge.services.llm_service import LLMService

transcript_router = APIRouter(
    prefix="/api/transcript",
    tags=["Transcript analysis"]
)


def _require_transcript(body: TranscriptRequest) -> str:
    if not body.transcript:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Transcript is required")
    return body.transcript


@transcript_router.post("/analyze", response_model=TranscriptAnalysisResponse)
@limiter.limit(RATE_LIMIT)
async def analyze_transcript(
    request: Request,
    body: TranscriptRequest,
    llm_service: LLMService = Depends(get_llm_service),
):
    """Extract symptoms, a potential diagnosis and notes from a consultation transcript."""
    return await llm_service.analyze_transcript(_require_transcript(body))


@transcript_router.post("/summarize", response_model=SummaryResponse)
@limiter.limit(RATE_LIMIT)
async def summarize_transcript(
    request: Request,
    body: TranscriptRequest,
    llm_service: LLMService = Depends(get_llm_service),
):
    return await llm_service.summarize_transcript(_require_transcript(body))
