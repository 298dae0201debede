from fastapi import APIRouter, Depends, HTTPException, Request, status

from carebridge.dependencies import RATE_LIMIT, get_request_id, get_stt_service, limiter
from carebridge.models.requests import TranscriptionRequest
from carebridge.models.responses import TranscriptionResponse
from carebridge.services.stt_service import STTService

speech_router = APIRouter(
    prefix="/api/speech",
    tags=["Speech to text"]
)


@speech_router.post("/transcribe", response_model=TranscriptionResponse)
@limiter.limit(RATE_LIMIT)
async def transcribe(
    request: Request,
    body: TranscriptionRequest,
    stt_service: STTService = Depends(get_stt_service),
):
    """
    Transcribe base64 audio into speaker-attributed utterances.
    Silent audio is a successful, empty transcript.
    """
    if not body.audio_content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Audio content is required")
    return await stt_service.transcribe(body, request_id=get_request_id(request))
