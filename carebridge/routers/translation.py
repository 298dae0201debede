from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from carebridge.dependencies import RATE_LIMIT, get_request_id, get_translation_service, limiter
from carebridge.models.requests import TranslationRequest
from carebridge.models.responses import TranslationResponse
from carebridge.services.translation_service import TranslationService

translation_router = APIRouter(
    prefix="/api/translate",
    tags=["Translation"]
)


@translation_router.post("/translate", response_model=TranslationResponse)
@limiter.limit(RATE_LIMIT)
async def translate(
    request: Request,
    body: TranslationRequest,
    translation_service: TranslationService = Depends(get_translation_service),
):
    if not body.text:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Text is required for translation")
    if not body.target_language:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Target language is required")
    return await translation_service.translate(
        text=body.text,
        target_language=body.target_language,
        source_language=body.source_language,
        request_id=get_request_id(request),
    )


@translation_router.get("/languages")
@limiter.limit(RATE_LIMIT)
async def supported_languages(
    request: Request,
    translation_service: TranslationService = Depends(get_translation_service),
) -> Dict[str, Any]:
    return await translation_service.get_languages(request_id=get_request_id(request))
