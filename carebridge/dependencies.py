"""
Shared FastAPI dependencies: service instances, repositories and the rate limiter
"""

from typing import Annotated

from fastapi import Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from carebridge.config import settings
from carebridge.db.base import get_db
from carebridge.db.repository import UserRepository
from carebridge.services.llm_service import LLMService
from carebridge.services.stt_service import STTService
from carebridge.services.translation_service import TranslationService

# Rate limiter
limiter = Limiter(key_func=get_remote_address)
RATE_LIMIT = f"{settings.rate_limit_requests} per {settings.rate_limit_window} seconds"

# Service instances
stt_service = STTService()
translation_service = TranslationService()
llm_service = LLMService()


def get_stt_service() -> STTService:
    return stt_service


def get_translation_service() -> TranslationService:
    return translation_service


def get_llm_service() -> LLMService:
    return llm_service


def get_user_repository(db: Annotated[Session, Depends(get_db)]) -> UserRepository:
    """Dependency: repository from request-scoped DB session."""
    return UserRepository(db)


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")