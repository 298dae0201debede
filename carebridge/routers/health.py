from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from carebridge.core.logging import get_logger
from carebridge.db.repository import UserRepository
from carebridge.dependencies import get_user_repository
from carebridge.models.responses import HealthCheckResponse

logger = get_logger(__name__)

health_router = APIRouter(prefix="/api", tags=["Health"])


@health_router.get("/health", response_model=HealthCheckResponse)
def health_check(repo: Annotated[UserRepository, Depends(get_user_repository)]):
    """Service health check including a database round trip"""
    try:
        repo.ping()
    except SQLAlchemyError as e:
        logger.error(f"Health check error: {e}")
        body = HealthCheckResponse(
            status="unhealthy",
            database="error",
            timestamp=datetime.utcnow(),
            error=str(e),
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(mode="json", exclude_none=True),
        )
    return HealthCheckResponse(status="healthy", database="connected", timestamp=datetime.utcnow())


@health_router.get("/test")
def test_endpoint(repo: Annotated[UserRepository, Depends(get_user_repository)]):
    try:
        repo.ping()
        database = "connected"
    except SQLAlchemyError:
        database = "disconnected"
    return {
        "message": "Backend is working!",
        "timestamp": datetime.utcnow().isoformat(),
        "database": database,
        "healthCheck": "Check /api/health for detailed database status",
    }
