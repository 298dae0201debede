"""
CareBridge - FastAPI Main Application
"""

import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from carebridge.config import settings
from carebridge.core.exceptions import CareBridgeError, UpstreamServiceError
from carebridge.core.logging import setup_logging, get_logger, audit_logger
from carebridge.core.security import generate_request_id
from carebridge.db import DatabaseKeepAlive, get_session_factory, init_db
from carebridge.dependencies import limiter, stt_service, translation_service
from carebridge.models.responses import ErrorResponse, RateLimitResponse
from carebridge.routers import (
    health_router,
    prescreening_router,
    prescription_router,
    speech_router,
    transcript_router,
    translation_router,
    users_router,
)

# Initialize logging
setup_logging()
logger = get_logger(__name__)

# Prometheus metrics
request_count = Counter('http_requests_total', 'Total HTTP requests', ['method', 'endpoint', 'status'])
request_duration = Histogram('http_request_duration_seconds', 'HTTP request duration')


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("🚀 CareBridge starting...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"API Version: {settings.api_version}")

    try:
        init_db()
        logger.info("✅ Users and Doctors tables ready")
    except SQLAlchemyError as e:
        # Keep serving; /api/health reports the database as unhealthy
        logger.error(f"❌ Error initialising database: {e}")

    keepalive = DatabaseKeepAlive(get_session_factory(), settings.db_keepalive_interval)
    keepalive.start()

    yield

    # Shutdown
    logger.info("🛑 CareBridge shutting down...")
    await keepalive.stop()
    await stt_service.http_client.aclose()
    await translation_service.http_client.aclose()


# Create FastAPI app
app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url="/redoc" if settings.environment == "development" else None,
    debug=settings.debug,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Rate limiting
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

app.include_router(health_router)
app.include_router(users_router)
app.include_router(speech_router)
app.include_router(translation_router)
app.include_router(prescription_router)
app.include_router(transcript_router)
app.include_router(prescreening_router)


# Middleware for security headers
@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)
    if "X-Content-Type-Options" not in response.headers:
        response.headers["X-Content-Type-Options"] = "nosniff"
    if "X-Frame-Options" not in response.headers:
        response.headers["X-Frame-Options"] = "DENY"
    if settings.environment == "production" and "Strict-Transport-Security" not in response.headers:
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response


# Middleware for request tracking and metrics
@app.middleware("http")
async def track_requests(request: Request, call_next):
    """Request tracking and Prometheus metrics"""

    start_time = time.time()
    request_id = generate_request_id()

    request.state.request_id = request_id
    request.state.start_time = start_time

    try:
        response = await call_next(request)

        duration = time.time() - start_time
        request_count.labels(
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code
        ).inc()
        request_duration.observe(duration)

        audit_logger.log_api_request(
            request_id=request_id,
            endpoint=request.url.path,
            method=request.method,
            status_code=response.status_code,
            user_agent=request.headers.get("user-agent"),
            ip_address=request.client.host if request.client else None,
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{duration:.3f}s"

        return response

    except Exception as e:
        request_count.labels(
            method=request.method,
            endpoint=request.url.path,
            status=500
        ).inc()

        logger.error(f"Request {request_id} failed: {e}")

        return _error_response(request_id, 500, "Server error occurred")


# Prometheus metrics endpoint
@app.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics"""
    if not settings.enable_metrics:
        raise HTTPException(status_code=404, detail="Metrics disabled")

    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def _error_response(
    request_id: str,
    status_code: int,
    error: str,
    details: Any = None,
    upstream_status: Optional[int] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        details=jsonable_encoder(details),
        status=upstream_status,
        request_id=request_id,
        timestamp=datetime.utcnow(),
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers={"X-Request-ID": request_id, **(headers or {})},
    )


def _request_id(request: Request) -> str:
    return getattr(request.state, 'request_id', 'unknown')


@app.exception_handler(CareBridgeError)
async def service_error_handler(request: Request, exc: CareBridgeError):
    """Maps service-layer errors to JSON error bodies"""
    request_id = _request_id(request)
    logger.error(
        f"Request {request_id} failed: {exc.message}",
        error_type=type(exc).__name__,
        details=exc.details,
    )
    upstream_status = exc.status_code if isinstance(exc, UpstreamServiceError) else None
    return _error_response(request_id, exc.status_code, exc.message, exc.details, upstream_status)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(_request_id(request), exc.status_code, str(exc.detail), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error_response(
        _request_id(request),
        status.HTTP_400_BAD_REQUEST,
        "Invalid request body",
        details=exc.errors(),
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Custom rate limit error handler"""

    response = RateLimitResponse(
        message="Too many requests. Please try again later.",
        limit=settings.rate_limit_requests,
        window=settings.rate_limit_window,
        timestamp=datetime.utcnow()
    )

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=response.model_dump(mode="json"),
        headers={"Retry-After": str(settings.rate_limit_window)}
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors"""

    request_id = _request_id(request)

    audit_logger.log_error(
        request_id=request_id,
        error_type=type(exc).__name__,
        error_message=str(exc),
        stack_trace=traceback.format_exc(),
    )

    return _error_response(request_id, 500, "Server error occurred")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "carebridge.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development"
    )
