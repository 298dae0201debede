"""
Strukturiertes Logging Setup für CareBridge
"""

import logging
from datetime import datetime
from typing import Any, Optional

import structlog

from carebridge.config import settings, Environment


def _log_level() -> int:
    level = logging.getLevelName(settings.log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging():
    """Konfiguriert strukturiertes Logging (Konsole in Development, sonst JSON)"""

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.environment == Environment.DEVELOPMENT:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend([
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ])

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(_log_level()),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None):
    """Erstellt einen konfigurierten Logger"""
    return structlog.get_logger(name or __name__)


class AuditLogger:
    """
    Logger für Audit-Events: eingehende Requests, Calls zu Google/Azure,
    Transkriptionen, Account-Events und Fehler. Patientendaten (Audio,
    Transkripte, Passwörter) werden nie geloggt, nur Metadaten.
    """

    def __init__(self):
        self.logger = get_logger("audit")

    def _emit(self, event: str, level: str = "info", **fields: Any):
        getattr(self.logger, level)(
            event,
            timestamp=datetime.utcnow().isoformat(),
            **fields,
        )

    def log_api_request(
        self,
        request_id: str,
        endpoint: str,
        method: str,
        status_code: Optional[int] = None,
        user_agent: Optional[str] = None,
        ip_address: Optional[str] = None,
        **kwargs
    ):
        self._emit(
            "api_request",
            request_id=request_id,
            endpoint=endpoint,
            method=method,
            status_code=status_code,
            user_agent=user_agent,
            ip_address=ip_address,
            **kwargs
        )

    def log_transcription(
        self,
        request_id: str,
        language: str,
        encoding: str,
        diarization: bool,
        utterance_count: int,
        **kwargs
    ):
        """Loggt Transkriptionsergebnisse (ohne Text)"""
        self._emit(
            "transcription",
            request_id=request_id,
            language=language,
            encoding=encoding,
            diarization=diarization,
            utterance_count=utterance_count,
            **kwargs
        )

    def log_external_api_call(
        self,
        request_id: str,
        service: str,
        endpoint: str,
        response_status: Optional[int],
        response_time_ms: int,
        **kwargs
    ):
        """Loggt Calls zu externen APIs"""
        level = "warning" if response_status is None or response_status >= 400 else "info"
        self._emit(
            "external_api_call",
            level=level,
            request_id=request_id,
            service=service,
            endpoint=endpoint,
            response_status=response_status,
            response_time_ms=response_time_ms,
            **kwargs
        )

    def log_account_event(self, action: str, user_type: Optional[str], success: bool, **kwargs):
        """Signup/Login Ergebnis; die E-Mail wird nur maskiert geloggt"""
        email = kwargs.pop("email", None)
        if email:
            kwargs["email"] = mask_email(email)
        self._emit(
            "account_event",
            level="info" if success else "warning",
            action=action,
            user_type=user_type,
            success=success,
            **kwargs
        )

    def log_error(
        self,
        request_id: str,
        error_type: str,
        error_message: str,
        stack_trace: Optional[str] = None,
        **kwargs
    ):
        """Loggt Fehler-Events"""
        self._emit(
            "error_event",
            level="error",
            request_id=request_id,
            error_type=error_type,
            error_message=error_message,
            stack_trace=stack_trace,
            **kwargs
        )


def mask_email(email: str) -> str:
    """a***@example.com"""
    local, _, domain = email.partition("@")
    if not domain:
        return "***"
    return f"{local[:1]}***@{domain}"


# Global audit logger instance
audit_logger = AuditLogger()
