"""
Exception hierarchy shared by services and the HTTP layer
"""

from typing import Any, Optional


class CareBridgeError(Exception):
    """Base class for errors raised by the service layer."""

    status_code: int = 500
    error: str = "Server error occurred"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        super().__init__(message or self.error)
        self.message = message or self.error
        self.details = details


class ServiceNotConfiguredError(CareBridgeError):
    """An external service key is missing from the configuration."""
    status_code = 500


class UpstreamServiceError(CareBridgeError):
    """The upstream API answered with an HTTP error status."""

    def __init__(self, message: str, status_code: int, details: Any = None):
        super().__init__(message, details)
        self.status_code = status_code


class UpstreamUnavailableError(CareBridgeError):
    """The upstream API could not be reached."""
    status_code = 500


class UpstreamResponseError(CareBridgeError):
    """The upstream API answered, but with a payload we cannot use."""
    status_code = 502


class QuotaExhaustedError(CareBridgeError):
    """The upstream subscription quota is used up; retrying will not help."""
    status_code = 429
    error = "API quota exhausted. Please check your subscription."


class ConflictError(CareBridgeError):
    status_code = 400


class InvalidCredentialsError(CareBridgeError):
    status_code = 401
    error = "Invalid credentials"
