"""
Translation Service using the Google Cloud Translation v2 API
"""

import time
from typing import Any, Dict, Optional
import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from carebridge.config import settings
from carebridge.core.exceptions import (
    ServiceNotConfiguredError,
    UpstreamResponseError,
    UpstreamServiceError,
    UpstreamUnavailableError,
)
from carebridge.core.logging import get_logger, audit_logger
from carebridge.models.responses import TranslationResponse

logger = get_logger(__name__)

RETRYABLE_EXCEPTIONS = (httpx.TimeoutException, httpx.NetworkError)

# Speech recognition locales mapped to Google Translate language codes
LANGUAGE_CODE_MAP = {
    "en-US": "en",
    "hi-IN": "hi",
    "es-ES": "es",
    "fr-FR": "fr",
    "de-DE": "de",
    "ja-JP": "ja",
    "zh-CN": "zh",
}


def to_translate_code(language: str) -> str:
    """Maps a locale such as 'hi-IN' to the code the Translate API expects"""
    return LANGUAGE_CODE_MAP.get(language) or language.split("-")[0]


class TranslationService:
    """Service for text translation."""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None, api_key: Optional[str] = None):
        self.http_client = http_client or httpx.AsyncClient(timeout=settings.http_timeout)
        self.api_key = api_key if api_key is not None else settings.google_translation_api_key
        self.url = settings.google_translation_url

    def _require_key(self):
        if not self.api_key:
            raise ServiceNotConfiguredError("Google Translation API key not configured")

    async def translate(
        self,
        text: str,
        target_language: str,
        source_language: str = "auto",
        request_id: str = "-",
    ) -> TranslationResponse:
        """
        Translate text. Source 'auto' lets Google detect the language.
        Identical source and target languages return the text unchanged.
        """
        self._require_key()

        target = to_translate_code(target_language)
        source = None if source_language == "auto" else to_translate_code(source_language)

        logger.info(
            "Translation request",
            text=text[:100] + "...",
            source_lang=source,
            target_lang=target,
        )

        if source == target:
            return TranslationResponse(
                translated_text=text,
                detected_source_language=source,
                target_language=target,
            )

        body: Dict[str, Any] = {"q": text, "target": target, "format": "text"}
        if source:
            body["source"] = source

        data = await self._call("POST", self.url, request_id, json=body)
        translations = (data.get("data") or {}).get("translations") if isinstance(data, dict) else None
        if not translations:
            raise UpstreamResponseError("Invalid response from Google Translate API")

        translation = translations[0]
        logger.info("Translation successful")
        return TranslationResponse(
            translated_text=translation.get("translatedText", ""),
            detected_source_language=translation.get("detectedSourceLanguage") or source,
            target_language=target,
        )

    async def get_languages(self, request_id: str = "-") -> Dict[str, Any]:
        """Supported languages, with English display names"""
        self._require_key()
        return await self._call(
            "GET", f"{self.url}/languages", request_id,
            params={"target": "en"}, error_message="Failed to fetch supported languages",
        )

    @retry(
        wait=wait_exponential(multiplier=1, min=2, max=10),
        stop=stop_after_attempt(settings.max_retries),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        reraise=True,
        before_sleep=lambda retry_state: logger.warning(f"Retrying Google Translate API call, attempt {retry_state.attempt_number}...")
    )
    async def _send(self, method: str, url: str, params: Dict[str, Any], json: Optional[Dict[str, Any]]) -> httpx.Response:
        return await self.http_client.request(method, url, params=params, json=json)

    async def _call(
        self,
        method: str,
        url: str,
        request_id: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        error_message: str = "Translation failed",
    ) -> Any:
        start = time.time()
        try:
            response = await self._send(method, url, {"key": self.api_key, **(params or {})}, json)
        except httpx.RequestError as e:
            audit_logger.log_external_api_call(
                request_id=request_id,
                service="google_translate",
                endpoint=url,
                response_status=None,
                response_time_ms=int((time.time() - start) * 1000),
                error=type(e).__name__,
            )
            raise UpstreamUnavailableError(
                "Network error - unable to reach Google Translate API", details=str(e)
            ) from e

        audit_logger.log_external_api_call(
            request_id=request_id,
            service="google_translate",
            endpoint=url,
            response_status=response.status_code,
            response_time_ms=int((time.time() - start) * 1000),
        )

        if response.is_error:
            try:
                details = response.json()
            except ValueError:
                details = response.text
            raise UpstreamServiceError(error_message, status_code=response.status_code, details=details)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamResponseError("Invalid response from Google Translate API") from e
