"""
Speech-to-Text Service
Uses Google Cloud Speech-to-Text with speaker diarization.
"""

import time
from typing import Any, Dict, List, Optional, Tuple
import httpx
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from carebridge.config import settings
from carebridge.core.exceptions import (
    CareBridgeError,
    ServiceNotConfiguredError,
    UpstreamResponseError,
    UpstreamServiceError,
    UpstreamUnavailableError,
)
from carebridge.core.logging import get_logger, audit_logger
from carebridge.models.requests import TranscriptionRequest
from carebridge.models.responses import TranscriptionResponse
from carebridge.models.speech import RecognizedWord
from carebridge.services.diarization import build_utterances

logger = get_logger(__name__)

# Network issues are retried; HTTP errors are not
RETRYABLE_EXCEPTIONS = (httpx.TimeoutException, httpx.NetworkError)

# Browser recorders produce one of these; tried in order until Google accepts one
AUDIO_ENCODINGS: List[Tuple[str, int]] = [
    ("WEBM_OPUS", 48000),
    ("OGG_OPUS", 48000),
    ("LINEAR16", 16000),
    ("FLAC", 48000),
]


class STTService:
    """Service for Speech-to-Text transcription using Google Cloud Speech."""

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None, api_key: Optional[str] = None):
        self.http_client = http_client or httpx.AsyncClient(timeout=settings.http_timeout)
        self.api_key = api_key if api_key is not None else settings.google_speech_api_key
        self.url = settings.google_speech_url

    async def transcribe(self, request: TranscriptionRequest, request_id: str = "-") -> TranscriptionResponse:
        """
        Transcribes base64 audio and returns speaker-attributed utterances.
        Each known browser encoding is tried until the recognizer accepts one;
        if all fail, the last error is raised.
        """
        if not self.api_key:
            raise ServiceNotConfiguredError("Google API key not configured")

        logger.info(f"[{request_id}] Received transcription request for language: {request.language_code}")

        payload = None
        used_encoding = None
        last_error: Optional[CareBridgeError] = None
        for encoding, sample_rate in AUDIO_ENCODINGS:
            try:
                logger.info(f"[{request_id}] Trying {encoding} format...")
                payload = await self._recognize(request, encoding, sample_rate, request_id)
                used_encoding = encoding
                logger.info(f"[{request_id}] Success with {encoding} format")
                break
            except CareBridgeError as e:
                logger.warning(f"[{request_id}] Failed with {encoding}: {e.message}")
                last_error = e

        if used_encoding is None:
            raise last_error

        words = extract_words(payload, request.diarization)
        utterances = build_utterances(words)
        if request.diarization:
            # The tagged final result repeats earlier transcripts
            text = " ".join(u.transcript for u in utterances)
        else:
            text = extract_text(payload)

        audit_logger.log_transcription(
            request_id=request_id,
            language=request.language_code,
            encoding=used_encoding,
            diarization=request.diarization,
            utterance_count=len(utterances),
        )
        return TranscriptionResponse(transcript=utterances, text=text)

    @retry(
        wait=wait_exponential(multiplier=1, min=2, max=10),
        stop=stop_after_attempt(settings.max_retries),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        reraise=True,
        before_sleep=lambda retry_state: logger.warning(f"Retrying Google Speech API call, attempt {retry_state.attempt_number}...")
    )
    async def _post(self, body: Dict[str, Any]) -> httpx.Response:
        return await self.http_client.post(self.url, params={"key": self.api_key}, json=body)

    async def _recognize(
        self,
        request: TranscriptionRequest,
        encoding: str,
        sample_rate: int,
        request_id: str,
    ) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            "encoding": encoding,
            "sampleRateHertz": sample_rate,
            "languageCode": request.language_code,
            "enableAutomaticPunctuation": True,
            "enableWordTimeOffsets": True,
            "model": settings.google_speech_model,
        }
        if request.diarization:
            config["diarizationConfig"] = {
                "enableSpeakerDiarization": True,
                "minSpeakerCount": request.min_speakers,
                "maxSpeakerCount": max(request.min_speakers, request.max_speakers),
            }
        body = {"config": config, "audio": {"content": request.audio_content}}

        start = time.time()
        try:
            response = await self._post(body)
        except httpx.RequestError as e:
            audit_logger.log_external_api_call(
                request_id=request_id,
                service="google_speech",
                endpoint=self.url,
                response_status=None,
                response_time_ms=int((time.time() - start) * 1000),
                encoding=encoding,
                error=type(e).__name__,
            )
            raise UpstreamUnavailableError(
                "Network error - unable to reach Google Speech API", details=str(e)
            ) from e

        audit_logger.log_external_api_call(
            request_id=request_id,
            service="google_speech",
            endpoint=self.url,
            response_status=response.status_code,
            response_time_ms=int((time.time() - start) * 1000),
            encoding=encoding,
        )

        if response.is_error:
            raise UpstreamServiceError(
                "Speech recognition failed",
                status_code=response.status_code,
                details=_error_body(response),
            )
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamResponseError("Invalid response from Google Speech API") from e


def extract_words(payload: Dict[str, Any], diarization: bool) -> List[RecognizedWord]:
    """
    Pull the word list out of a recognize response.

    With diarization enabled Google repeats every word, speaker-tagged, in the
    final result, so only that one is read. A response without results means
    no speech was detected and yields no words.
    """
    results = _results(payload)
    if not results:
        return []
    if diarization:
        results = results[-1:]

    words: List[RecognizedWord] = []
    for result in results:
        alternative = _top_alternative(result)
        if alternative is None:
            continue
        raw_words = alternative.get("words") or []
        if not isinstance(raw_words, list):
            raise UpstreamResponseError("Invalid word list in Google Speech response")
        for raw in raw_words:
            if not isinstance(raw, dict):
                raise UpstreamResponseError("Invalid word entry in Google Speech response")
            try:
                words.append(RecognizedWord.model_validate(raw))
            except ValidationError as e:
                raise UpstreamResponseError("Invalid word entry in Google Speech response", details=str(e)) from e
    return words


def extract_text(payload: Dict[str, Any]) -> str:
    """Space-joined top-alternative transcripts of all results"""
    parts = []
    for result in _results(payload):
        alternative = _top_alternative(result)
        if alternative and alternative.get("transcript"):
            parts.append(alternative["transcript"].strip())
    return " ".join(parts)


def _results(payload: Any) -> List[Dict[str, Any]]:
    if not isinstance(payload, dict):
        raise UpstreamResponseError("Invalid response from Google Speech API")
    results = payload.get("results")
    if results is None:
        return []
    if not isinstance(results, list) or not all(isinstance(r, dict) for r in results):
        raise UpstreamResponseError("Invalid results in Google Speech response")
    return results


def _top_alternative(result: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    alternatives = result.get("alternatives") or []
    if not isinstance(alternatives, list):
        raise UpstreamResponseError("Invalid alternatives in Google Speech response")
    if not alternatives or not isinstance(alternatives[0], dict):
        return None
    return alternatives[0]


def _error_body(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and "error" in body:
        return body["error"]
    return body
