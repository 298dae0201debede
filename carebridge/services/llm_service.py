"""
LLM Service for prescriptions, transcript analysis and pre-screening
"""
import instructor
import openai
from openai import AsyncAzureOpenAI
from datetime import datetime
from typing import Any, Dict, List, Optional, Type
from pydantic import BaseModel, ValidationError
from instructor.exceptions import InstructorRetryException
from tenacity import retry, stop_after_attempt, retry_if_exception

from carebridge.config import settings
from carebridge.core.exceptions import (
    QuotaExhaustedError,
    ServiceNotConfiguredError,
    UpstreamResponseError,
    UpstreamServiceError,
    UpstreamUnavailableError,
)
from carebridge.core.logging import get_logger
from carebridge.models.requests import ConversationMessage, PatientInfo
from carebridge.models.responses import (
    NextQuestionResponse,
    PrescriptionResponse,
    ReportResponse,
    SummaryResponse,
    TranscriptAnalysis,
    TranscriptAnalysisResponse,
)
from carebridge.services import prompts

logger = get_logger(__name__)

QUOTA_EXCEEDED_MARKER = "Quota exceeded"


def is_rate_limited(exception: BaseException) -> bool:
    """Return True for a 429 that is worth retrying (not an exhausted quota)"""
    return isinstance(exception, openai.RateLimitError) and QUOTA_EXCEEDED_MARKER not in str(exception)


def wait_retry_after(retry_state) -> float:
    """
    Honour the Retry-After header when Azure sends one, otherwise back off
    exponentially from settings.retry_initial_delay.
    """
    exception = retry_state.outcome.exception()
    response = getattr(exception, "response", None)
    if response is not None:
        retry_after = response.headers.get("retry-after")
        if retry_after is not None:
            try:
                return max(float(retry_after), 0.0)
            except ValueError:
                pass
    return settings.retry_initial_delay * 2 ** (retry_state.attempt_number - 1)


class LLMService:
    """Service for Azure OpenAI chat completions."""

    def __init__(self, client: Optional[Any] = None, structured_client: Optional[Any] = None):
        self._client = client
        self._structured_client = structured_client
        self.deployment = settings.azure_ai_deployment

    @property
    def client(self):
        if self._client is None:
            if not settings.azure_ai_api_key:
                raise ServiceNotConfiguredError("Azure AI API key not configured")
            # SDK retries off; _complete owns the retry policy
            self._client = AsyncAzureOpenAI(
                api_key=settings.azure_ai_api_key,
                azure_endpoint=settings.azure_ai_endpoint,
                api_version=settings.azure_ai_api_version,
                timeout=settings.http_timeout,
                max_retries=0,
            )
        return self._client

    @property
    def structured_client(self):
        """instructor wrapper of the client, enables the response_model keyword"""
        if self._structured_client is None:
            self._structured_client = instructor.from_openai(self.client)
        return self._structured_client

    @retry(
        wait=wait_retry_after,
        stop=stop_after_attempt(settings.max_retries + 1),
        retry=retry_if_exception(is_rate_limited),
        reraise=True,
        before_sleep=lambda retry_state: logger.warning(
            f"Rate limit exceeded. Retrying (attempt {retry_state.attempt_number})"
        ),
    )
    async def _complete(self, **kwargs) -> Any:
        client = self.structured_client if "response_model" in kwargs else self.client
        return await client.chat.completions.create(model=self.deployment, **kwargs)

    async def _chat(
        self,
        messages: List[Dict[str, str]],
        max_tokens: int,
        temperature: float,
        top_p: Optional[float] = None,
        response_model: Optional[Type[BaseModel]] = None,
    ) -> Any:
        """Runs a completion and maps SDK errors onto service errors"""
        params: Dict[str, Any] = {
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if top_p is not None:
            params["top_p"] = top_p
        if response_model is not None:
            params["response_model"] = response_model

        try:
            return await self._complete(**params)
        except openai.RateLimitError as e:
            if QUOTA_EXCEEDED_MARKER in str(e):
                raise QuotaExhaustedError(details=e.body) from e
            raise UpstreamServiceError("Rate limit exceeded", status_code=429, details=e.body) from e
        except openai.APIStatusError as e:
            raise UpstreamServiceError("Azure AI request failed", status_code=e.status_code, details=e.body) from e
        except openai.APIConnectionError as e:
            raise UpstreamUnavailableError("Network error - unable to reach Azure AI service", details=str(e)) from e
        except (ValidationError, InstructorRetryException) as e:
            logger.error(f"Invalid structured response from Azure AI: {e}")
            raise UpstreamResponseError("AI response missing required fields (symptoms, diagnosis, notes)") from e

    async def _text(self, messages: List[Dict[str, str]], **kwargs) -> str:
        completion = await self._chat(messages, **kwargs)
        try:
            content = completion.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise UpstreamResponseError("Invalid response from Azure AI service") from e
        return (content or "").strip()

    async def generate_prescription(
        self,
        symptoms: Optional[str],
        diagnosis: Optional[str],
        notes: Optional[str],
        patient_info: Optional[PatientInfo],
    ) -> PrescriptionResponse:
        logger.info(
            "Generating prescription",
            symptoms=(symptoms or "")[:100],
            diagnosis=(diagnosis or "")[:100],
            patient=patient_info.name if patient_info and patient_info.name else "Unknown",
        )
        medical_data = prompts.build_medical_data(symptoms, diagnosis, notes, patient_info)
        prescription = await self._text(
            [
                {"role": "system", "content": prompts.PRESCRIPTION_SYSTEM_PROMPT},
                {"role": "user", "content": f"Please generate a prescription based on the following medical information:\n\n{medical_data}"},
            ],
            max_tokens=1500,
            temperature=0.3,
            top_p=0.9,
        )
        logger.info("Prescription generated successfully")
        return PrescriptionResponse(
            prescription=prescription,
            generated_at=datetime.utcnow(),
            disclaimer=prompts.PRESCRIPTION_DISCLAIMER,
        )

    async def analyze_transcript(self, transcript: str) -> TranscriptAnalysisResponse:
        """Extracts symptoms, a potential diagnosis and notes as structured output"""
        logger.info(f"Analyzing transcript: {transcript[:100]}...")
        analysis: TranscriptAnalysis = await self._chat(
            [
                {"role": "system", "content": prompts.ANALYSIS_SYSTEM_PROMPT},
                {"role": "user", "content": f"Please analyze the following patient transcript and extract symptoms, diagnosis, and notes:\n\n{transcript}"},
            ],
            max_tokens=1000,
            temperature=0.3,
            top_p=0.9,
            response_model=TranscriptAnalysis,
        )
        logger.info("Transcript analysis completed successfully")
        return TranscriptAnalysisResponse(
            **analysis.model_dump(),
            analyzed_at=datetime.utcnow(),
        )

    async def summarize_transcript(self, transcript: str) -> SummaryResponse:
        logger.info(f"Generating summary for transcript: {transcript[:100]}...")
        summary = await self._text(
            [
                {"role": "system", "content": prompts.SUMMARY_SYSTEM_PROMPT},
                {"role": "user", "content": f"Please create a concise summary of this patient-doctor conversation:\n\n{transcript}"},
            ],
            max_tokens=300,
            temperature=0.3,
            top_p=0.9,
        )
        return SummaryResponse(summary=summary, summarized_at=datetime.utcnow())

    async def next_screening_question(
        self,
        department: Optional[str],
        conversation: List[ConversationMessage],
    ) -> NextQuestionResponse:
        """Asks the next pre-screening question given the dialogue so far"""
        messages = [{"role": "system", "content": prompts.screening_system_prompt(department)}]
        if conversation:
            messages.extend({"role": msg.role, "content": msg.content} for msg in conversation)
        else:
            messages.append({"role": "user", "content": prompts.SCREENING_START_MESSAGE})

        question = await self._text(messages, max_tokens=100, temperature=0.5)
        return NextQuestionResponse(
            question=question,
            is_complete=question.startswith(prompts.SCREENING_COMPLETE_MESSAGE),
        )

    async def generate_screening_report(
        self,
        conversation: List[ConversationMessage],
        date: Optional[str],
        time: Optional[str],
    ) -> ReportResponse:
        user_prompt = prompts.build_report_prompt(prompts.format_conversation(conversation), date, time)
        report = await self._text(
            [
                {"role": "system", "content": prompts.REPORT_SYSTEM_PROMPT},
                {"role": "user", "content": user_prompt},
            ],
            max_tokens=500,
            temperature=0.2,
        )
        return ReportResponse(report=report)
