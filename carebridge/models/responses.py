"""
Pydantic Models für API Responses
"""

from typing import Optional, Any, List
from datetime import datetime, date
from pydantic import BaseModel, ConfigDict, Field

from carebridge.models.speech import Utterance


class CamelResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class SignupResponse(CamelResponse):
    message: str = Field(default="User created successfully")
    id: int


class UserInfo(CamelResponse):
    id: int
    name: str
    email: str
    user_type: str = Field(alias="userType")


class LoginResponse(CamelResponse):
    message: str = Field(default="Login successful")
    user: UserInfo


class DoctorResponse(CamelResponse):
    id: int
    id_number: str = Field(alias="idNumber")
    name: str
    email: str
    specialization: str
    location: str
    contact: str
    status: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    join_date: Optional[date] = Field(default=None, alias="joinDate")


class TranscriptionResponse(CamelResponse):
    """Speaker-attributed transcript"""
    transcript: List[Utterance] = Field(default=[], description="Utterances in spoken order")
    text: str = Field(default="", description="Plain transcript without speaker attribution")


class TranslationResponse(CamelResponse):
    translated_text: str = Field(alias="translatedText")
    detected_source_language: Optional[str] = Field(default=None, alias="detectedSourceLanguage")
    target_language: str = Field(alias="targetLanguage")


class PrescriptionResponse(CamelResponse):
    prescription: str
    generated_at: datetime = Field(alias="generatedAt")
    disclaimer: str


class TranscriptAnalysis(BaseModel):
    """Strukturierte Analyse eines Patiententranskripts"""
    symptoms: List[str] = Field(description="All symptoms mentioned by the patient")
    diagnosis: str = Field(description="Potential diagnosis based on the symptoms described")
    notes: str = Field(description="Important observations, medical history, and other relevant information")


class TranscriptAnalysisResponse(TranscriptAnalysis, CamelResponse):
    analyzed_at: datetime = Field(alias="analyzedAt")


class SummaryResponse(CamelResponse):
    summary: str
    summarized_at: datetime = Field(alias="summarizedAt")


class NextQuestionResponse(CamelResponse):
    question: str
    is_complete: bool = Field(alias="isComplete")


class ReportResponse(CamelResponse):
    report: str


class HealthCheckResponse(BaseModel):
    """Health Check Response"""
    status: str = Field(description="Service Status (healthy/unhealthy)")
    database: str = Field(description="connected/disconnected/error")
    timestamp: datetime = Field(description="Check-Zeitpunkt")
    error: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standardisierte Fehlerantwort"""
    error: str = Field(description="Fehlerbeschreibung")
    details: Optional[Any] = Field(default=None, description="Zusätzliche Fehlerdetails")
    status: Optional[int] = Field(default=None, description="Upstream HTTP status")
    request_id: Optional[str] = Field(default=None, description="Request-ID für Debugging")
    timestamp: datetime = Field(description="Fehlerzeitpunkt")


class RateLimitResponse(BaseModel):
    """Rate Limit Exceeded Response"""
    error: str = Field(default="rate_limit_exceeded")
    message: str = Field(description="Rate Limit Fehlermeldung")
    limit: int = Field(description="Request-Limit")
    window: int = Field(description="Zeitfenster in Sekunden")
    timestamp: datetime = Field(description="Fehlerzeitpunkt")
