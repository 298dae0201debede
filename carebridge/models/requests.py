"""
Pydantic Models for API Requests
"""

from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from carebridge.config import UserType


class CamelModel(BaseModel):
    """Accepts both the camelCase wire names and the Python field names"""
    model_config = ConfigDict(populate_by_name=True)


class SignupRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    user_type: Optional[str] = Field(default=None, alias="userType")
    specialization: Optional[str] = None
    hospital: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    user_type: Optional[str] = Field(default=None, alias="userType")


class DoctorCreateRequest(CamelModel):
    id_number: str = Field(alias="idNumber")
    name: str
    email: str
    specialization: str
    location: str
    contact: str
    status: str = Field(default="Active")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")


class TranscriptionRequest(CamelModel):
    """Audio to transcribe, base64 encoded as sent by the browser recorder"""
    audio_content: Optional[str] = Field(default=None, alias="audioContent", description="Base64 encoded audio")
    language_code: str = Field(default="en-US", alias="languageCode")
    diarization: bool = Field(default=True, description="Attribute words to speakers")
    min_speakers: int = Field(default=1, ge=1, alias="minSpeakers")
    max_speakers: int = Field(default=2, ge=1, alias="maxSpeakers")


class TranslationRequest(CamelModel):
    text: Optional[str] = None
    target_language: Optional[str] = Field(default=None, alias="targetLanguage")
    source_language: str = Field(default="auto", alias="sourceLanguage")


class PatientInfo(CamelModel):
    name: Optional[str] = None
    age: Optional[Union[int, str]] = None
    gender: Optional[str] = None
    medical_history: Optional[str] = Field(default=None, alias="medicalHistory")
    allergies: Optional[str] = None


class PrescriptionRequest(CamelModel):
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None
    notes: Optional[str] = None
    patient_info: Optional[PatientInfo] = Field(default=None, alias="patientInfo")


class TranscriptRequest(CamelModel):
    transcript: Optional[str] = None


class ConversationMessage(CamelModel):
    role: str = Field(description="'user' for the patient, 'assistant' for the screening AI")
    content: str


class NextQuestionRequest(CamelModel):
    department: Optional[str] = None
    conversation: List[ConversationMessage] = Field(default=[])


class AppointmentDetails(CamelModel):
    date: Optional[str] = None
    time: Optional[str] = None


class ReportRequest(CamelModel):
    conversation: List[ConversationMessage] = Field(default=[])
    appointment_details: AppointmentDetails = Field(default_factory=AppointmentDetails, alias="appointmentDetails")


VALID_USER_TYPES = {t.value for t in UserType}
