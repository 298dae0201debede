"""
Central configuration for the CareBridge backend
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field
from enum import Enum


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class UserType(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    PATIENT = "patient"


class Settings(BaseSettings):
    # Environment
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # API Configuration
    api_title: str = Field(default="CareBridge API")
    api_description: str = Field(default="Healthcare appointment backend")
    api_version: str = Field(default="1.0.0")
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    # Database
    database_url: str = Field(default="sqlite:///./carebridge.db")
    sql_echo: bool = Field(default=False)
    db_keepalive_interval: int = Field(default=240)  # seconds

    # Google Cloud Speech / Translation
    google_speech_api_key: Optional[str] = Field(default=None)
    google_speech_url: str = Field(default="https://speech.googleapis.com/v1/speech:recognize")
    google_speech_model: str = Field(default="latest_long")
    google_translation_api_key: Optional[str] = Field(default=None)
    google_translation_url: str = Field(default="https://translation.googleapis.com/language/translate/v2")

    # Azure OpenAI
    azure_ai_api_key: Optional[str] = Field(default=None)
    azure_ai_endpoint: str = Field(default="https://gendem.cognitiveservices.azure.com/")
    azure_ai_deployment: str = Field(default="gpt-4o-mini")
    azure_ai_api_version: str = Field(default="2024-12-01-preview")

    # Rate Limiting
    rate_limit_requests: int = Field(default=30)
    rate_limit_window: int = Field(default=60)  # seconds

    # Timeouts and Retries
    http_timeout: int = Field(default=30)
    max_retries: int = Field(default=3)
    retry_initial_delay: float = Field(default=2.0)  # seconds

    # CORS Configuration
    cors_origins: List[str] = Field(default=["*"])
    cors_allow_credentials: bool = Field(default=False)
    cors_allow_methods: List[str] = Field(default=["GET", "POST"])
    cors_allow_headers: List[str] = Field(default=["*"])

    # Security
    bcrypt_rounds: int = Field(default=10)

    # Monitoring
    enable_metrics: bool = Field(default=True)

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
