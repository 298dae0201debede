"""HTTP-level tests for the routers, error bodies and middleware."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import pytest

from carebridge.config import settings
from carebridge.dependencies import get_llm_service, get_stt_service, get_translation_service, limiter
from carebridge.main import app
from carebridge.services import prompts
from carebridge.services.llm_service import LLMService
from carebridge.services.stt_service import STTService
from carebridge.services.translation_service import TranslationService

from tests.test_stt_service import DIARIZED_RESPONSE

PATIENT = {"name": "Asha", "email": "asha@example.com", "password": "s3cret", "userType": "patient"}


def use_llm(text):
    create = AsyncMock(return_value=SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))]
    ))
    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    app.dependency_overrides[get_llm_service] = lambda: LLMService(client=client)
    return create


def use_stt(handler, api_key="test-key"):
    service = STTService(http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)), api_key=api_key)
    app.dependency_overrides[get_stt_service] = lambda: service


class TestUsers:
    def test_signup_and_login(self, client):
        response = client.post("/api/signup", json=PATIENT)
        assert response.status_code == 201
        assert response.json()["message"] == "User created successfully"
        user_id = response.json()["id"]

        response = client.post("/api/login", json={
            "email": "asha@example.com", "password": "s3cret", "userType": "patient",
        })
        assert response.status_code == 200
        assert response.json() == {
            "message": "Login successful",
            "user": {"id": user_id, "name": "Asha", "email": "asha@example.com", "userType": "patient"},
        }

    @pytest.mark.parametrize(
        "payload, error",
        [
            ({"email": "a@example.com", "password": "x", "userType": "patient"}, "Missing required fields"),
            ({**PATIENT, "userType": "doctor"}, "Specialization and hospital required for doctors"),
            ({**PATIENT, "userType": "nurse"}, "Invalid user type"),
        ],
    )
    def test_signup_validation(self, client, payload, error):
        response = client.post("/api/signup", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == error

    def test_duplicate_signup(self, client):
        client.post("/api/signup", json=PATIENT)
        response = client.post("/api/signup", json=PATIENT)
        assert response.status_code == 400
        assert response.json()["error"] == "Email already exists"

    def test_wrong_password(self, client):
        client.post("/api/signup", json=PATIENT)
        response = client.post("/api/login", json={
            "email": "asha@example.com", "password": "wrong", "userType": "patient",
        })
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid credentials"

    def test_login_checks_user_type(self, client):
        client.post("/api/signup", json=PATIENT)
        response = client.post("/api/login", json={
            "email": "asha@example.com", "password": "s3cret", "userType": "admin",
        })
        assert response.status_code == 401

    def test_doctor_directory(self, client):
        response = client.post("/api/doctors", json={
            "idNumber": "MED-001",
            "name": "Dr. Rao",
            "email": "rao@example.com",
            "specialization": "Cardiology",
            "location": "Pune",
            "contact": "555-0100",
        })
        assert response.status_code == 201
        assert response.json()["idNumber"] == "MED-001"
        assert response.json()["status"] == "Active"

        doctors = client.get("/api/doctors").json()
        assert [d["name"] for d in doctors] == ["Dr. Rao"]

    def test_invalid_body_is_a_400(self, client):
        response = client.post("/api/doctors", json={"name": "Dr. Nobody"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"


class TestSpeech:
    def test_transcribe(self, client):
        use_stt(lambda request: httpx.Response(200, json=DIARIZED_RESPONSE))
        response = client.post("/api/speech/transcribe", json={"audioContent": "UklGRg=="})

        assert response.status_code == 200
        assert response.json()["transcript"] == [
            {"speaker": "Speaker 1", "transcript": "hello doctor"},
            {"speaker": "Speaker 2", "transcript": "I have a headache"},
        ]
        assert "X-Request-ID" in response.headers

    def test_audio_is_required(self, client):
        use_stt(lambda request: httpx.Response(200, json={}))
        response = client.post("/api/speech/transcribe", json={"languageCode": "en-US"})
        assert response.status_code == 400
        assert response.json()["error"] == "Audio content is required"

    def test_upstream_error_is_passed_through(self, client):
        use_stt(lambda request: httpx.Response(403, json={"error": {"message": "API key invalid"}}))
        response = client.post("/api/speech/transcribe", json={"audioContent": "UklGRg=="})

        assert response.status_code == 403
        body = response.json()
        assert body["error"] == "Speech recognition failed"
        assert body["status"] == 403
        assert body["details"] == {"message": "API key invalid"}
        assert body["request_id"] == response.headers["X-Request-ID"]

    def test_missing_key(self, client):
        use_stt(lambda request: httpx.Response(200, json={}), api_key="")
        response = client.post("/api/speech/transcribe", json={"audioContent": "UklGRg=="})
        assert response.status_code == 500
        assert response.json()["error"] == "Google API key not configured"


class TestTranslation:
    def test_text_is_required(self, client):
        response = client.post("/api/translate/translate", json={"targetLanguage": "es"})
        assert response.status_code == 400
        assert response.json()["error"] == "Text is required for translation"

    def test_target_is_required(self, client):
        response = client.post("/api/translate/translate", json={"text": "hello"})
        assert response.status_code == 400
        assert response.json()["error"] == "Target language is required"

    def test_translate(self, client):
        def handler(request):
            return httpx.Response(200, json={"data": {"translations": [
                {"translatedText": "hola", "detectedSourceLanguage": "en"}
            ]}})

        service = TranslationService(http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)), api_key="k")
        app.dependency_overrides[get_translation_service] = lambda: service

        response = client.post("/api/translate/translate", json={"text": "hello", "targetLanguage": "es-ES"})
        assert response.status_code == 200
        assert response.json() == {
            "translatedText": "hola",
            "detectedSourceLanguage": "en",
            "targetLanguage": "es",
        }


class TestClinicalAssistant:
    def test_prescription_requires_clinical_input(self, client):
        use_llm("unused")
        response = client.post("/api/prescription/generate", json={"patientInfo": {"name": "Asha"}})
        assert response.status_code == 400

    def test_prescription(self, client):
        use_llm("**PRESCRIPTION**")
        response = client.post("/api/prescription/generate", json={"symptoms": "fever", "patientInfo": {"age": 34}})
        assert response.status_code == 200
        body = response.json()
        assert body["prescription"] == "**PRESCRIPTION**"
        assert body["disclaimer"] == prompts.PRESCRIPTION_DISCLAIMER
        assert "generatedAt" in body

    def test_summary(self, client):
        use_llm("Patient reports a dry cough.")
        response = client.post("/api/transcript/summarize", json={"transcript": "I have a dry cough"})
        assert response.status_code == 200
        assert response.json()["summary"] == "Patient reports a dry cough."

    def test_transcript_is_required(self, client):
        use_llm("unused")
        response = client.post("/api/transcript/analyze", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "Transcript is required"

    def test_next_question(self, client):
        use_llm(prompts.SCREENING_COMPLETE_MESSAGE)
        response = client.post("/api/prescreening/next-question", json={
            "department": "Cardiology",
            "conversation": [{"role": "assistant", "content": "Why are you here?"}, {"role": "user", "content": "Chest pain"}],
        })
        assert response.status_code == 200
        assert response.json() == {"question": prompts.SCREENING_COMPLETE_MESSAGE, "isComplete": True}

    def test_report_requires_conversation(self, client):
        use_llm("unused")
        response = client.post("/api/prescreening/generate-report", json={"conversation": []})
        assert response.status_code == 400
        assert response.json()["error"] == "Conversation log is required"

    def test_report(self, client):
        create = use_llm("**Patient Description**: chest pain")
        response = client.post("/api/prescreening/generate-report", json={
            "conversation": [{"role": "user", "content": "Chest pain"}],
            "appointmentDetails": {"date": "2026-11-02", "time": "10:30"},
        })
        assert response.status_code == 200
        assert response.json()["report"].startswith("**Patient Description**")
        assert "Date: 2026-11-02" in create.await_args.kwargs["messages"][1]["content"]


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "connected"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_test_endpoint(self, client):
        body = client.get("/api/test").json()
        assert body["message"] == "Backend is working!"
        assert body["database"] == "connected"


class TestRateLimit:
    def test_languages_endpoint_is_rate_limited(self, client):
        payload = {"data": {"languages": [{"language": "en", "name": "English"}]}}
        service = TranslationService(
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=payload))),
            api_key="k",
        )
        app.dependency_overrides[get_translation_service] = lambda: service
        limiter.reset()
        limiter.enabled = True
        try:
            for _ in range(settings.rate_limit_requests):
                assert client.get("/api/translate/languages").status_code == 200
            response = client.get("/api/translate/languages")
        finally:
            limiter.enabled = False
            limiter.reset()

        assert response.status_code == 429
        assert response.json()["error"] == "rate_limit_exceeded"
        assert response.headers["Retry-After"] == str(settings.rate_limit_window)
