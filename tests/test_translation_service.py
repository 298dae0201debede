import json

import httpx
import pytest

from carebridge.core.exceptions import (
    ServiceNotConfiguredError,
    UpstreamResponseError,
    UpstreamServiceError,
)
from carebridge.services.translation_service import TranslationService, to_translate_code


def make_service(handler, api_key="test-key"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TranslationService(http_client=client, api_key=api_key)


def test_locale_mapping():
    assert to_translate_code("hi-IN") == "hi"
    assert to_translate_code("zh-CN") == "zh"
    assert to_translate_code("pt-BR") == "pt"
    assert to_translate_code("ta") == "ta"


class TestTranslationService:
    @pytest.mark.asyncio
    async def test_translate_auto_detect(self):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"data": {"translations": [
                {"translatedText": "Tengo fiebre", "detectedSourceLanguage": "en"}
            ]}})

        service = make_service(handler)
        result = await service.translate("I have a fever", target_language="es-ES")

        assert seen[0] == {"q": "I have a fever", "target": "es", "format": "text"}
        assert result.translated_text == "Tengo fiebre"
        assert result.detected_source_language == "en"
        assert result.target_language == "es"

    @pytest.mark.asyncio
    async def test_explicit_source_is_sent(self):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"data": {"translations": [{"translatedText": "bonjour"}]}})

        service = make_service(handler)
        result = await service.translate("hello", target_language="fr-FR", source_language="en-US")

        assert seen[0]["source"] == "en"
        assert result.detected_source_language == "en"

    @pytest.mark.asyncio
    async def test_same_language_short_circuits(self):
        def handler(request):
            raise AssertionError("upstream must not be called")

        service = make_service(handler)
        result = await service.translate("hola", target_language="es", source_language="es-ES")
        assert result.translated_text == "hola"
        assert result.target_language == "es"

    @pytest.mark.asyncio
    async def test_upstream_error_keeps_status(self):
        service = make_service(lambda request: httpx.Response(400, json={"error": {"message": "Bad language"}}))
        with pytest.raises(UpstreamServiceError) as exc_info:
            await service.translate("hello", target_language="xx")
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Translation failed"

    @pytest.mark.asyncio
    async def test_response_without_translations(self):
        service = make_service(lambda request: httpx.Response(200, json={"data": {}}))
        with pytest.raises(UpstreamResponseError):
            await service.translate("hello", target_language="de")

    @pytest.mark.asyncio
    async def test_languages(self):
        payload = {"data": {"languages": [{"language": "en", "name": "English"}]}}

        def handler(request):
            assert request.url.path.endswith("/languages")
            assert request.url.params["target"] == "en"
            return httpx.Response(200, json=payload)

        service = make_service(handler)
        assert await service.get_languages() == payload

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        service = make_service(lambda request: httpx.Response(200), api_key="")
        with pytest.raises(ServiceNotConfiguredError):
            await service.translate("hello", target_language="de")
