"""Tests for the /api/transcribe, /api/translate and /api/speech endpoints.

Providers are replaced with AsyncMocks through ``dependency_overrides``, so
these tests verify request validation (400 before any provider call), the
camelCase wire contract, and the ``{"error", "details"}`` envelope on
provider failures.
"""

from src.core.exceptions import ProviderError
from src.core.models import Transcript, Translation

# ---------------------------------------------------------------------------
# POST /api/transcribe
# ---------------------------------------------------------------------------


class TestTranscribeEndpoint:
    """Multipart upload -> recognized text."""

    async def test_returns_text_and_placeholder_language(self, client, mock_stt):
        resp = await client.post(
            "/api/transcribe",
            files={"file": ("audio.mp3", b"ID3-mp3-bytes", "audio/mpeg")},
        )

        assert resp.status_code == 200
        assert resp.json() == {"text": "Hello world", "detectedLanguage": "auto"}
        mock_stt.transcribe.assert_awaited_once_with(
            b"ID3-mp3-bytes", filename="audio.mp3", content_type="audio/mpeg"
        )

    async def test_missing_file_is_400(self, client, mock_stt):
        resp = await client.post("/api/transcribe")

        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "No audio file provided"
        assert body["code"] == "EMPTY_INPUT"
        mock_stt.transcribe.assert_not_awaited()

    async def test_wrong_field_name_is_400(self, client, mock_stt):
        resp = await client.post(
            "/api/transcribe",
            files={"audio": ("audio.mp3", b"bytes", "audio/mpeg")},
        )

        assert resp.status_code == 400
        mock_stt.transcribe.assert_not_awaited()

    async def test_empty_file_is_400(self, client, mock_stt):
        resp = await client.post(
            "/api/transcribe",
            files={"file": ("audio.mp3", b"", "audio/mpeg")},
        )

        assert resp.status_code == 400
        assert resp.json()["code"] == "EMPTY_INPUT"
        mock_stt.transcribe.assert_not_awaited()

    async def test_empty_transcript_is_not_an_error(self, client, mock_stt):
        """Silence transcribes to empty text with 200."""
        mock_stt.transcribe.return_value = Transcript(text="")

        resp = await client.post(
            "/api/transcribe",
            files={"file": ("audio.mp3", b"silence", "audio/mpeg")},
        )

        assert resp.status_code == 200
        assert resp.json()["text"] == ""

    async def test_provider_failure_is_500_with_details(self, client, mock_stt):
        mock_stt.transcribe.side_effect = ProviderError(
            detail="Failed to transcribe audio", details="Invalid API key"
        )

        resp = await client.post(
            "/api/transcribe",
            files={"file": ("audio.mp3", b"bytes", "audio/mpeg")},
        )

        assert resp.status_code == 500
        body = resp.json()
        assert body["error"] == "Failed to transcribe audio"
        assert body["details"] == "Invalid API key"
        assert body["code"] == "PROVIDER_ERROR"
        assert "timestamp" in body


# ---------------------------------------------------------------------------
# POST /api/translate
# ---------------------------------------------------------------------------


class TestTranslateEndpoint:
    """Text + target language -> translation."""

    async def test_returns_translation_with_echoed_languages(self, client, mock_translator):
        resp = await client.post(
            "/api/translate",
            json={"text": "Hello world", "targetLanguage": "ja"},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["translation"] == "こんにちは世界"
        assert body["targetLanguage"] == "ja"
        assert body["sourceLanguage"] is None
        mock_translator.translate.assert_awaited_once_with(
            "Hello world", target_language="ja", source_language=None
        )

    async def test_source_language_is_forwarded_and_echoed(self, client, mock_translator):
        mock_translator.translate.return_value = Translation(
            source_text="Bonjour",
            translated_text="Hello",
            source_language="fr",
            target_language="en",
        )

        resp = await client.post(
            "/api/translate",
            json={"text": "Bonjour", "sourceLanguage": "fr", "targetLanguage": "en"},
        )

        assert resp.status_code == 200
        assert resp.json()["sourceLanguage"] == "fr"
        assert mock_translator.translate.call_args.kwargs["source_language"] == "fr"

    async def test_missing_target_is_400(self, client, mock_translator):
        resp = await client.post("/api/translate", json={"text": "Hello"})

        assert resp.status_code == 400
        assert resp.json()["error"] == "Text and target language are required"
        mock_translator.translate.assert_not_awaited()

    async def test_missing_text_is_400(self, client, mock_translator):
        resp = await client.post("/api/translate", json={"targetLanguage": "ja"})

        assert resp.status_code == 400
        assert resp.json()["error"] == "Text and target language are required"
        mock_translator.translate.assert_not_awaited()

    async def test_empty_text_is_400(self, client, mock_translator):
        resp = await client.post("/api/translate", json={"text": "", "targetLanguage": "ja"})

        assert resp.status_code == 400
        mock_translator.translate.assert_not_awaited()

    async def test_missing_body_is_400(self, client, mock_translator):
        resp = await client.post("/api/translate")

        assert resp.status_code == 400
        mock_translator.translate.assert_not_awaited()

    async def test_malformed_json_is_400(self, client, mock_translator):
        resp = await client.post(
            "/api/translate",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 400
        assert resp.json()["code"] == "VALIDATION_ERROR"
        mock_translator.translate.assert_not_awaited()

    async def test_provider_failure_is_500(self, client, mock_translator):
        mock_translator.translate.side_effect = ProviderError(
            detail="Failed to translate text", details="rate limited"
        )

        resp = await client.post(
            "/api/translate", json={"text": "Hello", "targetLanguage": "ja"}
        )

        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to translate text"
        assert resp.json()["details"] == "rate limited"


# ---------------------------------------------------------------------------
# POST /api/speech
# ---------------------------------------------------------------------------


class TestSpeechEndpoint:
    """Text + voice -> raw MP3 bytes."""

    async def test_returns_audio_bytes(self, client, mock_tts):
        resp = await client.post("/api/speech", json={"text": "こんにちは", "voice": "shimmer"})

        assert resp.status_code == 200
        assert resp.headers["content-type"] == "audio/mpeg"
        assert resp.content == b"ID3\x04fake-mp3"
        mock_tts.synthesize.assert_awaited_once_with("こんにちは", voice="shimmer")

    async def test_voice_defaults_to_alloy(self, client, mock_tts):
        resp = await client.post("/api/speech", json={"text": "hello"})

        assert resp.status_code == 200
        assert mock_tts.synthesize.call_args.kwargs["voice"] == "alloy"

    async def test_missing_text_is_400(self, client, mock_tts):
        resp = await client.post("/api/speech", json={"voice": "alloy"})

        assert resp.status_code == 400
        assert resp.json()["code"] == "EMPTY_TEXT"
        mock_tts.synthesize.assert_not_awaited()

    async def test_provider_failure_is_500_json(self, client, mock_tts):
        mock_tts.synthesize.side_effect = ProviderError(
            detail="Failed to generate speech", details="boom"
        )

        resp = await client.post("/api/speech", json={"text": "hello"})

        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("application/json")
        assert resp.json()["error"] == "Failed to generate speech"


# ---------------------------------------------------------------------------
# Error envelope schema
# ---------------------------------------------------------------------------


class TestErrorSchema:
    """Every pipeline route documents the error envelope in OpenAPI."""

    async def test_routes_reference_error_response(self, client):
        resp = await client.get("/openapi.json")

        schema = resp.json()
        assert set(schema["components"]["schemas"]["ErrorResponse"]["required"]) == {
            "error",
            "code",
            "timestamp",
        }
        for path in ("/api/transcribe", "/api/translate", "/api/speech"):
            responses = schema["paths"][path]["post"]["responses"]
            for status in ("400", "500"):
                ref = responses[status]["content"]["application/json"]["schema"]["$ref"]
                assert ref == "#/components/schemas/ErrorResponse"

    async def test_envelope_omits_empty_details(self, client, mock_translator):
        resp = await client.post("/api/translate", json={"text": "Hello"})

        body = resp.json()
        assert resp.status_code == 400
        assert set(body) == {"error", "code", "timestamp"}
