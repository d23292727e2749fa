"""Unit tests for the OpenAI-backed STT, translator and TTS providers.

The SDK client is replaced by an ``AsyncMock`` whose return values mimic
the SDK response objects with ``SimpleNamespace``.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from src.core.exceptions import EmptyInputError, EmptyTargetError, EmptyTextError, ProviderError
from src.services.speech.openai import OpenAITTS
from src.services.transcription.openai import OpenAISTT
from src.services.translation.openai import OpenAITranslator
from src.services.translation.prompts import SYSTEM_TEMPLATE

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _chat_response(text: str | None):
    """Build a minimal object that looks like a chat completion."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture
def sdk():
    """Return an ``AsyncMock`` mimicking ``AsyncOpenAI``."""
    client = AsyncMock()
    client.audio.transcriptions.create = AsyncMock(
        return_value=SimpleNamespace(text="  Hello world \n")
    )
    client.chat.completions.create = AsyncMock(return_value=_chat_response("こんにちは世界"))
    client.audio.speech.create = AsyncMock(return_value=SimpleNamespace(content=b"ID3mp3"))
    return client


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TestOpenAISTT:
    async def test_returns_trimmed_text_with_auto_language(self, sdk):
        stt = OpenAISTT(model="gpt-4o-transcribe", client=sdk)

        transcript = await stt.transcribe(b"mp3-bytes", filename="audio.mp3")

        assert transcript.text == "Hello world"
        assert transcript.detected_language == "auto"

    async def test_uploads_named_file(self, sdk):
        stt = OpenAISTT(model="gpt-4o-transcribe", client=sdk)

        await stt.transcribe(b"mp3-bytes", filename="clip.mp3")

        kwargs = sdk.audio.transcriptions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-transcribe"
        assert kwargs["file"].name == "clip.mp3"
        assert kwargs["file"].read() == b"mp3-bytes"

    async def test_empty_audio_rejected_before_request(self, sdk):
        stt = OpenAISTT(client=sdk)

        with pytest.raises(EmptyInputError):
            await stt.transcribe(b"")
        sdk.audio.transcriptions.create.assert_not_awaited()

    async def test_silence_gives_empty_text(self, sdk):
        sdk.audio.transcriptions.create.return_value = SimpleNamespace(text="")
        stt = OpenAISTT(client=sdk)

        transcript = await stt.transcribe(b"silence")

        assert transcript.text == ""

    async def test_sdk_error_becomes_provider_error(self, sdk):
        sdk.audio.transcriptions.create.side_effect = Exception("Invalid file format")
        stt = OpenAISTT(client=sdk)

        with pytest.raises(ProviderError) as exc_info:
            await stt.transcribe(b"garbage")
        assert exc_info.value.detail == "Failed to transcribe audio"
        assert exc_info.value.details == "Invalid file format"


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------


class TestOpenAITranslator:
    async def test_returns_provider_text_verbatim(self, sdk):
        translator = OpenAITranslator(model="gpt-4o", temperature=0.3, max_tokens=2000, client=sdk)

        result = await translator.translate("Hello world", target_language="ja")

        assert result.translated_text == "こんにちは世界"
        assert result.target_language == "ja"
        assert result.source_text == "Hello world"

    async def test_request_shape(self, sdk):
        translator = OpenAITranslator(model="gpt-4o", temperature=0.3, max_tokens=2000, client=sdk)

        await translator.translate("Hello world", target_language="ja", source_language="en")

        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_tokens"] == 2000
        system, user = kwargs["messages"]
        assert system["role"] == "system"
        assert "English" in system["content"]
        assert "Japanese" in system["content"]
        assert user == {"role": "user", "content": "Hello world"}

    async def test_system_prompt_matches_template(self, sdk):
        translator = OpenAITranslator(client=sdk)

        await translator.translate("Bonjour", target_language="en", source_language="fr")

        system = sdk.chat.completions.create.call_args.kwargs["messages"][0]["content"]
        assert system == SYSTEM_TEMPLATE.format(source="French", target="English")

    async def test_missing_source_uses_detected_language(self, sdk):
        translator = OpenAITranslator(client=sdk)

        await translator.translate("Hello", target_language="ja", source_language="auto")

        system = sdk.chat.completions.create.call_args.kwargs["messages"][0]["content"]
        assert "from the detected language to Japanese" in system

    async def test_unknown_code_passed_through(self, sdk):
        translator = OpenAITranslator(client=sdk)

        await translator.translate("Hello", target_language="xx")

        system = sdk.chat.completions.create.call_args.kwargs["messages"][0]["content"]
        assert "to xx." in system

    async def test_validation_before_request(self, sdk):
        translator = OpenAITranslator(client=sdk)

        with pytest.raises(EmptyTargetError):
            await translator.translate("Hello", target_language="")
        with pytest.raises(EmptyTextError):
            await translator.translate("", target_language="ja")
        sdk.chat.completions.create.assert_not_awaited()

    async def test_null_content_becomes_empty_string(self, sdk):
        sdk.chat.completions.create.return_value = _chat_response(None)
        translator = OpenAITranslator(client=sdk)

        result = await translator.translate("Hello", target_language="ja")

        assert result.translated_text == ""


# ---------------------------------------------------------------------------
# Speech
# ---------------------------------------------------------------------------


class TestOpenAITTS:
    async def test_returns_mp3_bytes(self, sdk):
        tts = OpenAITTS(model="gpt-4o-mini-tts", default_voice="alloy", client=sdk)

        audio = await tts.synthesize("こんにちは", voice="shimmer")

        assert audio.data == b"ID3mp3"
        assert audio.mime_type == "audio/mpeg"
        assert audio.voice == "shimmer"
        sdk.audio.speech.create.assert_awaited_once_with(
            model="gpt-4o-mini-tts",
            voice="shimmer",
            input="こんにちは",
            response_format="mp3",
        )

    async def test_default_voice(self, sdk):
        tts = OpenAITTS(default_voice="alloy", client=sdk)

        audio = await tts.synthesize("hello")

        assert audio.voice == "alloy"
        assert sdk.audio.speech.create.call_args.kwargs["voice"] == "alloy"

    async def test_empty_text_rejected(self, sdk):
        tts = OpenAITTS(client=sdk)

        with pytest.raises(EmptyTextError):
            await tts.synthesize("")
        sdk.audio.speech.create.assert_not_awaited()

    async def test_sdk_error_becomes_provider_error(self, sdk):
        sdk.audio.speech.create.side_effect = Exception("voice not found")
        tts = OpenAITTS(client=sdk)

        with pytest.raises(ProviderError) as exc_info:
            await tts.synthesize("hello", voice="nope")
        assert exc_info.value.detail == "Failed to generate speech"
