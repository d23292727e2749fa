"""OpenAI text-to-speech provider."""

import logging

from src.core.config import get_settings
from src.core.exceptions import EmptyTextError
from src.core.models import SynthesizedAudio
from src.services.provider import call_provider, get_openai_client
from src.services.speech.base import BaseTTS

logger = logging.getLogger(__name__)


class OpenAITTS(BaseTTS):
    """Speech synthesis via ``audio.speech`` returning MP3 bytes.

    Args:
        model: TTS model name (defaults to settings).
        default_voice: Voice used when the caller passes none.
        client: Optional ``AsyncOpenAI`` instance (defaults to the shared one).
    """

    def __init__(
        self,
        model: str | None = None,
        default_voice: str | None = None,
        client=None,
    ) -> None:
        settings = get_settings()
        self._model = model or settings.speech_model
        self._default_voice = default_voice or settings.default_voice
        self._client = client or get_openai_client()

    async def synthesize(self, text: str | None, voice: str | None = None) -> SynthesizedAudio:
        if not text:
            raise EmptyTextError()

        voice_name = voice or self._default_voice
        logger.info("TTS request: voice=%s text=%r", voice_name, text[:50])

        async def _request():
            return await self._client.audio.speech.create(
                model=self._model,
                voice=voice_name,
                input=text,
                response_format="mp3",
            )

        response = await call_provider("generate speech", _request)
        data = response.content
        logger.info("TTS completed (%d bytes)", len(data))
        return SynthesizedAudio(data=data, mime_type="audio/mpeg", voice=voice_name)
