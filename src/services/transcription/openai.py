"""OpenAI speech-to-text provider.

Uploads the whole recording to the hosted transcription model. The model
auto-detects the spoken language but does not report it back, so
``Transcript.detected_language`` is always the "auto" placeholder.
"""

import io
import logging

from src.core.config import get_settings
from src.core.exceptions import EmptyInputError
from src.core.models import Transcript
from src.services.provider import call_provider, get_openai_client
from src.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

DETECTED_LANGUAGE_PLACEHOLDER = "auto"


class OpenAISTT(BaseSTT):
    """Speech-to-text provider backed by ``audio.transcriptions``.

    Args:
        model: Transcription model name (defaults to settings).
        client: Optional ``AsyncOpenAI`` instance (defaults to the shared one).
    """

    def __init__(self, model: str | None = None, client=None) -> None:
        settings = get_settings()
        self._model = model or settings.transcription_model
        self._client = client or get_openai_client()

    async def transcribe(
        self,
        audio: bytes,
        filename: str = "audio.mp3",
        content_type: str | None = None,
    ) -> Transcript:
        if not audio:
            raise EmptyInputError()

        logger.info(
            "Transcribing %s (%s, %d bytes) with %s",
            filename,
            content_type or "unknown type",
            len(audio),
            self._model,
        )

        async def _request():
            buf = io.BytesIO(audio)
            buf.name = filename  # the SDK infers the format from the name
            return await self._client.audio.transcriptions.create(
                model=self._model,
                file=buf,
            )

        result = await call_provider("transcribe audio", _request)
        text = (getattr(result, "text", None) or "").strip()
        logger.info("Transcription completed (%d chars)", len(text))
        return Transcript(text=text, detected_language=DETECTED_LANGUAGE_PLACEHOLDER)
