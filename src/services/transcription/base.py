"""
Abstract base class for Speech-to-Text providers.

All STT implementations must implement this interface, enabling
provider-agnostic transcription in the API layer.
"""

from abc import ABC, abstractmethod

from src.core.models import Transcript


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(
        self,
        audio: bytes,
        filename: str = "audio.mp3",
        content_type: str | None = None,
    ) -> Transcript:
        """Transcribe a complete audio file to text.

        No language hint is sent; the provider auto-detects the language.

        Args:
            audio: Encoded audio bytes (MP3 preferred).
            filename: Upload filename; providers infer the format from it.
            content_type: Optional MIME type of ``audio``.

        Returns:
            The recognized ``Transcript``.

        Raises:
            EmptyInputError: If ``audio`` is empty.
            ProviderError: If the remote call fails.
        """
