"""
Abstract base class for Text-to-Speech providers.
"""

from abc import ABC, abstractmethod

from src.core.models import SynthesizedAudio


class BaseTTS(ABC):
    """Interface that every TTS provider must implement."""

    @abstractmethod
    async def synthesize(self, text: str | None, voice: str | None = None) -> SynthesizedAudio:
        """Read ``text`` aloud with the given voice.

        Args:
            text: Text to synthesize; must be non-empty.
            voice: Voice identifier; the generic default voice when omitted.

        Returns:
            ``SynthesizedAudio`` holding MP3 bytes.

        Raises:
            EmptyTextError: If ``text`` is missing.
            ProviderError: If the remote call fails.
        """
