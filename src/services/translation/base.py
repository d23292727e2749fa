"""
Abstract base class for translation providers.

All translator implementations (OpenAI, Claude, Ollama) must implement this
interface, enabling provider-agnostic translation in the API layer.
"""

from abc import ABC, abstractmethod

from src.core.exceptions import EmptyTargetError, EmptyTextError
from src.core.models import Translation
from src.services.translation.prompts import build_system_prompt


class BaseTranslator(ABC):
    """Interface that every translation provider must implement.

    Subclasses only implement ``_complete``; input validation and prompt
    construction are shared so every provider rejects bad input before any
    network traffic.
    """

    def __init__(self, temperature: float, max_tokens: int) -> None:
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def translate(
        self,
        text: str | None,
        target_language: str | None,
        source_language: str | None = None,
    ) -> Translation:
        """Translate ``text`` into ``target_language``.

        Args:
            text: Source text, sent verbatim as the user message.
            target_language: ISO 639-1 target code.
            source_language: Optional source hint; "auto" counts as absent.

        Returns:
            ``Translation`` whose ``translated_text`` is the provider output
            verbatim.

        Raises:
            EmptyTargetError: If ``target_language`` is missing.
            EmptyTextError: If ``text`` is missing.
            ProviderError: If the remote call fails.
        """
        if not target_language:
            raise EmptyTargetError()
        if not text:
            raise EmptyTextError()

        system = build_system_prompt(source_language, target_language)
        translated = await self._complete(system=system, text=text)
        return Translation(
            source_text=text,
            translated_text=translated or "",
            source_language=source_language,
            target_language=target_language,
        )

    @abstractmethod
    async def _complete(self, system: str, text: str) -> str:
        """Send the instruction and text to the model and return its reply."""
