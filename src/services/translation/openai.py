"""
OpenAI translation provider.

Sends the instruction as the system message and the source text as the
user message to the chat-completions endpoint.
"""

import logging

from src.core.config import get_settings
from src.services.provider import call_provider, get_openai_client
from src.services.translation.base import BaseTranslator

logger = logging.getLogger(__name__)


class OpenAITranslator(BaseTranslator):
    """Chat-completions translator with a low temperature and bounded output."""

    def __init__(
        self,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        client=None,
    ) -> None:
        settings = get_settings()
        super().__init__(
            temperature=(
                temperature if temperature is not None else settings.translation_temperature
            ),
            max_tokens=max_tokens or settings.translation_max_tokens,
        )
        self._model = model or settings.translation_model
        self._client = client or get_openai_client()

    async def _complete(self, system: str, text: str) -> str:
        async def _request():
            return await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": text},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )

        response = await call_provider("translate text", _request)
        content = response.choices[0].message.content
        logger.info("Translation completed with %s (%d chars)", self._model, len(content or ""))
        return content or ""
