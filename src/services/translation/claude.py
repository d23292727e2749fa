"""
Claude translation provider.

Uses the Anthropic Python SDK (``anthropic.AsyncAnthropic``) to translate
through the Claude messages API. SDK errors are translated to standard
Python exceptions, then surfaced as ``ProviderError`` by ``call_provider``.
"""

import logging

from anthropic import (
    APIConnectionError,
    APITimeoutError,
    AsyncAnthropic,
    RateLimitError,
)

from src.core.config import get_settings
from src.services.provider import call_provider
from src.services.translation.base import BaseTranslator

logger = logging.getLogger(__name__)


class ClaudeTranslator(BaseTranslator):
    """Claude API translator."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        settings = get_settings()
        super().__init__(
            temperature=(
                temperature if temperature is not None else settings.translation_temperature
            ),
            max_tokens=max_tokens or settings.translation_max_tokens,
        )
        self._api_key = api_key or settings.claude_api_key
        self._model = model or settings.claude_model
        self._client = AsyncAnthropic(
            api_key=self._api_key,
            timeout=settings.provider_timeout,
            max_retries=0,
        )

    async def _call_api(self, system: str, text: str) -> str:
        """Send one request to Claude.

        All SDK exceptions are translated to standard Python exceptions so the
        shared retry policy can rely on ``ConnectionError`` / ``TimeoutError``.
        """
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
                system=system,
                messages=[{"role": "user", "content": text}],
            )
            return response.content[0].text

        except APITimeoutError as exc:
            logger.warning("Claude API timeout: %s", exc)
            raise TimeoutError(f"Claude API request timed out: {exc}") from exc
        except APIConnectionError as exc:
            logger.warning("Claude API connection error: %s", exc)
            raise ConnectionError(f"Failed to connect to Claude API: {exc}") from exc
        except RateLimitError as exc:
            logger.warning("Claude API rate limit hit: %s", exc)
            raise ConnectionError(f"Claude API rate limit exceeded: {exc}") from exc
        except Exception as exc:
            logger.error("Unexpected Claude API error: %s", exc)
            raise RuntimeError(f"Claude API error: {exc}") from exc

    async def _complete(self, system: str, text: str) -> str:
        return await call_provider("translate text", lambda: self._call_api(system, text))
