"""
Ollama translation provider.

Uses the Ollama Python SDK (``ollama.AsyncClient``) to translate with a
locally running model. Useful for development without a hosted credential.
"""

import logging

from ollama import AsyncClient, ResponseError

from src.core.config import get_settings
from src.services.provider import call_provider
from src.services.translation.base import BaseTranslator

logger = logging.getLogger(__name__)


class OllamaTranslator(BaseTranslator):
    """Ollama local LLM translator.

    Connects to a locally running Ollama server via its REST API.
    """

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        """Initialize the Ollama translator.

        Args:
            base_url: Ollama server URL (falls back to settings if not provided).
            model: Model name to use (e.g. "llama3.2").
            temperature: Sampling temperature (defaults to the translation setting).
            max_tokens: Output cap, sent as ``num_predict``.
        """
        settings = get_settings()
        super().__init__(
            temperature=(
                temperature if temperature is not None else settings.translation_temperature
            ),
            max_tokens=max_tokens or settings.translation_max_tokens,
        )
        self._base_url = base_url or settings.ollama_base_url
        self._model = model or settings.ollama_model
        self._client = AsyncClient(host=self._base_url, timeout=settings.provider_timeout)

    async def _call_api(self, messages: list[dict[str, str]]) -> str:
        """Send a chat request to the Ollama server.

        Translates SDK-specific exceptions to standard Python exceptions so
        that the shared retry policy can act on ``ConnectionError`` /
        ``TimeoutError``.
        """
        try:
            response = await self._client.chat(
                model=self._model,
                messages=messages,
                options={
                    "temperature": self._temperature,
                    "num_predict": self._max_tokens,
                },
            )
            return response.message.content

        except ConnectionError as exc:
            logger.warning("Ollama connection error (%s): %s", self._base_url, exc)
            raise ConnectionError(
                f"Failed to connect to Ollama at {self._base_url}: {exc}"
            ) from exc
        except TimeoutError as exc:
            logger.warning("Ollama timeout (%s): %s", self._base_url, exc)
            raise TimeoutError(f"Ollama request timed out ({self._base_url}): {exc}") from exc
        except ResponseError as exc:
            logger.error("Ollama response error: %s", exc)
            raise RuntimeError(f"Ollama error: {exc}") from exc
        except Exception as exc:
            logger.error("Unexpected Ollama error: %s", exc)
            raise RuntimeError(f"Ollama error: {exc}") from exc

    async def _complete(self, system: str, text: str) -> str:
        messages = [
            {"role": "system", "content": system},
            {"role": "user", "content": text},
        ]
        return await call_provider("translate text", lambda: self._call_api(messages))
