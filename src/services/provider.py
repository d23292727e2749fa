"""
Shared access to the hosted AI provider.

Builds one ``AsyncOpenAI`` client per process and runs every provider call
under an explicit timeout / retry policy. SDK exceptions are translated to
standard Python exceptions at the call site and surface to callers as
``ProviderError`` so the API layer can report them uniformly.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from openai import (
    APIConnectionError,
    APITimeoutError,
    AsyncOpenAI,
    RateLimitError,
)
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from src.core.config import get_settings
from src.core.exceptions import ProviderError, VoiceBridgeError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_client: AsyncOpenAI | None = None


def get_openai_client() -> AsyncOpenAI:
    """Return the process-wide OpenAI client, creating it on first use.

    SDK-level retries are disabled; retries are governed solely by
    ``provider_max_attempts`` in ``call_provider``.
    """
    global _client  # noqa: PLW0603
    if _client is None:
        settings = get_settings()
        _client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.provider_timeout,
            max_retries=0,
        )
    return _client


def reset_client() -> None:
    """Drop the cached client (used by tests and after settings changes)."""
    global _client  # noqa: PLW0603
    _client = None


async def _invoke(operation: str, call: Callable[[], Awaitable[T]]) -> T:
    """Run one attempt, translating SDK errors into standard exceptions."""
    try:
        return await call()
    except (VoiceBridgeError, ConnectionError, TimeoutError):
        raise
    except APITimeoutError as exc:
        logger.warning("Provider timeout during %s: %s", operation, exc)
        raise TimeoutError(f"Provider request timed out: {exc}") from exc
    except APIConnectionError as exc:
        logger.warning("Provider connection error during %s: %s", operation, exc)
        raise ConnectionError(f"Failed to connect to provider: {exc}") from exc
    except RateLimitError as exc:
        logger.warning("Provider rate limit hit during %s: %s", operation, exc)
        raise ConnectionError(f"Provider rate limit exceeded: {exc}") from exc
    except Exception as exc:
        logger.error("Unexpected provider error during %s: %s", operation, exc)
        raise RuntimeError(str(exc)) from exc


async def call_provider(operation: str, call: Callable[[], Awaitable[T]]) -> T:
    """Execute a provider call with the configured retry policy.

    Only transient failures (``ConnectionError`` / ``TimeoutError``) are
    retried, and only when ``provider_max_attempts`` is greater than one.

    Args:
        operation: Short description used in log lines and error messages.
        call: Zero-argument coroutine factory performing the request.

    Returns:
        Whatever ``call`` returns.

    Raises:
        ProviderError: If every attempt failed. ``details`` carries the
            raw error string.
    """
    settings = get_settings()
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(1, settings.provider_max_attempts)),
            wait=wait_exponential(multiplier=1, min=1, max=16),
            retry=retry_if_exception_type((ConnectionError, TimeoutError)),
            reraise=True,
        ):
            with attempt:
                return await _invoke(operation, call)
    except VoiceBridgeError:
        raise
    except Exception as exc:
        raw = exc.__cause__ if exc.__cause__ is not None else exc
        raise ProviderError(detail=f"Failed to {operation}", details=str(raw)) from exc
    raise ProviderError(detail=f"Failed to {operation}")  # pragma: no cover
