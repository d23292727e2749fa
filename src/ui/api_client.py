"""
Synchronous HTTP client for the VoiceBridge backend API.

Uses ``httpx.Client`` (sync) because Streamlit scripts run synchronously.
The orchestrator calls it from a worker thread.
"""

import logging

import httpx

from src.core.config import get_settings
from src.core.exceptions import (
    EmptyInputError,
    EmptyTargetError,
    EmptyTextError,
    ProviderError,
    UploadError,
    UserInputError,
)
from src.core.models import SynthesizedAudio, Transcript, Translation

logger = logging.getLogger(__name__)


class APIClient:
    """Thin synchronous wrapper around httpx for calling the FastAPI backend.

    All methods return domain models or raise ``VoiceBridgeError``
    subclasses with user-friendly messages for display in the UI:

    * 4xx responses -> ``UserInputError`` with the server message.
    * 5xx responses -> ``ProviderError`` carrying the server ``details``.
    * connection / timeout / network failures -> ``UploadError``.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: Base URL of the VoiceBridge FastAPI backend.
            timeout: Request timeout in seconds.
        """
        settings = get_settings()
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=timeout if timeout is not None else settings.client_timeout,
        )

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Args:
            method: HTTP method name ("get", "post").
            path: API endpoint path (e.g. "/api/translate").
            **kwargs: Passed through to httpx (json, files, timeout, etc.).

        Returns:
            The httpx Response object with a successful status code.

        Raises:
            UserInputError: On 4xx responses.
            ProviderError: On 5xx responses.
            UploadError: On connection, timeout, or network errors.
        """
        try:
            resp = getattr(self._client, method)(path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise UploadError(
                "Backend server is not running. "
                "Start it with: `uvicorn src.api.app:app --reload --port 8000`",
            ) from None
        except httpx.TimeoutException:
            raise UploadError("Request timed out. The server may be overloaded.") from None
        except httpx.HTTPStatusError as exc:
            message, details = self._error_message(exc.response)
            logger.warning(
                "%s %s -> %s: %s", method.upper(), path, exc.response.status_code, message
            )
            if exc.response.status_code < 500:
                raise UserInputError(message) from None
            raise ProviderError(message, details=details) from None
        except httpx.HTTPError as exc:
            raise UploadError(f"Network error: {exc}", details=str(exc)) from None

    @staticmethod
    def _error_message(response: httpx.Response) -> tuple[str, str | None]:
        """Extract ``(error, details)`` from an error envelope."""
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}", None
        if not isinstance(body, dict):
            return str(body), None
        return str(body.get("error", response.text)), body.get("details")

    # -- health --

    def health_check(self) -> dict:
        return self._request("get", "/health").json()

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend is reachable. Returns (ok, message)."""
        try:
            self.health_check()
            return True, "Connected"
        except (UploadError, UserInputError, ProviderError) as exc:
            return False, exc.detail

    # -- pipeline --

    def transcribe(
        self,
        audio: bytes,
        filename: str = "audio.mp3",
        content_type: str = "audio/mpeg",
    ) -> Transcript:
        """Upload encoded audio and return the recognized text."""
        if not audio:
            raise EmptyInputError()
        data = self._request(
            "post",
            "/api/transcribe",
            files={"file": (filename, audio, content_type)},
        ).json()
        return Transcript(
            text=data.get("text") or "",
            detected_language=data.get("detectedLanguage") or "auto",
        )

    def translate(
        self,
        text: str,
        target_language: str,
        source_language: str | None = None,
    ) -> Translation:
        """Translate ``text``; validated locally before any request."""
        if not target_language:
            raise EmptyTargetError()
        if not text:
            raise EmptyTextError()
        body: dict = {"text": text, "targetLanguage": target_language}
        if source_language:
            body["sourceLanguage"] = source_language
        data = self._request("post", "/api/translate", json=body).json()
        return Translation(
            source_text=text,
            translated_text=data.get("translation") or "",
            source_language=data.get("sourceLanguage"),
            target_language=data.get("targetLanguage") or target_language,
        )

    def synthesize(self, text: str, voice: str | None = None) -> SynthesizedAudio:
        """Fetch MP3 speech for ``text``."""
        if not text:
            raise EmptyTextError()
        body: dict = {"text": text}
        if voice:
            body["voice"] = voice
        resp = self._request("post", "/api/speech", json=body)
        return SynthesizedAudio(
            data=resp.content,
            mime_type=resp.headers.get("content-type", "audio/mpeg"),
            voice=voice or get_settings().default_voice,
        )

    def close(self) -> None:
        self._client.close()
