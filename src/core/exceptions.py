"""
VoiceBridge exception hierarchy.

All application-specific exceptions inherit from VoiceBridgeError,
enabling centralized error handling in the API middleware layer and
human-readable messages in the client layer.
"""

from datetime import UTC, datetime


class VoiceBridgeError(Exception):
    """Base exception for all VoiceBridge errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "VOICEBRIDGE_ERROR",
        status_code: int = 500,
        details: str | None = None,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.details = details
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


# ---------------------------------------------------------------------------
# User input (400)
# ---------------------------------------------------------------------------


class UserInputError(VoiceBridgeError):
    """Raised when a request is missing required input."""

    def __init__(self, detail: str = "Invalid input", code: str = "USER_INPUT_ERROR") -> None:
        super().__init__(detail=detail, code=code, status_code=400)


class EmptyInputError(UserInputError):
    """Raised when no audio was provided for transcription."""

    def __init__(self, detail: str = "No audio file provided") -> None:
        super().__init__(detail=detail, code="EMPTY_INPUT")


class EmptyTargetError(UserInputError):
    """Raised when a translation has no target language."""

    def __init__(self, detail: str = "Target language is required") -> None:
        super().__init__(detail=detail, code="EMPTY_TARGET")


class EmptyTextError(UserInputError):
    """Raised when text to translate or synthesize is missing."""

    def __init__(self, detail: str = "Text is required") -> None:
        super().__init__(detail=detail, code="EMPTY_TEXT")


# ---------------------------------------------------------------------------
# Microphone
# ---------------------------------------------------------------------------


class DeviceError(VoiceBridgeError):
    """Raised when the microphone cannot be used."""

    def __init__(self, detail: str = "Audio device error", code: str = "DEVICE_ERROR") -> None:
        super().__init__(detail=detail, code=code, status_code=500)


class PermissionDeniedError(DeviceError):
    """Raised when access to the microphone is refused."""

    def __init__(self, detail: str = "Microphone access was denied") -> None:
        super().__init__(detail=detail, code="PERMISSION_DENIED")


class UnsupportedDeviceError(DeviceError):
    """Raised when no capture API or input device is available."""

    def __init__(self, detail: str = "Audio recording is not supported on this device") -> None:
        super().__init__(detail=detail, code="UNSUPPORTED_DEVICE")


class RecordingAlreadyActiveError(DeviceError):
    """Raised when trying to start a recording while one is already active."""

    def __init__(self) -> None:
        super().__init__(detail="A recording is already active", code="RECORDING_ALREADY_ACTIVE")
        self.status_code = 409


# ---------------------------------------------------------------------------
# Transcoding
# ---------------------------------------------------------------------------


class ConversionError(VoiceBridgeError):
    """Base class for transcoding failures."""

    def __init__(
        self, detail: str = "Audio conversion failed", code: str = "CONVERSION_ERROR"
    ) -> None:
        super().__init__(detail=detail, code=code, status_code=500)


class ConversionUnavailableError(ConversionError):
    """Raised when the codec runtime cannot be initialized."""

    def __init__(self, detail: str = "Audio codec runtime is unavailable") -> None:
        super().__init__(detail=detail, code="CONVERSION_UNAVAILABLE")


class ConversionFailedError(ConversionError):
    """Raised when the codec rejects the input or crashes mid-conversion."""

    def __init__(self, detail: str = "Failed to convert audio") -> None:
        super().__init__(detail=detail, code="CONVERSION_FAILED")


# ---------------------------------------------------------------------------
# Remote calls
# ---------------------------------------------------------------------------


class ProviderError(VoiceBridgeError):
    """Raised when a call to the hosted AI provider fails."""

    def __init__(
        self, detail: str = "AI provider request failed", details: str | None = None
    ) -> None:
        super().__init__(
            detail=detail,
            code="PROVIDER_ERROR",
            status_code=500,
            details=details,
        )


class UploadError(VoiceBridgeError):
    """Raised when the client cannot reach the backend."""

    def __init__(self, detail: str = "Upload failed", details: str | None = None) -> None:
        super().__init__(detail=detail, code="UPLOAD_ERROR", status_code=502, details=details)


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------


class InvalidTransitionError(VoiceBridgeError):
    """Raised when the pipeline receives an event it cannot accept."""

    def __init__(self, state: str, event: str) -> None:
        super().__init__(
            detail=f"Cannot handle '{event}' while {state}",
            code="INVALID_TRANSITION",
            status_code=409,
        )
        self.state = state
        self.event = event
