"""
Pydantic v2 domain and request / response models.

Domain models (``RawAudio``, ``Transcript``, ``Translation``,
``SynthesizedAudio``) flow through the pipeline and are frozen once built.
Wire models use camelCase aliases to match the public JSON contract.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime
    provider_configured: bool = True


# ---------------------------------------------------------------------------
# Pipeline artifacts
# ---------------------------------------------------------------------------


class RawAudio(BaseModel):
    """A completed recording in its capture container format."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str = "audio/wav"

    @property
    def size(self) -> int:
        return len(self.data)


class Transcript(BaseModel):
    """Recognized text for one recording.

    ``detected_language`` is a placeholder ("auto") because the provider
    call does not return a language; it must not be fed back as a source
    language hint.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    detected_language: str = "auto"


class Translation(BaseModel):
    """Translated text for one transcript + target-language pair."""

    model_config = ConfigDict(frozen=True)

    source_text: str
    translated_text: str
    source_language: str | None = None
    target_language: str


class SynthesizedAudio(BaseModel):
    """Speech audio generated for one translation."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    mime_type: str = "audio/mpeg"
    voice: str = "alloy"


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TranscriptionResponse(_CamelModel):
    """POST /api/transcribe response."""

    text: str
    detected_language: str = Field("auto", alias="detectedLanguage")


class TranslateRequest(_CamelModel):
    """POST /api/translate request body.

    Fields are optional at the schema level so that missing values are
    reported as 400 user-input errors rather than 422 validation errors.
    """

    text: str | None = None
    source_language: str | None = Field(None, alias="sourceLanguage")
    target_language: str | None = Field(None, alias="targetLanguage")


class TranslateResponse(_CamelModel):
    """POST /api/translate response."""

    translation: str
    source_language: str | None = Field(None, alias="sourceLanguage")
    target_language: str = Field(alias="targetLanguage")


class SpeechRequest(_CamelModel):
    """POST /api/speech request body."""

    text: str | None = None
    voice: str | None = None


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    error: str
    code: str
    details: str | None = None
    timestamp: str
