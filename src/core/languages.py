"""Language-name and voice lookup tables."""

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "ja": "Japanese",
    "zh": "Chinese",
    "ko": "Korean",
    "vi": "Vietnamese",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
    "pt": "Portuguese",
    "ru": "Russian",
    "ar": "Arabic",
    "hi": "Hindi",
    "th": "Thai",
    "id": "Indonesian",
}

# Target language -> TTS voice identifier
VOICES: dict[str, str] = {
    "ja": "shimmer",
    "zh": "echo",
}

DEFAULT_VOICE = "alloy"

SUPPORTED_LANGUAGES: list[tuple[str, str]] = [
    (code, name) for code, name in LANGUAGE_NAMES.items()
]


def get_language_name(code: str) -> str:
    """Return the English name for a language code, or the code itself."""
    return LANGUAGE_NAMES.get(code, code)


def get_voice_for_language(code: str | None, default: str = DEFAULT_VOICE) -> str:
    """Pick the speech voice for a target language.

    Args:
        code: ISO 639-1 target language code.
        default: Voice used when the language has no dedicated voice.

    Returns:
        The voice identifier passed to the text-to-speech provider.
    """
    if not code:
        return default
    return VOICES.get(code, default)
