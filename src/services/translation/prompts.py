"""Instruction template for the translation model."""

from src.core.languages import get_language_name

UNKNOWN_SOURCE = "the detected language"

SYSTEM_TEMPLATE = (
    "You are a professional translator. "
    "Translate the following text from {source} to {target}. "
    "Provide only the translated text without any additional explanations or notes."
)


def build_system_prompt(source_language: str | None, target_language: str) -> str:
    """Fill the instruction template with human-readable language names.

    A missing source hint, or the transcription placeholder "auto", lets the
    model work out the source language itself.
    """
    if source_language and source_language != "auto":
        source = get_language_name(source_language)
    else:
        source = UNKNOWN_SOURCE
    return SYSTEM_TEMPLATE.format(source=source, target=get_language_name(target_language))
