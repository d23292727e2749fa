"""
FastAPI dependency providers for the AI provider clients.

Each provider is built once per process from settings. Tests replace them
through ``app.dependency_overrides``.
"""

from functools import lru_cache

from src.core.config import get_settings
from src.services.speech import BaseTTS, create_tts
from src.services.transcription import BaseSTT, create_stt
from src.services.translation import BaseTranslator, create_translator


@lru_cache
def get_stt() -> BaseSTT:
    return create_stt(provider=get_settings().transcription_provider)


@lru_cache
def get_translator() -> BaseTranslator:
    return create_translator(provider=get_settings().translation_provider)


@lru_cache
def get_tts() -> BaseTTS:
    return create_tts(provider=get_settings().speech_provider)
