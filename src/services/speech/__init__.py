"""
Speech module - Text-to-speech abstraction layer.

Factory function for creating TTS instances based on provider configuration.
"""

from .base import BaseTTS

__all__ = ["BaseTTS", "create_tts"]


def create_tts(provider: str, **kwargs) -> BaseTTS:
    """
    Factory function to create TTS instance based on provider.

    Args:
        provider: TTS provider name ("openai")
        **kwargs: Provider-specific configuration

    Returns:
        BaseTTS implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "openai":
        from .openai import OpenAITTS

        return OpenAITTS(**kwargs)
    else:
        raise ValueError(f"Unknown TTS provider: {provider}")
