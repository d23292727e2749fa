"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """VoiceBridge application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        openai_api_key: Credential for the hosted AI provider.
        translation_provider: Chat backend used for translation
            ("openai", "claude" or "ollama").
        provider_timeout: Upper bound in seconds for every provider call.
        provider_max_attempts: Total attempts per provider call (1 = no retry).
        auto_play: Play the synthesized translation as soon as it is ready.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Provider ---
    openai_api_key: str = ""  # Missing key only warns at startup
    openai_base_url: str | None = None
    provider_timeout: float = 60.0
    provider_max_attempts: int = 1

    # --- Speech-to-text ---
    transcription_provider: str = "openai"
    transcription_model: str = "gpt-4o-transcribe"

    # --- Translation ---
    translation_provider: str = "openai"
    translation_model: str = "gpt-4o"
    translation_temperature: float = 0.3
    translation_max_tokens: int = 2000

    # Claude (Anthropic API), used when translation_provider="claude"
    claude_api_key: str = ""
    claude_model: str = "claude-sonnet-4-20250514"

    # Ollama (local LLM), used when translation_provider="ollama"
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # --- Text-to-speech ---
    speech_provider: str = "openai"
    speech_model: str = "gpt-4o-mini-tts"
    default_voice: str = "alloy"

    # --- Audio capture & transcoding ---
    recorder_sample_rate: int = 16000
    recorder_channels: int = 1
    recorder_silence_threshold: float = 0.01  # RMS below this counts as silence
    ffmpeg_binary: str = "ffmpeg"
    transcode_format: str = "mp3"
    transcode_codec: str = "libmp3lame"
    transcode_bitrate: str = "128k"  # Constant bitrate
    transcode_sample_rate: int = 44100
    transcode_timeout: float = 120.0

    # --- Client ---
    api_base_url: str = "http://localhost:8000"
    client_timeout: float = 120.0
    default_target_language: str = "ja"
    auto_play: bool = False
    auto_play_delay: float = 0.5  # Seconds between translation and playback

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # Dev frontend
    ]


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
