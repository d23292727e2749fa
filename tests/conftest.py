"""Shared pytest fixtures for VoiceBridge test suite.

Provides mock STT / translation / TTS providers, generated audio samples,
and an async HTTP client wired to the FastAPI app with providers swapped
out through ``dependency_overrides``.
"""

import io
import math
import struct
import wave
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.core.models import SynthesizedAudio, Transcript, Translation

# ---------------------------------------------------------------------------
# Provider Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Create a mock STT provider for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseSTT interface with a
        default transcript.
    """
    from src.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = Transcript(text="Hello world", detected_language="auto")
    return stt


@pytest.fixture
def mock_translator():
    """Create a mock translator returning a Japanese translation."""
    from src.services.translation.base import BaseTranslator

    translator = AsyncMock(spec=BaseTranslator)
    translator.translate.return_value = Translation(
        source_text="Hello world",
        translated_text="こんにちは世界",
        source_language=None,
        target_language="ja",
    )
    return translator


@pytest.fixture
def mock_tts():
    """Create a mock TTS provider returning a few MP3-ish bytes."""
    from src.services.speech.base import BaseTTS

    tts = AsyncMock(spec=BaseTTS)
    tts.synthesize.return_value = SynthesizedAudio(
        data=b"ID3\x04fake-mp3", mime_type="audio/mpeg", voice="alloy"
    )
    return tts


# ---------------------------------------------------------------------------
# API Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app(mock_stt, mock_translator, mock_tts):
    """Create a fresh FastAPI application with mocked providers."""
    from src.api.app import create_app
    from src.api.dependencies import get_stt, get_translator, get_tts

    application = create_app()
    application.dependency_overrides[get_stt] = lambda: mock_stt
    application.dependency_overrides[get_translator] = lambda: mock_translator
    application.dependency_overrides[get_tts] = lambda: mock_tts
    return application


@pytest.fixture
async def client(app):
    """AsyncClient talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pcm_bytes():
    """Generate 1 second of 440Hz sine-wave PCM audio (16kHz, 16-bit, mono).

    Returns:
        bytes: Raw PCM audio data.
    """
    sample_rate = 16000
    duration = 1.0
    frequency = 440.0
    amplitude = 16000  # ~50% of max int16

    samples = []
    for i in range(int(sample_rate * duration)):
        value = int(amplitude * math.sin(2 * math.pi * frequency * i / sample_rate))
        samples.append(struct.pack("<h", value))
    return b"".join(samples)


@pytest.fixture
def silent_pcm_bytes():
    """Generate 1 second of silence as PCM audio (16kHz, 16-bit, mono).

    Returns:
        bytes: Raw PCM silence data (all zeros).
    """
    sample_rate = 16000
    return b"\x00\x00" * sample_rate


@pytest.fixture
def sample_wav_bytes(sample_pcm_bytes):
    """The sine-wave sample wrapped in an in-memory WAV container.

    Returns:
        bytes: Complete WAV file contents.
    """
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(16000)
        wf.writeframes(sample_pcm_bytes)
    return buf.getvalue()
