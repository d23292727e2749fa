"""Local playback of synthesized speech."""

import io
import logging
from typing import Protocol

import numpy as np
from pydub import AudioSegment

from src.core.models import SynthesizedAudio
from src.services.audio.recorder import load_sounddevice

logger = logging.getLogger(__name__)


class AudioPlayer(Protocol):
    """Plays synthesized audio to completion."""

    def play(self, audio: SynthesizedAudio) -> None: ...


class SoundDevicePlayer:
    """Decodes MP3 with pydub and plays it through the default output device."""

    def play(self, audio: SynthesizedAudio) -> None:
        sd = load_sounddevice()
        segment = AudioSegment.from_file(io.BytesIO(audio.data), format="mp3")
        samples = np.array(segment.get_array_of_samples())
        if segment.channels > 1:
            samples = samples.reshape((-1, segment.channels))
        logger.info("Playing %.1fs of audio (voice=%s)", segment.duration_seconds, audio.voice)
        sd.play(samples, samplerate=segment.frame_rate)
        sd.wait()
