"""
Audio module - Recording, transcoding and playback.
"""

from .processor import AudioProcessor
from .recorder import Recorder, SoundDeviceMicrophone
from .transcoder import Transcoder, get_transcoder

__all__ = ["AudioProcessor", "Recorder", "SoundDeviceMicrophone", "Transcoder", "get_transcoder"]
