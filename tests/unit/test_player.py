"""Tests for local playback of synthesized speech."""

from unittest.mock import MagicMock, patch

from src.core.models import SynthesizedAudio
from src.services.audio.player import SoundDevicePlayer


def _segment(channels: int):
    segment = MagicMock()
    segment.channels = channels
    segment.frame_rate = 24000
    segment.duration_seconds = 0.5
    segment.get_array_of_samples.return_value = [0, 1, 2, 3]
    return segment


class TestSoundDevicePlayer:
    def test_decodes_mp3_and_blocks_until_done(self):
        sd = MagicMock()
        with patch("src.services.audio.player.load_sounddevice", return_value=sd):
            with patch("src.services.audio.player.AudioSegment") as mock_segment:
                mock_segment.from_file.return_value = _segment(channels=1)
                SoundDevicePlayer().play(SynthesizedAudio(data=b"ID3mp3"))

        assert mock_segment.from_file.call_args.kwargs["format"] == "mp3"
        samples = sd.play.call_args.args[0]
        assert samples.shape == (4,)
        assert sd.play.call_args.kwargs["samplerate"] == 24000
        sd.wait.assert_called_once()

    def test_stereo_reshaped_to_frames(self):
        sd = MagicMock()
        with patch("src.services.audio.player.load_sounddevice", return_value=sd):
            with patch("src.services.audio.player.AudioSegment") as mock_segment:
                mock_segment.from_file.return_value = _segment(channels=2)
                SoundDevicePlayer().play(SynthesizedAudio(data=b"ID3mp3"))

        assert sd.play.call_args.args[0].shape == (2, 2)
