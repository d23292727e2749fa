"""Microphone recording.

``Recorder`` owns at most one capture device at a time. The device pushes
raw chunks from its own audio thread; a collector task suspends on "chunk
received" and "capture stopped" and appends each chunk to the session
buffer. ``stop()`` returns the whole recording as one container blob.

Usage::

    async with Recorder() as recorder:
        await recorder.start()
        ...
        raw = await recorder.stop()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Protocol

from src.core.config import get_settings
from src.core.exceptions import (
    EmptyInputError,
    PermissionDeniedError,
    RecordingAlreadyActiveError,
    UnsupportedDeviceError,
)
from src.core.models import RawAudio
from src.services.audio.processor import AudioProcessor

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[bytes], None]


class CaptureDevice(Protocol):
    """A microphone that delivers raw chunks while open."""

    mime_type: str

    @property
    def is_open(self) -> bool: ...

    def open(self, on_chunk: ChunkCallback) -> None:
        """Acquire the hardware and start delivering chunks to ``on_chunk``."""

    def close(self) -> None:
        """Stop delivery and release the hardware. Safe to call twice."""

    def finalize(self, data: bytes) -> bytes:
        """Wrap the concatenated chunks in the device's container format.

        May raise ``EmptyInputError`` for a recording with no usable audio.
        """


def load_sounddevice():
    """Import sounddevice on demand so servers without audio hardware still start."""
    try:
        import sounddevice as sd
    except (ImportError, OSError) as exc:
        raise UnsupportedDeviceError(
            f"Audio capture is unavailable (sounddevice could not be loaded: {exc})"
        ) from exc
    return sd


class SoundDeviceMicrophone:
    """Default input device captured through sounddevice as 16-bit PCM.

    Args:
        sample_rate: Capture sample rate (Hz).
        channels: Number of channels to record.
    """

    mime_type = "audio/wav"

    def __init__(self, sample_rate: int | None = None, channels: int | None = None) -> None:
        settings = get_settings()
        self.sample_rate = sample_rate or settings.recorder_sample_rate
        self.channels = channels or settings.recorder_channels
        self.silence_threshold = settings.recorder_silence_threshold
        self._processor = AudioProcessor(self.sample_rate, 2, self.channels)
        self._stream = None
        self._on_chunk: ChunkCallback | None = None

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self, on_chunk: ChunkCallback) -> None:
        sd = load_sounddevice()
        self._on_chunk = on_chunk
        try:
            sd.check_input_settings(
                samplerate=self.sample_rate, channels=self.channels, dtype="int16"
            )
            self._stream = sd.RawInputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype="int16",
                callback=self._callback,
            )
            self._stream.start()
        except (sd.PortAudioError, ValueError) as exc:
            self.close()
            message = str(exc).lower()
            if "permission" in message or "denied" in message:
                raise PermissionDeniedError(f"Microphone access was denied: {exc}") from exc
            raise UnsupportedDeviceError(f"No usable input device: {exc}") from exc

    def _callback(self, indata, frames, time_info, status) -> None:  # noqa: ARG002
        if status:
            logger.debug("Input stream status: %s", status)
        if self._on_chunk is not None:
            self._on_chunk(bytes(indata))

    def close(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop()
        finally:
            stream.close()

    def finalize(self, data: bytes) -> bytes:
        """Wrap captured PCM in WAV, rejecting recordings with no signal.

        Raises:
            EmptyInputError: If the recording's RMS energy is below
                ``silence_threshold``.
        """
        processor = self._processor
        pcm = data[: len(data) - len(data) % (processor.sample_width * processor.channels)]
        if processor.is_silent(processor.pcm_to_ndarray(pcm), self.silence_threshold):
            logger.info("Discarding silent recording (%.1fs)", processor.duration(pcm))
            raise EmptyInputError("No speech detected in the recording")
        logger.debug("Captured %.1fs of audio", processor.duration(pcm))
        return processor.pcm_to_wav(data)


class RecorderState(StrEnum):
    """Lifecycle of a single recording session."""

    idle = "idle"
    recording = "recording"
    stopped = "stopped"


@dataclass
class RecordingSession:
    """Append-only capture buffer for one recording."""

    buffer: bytearray = field(default_factory=bytearray)
    state: RecorderState = RecorderState.idle
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    chunk_count: int = 0

    def append(self, chunk: bytes) -> None:
        self.buffer.extend(chunk)
        self.chunk_count += 1


class Recorder:
    """Records one session at a time from a capture device.

    Args:
        device_factory: Builds a fresh ``CaptureDevice`` per recording
            (defaults to ``SoundDeviceMicrophone``).
    """

    def __init__(self, device_factory: Callable[[], CaptureDevice] | None = None) -> None:
        self._device_factory = device_factory or SoundDeviceMicrophone
        self._device: CaptureDevice | None = None
        self._session: RecordingSession | None = None
        self._queue: asyncio.Queue[bytes | None] | None = None
        self._collector: asyncio.Task | None = None

    @property
    def state(self) -> RecorderState:
        if self._session is None:
            return RecorderState.idle
        return self._session.state

    @property
    def is_recording(self) -> bool:
        return self.state == RecorderState.recording

    @property
    def session(self) -> RecordingSession | None:
        return self._session

    async def start(self) -> None:
        """Acquire the microphone and begin buffering chunks.

        Raises:
            RecordingAlreadyActiveError: If a recording is in progress. No
                second device is opened.
            DeviceError: If the microphone is unavailable or access is denied.
        """
        if self.is_recording:
            raise RecordingAlreadyActiveError()

        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[bytes | None] = asyncio.Queue()

        def on_chunk(chunk: bytes) -> None:
            # Called from the audio thread
            loop.call_soon_threadsafe(queue.put_nowait, chunk)

        device = self._device_factory()
        try:
            device.open(on_chunk)
        except Exception:
            device.close()
            raise

        session = RecordingSession(state=RecorderState.recording)
        self._device = device
        self._queue = queue
        self._session = session
        self._collector = asyncio.create_task(self._collect(queue, session))
        logger.info("Recording started (%s)", device.mime_type)

    @staticmethod
    async def _collect(queue: asyncio.Queue[bytes | None], session: RecordingSession) -> None:
        """Drain chunks into the session until the stop sentinel arrives."""
        while True:
            chunk = await queue.get()
            if chunk is None:
                break
            if chunk:
                session.append(chunk)

    async def stop(self) -> RawAudio | None:
        """Stop capturing, release the device and return the recording.

        Returns:
            The concatenated recording, or None when nothing was recording.

        Raises:
            EmptyInputError: If the device finds no usable audio in the
                recording. The device is released first.
        """
        if not self.is_recording:
            return None

        device = self._device
        session = self._session
        try:
            await self._release()
        finally:
            session.state = RecorderState.stopped

        data = bytes(session.buffer)
        logger.info(
            "Recording stopped: %d chunks, %d bytes", session.chunk_count, len(data)
        )
        if not data:
            return RawAudio(data=b"", mime_type=device.mime_type)
        return RawAudio(data=device.finalize(data), mime_type=device.mime_type)

    async def _release(self) -> None:
        """Close the device and wait for buffered chunks to be collected."""
        device, self._device = self._device, None
        queue, collector = self._queue, self._collector
        self._queue = None
        self._collector = None
        try:
            if device is not None:
                device.close()
        finally:
            if queue is not None:
                # Queued after any chunk callbacks already scheduled by the device
                asyncio.get_running_loop().call_soon(queue.put_nowait, None)
            if collector is not None:
                await collector

    async def close(self) -> None:
        """Tear down an in-progress recording and discard its buffer."""
        if self._device is None and self._collector is None:
            return
        logger.info("Discarding in-progress recording")
        try:
            await self._release()
        finally:
            self._session = None

    async def __aenter__(self) -> Recorder:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
