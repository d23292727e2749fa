"""Client-side pipeline orchestration.

Drives Recorder -> Transcoder -> transcribe -> translate -> speak as one
explicit state machine. All UI state lives in a single frozen
``PipelineSnapshot``; every change goes through the pure ``transition``
function, so inconsistent flag combinations cannot occur.

    idle -> recording -> transcribing -> translating -> ready -> playing -> ready
                              |               |                   |
                              +---------------+-------------------+--> error

``error`` and ``ready`` accept ``start_recording`` again. No stage is
retried; any failure aborts the rest of the pipeline.

Usage::

    session = TranslationSession(client=APIClient(), recorder=Recorder())
    await session.start_recording()
    ...
    translation = await session.stop_recording()
    await session.play()
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from enum import StrEnum

from src.core.config import get_settings
from src.core.exceptions import EmptyTextError, InvalidTransitionError, VoiceBridgeError
from src.core.languages import get_voice_for_language
from src.core.models import RawAudio, SynthesizedAudio, Transcript, Translation
from src.services.audio.player import AudioPlayer
from src.services.audio.recorder import Recorder
from src.services.audio.transcoder import Transcoder, get_transcoder

logger = logging.getLogger(__name__)


class PipelineState(StrEnum):
    """Page-level states of the translation pipeline."""

    idle = "idle"
    recording = "recording"
    transcribing = "transcribing"
    translating = "translating"
    ready = "ready"
    playing = "playing"
    error = "error"


class PipelineEvent(StrEnum):
    """Inputs that move the pipeline between states."""

    start_recording = "start_recording"
    stop_recording = "stop_recording"
    transcription_done = "transcription_done"
    translation_done = "translation_done"
    play_requested = "play_requested"
    playback_finished = "playback_finished"
    failed = "failed"
    reset = "reset"


_S = PipelineState
_E = PipelineEvent

TRANSITIONS: dict[tuple[PipelineState, PipelineEvent], PipelineState] = {
    (_S.idle, _E.start_recording): _S.recording,
    (_S.ready, _E.start_recording): _S.recording,
    (_S.error, _E.start_recording): _S.recording,
    (_S.recording, _E.stop_recording): _S.transcribing,
    (_S.recording, _E.failed): _S.error,
    (_S.transcribing, _E.transcription_done): _S.translating,
    (_S.transcribing, _E.failed): _S.error,
    (_S.translating, _E.translation_done): _S.ready,
    (_S.translating, _E.failed): _S.error,
    (_S.ready, _E.play_requested): _S.playing,
    (_S.playing, _E.playback_finished): _S.ready,
    (_S.playing, _E.failed): _S.error,
}

_BUSY_STATES = frozenset({_S.recording, _S.transcribing, _S.translating, _S.playing})


def transition(state: PipelineState, event: PipelineEvent) -> PipelineState:
    """Return the state reached by applying ``event`` in ``state``.

    ``reset`` is accepted everywhere except while busy and leads to ``idle``.

    Raises:
        InvalidTransitionError: If ``event`` is not allowed in ``state``.
    """
    if event == _E.reset and state not in _BUSY_STATES:
        return _S.idle
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransitionError(state.value, event.value) from None


@dataclass(frozen=True)
class PipelineSnapshot:
    """Single source of truth for everything the UI renders."""

    state: PipelineState = PipelineState.idle
    target_language: str = "ja"
    transcript: Transcript | None = None
    translation: Translation | None = None
    audio: SynthesizedAudio | None = None
    error: str | None = None

    @property
    def can_record(self) -> bool:
        return self.state in (_S.idle, _S.ready, _S.error)

    @property
    def is_busy(self) -> bool:
        return self.state in _BUSY_STATES

    @property
    def can_play(self) -> bool:
        return (
            self.state == _S.ready
            and self.translation is not None
            and bool(self.translation.translated_text)
        )


def apply(snapshot: PipelineSnapshot, event: PipelineEvent, **changes) -> PipelineSnapshot:
    """Pure reducer: advance the state and merge ``changes`` into a new snapshot."""
    return replace(snapshot, state=transition(snapshot.state, event), **changes)


class TranslationSession:
    """Page-level orchestrator for one user.

    Args:
        client: Object with ``transcribe``, ``translate`` and ``synthesize``
            (normally ``src.ui.api_client.APIClient``). Calls are blocking and
            run in a worker thread.
        transcoder: Codec handle (defaults to the process-wide one).
        recorder: Microphone recorder (only needed for ``start_recording``).
        player: Local audio player; when None, ``play`` only fetches audio
            and the caller renders it (e.g. ``st.audio``).
        auto_play: Play the translation automatically once it is ready.
        auto_play_delay: Seconds to wait before auto-play.
        sleep: Awaitable sleep used for the auto-play delay (injectable).
    """

    def __init__(
        self,
        client,
        transcoder: Transcoder | None = None,
        recorder: Recorder | None = None,
        player: AudioPlayer | None = None,
        target_language: str | None = None,
        auto_play: bool | None = None,
        auto_play_delay: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        settings = get_settings()
        self._client = client
        self._transcoder = transcoder or get_transcoder()
        self._recorder = recorder
        self._player = player
        self._auto_play = settings.auto_play if auto_play is None else auto_play
        self._auto_play_delay = (
            settings.auto_play_delay if auto_play_delay is None else auto_play_delay
        )
        self._sleep = sleep
        self._default_voice = settings.default_voice
        self._snapshot = PipelineSnapshot(
            target_language=target_language or settings.default_target_language
        )

    @property
    def snapshot(self) -> PipelineSnapshot:
        return self._snapshot

    @property
    def state(self) -> PipelineState:
        return self._snapshot.state

    @property
    def auto_play(self) -> bool:
        return self._auto_play

    @property
    def client(self):
        return self._client

    def configure(self, client=None, auto_play: bool | None = None) -> None:
        """Swap the backend client or the auto-play setting between recordings.

        Results already on the snapshot are kept.

        Raises:
            InvalidTransitionError: If a recording or request is in flight.
        """
        if self._snapshot.is_busy:
            raise InvalidTransitionError(self._snapshot.state.value, "configure")
        if client is not None and client is not self._client:
            logger.info("Pipeline client replaced")
            self._client = client
        if auto_play is not None:
            self._auto_play = auto_play

    def _dispatch(self, event: PipelineEvent, **changes) -> PipelineSnapshot:
        previous = self._snapshot.state
        self._snapshot = apply(self._snapshot, event, **changes)
        logger.debug("Pipeline %s --%s--> %s", previous, event, self._snapshot.state)
        return self._snapshot

    def _fail(self, exc: Exception) -> None:
        message = exc.detail if isinstance(exc, VoiceBridgeError) else str(exc)
        logger.warning("Pipeline failed in %s: %s", self._snapshot.state, message)
        self._dispatch(_E.failed, error=message)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def set_target_language(self, code: str) -> None:
        """Change the target language (only while nothing is in flight)."""
        if self._snapshot.is_busy:
            raise InvalidTransitionError(self._snapshot.state.value, "set_target_language")
        self._snapshot = replace(self._snapshot, target_language=code)

    def reset(self) -> None:
        """Clear results and return to idle."""
        self._dispatch(
            _E.reset, transcript=None, translation=None, audio=None, error=None
        )

    async def start_recording(self) -> None:
        """Begin capturing from the microphone.

        Device errors are surfaced on the snapshot and re-raised.
        """
        if self._recorder is None:
            raise RuntimeError("No recorder configured for this session")
        self._dispatch(
            _E.start_recording, transcript=None, translation=None, audio=None, error=None
        )
        try:
            await self._recorder.start()
        except Exception as exc:
            self._fail(exc)
            raise

    async def stop_recording(self) -> Translation | None:
        """Stop capturing and run the rest of the pipeline on the recording."""
        if self._recorder is None:
            raise RuntimeError("No recorder configured for this session")
        if self._snapshot.state != _S.recording:
            raise InvalidTransitionError(self._snapshot.state.value, _E.stop_recording.value)
        try:
            raw = await self._recorder.stop()
        except Exception as exc:
            self._fail(exc)
            return None
        if raw is None:
            self._fail(RuntimeError("No active recording"))
            return None
        self._dispatch(_E.stop_recording)
        return await self._process(raw)

    async def process_recording(self, raw: RawAudio) -> Translation | None:
        """Run the pipeline on a recording captured elsewhere (e.g. the browser)."""
        self._dispatch(
            _E.start_recording, transcript=None, translation=None, audio=None, error=None
        )
        self._dispatch(_E.stop_recording)
        return await self._process(raw)

    async def _process(self, raw: RawAudio) -> Translation | None:
        """transcode -> transcribe -> translate; returns None on failure."""
        try:
            encoded = await asyncio.to_thread(self._transcoder.convert, raw)
            transcript = await asyncio.to_thread(
                self._client.transcribe,
                encoded,
                self._transcoder.output_filename,
                self._transcoder.output_mime_type,
            )
        except Exception as exc:
            self._fail(exc)
            return None
        self._dispatch(_E.transcription_done, transcript=transcript)

        if not transcript.text:
            self._fail(EmptyTextError("No speech was recognized in the recording"))
            return None
        try:
            # The transcript language is a placeholder, never a real source hint
            translation = await asyncio.to_thread(
                self._client.translate, transcript.text, self._snapshot.target_language
            )
        except Exception as exc:
            self._fail(exc)
            return None
        self._dispatch(_E.translation_done, translation=translation)

        if self._auto_play and self._snapshot.can_play:
            await self._sleep(self._auto_play_delay)
            await self.play()
        return translation

    async def play(self) -> SynthesizedAudio | None:
        """Synthesize the current translation and play it.

        Returns:
            The synthesized audio, or None if synthesis or playback failed.
        """
        translation = self._snapshot.translation
        if not self._snapshot.can_play or translation is None:
            raise InvalidTransitionError(self._snapshot.state.value, _E.play_requested.value)

        self._dispatch(_E.play_requested, audio=None, error=None)
        voice = get_voice_for_language(translation.target_language, self._default_voice)
        try:
            audio = await asyncio.to_thread(
                self._client.synthesize, translation.translated_text, voice
            )
            if self._player is not None:
                await asyncio.to_thread(self._player.play, audio)
        except Exception as exc:
            self._fail(exc)
            return None
        self._dispatch(_E.playback_finished, audio=audio)
        return audio

    async def close(self) -> None:
        """Release the microphone if a recording is still open."""
        if self._recorder is not None:
            await self._recorder.close()
