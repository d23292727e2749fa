"""Recording transcoder.

Converts a raw recording (WAV, WebM, Ogg, ...) into constant-bitrate MP3
before upload. The codec runtime (an ffmpeg executable fed over stdin) is
expensive to locate and check, so ``Transcoder`` loads it lazily and
keeps it for every later conversion. A failed load is not cached; the
next conversion tries again.
"""

import logging
import shutil
import subprocess
from collections.abc import Callable
from typing import Protocol


from src.core.config import get_settings
from src.core.exceptions import ConversionFailedError, ConversionUnavailableError
from src.core.models import RawAudio

logger = logging.getLogger(__name__)

# Container MIME type -> ffmpeg demuxer name
_MIME_FORMATS: dict[str, str] = {
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/wave": "wav",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mp4": "mp4",
    "audio/m4a": "mp4",
    "audio/flac": "flac",
}

_OUTPUT_MIME_TYPES: dict[str, str] = {
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
}


def format_for_mime_type(mime_type: str | None) -> str | None:
    """Map a container MIME type (parameters ignored) to an ffmpeg format.

    Returns None for unknown types so ffmpeg detects the container itself.
    """
    if not mime_type:
        return None
    base = mime_type.split(";", 1)[0].strip().lower()
    return _MIME_FORMATS.get(base)


class CodecRuntime(Protocol):
    """Anything that can re-encode a blob of audio."""

    def convert(
        self,
        data: bytes,
        input_format: str | None,
        output_format: str,
        codec: str,
        bitrate: str,
        sample_rate: int,
    ) -> bytes: ...


class FFmpegRuntime:
    """ffmpeg located on disk and verified to run.

    Audio is piped through a single ffmpeg process per conversion
    (``pipe:0`` in, ``pipe:1`` out), so nothing besides the ffmpeg
    executable itself is needed at conversion time.

    Args:
        binary: Absolute path of the ffmpeg executable.
        version: First line of ``ffmpeg -version``.
        timeout: Seconds allowed for one conversion.
    """

    def __init__(self, binary: str, version: str, timeout: float = 120.0) -> None:
        self.binary = binary
        self.version = version
        self.timeout = timeout

    @classmethod
    def load(
        cls, binary: str = "ffmpeg", codec: str | None = None, timeout: float = 120.0
    ) -> "FFmpegRuntime":
        """Locate the executable and check that it can encode ``codec``.

        Raises:
            FileNotFoundError: If ``binary`` is not on PATH.
            subprocess.CalledProcessError: If ``ffmpeg -version`` exits non-zero.
            RuntimeError: If the build has no ``codec`` encoder.
        """
        path = shutil.which(binary)
        if path is None:
            raise FileNotFoundError(f"{binary} not found on PATH")
        proc = subprocess.run(
            [path, "-hide_banner", "-version"],
            capture_output=True,
            text=True,
            timeout=10,
            check=True,
        )
        version = proc.stdout.splitlines()[0] if proc.stdout else "unknown"
        if codec:
            encoders = subprocess.run(
                [path, "-hide_banner", "-encoders"],
                capture_output=True,
                text=True,
                timeout=10,
                check=True,
            )
            if codec not in encoders.stdout.split():
                raise RuntimeError(f"{path} was built without the {codec} encoder")
        logger.debug("Using %s (%s)", path, version)
        return cls(path, version, timeout)

    def command(
        self,
        input_format: str | None,
        output_format: str,
        codec: str,
        bitrate: str,
        sample_rate: int,
    ) -> list[str]:
        """Build the ffmpeg argument list for one pipe-to-pipe conversion."""
        args = [self.binary, "-hide_banner", "-loglevel", "error", "-nostdin"]
        if input_format:
            args += ["-f", input_format]
        args += [
            "-i", "pipe:0",
            "-vn",
            "-c:a", codec,
            "-b:a", bitrate,
            "-ar", str(sample_rate),
            "-f", output_format,
            "pipe:1",
        ]  # fmt: skip
        return args

    def convert(
        self,
        data: bytes,
        input_format: str | None,
        output_format: str,
        codec: str,
        bitrate: str,
        sample_rate: int,
    ) -> bytes:
        proc = subprocess.run(
            self.command(input_format, output_format, codec, bitrate, sample_rate),
            input=data,
            capture_output=True,
            timeout=self.timeout,
        )
        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            raise RuntimeError(f"ffmpeg exited with status {proc.returncode}: {stderr}")
        return proc.stdout


class Transcoder:
    """Lazily-initialized, memoized handle on the codec runtime.

    Only one conversion is expected in flight at a time; callers that allow
    concurrent recordings must serialize ``convert`` themselves.

    Args:
        runtime_factory: Builds the codec runtime; defaults to loading
            ``ffmpeg_binary`` from settings. Inject a stub in tests.
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(
        self,
        runtime_factory: Callable[[], CodecRuntime] | None = None,
        settings=None,
    ) -> None:
        self._settings = settings or get_settings()
        self._factory = runtime_factory or self._load_ffmpeg
        self._runtime: CodecRuntime | None = None

    def _load_ffmpeg(self) -> FFmpegRuntime:
        settings = self._settings
        return FFmpegRuntime.load(
            settings.ffmpeg_binary,
            codec=settings.transcode_codec,
            timeout=settings.transcode_timeout,
        )

    @property
    def output_format(self) -> str:
        return self._settings.transcode_format

    @property
    def output_mime_type(self) -> str:
        return _OUTPUT_MIME_TYPES.get(self.output_format, f"audio/{self.output_format}")

    @property
    def output_filename(self) -> str:
        return f"audio.{self.output_format}"

    @property
    def is_loaded(self) -> bool:
        return self._runtime is not None

    def runtime(self) -> CodecRuntime:
        """Return the cached runtime, loading it on first use.

        Raises:
            ConversionUnavailableError: If loading fails. Nothing is cached,
                so a later call retries.
        """
        if self._runtime is None:
            logger.info("Loading codec runtime...")
            try:
                runtime = self._factory()
            except Exception as exc:
                logger.error("Codec runtime failed to load: %s", exc)
                raise ConversionUnavailableError(
                    f"Failed to load audio codec runtime: {exc}"
                ) from exc
            self._runtime = runtime
            logger.info("Codec runtime loaded")
        return self._runtime

    def convert(self, raw: RawAudio) -> bytes:
        """Re-encode a recording for upload.

        Args:
            raw: Recording in its capture container format.

        Returns:
            Encoded bytes in ``transcode_format`` at constant bitrate and
            sample rate.

        Raises:
            ConversionUnavailableError: If the codec runtime cannot be loaded.
            ConversionFailedError: If the input is empty or cannot be converted.
        """
        if not raw.data:
            raise ConversionFailedError("Recording is empty")

        runtime = self.runtime()
        settings = self._settings
        logger.debug("Converting %s (%d bytes) to %s", raw.mime_type, raw.size, self.output_format)
        try:
            converted = runtime.convert(
                raw.data,
                input_format=format_for_mime_type(raw.mime_type),
                output_format=settings.transcode_format,
                codec=settings.transcode_codec,
                bitrate=settings.transcode_bitrate,
                sample_rate=settings.transcode_sample_rate,
            )
        except subprocess.TimeoutExpired as exc:
            raise ConversionFailedError(
                f"Audio conversion timed out after {exc.timeout:.0f}s"
            ) from exc
        except Exception as exc:
            raise ConversionFailedError(f"Failed to convert audio: {exc}") from exc

        if not converted:
            raise ConversionFailedError("Conversion produced no audio")
        logger.debug("Conversion completed (%d bytes)", len(converted))
        return converted

    def reset(self) -> None:
        """Forget the cached runtime."""
        self._runtime = None


_transcoder: Transcoder | None = None


def get_transcoder() -> Transcoder:
    """Return the process-wide Transcoder."""
    global _transcoder  # noqa: PLW0603
    if _transcoder is None:
        _transcoder = Transcoder()
    return _transcoder
