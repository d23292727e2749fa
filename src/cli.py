"""
VoiceBridge command-line client

Records from the microphone (or reads an audio file), sends it through the
backend's transcribe and translate endpoints, then speaks the translation.

Usage:
    python -m src.cli --target ja
    python -m src.cli --file hello.wav --target fr --no-play
"""

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

from src.core.config import get_settings
from src.core.exceptions import VoiceBridgeError
from src.core.languages import SUPPORTED_LANGUAGES, get_language_name
from src.core.models import RawAudio
from src.core.utils import configure_logging
from src.services.audio.player import SoundDevicePlayer
from src.services.audio.recorder import Recorder
from src.services.orchestrator import PipelineState, TranslationSession
from src.ui.api_client import APIClient


def print_languages():
    """Print supported target languages."""
    print("\nSupported languages:")
    print("-" * 40)
    for code, name in SUPPORTED_LANGUAGES:
        print(f"  {code:<6} {name}")
    print()


def read_audio_file(path: Path) -> RawAudio:
    """Load an audio file from disk as a recording."""
    mime_type, _ = mimetypes.guess_type(path.name)
    return RawAudio(data=path.read_bytes(), mime_type=mime_type or "audio/wav")


def print_result(session: TranslationSession) -> None:
    snapshot = session.snapshot
    if snapshot.transcript is not None:
        print(f"\nOriginal:    {snapshot.transcript.text}")
    if snapshot.translation is not None:
        name = get_language_name(snapshot.translation.target_language)
        print(f"Translation ({name}): {snapshot.translation.translated_text}")
    if snapshot.state == PipelineState.error:
        print(f"\nError: {snapshot.error}", file=sys.stderr)


async def run(args: argparse.Namespace) -> int:
    """Run one record -> translate -> speak round. Returns the exit code."""
    client = APIClient(base_url=args.api_url)
    ok, message = client.check_connection()
    if not ok:
        print(f"Error: {message}", file=sys.stderr)
        client.close()
        return 2

    session = TranslationSession(
        client=client,
        recorder=Recorder() if args.file is None else None,
        player=SoundDevicePlayer() if args.play else None,
        target_language=args.target,
        # Played explicitly below so a failure is reported after the text
        auto_play=False,
    )
    try:
        if args.file is not None:
            await session.process_recording(read_audio_file(args.file))
        else:
            try:
                await session.start_recording()
            except VoiceBridgeError as exc:
                print(f"Error: {exc.detail}", file=sys.stderr)
                return 1
            print("Recording... press Enter to stop.")
            await asyncio.to_thread(sys.stdin.readline)
            await session.stop_recording()

        print_result(session)
        if session.snapshot.state == PipelineState.error:
            return 1

        if args.play:
            await session.play()
            if session.snapshot.state == PipelineState.error:
                print(f"\nError: {session.snapshot.error}", file=sys.stderr)
                return 1
        return 0
    finally:
        await session.close()
        client.close()


def main():
    """Main entry point."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Speak in one language, hear it in another",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--target",
        type=str,
        default=settings.default_target_language,
        help=f"Target language code (default: {settings.default_target_language})",
    )

    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Translate an audio file instead of recording from the microphone",
    )

    parser.add_argument(
        "--api-url",
        type=str,
        default=settings.api_base_url,
        help=f"Backend API URL (default: {settings.api_base_url})",
    )

    parser.add_argument(
        "--no-play",
        dest="play",
        action="store_false",
        help="Print the translation without speaking it",
    )

    parser.add_argument(
        "--list",
        action="store_true",
        help="List supported languages and exit",
    )

    args = parser.parse_args()

    if args.list:
        print_languages()
        return

    if args.file is not None and not args.file.is_file():
        parser.error(f"file not found: {args.file}")

    configure_logging(settings.log_level)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
