"""
Transcription endpoint.

Accepts one audio file as multipart form field ``file`` and proxies it to
the speech-to-text provider.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from src.api.dependencies import get_stt
from src.api.middleware.error_handler import ERROR_RESPONSES
from src.core.exceptions import EmptyInputError
from src.core.models import TranscriptionResponse
from src.services.transcription import BaseSTT

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transcription"])


@router.post(
    "/transcribe",
    response_model=TranscriptionResponse,
    response_model_by_alias=True,
    responses=ERROR_RESPONSES,
)
async def transcribe(
    file: UploadFile | None = File(None),
    stt: BaseSTT = Depends(get_stt),
):
    """Transcribe an uploaded recording (language auto-detected)."""
    if file is None:
        raise EmptyInputError()

    audio = await file.read()
    logger.info("Received audio file: %s %s %d bytes", file.filename, file.content_type, len(audio))
    if not audio:
        raise EmptyInputError("Uploaded audio file is empty")

    transcript = await stt.transcribe(
        audio,
        filename=file.filename or "audio.mp3",
        content_type=file.content_type,
    )
    return TranscriptionResponse(
        text=transcript.text,
        detected_language=transcript.detected_language,
    )
