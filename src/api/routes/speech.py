"""
Text-to-speech endpoint.

Returns raw MP3 bytes rather than JSON.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from src.api.dependencies import get_tts
from src.api.middleware.error_handler import ERROR_RESPONSES
from src.core.config import get_settings
from src.core.exceptions import EmptyTextError
from src.core.models import SpeechRequest
from src.services.speech import BaseTTS

router = APIRouter(tags=["speech"])


@router.post("/speech", response_class=Response, responses=ERROR_RESPONSES)
async def speech(
    body: SpeechRequest | None = None,
    tts: BaseTTS = Depends(get_tts),
):
    """Synthesize speech for ``text`` with the requested voice."""
    body = body or SpeechRequest()
    if not body.text:
        raise EmptyTextError()

    audio = await tts.synthesize(body.text, voice=body.voice or get_settings().default_voice)
    return Response(content=audio.data, media_type=audio.mime_type)
