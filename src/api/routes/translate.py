"""
Translation endpoint.

Validates the request before any provider call, then proxies the text to
the configured translator.
"""

from fastapi import APIRouter, Depends

from src.api.dependencies import get_translator
from src.api.middleware.error_handler import ERROR_RESPONSES
from src.core.exceptions import EmptyTargetError, EmptyTextError
from src.core.models import TranslateRequest, TranslateResponse
from src.services.translation import BaseTranslator

router = APIRouter(tags=["translation"])


@router.post(
    "/translate",
    response_model=TranslateResponse,
    response_model_by_alias=True,
    responses=ERROR_RESPONSES,
)
async def translate(
    body: TranslateRequest | None = None,
    translator: BaseTranslator = Depends(get_translator),
):
    """Translate text into the requested target language."""
    body = body or TranslateRequest()
    if not body.text:
        raise EmptyTextError("Text and target language are required")
    if not body.target_language:
        raise EmptyTargetError("Text and target language are required")

    translation = await translator.translate(
        body.text,
        target_language=body.target_language,
        source_language=body.source_language,
    )
    return TranslateResponse(
        translation=translation.translated_text,
        source_language=body.source_language,
        target_language=body.target_language,
    )
