"""
TTS REST API routes.
"""

import base64
import logging

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from synthcache.server.schemas import (
    Base64AudioResponse,
    CacheStatsResponse,
    ErrorResponse,
    MessageResponse,
    TTSRequest,
    VoiceInfo,
    VoiceListResponse,
)
from synthcache.tts.models import SynthesisResult
from synthcache.tts.service import SynthesisService

logger = logging.getLogger(__name__)

router = APIRouter()


class BadRequest(Exception):
    """Request failed validation; answered with HTTP 400."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def get_service(request: Request) -> SynthesisService:
    """Service instance owned by the application."""
    return request.app.state.service


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, message=message).model_dump(),
    )


async def _synthesize(
    body: TTSRequest, request: Request, service: SynthesisService
) -> SynthesisResult:
    if not body.text:
        raise BadRequest("Text is required and must be a string")

    max_length = request.app.state.max_text_length
    if len(body.text) > max_length:
        raise BadRequest(f"Text must be {max_length} characters or less")

    return await service.synthesize(body.to_synthesis_request())


@router.post("", responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def synthesize(
    body: TTSRequest,
    request: Request,
    service: SynthesisService = Depends(get_service),
) -> Response:
    """
    Convert text to speech and return the audio bytes.

    The voice used and whether the audio came from the cache are reported
    in the X-TTS-Voice and X-TTS-Cached headers.
    """
    try:
        result = await _synthesize(body, request, service)
    except BadRequest as e:
        return _error(400, "Bad request", e.message)
    except Exception as e:
        logger.error(f"TTS error: {e}")
        return _error(500, "TTS synthesis failed", str(e))

    return Response(
        content=result.audio,
        media_type=service.audio_encoding.media_type,
        headers={
            "Cache-Control": "public, max-age=86400",
            "X-TTS-Voice": result.voice,
            "X-TTS-Cached": "true" if result.cached else "false",
        },
    )


@router.post(
    "/base64",
    response_model=Base64AudioResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def synthesize_base64(
    body: TTSRequest,
    request: Request,
    service: SynthesisService = Depends(get_service),
) -> Base64AudioResponse | JSONResponse:
    """Convert text to speech and return base64 encoded audio in JSON."""
    try:
        result = await _synthesize(body, request, service)
    except BadRequest as e:
        return _error(400, "Bad request", e.message)
    except Exception as e:
        logger.error(f"TTS error: {e}")
        return _error(500, "TTS synthesis failed", str(e))

    return Base64AudioResponse(
        audio=base64.b64encode(result.audio).decode("ascii"),
        mimeType=service.audio_encoding.media_type,
        voice=result.voice,
        cached=result.cached,
        characterCount=len(body.text),
    )


@router.get(
    "/voices",
    response_model=VoiceListResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_voices(
    language: str | None = None,
    service: SynthesisService = Depends(get_service),
) -> VoiceListResponse | JSONResponse:
    """List available voices, optionally for one language."""
    try:
        voices = await service.list_voices(language)
    except Exception as e:
        logger.error(f"List voices error: {e}")
        return _error(500, "Failed to list voices", str(e))

    return VoiceListResponse(voices=[VoiceInfo.from_descriptor(v) for v in voices])


@router.get("/stats", response_model=CacheStatsResponse)
async def get_stats(
    service: SynthesisService = Depends(get_service),
) -> CacheStatsResponse:
    """Get cache statistics."""
    return CacheStatsResponse(**service.get_stats().to_dict())


@router.delete("/cache", response_model=MessageResponse)
async def clear_cache(
    service: SynthesisService = Depends(get_service),
) -> MessageResponse:
    """Clear the TTS cache."""
    service.clear_cache()
    return MessageResponse(message="Cache cleared")
