"""Transcribe endpoint: upload audio/video and get word-level transcript data."""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated, Any

from fastapi import APIRouter, File, HTTPException, UploadFile

from transcript_sync.api.models import TranscriptDataModel
from transcript_sync.config import settings
from transcript_sync.errors import MalformedInputError, UpstreamError
from transcript_sync.transcript.cache import TranscriptionCache
from transcript_sync.transcript.transcriber import is_supported_media, transcribe_media

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/transcribe", response_model=TranscriptDataModel)
async def transcribe(file: Annotated[UploadFile, File(...)]) -> Any:
    """Transcribe an uploaded recording with speaker diarization.

    Responses are cached by (filename, size, content type) so re-uploading
    the same recording does not call the transcription service again.
    """
    if not settings.assemblyai_api_key:
        raise HTTPException(
            status_code=501,
            detail="Transcription is not configured. Set ASSEMBLYAI_API_KEY to enable it.",
        )

    raw = await file.read()
    limit_mb = settings.max_upload_bytes // (1024 * 1024)
    if len(raw) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=(
                f"File size ({len(raw) / 1024 / 1024:.1f}MB) exceeds the {limit_mb}MB limit. "
                "Please use a smaller file."
            ),
        )
    if not raw:
        raise HTTPException(status_code=400, detail="File is empty")

    filename = file.filename or ""
    content_type = (file.content_type or "").lower()
    if not is_supported_media(filename, content_type):
        raise HTTPException(
            status_code=400,
            detail=(
                f"Unsupported file type: {content_type or 'unknown'}. Please upload a video "
                "(MP4, MOV, AVI, etc.) or audio (MP3, WAV, M4A, etc.) file."
            ),
        )

    cache = TranscriptionCache(settings.data_dir)
    cached = cache.get(filename, len(raw), content_type)
    if cached is not None:
        logger.info("Returning cached transcription for %s", filename)
        return cached

    try:
        # AssemblyAI SDK is synchronous; run it in a thread
        transcript = await asyncio.to_thread(transcribe_media, raw)
    except MalformedInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except UpstreamError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    payload = transcript.to_dict()
    cache.put(filename, len(raw), content_type, payload)
    return payload
