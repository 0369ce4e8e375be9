"""Media endpoint: stream audio/video with HTTP range support."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header, HTTPException
from fastapi.responses import Response

from transcript_sync.config import settings
from transcript_sync.errors import MediaNotFoundError
from transcript_sync.media.responder import serve_media

router = APIRouter()


@router.get("/api/media/{media_id}")
async def get_media(
    media_id: str,
    range: Annotated[str | None, Header()] = None,
) -> Response:
    """Stream a media file, returning 206 Partial Content for Range requests.

    The identifier is tried with each known video, then audio, extension; if
    none exist the configured fallback media is served instead.
    """
    try:
        return serve_media(
            settings.media_dir,
            media_id,
            range,
            fallback_id=settings.fallback_media_id,
            chunk_size=settings.media_chunk_bytes,
        )
    except MediaNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Media file not found") from exc
