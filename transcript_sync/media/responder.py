"""Range-aware media streaming responses."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi.responses import Response, StreamingResponse

from transcript_sync.errors import RangeNotSatisfiableError
from transcript_sync.media.ranges import parse_range_header
from transcript_sync.media.resolver import ResolvedMedia, resolve_media

logger = logging.getLogger(__name__)

CACHE_CONTROL = "public, max-age=31536000, immutable"
DEFAULT_CHUNK_BYTES = 64 * 1024


async def iter_file_range(
    path: Path,
    start: int,
    length: int,
    chunk_size: int = DEFAULT_CHUNK_BYTES,
) -> AsyncIterator[bytes]:
    """Yield *length* bytes of *path* from *start* in chunks of *chunk_size*.

    Reads run in a worker thread. The file handle is closed when the range
    is exhausted or the consumer stops iterating (client disconnect).
    """
    handle = await asyncio.to_thread(path.open, "rb")
    try:
        await asyncio.to_thread(handle.seek, start)
        remaining = length
        while remaining > 0:
            chunk = await asyncio.to_thread(handle.read, min(chunk_size, remaining))
            if not chunk:
                break
            remaining -= len(chunk)
            yield chunk
    finally:
        handle.close()


def media_response(
    media: ResolvedMedia,
    range_header: str | None,
    chunk_size: int = DEFAULT_CHUNK_BYTES,
) -> Response:
    """Build a 200 (full) or 206 (partial) streaming response for *media*.

    An unsatisfiable range yields 416 with ``Content-Range: bytes */size``.
    """
    try:
        byte_range = parse_range_header(range_header, media.size)
    except RangeNotSatisfiableError:
        logger.info("Unsatisfiable range %r for %s", range_header, media.path.name)
        return Response(
            status_code=416,
            headers={"Content-Range": f"bytes */{media.size}", "Accept-Ranges": "bytes"},
        )

    headers = {
        "Accept-Ranges": "bytes",
        "Cache-Control": CACHE_CONTROL,
    }

    if byte_range is None:
        headers["Content-Length"] = str(media.size)
        return StreamingResponse(
            iter_file_range(media.path, 0, media.size, chunk_size),
            status_code=200,
            media_type=media.mime_type,
            headers=headers,
        )

    headers["Content-Range"] = byte_range.content_range(media.size)
    headers["Content-Length"] = str(byte_range.length)
    return StreamingResponse(
        iter_file_range(media.path, byte_range.start, byte_range.length, chunk_size),
        status_code=206,
        media_type=media.mime_type,
        headers=headers,
    )


def serve_media(
    media_dir: str | Path,
    media_id: str,
    range_header: str | None,
    fallback_id: str | None = None,
    chunk_size: int = DEFAULT_CHUNK_BYTES,
) -> Response:
    """Resolve *media_id* and stream it, honoring an optional Range header.

    Raises:
        MediaNotFoundError: Neither the identifier nor the fallback exists.
    """
    media = resolve_media(media_dir, media_id, fallback_id)
    return media_response(media, range_header, chunk_size)
