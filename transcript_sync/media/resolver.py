"""Resolve media identifiers to files on disk."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from transcript_sync.errors import MediaNotFoundError
from transcript_sync.transcript.storage import is_safe_identifier

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS: tuple[str, ...] = ("mp4", "mov", "webm", "mkv", "avi")
AUDIO_EXTENSIONS: tuple[str, ...] = ("mp3", "wav", "m4a", "ogg")

# Probe order: video before audio
MEDIA_EXTENSIONS: tuple[str, ...] = VIDEO_EXTENSIONS + AUDIO_EXTENSIONS

MIME_TYPES: dict[str, str] = {
    "mp4": "video/mp4",
    "mov": "video/quicktime",
    "webm": "video/webm",
    "mkv": "video/x-matroska",
    "avi": "video/x-msvideo",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "m4a": "audio/mp4",
    "ogg": "audio/ogg",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


def mime_type_for(extension: str) -> str:
    return MIME_TYPES.get(extension.lower(), DEFAULT_MIME_TYPE)


@dataclass(frozen=True)
class ResolvedMedia:
    path: Path
    extension: str
    mime_type: str
    size: int


def _probe(media_dir: Path, media_id: str) -> ResolvedMedia | None:
    if not is_safe_identifier(media_id):
        return None
    for ext in MEDIA_EXTENSIONS:
        candidate = media_dir / f"{media_id}.{ext}"
        if candidate.is_file():
            return ResolvedMedia(
                path=candidate,
                extension=ext,
                mime_type=mime_type_for(ext),
                size=candidate.stat().st_size,
            )
    return None


def resolve_media(
    media_dir: str | Path,
    media_id: str,
    fallback_id: str | None = None,
) -> ResolvedMedia:
    """Find the file for *media_id*, trying each known extension in order.

    If nothing matches, *fallback_id* is resolved the same way.

    Raises:
        MediaNotFoundError: Neither the identifier nor the fallback exists.
    """
    root = Path(media_dir)
    resolved = _probe(root, media_id)
    if resolved is None and fallback_id and fallback_id != media_id:
        resolved = _probe(root, fallback_id)
        if resolved is not None:
            logger.info("Media %s not found; serving fallback %s", media_id, fallback_id)
    if resolved is None:
        raise MediaNotFoundError(media_id)
    return resolved
