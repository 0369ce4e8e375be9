"""Domain exceptions raised by the synchronization engine and its services."""

from __future__ import annotations


class TranscriptSyncError(Exception):
    """Base class for all engine errors."""


class NotFoundError(TranscriptSyncError):
    """A requested identifier has no backing resource."""


class TranscriptNotFoundError(NotFoundError):
    def __init__(self, transcript_id: str) -> None:
        super().__init__(f"Transcript not found: {transcript_id}")
        self.transcript_id = transcript_id


class MediaNotFoundError(NotFoundError):
    def __init__(self, media_id: str) -> None:
        super().__init__(f"Media file not found: {media_id}")
        self.media_id = media_id


class MalformedInputError(TranscriptSyncError):
    """Input could not be parsed and no safe default applies."""


class RangeNotSatisfiableError(TranscriptSyncError):
    """A byte range starts beyond the end of the resource."""

    def __init__(self, header: str, size: int) -> None:
        super().__init__(f"Range {header!r} not satisfiable for {size} bytes")
        self.size = size


class UpstreamError(TranscriptSyncError):
    """An external transcription or extraction service failed."""


class PlaybackError(TranscriptSyncError):
    """The media element rejected a playback operation."""


class PlayInterruptedError(PlaybackError):
    """A pending play() was superseded by pause() before it resolved.

    Media elements reject the play promise in this case; the race is benign.
    """
