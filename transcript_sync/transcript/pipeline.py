"""Load pipeline: fetch -> parse -> segment -> derive speakers."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from transcript_sync.transcript.models import Segment, Speaker, TranscriptData
from transcript_sync.transcript.parsers import parse_transcript
from transcript_sync.transcript.segmenter import segment_words, transcript_duration
from transcript_sync.transcript.speakers import extract_speakers
from transcript_sync.transcript.storage import TranscriptStore, get_store

logger = logging.getLogger(__name__)


@dataclass
class TranscriptBundle:
    """Everything the editor needs after loading a transcript."""

    transcript: TranscriptData
    segments: list[Segment] = field(default_factory=list)
    speakers: list[Speaker] = field(default_factory=list)
    title: str = ""

    @property
    def duration(self) -> float:
        return transcript_duration(self.segments)

    @property
    def language(self) -> str:
        return self.transcript.language_code


def build_bundle(payload: dict[str, Any], title: str = "", format: str | None = None) -> TranscriptBundle:
    """Parse a raw provider payload and derive segments and speakers from scratch."""
    transcript = parse_transcript(payload, format)
    segments = segment_words(transcript.words)
    speakers = extract_speakers(transcript)
    return TranscriptBundle(transcript=transcript, segments=segments, speakers=speakers, title=title)


def load_transcript_bundle(transcript_id: str, store: TranscriptStore | None = None) -> TranscriptBundle:
    """Load a stored transcript by id and build its bundle.

    Raises:
        TranscriptNotFoundError: If the store has no transcript for the id.
        MalformedInputError: If the stored payload cannot be parsed.
    """
    store = store or get_store()
    payload = store.load_transcript(transcript_id)
    bundle = build_bundle(payload, title=f"Transcript {transcript_id[:8]}...")
    logger.info(
        "Loaded transcript %s: %d words, %d segments, %d speakers",
        transcript_id,
        len(bundle.transcript.words),
        len(bundle.segments),
        len(bundle.speakers),
    )
    return bundle
