"""In-place edits of segments, speakers, and facts.

Edits only touch user-editable fields; timing fields are never modified.
"""

from __future__ import annotations

from transcript_sync.errors import MalformedInputError, NotFoundError
from transcript_sync.extraction.models import THEMES, Fact
from transcript_sync.transcript.models import Segment, Speaker


def update_segment_text(segments: list[Segment], segment_id: str, text: str) -> Segment:
    """Replace the display text of one segment and return it."""
    for seg in segments:
        if seg.id == segment_id:
            seg.text = text
            return seg
    raise NotFoundError(f"Segment not found: {segment_id}")


def update_speaker(
    speakers: list[Speaker],
    speaker_id: str,
    name: str | None = None,
    role: str | None = None,
) -> Speaker:
    """Rename a speaker and/or set their role. ``None`` leaves a field unchanged."""
    for speaker in speakers:
        if speaker.id == speaker_id:
            if name is not None:
                speaker.name = name
            if role is not None:
                speaker.role = role
            return speaker
    raise NotFoundError(f"Speaker not found: {speaker_id}")


def update_fact(
    facts: list[Fact],
    fact_id: str,
    summary: str | None = None,
    theme: str | None = None,
) -> Fact:
    """Edit a fact's summary or theme.

    Blank summaries are ignored; themes must come from :data:`THEMES`.
    """
    for fact in facts:
        if fact.fact_id != fact_id:
            continue
        if summary is not None and summary.strip():
            fact.summary_of_observation = summary.strip()
        if theme is not None:
            if theme not in THEMES:
                raise MalformedInputError(f"Unknown theme: {theme!r}")
            fact.theme = theme
        return fact
    raise NotFoundError(f"Fact not found: {fact_id}")
