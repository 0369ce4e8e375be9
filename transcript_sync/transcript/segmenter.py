"""Group flat word-level transcripts into speaker-turn segments."""

from __future__ import annotations

from collections.abc import Iterable

from transcript_sync.transcript.models import Segment, Word


def segment_words(words: Iterable[Word]) -> list[Segment]:
    """Cluster consecutive words from the same speaker into segments.

    Spacing tokens never open a segment: a spacing token seen before any
    segment is open is dropped, otherwise it is kept in the open segment's
    ``words`` so the original spacing can be rendered. Segment text is the
    space-joined text of the non-spacing words, and ``end`` tracks the last
    non-spacing word.

    Segment ids are positional (``segment_<index>``) and only stable for a
    single pass; re-segmenting an edited transcript reassigns them.

    Args:
        words: Words in transcript order.

    Returns:
        Ordered list of :class:`Segment` instances. Empty input yields ``[]``.
    """
    segments: list[Segment] = []
    current: Segment | None = None

    for word in words:
        if word.is_spacing:
            if current is not None:
                current.words.append(word)
            continue

        if current is None or current.speaker_id != word.speaker_id:
            if current is not None:
                segments.append(current)
            current = Segment(
                id=f"segment_{len(segments)}",
                speaker_id=word.speaker_id,
                start=word.start,
                end=word.end,
                text=word.text,
                words=[word],
            )
        else:
            current.end = word.end
            current.text = f"{current.text} {word.text}" if current.text else word.text
            current.words.append(word)

    if current is not None:
        segments.append(current)

    return segments


def transcript_duration(segments: list[Segment]) -> float:
    """Return the end of the latest segment, or 0 for an empty transcript."""
    if not segments:
        return 0.0
    return max(s.end for s in segments)


def segment_at(segments: list[Segment], time: float) -> Segment | None:
    """Return the first segment whose ``[start, end]`` interval contains *time*."""
    for seg in segments:
        if seg.start <= time <= seg.end:
            return seg
    return None
