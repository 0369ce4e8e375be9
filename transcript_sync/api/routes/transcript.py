"""Transcript endpoints: segmented transcript view and timeline layout."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query

from transcript_sync.api.models import (
    SegmentBlockModel,
    SegmentModel,
    SpeakerModel,
    TimelineResponse,
    TranscriptDataModel,
    TranscriptResponse,
    WordModel,
)
from transcript_sync.errors import MalformedInputError, TranscriptNotFoundError
from transcript_sync.timeline.coordinates import build_timeline
from transcript_sync.transcript.pipeline import TranscriptBundle, load_transcript_bundle
from transcript_sync.transcript.storage import get_store
from transcript_sync.transcript.timecodes import format_clock

router = APIRouter()


def _load(transcript_id: str) -> TranscriptBundle:
    try:
        return load_transcript_bundle(transcript_id, get_store())
    except TranscriptNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Transcript not found") from exc
    except MalformedInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.get("/api/transcript/{transcript_id}", response_model=TranscriptResponse)
async def get_transcript(transcript_id: str) -> TranscriptResponse:
    """Load a stored transcript, segmented by speaker turn."""
    bundle = _load(transcript_id)

    return TranscriptResponse(
        transcript_id=transcript_id,
        title=bundle.title,
        language=bundle.language,
        duration=bundle.duration,
        transcript=TranscriptDataModel(
            language_code=bundle.transcript.language_code,
            language_probability=bundle.transcript.language_probability,
            text=bundle.transcript.text,
            words=[WordModel(**w.to_dict()) for w in bundle.transcript.words],
        ),
        segments=[
            SegmentModel(
                id=seg.id,
                speaker_id=seg.speaker_id,
                start=seg.start,
                end=seg.end,
                text=seg.text,
                words=[WordModel(**w.to_dict()) for w in seg.words],
            )
            for seg in bundle.segments
        ],
        speakers=[
            SpeakerModel(id=s.id, name=s.name, color=s.color, role=s.role)
            for s in bundle.speakers
        ],
    )


@router.get("/api/transcript/{transcript_id}/timeline", response_model=TimelineResponse)
async def get_timeline(
    transcript_id: str,
    zoom: Annotated[float, Query(ge=1)] = 100,
) -> TimelineResponse:
    """Marker layout and segment placement for the speaker timeline."""
    bundle = _load(transcript_id)
    layout = build_timeline(bundle.duration, zoom, bundle.segments)

    return TimelineResponse(
        duration=layout.duration,
        zoom=layout.zoom,
        width_percent=layout.width_percent,
        major_interval=layout.major_interval,
        minor_interval=layout.minor_interval,
        major_markers=layout.major_markers,
        minor_markers=layout.minor_markers,
        labels=[format_clock(m) for m in layout.major_markers],
        blocks=[
            SegmentBlockModel(
                segment_id=b.segment_id,
                speaker_id=b.speaker_id,
                left=b.left,
                width=b.width,
            )
            for b in layout.blocks
        ],
    )
