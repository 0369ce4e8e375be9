"""Fact endpoints: load, save, and generate validated research facts."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException

from transcript_sync.api.models import (
    FactModel,
    FactsResponse,
    GenerateFactsRequest,
    SaveFactsRequest,
    SaveFactsResponse,
)
from transcript_sync.config import settings
from transcript_sync.errors import MalformedInputError, TranscriptNotFoundError, UpstreamError
from transcript_sync.extraction.extractor import extract_facts
from transcript_sync.transcript.parsers import parse_transcript
from transcript_sync.transcript.storage import get_store

logger = logging.getLogger(__name__)

router = APIRouter()


# Registered before /api/facts/{transcript_id} so "generate" is not taken as an id
@router.post("/api/facts/generate", response_model=FactsResponse)
async def generate_facts(request: GenerateFactsRequest) -> FactsResponse:
    """Extract facts from a transcript with Claude, keeping only verified quotes.

    Facts whose ``verbatim_quote`` cannot be found in the transcript text are
    dropped from the response (and logged), not reported as errors.
    """
    if not settings.anthropic_api_key:
        raise HTTPException(
            status_code=501,
            detail="Fact extraction is not configured. Set ANTHROPIC_API_KEY to enable it.",
        )

    if not request.data_type or not request.product or not request.feature:
        raise HTTPException(
            status_code=400,
            detail="Data Type, Product, and Feature are required",
        )

    try:
        if request.transcript_data is not None:
            transcript = parse_transcript(request.transcript_data)
        elif request.transcript_id:
            transcript = parse_transcript(get_store().load_transcript(request.transcript_id))
        else:
            raise HTTPException(status_code=400, detail="Transcript data is required")
    except TranscriptNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Transcript not found") from exc
    except MalformedInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        # Anthropic SDK is synchronous; keep the event loop free
        facts = await asyncio.to_thread(
            extract_facts,
            transcript,
            request.data_type,
            request.product,
            request.feature,
        )
    except UpstreamError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc

    return FactsResponse(facts=[FactModel.from_fact(f) for f in facts])


@router.get("/api/facts/{transcript_id}", response_model=FactsResponse)
async def load_facts(transcript_id: str) -> FactsResponse:
    """Load saved facts for a transcript; a transcript without facts returns []."""
    facts = get_store().load_facts(transcript_id)
    return FactsResponse(facts=[FactModel.from_fact(f) for f in facts])


@router.post("/api/facts/{transcript_id}", response_model=SaveFactsResponse)
async def save_facts(transcript_id: str, request: SaveFactsRequest) -> SaveFactsResponse:
    """Replace the saved facts for a transcript."""
    try:
        count = get_store().save_facts(transcript_id, [f.to_fact() for f in request.facts])
    except TranscriptNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Transcript not found") from exc
    return SaveFactsResponse(count=count)
