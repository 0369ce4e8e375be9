"""Claude-powered extraction of atomic research facts from a transcript."""

from __future__ import annotations

import json
import logging
from typing import Any

from anthropic import Anthropic, APIError

from transcript_sync.config import settings
from transcript_sync.errors import UpstreamError
from transcript_sync.extraction.models import THEMES, Fact, Sentiment
from transcript_sync.extraction.validator import filter_valid_facts
from transcript_sync.transcript.models import TranscriptData
from transcript_sync.transcript.segmenter import segment_words
from transcript_sync.transcript.timecodes import format_hhmmss

logger = logging.getLogger(__name__)

TOOL_NAME = "store_facts"

# Tool definition for Claude structured output
FACT_TOOL: dict[str, Any] = {
    "name": TOOL_NAME,
    "description": (
        "Store the atomic facts extracted from an interview transcript. "
        "Call this once with every extracted fact."
    ),
    "input_schema": {
        "type": "object",
        "properties": {
            "facts": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "fact_id": {
                            "type": "string",
                            "description": "Unique ID for this nugget (e.g., FACT_01).",
                        },
                        "verbatim_quote": {
                            "type": "string",
                            "description": "Direct quote from the transcript.",
                        },
                        "timestamp": {
                            "type": "string",
                            "description": "HH:MM:SS format.",
                        },
                        "speaker_label": {
                            "type": "string",
                            "description": "e.g., Speaker 1 or Participant.",
                        },
                        "sentiment": {
                            "type": "string",
                            "enum": [s.value for s in Sentiment],
                        },
                        "theme": {
                            "type": "string",
                            "enum": list(THEMES),
                        },
                        "summary_of_observation": {
                            "type": "string",
                            "description": "Short, objective summary of the fact.",
                        },
                    },
                    "required": [
                        "verbatim_quote",
                        "timestamp",
                        "speaker_label",
                        "sentiment",
                        "theme",
                        "summary_of_observation",
                    ],
                },
            },
        },
        "required": ["facts"],
    },
}


def build_system_prompt(data_type: str, product: str, feature: str) -> str:
    """Build the extraction instructions for one research context."""
    return (
        "# ROLE\n\n"
        "You are a Senior UX Research Operations Bot. Your sole purpose is to "
        '"shred" interview transcripts into "Atomic Nuggets" (Facts).\n\n'
        "# CONTEXT\n\n"
        f"- Data Type: {data_type}\n"
        f"- Product: {product}\n"
        f"- Feature: {feature}\n\n"
        "# TASK\n\n"
        "Analyze the provided JSON transcript. Extract every significant "
        "observation, friction point, or insight.\n\n"
        "# EXTRACTION RULES (STRICT ACCURACY)\n\n"
        "1. NO PARAPHRASING: The `verbatim_quote` must be a direct word-for-word "
        "string from the transcript.\n"
        "2. TIMESTAMPS: Use the exact segment start time provided, formatted as HH:MM:SS.\n"
        "3. SINGLE THEME: Choose exactly ONE theme per fact from the provided list.\n"
        "4. ATOMICITY: Each fact must represent only ONE idea. If a user mentions "
        "two pain points, create two separate facts.\n\n"
        "# THEME LIST (STRICT ENUM)\n\n"
        f"{', '.join(THEMES)}\n\n"
        f"Use the {TOOL_NAME} tool to return your results."
    )


def format_transcript_for_prompt(transcript: TranscriptData) -> str:
    """Render the transcript as JSON speaker turns with HH:MM:SS boundaries."""
    segments = segment_words(transcript.words)
    return json.dumps(
        {
            "text": transcript.text,
            "language_code": transcript.language_code,
            "segments": [
                {
                    "start_time": format_hhmmss(seg.start),
                    "end_time": format_hhmmss(seg.end),
                    "speaker_id": seg.speaker_id,
                    "text": seg.text,
                }
                for seg in segments
            ],
        },
        indent=2,
    )


def _parse_tool_response(response: Any) -> list[Fact]:
    """Parse the Claude tool_use response into a Fact list (unvalidated)."""
    facts: list[Fact] = []

    for block in response.content:
        if block.type != "tool_use":
            continue
        if block.name != TOOL_NAME:
            continue

        data = block.input
        if isinstance(data, str):
            data = json.loads(data)

        for raw in data.get("facts", []):
            fact = Fact.from_dict(raw)
            if fact.theme not in THEMES:
                logger.warning("Dropping fact with unknown theme %r", fact.theme)
                continue
            if fact.sentiment not in {s.value for s in Sentiment}:
                fact.sentiment = Sentiment.NEUTRAL.value
            facts.append(fact)

    return facts


def extract_facts(
    transcript: TranscriptData,
    data_type: str,
    product: str,
    feature: str,
) -> list[Fact]:
    """Extract facts with Claude and keep only those whose quote is verified.

    Args:
        transcript: The word-level transcript to analyze.
        data_type: Kind of research data (e.g. "User Interview").
        product: Product under study.
        feature: Feature under study.

    Returns:
        Validated facts, in model order.

    Raises:
        UpstreamError: If the Anthropic API call fails.
    """
    client = Anthropic(api_key=settings.anthropic_api_key)

    try:
        response = client.messages.create(
            model=settings.llm_model,
            max_tokens=8192,
            system=build_system_prompt(data_type, product, feature),
            tools=[FACT_TOOL],
            tool_choice={"type": "tool", "name": TOOL_NAME},
            messages=[
                {
                    "role": "user",
                    "content": (
                        "Here is the transcript to analyze:\n\n"
                        f"{format_transcript_for_prompt(transcript)}"
                    ),
                }
            ],
        )
    except APIError as exc:
        raise UpstreamError(f"LLM unavailable: {exc.message}") from exc

    facts = _parse_tool_response(response)
    validated = filter_valid_facts(facts, transcript.text)
    logger.info("Extracted %d facts (%d validated)", len(facts), len(validated))
    return validated
