"""Verbatim-quote validation of extracted facts against the source transcript."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from transcript_sync.extraction.models import Fact
from transcript_sync.sync_config import DEFAULT_SYNC_CONFIG, SyncConfig

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s+")


def _collapse_whitespace(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text)


def validate_quote(
    quote: str,
    transcript_text: str,
    config: SyncConfig = DEFAULT_SYNC_CONFIG,
) -> bool:
    """Return True if *quote* can be found in *transcript_text*.

    An empty quote is never valid. Matching is case-insensitive and tiered:

    1. exact substring of the trimmed quote;
    2. substring after collapsing whitespace runs in both strings;
    3. for quotes shorter than ``config.short_quote_threshold`` characters,
       every token of at least ``config.lenient_token_min_length`` characters
       appears somewhere in the transcript, in any order.
    """
    normalized_quote = quote.strip().lower()
    normalized_transcript = transcript_text.lower()

    if not normalized_quote:
        return False

    if normalized_quote in normalized_transcript:
        return True

    if _collapse_whitespace(normalized_quote) in _collapse_whitespace(normalized_transcript):
        return True

    if len(normalized_quote) < config.short_quote_threshold:
        tokens = [
            t for t in normalized_quote.split() if len(t) >= config.lenient_token_min_length
        ]
        return all(t in normalized_transcript for t in tokens)

    return False


def validate_fact(
    fact: Fact,
    transcript_text: str,
    config: SyncConfig = DEFAULT_SYNC_CONFIG,
) -> bool:
    """Validate the fact's ``verbatim_quote`` against the transcript."""
    return validate_quote(fact.verbatim_quote, transcript_text, config)


def filter_valid_facts(
    facts: Iterable[Fact],
    transcript_text: str,
    config: SyncConfig = DEFAULT_SYNC_CONFIG,
) -> list[Fact]:
    """Keep only facts whose quote is verified; rejected facts are logged and dropped.

    Facts without an id are numbered ``FACT_<n>`` by their position among the
    accepted facts before validation.
    """
    accepted: list[Fact] = []
    rejected = 0

    for fact in facts:
        if not fact.fact_id:
            fact.fact_id = f"FACT_{len(accepted) + 1:02d}"

        if validate_fact(fact, transcript_text, config):
            accepted.append(fact)
        else:
            rejected += 1
            logger.warning("Skipping fact with invalid quote: %.50s...", fact.verbatim_quote)

    if rejected:
        logger.info("Accepted %d facts, rejected %d unverifiable quotes", len(accepted), rejected)
    return accepted
