"""Conversions between seconds and human-readable timestamps."""

from __future__ import annotations

import math


def format_hhmmss(seconds: float) -> str:
    """Format *seconds* as zero-padded ``HH:MM:SS`` (fractions truncated)."""
    total = max(0, math.floor(seconds))
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_clock(seconds: float) -> str:
    """Format *seconds* as ``M:SS`` for timeline labels."""
    total = max(0, math.floor(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def parse_timestamp(timestamp: str | None) -> float:
    """Parse ``HH:MM:SS`` or ``MM:SS`` into seconds.

    Malformed input (empty, non-numeric fields, wrong field count) yields
    ``0.0`` rather than raising.

    Example: ``"00:04:12"`` -> 252.0, ``"4:12"`` -> 252.0
    """
    if not timestamp or not isinstance(timestamp, str):
        return 0.0

    try:
        parts = [float(p) for p in timestamp.strip().split(":")]
    except ValueError:
        return 0.0
    if not all(math.isfinite(p) for p in parts):
        return 0.0

    if len(parts) == 2:
        minutes, secs = parts
        return minutes * 60 + secs
    if len(parts) == 3:
        hours, minutes, secs = parts
        return hours * 3600 + minutes * 60 + secs
    return 0.0
