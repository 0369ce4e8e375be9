"""Speaker derivation: display names, initials, and stable colors."""

from __future__ import annotations

import re

from transcript_sync.transcript.models import Speaker, TranscriptData

# 32 colors, one per speaker the transcription service can distinguish
SPEAKER_PALETTE: tuple[str, ...] = (
    "#3b82f6",
    "#10b981",
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#ec4899",
    "#06b6d4",
    "#84cc16",
    "#f97316",
    "#6366f1",
    "#14b8a6",
    "#a855f7",
    "#22c55e",
    "#eab308",
    "#f43f5e",
    "#0ea5e9",
    "#64748b",
    "#78716c",
    "#d97706",
    "#059669",
    "#dc2626",
    "#7c3aed",
    "#db2777",
    "#0891b2",
    "#65a30d",
    "#ea580c",
    "#4f46e5",
    "#0d9488",
    "#9333ea",
    "#be185d",
    "#0369a1",
    "#1e40af",
)


def string_hash(value: str) -> int:
    """Polynomial rolling hash (``h * 31 + c``) wrapped to a signed 32-bit int."""
    h = 0
    for ch in value:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def color_from_string(value: str) -> str:
    """Map *value* to a palette color; the same string always gets the same color."""
    return SPEAKER_PALETTE[abs(string_hash(value)) % len(SPEAKER_PALETTE)]


_NAME_WITH_NUMBER_RE = re.compile(r"^([A-Za-z]+)(\d+)$")


def get_initials(name: str) -> str:
    """Return up to two display initials for *name*.

    ``"John Smith"`` -> ``"JS"``, ``"Speaker 1"`` -> ``"S1"``,
    ``"Speaker1"`` -> ``"S1"``, ``"Jane"`` -> ``"JA"``, blank -> ``"?"``.
    """
    words = name.split() if name else []
    if not words:
        return "?"

    if len(words) == 1:
        match = _NAME_WITH_NUMBER_RE.match(words[0])
        if match:
            return match.group(1)[0].upper() + match.group(2)
        return words[0][:2].upper()

    first_initial = words[0][0].upper()
    last = words[-1]
    if last.isdigit():
        return first_initial + last
    return first_initial + last[0].upper()


def extract_speakers(transcript: TranscriptData) -> list[Speaker]:
    """Build one :class:`Speaker` per distinct speaker id, in sorted id order.

    Speakers are named ``Speaker 1..N`` and colored from their display name.
    """
    speaker_ids = sorted({w.speaker_id for w in transcript.words if w.speaker_id})

    speakers: list[Speaker] = []
    for index, speaker_id in enumerate(speaker_ids, start=1):
        name = f"Speaker {index}"
        speakers.append(Speaker(id=speaker_id, name=name, color=color_from_string(name)))
    return speakers
