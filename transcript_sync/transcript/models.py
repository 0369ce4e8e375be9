"""Data models for word-level transcripts and their derived views."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class WordType(str, Enum):
    WORD = "word"
    SPACING = "spacing"


@dataclass(frozen=True)
class Word:
    """A single timestamped token from the transcription source."""

    text: str
    start: float
    end: float
    type: WordType = WordType.WORD
    speaker_id: str = "speaker_0"

    @property
    def is_spacing(self) -> bool:
        return self.type is WordType.SPACING

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "start": self.start,
            "end": self.end,
            "type": self.type.value,
            "speaker_id": self.speaker_id,
        }


@dataclass
class Segment:
    """A maximal run of consecutive words spoken by one speaker."""

    id: str
    speaker_id: str
    start: float
    end: float
    text: str
    words: list[Word] = field(default_factory=list)

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass
class Speaker:
    """A distinct speaker with an editable display name and role."""

    id: str
    name: str
    color: str
    role: str | None = None


@dataclass
class TranscriptData:
    """Normalized transcription result."""

    language_code: str
    text: str
    words: list[Word] = field(default_factory=list)
    language_probability: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "language_code": self.language_code,
            "language_probability": self.language_probability,
            "text": self.text,
            "words": [w.to_dict() for w in self.words],
        }
