"""Data models for facts extracted from interview transcripts."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class Sentiment(str, Enum):
    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


THEMES: tuple[str, ...] = (
    "User Behavior",
    "Needs",
    "Painpoint",
    "Visual Design",
    "Expectation",
    "Routine",
    "Security",
    "Motivation",
    "Frustration",
    "Accessibility",
    "Mental Models",
    "Workaround",
    "Language and Terminology",
    "Technical Limitation",
    "Suggestions",
    "Retention Drivers",
    "Decision Making Process",
    "Satisfaction",
    "Preference",
    "Comparative Feedback",
    "Usability",
)


@dataclass
class Fact:
    """A single atomic observation ("nugget") backed by a verbatim quote."""

    fact_id: str
    verbatim_quote: str
    timestamp: str  # HH:MM:SS
    speaker_label: str
    sentiment: str
    theme: str
    summary_of_observation: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Fact:
        return cls(
            fact_id=str(data.get("fact_id") or ""),
            verbatim_quote=str(data.get("verbatim_quote") or ""),
            timestamp=str(data.get("timestamp") or "00:00:00"),
            speaker_label=str(data.get("speaker_label") or ""),
            sentiment=str(data.get("sentiment") or Sentiment.NEUTRAL.value),
            theme=str(data.get("theme") or ""),
            summary_of_observation=str(data.get("summary_of_observation") or ""),
        )
