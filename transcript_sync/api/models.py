"""Pydantic request/response schemas for the Transcript Sync API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from transcript_sync.extraction.models import Fact, Sentiment

ThemeName = Literal[
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
]


class WordModel(BaseModel):
    text: str
    start: float
    end: float
    type: Literal["word", "spacing"] = "word"
    speaker_id: str


class SegmentModel(BaseModel):
    id: str
    speaker_id: str
    start: float
    end: float
    text: str
    words: list[WordModel] = []


class SpeakerModel(BaseModel):
    id: str
    name: str
    color: str
    role: str | None = None


class TranscriptDataModel(BaseModel):
    """Normalized word-level transcript (snake_case)."""

    language_code: str
    language_probability: float = 0.0
    text: str
    words: list[WordModel]


class TranscriptResponse(BaseModel):
    """Response body for GET /api/transcript/{id}."""

    transcript_id: str
    title: str
    language: str
    duration: float
    transcript: TranscriptDataModel
    segments: list[SegmentModel]
    speakers: list[SpeakerModel]


class SegmentBlockModel(BaseModel):
    segment_id: str
    speaker_id: str
    left: float
    width: float


class TimelineResponse(BaseModel):
    """Response body for GET /api/transcript/{id}/timeline."""

    duration: float
    zoom: float
    width_percent: float
    major_interval: float
    minor_interval: float
    major_markers: list[float]
    minor_markers: list[float]
    labels: list[str]
    blocks: list[SegmentBlockModel]


class FactModel(BaseModel):
    """Wire shape of a single fact."""

    fact_id: str = ""
    verbatim_quote: str
    timestamp: str = Field(description="HH:MM:SS")
    speaker_label: str
    sentiment: Sentiment
    theme: ThemeName
    summary_of_observation: str

    @classmethod
    def from_fact(cls, fact: Fact) -> FactModel:
        return cls(**fact.to_dict())

    def to_fact(self) -> Fact:
        return Fact.from_dict(self.model_dump(mode="json"))


class FactsResponse(BaseModel):
    facts: list[FactModel]


class SaveFactsRequest(BaseModel):
    facts: list[FactModel]


class SaveFactsResponse(BaseModel):
    success: bool = True
    count: int


class GenerateFactsRequest(BaseModel):
    """Request body for POST /api/facts/generate.

    Supply either ``transcript_id`` (loaded from the store) or raw
    ``transcript_data`` in any supported provider format.
    """

    transcript_id: str | None = None
    transcript_data: dict[str, Any] | None = None
    data_type: str = ""
    product: str = ""
    feature: str = ""
