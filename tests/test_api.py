"""Tests for API endpoints (no external API keys required)."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from transcript_sync.api.main import app
from transcript_sync.errors import MalformedInputError, UpstreamError
from transcript_sync.extraction.models import Fact
from transcript_sync.transcript.models import TranscriptData, Word
from transcript_sync.transcript.storage import LocalStore

client = TestClient(app)
client_no_raise = TestClient(app, raise_server_exceptions=False)

FACT_JSON: dict[str, Any] = {
    "fact_id": "FACT_01",
    "verbatim_quote": "The checkout button is hard to find.",
    "timestamp": "00:00:01",
    "speaker_label": "Speaker 2",
    "sentiment": "Negative",
    "theme": "Usability",
    "summary_of_observation": "Checkout button is hard to locate.",
}


@pytest.fixture
def local_store(store: LocalStore) -> Iterator[LocalStore]:
    with (
        patch("transcript_sync.api.routes.transcript.get_store", return_value=store),
        patch("transcript_sync.api.routes.facts.get_store", return_value=store),
    ):
        yield store


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_unhandled_error_returns_500():
    with patch("transcript_sync.api.routes.transcript.get_store", side_effect=RuntimeError("boom")):
        response = client_no_raise.get("/api/transcript/interview-1")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


# ---------------------------------------------------------------------------
# Transcript + timeline
# ---------------------------------------------------------------------------


class TestTranscriptEndpoint:
    def test_get_transcript(self, local_store: LocalStore) -> None:
        response = client.get("/api/transcript/interview-1")

        assert response.status_code == 200
        data = response.json()
        assert data["transcript_id"] == "interview-1"
        assert data["language"] == "en"
        assert data["duration"] == 5.2
        assert [s["id"] for s in data["segments"]] == ["segment_0", "segment_1", "segment_2"]
        assert data["segments"][1]["text"] == "The checkout button is hard to find."
        assert [s["name"] for s in data["speakers"]] == ["Speaker 1", "Speaker 2"]
        assert data["transcript"]["words"][1]["type"] == "spacing"

    def test_missing_transcript(self, local_store: LocalStore) -> None:
        response = client.get("/api/transcript/does-not-exist")
        assert response.status_code == 404
        assert response.json()["detail"] == "Transcript not found"

    def test_malformed_transcript(self, local_store: LocalStore) -> None:
        (local_store.data_dir / "broken.json").write_text('{"text": "no words"}')

        response = client.get("/api/transcript/broken")

        assert response.status_code == 422

    def test_invalid_json_transcript(self, local_store: LocalStore) -> None:
        (local_store.data_dir / "garbled.json").write_text("{not json")

        response = client.get("/api/transcript/garbled")

        assert response.status_code == 422
        assert "not valid JSON" in response.json()["detail"]

    def test_timeline(self, local_store: LocalStore) -> None:
        response = client.get("/api/transcript/interview-1/timeline")

        assert response.status_code == 200
        data = response.json()
        assert data["zoom"] == 100
        assert data["major_interval"] == 30
        assert data["major_markers"] == [0]
        assert data["labels"] == ["0:00"]
        assert data["minor_markers"] == []
        assert len(data["blocks"]) == 3
        assert data["blocks"][0]["left"] == 0.0

    def test_timeline_zoom_clamped(self, local_store: LocalStore) -> None:
        response = client.get("/api/transcript/interview-1/timeline", params={"zoom": 400})

        assert response.status_code == 200
        assert response.json()["zoom"] == 200
        assert response.json()["width_percent"] == 200

    def test_timeline_rejects_nonpositive_zoom(self, local_store: LocalStore) -> None:
        response = client.get("/api/transcript/interview-1/timeline", params={"zoom": 0})
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# Facts
# ---------------------------------------------------------------------------


class TestFactsEndpoint:
    def test_load_empty(self, local_store: LocalStore) -> None:
        response = client.get("/api/facts/interview-1")
        assert response.status_code == 200
        assert response.json() == {"facts": []}

    def test_save_and_load(self, local_store: LocalStore) -> None:
        response = client.post("/api/facts/interview-1", json={"facts": [FACT_JSON]})

        assert response.status_code == 200
        assert response.json() == {"success": True, "count": 1}

        loaded = client.get("/api/facts/interview-1").json()["facts"]
        assert loaded == [FACT_JSON]

    def test_save_requires_array(self, local_store: LocalStore) -> None:
        response = client.post("/api/facts/interview-1", json={"facts": "not a list"})
        assert response.status_code == 422

    def test_save_rejects_unknown_theme(self, local_store: LocalStore) -> None:
        response = client.post(
            "/api/facts/interview-1", json={"facts": [{**FACT_JSON, "theme": "Vibes"}]}
        )
        assert response.status_code == 422


class TestGenerateFacts:
    def test_no_key_returns_501(self) -> None:
        with patch("transcript_sync.api.routes.facts.settings") as mock_settings:
            mock_settings.anthropic_api_key = ""
            response = client.post(
                "/api/facts/generate",
                json={"transcript_id": "interview-1", "data_type": "Interview", "product": "P", "feature": "F"},
            )
        assert response.status_code == 501
        assert "not configured" in response.json()["detail"].lower()

    def test_context_required(self) -> None:
        with patch("transcript_sync.api.routes.facts.settings") as mock_settings:
            mock_settings.anthropic_api_key = "sk-test"
            response = client.post("/api/facts/generate", json={"transcript_id": "interview-1"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Data Type, Product, and Feature are required"

    def test_transcript_required(self) -> None:
        with patch("transcript_sync.api.routes.facts.settings") as mock_settings:
            mock_settings.anthropic_api_key = "sk-test"
            response = client.post(
                "/api/facts/generate",
                json={"data_type": "Interview", "product": "P", "feature": "F"},
            )
        assert response.status_code == 400
        assert response.json()["detail"] == "Transcript data is required"

    def test_unknown_transcript_returns_404(self, local_store: LocalStore) -> None:
        with patch("transcript_sync.api.routes.facts.settings") as mock_settings:
            mock_settings.anthropic_api_key = "sk-test"
            response = client.post(
                "/api/facts/generate",
                json={"transcript_id": "missing", "data_type": "Interview", "product": "P", "feature": "F"},
            )
        assert response.status_code == 404

    def test_generates_from_stored_transcript(self, local_store: LocalStore) -> None:
        with (
            patch("transcript_sync.api.routes.facts.settings") as mock_settings,
            patch(
                "transcript_sync.api.routes.facts.extract_facts",
                return_value=[Fact.from_dict(FACT_JSON)],
            ) as mock_extract,
        ):
            mock_settings.anthropic_api_key = "sk-test"
            response = client.post(
                "/api/facts/generate",
                json={"transcript_id": "interview-1", "data_type": "Interview", "product": "P", "feature": "F"},
            )

        assert response.status_code == 200
        assert response.json() == {"facts": [FACT_JSON]}
        transcript, data_type, product, feature = mock_extract.call_args.args
        assert transcript.language_code == "en"
        assert (data_type, product, feature) == ("Interview", "P", "F")

    def test_generates_from_inline_transcript(self, elevenlabs_payload: dict[str, Any]) -> None:
        with (
            patch("transcript_sync.api.routes.facts.settings") as mock_settings,
            patch("transcript_sync.api.routes.facts.extract_facts", return_value=[]),
        ):
            mock_settings.anthropic_api_key = "sk-test"
            response = client.post(
                "/api/facts/generate",
                json={
                    "transcript_data": elevenlabs_payload,
                    "data_type": "Interview",
                    "product": "P",
                    "feature": "F",
                },
            )
        assert response.status_code == 200
        assert response.json() == {"facts": []}

    def test_llm_failure_returns_503(self, elevenlabs_payload: dict[str, Any]) -> None:
        with (
            patch("transcript_sync.api.routes.facts.settings") as mock_settings,
            patch(
                "transcript_sync.api.routes.facts.extract_facts",
                side_effect=UpstreamError("LLM unavailable: overloaded"),
            ),
        ):
            mock_settings.anthropic_api_key = "sk-test"
            response = client.post(
                "/api/facts/generate",
                json={
                    "transcript_data": elevenlabs_payload,
                    "data_type": "Interview",
                    "product": "P",
                    "feature": "F",
                },
            )
        assert response.status_code == 503


# ---------------------------------------------------------------------------
# Transcribe
# ---------------------------------------------------------------------------

AUDIO = b"\xff\xfb\x90\x00" + b"\x00" * 100  # fake MP3 header


@pytest.fixture
def transcribe_settings(tmp_path: Path) -> Iterator[MagicMock]:
    with patch("transcript_sync.api.routes.transcribe.settings") as mock_settings:
        mock_settings.assemblyai_api_key = "aai-test"
        mock_settings.max_upload_bytes = 1024 * 1024
        mock_settings.data_dir = str(tmp_path)
        yield mock_settings


class TestTranscribe:
    def test_no_key_returns_501(self) -> None:
        with patch("transcript_sync.api.routes.transcribe.settings") as mock_settings:
            mock_settings.assemblyai_api_key = ""
            response = client.post(
                "/api/transcribe", files={"file": ("test.mp3", AUDIO, "audio/mpeg")}
            )
        assert response.status_code == 501

    def test_requires_file(self) -> None:
        response = client.post("/api/transcribe")
        assert response.status_code == 422

    def test_too_large_returns_413(self, transcribe_settings: MagicMock) -> None:
        transcribe_settings.max_upload_bytes = 10
        response = client.post("/api/transcribe", files={"file": ("test.mp3", AUDIO, "audio/mpeg")})
        assert response.status_code == 413

    def test_empty_file(self, transcribe_settings: MagicMock) -> None:
        response = client.post("/api/transcribe", files={"file": ("test.mp3", b"", "audio/mpeg")})
        assert response.status_code == 400
        assert response.json()["detail"] == "File is empty"

    def test_unsupported_type(self, transcribe_settings: MagicMock) -> None:
        response = client.post("/api/transcribe", files={"file": ("notes.txt", b"hello", "text/plain")})
        assert response.status_code == 400
        assert "Unsupported file type" in response.json()["detail"]

    def test_transcribes_then_caches(self, transcribe_settings: MagicMock) -> None:
        result = TranscriptData(
            language_code="en",
            text="Hi",
            words=[Word(text="Hi", start=0.0, end=0.4, speaker_id="speaker_A")],
        )

        with patch(
            "transcript_sync.api.routes.transcribe.transcribe_media", return_value=result
        ) as mock_transcribe:
            first = client.post("/api/transcribe", files={"file": ("a.mp3", AUDIO, "audio/mpeg")})
            second = client.post("/api/transcribe", files={"file": ("a.mp3", AUDIO, "audio/mpeg")})

        assert first.status_code == 200
        assert first.json()["words"][0]["speaker_id"] == "speaker_A"
        assert second.json() == first.json()
        mock_transcribe.assert_called_once()

    @pytest.mark.parametrize(
        "error, status",
        [(MalformedInputError("Transcription failed: bad audio"), 400), (UpstreamError("down"), 503)],
    )
    def test_transcription_failures(
        self, transcribe_settings: MagicMock, error: Exception, status: int
    ) -> None:
        with patch("transcript_sync.api.routes.transcribe.transcribe_media", side_effect=error):
            response = client.post("/api/transcribe", files={"file": ("b.mp3", AUDIO, "audio/mpeg")})
        assert response.status_code == status
