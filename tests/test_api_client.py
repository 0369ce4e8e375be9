"""Tests for the httpx API client against a mocked transport."""

from __future__ import annotations

import json

import httpx
import pytest

from transcript_sync.client import api_client
from transcript_sync.errors import NotFoundError, UpstreamError
from transcript_sync.extraction.models import Fact

FACT_JSON = {
    "fact_id": "FACT_01",
    "verbatim_quote": "checkout button",
    "timestamp": "00:00:01",
    "speaker_label": "Speaker 2",
    "sentiment": "Negative",
    "theme": "Usability",
    "summary_of_observation": "Hard to find.",
}


def _client(handler) -> httpx.Client:
    return httpx.Client(base_url="http://testserver", transport=httpx.MockTransport(handler))


class TestApiClient:
    def test_health(self) -> None:
        http = _client(lambda request: httpx.Response(200, json={"status": "healthy"}))
        assert api_client.check_health(http) is True

    def test_health_unreachable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        assert api_client.check_health(_client(handler)) is False

    def test_get_transcript(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/transcript/t1"
            return httpx.Response(200, json={"transcript_id": "t1", "segments": []})

        assert api_client.get_transcript("t1", _client(handler))["transcript_id"] == "t1"

    def test_get_timeline_passes_zoom(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["zoom"] == "150"
            return httpx.Response(200, json={"zoom": 150})

        assert api_client.get_timeline("t1", 150, _client(handler)) == {"zoom": 150}

    def test_not_found(self) -> None:
        http = _client(lambda request: httpx.Response(404, json={"detail": "Transcript not found"}))
        with pytest.raises(NotFoundError, match="Transcript not found"):
            api_client.get_transcript("missing", http)

    def test_server_error(self) -> None:
        http = _client(lambda request: httpx.Response(503, text="upstream down"))
        with pytest.raises(UpstreamError, match="HTTP 503: upstream down"):
            api_client.get_facts("t1", http)

    def test_save_and_get_facts(self) -> None:
        stored: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "POST":
                stored.extend(json.loads(request.content)["facts"])
                return httpx.Response(200, json={"success": True, "count": len(stored)})
            return httpx.Response(200, json={"facts": stored})

        http = _client(handler)

        assert api_client.save_facts("t1", [Fact.from_dict(FACT_JSON)], http) == 1
        assert api_client.get_facts("t1", http) == [Fact.from_dict(FACT_JSON)]

    def test_generate_facts(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/facts/generate"
            body = json.loads(request.content)
            assert body["product"] == "Shop"
            return httpx.Response(200, json={"facts": [FACT_JSON]})

        facts = api_client.generate_facts("t1", "Interview", "Shop", "Checkout", _client(handler))
        assert [f.fact_id for f in facts] == ["FACT_01"]

    def test_fetch_media_range(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["range"] == "bytes=100-"
            return httpx.Response(206, content=b"abc", headers={"Content-Range": "bytes 100-102/103"})

        response = api_client.fetch_media_range("m1", 100, http=_client(handler))
        assert response.status_code == 206
        assert response.content == b"abc"
