"""HTTP client wrapper for the Transcript Sync FastAPI backend."""

from __future__ import annotations

import os
from typing import Any

import httpx

from transcript_sync.errors import NotFoundError, UpstreamError
from transcript_sync.extraction.models import Fact

API_URL = os.getenv("API_URL", "http://localhost:8000")


def _request(method: str, path: str, http: httpx.Client | None, **kwargs: Any) -> httpx.Response:
    """Send via *http* when given, otherwise via a short-lived client for API_URL."""
    if http is not None:
        return http.request(method, path, **kwargs)
    with httpx.Client(base_url=API_URL) as client:
        return client.request(method, path, **kwargs)


def _check(r: httpx.Response) -> httpx.Response:
    """Translate error statuses into engine errors carrying the API's detail."""
    if r.status_code == 404:
        raise NotFoundError(_detail(r))
    if r.status_code >= 400:
        raise UpstreamError(f"HTTP {r.status_code}: {_detail(r)}")
    return r


def _detail(r: httpx.Response) -> str:
    try:
        return str(r.json().get("detail", r.text))
    except ValueError:
        return r.text


def check_health(http: httpx.Client | None = None) -> bool:
    """Return True if the API server responds to /health."""
    try:
        r = _request("GET", "/health", http, timeout=5.0)
        return r.status_code == 200
    except httpx.ConnectError:
        return False


def get_transcript(transcript_id: str, http: httpx.Client | None = None) -> dict[str, Any]:
    """Fetch a transcript with its segments and speakers."""
    r = _check(_request("GET", f"/api/transcript/{transcript_id}", http, timeout=30.0))
    return r.json()  # type: ignore[no-any-return]


def get_timeline(
    transcript_id: str,
    zoom: float = 100,
    http: httpx.Client | None = None,
) -> dict[str, Any]:
    """Fetch the timeline layout for a transcript at *zoom* percent."""
    r = _check(
        _request(
            "GET",
            f"/api/transcript/{transcript_id}/timeline",
            http,
            params={"zoom": zoom},
            timeout=30.0,
        )
    )
    return r.json()  # type: ignore[no-any-return]


def get_facts(transcript_id: str, http: httpx.Client | None = None) -> list[Fact]:
    """Fetch saved facts for a transcript (empty when none are saved)."""
    r = _check(_request("GET", f"/api/facts/{transcript_id}", http, timeout=10.0))
    return [Fact.from_dict(item) for item in r.json()["facts"]]


def save_facts(
    transcript_id: str,
    facts: list[Fact],
    http: httpx.Client | None = None,
) -> int:
    """Save facts for a transcript and return the stored count."""
    r = _check(
        _request(
            "POST",
            f"/api/facts/{transcript_id}",
            http,
            json={"facts": [f.to_dict() for f in facts]},
            timeout=10.0,
        )
    )
    return int(r.json()["count"])


def generate_facts(
    transcript_id: str,
    data_type: str,
    product: str,
    feature: str,
    http: httpx.Client | None = None,
) -> list[Fact]:
    """Ask the backend to extract and validate facts for a stored transcript."""
    r = _check(
        _request(
            "POST",
            "/api/facts/generate",
            http,
            json={
                "transcript_id": transcript_id,
                "data_type": data_type,
                "product": product,
                "feature": feature,
            },
            timeout=300.0,
        )
    )
    return [Fact.from_dict(item) for item in r.json()["facts"]]


def fetch_media_range(
    media_id: str,
    start: int,
    end: int | None = None,
    http: httpx.Client | None = None,
) -> httpx.Response:
    """Request ``bytes=start-end`` of a media file (``end`` open when None)."""
    range_header = f"bytes={start}-{'' if end is None else end}"
    r = _request(
        "GET", f"/api/media/{media_id}", http, headers={"Range": range_header}, timeout=30.0
    )
    return _check(r)
