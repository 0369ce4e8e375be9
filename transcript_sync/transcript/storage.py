"""Keyed storage for transcripts and facts (local JSON files or Supabase)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol, cast

from supabase import Client, create_client

from transcript_sync.config import Settings, settings
from transcript_sync.errors import MalformedInputError, TranscriptNotFoundError
from transcript_sync.extraction.models import Fact
from transcript_sync.sync_config import StorageBackend

logger = logging.getLogger(__name__)


class TranscriptStore(Protocol):
    """Load/save contract the engine depends on."""

    def load_transcript(self, transcript_id: str) -> dict[str, Any]: ...

    def load_facts(self, transcript_id: str) -> list[Fact]: ...

    def save_facts(self, transcript_id: str, facts: list[Fact]) -> int: ...


def is_safe_identifier(identifier: str) -> bool:
    """Reject identifiers that could escape a storage directory."""
    if not identifier:
        return False
    return not any(bad in identifier for bad in ("/", "\\", ".."))


class LocalStore:
    """JSON files under *data_dir*: ``<id>.json`` and ``<id>-facts.json``."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def _transcript_path(self, transcript_id: str) -> Path:
        return self.data_dir / f"{transcript_id}.json"

    def _facts_path(self, transcript_id: str) -> Path:
        return self.data_dir / f"{transcript_id}-facts.json"

    def load_transcript(self, transcript_id: str) -> dict[str, Any]:
        if not is_safe_identifier(transcript_id):
            raise TranscriptNotFoundError(transcript_id)
        path = self._transcript_path(transcript_id)
        if not path.is_file():
            raise TranscriptNotFoundError(transcript_id)
        try:
            return cast(dict[str, Any], json.loads(path.read_text(encoding="utf-8")))
        except ValueError as exc:
            raise MalformedInputError(f"Transcript {transcript_id} is not valid JSON") from exc

    def load_facts(self, transcript_id: str) -> list[Fact]:
        if not is_safe_identifier(transcript_id):
            return []
        path = self._facts_path(transcript_id)
        if not path.is_file():
            return []
        raw = json.loads(path.read_text(encoding="utf-8"))
        return [Fact.from_dict(item) for item in raw if isinstance(item, dict)]

    def save_facts(self, transcript_id: str, facts: list[Fact]) -> int:
        if not is_safe_identifier(transcript_id):
            raise TranscriptNotFoundError(transcript_id)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([f.to_dict() for f in facts], indent=2)
        self._facts_path(transcript_id).write_text(payload, encoding="utf-8")
        logger.info("Saved %d facts for transcript %s", len(facts), transcript_id)
        return len(facts)


def get_supabase_client() -> Client:
    """Create and return a Supabase client from the configured URL and key."""
    return create_client(settings.supabase_url, settings.supabase_key)


class SupabaseStore:
    """Supabase tables ``transcripts`` (id, payload) and ``facts``."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def load_transcript(self, transcript_id: str) -> dict[str, Any]:
        result = self.client.table("transcripts").select("*").eq("id", transcript_id).execute()
        rows = cast(list[dict[str, Any]], result.data)
        if not rows:
            raise TranscriptNotFoundError(transcript_id)
        payload = rows[0].get("payload")
        if isinstance(payload, str):
            payload = json.loads(payload)
        return cast(dict[str, Any], payload or {})

    def load_facts(self, transcript_id: str) -> list[Fact]:
        result = (
            self.client.table("facts")
            .select("*")
            .eq("transcript_id", transcript_id)
            .order("fact_id")
            .execute()
        )
        rows = cast(list[dict[str, Any]], result.data)
        return [Fact.from_dict(row) for row in rows]

    def save_facts(self, transcript_id: str, facts: list[Fact]) -> int:
        # Saving replaces the whole fact set for the transcript
        self.client.table("facts").delete().eq("transcript_id", transcript_id).execute()

        rows = [{"transcript_id": transcript_id, **f.to_dict()} for f in facts]

        # Insert in batches of 50
        batch_size = 50
        for i in range(0, len(rows), batch_size):
            self.client.table("facts").insert(rows[i : i + batch_size]).execute()

        logger.info("Saved %d facts for transcript %s", len(rows), transcript_id)
        return len(rows)


def get_store(config: Settings | None = None) -> TranscriptStore:
    """Return the store selected by ``storage_backend``."""
    cfg = config or settings
    backend = StorageBackend(cfg.storage_backend)
    if backend is StorageBackend.SUPABASE:
        return SupabaseStore(get_supabase_client())
    return LocalStore(cfg.data_dir)
