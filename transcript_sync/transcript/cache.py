"""On-disk cache of transcription responses keyed by upload metadata."""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any, cast

logger = logging.getLogger(__name__)


def file_hash(filename: str, size: int, content_type: str) -> str:
    """SHA-256 of ``"{filename}-{size}-{content_type}"``."""
    return hashlib.sha256(f"{filename}-{size}-{content_type}".encode()).hexdigest()


class TranscriptionCache:
    """JSON files named by :func:`file_hash` under *cache_dir*.

    Read and write failures are logged and treated as cache misses.
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self.cache_dir = Path(cache_dir)

    def _path(self, filename: str, size: int, content_type: str) -> Path:
        return self.cache_dir / f"{file_hash(filename, size, content_type)}.json"

    def get(self, filename: str, size: int, content_type: str) -> dict[str, Any] | None:
        path = self._path(filename, size, content_type)
        if not path.is_file():
            return None
        try:
            return cast(dict[str, Any], json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError):
            logger.exception("Error reading cache file %s", path)
            return None

    def put(self, filename: str, size: int, content_type: str, payload: dict[str, Any]) -> None:
        path = self._path(filename, size, content_type)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError:
            logger.exception("Error saving cache file %s", path)
