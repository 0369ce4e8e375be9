"""Engine configuration: state enums and the SyncConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StorageBackend(str, Enum):
    """Where transcripts and facts are persisted."""

    LOCAL = "local"
    SUPABASE = "supabase"


class PlaybackStatus(str, Enum):
    """Coarse playback state of the media element."""

    PAUSED = "paused"
    PLAYING = "playing"


class ControlSource(str, Enum):
    """Who initiated the play/pause transition currently in flight."""

    NONE = "none"
    USER = "user"
    PLAYER = "player"


@dataclass(frozen=True)
class SyncConfig:
    """Immutable tuning constants for the synchronization engine.

    Defaults mirror the behaviour of the editor UI: quotes shorter than ten
    characters are matched leniently, a fact is highlighted within five
    seconds of the playhead, and ``timeupdate`` events are ignored for 100 ms
    after a seek.
    """

    short_quote_threshold: int = 10
    lenient_token_min_length: int = 3
    fact_active_window_seconds: float = 5.0
    seek_settle_seconds: float = 0.1
    max_major_markers: int = 200
    min_zoom: int = 50
    max_zoom: int = 200


DEFAULT_SYNC_CONFIG = SyncConfig()
