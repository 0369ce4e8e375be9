"""Media element contract and the events it emits."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class MediaElement(Protocol):
    """The subset of an HTML media element the synchronizer drives.

    ``play()`` is asynchronous and may be rejected with
    :class:`~transcript_sync.errors.PlayInterruptedError` when a pause lands
    before it resolves. ``pause()`` and the property setters are immediate;
    the element reports the outcome later through :class:`PlayerEvent`.
    """

    current_time: float
    playback_rate: float

    async def play(self) -> None: ...

    def pause(self) -> None: ...


class PlayerEventKind(str, Enum):
    TIME_UPDATE = "timeupdate"
    PLAY = "play"
    PAUSE = "pause"
    ENDED = "ended"


@dataclass(frozen=True)
class PlayerEvent:
    kind: PlayerEventKind
    time: float | None = None

    @classmethod
    def time_update(cls, time: float) -> PlayerEvent:
        return cls(PlayerEventKind.TIME_UPDATE, time)

    @classmethod
    def play(cls) -> PlayerEvent:
        return cls(PlayerEventKind.PLAY)

    @classmethod
    def pause(cls) -> PlayerEvent:
        return cls(PlayerEventKind.PAUSE)

    @classmethod
    def ended(cls) -> PlayerEvent:
        return cls(PlayerEventKind.ENDED)
