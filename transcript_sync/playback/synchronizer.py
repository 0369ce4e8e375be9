"""Playback synchronizer: keeps the mirrored playhead consistent with the media element.

The element owns the real clock. The synchronizer keeps a mirrored
``current_time`` for highlighting and scrolling and reconciles two input
streams:

- user commands (``play``, ``pause``, ``seek``, ``set_speed``), and
- element events (``timeupdate``, ``play``, ``pause``, ``ended``).

Every play/pause the synchronizer issues is recorded as an expected echo.
When the element later reports that transition, the event is recognised as
self-generated and suppressed instead of being fed back as a new command.
Only unexpected transitions (native controls, end of media) are adopted as
player-initiated state changes.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque

from transcript_sync.errors import MalformedInputError, PlaybackError, PlayInterruptedError
from transcript_sync.extraction.models import Fact
from transcript_sync.playback.events import MediaElement, PlayerEvent, PlayerEventKind
from transcript_sync.sync_config import (
    DEFAULT_SYNC_CONFIG,
    ControlSource,
    PlaybackStatus,
    SyncConfig,
)
from transcript_sync.transcript.models import Segment
from transcript_sync.transcript.segmenter import segment_at
from transcript_sync.transcript.timecodes import parse_timestamp

logger = logging.getLogger(__name__)


class PlaybackSynchronizer:
    """Single owner of playback state for one loaded transcript.

    All methods must be called from the same event loop. Commands mutate
    state before their first suspension point, so handlers never observe a
    half-applied update.
    """

    def __init__(
        self,
        element: MediaElement,
        segments: list[Segment] | None = None,
        facts: list[Fact] | None = None,
        config: SyncConfig = DEFAULT_SYNC_CONFIG,
    ) -> None:
        self.element = element
        self.segments: list[Segment] = list(segments or [])
        self.facts: list[Fact] = list(facts or [])
        self.config = config

        self.status = PlaybackStatus.PAUSED
        self.seeking = False
        self.current_time = 0.0
        self.playback_rate = 1.0
        self.control_source = ControlSource.NONE

        self._expected: deque[PlayerEventKind] = deque()
        self._pending_play: asyncio.Future[None] | None = None
        self._settle_task: asyncio.Task[None] | None = None
        self._events: asyncio.Queue[PlayerEvent] = asyncio.Queue()

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def is_playing(self) -> bool:
        return self.status is PlaybackStatus.PLAYING

    def load(self, segments: list[Segment], facts: list[Fact] | None = None) -> None:
        """Swap in a freshly segmented transcript (and optionally its facts)."""
        self.segments = list(segments)
        if facts is not None:
            self.facts = list(facts)

    def is_segment_active(self, segment: Segment) -> bool:
        return segment.start <= self.current_time <= segment.end

    def is_fact_active(self, fact: Fact) -> bool:
        window = self.config.fact_active_window_seconds
        return abs(self.current_time - parse_timestamp(fact.timestamp)) <= window

    def active_segment(self) -> Segment | None:
        return segment_at(self.segments, self.current_time)

    def active_facts(self) -> list[Fact]:
        return [f for f in self.facts if self.is_fact_active(f)]

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def play(self) -> None:
        """Start playback; resolves once the element's play() has settled.

        Raises:
            PlaybackError: The element rejected play() for a reason other than
                being interrupted by a pause.
        """
        if self._pending_play is None:
            if self.is_playing:
                return
            self.status = PlaybackStatus.PLAYING
            self._issue(PlayerEventKind.PLAY)
            self._pending_play = asyncio.ensure_future(self.element.play())
        await self._settle_play(self._pending_play)

    async def pause(self) -> None:
        """Pause playback, waiting first for any play() still in flight."""
        pending = self._pending_play
        if pending is not None:
            # asyncio.wait never raises; play() reports its own failure
            await asyncio.wait([pending])

        if not self.is_playing:
            return
        self.status = PlaybackStatus.PAUSED
        self._issue(PlayerEventKind.PAUSE)
        self.element.pause()

    async def toggle(self) -> None:
        if self.is_playing:
            await self.pause()
        else:
            await self.play()

    async def seek(self, time: float) -> None:
        """Jump to *time* seconds.

        The mirrored time updates immediately and ``timeupdate`` events are
        ignored until the settling window elapses. A later seek cancels the
        window of an earlier one. Only negative targets are clamped; the
        element bounds the upper end by its own media duration, which can
        extend past the last transcribed word.
        """
        target = max(0.0, time)

        self.seeking = True
        self.current_time = target
        self.element.current_time = target

        if self._settle_task is not None and not self._settle_task.done():
            self._settle_task.cancel()
        self._settle_task = asyncio.create_task(self._settle_seek())

    async def seek_to_segment(self, segment: Segment) -> None:
        await self.seek(segment.start)

    async def seek_to_fact(self, fact: Fact) -> None:
        await self.seek(parse_timestamp(fact.timestamp))

    def set_speed(self, rate: float) -> None:
        if rate <= 0:
            raise MalformedInputError(f"Playback rate must be positive, got {rate}")
        self.playback_rate = rate
        self.element.playback_rate = rate

    async def wait_until_settled(self) -> None:
        """Wait for the latest seek's settling window, following superseding seeks."""
        while self._settle_task is not None and not self._settle_task.done():
            await asyncio.wait([self._settle_task])

    # ------------------------------------------------------------------
    # Element events
    # ------------------------------------------------------------------

    def post(self, event: PlayerEvent) -> None:
        """Queue an element event for the update loop started by :meth:`run`."""
        self._events.put_nowait(event)

    async def run(self) -> None:
        """Apply queued element events one at a time until cancelled."""
        while True:
            event = await self._events.get()
            try:
                self.apply_event(event)
            except Exception:
                logger.exception("Failed to apply player event %s", event)
            finally:
                self._events.task_done()

    async def drain(self) -> None:
        """Wait until every posted event has been applied."""
        await self._events.join()

    def apply_event(self, event: PlayerEvent) -> bool:
        """Apply one element event. Returns False when the event was suppressed."""
        if event.kind is PlayerEventKind.TIME_UPDATE:
            return self._on_time_update(event.time)
        if event.kind is PlayerEventKind.PLAY:
            return self._on_transition(PlayerEventKind.PLAY, PlaybackStatus.PLAYING)
        # pause and ended both leave the element paused
        return self._on_transition(PlayerEventKind.PAUSE, PlaybackStatus.PAUSED)

    def _on_time_update(self, time: float | None) -> bool:
        if self.seeking:
            logger.debug("Ignoring timeupdate %.3f during seek", time or 0.0)
            return False
        self.current_time = self.element.current_time if time is None else time
        return True

    def _on_transition(self, kind: PlayerEventKind, status: PlaybackStatus) -> bool:
        if kind in self._expected:
            self._expected.remove(kind)
            if not self._expected:
                self.control_source = ControlSource.NONE
            logger.debug("Suppressed self-generated %s event", kind.value)
            if status is PlaybackStatus.PAUSED:
                self._resync_time()
            return False

        self.status = status
        self.control_source = ControlSource.PLAYER
        if status is PlaybackStatus.PAUSED:
            self._resync_time()
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _issue(self, kind: PlayerEventKind) -> None:
        self._expected.append(kind)
        self.control_source = ControlSource.USER

    def _forget(self, kind: PlayerEventKind) -> None:
        if kind in self._expected:
            self._expected.remove(kind)
        if not self._expected:
            self.control_source = ControlSource.NONE

    def _resync_time(self) -> None:
        if not self.seeking:
            self.current_time = self.element.current_time

    async def _settle_play(self, pending: asyncio.Future[None]) -> None:
        try:
            await asyncio.shield(pending)
        except PlayInterruptedError:
            logger.debug("play() interrupted by pause(); ignoring")
            self._forget(PlayerEventKind.PLAY)
        except asyncio.CancelledError:
            if not pending.cancelled():
                raise
            self._forget(PlayerEventKind.PLAY)
        except Exception as exc:
            self._forget(PlayerEventKind.PLAY)
            self.status = PlaybackStatus.PAUSED
            logger.error("Media element rejected play(): %s", exc)
            raise PlaybackError(f"Playback failed: {exc}") from exc
        finally:
            if self._pending_play is pending:
                self._pending_play = None

    async def _settle_seek(self) -> None:
        await asyncio.sleep(self.config.seek_settle_seconds)
        self.seeking = False
        # While playing, the next timeupdate moves the mirror
        if not self.is_playing:
            self._resync_time()
