"""Timeline coordinate system: marker intervals and time <-> position mapping.

All positions are percentages of the timeline width (0-100). The timeline is
rendered ``zoom``% wide, so a percentage maps to the same instant at every
zoom level; zoom only changes how densely markers are laid out.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from transcript_sync.sync_config import DEFAULT_SYNC_CONFIG, SyncConfig
from transcript_sync.transcript.models import Segment

# Intervals (seconds) that marker spacing snaps to when media is long
NICE_INTERVALS: tuple[int, ...] = (5, 10, 15, 30, 60, 120, 300, 600)

# zoom tier (minimum zoom %) -> major interval in seconds
ZOOM_TIERS: tuple[tuple[int, int], ...] = (
    (200, 10),
    (150, 15),
    (120, 20),
    (100, 30),
    (75, 60),
)
LOWEST_TIER_INTERVAL = 120

MINOR_INTERVALS: dict[float, float] = {
    10: 2,
    15: 5,
    20: 5,
    30: 10,
    60: 15,
    120: 30,
}

_EPSILON = 1e-9


def clamp_zoom(zoom: float, config: SyncConfig = DEFAULT_SYNC_CONFIG) -> float:
    return min(config.max_zoom, max(config.min_zoom, zoom))


def _base_interval(zoom: float) -> int:
    for min_zoom, interval in ZOOM_TIERS:
        if zoom >= min_zoom:
            return interval
    return LOWEST_TIER_INTERVAL


def _marker_count(duration: float, interval: float) -> int:
    return math.floor(duration / interval + _EPSILON) + 1


def calculate_marker_interval(
    duration: float,
    zoom: float,
    config: SyncConfig = DEFAULT_SYNC_CONFIG,
) -> float:
    """Return the spacing in seconds between labeled (major) markers.

    Higher zoom gives more frequent labels. When the zoom-tier interval would
    produce more than ``config.max_major_markers`` markers (0 and the end
    inclusive), the interval is scaled up and snapped to the next value in
    :data:`NICE_INTERVALS`; beyond the largest nice value it grows in
    multiples of it.
    """
    base = _base_interval(zoom)
    if duration <= 0 or _marker_count(duration, base) <= config.max_major_markers:
        return base

    required = math.ceil(duration / (config.max_major_markers - 1))
    for nice in NICE_INTERVALS:
        if required <= nice:
            return nice
    largest = NICE_INTERVALS[-1]
    return largest * math.ceil(required / largest)


def calculate_minor_interval(major_interval: float) -> float:
    """Return the spacing of unlabeled ticks between major markers."""
    return MINOR_INTERVALS.get(major_interval, major_interval / 2)


def major_markers(duration: float, interval: float) -> list[float]:
    """Offsets of every multiple of *interval* from 0 up to *duration* inclusive."""
    if interval <= 0 or duration < 0:
        return []
    return [k * interval for k in range(_marker_count(duration, interval))]


def _is_multiple(offset: float, interval: float) -> bool:
    return abs(offset - round(offset / interval) * interval) < _EPSILON


def minor_markers(duration: float, major_interval: float, minor_interval: float) -> list[float]:
    """Minor tick offsets, skipping any that coincide with a major marker."""
    if minor_interval <= 0 or duration < 0:
        return []
    return [
        k * minor_interval
        for k in range(_marker_count(duration, minor_interval))
        if not _is_multiple(k * minor_interval, major_interval)
    ]


def time_to_position(time: float, duration: float) -> float:
    """Map *time* to a 0-100 position; a zero duration maps everything to 0."""
    if duration <= 0:
        return 0.0
    return min(100.0, max(0.0, time / duration * 100))


def position_to_time(percentage: float, duration: float) -> float:
    """Inverse of :func:`time_to_position`, clamped into ``[0, duration]``."""
    if duration <= 0:
        return 0.0
    return max(0.0, min(duration, percentage / 100 * duration))


def click_to_time(x: float, width: float, duration: float) -> float:
    """Translate a pixel offset within a rendered timeline of *width* pixels."""
    if width <= 0:
        return 0.0
    return position_to_time(x / width * 100, duration)


@dataclass(frozen=True)
class SegmentBlock:
    """Horizontal placement of one segment in its speaker lane."""

    segment_id: str
    speaker_id: str
    left: float
    width: float


@dataclass(frozen=True)
class TimelineLayout:
    duration: float
    zoom: float
    major_interval: float
    minor_interval: float
    major_markers: list[float] = field(default_factory=list)
    minor_markers: list[float] = field(default_factory=list)
    blocks: list[SegmentBlock] = field(default_factory=list)
    playhead: float = 0.0

    @property
    def width_percent(self) -> float:
        """Rendered width of the timeline relative to its viewport."""
        return max(100.0, self.zoom)


def build_timeline(
    duration: float,
    zoom: float = 100,
    segments: list[Segment] | None = None,
    current_time: float = 0.0,
    config: SyncConfig = DEFAULT_SYNC_CONFIG,
) -> TimelineLayout:
    """Compute the full marker set and segment placement for one render."""
    zoom = clamp_zoom(zoom, config)
    major = calculate_marker_interval(duration, zoom, config)
    minor = calculate_minor_interval(major)

    blocks = [
        SegmentBlock(
            segment_id=seg.id,
            speaker_id=seg.speaker_id,
            left=time_to_position(seg.start, duration),
            width=time_to_position(seg.end, duration) - time_to_position(seg.start, duration),
        )
        for seg in segments or []
    ]

    return TimelineLayout(
        duration=duration,
        zoom=zoom,
        major_interval=major,
        minor_interval=minor,
        major_markers=major_markers(duration, major),
        minor_markers=minor_markers(duration, major, minor),
        blocks=blocks,
        playhead=time_to_position(current_time, duration),
    )
