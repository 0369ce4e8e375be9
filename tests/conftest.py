"""Shared fixtures: sample transcripts, a local store, and a fake media element."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import pytest

from transcript_sync.errors import PlayInterruptedError
from transcript_sync.transcript.storage import LocalStore

ELEVENLABS_PAYLOAD: dict[str, Any] = {
    "language_code": "en",
    "language_probability": 0.98,
    "text": "Hello there. The checkout button is hard to find. I agree.",
    "words": [
        {"text": "Hello", "start": 0.0, "end": 0.5, "type": "word", "speaker_id": "speaker_0"},
        {"text": " ", "start": 0.5, "end": 0.6, "type": "spacing", "speaker_id": "speaker_0"},
        {"text": "there.", "start": 0.6, "end": 1.0, "type": "word", "speaker_id": "speaker_0"},
        {"text": " ", "start": 1.0, "end": 1.2, "type": "spacing", "speaker_id": "speaker_0"},
        {"text": "The", "start": 1.2, "end": 1.4, "type": "word", "speaker_id": "speaker_1"},
        {"text": " ", "start": 1.4, "end": 1.5, "type": "spacing", "speaker_id": "speaker_1"},
        {"text": "checkout", "start": 1.5, "end": 2.0, "type": "word", "speaker_id": "speaker_1"},
        {"text": " ", "start": 2.0, "end": 2.1, "type": "spacing", "speaker_id": "speaker_1"},
        {"text": "button", "start": 2.1, "end": 2.5, "type": "word", "speaker_id": "speaker_1"},
        {"text": " ", "start": 2.5, "end": 2.6, "type": "spacing", "speaker_id": "speaker_1"},
        {"text": "is", "start": 2.6, "end": 2.7, "type": "word", "speaker_id": "speaker_1"},
        {"text": " ", "start": 2.7, "end": 2.8, "type": "spacing", "speaker_id": "speaker_1"},
        {"text": "hard", "start": 2.8, "end": 3.1, "type": "word", "speaker_id": "speaker_1"},
        {"text": " ", "start": 3.1, "end": 3.2, "type": "spacing", "speaker_id": "speaker_1"},
        {"text": "to", "start": 3.2, "end": 3.3, "type": "word", "speaker_id": "speaker_1"},
        {"text": " ", "start": 3.3, "end": 3.4, "type": "spacing", "speaker_id": "speaker_1"},
        {"text": "find.", "start": 3.4, "end": 3.9, "type": "word", "speaker_id": "speaker_1"},
        {"text": " ", "start": 3.9, "end": 4.5, "type": "spacing", "speaker_id": "speaker_1"},
        {"text": "I", "start": 4.5, "end": 4.6, "type": "word", "speaker_id": "speaker_0"},
        {"text": " ", "start": 4.6, "end": 4.7, "type": "spacing", "speaker_id": "speaker_0"},
        {"text": "agree.", "start": 4.7, "end": 5.2, "type": "word", "speaker_id": "speaker_0"},
    ],
}


@pytest.fixture
def elevenlabs_payload() -> dict[str, Any]:
    return json.loads(json.dumps(ELEVENLABS_PAYLOAD))


@pytest.fixture
def store(tmp_path: Path) -> LocalStore:
    """LocalStore seeded with one transcript under id ``interview-1``."""
    (tmp_path / "interview-1.json").write_text(json.dumps(ELEVENLABS_PAYLOAD), encoding="utf-8")
    return LocalStore(tmp_path)


class FakeMediaElement:
    """In-memory stand-in for an HTML media element.

    ``play()`` resolves immediately unless ``hold_play`` is set, in which case
    it waits for :meth:`release_play`. ``play_error`` makes it reject instead.
    Setting ``pause_interrupts`` rejects a held play with
    :class:`PlayInterruptedError` when ``pause()`` is called.
    """

    def __init__(self) -> None:
        self.current_time = 0.0
        self.playback_rate = 1.0
        self.paused = True
        self.play_calls = 0
        self.pause_calls = 0
        self.hold_play = False
        self.pause_interrupts = False
        self.play_error: Exception | None = None
        self._release: asyncio.Event | None = None
        self._interrupted = False

    async def play(self) -> None:
        self.play_calls += 1
        if self.play_error is not None:
            raise self.play_error
        if self.hold_play:
            self._release = asyncio.Event()
            await self._release.wait()
            if self._interrupted:
                self._interrupted = False
                raise PlayInterruptedError("play() was interrupted by a call to pause()")
        self.paused = False

    def release_play(self) -> None:
        assert self._release is not None
        self._release.set()

    def pause(self) -> None:
        self.pause_calls += 1
        self.paused = True
        if self.pause_interrupts and self._release is not None and not self._release.is_set():
            self._interrupted = True
            self._release.set()


@pytest.fixture
def element() -> FakeMediaElement:
    return FakeMediaElement()
