"""Parsers for word-level transcript payloads (ElevenLabs, saved, AssemblyAI)."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from transcript_sync.errors import MalformedInputError
from transcript_sync.transcript.models import TranscriptData, Word, WordType

DEFAULT_SPEAKER_ID = "speaker_0"


def _word_type(raw: str | None) -> WordType:
    # audio_event tokens ("(laughs)") are rendered like ordinary words
    if raw == WordType.SPACING.value:
        return WordType.SPACING
    return WordType.WORD


def _require_words(data: dict[str, Any]) -> list[dict[str, Any]]:
    words = data.get("words")
    if not isinstance(words, list):
        msg = f"Transcript payload has no 'words' array. Keys: {list(data.keys())}"
        raise MalformedInputError(msg)
    return words


def parse_elevenlabs(data: dict[str, Any]) -> TranscriptData:
    """Parse an ElevenLabs speech-to-text response (snake_case keys).

    Format::

        {
          "language_code": "en",
          "language_probability": 0.98,
          "text": "...",
          "words": [{"text": "Hi", "start": 0.1, "end": 0.4,
                     "type": "word", "speaker_id": "speaker_0"}]
        }
    """
    words = [
        Word(
            text=w.get("text", ""),
            start=float(w.get("start", 0.0)),
            end=float(w.get("end", 0.0)),
            type=_word_type(w.get("type")),
            speaker_id=w.get("speaker_id") or DEFAULT_SPEAKER_ID,
        )
        for w in _require_words(data)
    ]
    return TranscriptData(
        language_code=data.get("language_code", ""),
        language_probability=float(data.get("language_probability") or 0.0),
        text=data.get("text", ""),
        words=words,
    )


def parse_saved(data: dict[str, Any]) -> TranscriptData:
    """Parse a transcript saved by the SDK client (camelCase keys).

    Same shape as :func:`parse_elevenlabs` but with ``languageCode``,
    ``languageProbability`` and per-word ``speakerId``.
    """
    words = [
        Word(
            text=w.get("text", ""),
            start=float(w.get("start", 0.0)),
            end=float(w.get("end", 0.0)),
            type=_word_type(w.get("type")),
            speaker_id=w.get("speakerId") or DEFAULT_SPEAKER_ID,
        )
        for w in _require_words(data)
    ]
    return TranscriptData(
        language_code=data.get("languageCode", ""),
        language_probability=float(data.get("languageProbability") or 0.0),
        text=data.get("text", ""),
        words=words,
    )


def parse_assemblyai(data: dict[str, Any]) -> TranscriptData:
    """Parse an AssemblyAI transcript with speaker labels.

    AssemblyAI reports word times in milliseconds and emits no spacing
    tokens, so a single-space spacing word is synthesized between
    consecutive words to keep text reconstruction uniform.
    """
    words: list[Word] = []
    for w in _require_words(data):
        speaker = w.get("speaker")
        current = Word(
            text=w.get("text", ""),
            start=w.get("start", 0) / 1000.0,
            end=w.get("end", 0) / 1000.0,
            speaker_id=f"speaker_{speaker}" if speaker else DEFAULT_SPEAKER_ID,
        )
        if words:
            prev = words[-1]
            words.append(
                Word(
                    text=" ",
                    start=prev.end,
                    end=max(prev.end, current.start),
                    type=WordType.SPACING,
                    speaker_id=prev.speaker_id,
                )
            )
        words.append(current)

    text = data.get("text") or " ".join(w.text for w in words if not w.is_spacing)
    return TranscriptData(
        language_code=data.get("language_code") or "",
        language_probability=float(data.get("language_confidence") or 0.0),
        text=text,
        words=words,
    )


PARSERS: dict[str, Callable[[dict[str, Any]], TranscriptData]] = {
    "elevenlabs": parse_elevenlabs,
    "saved": parse_saved,
    "assemblyai": parse_assemblyai,
}


def detect_format(data: dict[str, Any]) -> str:
    """Guess the payload format from its keys."""
    if "languageCode" in data or "transcriptionId" in data:
        return "saved"
    words = data.get("words")
    if isinstance(words, list) and words and isinstance(words[0], dict):
        first = words[0]
        if "speakerId" in first:
            return "saved"
        if "speaker" in first or "confidence" in first:
            return "assemblyai"
    return "elevenlabs"


def parse_transcript(data: Any, format: str | None = None) -> TranscriptData:
    """Dispatch to the correct parser for *format* (auto-detected when ``None``).

    Raises:
        MalformedInputError: If the payload is not an object, the format is
            unknown, or the payload carries no word list.
    """
    if not isinstance(data, dict):
        msg = f"Transcript payload must be a JSON object, got {type(data).__name__}"
        raise MalformedInputError(msg)

    fmt = format or detect_format(data)
    parser = PARSERS.get(fmt)
    if parser is None:
        msg = f"Unknown transcript format: {fmt!r}. Supported: {list(PARSERS.keys())}"
        raise MalformedInputError(msg)

    return parser(data)
