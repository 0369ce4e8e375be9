"""Word-level speech-to-text via the AssemblyAI SDK."""

from __future__ import annotations

import logging
from typing import Any

import assemblyai as aai  # type: ignore[import-untyped]

from transcript_sync.config import settings
from transcript_sync.errors import MalformedInputError, UpstreamError
from transcript_sync.transcript.models import TranscriptData
from transcript_sync.transcript.parsers import parse_assemblyai

logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = {"mp4", "mov", "avi", "mkv", "webm"}
AUDIO_EXTENSIONS = {"mp3", "wav", "m4a", "ogg", "flac", "aac"}


def is_supported_media(filename: str, content_type: str) -> bool:
    """Accept audio/video MIME types, falling back to the file extension."""
    content_type = (content_type or "").lower()
    if content_type.startswith(("audio/", "video/")):
        return True
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return ext in VIDEO_EXTENSIONS or ext in AUDIO_EXTENSIONS


def _transcript_payload(transcript: Any) -> dict[str, Any]:
    """Flatten an AssemblyAI transcript object into its JSON word format."""
    response = getattr(transcript, "json_response", None) or {}
    return {
        "text": transcript.text or "",
        "language_code": response.get("language_code", ""),
        "language_confidence": response.get("language_confidence"),
        "words": [
            {"text": w.text, "start": w.start, "end": w.end, "speaker": w.speaker}
            for w in transcript.words or []
        ],
    }


def transcribe_media(raw: bytes) -> TranscriptData:
    """Transcribe audio/video bytes with speaker diarization.

    The SDK accepts bytes directly, video containers included.

    Raises:
        MalformedInputError: AssemblyAI rejected the media content.
        UpstreamError: Infrastructure error (bad API key, network, provider outage).
    """
    aai.settings.api_key = settings.assemblyai_api_key
    transcriber = aai.Transcriber()
    # speaker_labels=True enables diarization; without it every word has no speaker
    config = aai.TranscriptionConfig(speaker_labels=True, language_detection=True)

    try:
        transcript = transcriber.transcribe(raw, config=config)
    except Exception as exc:
        raise UpstreamError(f"Transcription service unavailable: {exc}") from exc

    if transcript.status == aai.TranscriptStatus.error:
        raise MalformedInputError(f"Transcription failed: {transcript.error}")

    data = parse_assemblyai(_transcript_payload(transcript))
    logger.info("Transcribed %d bytes into %d words", len(raw), len(data.words))
    return data
