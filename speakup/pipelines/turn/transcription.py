"""Transcription stage (Stage 02) of the turn pipeline."""

from __future__ import annotations

import logging

from speakup.services.transcriber import TranscriptionError, TranscriptionTimeoutError

from .errors import PipelineTimeout, TranscriptionFailed
from .types import Transcriber, ValidatedAudio

logger = logging.getLogger("speakup.pipeline")
transcript_logger = logging.getLogger("speakup.logs.transcript")


async def transcribe_answer(transcriber: Transcriber, audio: ValidatedAudio) -> str:
    """Return the trimmed transcript; an empty string means no speech was detected."""

    try:
        result = await transcriber.transcribe(audio.data)
    except TranscriptionTimeoutError as exc:
        logger.error("Transcription polling gave up: %s", exc)
        raise PipelineTimeout("Transcription did not finish in time") from exc
    except TranscriptionError as exc:
        logger.exception("Transcription failed", exc_info=exc)
        raise TranscriptionFailed(f"Transcription failed: {exc}") from exc

    transcript = (result.transcript or "").strip()
    transcript_logger.info(
        "Transcript job=%s chars=%s text=%s",
        result.transcript_id,
        len(transcript),
        transcript,
    )
    return transcript


__all__ = ["transcribe_answer"]
