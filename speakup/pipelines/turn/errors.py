"""Failure kinds raised by the answer turn pipeline.

Every error carries the HTTP status the controller layer answers with, so the
FastAPI exception handler can render ``{"success": false, "message": ...}``
without knowing which stage failed.
"""

from __future__ import annotations

from fastapi import status

# Absorbed by the assessment stage; re-exported so callers see one taxonomy.
from speakup.services.errors import AssessmentUnavailable


class TurnPipelineError(RuntimeError):
    """Base class for stage failures that abort a turn."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    outcome: str = "failed"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(TurnPipelineError):
    """The upload is empty, too small, not allow-listed or not a valid WAV."""

    status_code = status.HTTP_400_BAD_REQUEST
    outcome = "rejected_input"


class RegistrationRequired(TurnPipelineError):
    """The user has no candidate profile yet."""

    status_code = status.HTTP_400_BAD_REQUEST
    outcome = "unregistered"


class TranscodeError(TurnPipelineError):
    outcome = "transcode_failed"


class TranscriptionFailed(TurnPipelineError):
    outcome = "transcription_failed"


class GenerationError(TurnPipelineError):
    """The next question could not be generated or parsed."""

    outcome = "generation_failed"


class StoreError(TurnPipelineError):
    outcome = "store_failed"


class PipelineTimeout(TurnPipelineError):
    """A deadline expired: either the whole turn or the transcription poll."""

    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    outcome = "timed_out"


__all__ = [
    "TurnPipelineError",
    "InvalidInput",
    "RegistrationRequired",
    "TranscodeError",
    "TranscriptionFailed",
    "GenerationError",
    "StoreError",
    "PipelineTimeout",
    "AssessmentUnavailable",
]
