"""Typed containers and collaborator protocols shared across the turn pipeline.

These live in their own module so the stages (`intake`, `transcription`,
`assessment`, `aggregation`, `dialogue`) and the `runner` can import them
without creating circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from speakup.domain.models import PronunciationAssessment
from speakup.services.transcriber import TranscriptionResult

from .flow import TurnState


@dataclass(frozen=True)
class AudioUpload:
    """Raw multipart upload as received by the controller."""

    data: bytes
    filename: str
    content_type: str


@dataclass(frozen=True)
class ValidatedAudio:
    """Canonical PCM WAV bytes that passed intake."""

    data: bytes
    transcoded: bool = False


@dataclass(frozen=True)
class TurnResult:
    """Outcome handed back to the HTTP layer for one answer."""

    state: TurnState
    url: str
    recognized_text: str
    assessment: Optional[PronunciationAssessment] = None
    next_question: Optional[str] = None
    message: Optional[str] = None


class Transcoder(Protocol):
    async def to_wav(self, audio_bytes: bytes, *, input_format: str | None = None) -> bytes:
        ...


class AnswerStorage(Protocol):
    async def upload_answer_audio(
        self, user_id: int, audio_bytes: bytes, *, content_type: str = "audio/wav"
    ) -> str:
        ...


class Transcriber(Protocol):
    async def transcribe(self, audio_bytes: bytes) -> TranscriptionResult:
        ...


class PronunciationAssessor(Protocol):
    async def assess(self, wav_bytes: bytes, reference_text: str) -> PronunciationAssessment:
        ...


class QuestionGenerator(Protocol):
    async def invoke(self, *, system_prompt: str, user_prompt: str) -> str | None:
        ...


__all__ = [
    "AudioUpload",
    "ValidatedAudio",
    "TurnResult",
    "Transcoder",
    "AnswerStorage",
    "Transcriber",
    "PronunciationAssessor",
    "QuestionGenerator",
]
