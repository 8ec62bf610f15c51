"""High-level map of the answer turn pipeline.

``TurnPipeline`` in ``runner`` executes the stages; this module documents
the canonical order and the states a turn moves through so contributors can
jump straight to the relevant stage:

1. ``intake`` – allow-list, size and WAV header checks, optional transcoding.
2. ``transcription`` – upload to the speech-to-text vendor and poll the job.
3. ``assessment`` – pronunciation scoring; degrades to "no assessment".
4. ``aggregation`` – recompute the per-axis running averages.
5. ``dialogue`` – generate the next question and commit the turn.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List


class TurnState(str, Enum):
    """States a single answer turn moves through."""

    INTAKE = "intake"
    TRANSCRIBING = "transcribing"
    ASSESSING = "assessing"
    SKIPPED_NO_SPEECH = "skipped_no_speech"
    AGGREGATING = "aggregating"
    ADVANCING = "advancing"
    COMMITTED = "committed"

    @property
    def is_terminal_success(self) -> bool:
        return self in (TurnState.COMMITTED, TurnState.SKIPPED_NO_SPEECH)


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the turn pipeline."""

    order: int
    name: str
    module: str
    summary: str


class AnswerTurnPipeline:
    """Utility wrapper for documenting the `/user/answer` flow."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Audio Intake",
            "speakup.pipelines.turn.intake",
            "Check allow-list, size and RIFF/WAVE markers; transcode WebM to 16 kHz mono WAV.",
        ),
        PipelineStage(
            2,
            "Transcription",
            "speakup.pipelines.turn.transcription",
            "Upload to the speech-to-text vendor and poll the job until it is terminal.",
        ),
        PipelineStage(
            3,
            "Assessment",
            "speakup.pipelines.turn.assessment",
            "Score pronunciation against the transcript; failures degrade to no scores.",
        ),
        PipelineStage(
            4,
            "Aggregation",
            "speakup.pipelines.turn.aggregation",
            "Recompute per-axis averages over every stored sample plus the new ones.",
        ),
        PipelineStage(
            5,
            "Dialogue Advance",
            "speakup.pipelines.turn.dialogue",
            "Generate the next question and commit turn, samples and profile together.",
        ),
    ]

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)


__all__ = ["AnswerTurnPipeline", "PipelineStage", "TurnState"]
