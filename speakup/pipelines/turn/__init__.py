"""Answer turn pipeline package.

Modules follow the order in which `/user/answer` executes:

1. `intake` – allow-list, size and WAV header checks, optional transcoding.
2. `transcription` – speech-to-text with a bounded status poll.
3. `assessment` – best-effort pronunciation scoring.
4. `aggregation` – per-axis running averages.
5. `dialogue` – next-question generation (and the registration opener).

`runner.TurnPipeline` strings them together; `flow` documents the stages.
"""

from .aggregation import recompute_averages, samples_from_assessment
from .assessment import assess_answer
from .dialogue import (
    RegistrationOutcome,
    build_conversation,
    generate_first_question,
    generate_next_question,
)
from .errors import (
    AssessmentUnavailable,
    GenerationError,
    InvalidInput,
    PipelineTimeout,
    RegistrationRequired,
    StoreError,
    TranscodeError,
    TranscriptionFailed,
    TurnPipelineError,
)
from .flow import AnswerTurnPipeline, PipelineStage, TurnState
from .intake import has_wav_header, validate_upload
from .locks import CandidateLocks
from .runner import NO_SPEECH_MESSAGE, TurnPipeline
from .transcription import transcribe_answer
from .types import AudioUpload, TurnResult, ValidatedAudio

__all__ = [
    "AnswerTurnPipeline",
    "AssessmentUnavailable",
    "AudioUpload",
    "CandidateLocks",
    "GenerationError",
    "InvalidInput",
    "NO_SPEECH_MESSAGE",
    "PipelineStage",
    "PipelineTimeout",
    "RegistrationOutcome",
    "RegistrationRequired",
    "StoreError",
    "TranscodeError",
    "TranscriptionFailed",
    "TurnPipeline",
    "TurnPipelineError",
    "TurnResult",
    "TurnState",
    "ValidatedAudio",
    "assess_answer",
    "build_conversation",
    "generate_first_question",
    "generate_next_question",
    "has_wav_header",
    "recompute_averages",
    "samples_from_assessment",
    "transcribe_answer",
    "validate_upload",
]
