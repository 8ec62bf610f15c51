"""Service layer helpers for external integrations.

The Azure pronunciation assessor is imported from
``speakup.services.pronunciation`` directly so the speech SDK is only loaded
where assessment is wired up.
"""

from .errors import AssessmentUnavailable, ServiceConfigurationError
from .llm_client import BedrockLlmClient, LlmInvocationError
from .storage import S3AnswerStorage, StorageError
from .transcode import AudioConversionError, FfmpegTranscoder
from .transcriber import (
    AssemblyAITranscriber,
    TranscriptionError,
    TranscriptionResult,
    TranscriptionTimeoutError,
)

__all__ = [
    "AssessmentUnavailable",
    "ServiceConfigurationError",
    "BedrockLlmClient",
    "LlmInvocationError",
    "S3AnswerStorage",
    "StorageError",
    "FfmpegTranscoder",
    "AudioConversionError",
    "AssemblyAITranscriber",
    "TranscriptionError",
    "TranscriptionResult",
    "TranscriptionTimeoutError",
]
