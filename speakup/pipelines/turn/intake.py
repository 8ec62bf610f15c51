"""Audio intake and validation (Stage 01 of the turn pipeline).

Everything here is local except the transcoder call, and it all runs before
any vendor sees the audio so malformed uploads never burn transcription or
assessment quota.
"""

from __future__ import annotations

import logging
import mimetypes
from typing import Final, Mapping

from speakup.config.settings import PipelineConfig
from speakup.services.transcode import AudioConversionError

from .errors import InvalidInput, TranscodeError
from .types import AudioUpload, Transcoder, ValidatedAudio

logger = logging.getLogger("speakup.pipeline")

WAV_HEADER_SIZE: Final[int] = 44
RIFF_MARKER: Final[bytes] = b"RIFF"
WAVE_MARKER: Final[bytes] = b"WAVE"

_ALLOWED_CONTAINERS: Final[Mapping[str, frozenset[str]]] = {
    ".wav": frozenset({"audio/wav", "audio/x-wav", "audio/wave"}),
    ".webm": frozenset({"audio/webm", "video/webm"}),
}
_NEEDS_TRANSCODE: Final[frozenset[str]] = frozenset({".webm"})


def resolve_content_type(filename: str | None, content_type: str | None) -> str:
    """Return the bare mime type, guessing from the filename when the client sent none."""

    resolved = content_type
    if not resolved and filename:
        resolved, _ = mimetypes.guess_type(filename)
    return (resolved or "").split(";", 1)[0].strip().lower()


def container_extension(filename: str, content_type: str) -> str | None:
    """Return the allow-listed extension when the extension/mime pair matches."""

    lowered = (filename or "").lower()
    mime = resolve_content_type(filename, content_type)
    for extension, mime_types in _ALLOWED_CONTAINERS.items():
        if lowered.endswith(extension) and mime in mime_types:
            return extension
    return None


def has_wav_header(buffer: bytes) -> bool:
    """Check the RIFF marker at bytes 0-3 and the WAVE marker at bytes 8-11."""

    if len(buffer) < WAV_HEADER_SIZE:
        return False
    return buffer[0:4] == RIFF_MARKER and buffer[8:12] == WAVE_MARKER


async def validate_upload(
    upload: AudioUpload,
    *,
    config: PipelineConfig,
    transcoder: Transcoder | None = None,
) -> ValidatedAudio:
    """Reject unusable uploads and return canonical PCM WAV bytes."""

    data = upload.data
    if not data:
        raise InvalidInput("Empty audio file")
    if len(data) > config.max_audio_bytes:
        raise InvalidInput("Audio file too large")
    if len(data) < config.min_audio_bytes:
        raise InvalidInput("Audio file too small")

    extension = container_extension(upload.filename, upload.content_type)
    if extension is None:
        raise InvalidInput("Only .wav or .webm audio files are allowed")

    if extension not in _NEEDS_TRANSCODE:
        if not has_wav_header(data):
            logger.error(
                "Invalid WAV format detected size=%s head=%s",
                len(data),
                data[:12].hex(),
            )
            raise InvalidInput("Invalid WAV format - corrupted or missing RIFF header")
        return ValidatedAudio(data=data)

    if not config.transcoding_enabled or transcoder is None:
        raise InvalidInput("Only .wav audio files are accepted")

    try:
        converted = await transcoder.to_wav(data, input_format=extension.lstrip("."))
    except AudioConversionError as exc:
        logger.exception("webm to wav conversion failed", exc_info=exc)
        raise TranscodeError("webm to wav conversion failed") from exc

    if not has_wav_header(converted):
        logger.error("Converted audio is malformed size=%s", len(converted))
        raise TranscodeError("webm to wav conversion produced an invalid WAV file")

    if len(converted) < config.min_audio_bytes:
        logger.error("Converted audio is too small size=%s", len(converted))
        raise TranscodeError("webm to wav conversion produced too little audio")

    logger.info("WebM to WAV conversion successful size=%s", len(converted))
    return ValidatedAudio(data=converted, transcoded=True)


__all__ = [
    "WAV_HEADER_SIZE",
    "container_extension",
    "has_wav_header",
    "resolve_content_type",
    "validate_upload",
]
