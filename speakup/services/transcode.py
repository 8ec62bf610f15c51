"""ffmpeg-backed conversion of compressed uploads to canonical PCM WAV."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile

from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

CANONICAL_SAMPLE_RATE_HZ = 16000
CANONICAL_CHANNELS = 1


class AudioConversionError(RuntimeError):
    """Raised when ffmpeg cannot convert the uploaded container."""


class FfmpegTranscoder:
    """Convert audio containers to mono 16-bit 16 kHz WAV."""

    def __init__(
        self,
        ffmpeg_binary: str = "ffmpeg",
        *,
        sample_rate_hz: int = CANONICAL_SAMPLE_RATE_HZ,
        channels: int = CANONICAL_CHANNELS,
    ) -> None:
        self._ffmpeg_binary = ffmpeg_binary
        self._sample_rate_hz = sample_rate_hz
        self._channels = channels

    async def to_wav(self, audio_bytes: bytes, *, input_format: str | None = None) -> bytes:
        """Convert in a worker thread so the event loop keeps serving requests."""
        return await run_in_threadpool(self._to_wav_sync, audio_bytes, input_format)

    def _to_wav_sync(self, audio_bytes: bytes, input_format: str | None) -> bytes:
        """Synchronous ffmpeg conversion using a temporary file to support seeking."""
        suffix = f".{input_format}" if input_format else ".tmp"
        with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp_file:
            tmp_file.write(audio_bytes)
            tmp_path = tmp_file.name

        command = [self._ffmpeg_binary, "-y", "-loglevel", "error"]
        if input_format:
            command += ["-f", input_format]
        command += [
            "-i", tmp_path,
            "-acodec", "pcm_s16le",
            "-ac", str(self._channels),
            "-ar", str(self._sample_rate_hz),
            "-f", "wav",
            "pipe:1",
        ]

        try:
            process = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
        except FileNotFoundError as exc:
            raise AudioConversionError(
                f"ffmpeg binary '{self._ffmpeg_binary}' was not found"
            ) from exc
        except subprocess.CalledProcessError as exc:
            error_msg = exc.stderr.decode("utf-8", errors="replace") if exc.stderr else "No stderr"
            logger.error("ffmpeg failed. stderr: %s", error_msg)
            raise AudioConversionError(f"ffmpeg failed to convert audio to WAV: {error_msg}") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

        if not process.stdout:
            logger.warning(
                "ffmpeg produced empty output. stderr: %s",
                process.stderr.decode("utf-8", errors="replace"),
            )
        logger.info("Audio conversion completed. Output size: %s", len(process.stdout))
        return process.stdout


__all__ = ["FfmpegTranscoder", "AudioConversionError"]
