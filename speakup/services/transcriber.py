"""AssemblyAI transcription over its REST API (upload, submit, poll)."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from speakup.config.settings import AssemblyAIConfig
from speakup.services.errors import ServiceConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptionResult:
    """Structured transcription outcome returned to the pipeline."""

    transcript: str
    transcript_id: str | None = None


class TranscriptionError(RuntimeError):
    """Raised when the vendor fails to process audio successfully."""


class TranscriptionTimeoutError(TranscriptionError):
    """Raised when the job is still running after the last allowed status check."""


class AssemblyAITranscriber:
    """High-level facade for batch transcription jobs."""

    def __init__(
        self,
        config: AssemblyAIConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not config.api_key or not config.api_key.get_secret_value():
            raise ServiceConfigurationError("Missing AssemblyAI API configuration.")
        self._config = config
        self._base_url = config.base_url.rstrip("/")
        self._headers = {"authorization": config.api_key.get_secret_value()}
        self._http_client = http_client

    async def transcribe(self, audio_bytes: bytes) -> TranscriptionResult:
        """Upload audio, start a job and wait for its terminal status."""

        if not audio_bytes:
            raise TranscriptionError("The uploaded audio file is empty.")

        if self._http_client is not None:
            return await self._run(self._http_client, audio_bytes)

        async with httpx.AsyncClient(
            timeout=self._config.request_timeout_seconds
        ) as client:
            return await self._run(client, audio_bytes)

    async def _run(
        self, client: httpx.AsyncClient, audio_bytes: bytes
    ) -> TranscriptionResult:
        try:
            upload_url = await self._upload(client, audio_bytes)
            transcript_id = await self._submit(client, upload_url)
            return await self._poll(client, transcript_id)
        except httpx.HTTPStatusError as exc:
            raise TranscriptionError(
                f"Transcription vendor returned {exc.response.status_code}: "
                f"{exc.response.text}"
            ) from exc
        except httpx.RequestError as exc:
            raise TranscriptionError(
                f"Unable to connect to transcription vendor: {exc}"
            ) from exc

    async def _upload(self, client: httpx.AsyncClient, audio_bytes: bytes) -> str:
        response = await client.post(
            f"{self._base_url}/v2/upload",
            content=audio_bytes,
            headers=self._headers,
        )
        response.raise_for_status()
        return _require(_json(response), "upload_url")

    async def _submit(self, client: httpx.AsyncClient, upload_url: str) -> str:
        response = await client.post(
            f"{self._base_url}/v2/transcript",
            json={
                "audio_url": upload_url,
                "speech_model": self._config.speech_model,
            },
            headers=self._headers,
        )
        response.raise_for_status()
        return str(_require(_json(response), "id"))

    async def _poll(
        self, client: httpx.AsyncClient, transcript_id: str
    ) -> TranscriptionResult:
        endpoint = f"{self._base_url}/v2/transcript/{transcript_id}"
        max_attempts = self._config.max_poll_attempts

        for attempt in range(1, max_attempts + 1):
            response = await client.get(endpoint, headers=self._headers)
            response.raise_for_status()
            payload = _json(response)
            job_status = payload.get("status")

            if job_status == "completed":
                return TranscriptionResult(
                    transcript=payload.get("text") or "",
                    transcript_id=transcript_id,
                )
            if job_status == "error":
                raise TranscriptionError(
                    f"Transcription failed: {payload.get('error')}"
                )

            logger.debug(
                "Transcript %s status=%s attempt=%s/%s",
                transcript_id,
                job_status,
                attempt,
                max_attempts,
            )
            if attempt < max_attempts:
                await asyncio.sleep(self._config.poll_interval_seconds)

        raise TranscriptionTimeoutError(
            f"Transcript {transcript_id} not finished after {max_attempts} status checks."
        )


def _json(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as exc:
        raise TranscriptionError("Transcription vendor returned invalid JSON.") from exc
    if not isinstance(payload, dict):
        raise TranscriptionError("Transcription vendor returned an unexpected payload.")
    return payload


def _require(payload: dict[str, Any], key: str) -> Any:
    value = payload.get(key)
    if not value:
        raise TranscriptionError(f"Transcription vendor response is missing '{key}'.")
    return value


__all__ = [
    "AssemblyAITranscriber",
    "TranscriptionError",
    "TranscriptionResult",
    "TranscriptionTimeoutError",
]
