"""AssemblyAI client against a mocked transport, plus the stage error mapping."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from speakup.config.settings import AssemblyAIConfig
from speakup.pipelines.turn import (
    PipelineTimeout,
    TranscriptionFailed,
    ValidatedAudio,
    transcribe_answer,
)
from speakup.services.errors import ServiceConfigurationError
from speakup.services.transcriber import (
    AssemblyAITranscriber,
    TranscriptionError,
    TranscriptionTimeoutError,
)
from tests.fakes import FakeTranscriber, make_wav

BASE_URL = "https://assembly.test"


def _config(**overrides) -> AssemblyAIConfig:
    values = {
        "api_key": "test-key",
        "base_url": BASE_URL,
        "poll_interval_seconds": 0.0,
        "max_poll_attempts": 3,
    }
    values.update(overrides)
    return AssemblyAIConfig(**values)


class VendorScript:
    """Answers upload/submit and then replays the given status payloads."""

    def __init__(self, statuses, *, upload_status: int = 200) -> None:
        self.statuses = list(statuses)
        self.upload_status = upload_status
        self.polls = 0
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/v2/upload":
            if self.upload_status != 200:
                return httpx.Response(self.upload_status, text="upstream down")
            return httpx.Response(200, json={"upload_url": "https://cdn.test/blob"})
        if request.url.path == "/v2/transcript" and request.method == "POST":
            return httpx.Response(200, json={"id": "tx-1", "status": "queued"})
        if request.url.path == "/v2/transcript/tx-1":
            payload = self.statuses[min(self.polls, len(self.statuses) - 1)]
            self.polls += 1
            return httpx.Response(200, json=payload)
        return httpx.Response(404)


def _transcribe(script: VendorScript, config: AssemblyAIConfig | None = None):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(script)) as client:
            transcriber = AssemblyAITranscriber(config or _config(), http_client=client)
            return await transcriber.transcribe(make_wav(2048))

    return asyncio.run(_run())


def test_completed_job_returns_text_after_polling():
    script = VendorScript(
        [
            {"status": "processing"},
            {"status": "completed", "text": "I like distributed systems."},
        ]
    )

    result = _transcribe(script)

    assert result.transcript == "I like distributed systems."
    assert result.transcript_id == "tx-1"
    assert script.polls == 2


def test_requests_carry_the_api_key_and_speech_model():
    script = VendorScript([{"status": "completed", "text": "hi"}])

    _transcribe(script)

    upload, submit = script.requests[0], script.requests[1]
    assert upload.headers["authorization"] == "test-key"
    assert json.loads(submit.content) == {
        "audio_url": "https://cdn.test/blob",
        "speech_model": "universal",
    }


def test_completed_job_without_text_is_an_empty_transcript():
    result = _transcribe(VendorScript([{"status": "completed", "text": None}]))

    assert result.transcript == ""


def test_error_status_carries_the_vendor_detail():
    script = VendorScript([{"status": "error", "error": "audio too short"}])

    with pytest.raises(TranscriptionError, match="audio too short"):
        _transcribe(script)


def test_polling_gives_up_after_max_attempts():
    script = VendorScript([{"status": "processing"}])

    with pytest.raises(TranscriptionTimeoutError):
        _transcribe(script)
    assert script.polls == 3


def test_http_failure_is_a_transcription_error():
    with pytest.raises(TranscriptionError, match="503"):
        _transcribe(VendorScript([], upload_status=503))


def test_missing_api_key_fails_at_construction():
    with pytest.raises(ServiceConfigurationError):
        AssemblyAITranscriber(_config(api_key=None))


def test_stage_maps_poll_exhaustion_to_pipeline_timeout():
    transcriber = FakeTranscriber(error=TranscriptionTimeoutError("still processing"))

    with pytest.raises(PipelineTimeout):
        asyncio.run(transcribe_answer(transcriber, ValidatedAudio(make_wav())))


def test_stage_maps_vendor_errors_to_transcription_failed():
    transcriber = FakeTranscriber(error=TranscriptionError("bad audio"))

    with pytest.raises(TranscriptionFailed):
        asyncio.run(transcribe_answer(transcriber, ValidatedAudio(make_wav())))


def test_stage_trims_whitespace_only_transcripts_to_empty():
    transcriber = FakeTranscriber(transcript="  \n ")

    assert asyncio.run(transcribe_answer(transcriber, ValidatedAudio(make_wav()))) == ""
