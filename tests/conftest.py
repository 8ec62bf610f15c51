"""Shared fixtures: in-memory store, vendor fakes and a pipeline wired to them."""

from __future__ import annotations

from pathlib import Path
import sys

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from speakup.config.settings import PipelineConfig  # noqa: E402
from speakup.pipelines.turn import CandidateLocks, TurnPipeline  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeAssessor,
    FakeLlm,
    FakeStorage,
    FakeStore,
    FakeTranscoder,
    FakeTranscriber,
)


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        min_audio_bytes=1000,
        max_audio_bytes=10 * 1024 * 1024,
        transcoding_enabled=True,
        history_limit=20,
        turn_timeout_seconds=5.0,
        serialize_per_candidate=True,
    )


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def assessor() -> FakeAssessor:
    return FakeAssessor()


@pytest.fixture
def llm() -> FakeLlm:
    return FakeLlm()


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def transcoder() -> FakeTranscoder:
    return FakeTranscoder()


@pytest.fixture
def build_pipeline(pipeline_config, transcoder, storage, transcriber, assessor, llm):
    """Factory so tests can swap a single collaborator or config value."""

    def _build(**overrides) -> TurnPipeline:
        config = overrides.pop("config", pipeline_config)
        parts = {
            "transcoder": transcoder,
            "storage": storage,
            "transcriber": transcriber,
            "assessor": assessor,
            "llm": llm,
        }
        parts.update(overrides)
        return TurnPipeline(config=config, locks=CandidateLocks(), **parts)

    return _build
