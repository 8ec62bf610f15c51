"""HTTP surface of /user with authentication and vendors overridden."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from speakup.controllers.dependencies import (
    get_candidate_store,
    get_current_user,
    get_llm_client,
    get_turn_pipeline,
)
from speakup.main import app
from tests.fakes import FakeLlm, FakeTranscriber, make_wav

USER = SimpleNamespace(id=11, email="ana@example.com", name="Ana")


@pytest.fixture
def wiring(build_pipeline):
    """Collaborators served by the overridden providers; tests may swap them."""

    return {"pipeline": build_pipeline(), "llm": FakeLlm()}


@pytest.fixture
def client(store, wiring):
    """Bypass authentication and external integrations for the test client."""

    app.dependency_overrides[get_current_user] = lambda: USER
    app.dependency_overrides[get_candidate_store] = lambda: store
    app.dependency_overrides[get_turn_pipeline] = lambda: wiring["pipeline"]
    app.dependency_overrides[get_llm_client] = lambda: wiring["llm"]

    yield TestClient(app)

    app.dependency_overrides.clear()


def _post_wav(client, data: bytes, filename: str = "answer.wav", content_type: str = "audio/wav"):
    return client.post("/user/answer", files={"wav": (filename, data, content_type)})


def test_profile_requires_registration(client):
    response = client.get("/user")

    assert response.status_code == 403
    assert response.json() == {"success": False, "message": "User not registered"}


def test_registration_creates_profile_with_zero_averages(client, wiring):
    wiring["llm"] = FakeLlm(
        '```json\n{"success": true, "message": "Backend developer from Lima", '
        '"firstQuestion": "What are you building right now?"}\n```'
    )

    response = client.post("/user/register", json={"info": "I write Python services"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Backend developer from Lima",
        "firstQuestion": "What are you building right now?",
    }

    profile = client.get("/user").json()
    assert profile["success"] is True
    assert profile["message"] == "User data fetched sucessfully"
    assert profile["user"]["email"] == "ana@example.com"
    assert profile["user"]["candidate"] == {
        "context": "Backend developer from Lima",
        "nextQuestion": "What are you building right now?",
        "accuracyScore": 0.0,
        "pronunciationScore": 0.0,
        "fluencyScore": 0.0,
        "completenessScore": 0.0,
    }


def test_registering_twice_is_rejected(client, store):
    store.register(USER.id)

    response = client.post("/user/register", json={"info": "again"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "The user is already Registered"}


def test_unusable_description_creates_no_profile(client, store, wiring):
    wiring["llm"] = FakeLlm('{"success": false, "message": "Please tell me more"}')

    response = client.post("/user/register", json={"info": "hi"})

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert store.profiles == {}
    assert store.releases == 1


def test_answer_returns_assessment_in_camel_case(client, store):
    store.register(USER.id)

    response = _post_wav(client, make_wav(4096))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["recognizedText"] == "I enjoy building APIs"
    assert body["nextQuestion"] == "What did you ship last month?"
    assert body["url"].startswith("https://")
    assert body["assessment"] == {
        "recognizedText": "I enjoy building APIs",
        "accuracyScore": 80.0,
        "pronunciationScore": 90.0,
        "fluencyScore": 70.0,
        "completenessScore": 100.0,
        "rawJson": {"NBest": []},
    }

    candidate = client.get("/user").json()["user"]["candidate"]
    assert candidate["accuracyScore"] == 80.0
    assert candidate["nextQuestion"] == "What did you ship last month?"


def test_answer_without_speech_reports_it(client, store, wiring, build_pipeline):
    store.register(USER.id)
    wiring["pipeline"] = build_pipeline(transcriber=FakeTranscriber(transcript=""))

    response = _post_wav(client, make_wav(4096))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["recognizedText"] == ""
    assert body["assessment"] is None
    assert body["message"] == "Audio uploaded but no speech was detected"


def test_invalid_audio_uses_the_error_envelope(client, store, transcriber):
    store.register(USER.id)

    response = _post_wav(client, b"RIFX" + b"\x00" * 4092)

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "RIFF" in response.json()["message"]
    assert transcriber.calls == []


def test_answer_before_registration_is_rejected(client):
    response = _post_wav(client, make_wav(4096))

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": "User registration is not completed",
    }


def test_history_pages_oldest_first_with_cursor(client, store):
    store.register(USER.id)
    turns = [store.add_turn(USER.id, f"Q{i}", f"A{i}") for i in range(25)]

    first = client.get("/user/history").json()
    assert first["success"] is True
    assert [item["bot"] for item in first["data"]] == [f"Q{i}" for i in range(5, 25)]
    assert first["nextCursor"] == str(turns[5].id)
    assert set(first["data"][0]) == {"id", "bot", "user", "userAudio", "createdAt"}

    second = client.get("/user/history", params={"cursorId": first["nextCursor"]}).json()
    assert [item["user"] for item in second["data"]] == [f"A{i}" for i in range(5)]
    assert second["nextCursor"] is None


def test_health_endpoint(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
