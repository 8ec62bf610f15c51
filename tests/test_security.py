from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from speakup.main import app
from speakup.utils import (
    AuthenticationError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


def test_password_hash_round_trip():
    hashed = hash_password("correct horse battery")

    assert hashed != "correct horse battery"
    assert verify_password("correct horse battery", hashed) is True
    assert verify_password("wrong horse battery", hashed) is False


def test_password_hashes_are_salted():
    assert hash_password("same-password") != hash_password("same-password")


def test_access_token_carries_subject_and_user():
    user = SimpleNamespace(id=3, name="Ana", email="ana@example.com")

    payload = decode_access_token(create_access_token("3", user=user))

    assert payload.sub == "3"
    assert payload.user == {"id": 3, "name": "Ana", "email": "ana@example.com"}


def test_expired_or_tampered_tokens_are_rejected():
    expired = create_access_token("3", expires_delta=timedelta(seconds=-5))
    with pytest.raises(AuthenticationError):
        decode_access_token(expired)

    token = create_access_token("3")
    with pytest.raises(AuthenticationError):
        decode_access_token(token[:-2] + ("aa" if not token.endswith("aa") else "bb"))


def test_candidate_routes_require_a_bearer_token():
    response = TestClient(app).get("/user")

    assert response.status_code == 401
    assert response.json()["success"] is False
