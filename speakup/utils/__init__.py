"""Utility helpers for the SpeakUp backend."""

from .security import (
    AuthenticationError,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)

__all__ = [
    "AuthenticationError",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
]
