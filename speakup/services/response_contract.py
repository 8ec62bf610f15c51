"""Pydantic models for validating LLM JSON responses.

Registration and the dialogue-advance stage both run generated text through
these schemas so downstream code receives normalized, type-safe objects.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class ResponseContractError(RuntimeError):
    """Raised when the LLM response contract cannot be validated."""


class NextQuestionResponse(BaseModel):
    next_question: str = Field(alias="nextQuestion")

    model_config = {"populate_by_name": True, "extra": "allow"}

    @field_validator("next_question")
    @classmethod
    def require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("nextQuestion must not be empty")
        return value

    @classmethod
    def from_json(cls, payload: str) -> "NextQuestionResponse":
        return _parse(cls, payload)


class RegistrationResponse(BaseModel):
    success: bool
    message: str = ""
    first_question: Optional[str] = Field(default=None, alias="firstQuestion")

    model_config = {"populate_by_name": True, "extra": "allow"}

    @classmethod
    def from_json(cls, payload: str) -> "RegistrationResponse":
        return _parse(cls, payload)


def _parse(model: Type[_ModelT], payload: str) -> _ModelT:
    cleaned = clean_json_payload(payload)
    try:
        data: Any = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ResponseContractError(f"LLM returned malformed JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ResponseContractError("LLM returned JSON that is not an object.")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ResponseContractError(f"LLM JSON failed validation: {exc}") from exc


def clean_json_payload(payload: str) -> str:
    """Strip Markdown code blocks and find the first/last brace to extract JSON."""
    if not payload:
        return ""

    cleaned = payload.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]

    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    cleaned = cleaned.strip()

    start = cleaned.find("{")
    end = cleaned.rfind("}")

    if start != -1 and end != -1 and end > start:
        cleaned = cleaned[start : end + 1]

    return cleaned


__all__ = [
    "NextQuestionResponse",
    "RegistrationResponse",
    "ResponseContractError",
    "clean_json_payload",
]
