"""Schemas for the candidate interview endpoints under ``/user``.

Responses use camelCase keys on the wire; field names stay snake_case in code.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from speakup.domain.models import CandidateProfile, PronunciationAssessment, Turn


class RegisterRequest(BaseModel):
    info: str = Field(min_length=1, max_length=5000)


class RegisterResponse(BaseModel):
    success: bool
    message: str
    first_question: Optional[str] = Field(default=None, serialization_alias="firstQuestion")


class AssessmentView(BaseModel):
    recognized_text: str = Field(serialization_alias="recognizedText")
    accuracy_score: float = Field(serialization_alias="accuracyScore")
    pronunciation_score: float = Field(serialization_alias="pronunciationScore")
    fluency_score: float = Field(serialization_alias="fluencyScore")
    completeness_score: float = Field(serialization_alias="completenessScore")
    raw_json: Dict[str, Any] = Field(default_factory=dict, serialization_alias="rawJson")

    @classmethod
    def from_domain(cls, assessment: PronunciationAssessment) -> "AssessmentView":
        return cls(**assessment.model_dump())


class AnswerResponse(BaseModel):
    success: bool = True
    url: str
    recognized_text: str = Field(serialization_alias="recognizedText")
    assessment: Optional[AssessmentView] = None
    next_question: Optional[str] = Field(default=None, serialization_alias="nextQuestion")
    message: Optional[str] = None


class CandidateView(BaseModel):
    context: str
    next_question: str = Field(serialization_alias="nextQuestion")
    accuracy_score: float = Field(serialization_alias="accuracyScore")
    pronunciation_score: float = Field(serialization_alias="pronunciationScore")
    fluency_score: float = Field(serialization_alias="fluencyScore")
    completeness_score: float = Field(serialization_alias="completenessScore")

    @classmethod
    def from_domain(cls, profile: CandidateProfile) -> "CandidateView":
        return cls(
            context=profile.context,
            next_question=profile.next_question,
            accuracy_score=profile.accuracy_score,
            pronunciation_score=profile.pronunciation_score,
            fluency_score=profile.fluency_score,
            completeness_score=profile.completeness_score,
        )


class UserProfileView(BaseModel):
    id: int
    email: str
    name: str
    candidate: CandidateView


class UserProfileResponse(BaseModel):
    success: bool = True
    message: str = "User data fetched sucessfully"
    user: UserProfileView


class ChatMessageView(BaseModel):
    """One history entry, keyed the way the chat client renders it."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    bot: str
    user: str
    user_audio: str = Field(serialization_alias="userAudio")
    created_at: Optional[datetime] = Field(default=None, serialization_alias="createdAt")

    @classmethod
    def from_domain(cls, turn: Turn) -> "ChatMessageView":
        return cls(
            id=turn.id,
            bot=turn.bot_question,
            user=turn.human_answer,
            user_audio=turn.audio_url,
            created_at=turn.created_at,
        )


class ChatHistoryResponse(BaseModel):
    success: bool = True
    data: List[ChatMessageView]
    next_cursor: Optional[UUID] = Field(default=None, serialization_alias="nextCursor")


__all__ = [
    "AnswerResponse",
    "AssessmentView",
    "CandidateView",
    "ChatHistoryResponse",
    "ChatMessageView",
    "RegisterRequest",
    "RegisterResponse",
    "UserProfileResponse",
    "UserProfileView",
]
