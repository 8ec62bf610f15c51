"""Pydantic schemas used as views in the MVC architecture."""

from .auth import LoginRequest, SignupRequest, TokenResponse
from .candidate import (
    AnswerResponse,
    AssessmentView,
    CandidateView,
    ChatHistoryResponse,
    ChatMessageView,
    RegisterRequest,
    RegisterResponse,
    UserProfileResponse,
    UserProfileView,
)
from .common import ErrorResponse, SuccessResponse

__all__ = [
    "AnswerResponse",
    "AssessmentView",
    "CandidateView",
    "ChatHistoryResponse",
    "ChatMessageView",
    "ErrorResponse",
    "LoginRequest",
    "RegisterRequest",
    "RegisterResponse",
    "SignupRequest",
    "SuccessResponse",
    "TokenResponse",
    "UserProfileResponse",
    "UserProfileView",
]
