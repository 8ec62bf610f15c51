"""Application use cases for the candidate endpoints."""

from .candidate_use_cases import (
    HISTORY_PAGE_SIZE,
    ChatHistoryPage,
    GetCandidateProfileUseCase,
    ListChatHistoryUseCase,
    RegisterCandidateUseCase,
)

__all__ = [
    "HISTORY_PAGE_SIZE",
    "ChatHistoryPage",
    "GetCandidateProfileUseCase",
    "ListChatHistoryUseCase",
    "RegisterCandidateUseCase",
]
