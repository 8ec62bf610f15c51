"""Common FastAPI dependencies reused across controllers.

Vendor clients are built once per process from settings. Missing credentials
for a required vendor surface as ``ServiceConfigurationError`` on first use;
the pronunciation assessor is optional and resolves to ``None`` instead.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from speakup.application.interfaces import CandidateStoreInterface
from speakup.config.settings import settings
from speakup.database import get_session
from speakup.infrastructure.persistence import SQLAlchemyCandidateStore
from speakup.models.user import User as UserModel
from speakup.pipelines.turn import CandidateLocks, TurnPipeline
from speakup.pipelines.turn.types import PronunciationAssessor
from speakup.services import (
    AssemblyAITranscriber,
    BedrockLlmClient,
    FfmpegTranscoder,
    S3AnswerStorage,
)
from speakup.utils import AuthenticationError, decode_access_token

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")
SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: SessionDep,
) -> UserModel:
    """Resolve and validate the user referenced by the bearer token."""

    try:
        payload = decode_access_token(token)
        user_id = int(payload.sub)
    except (AuthenticationError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        ) from None

    result = await session.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.unique().scalar_one_or_none()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user


CurrentUserDep = Annotated[UserModel, Depends(get_current_user)]


def get_candidate_store(session: SessionDep) -> CandidateStoreInterface:
    return SQLAlchemyCandidateStore(session)


CandidateStoreDep = Annotated[CandidateStoreInterface, Depends(get_candidate_store)]


@lru_cache(maxsize=1)
def get_transcoder() -> Optional[FfmpegTranscoder]:
    if not settings.pipeline.transcoding_enabled:
        return None
    return FfmpegTranscoder(settings.pipeline.ffmpeg_binary)


@lru_cache(maxsize=1)
def get_answer_storage() -> S3AnswerStorage:
    return S3AnswerStorage(settings.s3)


@lru_cache(maxsize=1)
def get_transcriber() -> AssemblyAITranscriber:
    return AssemblyAITranscriber(settings.assemblyai)


@lru_cache(maxsize=1)
def get_pronunciation_assessor() -> Optional[PronunciationAssessor]:
    if not settings.azure_speech.configured:
        logger.warning("Azure Speech is not configured; answers will not be scored")
        return None

    from speakup.services.pronunciation import AzurePronunciationAssessor

    return AzurePronunciationAssessor(settings.azure_speech)


@lru_cache(maxsize=1)
def get_llm_client() -> BedrockLlmClient:
    return BedrockLlmClient(settings.bedrock)


LlmClientDep = Annotated[BedrockLlmClient, Depends(get_llm_client)]


@lru_cache(maxsize=1)
def get_turn_pipeline() -> TurnPipeline:
    return TurnPipeline(
        transcoder=get_transcoder(),
        storage=get_answer_storage(),
        transcriber=get_transcriber(),
        assessor=get_pronunciation_assessor(),
        llm=get_llm_client(),
        config=settings.pipeline,
        locks=CandidateLocks(),
    )


TurnPipelineDep = Annotated[TurnPipeline, Depends(get_turn_pipeline)]


__all__ = [
    "CandidateStoreDep",
    "CurrentUserDep",
    "LlmClientDep",
    "SessionDep",
    "TurnPipelineDep",
    "get_candidate_store",
    "get_current_user",
    "get_llm_client",
    "get_turn_pipeline",
    "oauth2_scheme",
]
