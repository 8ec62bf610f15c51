"""Candidate interview endpoints.

`POST /user/answer` runs the answer turn pipeline; see
`speakup.pipelines.turn.flow.AnswerTurnPipeline` for the stage map:

1. Intake and validation of the uploaded recording.
2. Transcription, then pronunciation assessment against the transcript.
3. Running-average aggregation and next-question generation.
4. One transaction committing turn, samples and profile.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, File, HTTPException, Query, UploadFile, status

from speakup.application.use_cases import (
    GetCandidateProfileUseCase,
    ListChatHistoryUseCase,
    RegisterCandidateUseCase,
)
from speakup.controllers.dependencies import (
    CandidateStoreDep,
    CurrentUserDep,
    LlmClientDep,
    TurnPipelineDep,
)
from speakup.pipelines.turn import AnswerTurnPipeline, AudioUpload
from speakup.views import (
    AnswerResponse,
    AssessmentView,
    CandidateView,
    ChatHistoryResponse,
    ChatMessageView,
    ErrorResponse,
    RegisterRequest,
    RegisterResponse,
    UserProfileResponse,
    UserProfileView,
)

router = APIRouter(
    prefix="/user",
    tags=["candidate"],
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
)

logger = logging.getLogger(__name__)

PIPELINE_STAGES = tuple(AnswerTurnPipeline.describe())
"""Ordered pipeline metadata used for quick reference and debugging."""

_ANSWER_UPLOAD = File(...)


@router.get("", response_model=UserProfileResponse)
async def get_profile(
    current_user: CurrentUserDep,
    store: CandidateStoreDep,
) -> UserProfileResponse:
    profile = await GetCandidateProfileUseCase(store).execute(current_user.id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User not registered",
        )

    return UserProfileResponse(
        user=UserProfileView(
            id=current_user.id,
            email=current_user.email,
            name=current_user.name,
            candidate=CandidateView.from_domain(profile),
        )
    )


@router.post("/register", response_model=RegisterResponse)
async def register(
    payload: RegisterRequest,
    current_user: CurrentUserDep,
    store: CandidateStoreDep,
    llm: LlmClientDep,
) -> RegisterResponse:
    """Create the candidate profile and return the opening question."""

    try:
        outcome = await RegisterCandidateUseCase(store, llm).execute(
            current_user.id, payload.info
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return RegisterResponse(
        success=outcome.success,
        message=outcome.message,
        first_question=outcome.first_question,
    )


@router.post("/answer", response_model=AnswerResponse)
async def answer(
    current_user: CurrentUserDep,
    store: CandidateStoreDep,
    pipeline: TurnPipelineDep,
    wav: UploadFile = _ANSWER_UPLOAD,
) -> AnswerResponse:
    """Score a spoken answer and advance the interview."""

    upload = AudioUpload(
        data=await wav.read(),
        filename=wav.filename or "",
        content_type=wav.content_type or "",
    )
    logger.info(
        "Answer received user=%s file=%s type=%s size=%s",
        current_user.id,
        upload.filename,
        upload.content_type,
        len(upload.data),
    )

    result = await pipeline.run(current_user.id, upload, store)

    return AnswerResponse(
        url=result.url,
        recognized_text=result.recognized_text,
        assessment=AssessmentView.from_domain(result.assessment) if result.assessment else None,
        next_question=result.next_question,
        message=result.message,
    )


@router.get("/history", response_model=ChatHistoryResponse)
async def chat_history(
    current_user: CurrentUserDep,
    store: CandidateStoreDep,
    cursor_id: Optional[UUID] = Query(default=None, alias="cursorId"),
) -> ChatHistoryResponse:
    page = await ListChatHistoryUseCase(store).execute(current_user.id, cursor_id)
    return ChatHistoryResponse(
        data=[ChatMessageView.from_domain(turn) for turn in page.turns],
        next_cursor=page.next_cursor,
    )
