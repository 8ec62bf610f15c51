"""Authentication controller providing signup and login endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from speakup.config.settings import settings
from speakup.controllers.dependencies import SessionDep
from speakup.models.user import User as UserModel
from speakup.telemetry import increment_login
from speakup.utils import create_access_token, hash_password, verify_password
from speakup.views import LoginRequest, SignupRequest, SuccessResponse, TokenResponse

router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)


@router.post(
    "/signup",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
)
async def signup(payload: SignupRequest, session: SessionDep) -> SuccessResponse:
    """Create an account; the candidate profile is completed later via /user/register."""

    email = payload.email.lower()
    result = await session.execute(select(UserModel).where(UserModel.email == email))
    if result.unique().scalar_one_or_none() is not None:
        raise HTTPException(status_code=400, detail="Email is already registered")

    session.add(
        UserModel(
            email=email,
            name=payload.name.strip(),
            password_hash=hash_password(payload.password),
        )
    )
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise HTTPException(status_code=400, detail="Email is already registered") from exc

    logger.info("Account created email=%s", email)
    return SuccessResponse(message="User created successfully")


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, session: SessionDep) -> TokenResponse:
    """Validate credentials and issue a JWT access token."""

    result = await session.execute(
        select(UserModel).where(UserModel.email == payload.email.lower())
    )
    user = result.unique().scalar_one_or_none()

    if not user or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    access_token = create_access_token(subject=str(user.id), user=user)
    increment_login()

    return TokenResponse(
        access_token=access_token,
        expires_in=settings.security.access_token_expires_minutes * 60,
        name=user.name,
    )
