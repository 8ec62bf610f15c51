"""SQLAlchemy model for individual pronunciation score samples."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, Enum as SqlEnum, Float, ForeignKey, Uuid

from speakup.domain.models import ScoreAxis
from speakup.models.base import Base


class ScoreSampleRecord(Base):
    __tablename__ = "score_samples"

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
    candidate_id = Column(
        ForeignKey("candidates.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    turn_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("chat_turns.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    axis = Column(
        SqlEnum(ScoreAxis, name="score_axis"),
        nullable=False,
        index=True,
    )
    value = Column(Float, nullable=False)
    created_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )


__all__ = ["ScoreSampleRecord"]
