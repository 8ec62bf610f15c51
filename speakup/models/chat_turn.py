"""SQLAlchemy model for the append-only conversation history."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship

from speakup.models.base import Base


class ChatTurn(Base):
    __tablename__ = "chat_turns"

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
    bot_question = Column(Text, nullable=False)
    human_answer = Column(Text, nullable=False)
    audio_url = Column(Text, nullable=False)
    created_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        index=True,
    )

    # relationships
    candidate = relationship("Candidate", back_populates="turns")


__all__ = ["ChatTurn"]
