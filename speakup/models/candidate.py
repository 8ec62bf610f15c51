"""SQLAlchemy model for the candidate profile and its rolling scores."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from speakup.models.base import Base


class Candidate(Base):
    """Per-user interview state created by registration."""

    __tablename__ = "candidates"

    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    context = Column(Text, nullable=False)
    next_question = Column(Text, nullable=False)
    accuracy_score = Column(Float, nullable=False, default=0.0)
    pronunciation_score = Column(Float, nullable=False, default=0.0)
    fluency_score = Column(Float, nullable=False, default=0.0)
    completeness_score = Column(Float, nullable=False, default=0.0)
    created_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user = relationship("User", back_populates="candidate")
    turns = relationship(
        "ChatTurn",
        back_populates="candidate",
        cascade="all, delete-orphan",
        order_by="ChatTurn.created_at",
    )


__all__ = ["Candidate"]
