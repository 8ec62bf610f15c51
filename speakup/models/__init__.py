"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .candidate import Candidate  # noqa: F401
from .chat_turn import ChatTurn  # noqa: F401
from .score_sample import ScoreSampleRecord  # noqa: F401
from .user import User  # noqa: F401

__all__ = [
    "Base",
    "User",
    "Candidate",
    "ChatTurn",
    "ScoreSampleRecord",
]
