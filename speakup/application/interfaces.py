from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from speakup.domain.models import (
    CandidateProfile,
    RunningAverages,
    ScoreAxis,
    ScoreSample,
    Turn,
)


class CandidateStoreInterface(ABC):
    """Persistence contract for candidate profiles, turns and score samples"""

    @abstractmethod
    async def get_profile(self, user_id: int) -> Optional[CandidateProfile]:
        ...

    @abstractmethod
    async def create_profile(
        self, user_id: int, context: str, next_question: str
    ) -> CandidateProfile:
        ...

    @abstractmethod
    async def recent_turns(self, user_id: int, limit: int) -> List[Turn]:
        """Return up to ``limit`` most recent turns, oldest first."""
        ...

    @abstractmethod
    async def turns_page(
        self, user_id: int, limit: int, before: Optional[UUID] = None
    ) -> List[Turn]:
        """Return up to ``limit`` turns newest first, older than ``before``."""
        ...

    @abstractmethod
    async def score_values(self, user_id: int) -> Dict[ScoreAxis, List[float]]:
        ...

    @abstractmethod
    async def release(self) -> None:
        """End the open read transaction so no connection is held across vendor calls."""
        ...

    @abstractmethod
    async def commit_turn(
        self,
        user_id: int,
        turn: Turn,
        samples: Sequence[ScoreSample],
        averages: Optional[RunningAverages],
        next_question: str,
    ) -> Turn:
        """Persist the turn, its samples, the averages and the next question atomically."""
        ...
