from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from speakup.application.interfaces import CandidateStoreInterface
from speakup.domain.models import CandidateProfile, Turn
from speakup.pipelines.turn.dialogue import RegistrationOutcome, generate_first_question
from speakup.pipelines.turn.types import QuestionGenerator

HISTORY_PAGE_SIZE = 20


class RegisterCandidateUseCase:
    """Use case for turning a self description into a candidate profile"""

    def __init__(self, store: CandidateStoreInterface, llm: QuestionGenerator):
        self.store = store
        self.llm = llm

    async def execute(self, user_id: int, info: str) -> RegistrationOutcome:
        """Generate the profile summary and opening question, then persist them"""
        existing = await self.store.get_profile(user_id)
        if existing:
            raise ValueError("The user is already Registered")
        await self.store.release()

        outcome = await generate_first_question(self.llm, info)

        # An unusable description is reported back without creating a profile
        if outcome.success and outcome.first_question:
            await self.store.create_profile(
                user_id,
                context=outcome.message,
                next_question=outcome.first_question,
            )
        return outcome


class GetCandidateProfileUseCase:
    """Use case for retrieving a candidate profile"""

    def __init__(self, store: CandidateStoreInterface):
        self.store = store

    async def execute(self, user_id: int) -> Optional[CandidateProfile]:
        return await self.store.get_profile(user_id)


@dataclass(frozen=True)
class ChatHistoryPage:
    turns: List[Turn]
    next_cursor: Optional[UUID]


class ListChatHistoryUseCase:
    """Use case for paging through a candidate's conversation"""

    def __init__(self, store: CandidateStoreInterface, page_size: int = HISTORY_PAGE_SIZE):
        self.store = store
        self.page_size = page_size

    async def execute(self, user_id: int, cursor: Optional[UUID] = None) -> ChatHistoryPage:
        """Fetch newest first, return oldest first; a full page points at its oldest turn"""
        newest_first = await self.store.turns_page(user_id, self.page_size, before=cursor)
        next_cursor = None
        if len(newest_first) == self.page_size:
            next_cursor = newest_first[-1].id
        return ChatHistoryPage(turns=list(reversed(newest_first)), next_cursor=next_cursor)
