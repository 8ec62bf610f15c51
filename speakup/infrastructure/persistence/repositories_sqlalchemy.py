from typing import Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from speakup.application.interfaces import CandidateStoreInterface
from speakup.domain.models import (
    CandidateProfile,
    RunningAverages,
    ScoreAxis,
    ScoreSample,
    Turn,
)
from speakup.models.candidate import Candidate
from speakup.models.chat_turn import ChatTurn
from speakup.models.score_sample import ScoreSampleRecord
from speakup.pipelines.turn.errors import StoreError


class SQLAlchemyCandidateStore(CandidateStoreInterface):
    """SQLAlchemy implementation of the candidate store"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_candidate(self, user_id: int) -> Optional[Candidate]:
        result = await self.session.execute(
            select(Candidate).where(Candidate.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_profile(self, user_id: int) -> Optional[CandidateProfile]:
        db_candidate = await self._get_candidate(user_id)
        return CandidateProfile.model_validate(db_candidate) if db_candidate else None

    async def create_profile(
        self, user_id: int, context: str, next_question: str
    ) -> CandidateProfile:
        db_candidate = Candidate(
            user_id=user_id,
            context=context,
            next_question=next_question,
        )
        self.session.add(db_candidate)
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StoreError("Failed to create candidate profile") from exc
        await self.session.refresh(db_candidate)
        return CandidateProfile.model_validate(db_candidate)

    async def recent_turns(self, user_id: int, limit: int) -> List[Turn]:
        if limit <= 0:
            return []
        result = await self.session.execute(
            select(ChatTurn)
            .where(ChatTurn.candidate_id == user_id)
            .order_by(ChatTurn.created_at.desc(), ChatTurn.id.desc())
            .limit(limit)
        )
        rows = result.scalars().all()
        return [Turn.model_validate(row) for row in reversed(rows)]

    async def turns_page(
        self, user_id: int, limit: int, before: Optional[UUID] = None
    ) -> List[Turn]:
        query = select(ChatTurn).where(ChatTurn.candidate_id == user_id)
        if before is not None:
            cursor = await self.session.get(ChatTurn, before)
            if cursor is None or cursor.candidate_id != user_id:
                return []
            query = query.where(
                or_(
                    ChatTurn.created_at < cursor.created_at,
                    and_(
                        ChatTurn.created_at == cursor.created_at,
                        ChatTurn.id < cursor.id,
                    ),
                )
            )
        result = await self.session.execute(
            query.order_by(ChatTurn.created_at.desc(), ChatTurn.id.desc()).limit(limit)
        )
        return [Turn.model_validate(row) for row in result.scalars().all()]

    async def score_values(self, user_id: int) -> Dict[ScoreAxis, List[float]]:
        result = await self.session.execute(
            select(ScoreSampleRecord.axis, ScoreSampleRecord.value).where(
                ScoreSampleRecord.candidate_id == user_id
            )
        )
        values: Dict[ScoreAxis, List[float]] = {axis: [] for axis in ScoreAxis}
        for axis, value in result.all():
            values[ScoreAxis(axis)].append(float(value))
        return values

    async def release(self) -> None:
        if not self.session.in_transaction():
            return
        try:
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StoreError("Failed to release the database connection") from exc

    async def commit_turn(
        self,
        user_id: int,
        turn: Turn,
        samples: Sequence[ScoreSample],
        averages: Optional[RunningAverages],
        next_question: str,
    ) -> Turn:
        try:
            db_candidate = await self._get_candidate(user_id)
            if db_candidate is None:
                raise StoreError("Candidate profile disappeared before commit")

            db_turn = ChatTurn(
                candidate_id=user_id,
                bot_question=turn.bot_question,
                human_answer=turn.human_answer,
                audio_url=turn.audio_url,
            )
            self.session.add(db_turn)
            await self.session.flush()

            for sample in samples:
                self.session.add(
                    ScoreSampleRecord(
                        candidate_id=user_id,
                        turn_id=db_turn.id,
                        axis=sample.axis,
                        value=sample.value,
                    )
                )

            if averages is not None:
                db_candidate.accuracy_score = averages.accuracy_score
                db_candidate.pronunciation_score = averages.pronunciation_score
                db_candidate.fluency_score = averages.fluency_score
                db_candidate.completeness_score = averages.completeness_score
            db_candidate.next_question = next_question

            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise StoreError("Failed to persist the conversation turn") from exc
        except StoreError:
            await self.session.rollback()
            raise

        await self.session.refresh(db_turn)
        return Turn.model_validate(db_turn)


__all__ = ["SQLAlchemyCandidateStore"]
