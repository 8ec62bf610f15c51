"""SQLAlchemy candidate store against an in-memory SQLite database."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from speakup.domain.models import RunningAverages, ScoreAxis, ScoreSample, Turn
from speakup.infrastructure.persistence import SQLAlchemyCandidateStore
from speakup.models import Base, Candidate, ChatTurn, User
from speakup.pipelines.turn import StoreError

USER_ID = 7
OTHER_USER_ID = 8
START = datetime(2024, 1, 1, 12, 0, 0)


def _with_store(scenario, *, turns=()):
    """Seed two candidates plus ``turns`` as ``(user_id, answer, created_at)`` and run ``scenario``."""

    async def main():
        engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)

            factory = async_sessionmaker(engine, expire_on_commit=False)
            async with factory() as session:
                for user_id in (USER_ID, OTHER_USER_ID):
                    session.add(
                        User(
                            id=user_id,
                            email=f"user{user_id}@example.com",
                            name=f"User {user_id}",
                            password_hash="hash",
                        )
                    )
                    session.add(
                        Candidate(
                            user_id=user_id,
                            context="Backend developer",
                            next_question="Tell me about yourself.",
                        )
                    )
                await session.flush()
                for user_id, answer, created_at in turns:
                    session.add(
                        ChatTurn(
                            candidate_id=user_id,
                            bot_question=f"Q for {answer}",
                            human_answer=answer,
                            audio_url=f"https://bucket/{user_id}/{answer}.wav",
                            created_at=created_at,
                        )
                    )
                await session.commit()

            async with factory() as session:
                return await scenario(SQLAlchemyCandidateStore(session), session)
        finally:
            await engine.dispose()

    return asyncio.run(main())


def _turn(answer: str = "I enjoy building APIs") -> Turn:
    return Turn(
        bot_question="Tell me about yourself.",
        human_answer=answer,
        audio_url="https://bucket/7/audio1.wav",
    )


def _samples(value: float):
    return [ScoreSample(axis=axis, value=value) for axis in ScoreAxis]


def test_recent_turns_are_the_newest_window_oldest_first():
    turns = [(USER_ID, f"A{i}", START + timedelta(minutes=i)) for i in range(5)]
    turns.append((OTHER_USER_ID, "elsewhere", START + timedelta(hours=1)))

    async def scenario(store, session):
        return await store.recent_turns(USER_ID, 3)

    recent = _with_store(scenario, turns=turns)

    assert [turn.human_answer for turn in recent] == ["A2", "A3", "A4"]


def test_committed_turn_persists_samples_averages_and_next_question():
    async def scenario(store, session):
        stored = await store.commit_turn(
            USER_ID,
            _turn(),
            _samples(80.0),
            RunningAverages(
                accuracy_score=80.0,
                pronunciation_score=80.0,
                fluency_score=80.0,
                completeness_score=80.0,
            ),
            "What did you ship last month?",
        )
        await store.commit_turn(USER_ID, _turn("second"), _samples(60.0), None, "Next?")
        return (
            stored,
            await store.get_profile(USER_ID),
            await store.score_values(USER_ID),
            await store.score_values(OTHER_USER_ID),
        )

    stored, profile, values, other_values = _with_store(scenario)

    assert stored.id is not None
    assert stored.created_at is not None
    assert profile.next_question == "Next?"
    assert profile.averages.fluency_score == 80.0
    assert set(values) == set(ScoreAxis)
    assert sorted(values[ScoreAxis.PRONUNCIATION]) == [60.0, 80.0]
    assert sorted(values[ScoreAxis.COMPLETENESS]) == [60.0, 80.0]
    assert other_values == {axis: [] for axis in ScoreAxis}


def test_failed_commit_leaves_no_partial_turn():
    async def scenario(store, session):
        async def failing_commit():
            raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

        session.commit = failing_commit
        with pytest.raises(StoreError):
            await store.commit_turn(
                USER_ID,
                _turn(),
                _samples(90.0),
                RunningAverages(accuracy_score=90.0),
                "Never asked",
            )
        del session.commit

        return (
            await store.get_profile(USER_ID),
            await store.recent_turns(USER_ID, 10),
            await store.score_values(USER_ID),
        )

    profile, turns, values = _with_store(scenario)

    assert profile.next_question == "Tell me about yourself."
    assert profile.accuracy_score == 0.0
    assert turns == []
    assert values == {axis: [] for axis in ScoreAxis}


def test_history_cursor_does_not_skip_turns_sharing_a_timestamp():
    tied = START + timedelta(minutes=1)
    turns = [
        (USER_ID, "oldest", START),
        (USER_ID, "tied-a", tied),
        (USER_ID, "tied-b", tied),
        (USER_ID, "newest", START + timedelta(minutes=2)),
    ]

    async def scenario(store, session):
        first = await store.turns_page(USER_ID, 2)
        second = await store.turns_page(USER_ID, 2, before=first[-1].id)
        third = await store.turns_page(USER_ID, 2, before=second[-1].id)
        foreign = await store.turns_page(OTHER_USER_ID, 2, before=first[-1].id)
        return first, second, third, foreign

    first, second, third, foreign = _with_store(scenario, turns=turns)

    assert first[0].human_answer == "newest"
    assert second[-1].human_answer == "oldest"
    answers = [turn.human_answer for turn in first + second]
    assert sorted(answers) == ["newest", "oldest", "tied-a", "tied-b"]
    assert third == []
    assert foreign == []


def test_release_ends_the_read_transaction():
    async def scenario(store, session):
        profile = await store.get_profile(USER_ID)
        held = session.in_transaction()
        await store.release()
        return profile, held, session.in_transaction()

    profile, held, after = _with_store(scenario)

    assert profile.context == "Backend developer"
    assert held is True
    assert after is False
