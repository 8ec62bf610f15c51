"""Orchestrates one answer turn end to end.

See ``flow.AnswerTurnPipeline`` for the stage map. Every collaborator is
injected so the HTTP layer, the tests and any future worker can build the
pipeline from whatever service handles they hold.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from speakup.application.interfaces import CandidateStoreInterface
from speakup.config.settings import PipelineConfig
from speakup.domain.models import Turn
from speakup.services.storage import StorageError
from speakup.telemetry import observe_stage, record_turn_outcome

from .aggregation import recompute_averages, samples_from_assessment
from .assessment import assess_answer
from .dialogue import build_conversation, generate_next_question
from .errors import PipelineTimeout, RegistrationRequired, StoreError, TurnPipelineError
from .flow import TurnState
from .intake import validate_upload
from .locks import CandidateLocks
from .transcription import transcribe_answer
from .types import (
    AnswerStorage,
    AudioUpload,
    PronunciationAssessor,
    QuestionGenerator,
    Transcoder,
    Transcriber,
    TurnResult,
)

logger = logging.getLogger("speakup.pipeline")

NO_SPEECH_MESSAGE = "Audio uploaded but no speech was detected"


class TurnPipeline:
    """Run intake, transcription, assessment, aggregation and dialogue for one answer."""

    def __init__(
        self,
        *,
        transcoder: Optional[Transcoder],
        storage: AnswerStorage,
        transcriber: Transcriber,
        assessor: Optional[PronunciationAssessor],
        llm: QuestionGenerator,
        config: PipelineConfig,
        locks: Optional[CandidateLocks] = None,
    ) -> None:
        self._transcoder = transcoder
        self._storage = storage
        self._transcriber = transcriber
        self._assessor = assessor
        self._llm = llm
        self._config = config
        self._locks = locks if locks is not None else CandidateLocks()

    async def run(
        self,
        user_id: int,
        upload: AudioUpload,
        store: CandidateStoreInterface,
    ) -> TurnResult:
        try:
            result = await asyncio.wait_for(
                self._run_serialized(user_id, upload, store),
                timeout=self._config.turn_timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            logger.error(
                "Turn exceeded %.0fs deadline user=%s",
                self._config.turn_timeout_seconds,
                user_id,
            )
            record_turn_outcome(PipelineTimeout.outcome)
            raise PipelineTimeout("The answer could not be processed in time") from exc
        except TurnPipelineError as exc:
            logger.warning(
                "Turn failed user=%s outcome=%s: %s", user_id, exc.outcome, exc.message
            )
            record_turn_outcome(exc.outcome)
            raise

        record_turn_outcome(result.state.value)
        return result

    async def _run_serialized(
        self,
        user_id: int,
        upload: AudioUpload,
        store: CandidateStoreInterface,
    ) -> TurnResult:
        if not self._config.serialize_per_candidate:
            return await self._execute(user_id, upload, store)
        async with self._locks.hold(user_id):
            return await self._execute(user_id, upload, store)

    async def _execute(
        self,
        user_id: int,
        upload: AudioUpload,
        store: CandidateStoreInterface,
    ) -> TurnResult:
        profile = await store.get_profile(user_id)
        if profile is None:
            raise RegistrationRequired("User registration is not completed")
        await store.release()

        _log_state(user_id, TurnState.INTAKE)
        with observe_stage("intake"):
            audio = await validate_upload(
                upload, config=self._config, transcoder=self._transcoder
            )

        with observe_stage("upload"):
            try:
                url = await self._storage.upload_answer_audio(
                    user_id, audio.data, content_type="audio/wav"
                )
            except StorageError as exc:
                logger.exception("Answer audio upload failed user=%s", user_id, exc_info=exc)
                raise StoreError("Failed to store the answer audio") from exc

        _log_state(user_id, TurnState.TRANSCRIBING)
        with observe_stage("transcription"):
            transcript = await transcribe_answer(self._transcriber, audio)

        if not transcript:
            _log_state(user_id, TurnState.SKIPPED_NO_SPEECH)
            return TurnResult(
                state=TurnState.SKIPPED_NO_SPEECH,
                url=url,
                recognized_text="",
                message=NO_SPEECH_MESSAGE,
            )

        _log_state(user_id, TurnState.ASSESSING)
        with observe_stage("assessment"):
            assessment = await assess_answer(self._assessor, audio, transcript)

        samples = samples_from_assessment(assessment)
        averages = None
        if samples:
            _log_state(user_id, TurnState.AGGREGATING)
            with observe_stage("aggregation"):
                history = await store.score_values(user_id)
                averages = recompute_averages(history, samples)

        _log_state(user_id, TurnState.ADVANCING)
        with observe_stage("dialogue"):
            recent = await store.recent_turns(user_id, self._config.history_limit)
            await store.release()
            conversation = build_conversation(recent, profile.next_question, transcript)
            next_question = await generate_next_question(
                self._llm, conversation, profile.context
            )

        turn = Turn(
            bot_question=profile.next_question,
            human_answer=transcript,
            audio_url=url,
        )
        with observe_stage("commit"):
            await store.commit_turn(user_id, turn, samples, averages, next_question)

        _log_state(user_id, TurnState.COMMITTED)
        return TurnResult(
            state=TurnState.COMMITTED,
            url=url,
            recognized_text=transcript,
            assessment=assessment,
            next_question=next_question,
        )


def _log_state(user_id: int, state: TurnState) -> None:
    logger.info("Turn user=%s state=%s", user_id, state.value)


__all__ = ["NO_SPEECH_MESSAGE", "TurnPipeline"]
