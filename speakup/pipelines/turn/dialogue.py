"""Dialogue-advance stage (Stage 05): ask the LLM for the next question."""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence

from speakup.domain.models import Turn
from speakup.services.llm_client import LlmInvocationError
from speakup.services.prompt_builder import (
    PromptBundle,
    build_next_question_prompt,
    build_registration_prompt,
)
from speakup.services.response_contract import (
    NextQuestionResponse,
    RegistrationResponse,
    ResponseContractError,
)

from .errors import GenerationError
from .types import QuestionGenerator

logger = logging.getLogger("speakup.pipeline")

RegistrationOutcome = RegistrationResponse


def _truncate(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def build_conversation(
    recent_turns: Sequence[Turn],
    bot_question: str,
    human_answer: str,
) -> List[Dict[str, str]]:
    """Prior exchanges oldest first with the current exchange appended last."""

    conversation = [
        {"bot": turn.bot_question, "human": turn.human_answer} for turn in recent_turns
    ]
    conversation.append({"bot": bot_question, "human": human_answer})
    return conversation


async def _invoke(llm: QuestionGenerator, prompt: PromptBundle, purpose: str) -> str:
    try:
        raw_response = await llm.invoke(
            system_prompt=prompt.system_prompt,
            user_prompt=prompt.user_prompt,
        )
    except LlmInvocationError as exc:
        logger.exception("LLM invocation failed purpose=%s", purpose, exc_info=exc)
        raise GenerationError("Question generation failed") from exc

    if not raw_response:
        raise GenerationError("Question generation returned an empty response")

    logger.info("Raw LLM response purpose=%s: %s", purpose, _truncate(raw_response))
    return raw_response


async def generate_next_question(
    llm: QuestionGenerator,
    conversation: Sequence[Dict[str, str]],
    about_user: str,
) -> str:
    prompt = build_next_question_prompt(conversation, about_user)
    raw_response = await _invoke(llm, prompt, "next_question")
    try:
        parsed = NextQuestionResponse.from_json(raw_response)
    except ResponseContractError as exc:
        logger.warning("Unusable next-question payload: %s", exc)
        raise GenerationError("Could not parse the next question") from exc
    return parsed.next_question


async def generate_first_question(llm: QuestionGenerator, info: str) -> RegistrationOutcome:
    """Summarize the candidate's self description and open the interview."""

    prompt = build_registration_prompt(info)
    raw_response = await _invoke(llm, prompt, "registration")
    try:
        return RegistrationResponse.from_json(raw_response)
    except ResponseContractError as exc:
        logger.warning("Unusable registration payload: %s", exc)
        raise GenerationError("Could not parse the registration response") from exc


__all__ = [
    "RegistrationOutcome",
    "build_conversation",
    "generate_first_question",
    "generate_next_question",
]
