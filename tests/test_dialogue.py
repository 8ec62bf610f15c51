"""LLM response parsing and the dialogue-advance stage."""

from __future__ import annotations

import asyncio
import json

import pytest

from speakup.pipelines.turn import (
    GenerationError,
    build_conversation,
    generate_first_question,
    generate_next_question,
)
from speakup.services.llm_client import LlmInvocationError
from speakup.services.response_contract import (
    NextQuestionResponse,
    RegistrationResponse,
    ResponseContractError,
    clean_json_payload,
)
from speakup.domain.models import Turn
from tests.fakes import FakeLlm


@pytest.mark.parametrize(
    "raw",
    [
        '{"nextQuestion": "Why Python?"}',
        '```json\n{"nextQuestion": "Why Python?"}\n```',
        '```\n{"nextQuestion": "Why Python?"}\n```',
        'Sure! Here it is: {"nextQuestion": "Why Python?"} Good luck.',
    ],
)
def test_next_question_is_parsed_fenced_or_bare(raw):
    assert NextQuestionResponse.from_json(raw).next_question == "Why Python?"


@pytest.mark.parametrize(
    "raw",
    ["", "not json at all", '{"question": "Why?"}', '{"nextQuestion": "   "}', "[1, 2]"],
)
def test_unusable_next_question_payloads_are_rejected(raw):
    with pytest.raises(ResponseContractError):
        NextQuestionResponse.from_json(raw)


def test_clean_json_payload_strips_fences():
    assert clean_json_payload('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_registration_payload_without_first_question_is_still_valid():
    parsed = RegistrationResponse.from_json('{"success": false, "message": "Tell me more"}')

    assert parsed.success is False
    assert parsed.first_question is None


def test_conversation_is_oldest_first_with_current_exchange_last():
    recent = [
        Turn(bot_question="Q1", human_answer="A1", audio_url="u1"),
        Turn(bot_question="Q2", human_answer="A2", audio_url="u2"),
    ]

    conversation = build_conversation(recent, "Q3", "A3")

    assert conversation == [
        {"bot": "Q1", "human": "A1"},
        {"bot": "Q2", "human": "A2"},
        {"bot": "Q3", "human": "A3"},
    ]


def test_next_question_prompt_carries_context_and_conversation():
    llm = FakeLlm('```json\n{"nextQuestion": "Which database do you prefer?"}\n```')
    conversation = [{"bot": "What do you build?", "human": "Mostly APIs"}]

    question = asyncio.run(generate_next_question(llm, conversation, "Backend developer"))

    assert question == "Which database do you prefer?"
    prompt = llm.calls[0]["user_prompt"]
    assert "Backend developer" in prompt
    assert json.dumps("Mostly APIs") in prompt


@pytest.mark.parametrize(
    "llm",
    [
        FakeLlm("I would ask about hobbies."),
        FakeLlm(None),
        FakeLlm(error=LlmInvocationError("throttled")),
    ],
)
def test_generation_failures_are_fatal(llm):
    with pytest.raises(GenerationError):
        asyncio.run(generate_next_question(llm, [{"bot": "Q", "human": "A"}], "ctx"))


def test_first_question_comes_from_the_registration_payload():
    llm = FakeLlm(
        '{"success": true, "message": "Junior Python developer", '
        '"firstQuestion": "What got you into Python?"}'
    )

    outcome = asyncio.run(generate_first_question(llm, "I am a junior Python dev"))

    assert outcome.success is True
    assert outcome.message == "Junior Python developer"
    assert outcome.first_question == "What got you into Python?"
    assert "I am a junior Python dev" in llm.calls[0]["user_prompt"]


def test_stage_map_lists_five_stages_in_order():
    from speakup.pipelines.turn import AnswerTurnPipeline

    stages = AnswerTurnPipeline.describe()

    assert [stage.order for stage in stages] == [1, 2, 3, 4, 5]
    assert stages[-1].module == "speakup.pipelines.turn.dialogue"
