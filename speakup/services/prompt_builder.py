"""Helpers to construct system/user prompts for question generation.

Two conversations reach the LLM:
* Registration: the candidate's free-text self description becomes a profile
  summary plus the opening interview question.
* Dialogue advance: the profile summary and recent exchanges produce the next
  question.
Both prompts pin a strict JSON contract (see ``response_contract``).
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Mapping, Sequence

REGISTRATION_SYSTEM_PROMPT = (
    "You are a friendly English-speaking interviewer preparing a spoken practice "
    "interview. Read the candidate's description of themselves. Summarize who they "
    "are (role, experience, interests, level of English) in a short paragraph, then "
    "write the first interview question you will ask them out loud. Keep the question "
    "to one or two sentences and make it personal to the candidate.\n"
    "Respond ONLY with a JSON object of the form "
    '{"success": true, "message": "<profile summary>", "firstQuestion": "<question>"}. '
    'If the description is empty or unusable respond with {"success": false, '
    '"message": "<what is missing>"}.'
)

NEXT_QUESTION_SYSTEM_PROMPT = (
    "You are continuing a spoken English practice interview. You receive a summary "
    "of the candidate and the conversation so far, oldest exchange first; the last "
    "exchange is the answer the candidate just gave. Ask the next question: follow up "
    "on the last answer when it invites it, otherwise move to a new topic relevant to "
    "the candidate. Never repeat a question already asked. Keep it to one or two "
    "sentences.\n"
    'Respond ONLY with a JSON object of the form {"nextQuestion": "<question>"}.'
)


@dataclass(frozen=True)
class PromptBundle:
    system_prompt: str
    user_prompt: str


def build_registration_prompt(info: str) -> PromptBundle:
    return PromptBundle(
        system_prompt=REGISTRATION_SYSTEM_PROMPT,
        user_prompt=f"Candidate information:\n{info.strip()}",
    )


def _format_conversation(conversation: Sequence[Mapping[str, str]]) -> str:
    """Serialize exchanges as compact JSON so quoting in answers stays unambiguous."""
    payload = [
        {"bot": str(turn.get("bot", "")), "human": str(turn.get("human", ""))}
        for turn in conversation
    ]
    return json.dumps(payload, ensure_ascii=False, indent=2)


def build_next_question_prompt(
    conversation: Sequence[Mapping[str, str]],
    about_user: str,
) -> PromptBundle:
    sections = [
        "About the candidate:",
        about_user.strip() or "(no profile available)",
        "",
        "Conversation history (oldest first):",
        _format_conversation(conversation),
    ]
    return PromptBundle(
        system_prompt=NEXT_QUESTION_SYSTEM_PROMPT,
        user_prompt="\n".join(sections),
    )


__all__ = [
    "PromptBundle",
    "REGISTRATION_SYSTEM_PROMPT",
    "NEXT_QUESTION_SYSTEM_PROMPT",
    "build_registration_prompt",
    "build_next_question_prompt",
]
