"""Pronunciation assessment stage (Stage 03).

Scoring is best effort: any failure here degrades the turn to "no
assessment" instead of aborting it.
"""

from __future__ import annotations

import logging
from typing import Optional

from speakup.domain.models import PronunciationAssessment
from speakup.services.errors import AssessmentUnavailable

from .types import PronunciationAssessor, ValidatedAudio

logger = logging.getLogger("speakup.pipeline")


async def assess_answer(
    assessor: Optional[PronunciationAssessor],
    audio: ValidatedAudio,
    reference_text: str,
) -> Optional[PronunciationAssessment]:
    if assessor is None:
        logger.info("Pronunciation assessment is not configured; skipping")
        return None

    try:
        return await assessor.assess(audio.data, reference_text)
    except AssessmentUnavailable as exc:
        logger.warning("Pronunciation assessment unavailable: %s", exc)
    except Exception as exc:  # pragma: no cover - vendor SDK failures
        logger.exception("Pronunciation assessment crashed", exc_info=exc)
    return None


__all__ = ["assess_answer"]
