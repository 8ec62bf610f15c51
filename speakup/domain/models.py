from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel


class ScoreAxis(str, Enum):
    """Scored dimensions of a spoken answer."""

    ACCURACY = "accuracy"
    PRONUNCIATION = "pronunciation"
    FLUENCY = "fluency"
    COMPLETENESS = "completeness"


class Turn(BaseModel):
    """One bot question / human answer exchange"""
    id: Optional[UUID] = None
    bot_question: str
    human_answer: str
    audio_url: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ScoreSample(BaseModel):
    """A single score measurement produced by pronunciation assessment"""
    axis: ScoreAxis
    value: float
    turn_id: Optional[UUID] = None

    class Config:
        from_attributes = True


class PronunciationAssessment(BaseModel):
    """Scores and vendor detail for one assessed answer"""
    recognized_text: str
    accuracy_score: float
    pronunciation_score: float
    fluency_score: float
    completeness_score: float
    raw_json: Dict[str, Any] = {}

    def score_for(self, axis: ScoreAxis) -> float:
        return getattr(self, f"{axis.value}_score")


class RunningAverages(BaseModel):
    """Per-axis means over every stored sample"""
    accuracy_score: float = 0.0
    pronunciation_score: float = 0.0
    fluency_score: float = 0.0
    completeness_score: float = 0.0

    def for_axis(self, axis: ScoreAxis) -> float:
        return getattr(self, f"{axis.value}_score")


class CandidateProfile(BaseModel):
    """Domain model for a registered candidate"""
    user_id: int
    context: str
    next_question: str
    accuracy_score: float = 0.0
    pronunciation_score: float = 0.0
    fluency_score: float = 0.0
    completeness_score: float = 0.0
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def averages(self) -> RunningAverages:
        return RunningAverages(
            accuracy_score=self.accuracy_score,
            pronunciation_score=self.pronunciation_score,
            fluency_score=self.fluency_score,
            completeness_score=self.completeness_score,
        )
