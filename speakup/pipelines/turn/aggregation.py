"""Score aggregation stage (Stage 04).

Averages are recomputed from every stored sample plus the new ones instead of
being updated incrementally, so the result does not depend on the order in
which samples arrived and the stored profile can always be rebuilt from the
sample table.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Mapping, Optional, Sequence

from speakup.domain.models import (
    PronunciationAssessment,
    RunningAverages,
    ScoreAxis,
    ScoreSample,
)


def samples_from_assessment(
    assessment: Optional[PronunciationAssessment],
) -> List[ScoreSample]:
    """One sample per axis, or none when the answer was not assessed."""

    if assessment is None:
        return []
    return [
        ScoreSample(axis=axis, value=float(assessment.score_for(axis)))
        for axis in ScoreAxis
    ]


def mean(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return math.fsum(values) / len(values)


def recompute_averages(
    history: Mapping[ScoreAxis, Sequence[float]],
    new_samples: Sequence[ScoreSample],
) -> RunningAverages:
    """Mean of stored plus new values per axis; an axis with no values averages to 0."""

    combined = {axis: list(history.get(axis, ())) for axis in ScoreAxis}
    for sample in new_samples:
        combined[sample.axis].append(sample.value)

    return RunningAverages(
        **{f"{axis.value}_score": mean(values) for axis, values in combined.items()}
    )


__all__ = ["mean", "recompute_averages", "samples_from_assessment"]
