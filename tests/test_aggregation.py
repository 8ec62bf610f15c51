"""Running averages are exact means over every stored sample."""

from __future__ import annotations

import itertools
import random

from speakup.domain.models import ScoreAxis, ScoreSample
from speakup.pipelines.turn import recompute_averages, samples_from_assessment
from tests.fakes import make_assessment


def test_one_sample_per_axis_from_an_assessment():
    samples = samples_from_assessment(make_assessment(80, 90, 70, 100))

    assert {sample.axis: sample.value for sample in samples} == {
        ScoreAxis.ACCURACY: 80.0,
        ScoreAxis.PRONUNCIATION: 90.0,
        ScoreAxis.FLUENCY: 70.0,
        ScoreAxis.COMPLETENESS: 100.0,
    }


def test_no_assessment_yields_no_samples():
    assert samples_from_assessment(None) == []


def test_average_is_the_mean_of_history_plus_new_samples():
    history = {ScoreAxis.ACCURACY: [60.0, 70.0], ScoreAxis.FLUENCY: [50.0]}
    new = samples_from_assessment(make_assessment(80, 90, 70, 100))

    averages = recompute_averages(history, new)

    assert averages.accuracy_score == 70.0
    assert averages.fluency_score == 60.0
    assert averages.pronunciation_score == 90.0
    assert averages.completeness_score == 100.0


def test_axis_without_samples_averages_to_zero():
    averages = recompute_averages({}, [ScoreSample(axis=ScoreAxis.ACCURACY, value=42.0)])

    assert averages.accuracy_score == 42.0
    assert averages.pronunciation_score == 0.0
    assert averages.fluency_score == 0.0
    assert averages.completeness_score == 0.0


def test_average_does_not_depend_on_arrival_order():
    values = [0.1, 0.2, 0.3, 99.7, 1e-3, 55.55, 12.125]
    results = set()
    for ordering in itertools.permutations(values[:5]):
        history = {ScoreAxis.FLUENCY: list(ordering[:-1])}
        new = [ScoreSample(axis=ScoreAxis.FLUENCY, value=ordering[-1])]
        results.add(recompute_averages(history, new).fluency_score)
    assert len(results) == 1

    shuffled = values[:]
    random.Random(7).shuffle(shuffled)
    forward = recompute_averages({ScoreAxis.ACCURACY: values}, [])
    backward = recompute_averages({ScoreAxis.ACCURACY: shuffled}, [])
    assert forward.accuracy_score == backward.accuracy_score
