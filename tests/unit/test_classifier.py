"""
Unit tests for the deviation classifier.
"""

import math

import pytest

from src.assurance.classifier import DeviationClassifier, relative_deviation
from src.assurance.schema import DeviationClass
from src.core.config import AssuranceDetectorConfig


@pytest.fixture
def classifier() -> DeviationClassifier:
    return DeviationClassifier(fraction_threshold=0.5, severity_fraction=0.9, near_fraction=0.1)


def test_relative_deviation():
    assert relative_deviation(10.0, 5.0) == pytest.approx(0.5)
    assert relative_deviation(10.0, 12.0) == pytest.approx(-0.2)


@pytest.mark.parametrize("reference", [None, 0.0, -3.0, math.nan, math.inf])
def test_relative_deviation_undefined_reference(reference):
    assert relative_deviation(reference, 5.0) is None


def test_relative_deviation_non_finite_sample():
    assert relative_deviation(10.0, math.nan) is None


def test_stable_below_threshold(classifier):
    checkpoint = classifier.classify(tick=3, reference=10.0, sample=6.0)
    assert checkpoint.classification == DeviationClass.STABLE
    assert not checkpoint.dropped
    assert checkpoint.severity == 0.0
    assert checkpoint.deviation == pytest.approx(0.4)
    assert checkpoint.tick == 3


def test_near_drop_has_reduced_severity(classifier):
    checkpoint = classifier.classify(tick=1, reference=10.0, sample=5.0)
    assert checkpoint.classification == DeviationClass.NEAR_DROP
    assert checkpoint.dropped
    assert checkpoint.severity == pytest.approx(0.25)
    assert checkpoint.reference == 10.0


def test_drop_between_near_band_and_severe(classifier):
    checkpoint = classifier.classify(tick=1, reference=10.0, sample=3.0)
    assert checkpoint.classification == DeviationClass.DROP
    assert checkpoint.severity == pytest.approx(0.7)


def test_severe_drop(classifier):
    checkpoint = classifier.classify(tick=1, reference=10.0, sample=0.5)
    assert checkpoint.classification == DeviationClass.SEVERE_DROP
    assert checkpoint.severity == pytest.approx(0.95)


def test_sustaining_relaxes_threshold(classifier):
    entering = classifier.classify(tick=1, reference=10.0, sample=6.0)
    sustaining = classifier.classify(tick=1, reference=10.0, sample=6.0, sustaining=True)
    assert not entering.dropped
    assert sustaining.dropped
    assert sustaining.classification == DeviationClass.NEAR_DROP


def test_sustaining_still_releases_recovered_sample(classifier):
    checkpoint = classifier.classify(tick=1, reference=10.0, sample=7.0, sustaining=True)
    assert not checkpoint.dropped


def test_sustaining_judges_rise_at_midpoint(classifier):
    checkpoint = classifier.classify(tick=2, reference=10.0, sample=9.0, sustaining=True, previous=1.0)
    assert checkpoint.dropped
    assert checkpoint.deviation == pytest.approx(0.5)
    assert checkpoint.classification == DeviationClass.NEAR_DROP


def test_previous_sample_ignored_when_entering(classifier):
    checkpoint = classifier.classify(tick=2, reference=10.0, sample=9.0, previous=1.0)
    assert not checkpoint.dropped


def test_judged_level():
    assert DeviationClassifier.judged_level(9.0, 1.0) == 5.0
    assert DeviationClassifier.judged_level(1.0, 9.0) == 1.0
    assert DeviationClassifier.judged_level(7.0, None) == 7.0
    assert DeviationClassifier.judged_level(7.0, math.nan) == 7.0


def test_zero_reference_is_stable(classifier):
    checkpoint = classifier.classify(tick=1, reference=0.0, sample=0.0)
    assert checkpoint.classification == DeviationClass.STABLE
    assert checkpoint.deviation == 0.0


def test_zero_severity_fraction_does_not_flag_stable_samples():
    classifier = DeviationClassifier(fraction_threshold=0.5, severity_fraction=0.0, near_fraction=0.0)
    checkpoint = classifier.classify(tick=1, reference=10.0, sample=10.0)
    assert not checkpoint.dropped


def test_zero_threshold_still_requires_a_drop():
    classifier = DeviationClassifier(fraction_threshold=0.0, severity_fraction=1.0, near_fraction=0.0)
    assert not classifier.classify(tick=1, reference=10.0, sample=10.0).dropped
    assert classifier.classify(tick=1, reference=10.0, sample=9.9).dropped


def test_from_config_and_neutral():
    cfg = AssuranceDetectorConfig(fraction_threshold=0.3, severity_fraction=0.8, near_fraction=0.05)
    classifier = DeviationClassifier.from_config(cfg)
    assert classifier.threshold(sustaining=False) == 0.3
    assert classifier.threshold(sustaining=True) == pytest.approx(0.25)

    neutral = classifier.neutral(tick=0)
    assert not neutral.dropped
    assert neutral.reference is None
