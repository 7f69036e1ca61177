"""
Deviation classification for a single sample.

Compares a sample against a reference level and decides whether it looks like
a drop:

    d = (reference - sample) / reference

The classifier is pure. Everything it needs, including whether a deviation
episode is already open and the previous sample, is passed in by the caller.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from src.core.config import AssuranceDetectorConfig

from .schema import Checkpoint, DeviationClass

# Absolute tolerance for threshold comparisons, so that e.g. a drop of exactly
# 0.4 is not lost to float rounding of 0.5 - 0.1.
EPSILON = 1e-9

# Near drops are weak signals.
NEAR_SEVERITY_WEIGHT = 0.5

# While an episode is open a rising sample is only credited half of its rise.
RECOVERY_WEIGHT = 0.5


def relative_deviation(reference: Optional[float], sample: float) -> Optional[float]:
    """
    Relative drop of sample below reference.

    Returns None when the deviation is undefined: no reference, a reference
    that is not strictly positive, or non-finite inputs.
    """
    if reference is None or not math.isfinite(reference) or reference <= 0.0:
        return None
    if not math.isfinite(sample):
        return None
    return (reference - sample) / reference


@dataclass(frozen=True)
class DeviationClassifier:
    """
    Maps a relative deviation to a checkpoint.

    Notes:
    - stable: d below the active threshold, or no drop at all (d <= 0).
    - severe_drop: d >= severity_fraction.
    - near_drop: d inside [fraction_threshold, fraction_threshold + near_fraction).
    - drop: anything in between.
    - When sustaining an open episode, the active threshold is relaxed to
      fraction_threshold - near_fraction so borderline samples do not flap,
      and a sample above the previous one is judged at the midpoint of the
      two, so one noisy high sample cannot end the episode.
    """

    fraction_threshold: float
    severity_fraction: float
    near_fraction: float

    @classmethod
    def from_config(cls, cfg: AssuranceDetectorConfig) -> "DeviationClassifier":
        return cls(
            fraction_threshold=cfg.fraction_threshold,
            severity_fraction=cfg.severity_fraction,
            near_fraction=cfg.near_fraction,
        )

    def threshold(self, sustaining: bool) -> float:
        if sustaining:
            return max(0.0, self.fraction_threshold - self.near_fraction)
        return self.fraction_threshold

    def classify(
        self,
        tick: int,
        reference: Optional[float],
        sample: float,
        sustaining: bool = False,
        previous: Optional[float] = None,
    ) -> Checkpoint:
        level = self.judged_level(sample, previous) if sustaining else sample
        deviation = relative_deviation(reference, level)
        if (
            deviation is None
            or deviation <= 0.0
            or deviation < self.threshold(sustaining) - EPSILON
        ):
            return Checkpoint(
                tick=tick,
                dropped=False,
                classification=DeviationClass.STABLE,
                deviation=deviation or 0.0,
                severity=0.0,
                reference=reference,
            )

        if deviation >= self.severity_fraction - EPSILON:
            classification = DeviationClass.SEVERE_DROP
            severity = deviation
        elif deviation < self.fraction_threshold + self.near_fraction - EPSILON:
            classification = DeviationClass.NEAR_DROP
            severity = deviation * NEAR_SEVERITY_WEIGHT
        else:
            classification = DeviationClass.DROP
            severity = deviation

        return Checkpoint(
            tick=tick,
            dropped=True,
            classification=classification,
            deviation=deviation,
            severity=severity,
            reference=reference,
        )

    @staticmethod
    def judged_level(sample: float, previous: Optional[float]) -> float:
        if previous is None or not math.isfinite(previous) or sample <= previous:
            return sample
        return previous + (sample - previous) * RECOVERY_WEIGHT

    def neutral(self, tick: int) -> Checkpoint:
        """Checkpoint for a sample that has nothing to be compared against."""
        return Checkpoint(
            tick=tick,
            dropped=False,
            classification=DeviationClass.STABLE,
            reference=None,
        )
