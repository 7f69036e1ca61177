"""
Schema definitions for assurance detection.

Checkpoints and detections are deterministic and explainable. Each one
references the observed sample, the reference level it was compared against,
and the computed relative deviation.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DeviationClass(str, Enum):
    """Verdict of the deviation classifier for a single sample."""

    STABLE = "stable"
    NEAR_DROP = "near_drop"
    DROP = "drop"
    SEVERE_DROP = "severe_drop"


class DetectorState(str, Enum):
    """
    Lifecycle of a detector instance.

    UNINITIALIZED until the first sample, CALIBRATING while the baseline window
    fills or the ledger re-accumulates after a reset, ARMED afterwards.
    """

    UNINITIALIZED = "uninitialized"
    CALIBRATING = "calibrating"
    ARMED = "armed"


class DetectorTag(BaseModel):
    """
    Diagnostic metadata attached to a detector.

    Used for logging and attribution only; it never changes detection results.
    """

    model_config = ConfigDict(frozen=True)

    module: str = Field("qos_controller", min_length=1, max_length=128)
    name: str = Field("AssuranceDetector", min_length=1, max_length=128)

    def __str__(self) -> str:
        return f"{self.module}/{self.name}"


class Checkpoint(BaseModel):
    """
    A single tick's classifier verdict.

    Fields:
    - tick: index of the sample that produced this checkpoint
    - dropped: True for near, regular and severe drops
    - classification: categorical verdict
    - deviation: relative deviation (reference - sample) / reference
    - severity: magnitude used to rank detections (reduced for near drops)
    - reference: level the sample was compared against (None for the seed)
    """

    model_config = ConfigDict(frozen=True)

    tick: int = Field(ge=0)
    dropped: bool
    classification: DeviationClass
    deviation: float = 0.0
    severity: float = Field(0.0, ge=0.0)
    reference: Optional[float] = None


class Detection(BaseModel):
    """
    Positive quorum vote emitted by a detector.

    Fields:
    - tag: detector that emitted the detection
    - tick: index of the sample that completed the quorum
    - sample: value of that sample
    - severity: highest severity among dropped checkpoints in the ledger
    - classification: verdict of the most severe dropped checkpoint
    - reference: level the most severe checkpoint was compared against
    - true_fraction: fraction of dropped checkpoints in the ledger
    """

    tag: DetectorTag
    tick: int = Field(ge=0)
    sample: float
    severity: float = Field(ge=0.0)
    classification: DeviationClass
    reference: Optional[float] = None
    true_fraction: float = Field(ge=0.0, le=1.0)
