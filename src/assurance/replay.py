"""
Offline replay of a recorded signal through a detector.

Produces one row per tick so a recorded series can be inspected or plotted
after the fact. Replay mutates the detector it is given, exactly like live
operation would.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

import pandas as pd

from .detector import AssuranceDetector

TRACE_COLUMNS = [
    "tick",
    "sample",
    "baseline",
    "reference",
    "classification",
    "deviation",
    "true_fraction",
    "detected",
    "severity",
]


def replay(
    detector: AssuranceDetector,
    samples: Iterable[float],
    reset_on_detection: bool = False,
) -> pd.DataFrame:
    """
    Run samples through the detector and collect a per-tick trace.

    Args:
        detector: Detector to drive (its state carries over between calls)
        samples: Signal values in tick order (list, numpy array or Series)
        reset_on_detection: Reset the detector right after each detection,
            like a consumer that acts immediately

    Returns:
        DataFrame with TRACE_COLUMNS, indexed by position in samples
    """
    rows: List[Dict[str, Any]] = []

    for sample in samples:
        baseline = detector.window.baseline()
        detection = detector.process_sample(sample)
        checkpoint = detector.last_checkpoint

        rows.append({
            "tick": detector.tick,
            "sample": float(sample),
            "baseline": baseline,
            "reference": checkpoint.reference if checkpoint else None,
            "classification": checkpoint.classification.value if checkpoint else None,
            "deviation": checkpoint.deviation if checkpoint else None,
            "true_fraction": detection.true_fraction if detection else detector.ledger.true_fraction,
            "detected": detection is not None,
            "severity": detection.severity if detection else 0.0,
        })

        if detection is not None and reset_on_detection:
            detector.reset()

    return pd.DataFrame(rows, columns=TRACE_COLUMNS)


def detection_ticks(trace: pd.DataFrame) -> List[int]:
    """Ticks at which the replayed detector emitted a detection."""
    if trace.empty:
        return []
    return [int(t) for t in trace.loc[trace["detected"], "tick"]]
