"""
Assurance engine: one detector per monitored signal.

Consumes per-tick batches of named samples, routes each to the detector that
owns the signal, and returns the detections of that tick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from src.core.config import AssuranceDetectorConfig, config

from .detector import AssuranceDetector
from .schema import Detection, DetectorTag

logger = logging.getLogger(__name__)


@dataclass
class AssuranceEngine:
    """
    Registry of independent detectors keyed by signal name.

    Notes:
    - Detectors are created lazily on the first sample of a signal.
    - Every detector uses the engine's detector config (the global config
      when none is given).
    - The engine never resets detectors on its own; the consumer decides.
    """

    detector_config: Optional[AssuranceDetectorConfig] = None
    module: str = "qos_controller"
    _detectors: Dict[str, AssuranceDetector] = field(init=False, repr=False, default_factory=dict)

    def __post_init__(self) -> None:
        if self.detector_config is None:
            self.detector_config = config.detector

    def process(self, samples: Mapping[str, float]) -> Dict[str, Detection]:
        detections: Dict[str, Detection] = {}

        for signal, value in samples.items():
            detection = self._get_or_create(signal).process_sample(value)
            if detection is not None:
                detections[signal] = detection

        return detections

    def reset(self, signal: str, clear_baseline: bool = False) -> None:
        """
        Reset the detector of a signal.

        Raises:
            KeyError: If the signal has never been seen
        """
        if signal not in self._detectors:
            raise KeyError(f"Unknown signal: {signal}")
        self._detectors[signal].reset(clear_baseline=clear_baseline)

    def detector(self, signal: str) -> Optional[AssuranceDetector]:
        return self._detectors.get(signal)

    @property
    def signals(self) -> List[str]:
        return sorted(self._detectors)

    def _get_or_create(self, signal: str) -> AssuranceDetector:
        detector = self._detectors.get(signal)
        if detector is None:
            detector = AssuranceDetector(
                config=self.detector_config,
                tag=DetectorTag(module=self.module, name=signal),
            )
            self._detectors[signal] = detector
            logger.debug("Created assurance detector for signal %s", signal)
        return detector
