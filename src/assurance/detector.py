"""
Assurance detector: sustained-drop detection for a single performance signal.

Per tick:

    sample
        ↓
    Baseline window (level read before the update)
        ↓
    Deviation classifier → Checkpoint
        ↓
    Checkpoint ledger
        ↓
    Quorum voter → Optional[Detection]

When a drop opens a deviation episode, the level it was compared against is
latched as the episode reference. Later samples are compared with that
reference (with the relaxed near-fraction threshold, and a rise over the
previous sample credited by half) until the episode closes or the consumer
calls reset(). The detector never resets itself.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from pydantic import ValidationError

from src.core.config import AssuranceDetectorConfig
from src.core.exceptions import ConfigurationError

from .baselines import BaselineWindow
from .classifier import DeviationClassifier
from .ledger import CheckpointLedger, QuorumVoter
from .schema import Checkpoint, Detection, DetectorState, DetectorTag

logger = logging.getLogger(__name__)


def build_config(
    cfg: Optional[AssuranceDetectorConfig] = None, **overrides: Any
) -> AssuranceDetectorConfig:
    """
    Validate detector options.

    Raises:
        ConfigurationError: If any option is out of range or unknown
    """
    try:
        if cfg is None:
            return AssuranceDetectorConfig(**overrides)
        if overrides:
            data = cfg.model_dump()
            data.update(overrides)
            return AssuranceDetectorConfig(**data)
        return cfg
    except (TypeError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid assurance detector configuration: {exc}") from exc


class AssuranceDetector:
    """
    Stateful change-point detector for one monitored signal.

    Single writer: process_sample() and reset() must not be called
    concurrently on the same instance. Separate instances share nothing.
    """

    def __init__(
        self,
        config: Optional[AssuranceDetectorConfig] = None,
        tag: Optional[DetectorTag] = None,
        **overrides: Any,
    ) -> None:
        self._config = build_config(config, **overrides)
        self._tag = tag or DetectorTag()

        self._window = BaselineWindow(
            window_size=self._config.window_size,
            statistic=self._config.baseline_statistic,
        )
        self._classifier = DeviationClassifier.from_config(self._config)
        self._ledger = CheckpointLedger(max_checkpoints=self._config.max_checkpoints)
        self._voter = QuorumVoter(quorum=self._config.quorum)

        self._tick = -1
        self._ticks_since_reset = 0
        self._reference: Optional[float] = None
        self._previous: Optional[float] = None
        self._last_checkpoint: Optional[Checkpoint] = None

    def process_sample(self, sample: float) -> Optional[Detection]:
        """
        Feed the next sample of the signal.

        Returns:
            Detection if the quorum of recent checkpoints saw a drop, else None.
        """
        self._tick += 1
        self._ticks_since_reset += 1
        tick = self._tick
        sample = float(sample)

        baseline = self._window.baseline()

        if not math.isfinite(sample):
            logger.warning("%s: ignoring non-finite sample %r at tick %d", self._tag, sample, tick)
            self._last_checkpoint = self._classifier.classify(tick, baseline, sample)
            self._record(self._last_checkpoint)
            return self._voter.vote(self._ledger, self._tag, tick, sample)

        self._window.update(sample)

        if baseline is None:
            checkpoint = self._classifier.neutral(tick)
        else:
            sustaining = self._reference is not None
            reference = self._reference if sustaining else baseline
            checkpoint = self._classifier.classify(
                tick, reference, sample, sustaining, previous=self._previous
            )
            if checkpoint.dropped and not sustaining:
                self._reference = reference
                logger.info(
                    "%s: deviation episode opened at tick %d (reference=%.4f, sample=%.4f)",
                    self._tag,
                    tick,
                    reference,
                    sample,
                )

        self._previous = sample
        self._last_checkpoint = checkpoint
        self._record(checkpoint)

        logger.debug(
            "%s: tick=%d sample=%.4f baseline=%s verdict=%s true_fraction=%.3f",
            self._tag,
            tick,
            sample,
            baseline,
            checkpoint.classification.value,
            self._ledger.true_fraction,
        )

        detection = self._voter.vote(self._ledger, self._tag, tick, sample)
        if detection is not None:
            logger.info(
                "%s: drop detected at tick %d (severity=%.4f, true_fraction=%.3f)",
                self._tag,
                tick,
                detection.severity,
                detection.true_fraction,
            )
        return detection

    def reset(self, clear_baseline: bool = False) -> None:
        """
        Re-arm the detector after a corrective action.

        Clears the checkpoint ledger and releases the episode reference. The
        baseline window is kept and recalibrates through further samples,
        unless clear_baseline is set.
        """
        self._ledger.clear()
        self._reference = None
        self._ticks_since_reset = 0
        if clear_baseline:
            self._window.clear()
            self._previous = None
        logger.info("%s: reset at tick %d (clear_baseline=%s)", self._tag, self._tick, clear_baseline)

    def _record(self, checkpoint: Checkpoint) -> None:
        was_open = self._ledger.episode_open
        self._ledger.append(checkpoint)
        if was_open and not self._ledger.episode_open:
            self._reference = None
            logger.info("%s: deviation episode closed at tick %d", self._tag, checkpoint.tick)

    @property
    def config(self) -> AssuranceDetectorConfig:
        return self._config

    @property
    def tag(self) -> DetectorTag:
        return self._tag

    @property
    def tick(self) -> int:
        """Index of the last processed sample (-1 before the first one)."""
        return self._tick

    @property
    def window(self) -> BaselineWindow:
        return self._window

    @property
    def ledger(self) -> CheckpointLedger:
        return self._ledger

    @property
    def reference(self) -> Optional[float]:
        """Reference level latched by the open deviation episode, if any."""
        return self._reference

    @property
    def last_checkpoint(self) -> Optional[Checkpoint]:
        return self._last_checkpoint

    @property
    def state(self) -> DetectorState:
        if not len(self._window):
            return DetectorState.UNINITIALIZED
        if not self._window.is_full or self._ticks_since_reset < self._config.max_checkpoints:
            return DetectorState.CALIBRATING
        return DetectorState.ARMED
