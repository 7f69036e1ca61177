"""
Baseline estimation for assurance detection.

The baseline window holds the most recent samples of the monitored signal and
exposes their reference level: the level the signal is expected to stay at.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from statistics import mean, median
from typing import List, Optional

from .buffers import RingBuffer


BASELINE_STATISTICS = ("median", "mean")


@dataclass
class BaselineWindow:
    """
    Rolling reference level over the last window_size samples.

    Notes:
    - Strict FIFO: once full, every update evicts the oldest sample.
    - No level is defined while the window is empty; the first sample only
      seeds it.
    - statistic selects the median (robust to the first samples of a step)
      or the arithmetic mean of the window contents.
    """

    window_size: int
    statistic: str = "median"
    _values: RingBuffer[float] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.statistic not in BASELINE_STATISTICS:
            raise ValueError(f"Unknown baseline statistic: {self.statistic}")
        self._values = RingBuffer(self.window_size)

    def baseline(self) -> Optional[float]:
        """Reference level of the current contents, without mutating them."""
        if not len(self._values):
            return None
        values = self._values.snapshot()
        if self.statistic == "mean":
            return mean(values)
        return median(values)

    def update(self, sample: float) -> float:
        """Append a sample and return the level including it."""
        self._values.append(float(sample))
        return self.baseline()

    def clear(self) -> None:
        self._values.clear()

    @property
    def values(self) -> List[float]:
        return self._values.snapshot()

    @property
    def is_full(self) -> bool:
        return self._values.is_full

    def __len__(self) -> int:
        return len(self._values)
