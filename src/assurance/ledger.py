"""
Checkpoint ledger and quorum vote.

The ledger is a fixed-capacity history of classifier verdicts, one per tick.
The voter turns the checkpoints of the current deviation episode into a
single detection decision.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .buffers import RingBuffer
from .classifier import EPSILON
from .schema import Checkpoint, Detection, DetectorTag

# A vote is taken over at least this many checkpoints, so a lone dropped
# checkpoint only ever carries half of it.
MIN_VOTE_CHECKPOINTS = 2


@dataclass
class CheckpointLedger:
    """
    Ring buffer of the last max_checkpoints checkpoints.

    Notes:
    - Every checkpoint is recorded, dropped or not.
    - An episode opens with the first dropped checkpoint. Only checkpoints
      from the episode's opening tick onward take part in the vote, so a long
      stable history does not bury a fresh drop.
    - The episode closes once none of its checkpoints still in the ledger is
      dropped.
    - Nothing is cleared after a detection; only clear() empties the ledger.
    """

    max_checkpoints: int
    _checkpoints: RingBuffer[Checkpoint] = field(init=False, repr=False)
    _episode_start: Optional[int] = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        self._checkpoints = RingBuffer(self.max_checkpoints)

    def append(self, checkpoint: Checkpoint) -> Optional[Checkpoint]:
        """
        Record the checkpoint of a tick.

        Returns:
            The checkpoint evicted to make room, if the ledger was full.
        """
        evicted = self._checkpoints.append(checkpoint)
        if checkpoint.dropped and self._episode_start is None:
            self._episode_start = checkpoint.tick
        elif self._episode_start is not None and not any(c.dropped for c in self.episode):
            self._episode_start = None
        return evicted

    def clear(self) -> None:
        self._checkpoints.clear()
        self._episode_start = None

    @property
    def episode_open(self) -> bool:
        return self._episode_start is not None

    @property
    def episode_start(self) -> Optional[int]:
        """Tick of the checkpoint that opened the current episode."""
        return self._episode_start

    @property
    def episode(self) -> List[Checkpoint]:
        """Checkpoints of the open episode that are still in the ledger."""
        if self._episode_start is None:
            return []
        return [c for c in self._checkpoints if c.tick >= self._episode_start]

    @property
    def true_count(self) -> int:
        return sum(1 for c in self.episode if c.dropped)

    @property
    def true_fraction(self) -> float:
        episode = self.episode
        if not episode:
            return 0.0
        votes = max(len(episode), min(MIN_VOTE_CHECKPOINTS, self.max_checkpoints))
        return self.true_count / votes

    @property
    def checkpoints(self) -> List[Checkpoint]:
        return self._checkpoints.snapshot()

    def most_severe(self) -> Optional[Checkpoint]:
        dropped = [c for c in self.episode if c.dropped]
        if not dropped:
            return None
        # Ties go to the most recent checkpoint.
        return max(reversed(dropped), key=lambda c: c.severity)

    def __len__(self) -> int:
        return len(self._checkpoints)


@dataclass(frozen=True)
class QuorumVoter:
    """
    Aggregates the ledger into a detect / no-detect decision.

    The ledger does not need to be full to vote.
    """

    quorum: float

    def vote(
        self,
        ledger: CheckpointLedger,
        tag: DetectorTag,
        tick: int,
        sample: float,
    ) -> Optional[Detection]:
        if not ledger.episode_open:
            return None

        fraction = ledger.true_fraction
        if fraction < self.quorum - EPSILON:
            return None

        strongest = ledger.most_severe()
        if strongest is None:
            return None

        return Detection(
            tag=tag,
            tick=tick,
            sample=sample,
            severity=strongest.severity,
            classification=strongest.classification,
            reference=strongest.reference,
            true_fraction=fraction,
        )
