"""
Bounded FIFO storage shared by the baseline window and the checkpoint ledger.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Generic, Iterator, List, Optional, TypeVar


T = TypeVar("T")


class RingBuffer(Generic[T]):
    """
    Fixed-capacity FIFO buffer.

    Appending to a full buffer evicts the oldest item. Capacity is set once and
    never changes; clear() empties the buffer in place.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"Ring buffer capacity must be >= 1, got {capacity}")
        self._capacity: int = capacity
        self._items: Deque[T] = deque(maxlen=capacity)

    def append(self, item: T) -> Optional[T]:
        """Append an item, returning the evicted oldest item if the buffer was full."""
        evicted = self._items[0] if self.is_full else None
        self._items.append(item)
        return evicted

    def clear(self) -> None:
        self._items.clear()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._items) == self._capacity

    @property
    def newest(self) -> Optional[T]:
        return self._items[-1] if self._items else None

    def snapshot(self) -> List[T]:
        """Items ordered oldest to newest."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"RingBuffer(capacity={self._capacity}, items={list(self._items)!r})"
