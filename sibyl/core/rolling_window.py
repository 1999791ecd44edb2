"""Fixed-capacity, most-recent-first buffer of rated messages."""

from __future__ import annotations

from collections import deque
from typing import Deque, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


class RollingWindow(Generic[T]):
    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"window capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        # Left end is the most recent item.
        self._items: Deque[T] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    def insert(self, item: T) -> Optional[T]:
        """Insert ``item`` as the most recent entry.

        Returns the evicted oldest entry when the window was already full,
        otherwise ``None``.
        """
        evicted: Optional[T] = None
        if len(self._items) >= self._capacity:
            evicted = self._items.pop()
        self._items.appendleft(item)
        return evicted

    def to_ordered(self) -> list[T]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)
