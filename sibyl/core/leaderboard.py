"""Ranked index of entity scores with top-K / bottom-K queries."""

from __future__ import annotations

import bisect
import itertools
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LeaderboardEntry:
    id: str
    score: int


# Sort key: (score, -sequence). Ascending order puts the lowest score first;
# among equal scores the entry set most recently sorts first, so the entry
# set earliest is the one reached first when walking from the top.
_Key = tuple[int, int]


class Leaderboard:
    """Order-statistics index kept fully sorted on every update."""

    def __init__(self) -> None:
        self._keys: list[_Key] = []
        self._ids: list[str] = []
        self._key_by_id: dict[str, _Key] = {}
        self._sequence = itertools.count(1)

    def update(self, entity_id: str, new_score: int, old_score: Optional[int] = None) -> None:
        """Insert or reposition ``entity_id`` at ``new_score``.

        ``old_score`` is the score the caller last reported for the entity.
        A call that does not change the stored score leaves the ranking,
        including tie order, untouched.
        """
        current = self._key_by_id.get(entity_id)
        if current is not None:
            if current[0] == new_score:
                return
            self._remove(entity_id, current)

        key = (int(new_score), -next(self._sequence))
        index = bisect.bisect_left(self._keys, key)
        self._keys.insert(index, key)
        self._ids.insert(index, entity_id)
        self._key_by_id[entity_id] = key

    def _remove(self, entity_id: str, key: _Key) -> None:
        index = bisect.bisect_left(self._keys, key)
        if index >= len(self._keys) or self._ids[index] != entity_id:
            raise KeyError(f"leaderboard index out of sync for id={entity_id}")
        del self._keys[index]
        del self._ids[index]
        del self._key_by_id[entity_id]

    def highest(self, k: int) -> list[LeaderboardEntry]:
        if k <= 0:
            return []
        count = min(k, len(self._keys))
        out: list[LeaderboardEntry] = []
        for index in range(len(self._keys) - 1, len(self._keys) - 1 - count, -1):
            out.append(LeaderboardEntry(id=self._ids[index], score=self._keys[index][0]))
        return out

    def lowest(self, k: int) -> list[LeaderboardEntry]:
        if k <= 0:
            return []
        count = min(k, len(self._keys))
        return [
            LeaderboardEntry(id=self._ids[index], score=self._keys[index][0])
            for index in range(count)
        ]

    def score_of(self, entity_id: str) -> Optional[int]:
        key = self._key_by_id.get(entity_id)
        if key is None:
            return None
        return key[0]

    def rank_of(self, entity_id: str) -> Optional[int]:
        """1-based position of ``entity_id`` in :meth:`highest` order."""
        key = self._key_by_id.get(entity_id)
        if key is None:
            return None
        return len(self._keys) - bisect.bisect_left(self._keys, key)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._key_by_id

    def __len__(self) -> int:
        return len(self._keys)
