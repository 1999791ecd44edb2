"""Per-entity rolling aggregation of message ratings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterator, Optional, Sequence

from sibyl.core.rolling_window import RollingWindow

Aggregate = Callable[[Sequence[int]], int]


@dataclass(frozen=True)
class RatedMessage:
    rating: int
    timestamp: datetime
    channel_id: Optional[str] = None


@dataclass
class EntityRecord:
    id: str
    window: RollingWindow[RatedMessage]
    score: Optional[int] = None
    cooldown_ticks: int = 0

    def ratings(self) -> list[int]:
        return [entry.rating for entry in self.window]


@dataclass(frozen=True)
class ScoreUpdate:
    entity_id: str
    old_score: Optional[int]
    new_score: int
    record: EntityRecord = field(compare=False, repr=False)
    evicted: Optional[RatedMessage] = field(default=None, compare=False)


class ScoreAggregator:
    """Owns the EntityRecord of every tracked entity of one kind.

    ``score`` of a record only changes inside :meth:`update`, recomputed from
    the window that update has just modified. :meth:`seed` sets the cached
    score restored from the entity directory before the first insertion.
    """

    def __init__(self, capacity: int, aggregate: Aggregate) -> None:
        if capacity < 1:
            raise ValueError(f"window capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._aggregate = aggregate
        self._records: dict[str, EntityRecord] = {}

    @property
    def capacity(self) -> int:
        return self._capacity

    def _record_for(self, entity_id: str) -> EntityRecord:
        record = self._records.get(entity_id)
        if record is None:
            record = EntityRecord(id=entity_id, window=RollingWindow(self._capacity))
            self._records[entity_id] = record
        return record

    def seed(self, entity_id: str, score: Optional[int]) -> EntityRecord:
        record = self._record_for(entity_id)
        if len(record.window) == 0:
            record.score = score
        return record

    def update(self, entity_id: str, message: RatedMessage) -> ScoreUpdate:
        record = self._record_for(entity_id)
        old_score = record.score
        evicted = record.window.insert(message)
        new_score = int(self._aggregate(record.ratings()))
        record.score = new_score
        return ScoreUpdate(
            entity_id=entity_id,
            old_score=old_score,
            new_score=new_score,
            record=record,
            evicted=evicted,
        )

    def get(self, entity_id: str) -> Optional[EntityRecord]:
        return self._records.get(entity_id)

    def score_of(self, entity_id: str) -> Optional[int]:
        record = self._records.get(entity_id)
        if record is None:
            return None
        return record.score

    def records(self) -> Iterator[EntityRecord]:
        return iter(self._records.values())

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._records

    def __len__(self) -> int:
        return len(self._records)
