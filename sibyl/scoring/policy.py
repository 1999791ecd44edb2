"""Message rating and Psycho-Pass aggregation policies."""

from __future__ import annotations

import re
from typing import Callable, Protocol, Sequence

from sibyl.config.settings import ScoringConfig


class ScoringPolicy(Protocol):
    def rate(self, text: str) -> int:
        """Rate a single message."""

    def aggregate_user(self, ratings: Sequence[int]) -> int:
        """Aggregate most-recent-first ratings into a user Psycho-Pass."""

    def aggregate_channel(self, ratings: Sequence[int]) -> int:
        """Aggregate most-recent-first ratings into a channel Psycho-Pass."""


_LETTERS = re.compile(r"[A-Za-z]")
_MAX_EXCLAMATIONS = 5


def mean_score(ratings: Sequence[int]) -> int:
    if not ratings:
        return 0
    return int(round(sum(ratings) / len(ratings)))


def recency_weighted_score(ratings: Sequence[int]) -> int:
    # Most recent rating (index 0) weighs len(ratings), the oldest weighs 1.
    if not ratings:
        return 0
    n = len(ratings)
    total = 0
    weights = 0
    for index, rating in enumerate(ratings):
        weight = n - index
        total += rating * weight
        weights += weight
    return int(round(total / weights))


class LexiconScoringPolicy:
    def __init__(self, config: ScoringConfig) -> None:
        self._config = config
        self._terms = [
            (re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE), weight)
            for term, weight in sorted(config.terms.items())
        ]

    def rate(self, text: str) -> int:
        cfg = self._config
        src = text or ""
        rating = cfg.base_rating

        for pattern, weight in self._terms:
            hits = len(pattern.findall(src))
            if hits:
                rating += hits * weight

        letters = _LETTERS.findall(src)
        if len(letters) >= 4:
            upper = sum(1 for ch in letters if ch.isupper())
            if upper / len(letters) > 0.7:
                rating += cfg.shout_weight

        rating += min(_MAX_EXCLAMATIONS, src.count("!")) * cfg.exclamation_weight
        return max(0, min(cfg.rating_ceiling, rating))

    def aggregate_user(self, ratings: Sequence[int]) -> int:
        return min(self._config.rating_ceiling, mean_score(ratings))

    def aggregate_channel(self, ratings: Sequence[int]) -> int:
        return min(self._config.rating_ceiling, recency_weighted_score(ratings))


def score_messages(
    policy: ScoringPolicy,
    texts: Sequence[str],
    aggregate: Callable[[Sequence[int]], int],
) -> tuple[int, list[int]]:
    """Rate a batch of messages given most-recent-first.

    Returns the aggregate Psycho-Pass and the per-message ratings.
    """
    ratings = [policy.rate(text) for text in texts]
    return aggregate(ratings), ratings
