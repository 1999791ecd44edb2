"""In-memory per-user command rate limiting."""

from __future__ import annotations

import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Callable


class RateLimitExceeded(RuntimeError):
    """Raised when a user exceeds the command threshold."""


@dataclass(frozen=True)
class LimitPolicy:
    max_events: int
    window_sec: int


class RateLimiter:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._events: dict[tuple[str, str], deque[float]] = defaultdict(deque)

    def check(self, user_id: str, kind: str, policy: LimitPolicy) -> None:
        now = self._clock()
        q = self._events[(user_id, kind)]

        while q and now - q[0] >= policy.window_sec:
            q.popleft()

        if len(q) >= policy.max_events:
            raise RateLimitExceeded(f"rate limit exceeded for user={user_id}, kind={kind}")

        q.append(now)
