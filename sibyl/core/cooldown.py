"""Message-driven mitigation cooldown per channel."""

from __future__ import annotations

import logging
from enum import Enum

from sibyl.core.aggregator import EntityRecord

LOGGER = logging.getLogger(__name__)


class CooldownState(str, Enum):
    ARMED = "ARMED"
    COOLING = "COOLING"


class CooldownMonitor:
    def __init__(self, threshold: int, reset_ticks: int) -> None:
        if reset_ticks < 0:
            raise ValueError("cooldown reset must be >= 0")
        self.threshold = threshold
        self.reset_ticks = reset_ticks

    @staticmethod
    def state_of(record: EntityRecord) -> CooldownState:
        if record.cooldown_ticks > 0:
            return CooldownState.COOLING
        return CooldownState.ARMED

    def observe(self, record: EntityRecord) -> bool:
        """Advance ``record`` by one channel message.

        Returns True when this message crosses the threshold while armed;
        the cooldown is already set when this returns.
        """
        if record.cooldown_ticks > 0:
            record.cooldown_ticks -= 1
            return False

        score = record.score
        if score is None or score <= self.threshold:
            return False

        record.cooldown_ticks = self.reset_ticks
        LOGGER.info(
            "cooldown armed->cooling channel_id=%s score=%s ticks=%s",
            record.id,
            score,
            record.cooldown_ticks,
        )
        return True
