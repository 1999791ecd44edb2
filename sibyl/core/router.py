"""Per-message orchestration of scoring, ranking, mitigation and commands."""

from __future__ import annotations

import asyncio
import functools
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sibyl.bot.templates import (
    channel_label,
    channel_score_text,
    help_text,
    leaderboard_text,
    unknown_channel_text,
    unknown_user_text,
    user_score_text,
)
from sibyl.config.settings import Settings
from sibyl.core.aggregator import RatedMessage, ScoreAggregator
from sibyl.core.commands import Command, CommandKind, parse_command
from sibyl.core.cooldown import CooldownMonitor
from sibyl.core.directory import EntityDirectory
from sibyl.core.leaderboard import Leaderboard
from sibyl.mitigation.giphy import MitigationClient
from sibyl.models.message import InboundMessage
from sibyl.scoring.policy import ScoringPolicy, score_messages

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoutedMessage:
    replies: list[str]
    mitigation: Optional[asyncio.Task[str]] = None


def _log_mitigation_failure(channel_id: str, task: asyncio.Task[str]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        LOGGER.error("mitigation response dropped channel_id=%s", channel_id, exc_info=exc)


async def settle_mitigation(task: Optional[asyncio.Task[str]]) -> Optional[str]:
    """Wait for a mitigation lookup; None when there was none or it failed."""
    if task is None:
        return None
    await asyncio.wait({task})
    if task.cancelled() or task.exception() is not None:
        return None
    return task.result()


class MessageRouter:
    """Owns every user and channel record of one bot instance.

    All state changes for a message are applied before ``route`` first
    yields to the event loop, so messages never interleave mid-update.
    """

    def __init__(
        self,
        directory: EntityDirectory,
        policy: ScoringPolicy,
        mitigation: MitigationClient,
        *,
        user_window: int,
        channel_window: int,
        threshold: int,
        cooldown_messages: int,
        leaderboard_size: int,
    ) -> None:
        self._directory = directory
        self._policy = policy
        self._mitigation = mitigation
        self.leaderboard_size = leaderboard_size

        self.users = ScoreAggregator(user_window, policy.aggregate_user)
        self.channels = ScoreAggregator(channel_window, policy.aggregate_channel)
        self.user_leaderboard = Leaderboard()
        self.channel_leaderboard = Leaderboard()
        self.cooldown = CooldownMonitor(threshold=threshold, reset_ticks=cooldown_messages)

        self._seed()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        directory: EntityDirectory,
        policy: ScoringPolicy,
        mitigation: MitigationClient,
    ) -> "MessageRouter":
        return cls(
            directory,
            policy,
            mitigation,
            user_window=settings.windows.user_messages,
            channel_window=settings.windows.channel_messages,
            threshold=settings.mitigation.threshold,
            cooldown_messages=settings.mitigation.cooldown_messages,
            leaderboard_size=settings.leaderboard.size,
        )

    def _seed(self) -> None:
        for seed in self._directory.user_seeds():
            self.users.seed(seed.id, seed.psycho_pass)
            if seed.psycho_pass is not None:
                self.user_leaderboard.update(seed.id, seed.psycho_pass)
        for seed in self._directory.channel_seeds():
            self.channels.seed(seed.id, seed.psycho_pass)
            if seed.psycho_pass is not None:
                self.channel_leaderboard.update(seed.id, seed.psycho_pass)
        LOGGER.info(
            "leaderboards seeded users=%s channels=%s",
            len(self.user_leaderboard),
            len(self.channel_leaderboard),
        )

    async def route(self, message: InboundMessage, commands_enabled: bool = True) -> RoutedMessage:
        """Apply ``message`` to every record and answer its command.

        Returns without waiting for a mitigation lookup; the scheduled lookup,
        if any, comes back as ``RoutedMessage.mitigation``.
        """
        tracked = self._directory.has_channel(message.channel_id)
        pending: Optional[asyncio.Task[str]] = None

        try:
            if tracked:
                rating = self._policy.rate(message.text)
                if self._update_channel(message, rating):
                    pending = asyncio.create_task(self._mitigation.fetch())
                    pending.add_done_callback(
                        functools.partial(_log_mitigation_failure, message.channel_id)
                    )
                self._update_user(message, rating)

            replies: list[str] = []
            command = parse_command(message.text) if commands_enabled else None
            if command is not None:
                LOGGER.info("command recognized kind=%s sender_id=%s", command.kind.value, message.sender_id)
                reply = self._respond(command, message.channel_id, tracked)
                if reply:
                    replies.append(reply)
        except Exception:
            if pending is not None:
                pending.cancel()
            raise
        return RoutedMessage(replies=replies, mitigation=pending)

    async def handle(self, message: InboundMessage, commands_enabled: bool = True) -> list[str]:
        """Route ``message`` and wait for its mitigation text, command reply first."""
        routed = await self.route(message, commands_enabled=commands_enabled)
        responses = list(routed.replies)
        text = await settle_mitigation(routed.mitigation)
        if text is not None:
            responses.append(text)
        return responses

    def _update_channel(self, message: InboundMessage, rating: int) -> bool:
        update = self.channels.update(
            message.channel_id,
            RatedMessage(rating=rating, timestamp=message.timestamp),
        )
        self.channel_leaderboard.update(message.channel_id, update.new_score, update.old_score)
        self._directory.update_channel_score(message.channel_id, update.new_score)

        triggered = self.cooldown.observe(update.record)
        if triggered:
            LOGGER.info(
                "mitigation triggered channel_id=%s score=%s threshold=%s",
                message.channel_id,
                update.new_score,
                self.cooldown.threshold,
            )
        return triggered

    def _update_user(self, message: InboundMessage, rating: int) -> None:
        update = self.users.update(
            message.sender_id,
            RatedMessage(rating=rating, timestamp=message.timestamp, channel_id=message.channel_id),
        )
        self.user_leaderboard.update(message.sender_id, update.new_score, update.old_score)
        self._directory.update_user_score(message.sender_id, update.new_score)

    def _respond(self, command: Command, channel_id: str, tracked: bool) -> Optional[str]:
        if command.kind == CommandKind.USER:
            return self.user_score(command.target_id or "")
        if command.kind == CommandKind.CHANNEL:
            return self.channel_score(command.target_id or "")
        if command.kind == CommandKind.SAME_CHANNEL:
            if tracked:
                return self.channel_score(channel_id)
            return None
        if command.kind == CommandKind.HELP:
            return help_text()
        if command.kind == CommandKind.LEADERBOARD_USERS:
            return self.users_leaderboard_text()
        if command.kind == CommandKind.LEADERBOARD_CHANNELS:
            return self.channels_leaderboard_text()
        return None

    def user_score(self, user_id: str) -> str:
        name = self._directory.user_name(user_id)
        if name is None:
            return unknown_user_text(user_id)
        return user_score_text(name, self.users.score_of(user_id))

    def channel_score(self, channel_id: str) -> str:
        name = self._directory.channel_name(channel_id)
        if name is None:
            return unknown_channel_text(channel_id)
        return channel_score_text(channel_label(channel_id, name), self.channels.score_of(channel_id))

    def users_leaderboard_text(self) -> str:
        k = self.leaderboard_size
        return leaderboard_text(
            lowest=self.user_leaderboard.lowest(k),
            highest=self.user_leaderboard.highest(k),
            label_for=lambda user_id: self._directory.user_name(user_id) or user_id,
        )

    def channels_leaderboard_text(self) -> str:
        k = self.leaderboard_size
        return leaderboard_text(
            lowest=self.channel_leaderboard.lowest(k),
            highest=self.channel_leaderboard.highest(k),
            label_for=lambda channel_id: channel_label(channel_id, self._directory.channel_name(channel_id)),
        )

    def score_user_messages(self, texts: Sequence[str]) -> tuple[int, list[int]]:
        return score_messages(self._policy, texts, self._policy.aggregate_user)

    def score_channel_messages(self, texts: Sequence[str]) -> tuple[int, list[int]]:
        return score_messages(self._policy, texts, self._policy.aggregate_channel)
