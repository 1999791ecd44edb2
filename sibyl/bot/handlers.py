"""Telegram update handlers."""

from __future__ import annotations

import asyncio
import logging

from pydantic import ValidationError
from telegram import Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

from sibyl.bot.templates import help_text, start_text
from sibyl.core.commands import parse_command
from sibyl.core.router import settle_mitigation
from sibyl.core.runtime import AppRuntime
from sibyl.models.message import InboundMessage
from sibyl.security.rate_limit import RateLimitExceeded

LOGGER = logging.getLogger(__name__)


def sender_id_for(update: Update) -> str:
    user = update.effective_user
    assert user is not None
    # Usernames are what people type after "psychopass @".
    if user.username:
        return user.username
    return str(user.id)


def _channel_id(update: Update) -> str:
    assert update.effective_chat is not None
    return str(update.effective_chat.id)


class TelegramHandlers:
    def __init__(self, runtime: AppRuntime) -> None:
        self.runtime = runtime
        self.deliveries: set[asyncio.Task[None]] = set()

    async def _reply(self, update: Update, text: str) -> None:
        message = update.effective_message
        if message is None:
            return
        try:
            await message.reply_text(text)
        except TelegramError as exc:
            LOGGER.warning("reply failed chat_id=%s error=%s", _channel_id(update), exc)

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._reply(update, start_text())

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._reply(update, help_text())

    async def text_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        user = update.effective_user
        if message is None or user is None or user.is_bot or not message.text:
            return

        sender_id = sender_id_for(update)
        self.runtime.register_user(sender_id, user.full_name or sender_id)

        try:
            inbound = InboundMessage(
                sender_id=sender_id,
                channel_id=_channel_id(update),
                text=message.text,
                timestamp=message.date,
            )
        except ValidationError as exc:
            LOGGER.warning("inbound message rejected sender_id=%s error=%s", sender_id, exc)
            return

        commands_enabled = True
        if parse_command(inbound.text) is not None:
            try:
                self.runtime.check_command_rate(sender_id)
            except RateLimitExceeded as exc:
                LOGGER.info("command dropped sender_id=%s reason=%s", sender_id, exc)
                commands_enabled = False

        routed = await self.runtime.route_message(inbound, commands_enabled=commands_enabled)
        for text in routed.replies:
            await self._reply(update, text)

        if routed.mitigation is not None:
            # Delivered outside this update.
            delivery = asyncio.create_task(self._deliver_mitigation(update, routed.mitigation))
            self.deliveries.add(delivery)
            delivery.add_done_callback(self._delivery_done)

    async def _deliver_mitigation(self, update: Update, pending: asyncio.Task[str]) -> None:
        text = await settle_mitigation(pending)
        if text is not None:
            await self._reply(update, text)

    def _delivery_done(self, task: asyncio.Task[None]) -> None:
        self.deliveries.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("mitigation delivery failed", exc_info=exc)
