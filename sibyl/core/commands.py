"""Fixed-grammar command recognition for chat text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

COMMAND_WORD = "psychopass"
_COMMAND_PREFIX = COMMAND_WORD + " "
_LEADERBOARD_PREFIX = "leaderboard "

# Accepts "@alice", "#general" and the mention forms "<@U123>" / "<#C123>".
_ENTITY_REF = re.compile(r"^<([@#])([^\s>]{2,})>|^([@#])([^\s<>]{2,})")
_HELP = re.compile(r"^help(?:\s|$)")
_USERS = re.compile(r"^users(?:\s|$)")
_CHANNELS = re.compile(r"^channels(?:\s|$)")


class CommandKind(str, Enum):
    USER = "user"
    CHANNEL = "channel"
    SAME_CHANNEL = "same_channel"
    HELP = "help"
    LEADERBOARD_USERS = "leaderboard_users"
    LEADERBOARD_CHANNELS = "leaderboard_channels"


@dataclass(frozen=True)
class Command:
    kind: CommandKind
    target_id: Optional[str] = None


def parse_command(text: str) -> Optional[Command]:
    raw = text or ""
    if raw == COMMAND_WORD:
        return Command(CommandKind.SAME_CHANNEL)
    if not raw.startswith(_COMMAND_PREFIX):
        return None

    fragment = raw[len(_COMMAND_PREFIX):]

    match = _ENTITY_REF.match(fragment)
    if match:
        sigil = match.group(1) or match.group(3)
        target = match.group(2) or match.group(4)
        kind = CommandKind.USER if sigil == "@" else CommandKind.CHANNEL
        return Command(kind, target_id=target)

    if _HELP.match(fragment):
        return Command(CommandKind.HELP)

    if fragment.startswith(_LEADERBOARD_PREFIX):
        board = fragment[len(_LEADERBOARD_PREFIX):]
        if _USERS.match(board):
            return Command(CommandKind.LEADERBOARD_USERS)
        if _CHANNELS.match(board):
            return Command(CommandKind.LEADERBOARD_CHANNELS)

    return None
