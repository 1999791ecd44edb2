"""Chat response templates."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from sibyl.core.leaderboard import LeaderboardEntry


def help_text() -> str:
    return (
        "The following commands are available:\n"
        "psychopass @<username>  -  See the Psycho-Pass of a user\n"
        "psychopass [#<channel>]  -  See the Psycho-Pass of the current channel"
        " or of the channel specified by the optional parameter\n"
        "psychopass leaderboard users  -  See the lowest and highest user Psycho-Passes\n"
        "psychopass leaderboard channels  -  See the lowest and highest channel Psycho-Passes\n"
        "psychopass help  -  See this help message"
    )


def start_text() -> str:
    return (
        "Sibyl is monitoring this chat.\n"
        "Messages in tracked channels update user and channel Psycho-Passes.\n"
        "Send `psychopass help` for the command list."
    )


def channel_label(channel_id: str, name: Optional[str]) -> str:
    return f"#{name or channel_id}"


def user_score_text(name: str, psycho_pass: Optional[int]) -> str:
    if psycho_pass is None:
        return f"{name} has no Psycho-Pass yet"
    return f"{name} has a Psycho-Pass of {psycho_pass}"


def channel_score_text(label: str, psycho_pass: Optional[int]) -> str:
    if psycho_pass is None:
        return f"{label} has no Psycho-Pass yet"
    return f"{label} has a Psycho-Pass of {psycho_pass}"


def unknown_user_text(user_id: str) -> str:
    return f"No user named @{user_id} is known to Sibyl"


def unknown_channel_text(channel_id: str) -> str:
    return f"#{channel_id} is not monitored by Sibyl"


def leaderboard_text(
    lowest: Sequence[LeaderboardEntry],
    highest: Sequence[LeaderboardEntry],
    label_for: Callable[[str], str],
) -> str:
    lines = ["Lowest:"]
    for entry in lowest:
        lines.append(f"{entry.score}    {label_for(entry.id)}")
    lines.append("")
    lines.append("Highest:")
    for entry in highest:
        lines.append(f"{entry.score}    {label_for(entry.id)}")
    return "\n".join(lines)
