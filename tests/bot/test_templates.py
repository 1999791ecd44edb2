from sibyl.bot.templates import (
    channel_label,
    channel_score_text,
    help_text,
    leaderboard_text,
    start_text,
    user_score_text,
)
from sibyl.core.leaderboard import LeaderboardEntry


def test_help_lists_every_command() -> None:
    text = help_text()
    for form in [
        "psychopass @<username>",
        "psychopass [#<channel>]",
        "psychopass leaderboard users",
        "psychopass leaderboard channels",
        "psychopass help",
    ]:
        assert form in text


def test_start_mentions_help() -> None:
    assert "psychopass help" in start_text()


def test_score_texts() -> None:
    assert user_score_text("Alice", 42) == "Alice has a Psycho-Pass of 42"
    assert user_score_text("Alice", None) == "Alice has no Psycho-Pass yet"
    assert channel_score_text(channel_label("-100", "general"), 7) == "#general has a Psycho-Pass of 7"
    assert channel_label("-100", None) == "#-100"


def test_leaderboard_layout() -> None:
    text = leaderboard_text(
        lowest=[LeaderboardEntry("a", 1)],
        highest=[LeaderboardEntry("b", 99)],
        label_for=str.upper,
    )
    assert text == "Lowest:\n1    A\n\nHighest:\n99    B"
