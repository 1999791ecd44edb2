from sibyl.core.commands import Command, CommandKind, parse_command


def test_bare_word_queries_current_channel() -> None:
    assert parse_command("psychopass") == Command(CommandKind.SAME_CHANNEL)


def test_user_reference() -> None:
    assert parse_command("psychopass @alice123") == Command(CommandKind.USER, "alice123")
    assert parse_command("psychopass <@U024BE7LH> please") == Command(CommandKind.USER, "U024BE7LH")


def test_channel_reference() -> None:
    assert parse_command("psychopass #general extra") == Command(CommandKind.CHANNEL, "general")
    assert parse_command("psychopass <#C1234>") == Command(CommandKind.CHANNEL, "C1234")


def test_reference_needs_two_characters() -> None:
    assert parse_command("psychopass @a") is None


def test_help_and_leaderboards() -> None:
    assert parse_command("psychopass help") == Command(CommandKind.HELP)
    assert parse_command("psychopass help me") == Command(CommandKind.HELP)
    assert parse_command("psychopass leaderboard users") == Command(CommandKind.LEADERBOARD_USERS)
    assert parse_command("psychopass leaderboard users extra") == Command(CommandKind.LEADERBOARD_USERS)
    assert parse_command("psychopass leaderboard channels") == Command(CommandKind.LEADERBOARD_CHANNELS)


def test_non_commands() -> None:
    for text in [
        "psychopassx",
        "psychopass helpme",
        "psychopass leaderboard usersx",
        "psychopass leaderboard",
        "hello psychopass",
        "",
    ]:
        assert parse_command(text) is None
