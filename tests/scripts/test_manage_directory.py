from pathlib import Path

import pytest
import yaml

from scripts import manage_directory


def _settings(tmp_path: Path) -> Path:
    src = yaml.safe_load(Path("config/sibyl.yaml").read_text(encoding="utf-8"))
    src["storage"]["sqlite"] = str(tmp_path / "sibyl.sqlite3")
    path = tmp_path / "sibyl.yaml"
    path.write_text(yaml.safe_dump(src), encoding="utf-8")
    return path


def test_add_and_list_channels(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    settings = str(_settings(tmp_path))
    assert manage_directory.main(["--settings", settings, "add-channel", "-100", "general"]) == 0
    assert manage_directory.main(["--settings", settings, "list", "channels"]) == 0
    out = capsys.readouterr().out
    assert "-100  general" in out


def test_remove_unknown_channel_fails(tmp_path: Path) -> None:
    settings = str(_settings(tmp_path))
    assert manage_directory.main(["--settings", settings, "remove-channel", "nope"]) == 1


def test_score_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    messages = tmp_path / "messages.txt"
    messages.write_text("you idiot\n\nhello there\n", encoding="utf-8")
    settings = str(_settings(tmp_path))
    assert manage_directory.main(["--settings", settings, "score", "user", str(messages)]) == 0
    assert "Psycho-Pass: 50" in capsys.readouterr().out


def test_invalid_settings_exit_code(tmp_path: Path) -> None:
    assert manage_directory.main(["--settings", str(tmp_path / "missing.yaml"), "list", "users"]) == 2
