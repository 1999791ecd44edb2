"""Settings loader for the Sibyl bot."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
from typing import Any

import yaml


@dataclass(frozen=True)
class WindowConfig:
    user_messages: int
    channel_messages: int


@dataclass(frozen=True)
class MitigationConfig:
    threshold: int
    cooldown_messages: int
    timeout_seconds: int
    endpoint: str
    response_text: str
    fallback_text: str


@dataclass(frozen=True)
class LeaderboardConfig:
    size: int


@dataclass(frozen=True)
class ScoringConfig:
    rating_ceiling: int
    base_rating: int
    shout_weight: int
    exclamation_weight: int
    terms: dict[str, int]


@dataclass(frozen=True)
class RateLimitConfig:
    command_per_minute: int


@dataclass(frozen=True)
class StorageConfig:
    sqlite: str


@dataclass(frozen=True)
class InstanceConfig:
    id: str


@dataclass(frozen=True)
class Settings:
    version: str
    windows: WindowConfig
    mitigation: MitigationConfig
    leaderboard: LeaderboardConfig
    scoring: ScoringConfig
    rate_limit: RateLimitConfig
    storage: StorageConfig
    instance: InstanceConfig


class SettingsLoadError(RuntimeError):
    """Raised when settings cannot be loaded."""


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise SettingsLoadError(f"missing required settings key: {key}")
    return data[key]


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = _require(data, key)
    if not isinstance(value, dict):
        raise SettingsLoadError(f"{key} must be an object")
    return value


def _positive_int(section: dict[str, Any], key: str, label: str) -> int:
    try:
        value = int(_require(section, key))
    except (TypeError, ValueError) as exc:
        raise SettingsLoadError(f"{label} must be an integer") from exc
    if value <= 0:
        raise SettingsLoadError(f"{label} must be > 0")
    return value


def load_settings(path: Path) -> Settings:
    if not path.exists():
        raise SettingsLoadError(f"settings file not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise SettingsLoadError("settings root must be an object")

    windows_raw = _section(raw, "windows")
    mitigation_raw = _section(raw, "mitigation")
    leaderboard_raw = _section(raw, "leaderboard")
    scoring_raw = _section(raw, "scoring")
    rate_raw = _section(raw, "rate_limit")
    storage_raw = _section(raw, "storage")
    instance_raw = raw.get("instance", {})
    if not isinstance(instance_raw, dict):
        raise SettingsLoadError("instance must be an object")

    cooldown = int(_require(mitigation_raw, "cooldown_messages"))
    if cooldown < 0:
        raise SettingsLoadError("mitigation.cooldown_messages must be >= 0")

    endpoint = str(mitigation_raw.get("endpoint", "https://api.giphy.com/v1/gifs/random")).strip()
    if not endpoint.startswith("https://"):
        raise SettingsLoadError("mitigation.endpoint must be an https URL")

    terms_raw = scoring_raw.get("terms", {}) or {}
    if not isinstance(terms_raw, dict):
        raise SettingsLoadError("scoring.terms must be a mapping of term to weight")
    terms: dict[str, int] = {}
    for term, weight in terms_raw.items():
        name = str(term).strip()
        if not name:
            raise SettingsLoadError("scoring.terms must not contain empty terms")
        terms[name] = int(weight)

    rating_ceiling = _positive_int(scoring_raw, "rating_ceiling", "scoring.rating_ceiling")

    sqlite_path = str(_require(storage_raw, "sqlite")).strip()
    if not sqlite_path:
        raise SettingsLoadError("storage.sqlite must not be empty")

    instance_id = str(instance_raw.get("id", "default")).strip()
    if not instance_id:
        raise SettingsLoadError("instance.id must not be empty")
    if not re.fullmatch(r"[A-Za-z0-9_-]{1,40}", instance_id):
        raise SettingsLoadError(f"invalid instance.id: {instance_id}")

    return Settings(
        version=str(_require(raw, "version")),
        windows=WindowConfig(
            user_messages=_positive_int(windows_raw, "user_messages", "windows.user_messages"),
            channel_messages=_positive_int(windows_raw, "channel_messages", "windows.channel_messages"),
        ),
        mitigation=MitigationConfig(
            threshold=int(_require(mitigation_raw, "threshold")),
            cooldown_messages=cooldown,
            timeout_seconds=_positive_int(mitigation_raw, "timeout_seconds", "mitigation.timeout_seconds"),
            endpoint=endpoint,
            response_text=str(mitigation_raw.get("response_text", "Fuzzy kittens!")),
            fallback_text=str(mitigation_raw.get("fallback_text", "Fuzzy kittens!")),
        ),
        leaderboard=LeaderboardConfig(
            size=_positive_int(leaderboard_raw, "size", "leaderboard.size"),
        ),
        scoring=ScoringConfig(
            rating_ceiling=rating_ceiling,
            base_rating=int(scoring_raw.get("base_rating", 0)),
            shout_weight=int(scoring_raw.get("shout_weight", 0)),
            exclamation_weight=int(scoring_raw.get("exclamation_weight", 0)),
            terms=terms,
        ),
        rate_limit=RateLimitConfig(
            command_per_minute=_positive_int(rate_raw, "command_per_minute", "rate_limit.command_per_minute"),
        ),
        storage=StorageConfig(sqlite=sqlite_path),
        instance=InstanceConfig(id=instance_id),
    )


def ensure_storage_dirs(root: Path, storage: StorageConfig) -> None:
    (root / Path(storage.sqlite).parent).mkdir(parents=True, exist_ok=True)
