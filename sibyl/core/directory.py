"""Entity directory contract consumed by the message router."""

from __future__ import annotations

from typing import Optional, Protocol

from sibyl.models.message import EntitySeed


class EntityDirectory(Protocol):
    def user_seeds(self) -> list[EntitySeed]:
        """Known users with their last stored Psycho-Pass."""

    def channel_seeds(self) -> list[EntitySeed]:
        """Tracked channels with their last stored Psycho-Pass."""

    def user_name(self, user_id: str) -> Optional[str]:
        """Display name, or None when the user is unknown."""

    def channel_name(self, channel_id: str) -> Optional[str]:
        """Display name, or None when the channel is not tracked."""

    def has_channel(self, channel_id: str) -> bool:
        """True when messages in the channel are scored."""

    def update_user_score(self, user_id: str, psycho_pass: int) -> None:
        """Write back the cached user score."""

    def update_channel_score(self, channel_id: str, psycho_pass: int) -> None:
        """Write back the cached channel score."""
