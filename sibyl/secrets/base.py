"""Credential store contract for bot secrets.

Bot credentials come from the OS credential store only, never from
environment variables or the settings file.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class SecretStoreError(RuntimeError):
    """Raised when a credential is missing, empty or unreadable."""


class SecretStore(ABC):
    @property
    @abstractmethod
    def backend_label(self) -> str:
        """Human readable name of the OS store, used in messages."""

    @abstractmethod
    def get_secret(self, account: str) -> str:
        """Return the stored value for ``account`` or raise SecretStoreError."""

    @abstractmethod
    def set_secret(self, account: str, value: str) -> None:
        """Store ``value`` under ``account``, replacing any previous one."""


def require_secret(store: SecretStore, account: str) -> str:
    value = store.get_secret(account)
    if not value:
        raise SecretStoreError(f"{store.backend_label} secret '{account}' is empty")
    return value
