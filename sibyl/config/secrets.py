"""Secret accessor facade.

Accounts in OS store:
- telegram_bot_token
- giphy_api_key (optional; mitigation falls back to plain text without it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sibyl.secrets.base import SecretStore, SecretStoreError, require_secret
from sibyl.secrets.factory import create_secret_store


@dataclass(frozen=True)
class RuntimeSecrets:
    telegram_bot_token: str
    giphy_api_key: Optional[str]


def _optional_secret(store: SecretStore, account: str) -> Optional[str]:
    try:
        return store.get_secret(account)
    except SecretStoreError:
        return None


def load_runtime_secrets(service_name: str = "sibyl") -> RuntimeSecrets:
    store = create_secret_store(service_name=service_name)
    return RuntimeSecrets(
        telegram_bot_token=require_secret(store, "telegram_bot_token"),
        giphy_api_key=_optional_secret(store, "giphy_api_key"),
    )


__all__ = ["RuntimeSecrets", "load_runtime_secrets", "SecretStoreError"]
