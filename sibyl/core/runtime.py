"""Application runtime wiring."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from sibyl.config.secrets import RuntimeSecrets, load_runtime_secrets
from sibyl.config.settings import Settings, ensure_storage_dirs, load_settings
from sibyl.core.db import EntityStore
from sibyl.core.router import MessageRouter, RoutedMessage
from sibyl.mitigation.giphy import GiphyMitigationClient, MitigationClient
from sibyl.models.message import InboundMessage
from sibyl.scoring.policy import LexiconScoringPolicy, ScoringPolicy
from sibyl.security.rate_limit import LimitPolicy, RateLimiter


class AppRuntime:
    def __init__(
        self,
        workspace_root: Path,
        settings_path: Path,
        secret_service_name: str = "sibyl",
        secrets: Optional[RuntimeSecrets] = None,
        policy: Optional[ScoringPolicy] = None,
        mitigation: Optional[MitigationClient] = None,
    ) -> None:
        self.workspace_root = workspace_root.resolve()
        self.settings: Settings = load_settings(settings_path)
        ensure_storage_dirs(self.workspace_root, self.settings.storage)
        self.instance_id = self.settings.instance.id

        self.store = EntityStore(self.workspace_root / self.settings.storage.sqlite)
        schema_sql = (self.workspace_root / "db/schema.sql").read_text(encoding="utf-8")
        self.store.apply_schema(schema_sql)

        if secrets is None:
            secrets = load_runtime_secrets(service_name=secret_service_name)
        self.telegram_bot_token = secrets.telegram_bot_token

        self.policy = policy or LexiconScoringPolicy(self.settings.scoring)
        if mitigation is None:
            mitigation = GiphyMitigationClient(self.settings.mitigation, api_key=secrets.giphy_api_key)
        self.router = MessageRouter.from_settings(
            self.settings,
            directory=self.store,
            policy=self.policy,
            mitigation=mitigation,
        )
        self.rates = RateLimiter()
        self._command_limit = LimitPolicy(
            max_events=self.settings.rate_limit.command_per_minute,
            window_sec=60,
        )

    def check_command_rate(self, user_id: str) -> None:
        self.rates.check(user_id=user_id, kind="command", policy=self._command_limit)

    def register_user(self, user_id: str, display_name: str) -> None:
        self.store.upsert_user(user_id, display_name)

    async def handle_message(self, message: InboundMessage, commands_enabled: bool = True) -> list[str]:
        return await self.router.handle(message, commands_enabled=commands_enabled)

    async def route_message(self, message: InboundMessage, commands_enabled: bool = True) -> RoutedMessage:
        return await self.router.route(message, commands_enabled=commands_enabled)
