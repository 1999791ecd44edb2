#!/usr/bin/env python3
"""Manage the Sibyl entity directory and bot secrets.

Channels are only scored once they are registered here; users are also
registered automatically when they post.
"""

from __future__ import annotations

import argparse
import getpass
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sibyl.config.settings import SettingsLoadError, load_settings  # noqa: E402
from sibyl.core.db import EntityStore  # noqa: E402
from sibyl.scoring.policy import LexiconScoringPolicy, score_messages  # noqa: E402
from sibyl.secrets.base import SecretStoreError  # noqa: E402
from sibyl.secrets.factory import create_secret_store  # noqa: E402

SECRET_ACCOUNTS = ("telegram_bot_token", "giphy_api_key")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sibyl directory and secret management")
    parser.add_argument("--settings", default=str(ROOT / "config/sibyl.yaml"), help="settings YAML path")
    parser.add_argument("--secret-service", default="sibyl", help="OS credential store service name")
    sub = parser.add_subparsers(dest="command", required=True)

    add_channel = sub.add_parser("add-channel", help="track a channel")
    add_channel.add_argument("channel_id")
    add_channel.add_argument("name")

    remove_channel = sub.add_parser("remove-channel", help="stop tracking a channel")
    remove_channel.add_argument("channel_id")

    add_user = sub.add_parser("add-user", help="register a user display name")
    add_user.add_argument("user_id")
    add_user.add_argument("name")

    list_cmd = sub.add_parser("list", help="list directory entries")
    list_cmd.add_argument("kind", choices=["users", "channels"])

    score = sub.add_parser("score", help="rate a file of messages, most recent first, one per line")
    score.add_argument("kind", choices=["user", "channel"])
    score.add_argument("path")

    set_secret = sub.add_parser("set-secret", help="store a secret in the OS credential store")
    set_secret.add_argument("account", choices=SECRET_ACCOUNTS)
    return parser


def _open_store(settings_path: pathlib.Path) -> EntityStore:
    settings = load_settings(settings_path)
    store = EntityStore(ROOT / settings.storage.sqlite)
    store.apply_schema((ROOT / "db/schema.sql").read_text(encoding="utf-8"))
    return store


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings_path = pathlib.Path(args.settings)

    try:
        if args.command == "set-secret":
            value = getpass.getpass(f"{args.account}: ").strip()
            store = create_secret_store(service_name=args.secret_service)
            store.set_secret(args.account, value)
            print(f"stored {args.account} in {store.backend_label} (service={args.secret_service})")
            return 0

        if args.command == "score":
            settings = load_settings(settings_path)
            policy = LexiconScoringPolicy(settings.scoring)
            lines = pathlib.Path(args.path).read_text(encoding="utf-8").splitlines()
            texts = [line for line in lines if line.strip()]
            aggregate = policy.aggregate_user if args.kind == "user" else policy.aggregate_channel
            psycho_pass, ratings = score_messages(policy, texts, aggregate)
            for rating, text in zip(ratings, texts):
                print(f"{rating:>4}  {text[:80]}")
            print(f"Psycho-Pass: {psycho_pass}")
            return 0

        store = _open_store(settings_path)
        if args.command == "add-channel":
            store.upsert_channel(args.channel_id, args.name)
            print(f"tracking channel {args.channel_id} ({args.name})")
        elif args.command == "remove-channel":
            if not store.remove_channel(args.channel_id):
                print(f"channel not tracked: {args.channel_id}")
                return 1
            print(f"stopped tracking channel {args.channel_id}")
        elif args.command == "add-user":
            store.upsert_user(args.user_id, args.name)
            print(f"registered user {args.user_id} ({args.name})")
        elif args.command == "list":
            for row in store.list_entities(args.kind):
                score = "-" if row.psycho_pass is None else str(row.psycho_pass)
                print(f"{score:>4}  {row.id}  {row.display_name}")
    except (SettingsLoadError, SecretStoreError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
