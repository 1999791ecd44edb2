"""SQLite-backed entity directory."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from sibyl.models.message import EntitySeed

_TABLES = ("users", "channels")


@dataclass(frozen=True)
class EntityRow:
    id: str
    display_name: str
    psycho_pass: Optional[int]
    updated_at: str


class EntityStore:
    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def apply_schema(self, schema_sql: str) -> None:
        with self._conn() as conn:
            conn.executescript(schema_sql)

    def _upsert(self, table: str, entity_id: str, display_name: str) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {table} (id, display_name) VALUES (?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    display_name = excluded.display_name,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (entity_id, display_name),
            )

    def upsert_user(self, user_id: str, display_name: str) -> None:
        self._upsert("users", user_id, display_name)

    def upsert_channel(self, channel_id: str, display_name: str) -> None:
        self._upsert("channels", channel_id, display_name)

    def remove_channel(self, channel_id: str) -> bool:
        with self._conn() as conn:
            cur = conn.execute("DELETE FROM channels WHERE id = ?", (channel_id,))
            return cur.rowcount > 0

    def _seeds(self, table: str) -> list[EntitySeed]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT id, psycho_pass FROM {table} ORDER BY id").fetchall()
        return [EntitySeed(id=row["id"], psycho_pass=row["psycho_pass"]) for row in rows]

    def user_seeds(self) -> list[EntitySeed]:
        return self._seeds("users")

    def channel_seeds(self) -> list[EntitySeed]:
        return self._seeds("channels")

    def _name(self, table: str, entity_id: str) -> Optional[str]:
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT display_name FROM {table} WHERE id = ?",
                (entity_id,),
            ).fetchone()
        if row is None:
            return None
        return str(row["display_name"])

    def user_name(self, user_id: str) -> Optional[str]:
        return self._name("users", user_id)

    def channel_name(self, channel_id: str) -> Optional[str]:
        return self._name("channels", channel_id)

    def has_channel(self, channel_id: str) -> bool:
        return self._name("channels", channel_id) is not None

    def _update_score(self, table: str, entity_id: str, psycho_pass: int) -> None:
        with self._conn() as conn:
            conn.execute(
                f"UPDATE {table} SET psycho_pass = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (int(psycho_pass), entity_id),
            )

    def update_user_score(self, user_id: str, psycho_pass: int) -> None:
        self._update_score("users", user_id, psycho_pass)

    def update_channel_score(self, channel_id: str, psycho_pass: int) -> None:
        self._update_score("channels", channel_id, psycho_pass)

    def list_entities(self, table: str) -> list[EntityRow]:
        if table not in _TABLES:
            raise ValueError(f"unknown entity table: {table}")
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT id, display_name, psycho_pass, updated_at FROM {table} ORDER BY id"
            ).fetchall()
        return [
            EntityRow(
                id=row["id"],
                display_name=row["display_name"],
                psycho_pass=row["psycho_pass"],
                updated_at=row["updated_at"],
            )
            for row in rows
        ]
