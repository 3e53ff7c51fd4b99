"""Хранилище правил и токенов пользователей."""
from __future__ import annotations

import sqlite3
import threading
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from dateutil import parser

from todo_name_sync.models import Credentials, Rule, RuleDraft


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse(value: Optional[str]) -> Optional[datetime]:
    return parser.isoparse(value) if value else None


class RuleStore:
    """Обёртка над SQLite для правил и привязанных аккаунтов.

    Одно соединение используется из нескольких потоков синхронизации,
    доступ к нему сериализуется блокировкой.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._init_schema()

    def close(self) -> None:
        self._conn.close()

    # region schema
    def _init_schema(self) -> None:
        with self._lock, closing(self._conn.cursor()) as cursor:
            cursor.executescript(
                """
                CREATE TABLE IF NOT EXISTS rules (
                    user_id TEXT PRIMARY KEY,
                    tasklist_id TEXT NOT NULL,
                    beginning_text TEXT NOT NULL DEFAULT '',
                    separator TEXT NOT NULL DEFAULT '',
                    end_text TEXT NOT NULL DEFAULT '',
                    normal_name TEXT NOT NULL DEFAULT '',
                    last_generated_name TEXT,
                    enabled INTEGER NOT NULL DEFAULT 0,
                    updated_at TEXT,
                    last_synced_at TEXT
                );

                CREATE TABLE IF NOT EXISTS accounts (
                    user_id TEXT NOT NULL,
                    provider TEXT NOT NULL,
                    access_token TEXT NOT NULL,
                    token_type TEXT NOT NULL DEFAULT 'Bearer',
                    scope TEXT,
                    updated_at TEXT,
                    PRIMARY KEY (user_id, provider)
                );
                """
            )
            self._conn.commit()

    # endregion

    # region helpers
    def _execute(self, sql: str, params: tuple) -> int:
        with self._lock:
            cursor = self._conn.execute(sql, params)
            self._conn.commit()
            return cursor.rowcount

    @staticmethod
    def _to_rule(row: sqlite3.Row) -> Rule:
        return Rule(
            user_id=row["user_id"],
            tasklist_id=row["tasklist_id"],
            beginning_text=row["beginning_text"],
            separator=row["separator"],
            end_text=row["end_text"],
            normal_name=row["normal_name"],
            last_generated_name=row["last_generated_name"],
            enabled=bool(row["enabled"]),
            updated_at=_parse(row["updated_at"]),
            last_synced_at=_parse(row["last_synced_at"]),
        )

    # endregion

    # region rules
    def get_rule(self, user_id: str) -> Optional[Rule]:
        with self._lock:
            row = self._conn.execute("SELECT * FROM rules WHERE user_id = ?", (user_id,)).fetchone()
        return self._to_rule(row) if row else None

    def list_eligible_rules(self) -> List[Rule]:
        """Правила с включённой автоматизацией."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT * FROM rules WHERE enabled = 1 AND last_generated_name IS NOT NULL ORDER BY user_id"
            ).fetchall()
        return [self._to_rule(row) for row in rows]

    def upsert_rule(self, user_id: str, draft: RuleDraft, generated_name: str) -> Rule:
        """Сохраняет правило и включает для него автоматизацию."""
        self._execute(
            "INSERT INTO rules (user_id, tasklist_id, beginning_text, separator, end_text, normal_name,\n"
            "                   last_generated_name, enabled, updated_at)\n"
            "VALUES (?, ?, ?, ?, ?, ?, ?, 1, ?)\n"
            "ON CONFLICT(user_id) DO UPDATE SET tasklist_id = excluded.tasklist_id,\n"
            "    beginning_text = excluded.beginning_text, separator = excluded.separator,\n"
            "    end_text = excluded.end_text, normal_name = excluded.normal_name,\n"
            "    last_generated_name = excluded.last_generated_name, enabled = 1,\n"
            "    updated_at = excluded.updated_at",
            (
                user_id,
                draft.tasklist_id,
                draft.beginning_text,
                draft.separator,
                draft.end_text,
                draft.normal_name,
                generated_name,
                _now(),
            ),
        )
        rule = self.get_rule(user_id)
        if rule is None:
            raise LookupError(f"Правило пользователя {user_id} не сохранилось")
        return rule

    def set_last_generated_name(self, user_id: str, name: Optional[str]) -> None:
        """Сдвигает базовое имя; ``None`` выключает автоматизацию."""
        if name is None:
            self.disable(user_id)
            return
        now = _now()
        self._execute(
            "UPDATE rules SET last_generated_name = ?, updated_at = ?, last_synced_at = ? WHERE user_id = ?",
            (name, now, now, user_id),
        )

    def disable(self, user_id: str) -> bool:
        """Выключает автоматизацию. Возвращает False, если правила нет."""
        updated = self._execute(
            "UPDATE rules SET enabled = 0, last_generated_name = NULL, updated_at = ? WHERE user_id = ?",
            (_now(), user_id),
        )
        return updated > 0

    # endregion

    # region accounts
    def save_credentials(self, user_id: str, credentials: Credentials) -> None:
        self._execute(
            "INSERT INTO accounts (user_id, provider, access_token, token_type, scope, updated_at)\n"
            "VALUES (?, ?, ?, ?, ?, ?)\n"
            "ON CONFLICT(user_id, provider) DO UPDATE SET access_token = excluded.access_token,\n"
            "    token_type = excluded.token_type, scope = excluded.scope, updated_at = excluded.updated_at",
            (
                user_id,
                credentials.provider,
                credentials.access_token,
                credentials.token_type,
                credentials.scope,
                _now(),
            ),
        )

    def get_credentials(self, user_id: str, provider: str) -> Optional[Credentials]:
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM accounts WHERE user_id = ? AND provider = ?",
                (user_id, provider),
            ).fetchone()
        if not row or not row["access_token"]:
            return None
        return Credentials(
            provider=row["provider"],
            access_token=row["access_token"],
            token_type=row["token_type"],
            scope=row["scope"],
        )

    # endregion


__all__ = ["RuleStore"]
