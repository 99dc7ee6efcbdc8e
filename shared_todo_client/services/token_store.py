"""Local key/value storage for the bearer token."""
from __future__ import annotations

import sqlite3
from contextlib import closing
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

ISO_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


class TokenStore:
    """SQLite wrapper holding named string entries, one of which is the credential."""

    def __init__(self, path: Path | str, token_key: str = "token") -> None:
        self._path = Path(path)
        self._token_key = token_key
        self._conn = sqlite3.connect(self._path)
        self._conn.row_factory = sqlite3.Row
        self._init_schema()

    def close(self) -> None:
        self._conn.close()

    # region schema
    def _init_schema(self) -> None:
        with closing(self._conn.cursor()) as cursor:
            cursor.executescript(
                """
                CREATE TABLE IF NOT EXISTS storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT
                );
                """
            )
            self._conn.commit()

    # endregion

    # region key/value
    def get(self, key: str) -> Optional[str]:
        row = self._conn.execute("SELECT value FROM storage WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).strftime(ISO_FORMAT)
        self._conn.execute(
            "INSERT INTO storage (key, value, updated_at) VALUES (?, ?, ?)\n"
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at",
            (key, value, now),
        )
        self._conn.commit()

    def delete(self, key: str) -> None:
        self._conn.execute("DELETE FROM storage WHERE key = ?", (key,))
        self._conn.commit()

    # endregion

    # region token
    def load_token(self) -> Optional[str]:
        return self.get(self._token_key) or None

    def save_token(self, token: Optional[str]) -> None:
        """Persists the token; an empty value removes the entry."""
        if token:
            self.set(self._token_key, token)
        else:
            self.delete(self._token_key)

    def clear_token(self) -> None:
        self.delete(self._token_key)

    # endregion


__all__ = ["TokenStore"]
