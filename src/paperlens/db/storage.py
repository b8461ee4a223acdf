"""Key-value storage over the ``storage`` table.

Values are opaque strings (the document store writes JSON). Every write
replaces the whole value for its key; there is no incremental diffing.
"""

from __future__ import annotations

import sqlite3


class KeyValueStorage:
    """Durable string storage addressed by a fixed key.

    Wraps an open sqlite3.Connection with the schema initialised (see
    paperlens.db.schema.initialize). The connection is owned by the caller.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get_item(self, key: str) -> str | None:
        """Return the stored value for *key*, or None if nothing was saved."""
        row = self._conn.execute(
            "SELECT value FROM storage WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        """Insert or replace the value stored under *key*."""
        self._conn.execute(
            """
            INSERT INTO storage (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                           updated_at = datetime('now')
            """,
            (key, value),
        )
        self._conn.commit()
