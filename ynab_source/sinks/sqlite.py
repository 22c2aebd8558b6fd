"""SQLite sink: materialize emitted tables using raw SQL.

Each table is dropped and recreated from its column manifest, then filled
in one transaction. A ``_source_tables`` bookkeeping table records the
cache-hint token of the last write; a table whose token is unchanged is
skipped unless forced.

Nested values outside the manifest (account debt maps) are not stored.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime, timezone

from ynab_source.source import Table

logger = logging.getLogger(__name__)

META_TABLE = "_source_tables"

SQLITE_TYPES = {
    "string": "TEXT",
    "date": "TEXT",
    "number": "REAL",
    "boolean": "INTEGER",
}


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _sql_value(value: object) -> object:
    """Dates → ISO strings, bools → 0/1, everything else unchanged."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    return value


class SqliteSink:
    def __init__(self, db_path: str = ":memory:"):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode = WAL")
            self._conn.execute(
                f"CREATE TABLE IF NOT EXISTS {META_TABLE} ("
                "  name TEXT PRIMARY KEY,"
                "  content TEXT NOT NULL,"
                "  row_count INTEGER NOT NULL,"
                "  written_at TEXT NOT NULL"
                ")"
            )
            self._conn.commit()
        return self._conn

    def close(self):
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def stored_content(self, name: str) -> str | None:
        """Cache-hint token of the last write of ``name``, if any."""
        row = self.conn.execute(
            f"SELECT content FROM {META_TABLE} WHERE name = ?", (name,)
        ).fetchone()
        return row["content"] if row else None

    def write(self, table: Table, force: bool = False) -> bool:
        """Replace the SQLite table with the emitted rows.

        Returns False when skipped because the stored token matches.
        """
        if not force and self.stored_content(table.name) == table.content:
            logger.info("Table %s unchanged (content %s), skipping", table.name, table.content)
            return False

        names = [c["name"] for c in table.column_types]
        col_defs = ", ".join(
            f"{_quote(c['name'])} {SQLITE_TYPES.get(c['evidenceType'], 'TEXT')}"
            for c in table.column_types
        )
        placeholders = ", ".join("?" for _ in names)
        insert_sql = (
            f"INSERT INTO {_quote(table.name)} ({', '.join(_quote(n) for n in names)})"
            f" VALUES ({placeholders})"
        )

        try:
            self.conn.execute("BEGIN")
            self.conn.execute(f"DROP TABLE IF EXISTS {_quote(table.name)}")
            self.conn.execute(f"CREATE TABLE {_quote(table.name)} ({col_defs})")
            self.conn.executemany(
                insert_sql,
                [tuple(_sql_value(row[n]) for n in names) for row in table.rows],
            )
            self.conn.execute(
                f"INSERT OR REPLACE INTO {META_TABLE} (name, content, row_count, written_at)"
                " VALUES (?, ?, ?, ?)",
                (table.name, table.content, len(table.rows),
                 datetime.now(timezone.utc).isoformat()),
            )
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

        logger.info("Wrote %d rows to %s", len(table.rows), table.name)
        return True

    def read_rows(self, name: str) -> list[dict]:
        """Return all rows of a materialized table, in insertion order."""
        rows = self.conn.execute(
            f"SELECT * FROM {_quote(name)} ORDER BY rowid"
        ).fetchall()
        return [dict(r) for r in rows]
