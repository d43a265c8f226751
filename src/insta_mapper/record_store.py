"""SQLite record store keyed by (category, identifier)."""

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, List, Tuple

from .config import DB_PATH

logger = logging.getLogger(__name__)

Record = Tuple[str, str, Any]


class RecordStore:
    """SQLite store of JSON payloads addressed by category and identifier."""

    def __init__(self, db_path: Path = None):
        """Initialize database connection."""
        self.db_path = Path(db_path or DB_PATH)
        self.local = threading.local()
        self._init_db()

    @property
    def conn(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if not hasattr(self.local, 'conn'):
            self.local.conn = sqlite3.connect(str(self.db_path))
            self.local.conn.row_factory = sqlite3.Row
            self.local.conn.execute("PRAGMA journal_mode = WAL")
            self.local.conn.execute("PRAGMA synchronous = NORMAL")
        return self.local.conn

    def _init_db(self):
        """Initialize database schema."""
        with self.conn:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS records (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    category TEXT NOT NULL,
                    identifier TEXT NOT NULL,
                    data TEXT NOT NULL,
                    created_at INTEGER DEFAULT (strftime('%s', 'now'))
                )
            """)
            self.conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_category_identifier
                ON records(category, identifier)
            """)

    @contextmanager
    def transaction(self):
        """Context manager for database transactions."""
        try:
            yield self.conn
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise

    def put(self, category: str, identifier: str, payload: Any) -> None:
        """Insert one record."""
        with self.transaction():
            self._insert(category, identifier, payload)

    def get_all(self) -> List[Record]:
        """Return every record as (category, identifier, payload) in insertion order."""
        cursor = self.conn.execute("SELECT category, identifier, data FROM records ORDER BY id")
        return [(row['category'], row['identifier'], json.loads(row['data'])) for row in cursor]

    def delete_all(self) -> None:
        with self.transaction():
            self.conn.execute("DELETE FROM records")

    def delete_where(self, category: str, identifier: str) -> int:
        """Delete the records matching a category and identifier, return the count."""
        with self.transaction():
            cursor = self.conn.execute(
                "DELETE FROM records WHERE category = ? AND identifier = ?",
                (category, identifier),
            )
        logger.debug(f"Deleted {cursor.rowcount} record(s) for {category}/{identifier}")
        return cursor.rowcount

    def replace_all(self, records: Iterable[Record], batch_size: int = 1000) -> int:
        """Atomically replace the whole store content with ``records``."""
        rows = [(category, identifier, json.dumps(payload, ensure_ascii=False))
                for category, identifier, payload in records]
        with self.transaction():
            self.conn.execute("DELETE FROM records")
            for i in range(0, len(rows), batch_size):
                self.conn.executemany(
                    "INSERT INTO records (category, identifier, data) VALUES (?, ?, ?)",
                    rows[i:i + batch_size],
                )
        return len(rows)

    def _insert(self, category: str, identifier: str, payload: Any) -> None:
        self.conn.execute(
            "INSERT INTO records (category, identifier, data) VALUES (?, ?, ?)",
            (category, identifier, json.dumps(payload, ensure_ascii=False)),
        )

    def close(self):
        """Close database connection."""
        if hasattr(self.local, 'conn'):
            self.local.conn.close()
            delattr(self.local, 'conn')

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
