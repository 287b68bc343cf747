"""
SQLite database integration and simple migration system.

This module provides functions for obtaining a database connection
(``get_connection``), applying migrations on application start
(``init_db``) and a cursor context manager used by the stores.  It
uses SQLite as a lightweight embedded database; to switch to another
DBMS you would replace connection logic and adapt SQL syntax
accordingly.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .config import settings


# Timestamps keep millisecond precision so that records created within
# the same second still sort by creation time.
TIMESTAMP_NOW = "(strftime('%Y-%m-%d %H:%M:%f', 'now'))"

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: experiences table
    (
        1,
        f"""
        CREATE TABLE IF NOT EXISTS experiences (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            company TEXT NOT NULL CHECK (length(trim(company)) > 0),
            period TEXT,
            position TEXT,
            details TEXT,
            created_at TIMESTAMP NOT NULL DEFAULT {TIMESTAMP_NOW},
            updated_at TIMESTAMP NOT NULL DEFAULT {TIMESTAMP_NOW}
        );
        """,
    ),
    # Migration 2: index backing the default listing order
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_experiences_created_at ON experiences(created_at);
        """,
    ),
]


def get_database_path(database_url: Optional[str] = None) -> str:
    """Compute the path to the SQLite database file.

    If the URL is an absolute path, use it directly.  Otherwise resolve
    it relative to the project root.
    """
    db_url = database_url or settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # portfolio_api/
    return str((base_dir / db_url).resolve())


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    The connection uses a row factory to access columns by name.
    Values are returned as they are stored in the database (strings or
    numbers); no type detection is enabled.
    """
    conn = sqlite3.connect(db_path or get_database_path())
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_cursor(db_path: Optional[str] = None) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor and closes the connection on exit.

    The transaction is committed when the block finishes without error
    and rolled back otherwise.
    """
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None) -> int:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  If you add a new migration, append it with an
    incremented version number.

    Returns the schema version after migration.
    """
    with get_cursor(db_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                current_version = version
    return current_version
