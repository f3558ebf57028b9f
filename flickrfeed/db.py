# flickrfeed/db.py
from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from flickrfeed.config import load_settings


class InvalidDbPathError(Exception):
    """Raised when FLICKRFEED_DB_PATH points to an invalid location."""
    pass


@contextmanager
def db_conn():
    """
    Context manager for database connections.
    Opens connection, initializes schema, yields connection, closes on exit.

    Usage:
        with db_conn() as conn:
            # use conn
    """
    conn = get_conn()
    try:
        init_db(conn)
        yield conn
    finally:
        conn.close()


def get_conn() -> sqlite3.Connection:
    """
    Open a SQLite connection to the DB path.
    DB path comes from Settings.db_path (FLICKRFEED_DB_PATH env var, with a safe local default).
    """
    db_path = load_settings().db_path
    path = Path(db_path)

    # Validate: if FLICKRFEED_DB_PATH is set, check that the root/drive exists
    if os.environ.get("FLICKRFEED_DB_PATH"):
        root = path.anchor or (path.parts[0] if path.parts else None)
        if root and not Path(root).exists():
            raise InvalidDbPathError(
                f"FLICKRFEED_DB_PATH is set to '{db_path}' but the root path '{root}' doesn't exist."
            )

    # Ensure parent directory exists (e.g., ./data/)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(path))
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """
    Create required tables if they don't exist.
    """
    # plugin_storage - generic key/value rows shared by plugins, one row per (type, aux)
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS plugin_storage (
            id INTEGER PRIMARY KEY,
            type TEXT NOT NULL,
            aux TEXT NOT NULL,
            data TEXT NOT NULL DEFAULT '',
            UNIQUE(type, aux)
        );
        """
    )

    # options - named configuration values
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS options (
            name TEXT PRIMARY KEY,
            value TEXT
        );
        """
    )

    conn.commit()
