from __future__ import annotations

import sqlite3


# ---------------------------------------------------------------------
# plugin_storage (key/value rows)
# ---------------------------------------------------------------------

def get_storage_data(conn: sqlite3.Connection, *, type_: str, aux: str) -> str | None:
    """Return the data column for (type, aux), or None if there is no row."""
    row = conn.execute(
        "SELECT data FROM plugin_storage WHERE type = ? AND aux = ?",
        (type_, aux),
    ).fetchone()
    if row is None:
        return None
    return row[0]


def upsert_storage_data(conn: sqlite3.Connection, *, type_: str, aux: str, data: str) -> None:
    """
    Insert the row for (type, aux) or replace its data.

    UNIQUE(type, aux) keeps this at one row per pair, last writer wins.
    """
    conn.execute(
        """
        INSERT INTO plugin_storage (type, aux, data)
        VALUES (?, ?, ?)
        ON CONFLICT(type, aux) DO UPDATE SET data = excluded.data
        """,
        (type_, aux, data),
    )
    conn.commit()


# ---------------------------------------------------------------------
# options
# ---------------------------------------------------------------------

def get_option_value(conn: sqlite3.Connection, *, name: str) -> str | None:
    row = conn.execute("SELECT value FROM options WHERE name = ?", (name,)).fetchone()
    if row is None:
        return None
    return row[0]


def upsert_option_value(conn: sqlite3.Connection, *, name: str, value: str | None) -> None:
    conn.execute(
        """
        INSERT INTO options (name, value)
        VALUES (?, ?)
        ON CONFLICT(name) DO UPDATE SET value = excluded.value
        """,
        (name, value),
    )
    conn.commit()


def insert_option_default(conn: sqlite3.Connection, *, name: str, value: str) -> bool:
    """
    Store value only if the option has never been set.

    Uses INSERT OR IGNORE - an existing value (even empty) is kept.
    Returns True if a row was inserted.
    """
    cur = conn.execute(
        "INSERT OR IGNORE INTO options (name, value) VALUES (?, ?)",
        (name, value),
    )
    conn.commit()
    return cur.rowcount == 1


def delete_option(conn: sqlite3.Connection, *, name: str) -> None:
    conn.execute("DELETE FROM options WHERE name = ?", (name,))
    conn.commit()
