"""Repository for key/value cache entries."""

import sqlite3


def get_entry(conn: sqlite3.Connection, key: str, now_ms: int) -> str | None:
    """Get the stored JSON for a key, or None if absent or expired."""
    row = conn.execute(
        "SELECT value_json FROM cache_entries WHERE cache_key = ? AND expires_at > ?",
        (key, now_ms),
    ).fetchone()
    if row is None:
        return None
    return row[0]


def set_entry(
    conn: sqlite3.Connection, key: str, value_json: str, expires_at: int
) -> None:
    """Insert or replace an entry. The last write wins."""
    conn.execute(
        "INSERT INTO cache_entries (cache_key, value_json, expires_at, updated_at) "
        "VALUES (?, ?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(cache_key) DO UPDATE SET value_json = excluded.value_json, "
        "expires_at = excluded.expires_at, updated_at = CURRENT_TIMESTAMP",
        (key, value_json, expires_at),
    )
    conn.commit()


def delete_expired(conn: sqlite3.Connection, now_ms: int) -> int:
    """Delete expired entries. Returns the number removed."""
    cursor = conn.execute(
        "DELETE FROM cache_entries WHERE expires_at <= ?", (now_ms,)
    )
    conn.commit()
    return cursor.rowcount


def count_entries(conn: sqlite3.Connection) -> int:
    return conn.execute("SELECT COUNT(*) FROM cache_entries").fetchone()[0]
