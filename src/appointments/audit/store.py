"""SQLite persistence for the inquiry audit trail.

One append-only ``audit_log`` table, indexed by inquiry, actor and time.
Rows are never updated.  All filters are bound as query parameters.
"""

from __future__ import annotations

import json
import sqlite3
from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from typing import Any

from appointments.audit.models import AuditEntry

# Entry fields stored verbatim, in column order.
_ENTRY_COLUMNS = (
    "event_type",
    "inquiry_id",
    "property_id",
    "actor_id",
    "actor_role",
    "action",
    "from_status",
    "to_status",
    "detail",
)

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS audit_log (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        timestamp TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
        event_type TEXT NOT NULL,
        inquiry_id TEXT,
        property_id TEXT,
        actor_id TEXT,
        actor_role TEXT,
        action TEXT,
        from_status TEXT,
        to_status TEXT,
        detail TEXT,
        metadata TEXT
    )
"""

_INDEXES = {
    "idx_audit_inquiry": "inquiry_id",
    "idx_audit_actor": "actor_id",
    "idx_audit_timestamp": "timestamp",
}


def init_audit_db(db_path: Path | str) -> sqlite3.Connection:
    """Open the audit database, creating the table and indexes if needed.

    Args:
        db_path: Path to the SQLite file, or ``":memory:"``.

    Returns:
        An open connection usable from worker threads.
    """
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    if str(db_path) != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")

    conn.execute(_SCHEMA)
    for name, column in _INDEXES.items():
        conn.execute(f"CREATE INDEX IF NOT EXISTS {name} ON audit_log ({column})")

    conn.commit()
    return conn


def insert_audit_entry(conn: sqlite3.Connection, entry: AuditEntry) -> int:
    """Append *entry* to the audit log and return its row id."""
    values: list[Any] = [getattr(entry, column) for column in _ENTRY_COLUMNS]
    values[0] = entry.event_type.value
    metadata = json.dumps(entry.metadata) if entry.metadata is not None else None
    stamped_at = datetime.now(tz=UTC).strftime("%Y-%m-%dT%H:%M:%SZ")

    columns = ("timestamp", *_ENTRY_COLUMNS, "metadata")
    placeholders = ", ".join("?" for _ in columns)
    cursor = conn.execute(
        f"INSERT INTO audit_log ({', '.join(columns)}) VALUES ({placeholders})",
        (stamped_at, *values, metadata),
    )
    conn.commit()
    return cursor.lastrowid or 0


def query_audit_trail(
    conn: sqlite3.Connection,
    *,
    inquiry_id: str | None = None,
    property_id: str | None = None,
    actor_id: str | None = None,
    from_date: str | None = None,
    to_date: str | None = None,
    event_type: str | None = None,
    limit: int = 50,
) -> list[dict[str, Any]]:
    """Return audit entries matching every given filter, newest first.

    Args:
        conn: An open audit database connection.
        inquiry_id: Exact inquiry id.
        property_id: Exact property id.
        actor_id: Exact acting user id.
        from_date: Lower bound (inclusive) on the ISO 8601 timestamp.
        to_date: Upper bound (inclusive) on the ISO 8601 timestamp.  A bare
            ``YYYY-MM-DD`` date includes that whole day.
        event_type: Exact event type.
        limit: Maximum number of rows.

    Returns:
        One dict per row, with ``metadata`` decoded from JSON.

    Raises:
        ValueError: If *to_date* looks like a bare date but is not a real one.
    """
    filters: list[tuple[str, str | None]] = [
        ("inquiry_id = ?", inquiry_id),
        ("property_id = ?", property_id),
        ("actor_id = ?", actor_id),
        ("timestamp >= ?", from_date),
        _upper_bound(to_date),
        ("event_type = ?", event_type),
    ]
    active = [(clause, value) for clause, value in filters if value is not None]

    query = "SELECT * FROM audit_log"
    if active:
        query += " WHERE " + " AND ".join(clause for clause, _ in active)
    query += " ORDER BY timestamp DESC, id DESC LIMIT ?"
    params: list[str | int] = [value for _, value in active if value is not None]
    params.append(limit)

    cursor = conn.cursor()
    cursor.row_factory = sqlite3.Row
    return [_decode(row) for row in cursor.execute(query, params).fetchall()]


def _upper_bound(to_date: str | None) -> tuple[str, str | None]:
    # Stored timestamps carry a time part, so "2026-10-19T09:00:00Z" sorts
    # after "2026-10-19"; compare against the start of the next day instead.
    if to_date is not None and len(to_date) == len("YYYY-MM-DD"):
        day_after = date.fromisoformat(to_date) + timedelta(days=1)
        return "timestamp < ?", day_after.isoformat()
    return "timestamp <= ?", to_date


def _decode(row: sqlite3.Row) -> dict[str, Any]:
    entry = dict(row)
    if entry["metadata"] is not None:
        entry["metadata"] = json.loads(entry["metadata"])
    return entry


def close_audit_db(conn: sqlite3.Connection) -> None:
    conn.close()
