"""SQLite schema for inquiry persistence.

The partial unique index enforces "one open appointment per buyer and
property" at the database level, so two concurrent submissions cannot both
be stored.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path


def init_inquiry_table(conn: sqlite3.Connection) -> None:
    """Create the inquiries table and its indexes if they do not exist.

    Args:
        conn: An open sqlite3.Connection (WAL mode recommended).
    """
    conn.execute("""
        CREATE TABLE IF NOT EXISTS inquiries (
            id TEXT PRIMARY KEY,
            buyer_id TEXT NOT NULL,
            seller_id TEXT NOT NULL,
            property_id TEXT NOT NULL,
            kind TEXT NOT NULL,
            message TEXT NOT NULL,
            email TEXT,
            status TEXT,
            requested_json TEXT,
            proposed_json TEXT,
            seller_note TEXT,
            buyer_note TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
    """)

    conn.execute("CREATE INDEX IF NOT EXISTS idx_inquiries_seller ON inquiries (seller_id)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_inquiries_buyer ON inquiries (buyer_id)")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_inquiries_status ON inquiries (status)")
    conn.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS idx_inquiries_one_active
        ON inquiries (buyer_id, property_id, kind)
        WHERE status IN ('pending', 'proposed')
    """)

    conn.commit()


def open_inquiry_db(db_path: Path | str) -> sqlite3.Connection:
    """Open (and initialize) the inquiry database.

    Args:
        db_path: Path to the SQLite file, or ``":memory:"``.

    Returns:
        An open connection usable from worker threads.
    """
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    if str(db_path) != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")
    init_inquiry_table(conn)
    return conn
