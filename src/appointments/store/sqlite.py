"""SQLite-backed inquiry store with status-conditional writes.

Accepts a sqlite3.Connection, uses parameterized queries exclusively, and
commits synchronously after writes.  ``update`` only touches a row whose
stored status still equals the status the caller read, which is what keeps
two racing negotiation actions from both succeeding.
"""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from appointments.domain.errors import (
    ConcurrentModificationError,
    DuplicateActiveError,
    NotFoundError,
    StoreUnavailableError,
)
from appointments.domain.models import Inquiry, InquiryPatch, utcnow
from appointments.domain.types import InquiryKind, InquiryStatus
from appointments.state_machine.transitions import ACTIVE_STATUSES
from appointments.store.serializers import inquiry_to_row, row_to_inquiry, serialize_slot

logger = structlog.get_logger()

_COLUMNS = (
    "id",
    "buyer_id",
    "seller_id",
    "property_id",
    "kind",
    "message",
    "email",
    "status",
    "requested_json",
    "proposed_json",
    "seller_note",
    "buyer_note",
    "created_at",
    "updated_at",
)


class SqliteInquiryStore:
    """Persist and retrieve inquiries in SQLite.

    A single lock serializes access to the shared connection; the
    status-conditional ``UPDATE`` is what provides per-inquiry atomicity.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize with an open database connection.

        Args:
            conn: An open sqlite3.Connection whose database already has the
                  ``inquiries`` table (see ``init_inquiry_table``).
        """
        self._conn = conn
        self._lock = threading.Lock()

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        with self._lock:
            try:
                yield
            except sqlite3.OperationalError as exc:
                self._conn.rollback()
                logger.warning("inquiry_store_unavailable", operation=operation, error=str(exc))
                raise StoreUnavailableError(f"Inquiry store unavailable during {operation}") from exc

    def _fetch(self, query: str, params: tuple[Any, ...] | list[Any]) -> list[dict[str, Any]]:
        cursor = self._conn.cursor()
        cursor.row_factory = sqlite3.Row
        cursor.execute(query, params)
        return [dict(row) for row in cursor.fetchall()]

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def create(self, inquiry: Inquiry) -> Inquiry:
        row = inquiry_to_row(inquiry)
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._guard("create"):
            try:
                self._conn.execute(
                    f"INSERT INTO inquiries ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                    tuple(row[c] for c in _COLUMNS),
                )
            except sqlite3.IntegrityError as exc:
                self._conn.rollback()
                if "buyer_id" in str(exc):
                    raise DuplicateActiveError(
                        inquiry.buyer_id, inquiry.property_id
                    ) from exc
                raise
            self._conn.commit()
        return inquiry

    def update(
        self, inquiry_id: str, expected_status: InquiryStatus | None, patch: InquiryPatch
    ) -> Inquiry:
        changes = patch.changes()
        assignments: list[str] = []
        params: list[Any] = []

        for name, value in changes.items():
            if name == "proposed":
                assignments.append("proposed_json = ?")
                params.append(serialize_slot(value))
            elif name == "status":
                assignments.append("status = ?")
                params.append(value.value)
            else:
                assignments.append(f"{name} = ?")
                params.append(value)

        assignments.append("updated_at = ?")
        params.append(utcnow().isoformat())

        expected = expected_status.value if expected_status is not None else None
        params.extend([inquiry_id, expected])

        with self._guard("update"):
            cursor = self._conn.execute(
                f"UPDATE inquiries SET {', '.join(assignments)} WHERE id = ? AND status IS ?",
                params,
            )
            if cursor.rowcount == 0:
                self._conn.rollback()
                exists = self._conn.execute(
                    "SELECT 1 FROM inquiries WHERE id = ?", (inquiry_id,)
                ).fetchone()
                if exists is None:
                    raise NotFoundError("Inquiry", inquiry_id)
                raise ConcurrentModificationError(inquiry_id, expected)
            self._conn.commit()
            rows = self._fetch("SELECT * FROM inquiries WHERE id = ?", (inquiry_id,))

        return row_to_inquiry(rows[0])

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def find_by_id(self, inquiry_id: str) -> Inquiry | None:
        with self._guard("find_by_id"):
            rows = self._fetch("SELECT * FROM inquiries WHERE id = ?", (inquiry_id,))
        return row_to_inquiry(rows[0]) if rows else None

    def find_active_by_buyer_and_property(
        self, buyer_id: str, property_id: str, kind: InquiryKind
    ) -> Inquiry | None:
        active = sorted(s.value for s in ACTIVE_STATUSES)
        placeholders = ", ".join("?" for _ in active)
        with self._guard("find_active"):
            rows = self._fetch(
                "SELECT * FROM inquiries WHERE buyer_id = ? AND property_id = ? AND kind = ? "
                f"AND status IN ({placeholders}) ORDER BY created_at DESC LIMIT 1",
                [buyer_id, property_id, InquiryKind(kind).value, *active],
            )
        return row_to_inquiry(rows[0]) if rows else None

    def _list_by(
        self, column: str, user_id: str, status: InquiryStatus | None
    ) -> list[Inquiry]:
        query = f"SELECT * FROM inquiries WHERE {column} = ?"
        params: list[Any] = [user_id]
        if status is not None:
            query += " AND status = ?"
            params.append(InquiryStatus(status).value)
        query += " ORDER BY created_at DESC, id DESC"
        with self._guard(f"list_by_{column}"):
            rows = self._fetch(query, params)
        return [row_to_inquiry(row) for row in rows]

    def list_by_seller(
        self, seller_id: str, status: InquiryStatus | None = None
    ) -> list[Inquiry]:
        return self._list_by("seller_id", seller_id, status)

    def list_by_buyer(
        self, buyer_id: str, status: InquiryStatus | None = None
    ) -> list[Inquiry]:
        return self._list_by("buyer_id", buyer_id, status)

    def ping(self) -> None:
        """Run a trivial query; raises ``StoreUnavailableError`` on failure."""
        with self._guard("ping"):
            self._conn.execute("SELECT 1")
