"""SQLite-specific behavior of the inquiry store."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from datetime import UTC, datetime

import pytest

from appointments.domain.errors import DuplicateActiveError, StoreUnavailableError
from appointments.domain.models import Inquiry, RequestedSlot
from appointments.domain.types import InquiryKind, InquiryStatus
from appointments.store.schema import init_inquiry_table, open_inquiry_db
from appointments.store.serializers import inquiry_to_row, row_to_inquiry
from appointments.store.sqlite import SqliteInquiryStore


@pytest.fixture
def conn() -> Iterator[sqlite3.Connection]:
    """In-memory SQLite connection with the inquiries table initialized."""
    connection = open_inquiry_db(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def sqlite_store(conn: sqlite3.Connection) -> SqliteInquiryStore:
    return SqliteInquiryStore(conn)


def _appointment(inquiry_id: str) -> Inquiry:
    return Inquiry(
        id=inquiry_id,
        buyer_id="b1",
        seller_id="s1",
        property_id="p1",
        kind=InquiryKind.APPOINTMENT,
        message="Viewing please",
        status=InquiryStatus.PENDING,
        requested=RequestedSlot(date="2025-01-10", time="14:00"),
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
        updated_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


class TestSchema:

    def test_init_is_idempotent(self, conn: sqlite3.Connection) -> None:
        init_inquiry_table(conn)
        init_inquiry_table(conn)
        tables = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='inquiries'"
        ).fetchall()
        assert len(tables) == 1

    def test_partial_unique_index_rejects_raw_duplicate(self, conn: sqlite3.Connection) -> None:
        row = inquiry_to_row(_appointment("i1"))
        columns = ", ".join(row)
        placeholders = ", ".join("?" for _ in row)
        conn.execute(f"INSERT INTO inquiries ({columns}) VALUES ({placeholders})", tuple(row.values()))
        row["id"] = "i2"
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                f"INSERT INTO inquiries ({columns}) VALUES ({placeholders})", tuple(row.values())
            )

    def test_file_database_uses_wal(self, tmp_path) -> None:
        connection = open_inquiry_db(tmp_path / "inquiries.db")
        mode = connection.execute("PRAGMA journal_mode").fetchone()[0]
        connection.close()
        assert mode == "wal"


class TestSerializers:

    def test_slots_stored_as_json(self) -> None:
        row = inquiry_to_row(_appointment("i1"))
        assert row["requested_json"] == '{"date":"2025-01-10","time":"14:00","place":null}'
        assert row["proposed_json"] is None
        assert row["status"] == "pending"

    def test_row_round_trip(self) -> None:
        original = _appointment("i1")
        assert row_to_inquiry(inquiry_to_row(original)) == original


class TestFailureMapping:

    def test_integrity_error_becomes_duplicate_active(
        self, sqlite_store: SqliteInquiryStore
    ) -> None:
        sqlite_store.create(_appointment("i1"))
        with pytest.raises(DuplicateActiveError):
            sqlite_store.create(_appointment("i2"))

    def test_operational_error_becomes_store_unavailable(
        self, conn: sqlite3.Connection, sqlite_store: SqliteInquiryStore
    ) -> None:
        conn.execute("DROP TABLE inquiries")
        with pytest.raises(StoreUnavailableError) as exc_info:
            sqlite_store.find_by_id("i1")
        assert exc_info.value.retryable is True

