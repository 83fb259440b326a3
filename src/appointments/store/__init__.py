"""Inquiry persistence package.

Provides the ``InquiryStore`` contract plus SQLite-backed and in-memory
implementations, and the schema/serialization helpers for SQLite.
"""

from appointments.store.base import InquiryStore
from appointments.store.memory import InMemoryInquiryStore
from appointments.store.schema import init_inquiry_table, open_inquiry_db
from appointments.store.serializers import inquiry_to_row, row_to_inquiry
from appointments.store.sqlite import SqliteInquiryStore

__all__ = [
    "InMemoryInquiryStore",
    "InquiryStore",
    "SqliteInquiryStore",
    "init_inquiry_table",
    "inquiry_to_row",
    "open_inquiry_db",
    "row_to_inquiry",
]
