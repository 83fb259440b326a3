"""Shared pytest fixtures for the appointment negotiation test suite."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator

import pytest

from appointments.audit.logger import AuditLogger
from appointments.audit.store import init_audit_db
from appointments.directory import InMemoryPropertyCatalog, InMemoryUserDirectory
from appointments.domain.models import Inquiry, PropertyRecord, UserRecord
from appointments.domain.types import InquiryKind, PropertyStatus, UserRole
from appointments.service import NegotiationService
from appointments.store.base import InquiryStore
from appointments.store.memory import InMemoryInquiryStore
from appointments.store.schema import open_inquiry_db
from appointments.store.sqlite import SqliteInquiryStore
from appointments.submission import SubmissionGate

BUYER = "buyer-1"
OTHER_BUYER = "buyer-2"
SELLER = "seller-1"
OTHER_SELLER = "seller-2"
ADMIN = "admin-1"

LISTING = "prop-approved"
PENDING_LISTING = "prop-pending"
NO_ADDRESS_LISTING = "prop-no-address"
LISTING_ADDRESS = "12 Harbour Road, Kingston"


@pytest.fixture
def directory() -> InMemoryUserDirectory:
    """Two buyers, two sellers and an admin."""
    return InMemoryUserDirectory(
        [
            UserRecord(
                id=BUYER, role=UserRole.BUYER, email="buyer1@example.com", name="Ama Mensah"
            ),
            UserRecord(id=OTHER_BUYER, role=UserRole.BUYER, email="buyer2@example.com"),
            UserRecord(id=SELLER, role=UserRole.SELLER, email="seller1@example.com"),
            UserRecord(id=OTHER_SELLER, role=UserRole.SELLER, email="seller2@example.com"),
            UserRecord(id=ADMIN, role=UserRole.ADMIN, email="admin@example.com"),
        ]
    )


@pytest.fixture
def catalog() -> InMemoryPropertyCatalog:
    """An approved listing, an unapproved one, and one without an address."""
    return InMemoryPropertyCatalog(
        [
            PropertyRecord(
                id=LISTING,
                seller_id=SELLER,
                status=PropertyStatus.APPROVED,
                address=LISTING_ADDRESS,
                title="Sea-view plot",
            ),
            PropertyRecord(id=PENDING_LISTING, seller_id=SELLER, status=PropertyStatus.PENDING),
            PropertyRecord(
                id=NO_ADDRESS_LISTING, seller_id=SELLER, status=PropertyStatus.APPROVED
            ),
        ]
    )


@pytest.fixture(params=["memory", "sqlite"])
def store(request: pytest.FixtureRequest) -> Iterator[InquiryStore]:
    """Each test using this fixture runs against both store adapters."""
    if request.param == "memory":
        yield InMemoryInquiryStore()
        return
    conn = open_inquiry_db(":memory:")
    yield SqliteInquiryStore(conn)
    conn.close()


@pytest.fixture
def audit_conn() -> Iterator[sqlite3.Connection]:
    conn = init_audit_db(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def audit_logger(audit_conn: sqlite3.Connection) -> AuditLogger:
    return AuditLogger(audit_conn)


@pytest.fixture
def gate(
    store: InquiryStore,
    catalog: InMemoryPropertyCatalog,
    directory: InMemoryUserDirectory,
    audit_logger: AuditLogger,
) -> SubmissionGate:
    return SubmissionGate(store, catalog, directory, audit_logger=audit_logger)


@pytest.fixture
def service(
    store: InquiryStore,
    catalog: InMemoryPropertyCatalog,
    directory: InMemoryUserDirectory,
    audit_logger: AuditLogger,
) -> NegotiationService:
    return NegotiationService(
        store, catalog=catalog, audit_logger=audit_logger, directory=directory
    )


@pytest.fixture
def pending(gate: SubmissionGate) -> Inquiry:
    """A freshly requested appointment for 2025-01-10 14:00."""
    return gate.submit(
        BUYER,
        LISTING,
        InquiryKind.APPOINTMENT,
        "Could I see the plot?",
        {"date": "2025-01-10", "time": "14:00"},
    )


@pytest.fixture
def proposed(service: NegotiationService, pending: Inquiry) -> Inquiry:
    """An appointment the seller has countered with 2025-01-11 16:00 at the office."""
    return service.seller_action(
        pending.id,
        SELLER,
        "propose",
        {"date": "2025-01-11", "time": "16:00", "place": "Office"},
    )
