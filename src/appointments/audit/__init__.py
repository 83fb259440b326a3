"""Audit trail: models, storage, logger, and CLI for inquiry event tracking."""

from appointments.audit.cli import build_parser
from appointments.audit.logger import AuditLogger
from appointments.audit.models import AuditEntry, EventType
from appointments.audit.store import (
    close_audit_db,
    init_audit_db,
    insert_audit_entry,
    query_audit_trail,
)

__all__ = [
    "AuditEntry",
    "AuditLogger",
    "EventType",
    "build_parser",
    "close_audit_db",
    "init_audit_db",
    "insert_audit_entry",
    "query_audit_trail",
]
