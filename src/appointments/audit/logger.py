"""Convenience class for inserting audit trail entries.

Each method creates a properly structured :class:`AuditEntry` and inserts it
via :func:`insert_audit_entry`.
"""

from __future__ import annotations

import sqlite3
import threading

from appointments.audit.models import AuditEntry, EventType
from appointments.audit.store import insert_audit_entry
from appointments.domain.models import Inquiry


def _status(inquiry: Inquiry) -> str | None:
    return inquiry.status.value if inquiry.status is not None else None


class AuditLogger:
    """Typed convenience API for inserting audit entries.

    Args:
        conn: An open SQLite connection to the audit database.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._lock = threading.Lock()

    def _insert(self, entry: AuditEntry) -> int:
        with self._lock:
            return insert_audit_entry(self._conn, entry)

    def log_submission(self, inquiry: Inquiry) -> int:
        """Log a newly created inquiry.

        Returns:
            The row ID of the inserted audit entry.
        """
        return self._insert(
            AuditEntry(
                event_type=EventType.INQUIRY_SUBMITTED,
                inquiry_id=inquiry.id,
                property_id=inquiry.property_id,
                actor_id=inquiry.buyer_id,
                actor_role="buyer",
                to_status=_status(inquiry),
                metadata={"kind": inquiry.kind.value, "seller_id": inquiry.seller_id},
            )
        )

    def log_transition(
        self,
        before: Inquiry,
        after: Inquiry,
        actor_id: str,
        actor_role: str,
        action: str,
    ) -> int:
        """Log a successful negotiation state transition.

        Args:
            before: The inquiry as read before the action.
            after: The inquiry as persisted after the action.
            actor_id: The acting user.
            actor_role: ``buyer`` or ``seller``.
            action: The action that was applied.

        Returns:
            The row ID of the inserted audit entry.
        """
        return self._insert(
            AuditEntry(
                event_type=EventType.STATE_TRANSITION,
                inquiry_id=after.id,
                property_id=after.property_id,
                actor_id=actor_id,
                actor_role=actor_role,
                action=action,
                from_status=_status(before),
                to_status=_status(after),
                detail=after.seller_note if actor_role == "seller" else after.buyer_note,
            )
        )

    def log_refusal(
        self,
        *,
        code: str,
        detail: str,
        actor_id: str | None,
        actor_role: str | None,
        action: str | None = None,
        inquiry_id: str | None = None,
        property_id: str | None = None,
        current_status: str | None = None,
    ) -> int:
        """Log an action or submission refused by a business rule.

        Ownership and role failures are recorded as ``unauthorized_access``;
        every other refusal as ``action_refused``.

        Returns:
            The row ID of the inserted audit entry.
        """
        event_type = (
            EventType.UNAUTHORIZED_ACCESS if code == "forbidden" else EventType.ACTION_REFUSED
        )
        return self._insert(
            AuditEntry(
                event_type=event_type,
                inquiry_id=inquiry_id,
                property_id=property_id,
                actor_id=actor_id,
                actor_role=actor_role,
                action=action,
                from_status=current_status,
                detail=detail,
                metadata={"code": code},
            )
        )

    def log_notification_failure(self, inquiry: Inquiry, event: str, error: str) -> int:
        """Log a notifier failure after a successful submission or action.

        Returns:
            The row ID of the inserted audit entry.
        """
        return self._insert(
            AuditEntry(
                event_type=EventType.NOTIFICATION_FAILED,
                inquiry_id=inquiry.id,
                property_id=inquiry.property_id,
                to_status=_status(inquiry),
                detail=error,
                metadata={"event": event},
            )
        )
