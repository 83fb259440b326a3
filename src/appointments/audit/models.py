"""Audit trail models for tracking inquiry submissions and negotiation actions.

Each entry records who acted on which inquiry, the action, the status
before and after, and a free-text detail (such as the refusal reason).
"""

from enum import StrEnum

from pydantic import BaseModel


class EventType(StrEnum):
    """Types of events tracked in the audit trail."""

    INQUIRY_SUBMITTED = "inquiry_submitted"
    STATE_TRANSITION = "state_transition"
    ACTION_REFUSED = "action_refused"
    UNAUTHORIZED_ACCESS = "unauthorized_access"
    NOTIFICATION_FAILED = "notification_failed"


class AuditEntry(BaseModel):
    """A single audit trail entry.

    All fields except event_type are optional to accommodate different
    event types (e.g., a refused submission has no inquiry_id).
    """

    event_type: EventType
    inquiry_id: str | None = None
    property_id: str | None = None
    actor_id: str | None = None
    actor_role: str | None = None
    action: str | None = None
    from_status: str | None = None
    to_status: str | None = None
    detail: str | None = None
    metadata: dict[str, str] | None = None
