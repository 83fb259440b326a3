"""Pydantic v2 models for inquiries, schedule slots, and collaborator records."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from appointments.domain.errors import MissingSlotError, ValidationError
from appointments.domain.types import (
    InquiryKind,
    InquiryStatus,
    PropertyStatus,
    UserRole,
)

_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_PATTERN = re.compile(r"^\d{2}:\d{2}(:\d{2})?$")


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def validate_date(value: str) -> str:
    """Check that *value* is an ISO ``YYYY-MM-DD`` calendar date.

    The string is returned unchanged so later copies stay byte-for-byte
    identical to what the caller supplied.

    Raises:
        ValidationError: If the value is not a real calendar date.
    """
    if not _DATE_PATTERN.match(value):
        raise ValidationError(f"Invalid date {value!r}; expected YYYY-MM-DD")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}; not a calendar date") from None
    return value


def validate_time(value: str) -> str:
    """Check that *value* is an ``HH:MM`` or ``HH:MM:SS`` time of day.

    Raises:
        ValidationError: If the value is not a valid time of day.
    """
    if not _TIME_PATTERN.match(value):
        raise ValidationError(f"Invalid time {value!r}; expected HH:MM")
    try:
        time.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid time {value!r}; not a time of day") from None
    return value


def clean_text(value: Any) -> str | None:
    """Trim a free-text value, mapping blanks and ``None`` to ``None``."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class RequestedSlot(BaseModel):
    """The buyer's requested visit slot, fixed at creation."""

    model_config = ConfigDict(frozen=True)

    date: str
    time: str
    place: str | None = None


class ProposedSlot(BaseModel):
    """The seller's offered (or accepted) visit slot."""

    model_config = ConfigDict(frozen=True)

    date: str
    time: str
    place: str | None = None


def build_slot(
    slot_cls: type[RequestedSlot] | type[ProposedSlot],
    date_value: Any,
    time_value: Any,
    place: Any = None,
) -> RequestedSlot | ProposedSlot:
    """Validate raw slot fields and build a slot model.

    Args:
        slot_cls: ``RequestedSlot`` or ``ProposedSlot``.
        date_value: Raw date input.
        time_value: Raw time input.
        place: Optional meeting place.

    Raises:
        MissingSlotError: If the date or the time is absent or blank.
        ValidationError: If either value is malformed.
    """
    date_text = clean_text(date_value)
    time_text = clean_text(time_value)
    if date_text is None or time_text is None:
        raise MissingSlotError("Both a date and a time are required")
    return slot_cls(
        date=validate_date(date_text),
        time=validate_time(time_text),
        place=clean_text(place),
    )


class Inquiry(BaseModel):
    """One buyer's inquiry about one property.

    Appointment inquiries carry a ``status`` that moves through the
    negotiation state machine; message inquiries have ``status=None``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    buyer_id: str
    seller_id: str
    property_id: str
    kind: InquiryKind
    message: str
    email: str | None = None
    status: InquiryStatus | None = None
    requested: RequestedSlot | None = None
    proposed: ProposedSlot | None = None
    seller_note: str | None = None
    buyer_note: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_appointment(self) -> bool:
        return self.kind is InquiryKind.APPOINTMENT


class InquiryPatch(BaseModel):
    """Fields a single transition is allowed to change.

    Only fields that were explicitly set are applied, so a patch never
    touches ``requested`` or the party and subject identifiers.
    """

    model_config = ConfigDict(frozen=True)

    status: InquiryStatus
    proposed: ProposedSlot | None = None
    seller_note: str | None = None
    buyer_note: str | None = None

    def changes(self) -> dict[str, Any]:
        """Return the explicitly-set fields as a plain update mapping."""
        return {name: getattr(self, name) for name in self.model_fields_set}

    def apply_to(self, inquiry: Inquiry, updated_at: datetime | None = None) -> Inquiry:
        """Return a copy of *inquiry* with this patch applied."""
        update = self.changes()
        update["updated_at"] = updated_at or utcnow()
        return inquiry.model_copy(update=update)


class PropertyRecord(BaseModel):
    """Property catalog entry as seen by the negotiation engine."""

    model_config = ConfigDict(frozen=True)

    id: str
    seller_id: str
    status: PropertyStatus
    address: str | None = None
    title: str | None = None


class UserRecord(BaseModel):
    """User directory entry as seen by the negotiation engine."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: UserRole
    email: str | None = None
    name: str | None = None
