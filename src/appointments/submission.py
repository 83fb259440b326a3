"""Inquiry submission gate.

Validates a buyer's new inquiry against the user directory, the property
catalog, and the store's open inquiries, then persists it.  Nothing else
happens here: notifying the seller is the caller's job once ``submit``
has returned.
"""

from __future__ import annotations

import sqlite3
import uuid
from collections.abc import Callable, Mapping
from typing import Any

import structlog

from appointments.audit.logger import AuditLogger
from appointments.directory import PropertyCatalog, UserDirectory
from appointments.domain.errors import (
    AppointmentError,
    DuplicateActiveError,
    ForbiddenError,
    MissingSlotError,
    NotFoundError,
    PropertyNotEligibleError,
    SelfDealingError,
    ValidationError,
)
from appointments.domain.models import Inquiry, RequestedSlot, build_slot, clean_text, utcnow
from appointments.domain.types import InquiryKind, InquiryStatus, PropertyStatus, UserRole
from appointments.observability.metrics import ACTIONS_REFUSED, INQUIRIES_SUBMITTED
from appointments.store.base import InquiryStore

logger = structlog.get_logger()


def _new_id() -> str:
    return uuid.uuid4().hex


class SubmissionGate:
    """Create new inquiries after checking every submission rule.

    Args:
        store: Inquiry persistence.
        catalog: Property lookup; the seller is always taken from here.
        directory: User lookup for the buyer's role and contact email.
        audit_logger: Optional audit trail for submissions and refusals.
        id_factory: Callable producing new inquiry ids.
    """

    def __init__(
        self,
        store: InquiryStore,
        catalog: PropertyCatalog,
        directory: UserDirectory,
        audit_logger: AuditLogger | None = None,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._directory = directory
        self._audit = audit_logger
        self._id_factory = id_factory

    def submit(
        self,
        buyer_id: str,
        property_id: str,
        kind: InquiryKind | str,
        message: str | None,
        requested_slot: Mapping[str, Any] | None = None,
    ) -> Inquiry:
        """Validate and persist a new inquiry.

        Args:
            buyer_id: The authenticated buyer.
            property_id: The listing being asked about.
            kind: ``message`` or ``appointment``.
            message: The buyer's note; trimmed and required.
            requested_slot: ``{"date", "time", "place"?}``, required for
                appointments.

        Returns:
            The stored inquiry (``status=pending`` for appointments).

        Raises:
            ValidationError: Bad input shape or an unapproved property.
            NotFoundError: Unknown buyer or property.
            ForbiddenError: The user is not a buyer.
            SelfDealingError: The buyer owns the property.
            DuplicateActiveError: An open inquiry already exists.
            StoreUnavailableError: Transient storage failure.
        """
        try:
            inquiry = self._build(buyer_id, property_id, kind, message, requested_slot)
            stored = self._store.create(inquiry)
        except AppointmentError as exc:
            self._record_refusal(exc, buyer_id, property_id)
            raise

        INQUIRIES_SUBMITTED.labels(kind=stored.kind.value).inc()
        logger.info(
            "inquiry_submitted",
            inquiry_id=stored.id,
            kind=stored.kind.value,
            property_id=stored.property_id,
            buyer_id=stored.buyer_id,
        )
        if self._audit is not None:
            try:
                self._audit.log_submission(stored)
            except sqlite3.Error:
                logger.exception("audit_write_failed", inquiry_id=stored.id)
        return stored

    def _build(
        self,
        buyer_id: str,
        property_id: str,
        kind: InquiryKind | str,
        message: str | None,
        requested_slot: Mapping[str, Any] | None,
    ) -> Inquiry:
        try:
            inquiry_kind = InquiryKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown inquiry kind {kind!r}") from None

        buyer = self._directory.get_user(buyer_id)
        if buyer is None:
            raise NotFoundError("User", buyer_id)
        if buyer.role is not UserRole.BUYER:
            raise ForbiddenError("Only buyers can send inquiries")

        if not clean_text(property_id):
            raise ValidationError("property_id is required")
        listing = self._catalog.get_property(property_id)
        if listing is None:
            raise NotFoundError("Property", property_id)
        if listing.status is not PropertyStatus.APPROVED:
            raise PropertyNotEligibleError(property_id, listing.status.value)
        if listing.seller_id == buyer_id:
            raise SelfDealingError()

        requested: RequestedSlot | None = None
        if inquiry_kind is InquiryKind.APPOINTMENT:
            slot = requested_slot or {}
            try:
                requested = build_slot(
                    RequestedSlot, slot.get("date"), slot.get("time"), slot.get("place")
                )
            except MissingSlotError:
                raise ValidationError("Appointment date and time are required") from None

        text = clean_text(message)
        if text is None:
            raise ValidationError("Message is required")

        if inquiry_kind is InquiryKind.APPOINTMENT:
            existing = self._store.find_active_by_buyer_and_property(
                buyer_id, property_id, inquiry_kind
            )
            if existing is not None:
                raise DuplicateActiveError(buyer_id, property_id, existing.id)

        now = utcnow()
        return Inquiry(
            id=self._id_factory(),
            buyer_id=buyer_id,
            seller_id=listing.seller_id,
            property_id=property_id,
            kind=inquiry_kind,
            message=text,
            email=buyer.email,
            status=InquiryStatus.PENDING if requested is not None else None,
            requested=requested,
            created_at=now,
            updated_at=now,
        )

    def _record_refusal(self, exc: AppointmentError, buyer_id: str, property_id: str) -> None:
        ACTIONS_REFUSED.labels(code=exc.code).inc()
        logger.info(
            "inquiry_refused",
            code=exc.code,
            reason=str(exc),
            buyer_id=buyer_id,
            property_id=property_id,
        )
        if self._audit is None or exc.retryable:
            return
        try:
            self._audit.log_refusal(
                code=exc.code,
                detail=str(exc),
                actor_id=buyer_id,
                actor_role="buyer",
                action="submit",
                property_id=property_id,
            )
        except sqlite3.Error:
            logger.exception("audit_write_failed", buyer_id=buyer_id, property_id=property_id)
