"""Negotiation service: load, authorize, validate, and persist actor actions.

Every action runs the same cycle against one inquiry: load it, check the
caller owns the side they act for, ask the transition validator for the
patch, then write it conditionally on the status that was read.  A refused
action leaves the stored record untouched.  Notifications are not sent
from here; callers send them after a successful return.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Mapping
from typing import Any

import structlog

from appointments.audit.logger import AuditLogger
from appointments.directory import PropertyCatalog, UserDirectory
from appointments.domain.errors import (
    AppointmentError,
    ForbiddenError,
    NotAnAppointmentError,
    NotFoundError,
)
from appointments.domain.models import Inquiry
from appointments.domain.types import ActorRole, InquiryStatus
from appointments.observability.metrics import ACTIONS_REFUSED, TRANSITIONS_APPLIED
from appointments.state_machine.validator import allowed_actions, validate_transition
from appointments.store.base import InquiryStore

logger = structlog.get_logger()


class NegotiationService:
    """Apply seller and buyer actions to appointment inquiries.

    Args:
        store: Inquiry persistence with status-conditional updates.
        catalog: Optional property lookup, used for the property address
            as a fallback meeting place and the title shown in listings.
        directory: Optional user lookup for the buyer name shown in listings.
        audit_logger: Optional audit trail for transitions and refusals.
    """

    def __init__(
        self,
        store: InquiryStore,
        catalog: PropertyCatalog | None = None,
        audit_logger: AuditLogger | None = None,
        directory: UserDirectory | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._directory = directory
        self._audit = audit_logger

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def apply_action(
        self,
        inquiry_id: str,
        acting_user_id: str,
        acting_role: ActorRole | str,
        action: str,
        payload: Mapping[str, Any] | None = None,
    ) -> Inquiry:
        """Apply one negotiation action and return the updated inquiry.

        Args:
            inquiry_id: The inquiry to act on.
            acting_user_id: The authenticated user.
            acting_role: ``seller`` or ``buyer``; which party the user acts as.
            action: ``accept_requested``, ``propose``, ``reject`` (seller) or
                ``accept``, ``reject`` (buyer).
            payload: Action fields (``date``, ``time``, ``place``, ``note``,
                ``reason``).

        Raises:
            NotFoundError: No such inquiry.
            ForbiddenError: The user does not own the side they act for.
            NotAnAppointmentError: The inquiry is a plain message.
            InvalidTransitionError: Not allowed from the current status.
            MissingReasonError: Seller rejection without a reason.
            MissingSlotError: A required slot is missing.
            ValidationError: A supplied date or time is malformed.
            ConcurrentModificationError: The status changed since it was read.
            StoreUnavailableError: Transient storage failure.
        """
        current: Inquiry | None = None
        try:
            try:
                actor = ActorRole(acting_role)
            except ValueError:
                raise ForbiddenError(f"Role '{acting_role}' cannot act on appointments") from None

            current = self._store.find_by_id(inquiry_id)
            if current is None:
                raise NotFoundError("Inquiry", inquiry_id)

            owner = current.seller_id if actor is ActorRole.SELLER else current.buyer_id
            if acting_user_id != owner:
                raise ForbiddenError(f"Only the {actor.value} of this inquiry can do that")

            if not current.is_appointment:
                raise NotAnAppointmentError(inquiry_id)

            patch = validate_transition(
                current.status,
                actor,
                action,
                payload,
                requested=current.requested,
                fallback_place=self._fallback_place(current) if actor is ActorRole.SELLER else None,
            )
            updated = self._store.update(inquiry_id, current.status, patch)
        except AppointmentError as exc:
            self._record_refusal(exc, inquiry_id, acting_user_id, acting_role, action, current)
            raise

        TRANSITIONS_APPLIED.labels(action=action, to_status=patch.status.value).inc()
        logger.info(
            "inquiry_transition",
            inquiry_id=inquiry_id,
            actor=actor.value,
            action=action,
            from_status=current.status.value if current.status else None,
            to_status=patch.status.value,
        )
        if self._audit is not None:
            try:
                self._audit.log_transition(current, updated, acting_user_id, actor.value, action)
            except sqlite3.Error:
                logger.exception("audit_write_failed", inquiry_id=inquiry_id)
        return updated

    def seller_action(
        self,
        inquiry_id: str,
        seller_id: str,
        action: str,
        payload: Mapping[str, Any] | None = None,
    ) -> Inquiry:
        """Seller proposes, accepts the requested slot, or rejects."""
        return self.apply_action(inquiry_id, seller_id, ActorRole.SELLER, action, payload)

    def buyer_response(
        self,
        inquiry_id: str,
        buyer_id: str,
        action: str,
        payload: Mapping[str, Any] | None = None,
    ) -> Inquiry:
        """Buyer accepts or rejects the seller's offer."""
        return self.apply_action(inquiry_id, buyer_id, ActorRole.BUYER, action, payload)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_inquiry(self, inquiry_id: str, user_id: str) -> Inquiry:
        """Return an inquiry visible to *user_id* (its buyer or seller).

        Raises:
            NotFoundError: No such inquiry.
            ForbiddenError: The user is neither party.
        """
        inquiry = self._store.find_by_id(inquiry_id)
        if inquiry is None:
            raise NotFoundError("Inquiry", inquiry_id)
        if user_id not in (inquiry.buyer_id, inquiry.seller_id):
            raise ForbiddenError("You are not a party to this inquiry")
        return inquiry

    def list_for_seller(
        self, seller_id: str, status: InquiryStatus | None = None
    ) -> list[Inquiry]:
        """Seller inbox, newest first."""
        return self._store.list_by_seller(seller_id, status)

    def list_for_buyer(
        self, buyer_id: str, status: InquiryStatus | None = None
    ) -> list[Inquiry]:
        """Buyer's sent inquiries, newest first."""
        return self._store.list_by_buyer(buyer_id, status)

    @staticmethod
    def available_actions(inquiry: Inquiry, user_id: str) -> list[str]:
        """Actions *user_id* may currently take on *inquiry*."""
        if not inquiry.is_appointment:
            return []
        if user_id == inquiry.seller_id:
            return allowed_actions(inquiry.status, ActorRole.SELLER)
        if user_id == inquiry.buyer_id:
            return allowed_actions(inquiry.status, ActorRole.BUYER)
        return []

    def display_fields(self, inquiry: Inquiry) -> dict[str, str | None]:
        """Property title and buyer name for inbox listings, ``None`` when unknown."""
        listing = (
            self._catalog.get_property(inquiry.property_id) if self._catalog is not None else None
        )
        buyer = self._directory.get_user(inquiry.buyer_id) if self._directory is not None else None
        return {
            "property_title": listing.title if listing is not None else None,
            "buyer_name": buyer.name if buyer is not None else None,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _fallback_place(self, inquiry: Inquiry) -> str | None:
        if self._catalog is None:
            return None
        listing = self._catalog.get_property(inquiry.property_id)
        return listing.address if listing is not None else None

    def _record_refusal(
        self,
        exc: AppointmentError,
        inquiry_id: str,
        acting_user_id: str,
        acting_role: ActorRole | str,
        action: str,
        current: Inquiry | None,
    ) -> None:
        ACTIONS_REFUSED.labels(code=exc.code).inc()
        logger.info(
            "inquiry_action_refused",
            code=exc.code,
            reason=str(exc),
            inquiry_id=inquiry_id,
            actor_id=acting_user_id,
            action=action,
            retryable=exc.retryable,
        )
        if self._audit is None or exc.retryable:
            return
        try:
            self._audit.log_refusal(
                code=exc.code,
                detail=str(exc),
                actor_id=acting_user_id,
                actor_role=str(acting_role),
                action=action,
                inquiry_id=inquiry_id,
                property_id=current.property_id if current is not None else None,
                current_status=(
                    current.status.value if current is not None and current.status else None
                ),
            )
        except sqlite3.Error:
            logger.exception("audit_write_failed", inquiry_id=inquiry_id)
