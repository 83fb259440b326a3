"""Storage contract consumed by the submission gate and negotiation service."""

from __future__ import annotations

from typing import Protocol

from appointments.domain.models import Inquiry, InquiryPatch
from appointments.domain.types import InquiryKind, InquiryStatus


class InquiryStore(Protocol):
    """Durable record of buyer/seller/property negotiations.

    Implementations must make ``update`` conditional on the stored status so
    that two actions racing on one inquiry cannot both succeed, and must
    leave the record untouched when the condition fails.
    """

    def create(self, inquiry: Inquiry) -> Inquiry:
        """Persist a new inquiry.

        Raises:
            DuplicateActiveError: If an open inquiry of the same kind exists
                for the same buyer and property.
            StoreUnavailableError: On transient storage failure.
        """
        ...

    def find_by_id(self, inquiry_id: str) -> Inquiry | None:
        """Return the inquiry with *inquiry_id*, or ``None``."""
        ...

    def find_active_by_buyer_and_property(
        self, buyer_id: str, property_id: str, kind: InquiryKind
    ) -> Inquiry | None:
        """Return the open (non-terminal) inquiry for the pair, if any."""
        ...

    def update(
        self, inquiry_id: str, expected_status: InquiryStatus | None, patch: InquiryPatch
    ) -> Inquiry:
        """Apply *patch* only if the stored status equals *expected_status*.

        Raises:
            NotFoundError: If no such inquiry exists.
            ConcurrentModificationError: If the stored status has moved on.
            StoreUnavailableError: On transient storage failure.
        """
        ...

    def list_by_seller(
        self, seller_id: str, status: InquiryStatus | None = None
    ) -> list[Inquiry]:
        """Return the seller's inquiries, newest first."""
        ...

    def list_by_buyer(
        self, buyer_id: str, status: InquiryStatus | None = None
    ) -> list[Inquiry]:
        """Return the buyer's inquiries, newest first."""
        ...
