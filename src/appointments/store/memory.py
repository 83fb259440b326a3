"""In-process inquiry store for tests and single-process deployments."""

from __future__ import annotations

import threading

from appointments.domain.errors import (
    ConcurrentModificationError,
    DuplicateActiveError,
    NotFoundError,
)
from appointments.domain.models import Inquiry, InquiryPatch
from appointments.domain.types import InquiryKind, InquiryStatus
from appointments.state_machine.transitions import ACTIVE_STATUSES


class InMemoryInquiryStore:
    """Dict-backed store; every operation runs under one lock.

    Stored models are frozen, so handing them out without copying is safe.
    """

    def __init__(self) -> None:
        self._records: dict[str, Inquiry] = {}
        self._lock = threading.Lock()

    def _active(self, buyer_id: str, property_id: str, kind: InquiryKind) -> Inquiry | None:
        for inquiry in self._records.values():
            if (
                inquiry.buyer_id == buyer_id
                and inquiry.property_id == property_id
                and inquiry.kind == kind
                and inquiry.status in ACTIVE_STATUSES
            ):
                return inquiry
        return None

    def create(self, inquiry: Inquiry) -> Inquiry:
        with self._lock:
            if inquiry.status in ACTIVE_STATUSES:
                existing = self._active(inquiry.buyer_id, inquiry.property_id, inquiry.kind)
                if existing is not None:
                    raise DuplicateActiveError(
                        inquiry.buyer_id, inquiry.property_id, existing.id
                    )
            self._records[inquiry.id] = inquiry
        return inquiry

    def update(
        self, inquiry_id: str, expected_status: InquiryStatus | None, patch: InquiryPatch
    ) -> Inquiry:
        with self._lock:
            current = self._records.get(inquiry_id)
            if current is None:
                raise NotFoundError("Inquiry", inquiry_id)
            if current.status != expected_status:
                raise ConcurrentModificationError(inquiry_id, expected_status)
            updated = patch.apply_to(current)
            self._records[inquiry_id] = updated
        return updated

    def find_by_id(self, inquiry_id: str) -> Inquiry | None:
        with self._lock:
            return self._records.get(inquiry_id)

    def find_active_by_buyer_and_property(
        self, buyer_id: str, property_id: str, kind: InquiryKind
    ) -> Inquiry | None:
        with self._lock:
            return self._active(buyer_id, property_id, kind)

    def _list_by(self, attr: str, user_id: str, status: InquiryStatus | None) -> list[Inquiry]:
        with self._lock:
            matches = [
                i
                for i in self._records.values()
                if getattr(i, attr) == user_id and (status is None or i.status == status)
            ]
        return sorted(matches, key=lambda i: (i.created_at, i.id), reverse=True)

    def list_by_seller(
        self, seller_id: str, status: InquiryStatus | None = None
    ) -> list[Inquiry]:
        return self._list_by("seller_id", seller_id, status)

    def list_by_buyer(
        self, buyer_id: str, status: InquiryStatus | None = None
    ) -> list[Inquiry]:
        return self._list_by("buyer_id", buyer_id, status)

    def ping(self) -> None:
        return None
