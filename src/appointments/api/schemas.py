"""Request and response bodies for the inquiry HTTP API."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from appointments.domain.models import Inquiry
from appointments.domain.types import InquiryKind, InquiryStatus


class SlotIn(BaseModel):
    """A date/time/place triple as sent by clients."""

    date: str | None = None
    time: str | None = None
    place: str | None = None


class SubmitInquiryRequest(BaseModel):
    property_id: str
    kind: InquiryKind = InquiryKind.MESSAGE
    message: str = ""
    requested: SlotIn | None = None


class SellerActionRequest(BaseModel):
    """Seller action body; ``action`` is checked by the state machine."""

    action: str
    date: str | None = None
    time: str | None = None
    place: str | None = None
    note: str | None = None
    reason: str | None = None

    def payload(self) -> dict[str, Any]:
        return self.model_dump(exclude={"action"}, exclude_none=True)


class BuyerResponseRequest(BaseModel):
    action: str
    note: str | None = None

    def payload(self) -> dict[str, Any]:
        return self.model_dump(exclude={"action"}, exclude_none=True)


class SlotOut(BaseModel):
    date: str
    time: str
    place: str | None = None


class InquiryResponse(BaseModel):
    """An inquiry as seen by one of its parties."""

    id: str
    buyer_id: str
    seller_id: str
    property_id: str
    kind: InquiryKind
    message: str
    email: str | None = None
    status: InquiryStatus | None = None
    requested: SlotOut | None = None
    proposed: SlotOut | None = None
    seller_note: str | None = None
    buyer_note: str | None = None
    created_at: datetime
    updated_at: datetime
    property_title: str | None = None
    buyer_name: str | None = None
    allowed_actions: list[str] = Field(default_factory=list)

    @classmethod
    def from_inquiry(
        cls,
        inquiry: Inquiry,
        allowed_actions: list[str],
        *,
        property_title: str | None = None,
        buyer_name: str | None = None,
    ) -> InquiryResponse:
        data = inquiry.model_dump()
        return cls(
            **data,
            property_title=property_title,
            buyer_name=buyer_name,
            allowed_actions=allowed_actions,
        )


class ErrorResponse(BaseModel):
    error: str
    message: str
    retryable: bool = False
