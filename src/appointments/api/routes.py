"""Inquiry HTTP endpoints.

Routes stay thin: resolve the caller, hand off to the submission gate or
negotiation service on a worker thread (store calls block), retry only
retryable store errors, then notify the other party once the change is
persisted.
"""

from __future__ import annotations

import asyncio
from typing import Any

from fastapi import APIRouter, Depends

from appointments.api.dependencies import Identity, get_services, require_role
from appointments.api.schemas import (
    BuyerResponseRequest,
    ErrorResponse,
    InquiryResponse,
    SellerActionRequest,
    SubmitInquiryRequest,
)
from appointments.domain.models import Inquiry
from appointments.domain.types import InquiryStatus, UserRole
from appointments.notifications import notify_safely
from appointments.resilience.retry import call_with_retry
from appointments.service import NegotiationService

router = APIRouter(
    prefix="/api/inquiries",
    tags=["inquiries"],
    responses={code: {"model": ErrorResponse} for code in (400, 403, 404, 409, 503)},
)

buyer_only = require_role(UserRole.BUYER)
seller_only = require_role(UserRole.SELLER)
either_party = require_role(UserRole.BUYER, UserRole.SELLER)


async def _run(services: dict[str, Any], func: Any, *args: Any, **kwargs: Any) -> Any:
    settings = services["settings"]
    return await asyncio.to_thread(
        call_with_retry,
        func,
        *args,
        attempts=settings.retry_attempts,
        initial_wait=settings.retry_initial_wait,
        **kwargs,
    )


async def _notify(services: dict[str, Any], inquiry: Inquiry, action: str | None) -> None:
    notifier = services.get("notifier")
    if notifier is None:
        return
    await asyncio.to_thread(
        notify_safely, notifier, inquiry, action, services.get("audit_logger")
    )


def _view(
    service: NegotiationService, inquiries: list[Inquiry], viewer_id: str
) -> list[InquiryResponse]:
    return [
        InquiryResponse.from_inquiry(
            inquiry,
            service.available_actions(inquiry, viewer_id),
            **service.display_fields(inquiry),
        )
        for inquiry in inquiries
    ]


async def _respond_all(
    services: dict[str, Any], inquiries: list[Inquiry], viewer_id: str
) -> list[InquiryResponse]:
    # Catalog and directory lookups may block like store calls.
    return await asyncio.to_thread(_view, services["service"], inquiries, viewer_id)


async def _respond(services: dict[str, Any], inquiry: Inquiry, viewer_id: str) -> InquiryResponse:
    (response,) = await _respond_all(services, [inquiry], viewer_id)
    return response


@router.post("", status_code=201, response_model=InquiryResponse)
async def submit_inquiry(
    body: SubmitInquiryRequest,
    identity: Identity = Depends(buyer_only),
    services: dict[str, Any] = Depends(get_services),
) -> InquiryResponse:
    """Buyer sends a message or requests an appointment."""
    requested = body.requested.model_dump() if body.requested is not None else None
    inquiry = await _run(
        services,
        services["gate"].submit,
        identity.user_id,
        body.property_id,
        body.kind,
        body.message,
        requested,
    )
    await _notify(services, inquiry, None)
    return await _respond(services, inquiry, identity.user_id)


@router.get("/my-inquiries", response_model=list[InquiryResponse])
async def seller_inbox(
    status: InquiryStatus | None = None,
    identity: Identity = Depends(seller_only),
    services: dict[str, Any] = Depends(get_services),
) -> list[InquiryResponse]:
    """Inquiries addressed to the calling seller, newest first."""
    inquiries = await _run(services, services["service"].list_for_seller, identity.user_id, status)
    return await _respond_all(services, inquiries, identity.user_id)


@router.get("/my-sent", response_model=list[InquiryResponse])
async def buyer_outbox(
    status: InquiryStatus | None = None,
    identity: Identity = Depends(buyer_only),
    services: dict[str, Any] = Depends(get_services),
) -> list[InquiryResponse]:
    """Inquiries sent by the calling buyer, newest first."""
    inquiries = await _run(services, services["service"].list_for_buyer, identity.user_id, status)
    return await _respond_all(services, inquiries, identity.user_id)


@router.get("/{inquiry_id}", response_model=InquiryResponse)
async def get_inquiry(
    inquiry_id: str,
    identity: Identity = Depends(either_party),
    services: dict[str, Any] = Depends(get_services),
) -> InquiryResponse:
    inquiry = await _run(services, services["service"].get_inquiry, inquiry_id, identity.user_id)
    return await _respond(services, inquiry, identity.user_id)


@router.put("/{inquiry_id}/seller-action", response_model=InquiryResponse)
async def seller_action(
    inquiry_id: str,
    body: SellerActionRequest,
    identity: Identity = Depends(seller_only),
    services: dict[str, Any] = Depends(get_services),
) -> InquiryResponse:
    """Seller accepts the requested slot, proposes another, or rejects."""
    inquiry = await _run(
        services,
        services["service"].seller_action,
        inquiry_id,
        identity.user_id,
        body.action,
        body.payload(),
    )
    await _notify(services, inquiry, body.action)
    return await _respond(services, inquiry, identity.user_id)


@router.put("/{inquiry_id}/buyer-response", response_model=InquiryResponse)
async def buyer_response(
    inquiry_id: str,
    body: BuyerResponseRequest,
    identity: Identity = Depends(buyer_only),
    services: dict[str, Any] = Depends(get_services),
) -> InquiryResponse:
    """Buyer accepts or rejects the seller's offer."""
    inquiry = await _run(
        services,
        services["service"].buyer_response,
        inquiry_id,
        identity.user_id,
        body.action,
        body.payload(),
    )
    await _notify(services, inquiry, body.action)
    return await _respond(services, inquiry, identity.user_id)
