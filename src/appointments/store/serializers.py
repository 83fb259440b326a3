"""Row <-> model conversion for the SQLite inquiry store.

Slots are stored as JSON text columns; timestamps as ISO 8601 strings with
an explicit UTC offset so they parse back into aware datetimes.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from appointments.domain.models import Inquiry, ProposedSlot, RequestedSlot


def serialize_slot(slot: RequestedSlot | ProposedSlot | None) -> str | None:
    """JSON-encode a slot, or return ``None`` when absent."""
    if slot is None:
        return None
    return slot.model_dump_json()


def inquiry_to_row(inquiry: Inquiry) -> dict[str, Any]:
    """Flatten an :class:`Inquiry` into column values."""
    return {
        "id": inquiry.id,
        "buyer_id": inquiry.buyer_id,
        "seller_id": inquiry.seller_id,
        "property_id": inquiry.property_id,
        "kind": inquiry.kind.value,
        "message": inquiry.message,
        "email": inquiry.email,
        "status": inquiry.status.value if inquiry.status is not None else None,
        "requested_json": serialize_slot(inquiry.requested),
        "proposed_json": serialize_slot(inquiry.proposed),
        "seller_note": inquiry.seller_note,
        "buyer_note": inquiry.buyer_note,
        "created_at": inquiry.created_at.isoformat(),
        "updated_at": inquiry.updated_at.isoformat(),
    }


def row_to_inquiry(row: dict[str, Any]) -> Inquiry:
    """Rebuild an :class:`Inquiry` from a row mapping.

    Args:
        row: A dict keyed by column name (e.g. ``dict(sqlite3.Row)``).

    Returns:
        The reconstructed inquiry.
    """
    requested = row.get("requested_json")
    proposed = row.get("proposed_json")
    return Inquiry(
        id=row["id"],
        buyer_id=row["buyer_id"],
        seller_id=row["seller_id"],
        property_id=row["property_id"],
        kind=row["kind"],
        message=row["message"],
        email=row.get("email"),
        status=row.get("status"),
        requested=RequestedSlot(**json.loads(requested)) if requested else None,
        proposed=ProposedSlot(**json.loads(proposed)) if proposed else None,
        seller_note=row.get("seller_note"),
        buyer_note=row.get("buyer_note"),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )
