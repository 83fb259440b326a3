"""Post-success notification hook.

Delivery is somebody else's job (email, push, chat).  The engine only
defines the ``Notifier`` contract and calls it after a submission or action
has been persisted; a failing notifier is logged and audited but never
changes the negotiation outcome.
"""

from __future__ import annotations

from typing import Protocol

import structlog

from appointments.audit.logger import AuditLogger
from appointments.domain.models import Inquiry
from appointments.domain.types import InquiryStatus

logger = structlog.get_logger()


class Notifier(Protocol):
    """Receives events after they have been persisted."""

    def inquiry_submitted(self, inquiry: Inquiry) -> None: ...

    def inquiry_updated(self, inquiry: Inquiry, action: str) -> None: ...


class LogNotifier:
    """Notifier that records what would be sent to the other party."""

    def inquiry_submitted(self, inquiry: Inquiry) -> None:
        logger.info(
            "notify_seller_new_inquiry",
            inquiry_id=inquiry.id,
            seller_id=inquiry.seller_id,
            kind=inquiry.kind.value,
        )

    def inquiry_updated(self, inquiry: Inquiry, action: str) -> None:
        # Seller moves land in proposed/seller_rejected and go to the buyer.
        seller_moved = inquiry.status in (InquiryStatus.PROPOSED, InquiryStatus.SELLER_REJECTED)
        recipient = inquiry.buyer_id if seller_moved else inquiry.seller_id
        logger.info(
            "notify_inquiry_updated",
            inquiry_id=inquiry.id,
            recipient_id=recipient,
            action=action,
            status=inquiry.status.value if inquiry.status else None,
        )


class NullNotifier:
    """Notifier used when notifications are disabled."""

    def inquiry_submitted(self, inquiry: Inquiry) -> None:
        return None

    def inquiry_updated(self, inquiry: Inquiry, action: str) -> None:
        return None


def notify_safely(
    notifier: Notifier,
    inquiry: Inquiry,
    action: str | None = None,
    audit_logger: AuditLogger | None = None,
) -> bool:
    """Invoke *notifier* for *inquiry*, isolating its failures.

    Args:
        notifier: The notifier to call.
        inquiry: The persisted inquiry.
        action: The negotiation action, or ``None`` for a new submission.
        audit_logger: Optional audit trail for recording failures.

    Returns:
        ``True`` if the notifier completed without raising.
    """
    event = action or "submitted"
    try:
        if action is None:
            notifier.inquiry_submitted(inquiry)
        else:
            notifier.inquiry_updated(inquiry, action)
        return True
    except Exception as exc:
        logger.exception("notification_failed", inquiry_id=inquiry.id, event=event)
        if audit_logger is not None:
            try:
                audit_logger.log_notification_failure(inquiry, event, str(exc))
            except Exception:
                logger.exception("audit_write_failed", inquiry_id=inquiry.id)
        return False
