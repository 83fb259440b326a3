"""Transition map defining all valid (status, actor, action) -> status mappings."""

from enum import StrEnum

from appointments.domain.types import ActorRole, InquiryStatus


class AppointmentAction(StrEnum):
    """Actions either party can take on an appointment request."""

    ACCEPT_REQUESTED = "accept_requested"
    PROPOSE = "propose"
    REJECT = "reject"
    ACCEPT = "accept"


SELLER_ACTIONS: frozenset[AppointmentAction] = frozenset(
    {AppointmentAction.ACCEPT_REQUESTED, AppointmentAction.PROPOSE, AppointmentAction.REJECT}
)

BUYER_ACTIONS: frozenset[AppointmentAction] = frozenset(
    {AppointmentAction.ACCEPT, AppointmentAction.REJECT}
)

# All valid (current_status, actor, action) -> next_status mappings.
# Any triple not in this dict is an invalid transition.
TRANSITIONS: dict[tuple[InquiryStatus, ActorRole, AppointmentAction], InquiryStatus] = {
    # From PENDING (seller's move)
    (InquiryStatus.PENDING, ActorRole.SELLER, AppointmentAction.ACCEPT_REQUESTED): (
        InquiryStatus.PROPOSED
    ),
    (InquiryStatus.PENDING, ActorRole.SELLER, AppointmentAction.PROPOSE): InquiryStatus.PROPOSED,
    (InquiryStatus.PENDING, ActorRole.SELLER, AppointmentAction.REJECT): (
        InquiryStatus.SELLER_REJECTED
    ),
    # From PROPOSED (buyer's move)
    (InquiryStatus.PROPOSED, ActorRole.BUYER, AppointmentAction.ACCEPT): (
        InquiryStatus.BUYER_ACCEPTED
    ),
    (InquiryStatus.PROPOSED, ActorRole.BUYER, AppointmentAction.REJECT): (
        InquiryStatus.BUYER_REJECTED
    ),
}

# States that reject all actions -- no outgoing transitions allowed.
TERMINAL_STATUSES: frozenset[InquiryStatus] = frozenset(
    {
        InquiryStatus.BUYER_ACCEPTED,
        InquiryStatus.BUYER_REJECTED,
        InquiryStatus.SELLER_REJECTED,
    }
)

# States that keep an appointment "open" for duplicate suppression.
ACTIVE_STATUSES: frozenset[InquiryStatus] = frozenset(
    s for s in InquiryStatus if s not in TERMINAL_STATUSES
)
