"""Domain types, models, and errors for the appointment negotiation engine."""

from appointments.domain.errors import (
    AppointmentError,
    ConcurrentModificationError,
    DuplicateActiveError,
    ForbiddenError,
    InvalidTransitionError,
    MissingReasonError,
    MissingSlotError,
    NotAnAppointmentError,
    NotFoundError,
    PropertyNotEligibleError,
    SelfDealingError,
    StoreUnavailableError,
    ValidationError,
)
from appointments.domain.models import (
    Inquiry,
    InquiryPatch,
    PropertyRecord,
    ProposedSlot,
    RequestedSlot,
    UserRecord,
)
from appointments.domain.types import (
    ActorRole,
    InquiryKind,
    InquiryStatus,
    PropertyStatus,
    UserRole,
)

__all__ = [
    "ActorRole",
    "AppointmentError",
    "ConcurrentModificationError",
    "DuplicateActiveError",
    "ForbiddenError",
    "Inquiry",
    "InquiryKind",
    "InquiryPatch",
    "InquiryStatus",
    "InvalidTransitionError",
    "MissingReasonError",
    "MissingSlotError",
    "NotAnAppointmentError",
    "NotFoundError",
    "PropertyNotEligibleError",
    "PropertyRecord",
    "PropertyStatus",
    "ProposedSlot",
    "RequestedSlot",
    "SelfDealingError",
    "StoreUnavailableError",
    "UserRecord",
    "UserRole",
    "ValidationError",
]
