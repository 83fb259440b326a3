"""Typed error taxonomy for the appointment negotiation engine.

Business-rule errors are final: the action was correctly refused and must
not be retried.  Only :class:`ConcurrentModificationError` and
:class:`StoreUnavailableError` are marked ``retryable``.
"""

from __future__ import annotations


class AppointmentError(Exception):
    """Base class for all domain errors in the negotiation engine.

    Attributes:
        code: Stable machine-readable identifier surfaced to API clients.
        retryable: Whether a caller may safely repeat the call.
    """

    code: str = "appointment_error"
    retryable: bool = False


class ValidationError(AppointmentError):
    """Raised when input is missing or malformed."""

    code = "validation_error"


class PropertyNotEligibleError(ValidationError):
    """Raised when a listing is not approved for new inquiries."""

    code = "property_not_eligible"

    def __init__(self, property_id: str, status: str) -> None:
        self.property_id = property_id
        self.status = status
        super().__init__(
            f"Property '{property_id}' is '{status}'; only approved properties accept inquiries"
        )


class NotFoundError(AppointmentError):
    """Raised when an inquiry, property, or user cannot be resolved."""

    code = "not_found"

    def __init__(self, entity: str, entity_id: str) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' not found")


class ForbiddenError(AppointmentError):
    """Raised when the acting user does not own the side they act for."""

    code = "forbidden"


class SelfDealingError(AppointmentError):
    """Raised when a buyer inquires about their own listing."""

    code = "self_dealing"

    def __init__(self) -> None:
        super().__init__("You cannot send an inquiry to your own property")


class DuplicateActiveError(AppointmentError):
    """Raised when an unfinished inquiry already exists for the buyer and property.

    Attributes:
        existing_id: Id of the inquiry that blocks the new one, when known.
    """

    code = "duplicate_active"

    def __init__(self, buyer_id: str, property_id: str, existing_id: str | None = None) -> None:
        self.buyer_id = buyer_id
        self.property_id = property_id
        self.existing_id = existing_id
        super().__init__(
            "You already have an open request for this property"
        )


class NotAnAppointmentError(AppointmentError):
    """Raised when a negotiation action targets a message-kind inquiry."""

    code = "not_an_appointment"

    def __init__(self, inquiry_id: str) -> None:
        self.inquiry_id = inquiry_id
        super().__init__(f"Inquiry '{inquiry_id}' is not an appointment request")


class InvalidTransitionError(AppointmentError):
    """Raised when an action is not allowed from the current status.

    Attributes:
        current_status: The status the inquiry was in.
        actor: The side that attempted the action.
        action: The action that was rejected.
    """

    code = "invalid_transition"

    def __init__(self, current_status: str | None, actor: str, action: str) -> None:
        self.current_status = current_status
        self.actor = actor
        self.action = action
        super().__init__(
            f"Cannot apply {actor} action '{action}' in status '{current_status}'"
        )


class MissingReasonError(AppointmentError):
    """Raised when a seller rejects without a reason."""

    code = "missing_reason"

    def __init__(self) -> None:
        super().__init__("A reason is required to reject an appointment request")


class MissingSlotError(AppointmentError):
    """Raised when a slot needed by the action is absent."""

    code = "missing_slot"


class ConcurrentModificationError(AppointmentError):
    """Raised when the stored status changed between read and write."""

    code = "concurrent_modification"
    retryable = True

    def __init__(self, inquiry_id: str, expected_status: str | None) -> None:
        self.inquiry_id = inquiry_id
        self.expected_status = expected_status
        super().__init__(
            f"Inquiry '{inquiry_id}' is no longer in status '{expected_status}'"
        )


class StoreUnavailableError(AppointmentError):
    """Raised when the persistence layer fails transiently."""

    code = "store_unavailable"
    retryable = True
