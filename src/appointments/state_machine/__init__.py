"""Appointment state machine: transition table and pure validation."""

from appointments.state_machine.transitions import (
    ACTIVE_STATUSES,
    BUYER_ACTIONS,
    SELLER_ACTIONS,
    TERMINAL_STATUSES,
    TRANSITIONS,
    AppointmentAction,
)
from appointments.state_machine.validator import (
    allowed_actions,
    next_status,
    validate_transition,
)

__all__ = [
    "ACTIVE_STATUSES",
    "AppointmentAction",
    "BUYER_ACTIONS",
    "SELLER_ACTIONS",
    "TERMINAL_STATUSES",
    "TRANSITIONS",
    "allowed_actions",
    "next_status",
    "validate_transition",
]
