"""Pure transition validation for appointment negotiations.

``validate_transition`` never performs I/O: given the current status, the
acting side, the requested action and its payload, it either raises a typed
domain error or returns the :class:`InquiryPatch` that the action produces.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from appointments.domain.errors import (
    InvalidTransitionError,
    MissingReasonError,
    MissingSlotError,
)
from appointments.domain.models import (
    InquiryPatch,
    ProposedSlot,
    RequestedSlot,
    build_slot,
    clean_text,
)
from appointments.domain.types import ActorRole, InquiryStatus
from appointments.state_machine.transitions import (
    TERMINAL_STATUSES,
    TRANSITIONS,
    AppointmentAction,
)


def _coerce_action(action: str) -> AppointmentAction | None:
    try:
        return AppointmentAction(action)
    except ValueError:
        return None


def next_status(
    status: InquiryStatus | None,
    actor: ActorRole,
    action: str,
) -> InquiryStatus:
    """Look up the status an action leads to, ignoring payload guards.

    Raises:
        InvalidTransitionError: If the triple is not in the transition table
            or the current status is terminal.
    """
    actor = ActorRole(actor)
    parsed = _coerce_action(action)
    if status is None or status in TERMINAL_STATUSES or parsed is None:
        raise InvalidTransitionError(status, actor, action)

    key = (status, actor, parsed)
    if key not in TRANSITIONS:
        raise InvalidTransitionError(status, actor, action)
    return TRANSITIONS[key]


def validate_transition(
    status: InquiryStatus | None,
    actor: ActorRole,
    action: str,
    payload: Mapping[str, Any] | None = None,
    *,
    requested: RequestedSlot | None = None,
    fallback_place: str | None = None,
) -> InquiryPatch:
    """Validate an action and compute the resulting patch.

    Args:
        status: Current inquiry status (``None`` for message inquiries).
        actor: The side performing the action.
        action: Action name, e.g. ``"propose"``.
        payload: Action fields: ``date``, ``time``, ``place``, ``note``
            and ``reason`` as applicable.
        requested: The buyer's requested slot, needed by ``accept_requested``.
        fallback_place: Meeting place used when the seller supplies none,
            typically the property address.

    Returns:
        The patch to persist, including the next status.

    Raises:
        InvalidTransitionError: The action is not allowed from *status*.
        MissingSlotError: A required slot is absent.
        MissingReasonError: A seller rejection has no reason.
        ValidationError: A supplied date or time is malformed.
    """
    actor = ActorRole(actor)
    target = next_status(status, actor, action)
    data: Mapping[str, Any] = payload or {}
    parsed = AppointmentAction(action)

    if actor is ActorRole.SELLER:
        if parsed is AppointmentAction.ACCEPT_REQUESTED:
            if requested is None:
                raise MissingSlotError("The request has no requested slot to accept")
            place = clean_text(data.get("place")) or requested.place or fallback_place
            return InquiryPatch(
                status=target,
                proposed=ProposedSlot(date=requested.date, time=requested.time, place=place),
                seller_note=clean_text(data.get("note")),
            )

        if parsed is AppointmentAction.PROPOSE:
            slot = build_slot(ProposedSlot, data.get("date"), data.get("time"), data.get("place"))
            if slot.place is None and fallback_place:
                slot = slot.model_copy(update={"place": fallback_place})
            return InquiryPatch(
                status=target,
                proposed=slot,
                seller_note=clean_text(data.get("note")),
            )

        reason = clean_text(data.get("reason"))
        if reason is None:
            raise MissingReasonError()
        return InquiryPatch(status=target, seller_note=reason)

    return InquiryPatch(status=target, buyer_note=clean_text(data.get("note")))


def allowed_actions(status: InquiryStatus | None, actor: ActorRole) -> list[str]:
    """Return a sorted list of actions *actor* may take from *status*.

    Returns an empty list for terminal statuses and message inquiries.
    """
    if status is None or status in TERMINAL_STATUSES:
        return []
    return sorted(
        action.value for s, a, action in TRANSITIONS if s == status and a == actor
    )
