"""Tests for the appointment transition map."""

import pytest

from appointments.domain.types import ActorRole, InquiryStatus
from appointments.state_machine.transitions import (
    ACTIVE_STATUSES,
    BUYER_ACTIONS,
    SELLER_ACTIONS,
    TERMINAL_STATUSES,
    TRANSITIONS,
    AppointmentAction,
)


class TestAppointmentAction:
    """Tests for the AppointmentAction enum."""

    EXPECTED_MEMBERS = {
        "ACCEPT_REQUESTED": "accept_requested",
        "PROPOSE": "propose",
        "REJECT": "reject",
        "ACCEPT": "accept",
    }

    def test_has_exactly_4_members(self) -> None:
        assert len(AppointmentAction) == 4

    @pytest.mark.parametrize(
        ("name", "value"),
        list(EXPECTED_MEMBERS.items()),
        ids=list(EXPECTED_MEMBERS.keys()),
    )
    def test_member_name_and_value(self, name: str, value: str) -> None:
        assert AppointmentAction[name].value == value

    def test_reject_is_shared_by_both_sides(self) -> None:
        assert AppointmentAction.REJECT in SELLER_ACTIONS
        assert AppointmentAction.REJECT in BUYER_ACTIONS
        assert SELLER_ACTIONS & BUYER_ACTIONS == {AppointmentAction.REJECT}


class TestTransitionsMap:
    """Tests for the TRANSITIONS dict completeness."""

    def test_has_exactly_5_entries(self) -> None:
        assert len(TRANSITIONS) == 5

    def test_terminal_statuses_never_appear_as_source(self) -> None:
        sources = {status for status, _actor, _action in TRANSITIONS}
        for terminal in TERMINAL_STATUSES:
            assert terminal not in sources, f"{terminal} should not be a source status"

    def test_active_statuses_are_exactly_the_sources(self) -> None:
        sources = {status for status, _actor, _action in TRANSITIONS}
        assert sources == ACTIVE_STATUSES == {InquiryStatus.PENDING, InquiryStatus.PROPOSED}

    def test_pending_is_the_sellers_turn(self) -> None:
        actors = {actor for status, actor, _ in TRANSITIONS if status is InquiryStatus.PENDING}
        assert actors == {ActorRole.SELLER}

    def test_proposed_is_the_buyers_turn(self) -> None:
        actors = {actor for status, actor, _ in TRANSITIONS if status is InquiryStatus.PROPOSED}
        assert actors == {ActorRole.BUYER}

    def test_actions_belong_to_their_actor(self) -> None:
        for _status, actor, action in TRANSITIONS:
            allowed = SELLER_ACTIONS if actor is ActorRole.SELLER else BUYER_ACTIONS
            assert action in allowed

    def test_every_target_is_a_valid_status(self) -> None:
        for target in TRANSITIONS.values():
            assert isinstance(target, InquiryStatus)
            assert target is not InquiryStatus.PENDING

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            (
                (InquiryStatus.PENDING, ActorRole.SELLER, AppointmentAction.ACCEPT_REQUESTED),
                InquiryStatus.PROPOSED,
            ),
            (
                (InquiryStatus.PENDING, ActorRole.SELLER, AppointmentAction.PROPOSE),
                InquiryStatus.PROPOSED,
            ),
            (
                (InquiryStatus.PENDING, ActorRole.SELLER, AppointmentAction.REJECT),
                InquiryStatus.SELLER_REJECTED,
            ),
            (
                (InquiryStatus.PROPOSED, ActorRole.BUYER, AppointmentAction.ACCEPT),
                InquiryStatus.BUYER_ACCEPTED,
            ),
            (
                (InquiryStatus.PROPOSED, ActorRole.BUYER, AppointmentAction.REJECT),
                InquiryStatus.BUYER_REJECTED,
            ),
        ],
        ids=["accept_requested", "propose", "seller_reject", "buyer_accept", "buyer_reject"],
    )
    def test_transition_targets(self, key: tuple, expected: InquiryStatus) -> None:
        assert TRANSITIONS[key] is expected
