"""Tests for slot validation, the Inquiry model and InquiryPatch."""

from datetime import UTC, datetime

import pytest

from appointments.domain.errors import MissingSlotError, ValidationError
from appointments.domain.models import (
    Inquiry,
    InquiryPatch,
    ProposedSlot,
    RequestedSlot,
    build_slot,
    clean_text,
    validate_date,
    validate_time,
)
from appointments.domain.types import InquiryKind, InquiryStatus


def _inquiry(**overrides) -> Inquiry:
    fields = dict(
        id="inq-1",
        buyer_id="b",
        seller_id="s",
        property_id="p",
        kind=InquiryKind.APPOINTMENT,
        message="hello",
        status=InquiryStatus.PENDING,
        requested=RequestedSlot(date="2025-01-10", time="14:00"),
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
        updated_at=datetime(2025, 1, 1, tzinfo=UTC),
    )
    fields.update(overrides)
    return Inquiry(**fields)


class TestValidateDate:

    def test_accepts_iso_date(self):
        assert validate_date("2025-01-10") == "2025-01-10"

    @pytest.mark.parametrize("value", ["2025-02-30", "2025-13-01", "10/01/2025", "2025-1-1", ""])
    def test_rejects_invalid_dates(self, value):
        with pytest.raises(ValidationError):
            validate_date(value)


class TestValidateTime:

    @pytest.mark.parametrize("value", ["14:00", "09:30", "23:59:59", "00:00"])
    def test_accepts_times(self, value):
        assert validate_time(value) == value

    @pytest.mark.parametrize("value", ["24:00", "14:60", "2pm", "1400", "14"])
    def test_rejects_invalid_times(self, value):
        with pytest.raises(ValidationError):
            validate_time(value)


class TestBuildSlot:

    def test_trims_and_keeps_values(self):
        slot = build_slot(ProposedSlot, " 2025-01-11 ", "16:00", "  Office ")
        assert slot == ProposedSlot(date="2025-01-11", time="16:00", place="Office")

    def test_blank_place_becomes_none(self):
        slot = build_slot(RequestedSlot, "2025-01-11", "16:00", "   ")
        assert slot.place is None

    @pytest.mark.parametrize(("date", "time"), [(None, "16:00"), ("2025-01-11", None), ("", " ")])
    def test_missing_parts_raise_missing_slot(self, date, time):
        with pytest.raises(MissingSlotError):
            build_slot(ProposedSlot, date, time)

    def test_malformed_parts_raise_validation_error(self):
        with pytest.raises(ValidationError):
            build_slot(ProposedSlot, "2025-01-32", "16:00")


class TestCleanText:

    def test_none_and_blank(self):
        assert clean_text(None) is None
        assert clean_text("   ") is None

    def test_strips(self):
        assert clean_text("  sold  ") == "sold"


class TestInquiryPatch:

    def test_changes_only_include_set_fields(self):
        patch = InquiryPatch(status=InquiryStatus.SELLER_REJECTED, seller_note="Sold")
        assert patch.changes() == {
            "status": InquiryStatus.SELLER_REJECTED,
            "seller_note": "Sold",
        }

    def test_apply_to_leaves_other_fields_untouched(self):
        original = _inquiry(buyer_note="keep me")
        patch = InquiryPatch(
            status=InquiryStatus.PROPOSED,
            proposed=ProposedSlot(date="2025-01-11", time="16:00"),
        )
        stamp = datetime(2025, 1, 2, tzinfo=UTC)

        updated = patch.apply_to(original, updated_at=stamp)

        assert updated.status is InquiryStatus.PROPOSED
        assert updated.proposed == ProposedSlot(date="2025-01-11", time="16:00")
        assert updated.requested == original.requested
        assert updated.buyer_note == "keep me"
        assert updated.updated_at == stamp
        assert updated.created_at == original.created_at
        assert original.status is InquiryStatus.PENDING


class TestInquiry:

    def test_is_frozen(self):
        inquiry = _inquiry()
        with pytest.raises(Exception):
            inquiry.status = InquiryStatus.PROPOSED  # type: ignore[misc]

    def test_message_kind_has_no_status(self):
        inquiry = _inquiry(kind=InquiryKind.MESSAGE, status=None, requested=None)
        assert not inquiry.is_appointment
        assert inquiry.status is None
