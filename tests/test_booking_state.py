"""Tests for the booking draft, its validation gate, and single-flight submit."""

import asyncio
from datetime import datetime, time

import pytest

from service_booking.booking.booking_state import (
    IN_FLIGHT_MESSAGE,
    REQUIRED_FIELDS_MESSAGE,
    BookingState,
)
from service_booking.errors import MissingFieldsError, StoreError
from service_booking.schemas.appointment_schema import AppointmentStatus
from service_booking.tools.appointment_store import InMemoryAppointmentStore
from tests.conftest import EARLY_MONDAY, MONDAY, SUNDAY, fill_booking, make_records


class SlowStore(InMemoryAppointmentStore):
    """Store whose create blocks until released, counting calls."""

    def __init__(self) -> None:
        super().__init__()
        self.create_calls = 0
        self.release = asyncio.Event()

    async def create(self, appointment):
        self.create_calls += 1
        await self.release.wait()
        return await super().create(appointment)


class FailingStore(InMemoryAppointmentStore):
    async def create(self, appointment):
        raise StoreError("Network unreachable")


class TestSelectSlot:
    def test_select_available_slot(self, booking_state):
        ok = booking_state.select_slot(MONDAY, "9:00 AM - 9:30 AM", EARLY_MONDAY, [])
        assert ok
        assert booking_state.selected_date == MONDAY
        assert booking_state.selected_time == "9:00 AM"

    def test_range_suffix_discarded(self, booking_state):
        booking_state.select_slot(MONDAY, "2:00 PM - 2:30 PM", EARLY_MONDAY, [])
        assert " - " not in booking_state.selected_time

    def test_full_slot_rejected(self, booking_state):
        ok = booking_state.select_slot(MONDAY, "8:00 AM - 8:30 AM", EARLY_MONDAY, make_records(8))
        assert not ok
        assert booking_state.selection is None

    def test_break_slot_rejected(self, booking_state):
        assert not booking_state.select_slot(MONDAY, "11:00 AM - 11:30 AM", EARLY_MONDAY, [])

    def test_sunday_rejected(self, booking_state):
        assert not booking_state.select_slot(SUNDAY, "9:00 AM - 9:30 AM", datetime(2024, 6, 1), [])

    def test_past_slot_rejected(self, booking_state):
        late = datetime(2024, 6, 10, 15, 0)
        assert not booking_state.select_slot(MONDAY, "9:00 AM - 9:30 AM", late, [])

    def test_rejection_keeps_previous_selection(self, booking_state):
        booking_state.select_slot(MONDAY, "9:00 AM - 9:30 AM", EARLY_MONDAY, [])
        booking_state.select_slot(MONDAY, "11:00 AM - 11:30 AM", EARLY_MONDAY, [])
        assert booking_state.selection == (MONDAY, "9:00 AM")

    def test_off_catalog_label_rejected(self, booking_state):
        assert not booking_state.select_slot(MONDAY, "8:15 AM", EARLY_MONDAY, [])
        assert not booking_state.select_slot(MONDAY, "3:00 PM - 3:30 PM", EARLY_MONDAY, [])
        assert booking_state.selection is None

    def test_select_twice_is_idempotent(self, booking_state):
        booking_state.select_slot(MONDAY, "9:00 AM - 9:30 AM", EARLY_MONDAY, [])
        once = (booking_state.selection, dict(booking_state.fields),
                list(booking_state.selected_services))
        assert booking_state.select_slot(MONDAY, "9:00 AM - 9:30 AM", EARLY_MONDAY, [])
        twice = (booking_state.selection, dict(booking_state.fields),
                 list(booking_state.selected_services))
        assert once == twice

    def test_reselect_another_slot(self, booking_state):
        booking_state.select_slot(MONDAY, "9:00 AM - 9:30 AM", EARLY_MONDAY, [])
        assert booking_state.select_slot(MONDAY, "1:00 PM - 1:30 PM", EARLY_MONDAY, [])
        assert booking_state.selected_time == "1:00 PM"


class TestToggleService:
    def test_add_then_remove(self, booking_state):
        assert booking_state.toggle_service("Battery Check") == ["Battery Check"]
        assert booking_state.toggle_service("Battery Check") == []

    def test_keeps_order_without_duplicates(self, booking_state):
        booking_state.toggle_service("Diagnosis")
        booking_state.toggle_service("Battery Check")
        booking_state.toggle_service("Diagnosis")
        booking_state.toggle_service("Diagnosis")
        assert booking_state.selected_services == ["Battery Check", "Diagnosis"]


class TestFields:
    def test_unknown_field_rejected(self, booking_state):
        with pytest.raises(ValueError, match="Unknown field"):
            booking_state.set_field("favorite_color", "red")

    def test_region_change_clears_branch(self, booking_state):
        booking_state.set_field("region", "ashanti")
        booking_state.set_field("branch", "suame")
        booking_state.set_field("region", "volta")
        assert booking_state.get_field("branch") == ""


class TestValidateForSubmit:
    def test_scenario_d_blank_name(self, booking_state):
        fill_booking(booking_state)
        booking_state.set_field("full_name", "")
        booking_state.set_field("phone", "555-0100")
        booking_state.selected_services = ["Oil Change"]
        outcome = booking_state.validate_for_submit()
        assert not outcome.ok
        assert outcome.missing == ("full_name",)

    def test_whitespace_only_counts_as_missing(self, booking_state):
        fill_booking(booking_state)
        booking_state.set_field("phone", "   ")
        assert booking_state.validate_for_submit().missing == ("phone",)

    def test_everything_missing(self, booking_state):
        outcome = booking_state.validate_for_submit()
        assert outcome.missing == (
            "full_name", "phone", "appointment_date", "appointment_time", "service_type",
        )
        with pytest.raises(MissingFieldsError):
            outcome.raise_if_invalid()

    def test_email_optional(self, booking_state):
        fill_booking(booking_state)
        outcome = booking_state.validate_for_submit()
        assert outcome.ok
        assert outcome.appointment.email is None

    def test_values_trimmed_for_handoff(self, booking_state):
        fill_booking(booking_state)
        booking_state.set_field("full_name", "  Ama Mensah  ")
        booking_state.set_field("email", " ama@example.com ")
        appointment = booking_state.validate_for_submit().appointment
        assert appointment.full_name == "Ama Mensah"
        assert appointment.email == "ama@example.com"

    def test_ready_appointment_is_pending_with_parsed_time(self, booking_state):
        fill_booking(booking_state, slot="1:00 PM")
        appointment = booking_state.validate_for_submit().appointment
        assert appointment.appointment_time == time(13, 0)
        assert appointment.appointment_date == MONDAY
        assert appointment.status == AppointmentStatus.PENDING
        assert appointment.service_type == ["Periodic Maintenance"]


class TestSubmit:
    @pytest.mark.asyncio
    async def test_success_resets_draft(self, booking_state, store):
        fill_booking(booking_state)
        result = await booking_state.submit(store)
        assert result.success
        assert result.appointment.status == AppointmentStatus.PENDING
        assert booking_state.selection is None
        assert booking_state.selected_services == []
        assert booking_state.get_field("full_name") == ""
        assert len(await store.list()) == 1

    @pytest.mark.asyncio
    async def test_validation_failure_never_reaches_store(self, booking_state):
        store = SlowStore()
        result = await booking_state.submit(store)
        assert not result.success
        assert result.message == REQUIRED_FIELDS_MESSAGE
        assert "full_name" in result.missing_fields
        assert store.create_calls == 0
        assert not booking_state.submitting

    @pytest.mark.asyncio
    async def test_store_failure_preserves_input(self, booking_state):
        fill_booking(booking_state)
        result = await booking_state.submit(FailingStore())
        assert not result.success
        assert "Network unreachable" in result.message
        assert booking_state.get_field("full_name") == "Ama Mensah"
        assert booking_state.selection == (MONDAY, "9:00 AM")
        assert booking_state.alert == result
        assert not booking_state.submitting

    @pytest.mark.asyncio
    async def test_retry_after_failure_succeeds(self, booking_state, store):
        fill_booking(booking_state)
        await booking_state.submit(FailingStore())
        result = await booking_state.submit(store)
        assert result.success

    @pytest.mark.asyncio
    async def test_scenario_e_single_flight(self, booking_state):
        store = SlowStore()
        fill_booking(booking_state)

        first = asyncio.create_task(booking_state.submit(store))
        await asyncio.sleep(0)
        assert booking_state.submitting
        second = await booking_state.submit(store)

        assert second.skipped
        assert second.message == IN_FLIGHT_MESSAGE
        store.release.set()
        first_result = await first

        assert first_result.success
        assert store.create_calls == 1
        assert not booking_state.submitting

    @pytest.mark.asyncio
    async def test_dismiss_alert(self, booking_state, store):
        await booking_state.submit(store)
        assert booking_state.alert is not None
        booking_state.dismiss_alert()
        assert booking_state.alert is None
