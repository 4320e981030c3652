"""Shared test fixtures and helpers."""

import itertools
from datetime import date, datetime, time
from typing import Optional

import pytest

from service_booking.booking.booking_state import BookingState
from service_booking.schemas.appointment_schema import AppointmentRecord, AppointmentStatus
from service_booking.schemas.notification_schema import ConfirmationMessage, SendResult
from service_booking.tools.appointment_store import InMemoryAppointmentStore

# Monday; the Sunday before is 2024-06-09.
MONDAY = date(2024, 6, 10)
SUNDAY = date(2024, 6, 9)
EARLY_MONDAY = datetime(2024, 6, 10, 7, 0)

_ids = itertools.count(1)


def make_record(
    day: date = MONDAY,
    start: time = time(8, 0),
    status: AppointmentStatus = AppointmentStatus.PENDING,
    email: Optional[str] = None,
    **overrides,
) -> AppointmentRecord:
    """Helper to create an AppointmentRecord with sensible defaults."""
    n = next(_ids)
    data = {
        "id": f"APT-{n:04d}",
        "appointment_date": day,
        "appointment_time": start,
        "status": status,
        "full_name": f"Customer {n}",
        "phone": f"024{n:07d}",
        "email": email,
        "vehicle_make": "Toyota",
        "vehicle_model": "Corolla",
        "car_number": f"GR-{n}-24",
        "service_type": ["Periodic Maintenance"],
        "region": "greater-accra",
        "branch": "spintex",
    }
    data.update(overrides)
    return AppointmentRecord(**data)


def make_records(count: int, day: date = MONDAY, start: time = time(8, 0)) -> list[AppointmentRecord]:
    return [make_record(day=day, start=start) for _ in range(count)]


def fill_booking(state: BookingState, day: date = MONDAY, slot: str = "9:00 AM") -> None:
    """Populate every required field of a booking draft."""
    state.selected_date = day
    state.selected_time = slot
    state.toggle_service("Periodic Maintenance")
    state.set_field("full_name", "Ama Mensah")
    state.set_field("phone", "024 123 4567")


class RecordingRelay:
    """Relay double that records every message it is asked to send."""

    def __init__(self, result: Optional[SendResult] = None, error: Optional[Exception] = None):
        self.sent: list[ConfirmationMessage] = []
        self._result = result or SendResult(sent=True, message="sent")
        self._error = error

    async def send_confirmation(self, message: ConfirmationMessage) -> SendResult:
        self.sent.append(message)
        if self._error is not None:
            raise self._error
        return self._result


@pytest.fixture
def store():
    return InMemoryAppointmentStore()


@pytest.fixture
def booking_state():
    return BookingState()


@pytest.fixture
def relay():
    return RecordingRelay()
