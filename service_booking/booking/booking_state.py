"""
In-progress booking selection with a validation gate and single-flight submit.

Holds what one customer has picked so far (date, slot, services, and the
contact/vehicle form fields). Nothing here is shared across sessions.

Usage:
    state = BookingState()
    state.select_slot(day, "9:00 AM - 9:30 AM", now, view.records)
    state.toggle_service("Periodic Maintenance")
    state.set_field("full_name", "Ama Mensah")
    state.set_field("phone", "024 123 4567")
    result = await state.submit(store)
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from service_booking.errors import MissingFieldsError, StoreError
from service_booking.logging_context import get_session_logger
from service_booking.scheduling.availability import Selection, cell_status
from service_booking.scheduling.slot_clock import find_slot, parse_time_label, start_time_label
from service_booking.schemas.appointment_schema import AppointmentRecord, NewAppointment
from service_booking.tools.appointment_store import AppointmentStore
from service_booking.utils import clean_text

logger = get_session_logger(__name__)

REQUIRED_FIELDS_MESSAGE = (
    "Please fill in all required fields and select at least one service"
)
SUCCESS_MESSAGE = "Appointment booked successfully! We'll get back to you soon."
IN_FLIGHT_MESSAGE = "A booking is already being submitted."


@dataclass(frozen=True)
class FormField:
    """Schema for one customer/vehicle form field."""

    name: str
    display_name: str
    required: bool = False


FORM_FIELDS: tuple[FormField, ...] = (
    FormField("full_name", "full name", required=True),
    FormField("phone", "phone number", required=True),
    FormField("email", "email"),
    FormField("vehicle_make", "vehicle make"),
    FormField("vehicle_model", "vehicle model"),
    FormField("car_number", "car number"),
    FormField("region", "region"),
    FormField("branch", "branch"),
)

_FIELD_NAMES = frozenset(f.name for f in FORM_FIELDS)


@dataclass(frozen=True)
class ValidationOutcome:
    """Either a ready-to-create appointment or the names of missing fields."""

    appointment: Optional[NewAppointment] = None
    missing: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.missing

    def raise_if_invalid(self) -> NewAppointment:
        if self.missing or self.appointment is None:
            raise MissingFieldsError(self.missing)
        return self.appointment


class SubmissionResult(BaseModel):
    """Outcome of a submit attempt, shown to the customer as an alert."""

    success: bool
    message: str
    appointment: Optional[AppointmentRecord] = None
    missing_fields: list[str] = Field(default_factory=list)
    skipped: bool = False


class BookingState:
    """A single customer's draft booking."""

    def __init__(self) -> None:
        self.fields: dict[str, str] = {}
        self.selected_date: Optional[date] = None
        self.selected_time: Optional[str] = None
        self.selected_services: list[str] = []
        self.alert: Optional[SubmissionResult] = None
        self._submitting = False
        self.reset()

    # ------------------------------------------------------------------ #
    # Selection
    # ------------------------------------------------------------------ #

    @property
    def selection(self) -> Optional[Selection]:
        if self.selected_date is None or self.selected_time is None:
            return None
        return (self.selected_date, self.selected_time)

    @property
    def submitting(self) -> bool:
        return self._submitting

    def select_slot(
        self,
        day: date,
        slot_label: str,
        now: datetime,
        records: Iterable[AppointmentRecord],
    ) -> bool:
        """Select a calendar cell. Returns False (and changes nothing) if it is not bookable."""
        if find_slot(slot_label) is None:
            logger.debug("Ignored click on %s %s (not a catalog slot)", day, slot_label)
            return False
        status = cell_status(day, slot_label, records, now, self.selection)
        if not status.clickable:
            logger.debug("Ignored click on %s %s (%s)", day, slot_label, status.value)
            return False
        self.selected_date = day
        self.selected_time = start_time_label(slot_label)
        logger.debug("Selected %s at %s", day, self.selected_time)
        return True

    def toggle_service(self, name: str) -> list[str]:
        """Add the service if absent, remove it if present."""
        if name in self.selected_services:
            self.selected_services.remove(name)
        else:
            self.selected_services.append(name)
        return list(self.selected_services)

    def set_field(self, name: str, value: Optional[str]) -> None:
        if name not in _FIELD_NAMES:
            raise ValueError(f"Unknown field: {name}")
        self.fields[name] = value or ""
        if name == "region":
            self.fields["branch"] = ""

    def get_field(self, name: str) -> str:
        return self.fields.get(name, "")

    # ------------------------------------------------------------------ #
    # Validation gate
    # ------------------------------------------------------------------ #

    def validate_for_submit(self) -> ValidationOutcome:
        values = {f.name: clean_text(self.fields.get(f.name)) for f in FORM_FIELDS}
        missing = [f.name for f in FORM_FIELDS if f.required and not values[f.name]]
        if self.selected_date is None:
            missing.append("appointment_date")
        if not clean_text(self.selected_time):
            missing.append("appointment_time")
        if not self.selected_services:
            missing.append("service_type")
        if missing:
            return ValidationOutcome(missing=tuple(missing))

        appointment = NewAppointment(
            appointment_date=self.selected_date,
            appointment_time=parse_time_label(clean_text(self.selected_time)),
            service_type=list(self.selected_services),
            **values,
        )
        return ValidationOutcome(appointment=appointment)

    # ------------------------------------------------------------------ #
    # Submission
    # ------------------------------------------------------------------ #

    async def submit(self, store: AppointmentStore) -> SubmissionResult:
        """Create the appointment. Concurrent calls while one is in flight are no-ops."""
        if self._submitting:
            logger.info("Duplicate submit ignored while a booking is in flight")
            return SubmissionResult(success=False, skipped=True, message=IN_FLIGHT_MESSAGE)

        self._submitting = True
        try:
            appointment = self.validate_for_submit().raise_if_invalid()
            logger.info(
                "Submitting booking for %s at %s",
                appointment.appointment_date, appointment.appointment_time,
            )
            record = await store.create(appointment)
        except MissingFieldsError as exc:
            logger.debug("Booking blocked, missing: %s", ", ".join(exc.fields))
            result = SubmissionResult(
                success=False, message=REQUIRED_FIELDS_MESSAGE, missing_fields=list(exc.fields)
            )
        except StoreError as exc:
            logger.error("Error creating appointment: %s", exc)
            result = SubmissionResult(success=False, message=str(exc) or "Failed to book appointment.")
        else:
            logger.info("Booking created: %s", record.id)
            self.reset()
            result = SubmissionResult(success=True, message=SUCCESS_MESSAGE, appointment=record)
        finally:
            self._submitting = False

        self.alert = result
        return result

    def dismiss_alert(self) -> None:
        self.alert = None

    def reset(self) -> None:
        """Discard the selection and all form fields."""
        self.fields = {f.name: "" for f in FORM_FIELDS}
        self.selected_date = None
        self.selected_time = None
        self.selected_services = []
