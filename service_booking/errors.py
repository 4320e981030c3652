"""Error taxonomy shared by the booking flow, admin actions, and adapters."""

from typing import Iterable


class BookingError(Exception):
    """Base class for all service-booking errors."""


class MissingFieldsError(BookingError):
    """Raised when required booking fields are absent or blank."""

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = tuple(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class StoreError(BookingError):
    """Raised when a call to the appointment store fails."""


class StoreValidationError(StoreError):
    """Raised when the store rejects a record as invalid."""


class AppointmentNotFoundError(StoreError):
    """Raised when an appointment id does not exist in the store."""

    def __init__(self, appointment_id: str) -> None:
        self.appointment_id = appointment_id
        super().__init__(f"Appointment {appointment_id} not found.")


class NotificationSendError(BookingError):
    """Raised when a confirmation message could not be delivered."""


class InvalidTransitionError(BookingError):
    """Raised when a status transition is not valid from the current status."""
