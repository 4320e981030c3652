from service_booking.booking.admin_actions import ActionResult, AppointmentAdmin
from service_booking.booking.booking_state import BookingState, SubmissionResult, ValidationOutcome
from service_booking.booking.status_machine import AppointmentStatusMachine, StatusAction

__all__ = [
    "ActionResult",
    "AppointmentAdmin",
    "AppointmentStatusMachine",
    "BookingState",
    "StatusAction",
    "SubmissionResult",
    "ValidationOutcome",
]
