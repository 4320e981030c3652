from service_booking.schemas.appointment_schema import (
    AppointmentRecord,
    AppointmentStatus,
    AppointmentUpdate,
    NewAppointment,
)
from service_booking.schemas.notification_schema import ConfirmationMessage, SendResult

__all__ = [
    "AppointmentRecord",
    "AppointmentStatus",
    "AppointmentUpdate",
    "NewAppointment",
    "ConfirmationMessage",
    "SendResult",
]
