"""Appointment record models and the store-consumption boundary."""

from datetime import date, datetime, time
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class AppointmentStatus(str, Enum):
    """Lifecycle status of an appointment."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELED = "canceled"


def _normalize_services(value: Any) -> list[str]:
    """Coerce a stored ``service_type`` (scalar or list) into a list of names."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    services: list[str] = []
    for item in value:
        name = str(item).strip()
        if name and name not in services:
            services.append(name)
    return services


class NewAppointment(BaseModel):
    """Fields supplied when creating an appointment."""

    appointment_date: date
    appointment_time: time
    full_name: str
    phone: str
    email: Optional[str] = None
    vehicle_make: str = ""
    vehicle_model: str = ""
    car_number: str = ""
    service_type: list[str] = Field(default_factory=list)
    region: str = ""
    branch: str = ""
    status: AppointmentStatus = AppointmentStatus.PENDING

    @field_validator("service_type", mode="before")
    @classmethod
    def _coerce_service_type(cls, value: Any) -> list[str]:
        return _normalize_services(value)

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email_is_none(cls, value: Any) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AppointmentRecord(NewAppointment):
    """A persisted appointment as returned by the store."""

    id: str
    status: AppointmentStatus = AppointmentStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def _missing_status_is_pending(cls, value: Any) -> Any:
        return value or AppointmentStatus.PENDING


class AppointmentUpdate(BaseModel):
    """Partial staff edit; only explicitly set fields are applied."""

    appointment_date: Optional[date] = None
    appointment_time: Optional[time] = None
    full_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    car_number: Optional[str] = None
    service_type: Optional[list[str]] = None
    region: Optional[str] = None
    branch: Optional[str] = None

    @field_validator("service_type", mode="before")
    @classmethod
    def _coerce_service_type(cls, value: Any) -> Optional[list[str]]:
        if value is None:
            return None
        return _normalize_services(value)

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller set."""
        return self.model_dump(exclude_unset=True)
