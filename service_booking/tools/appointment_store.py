"""
Appointment store contract and an in-memory implementation.

In production the store is a hosted relational data service with a
row-change channel; ``InMemoryAppointmentStore`` mirrors its contract so
the calendar, booking, and admin flows can run offline and in tests.

Change listeners receive no payload. They are pure invalidation signals:
whoever listens re-fetches the full list.
"""

from __future__ import annotations

import inspect
import logging
import uuid
from collections.abc import Awaitable, Sequence
from datetime import datetime
from typing import Callable, Optional, Protocol, Union

from pydantic import ValidationError

from service_booking.errors import AppointmentNotFoundError, StoreValidationError
from service_booking.schemas.appointment_schema import (
    AppointmentRecord,
    AppointmentStatus,
    AppointmentUpdate,
    NewAppointment,
)

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], Union[None, Awaitable[None]]]
Unsubscribe = Callable[[], None]

DEFAULT_ORDER: tuple[str, ...] = ("appointment_date", "appointment_time")


class AppointmentStore(Protocol):
    """Durable record of appointments."""

    async def list(
        self, order_by: Sequence[str] = DEFAULT_ORDER
    ) -> list[AppointmentRecord]: ...

    async def get(self, appointment_id: str) -> AppointmentRecord: ...

    async def create(self, appointment: NewAppointment) -> AppointmentRecord: ...

    async def update_status(
        self, appointment_id: str, status: AppointmentStatus, updated_at: datetime
    ) -> None: ...

    async def update_fields(self, appointment_id: str, changes: AppointmentUpdate) -> None: ...

    async def delete(self, appointment_id: str) -> None: ...

    def subscribe(self, on_change: ChangeListener) -> Unsubscribe: ...


class InMemoryAppointmentStore:
    """Dict-backed store with synchronous change fan-out."""

    REQUIRED_FIELDS: tuple[str, ...] = ("full_name", "phone")

    def __init__(self, records: Optional[Sequence[AppointmentRecord]] = None) -> None:
        self._records: dict[str, AppointmentRecord] = {}
        self._listeners: list[ChangeListener] = []
        for record in records or []:
            self._records[record.id] = record

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    async def list(self, order_by: Sequence[str] = DEFAULT_ORDER) -> list[AppointmentRecord]:
        records = list(self._records.values())
        if order_by:
            records.sort(key=lambda r: tuple(getattr(r, name) for name in order_by))
        return [r.model_copy(deep=True) for r in records]

    async def get(self, appointment_id: str) -> AppointmentRecord:
        record = self._records.get(appointment_id)
        if record is None:
            raise AppointmentNotFoundError(appointment_id)
        return record.model_copy(deep=True)

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    async def create(self, appointment: NewAppointment) -> AppointmentRecord:
        missing = [
            name for name in self.REQUIRED_FIELDS if not getattr(appointment, name).strip()
        ]
        if not appointment.service_type:
            missing.append("service_type")
        if missing:
            raise StoreValidationError(
                f"Cannot create appointment - missing required fields: {', '.join(missing)}."
            )

        now = datetime.now()
        record = AppointmentRecord(
            id=f"APT-{uuid.uuid4().hex[:8].upper()}",
            created_at=now,
            updated_at=now,
            **appointment.model_dump(),
        )
        self._records[record.id] = record
        logger.info(
            "Appointment created: %s on %s at %s",
            record.id, record.appointment_date, record.appointment_time,
        )
        await self._notify()
        return record.model_copy(deep=True)

    async def update_status(
        self, appointment_id: str, status: AppointmentStatus, updated_at: datetime
    ) -> None:
        record = self._require(appointment_id)
        self._records[appointment_id] = record.model_copy(
            update={"status": AppointmentStatus(status), "updated_at": updated_at}
        )
        logger.info("Appointment %s status -> %s", appointment_id, AppointmentStatus(status).value)
        await self._notify()

    async def update_fields(self, appointment_id: str, changes: AppointmentUpdate) -> None:
        record = self._require(appointment_id)
        data = record.model_dump()
        data.update(changes.changes())
        data["updated_at"] = datetime.now()
        try:
            updated = AppointmentRecord.model_validate(data)
        except ValidationError as exc:
            fields = ", ".join(str(e["loc"][0]) for e in exc.errors())
            raise StoreValidationError(
                f"Cannot update appointment {appointment_id} - invalid fields: {fields}."
            ) from exc
        self._records[appointment_id] = updated
        logger.info("Appointment %s updated: %s", appointment_id, sorted(changes.changes()))
        await self._notify()

    async def delete(self, appointment_id: str) -> None:
        self._require(appointment_id)
        del self._records[appointment_id]
        logger.info("Appointment deleted: %s", appointment_id)
        await self._notify()

    # ------------------------------------------------------------------ #
    # Change notification
    # ------------------------------------------------------------------ #

    def subscribe(self, on_change: ChangeListener) -> Unsubscribe:
        self._listeners.append(on_change)
        logger.debug("Change listener subscribed (%d active)", len(self._listeners))

        def unsubscribe() -> None:
            if on_change in self._listeners:
                self._listeners.remove(on_change)
                logger.debug("Change listener removed (%d active)", len(self._listeners))

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            result = listener()
            if inspect.isawaitable(result):
                await result

    def _require(self, appointment_id: str) -> AppointmentRecord:
        record = self._records.get(appointment_id)
        if record is None:
            raise AppointmentNotFoundError(appointment_id)
        return record

    def reset(self) -> None:
        """Clear all records. Used by test fixtures for isolation."""
        self._records.clear()
