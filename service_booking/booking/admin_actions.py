"""
Staff actions on appointments: status changes, edits, creation, deletion.

Every status change and deletion is confirmed interactively through the
injected confirmer before anything is written. Confirming a pending
appointment also sends the customer a confirmation email; a failed send
is logged and never undoes or blocks the status change.
"""

import inspect
from collections.abc import Awaitable
from datetime import datetime
from typing import Callable, Optional, Union

from pydantic import BaseModel

from service_booking.booking.status_machine import (
    AppointmentStatusMachine,
    StatusAction,
    StatusTransition,
)
from service_booking.errors import InvalidTransitionError, StoreError
from service_booking.logging_context import get_session_logger
from service_booking.scheduling.calendar_view import LiveAppointments
from service_booking.scheduling.slot_clock import format_time_label
from service_booking.schemas.appointment_schema import (
    AppointmentRecord,
    AppointmentStatus,
    AppointmentUpdate,
    NewAppointment,
)
from service_booking.schemas.notification_schema import ConfirmationMessage, SendResult
from service_booking.tools.appointment_store import AppointmentStore
from service_booking.tools.notifications import (
    DEFAULT_RECIPIENT_NAME,
    NotificationRelay,
    build_relay,
)
from service_booking.tools.services import branch_label

logger = get_session_logger(__name__)

# (title, message) -> approved?
Confirmer = Callable[[str, str], Union[bool, Awaitable[bool]]]

STATUS_CHANGE_TITLE = "Confirm Status Change"
DELETE_TITLE = "Delete Appointment"
DELETE_PROMPT = (
    "Are you sure you want to delete this appointment? This action cannot be undone."
)


class ActionResult(BaseModel):
    """Outcome of a staff action, shown as a dismissible alert."""

    success: bool
    message: str
    declined: bool = False
    notification: Optional[SendResult] = None


def status_change_prompt(transition: StatusTransition) -> str:
    return f"Are you sure you want to {transition.action.value} this appointment?"


def build_confirmation(record: AppointmentRecord) -> ConfirmationMessage:
    """Confirmation email details for a record."""
    return ConfirmationMessage(
        recipient_name=record.full_name or DEFAULT_RECIPIENT_NAME,
        recipient_email=record.email,
        date=record.appointment_date.isoformat(),
        time=format_time_label(record.appointment_time),
        plate=record.car_number or None,
        branch=branch_label(record.branch) or record.branch or None,
    )


class AppointmentAdmin:
    """Staff dashboard actions over a live appointment list."""

    def __init__(
        self,
        store: AppointmentStore,
        confirmer: Confirmer,
        relay: Optional[NotificationRelay] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._confirm = confirmer
        self._relay = relay or build_relay()
        self._clock = clock
        self.live = LiveAppointments(store)
        self.alert: Optional[ActionResult] = None

    async def __aenter__(self) -> "AppointmentAdmin":
        await self.live.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.live.__aexit__(exc_type, exc, tb)

    @property
    def records(self) -> list[AppointmentRecord]:
        return self.live.records

    @staticmethod
    def available_actions(record: AppointmentRecord) -> list[StatusAction]:
        """Actions the dashboard should offer for a record."""
        return AppointmentStatusMachine(record.status).valid_actions()

    # ------------------------------------------------------------------ #
    # Status changes
    # ------------------------------------------------------------------ #

    async def change_status(
        self, appointment_id: str, target: AppointmentStatus
    ) -> ActionResult:
        """
        Move an appointment to ``target`` after interactive confirmation.

        A target that is not reachable from the stored status (typically
        because another session changed the record first) yields a failed
        result and refreshes the stale list.
        """
        target = AppointmentStatus(target)
        try:
            record = await self._store.get(appointment_id)
        except StoreError as exc:
            return self._fail(f"Failed to update status: {exc}", exc)

        try:
            transition = AppointmentStatusMachine.check(record.status, target)
        except InvalidTransitionError as exc:
            await self.live.refresh()
            return self._fail(f"Failed to update status: {exc}", exc)

        if not await self._ask(STATUS_CHANGE_TITLE, status_change_prompt(transition)):
            logger.info("Status change on %s declined", appointment_id)
            return ActionResult(success=False, declined=True, message="Status change cancelled.")

        try:
            await self._store.update_status(appointment_id, target, self._clock())
        except StoreError as exc:
            return self._fail(f"Failed to update status: {exc}", exc)

        notification = None
        if transition.action == StatusAction.CONFIRM:
            notification = await self._send_confirmation(record)

        await self._refresh_if_detached()
        return self._ok(
            f"Appointment marked as {target.value} successfully!", notification=notification
        )

    async def _send_confirmation(self, record: AppointmentRecord) -> Optional[SendResult]:
        if not record.email:
            logger.info("No email on %s; confirmation email skipped", record.id)
            return None
        try:
            result = await self._relay.send_confirmation(build_confirmation(record))
        except Exception as exc:
            logger.error("Error sending confirmation email for %s: %s", record.id, exc)
            return SendResult(sent=False, message="Failed to send confirmation email",
                              error=str(exc))
        if not result.sent:
            logger.warning("Confirmation email for %s not sent: %s",
                           record.id, result.error or result.message)
        return result

    # ------------------------------------------------------------------ #
    # Record edits
    # ------------------------------------------------------------------ #

    async def create(self, appointment: NewAppointment) -> ActionResult:
        try:
            record = await self._store.create(appointment)
        except StoreError as exc:
            return self._fail(f"Failed to create appointment: {exc}", exc)
        await self._refresh_if_detached()
        return self._ok(f"Appointment {record.id} created successfully!")

    async def update_fields(self, appointment_id: str, changes: AppointmentUpdate) -> ActionResult:
        try:
            await self._store.update_fields(appointment_id, changes)
        except StoreError as exc:
            return self._fail(f"Failed to update appointment: {exc}", exc)
        await self._refresh_if_detached()
        return self._ok("Appointment updated successfully!")

    async def delete(self, appointment_id: str) -> ActionResult:
        if not await self._ask(DELETE_TITLE, DELETE_PROMPT):
            return ActionResult(success=False, declined=True, message="Deletion cancelled.")
        try:
            await self._store.delete(appointment_id)
        except StoreError as exc:
            return self._fail(f"Failed to delete appointment: {exc}", exc)
        await self._refresh_if_detached()
        return self._ok("Appointment deleted successfully!")

    def dismiss_alert(self) -> None:
        self.alert = None

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    async def _refresh_if_detached(self) -> None:
        # An active subscription already re-fetches on the store's change signal.
        if not self.live.active:
            await self.live.refresh()

    async def _ask(self, title: str, message: str) -> bool:
        answer = self._confirm(title, message)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    def _ok(self, message: str, notification: Optional[SendResult] = None) -> ActionResult:
        self.alert = ActionResult(success=True, message=message, notification=notification)
        return self.alert

    def _fail(self, message: str, exc: Exception) -> ActionResult:
        logger.error("%s", message, exc_info=exc)
        self.alert = ActionResult(success=False, message=message)
        return self.alert
