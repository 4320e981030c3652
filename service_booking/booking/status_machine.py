"""
Finite state machine over an appointment's status.

Staff move appointments forward with explicit actions. The only backward
move is ACCEPT, which walks a confirmed or canceled appointment back to
pending. COMPLETED is terminal.

Usage:
    sm = AppointmentStatusMachine(AppointmentStatus.PENDING)
    sm.transition(AppointmentStatus.CONFIRMED)
    assert sm.valid_targets() == [AppointmentStatus.COMPLETED, ...]
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from service_booking.errors import InvalidTransitionError
from service_booking.schemas.appointment_schema import AppointmentStatus

logger = logging.getLogger(__name__)


class StatusAction(str, Enum):
    """Staff actions that change an appointment's status."""
    CONFIRM = "confirm"
    CANCEL = "cancel"
    COMPLETE = "complete"
    ACCEPT = "accept"


@dataclass(frozen=True)
class StatusTransition:
    """A single valid status transition."""
    from_status: AppointmentStatus
    to_status: AppointmentStatus
    action: StatusAction


@dataclass
class StatusEntry:
    """Recorded history entry for a status change."""
    status: AppointmentStatus
    entered_at: datetime
    action: Optional[StatusAction] = None


class AppointmentStatusMachine:
    """
    Deterministic status lifecycle for one appointment.

    Every transition must be listed in TRANSITIONS; anything else is
    rejected with the list of statuses reachable from the current one.
    """

    TRANSITIONS: list[StatusTransition] = [
        # --- Forward ---
        StatusTransition(AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED,
                         StatusAction.CONFIRM),
        StatusTransition(AppointmentStatus.PENDING, AppointmentStatus.CANCELED,
                         StatusAction.CANCEL),
        StatusTransition(AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED,
                         StatusAction.COMPLETE),
        StatusTransition(AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELED,
                         StatusAction.CANCEL),

        # --- Re-accept ---
        StatusTransition(AppointmentStatus.CONFIRMED, AppointmentStatus.PENDING,
                         StatusAction.ACCEPT),
        StatusTransition(AppointmentStatus.CANCELED, AppointmentStatus.PENDING,
                         StatusAction.ACCEPT),
    ]

    def __init__(self, status: AppointmentStatus = AppointmentStatus.PENDING) -> None:
        self._status = AppointmentStatus(status)
        self._history: list[StatusEntry] = [
            StatusEntry(status=self._status, entered_at=datetime.now())
        ]

    @property
    def status(self) -> AppointmentStatus:
        return self._status

    @classmethod
    def find(
        cls, from_status: AppointmentStatus, to_status: AppointmentStatus
    ) -> Optional[StatusTransition]:
        """Look up the transition between two statuses, if one exists."""
        for t in cls.TRANSITIONS:
            if t.from_status == from_status and t.to_status == to_status:
                return t
        return None

    @classmethod
    def check(
        cls, from_status: AppointmentStatus, to_status: AppointmentStatus
    ) -> StatusTransition:
        """
        Validate a transition without applying it.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        transition = cls.find(AppointmentStatus(from_status), AppointmentStatus(to_status))
        if transition is None:
            valid = [t.to_status.value for t in cls.TRANSITIONS if t.from_status == from_status]
            raise InvalidTransitionError(
                f"No valid transition from '{AppointmentStatus(from_status).value}' "
                f"to '{AppointmentStatus(to_status).value}'. Valid targets: {valid}"
            )
        return transition

    def transition(self, to_status: AppointmentStatus) -> AppointmentStatus:
        """Apply a transition and return the new status."""
        t = self.check(self._status, to_status)
        old_status = self._status
        self._status = t.to_status
        self._history.append(StatusEntry(
            status=self._status, entered_at=datetime.now(), action=t.action,
        ))
        logger.debug(
            "Status transition: %s -> %s (action: %s)",
            old_status.value, self._status.value, t.action.value,
        )
        return self._status

    def valid_targets(self) -> list[AppointmentStatus]:
        """Return all statuses reachable from the current one."""
        return [t.to_status for t in self.TRANSITIONS if t.from_status == self._status]

    def valid_actions(self) -> list[StatusAction]:
        return [t.action for t in self.TRANSITIONS if t.from_status == self._status]

    def get_history(self) -> list[StatusEntry]:
        return list(self._history)

    def is_terminal(self) -> bool:
        return not self.valid_targets()
