"""
Slot and day occupancy derived from the full appointment list.

Occupancy is always recomputed from scratch for whatever record list is
passed in; nothing here caches across refreshes. Capacities are soft:
the check is read-then-act, so two clients that both see the last free
place can both book it and push a slot one over its ceiling.

Cell status priority (first match wins):
    DAY_FULL > BREAK > SUNDAY > SLOT_FULL > PAST > SELECTED > AVAILABLE
"""

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from service_booking.config import settings
from service_booking.scheduling.slot_clock import (
    SLOT_CATALOG,
    Slot,
    is_break_slot,
    is_past_slot,
    label_for_time,
    match_by_start_time,
    start_time_label,
)
from service_booking.scheduling.week_view import WeekView, is_sunday
from service_booking.schemas.appointment_schema import AppointmentRecord

logger = logging.getLogger(__name__)

SLOT_CAPACITY = settings.capacity.slot_capacity
DAY_CAPACITY = settings.capacity.day_capacity

# (date, start-time label) of the active booking selection
Selection = tuple[date, str]


class CellStatus(str, Enum):
    """Bookability verdict for one (date, slot) cell."""

    DAY_FULL = "day_full"
    BREAK = "break"
    SUNDAY = "sunday"
    SLOT_FULL = "slot_full"
    PAST = "past"
    SELECTED = "selected"
    AVAILABLE = "available"

    @property
    def clickable(self) -> bool:
        return self in (CellStatus.AVAILABLE, CellStatus.SELECTED)

    @property
    def display_text(self) -> str:
        return _DISPLAY_TEXT[self]


_DISPLAY_TEXT: dict[CellStatus, str] = {
    CellStatus.DAY_FULL: "Fully Booked",
    CellStatus.BREAK: "Break",
    CellStatus.SUNDAY: "Closed",
    CellStatus.SLOT_FULL: "Booked",
    CellStatus.PAST: "Past",
    CellStatus.SELECTED: "Selected",
    CellStatus.AVAILABLE: "Available",
}


def is_clickable(status: CellStatus) -> bool:
    """Only available and already-selected cells accept a selection."""
    return status.clickable


def record_slot_label(record: AppointmentRecord) -> str:
    """Display label for the slot a stored appointment falls in."""
    return label_for_time(record.appointment_time)


def count_in_slot(day: date, slot_label: str, records: Iterable[AppointmentRecord]) -> int:
    return sum(
        1
        for r in records
        if r.appointment_date == day and match_by_start_time(record_slot_label(r), slot_label)
    )


def count_for_day(day: date, records: Iterable[AppointmentRecord]) -> int:
    return sum(1 for r in records if r.appointment_date == day)


def is_slot_full(day: date, slot_label: str, records: Iterable[AppointmentRecord]) -> bool:
    return count_in_slot(day, slot_label, records) >= SLOT_CAPACITY


def is_day_full(day: date, records: Iterable[AppointmentRecord]) -> bool:
    return count_for_day(day, records) >= DAY_CAPACITY


def _is_selected(day: date, slot_label: str, selection: Optional[Selection]) -> bool:
    if selection is None:
        return False
    selected_day, selected_time = selection
    return selected_day == day and match_by_start_time(selected_time, slot_label)


def _resolve_status(
    *,
    day_full: bool,
    slot_label: str,
    day: date,
    slot_full: bool,
    now: datetime,
    selection: Optional[Selection],
) -> CellStatus:
    if day_full:
        return CellStatus.DAY_FULL
    if is_break_slot(slot_label):
        return CellStatus.BREAK
    if is_sunday(day):
        return CellStatus.SUNDAY
    if slot_full:
        return CellStatus.SLOT_FULL
    if is_past_slot(day, slot_label, now):
        return CellStatus.PAST
    if _is_selected(day, slot_label, selection):
        return CellStatus.SELECTED
    return CellStatus.AVAILABLE


def cell_status(
    day: date,
    slot_label: str,
    records: Iterable[AppointmentRecord],
    now: datetime,
    selection: Optional[Selection] = None,
) -> CellStatus:
    """Derive the status of one calendar cell."""
    records = list(records)
    return _resolve_status(
        day_full=is_day_full(day, records),
        slot_label=slot_label,
        day=day,
        slot_full=is_slot_full(day, slot_label, records),
        now=now,
        selection=selection,
    )


@dataclass(frozen=True)
class OccupancyCell:
    """Occupancy of one (date, slot) pair."""

    day: date
    slot: Slot
    count: int
    status: CellStatus

    @property
    def clickable(self) -> bool:
        return self.status.clickable


@dataclass(frozen=True)
class DayOccupancy:
    """Occupancy of a whole day, independent of individual slots."""

    day: date
    count: int
    is_full: bool
    is_sunday: bool


class AvailabilityIndex:
    """
    Occupancy counts for one snapshot of the appointment list.

    Build a fresh index every time the record list changes; the counts
    are aggregated once per build and never patched.
    """

    def __init__(self, records: Iterable[AppointmentRecord]) -> None:
        self._slot_counts: Counter[tuple[date, str]] = Counter()
        self._day_counts: Counter[date] = Counter()
        total = 0
        for record in records:
            start = start_time_label(record_slot_label(record))
            self._slot_counts[(record.appointment_date, start)] += 1
            self._day_counts[record.appointment_date] += 1
            total += 1
        logger.debug("Availability index built from %d records", total)

    def count_in_slot(self, day: date, slot_label: str) -> int:
        return self._slot_counts[(day, start_time_label(slot_label))]

    def count_for_day(self, day: date) -> int:
        return self._day_counts[day]

    def is_slot_full(self, day: date, slot_label: str) -> bool:
        return self.count_in_slot(day, slot_label) >= SLOT_CAPACITY

    def is_day_full(self, day: date) -> bool:
        return self.count_for_day(day) >= DAY_CAPACITY

    def cell_status(
        self,
        day: date,
        slot_label: str,
        now: datetime,
        selection: Optional[Selection] = None,
    ) -> CellStatus:
        return _resolve_status(
            day_full=self.is_day_full(day),
            slot_label=slot_label,
            day=day,
            slot_full=self.is_slot_full(day, slot_label),
            now=now,
            selection=selection,
        )

    def cell(
        self, day: date, slot: Slot, now: datetime, selection: Optional[Selection] = None
    ) -> OccupancyCell:
        return OccupancyCell(
            day=day,
            slot=slot,
            count=self.count_in_slot(day, slot.label),
            status=self.cell_status(day, slot.label, now, selection),
        )

    def week_grid(
        self, week: WeekView, now: datetime, selection: Optional[Selection] = None
    ) -> list[list[OccupancyCell]]:
        """One row per catalog slot, one column per day of ``week``."""
        return [
            [self.cell(day, slot, now, selection) for day in week.days]
            for slot in SLOT_CATALOG
        ]

    def day_summary(self, week: WeekView) -> list[DayOccupancy]:
        return [
            DayOccupancy(
                day=day,
                count=self.count_for_day(day),
                is_full=self.is_day_full(day),
                is_sunday=is_sunday(day),
            )
            for day in week.days
        ]
