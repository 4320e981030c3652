"""
Slot catalog and conversions between dates, slot labels, and datetimes.

Every working day offers the same seven 30-minute slots, two of which
fall in the lunch break. Stored appointments carry only a start time, so
slots are always matched on the start-time part of their label
("8:00 AM" in "8:00 AM - 8:30 AM"), never on the full range.

Usage:
    slot = slot_catalog()[0]
    parse_slot_label(date(2024, 6, 10), slot.label)  # datetime(2024, 6, 10, 8, 0)
    match_by_start_time("8:00 AM - 8:30 AM", "8:00 AM")  # True
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from service_booking.config import settings

LABEL_SEPARATOR = " - "
SLOT_DURATION = timedelta(minutes=settings.capacity.slot_duration_minutes)

_TIME_LABEL_RE = re.compile(
    r"^\s*(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*(?P<period>AM|PM)\s*$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Slot:
    """A fixed entry in the daily slot catalog."""

    label: str
    start: time
    duration_minutes: int
    is_break: bool = False

    @property
    def start_label(self) -> str:
        return start_time_label(self.label)


_SLOT_STARTS: list[tuple[time, bool]] = [
    (time(8, 0), False),
    (time(9, 0), False),
    (time(10, 0), False),
    (time(11, 0), True),
    (time(12, 0), True),
    (time(13, 0), False),
    (time(14, 0), False),
]


def format_time_label(value: time) -> str:
    """Render a time of day the way slot labels do, e.g. ``"1:00 PM"``."""
    hour = value.hour % 12 or 12
    period = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {period}"


def label_for_time(value: time) -> str:
    """Synthesize a ``"start - start+30min"`` label for a stored start time."""
    end = (datetime.combine(date.min, value) + SLOT_DURATION).time()
    return f"{format_time_label(value)}{LABEL_SEPARATOR}{format_time_label(end)}"


def _build_catalog() -> tuple[Slot, ...]:
    return tuple(
        Slot(
            label=label_for_time(start),
            start=start,
            duration_minutes=settings.capacity.slot_duration_minutes,
            is_break=is_break,
        )
        for start, is_break in _SLOT_STARTS
    )


SLOT_CATALOG: tuple[Slot, ...] = _build_catalog()
BREAK_LABELS: frozenset[str] = frozenset(s.label for s in SLOT_CATALOG if s.is_break)


def slot_catalog() -> list[Slot]:
    """Return the ordered daily slot catalog."""
    return list(SLOT_CATALOG)


def start_time_label(label: str) -> str:
    """Return the start-time part of a slot label (the text before ``" - "``)."""
    return label.split(LABEL_SEPARATOR, 1)[0].strip()


def parse_time_label(label: str) -> time:
    """Parse a 12-hour ``"h[:mm] AM|PM"`` label into a time of day.

    12 AM is hour 0, 12 PM stays hour 12, and missing minutes default to 0.

    Raises:
        ValueError: If the label is not a 12-hour time.
    """
    match = _TIME_LABEL_RE.match(start_time_label(label))
    if match is None:
        raise ValueError(f"Unrecognized time label: {label!r}")
    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    period = match.group("period").upper()
    if not 1 <= hour <= 12 or minute > 59:
        raise ValueError(f"Time out of range in label: {label!r}")
    if period == "PM" and hour < 12:
        hour += 12
    if period == "AM" and hour == 12:
        hour = 0
    return time(hour, minute)


def parse_slot_label(day: date, label: str) -> datetime:
    """Combine a date with a slot's displayed start time."""
    return datetime.combine(day, parse_time_label(label))


def is_break_slot(label: str) -> bool:
    return any(match_by_start_time(label, b) for b in BREAK_LABELS)


def is_past_slot(day: date, label: str, now: datetime) -> bool:
    """True when the slot starts strictly before ``now``."""
    return parse_slot_label(day, label) < now


def match_by_start_time(a: str, b: str) -> bool:
    """Two slot labels denote the same slot when their start times are equal."""
    return start_time_label(a) == start_time_label(b)


def find_slot(label: str) -> Optional[Slot]:
    """Look up the catalog slot whose start time matches ``label``."""
    for slot in SLOT_CATALOG:
        if match_by_start_time(slot.label, label):
            return slot
    return None
