"""Seven-day calendar window used by the availability grid."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from service_booking.config import settings

DAYS_PER_WEEK = 7
SUNDAY = 6


def start_of_week(pivot: date, week_starts_on: Optional[int] = None) -> date:
    """Roll ``pivot`` back to the configured first weekday."""
    first = settings.business.week_starts_on if week_starts_on is None else week_starts_on
    return pivot - timedelta(days=(pivot.weekday() - first) % DAYS_PER_WEEK)


def is_sunday(day: date) -> bool:
    return day.weekday() == SUNDAY


@dataclass(frozen=True)
class WeekView:
    """Seven consecutive dates starting at a normalized week start.

    Always build through ``containing`` or ``current`` so that ``start``
    falls on the configured weekday; navigation keeps that alignment.
    """

    start: date

    @classmethod
    def containing(cls, pivot: date, week_starts_on: Optional[int] = None) -> "WeekView":
        return cls(start=start_of_week(pivot, week_starts_on))

    @classmethod
    def current(cls, today: Optional[date] = None) -> "WeekView":
        return cls.containing(today or date.today())

    @property
    def days(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range(DAYS_PER_WEEK)]

    @property
    def end(self) -> date:
        return self.start + timedelta(days=DAYS_PER_WEEK - 1)

    def next(self) -> "WeekView":
        return WeekView(start=self.start + timedelta(weeks=1))

    def previous(self) -> "WeekView":
        return WeekView(start=self.start - timedelta(weeks=1))

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def range_label(self) -> str:
        """Header text such as ``"Jun 9 - Jun 15, 2024"``."""
        return (
            f"{self.start.strftime('%b')} {self.start.day} - "
            f"{self.end.strftime('%b')} {self.end.day}, {self.end.year}"
        )
