"""
Live appointment list and the week calendar built on top of it.

A view subscribes to the store's change signal while it is active and
re-fetches the whole list on every signal. The subscription is a scoped
resource: acquired on enter, released on exit no matter how the block
ends.

Usage:
    async with CalendarView(store) as view:
        grid = view.grid(now=datetime.now())
        view.next_week()
"""

import logging
from datetime import date, datetime
from typing import Callable, Optional

from service_booking.errors import StoreError
from service_booking.scheduling.availability import AvailabilityIndex, OccupancyCell, Selection
from service_booking.scheduling.week_view import WeekView
from service_booking.schemas.appointment_schema import AppointmentRecord
from service_booking.tools.appointment_store import AppointmentStore, Unsubscribe

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load appointments"


class LiveAppointments:
    """The current full appointment list, kept fresh by change signals."""

    def __init__(self, store: AppointmentStore) -> None:
        self._store = store
        self._unsubscribe: Optional[Unsubscribe] = None
        self._on_refresh: list[Callable[[list[AppointmentRecord]], None]] = []
        self.records: list[AppointmentRecord] = []
        self.error: Optional[str] = None
        self.loading: bool = False
        self.refresh_count: int = 0

    @property
    def active(self) -> bool:
        return self._unsubscribe is not None

    def on_refresh(self, callback: Callable[[list[AppointmentRecord]], None]) -> None:
        """Register a callback run after every successful fetch."""
        self._on_refresh.append(callback)

    async def activate(self) -> None:
        if self.active:
            return
        self._unsubscribe = self._store.subscribe(self._handle_change)
        logger.debug("Live appointment subscription opened")
        await self.refresh()

    def deactivate(self) -> None:
        if self._unsubscribe is None:
            return
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        unsubscribe()
        logger.debug("Live appointment subscription closed")

    async def __aenter__(self) -> "LiveAppointments":
        try:
            await self.activate()
        except BaseException:
            self.deactivate()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.deactivate()

    async def refresh(self) -> list[AppointmentRecord]:
        """Re-fetch the full list; on failure keep the last good list."""
        self.loading = True
        try:
            records = await self._store.list()
        except StoreError as exc:
            logger.error("Error fetching appointments: %s", exc)
            self.error = LOAD_ERROR_MESSAGE
            return self.records
        finally:
            self.loading = False

        self.records = records
        self.error = None
        self.refresh_count += 1
        logger.debug("Fetched %d appointments", len(records))
        for callback in self._on_refresh:
            callback(records)
        return records

    async def _handle_change(self) -> None:
        await self.refresh()


class CalendarView:
    """Week calendar over a live appointment list."""

    def __init__(self, store: AppointmentStore, today: Optional[date] = None) -> None:
        self.live = LiveAppointments(store)
        self.week = WeekView.current(today)
        self._index = AvailabilityIndex([])
        self.live.on_refresh(self._rebuild)

    async def __aenter__(self) -> "CalendarView":
        await self.live.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.live.__aexit__(exc_type, exc, tb)

    def _rebuild(self, records: list[AppointmentRecord]) -> None:
        self._index = AvailabilityIndex(records)

    @property
    def records(self) -> list[AppointmentRecord]:
        return self.live.records

    @property
    def index(self) -> AvailabilityIndex:
        return self._index

    @property
    def error(self) -> Optional[str]:
        return self.live.error

    def previous_week(self) -> WeekView:
        self.week = self.week.previous()
        return self.week

    def next_week(self) -> WeekView:
        self.week = self.week.next()
        return self.week

    def go_to_today(self, today: Optional[date] = None) -> WeekView:
        self.week = WeekView.current(today)
        return self.week

    def grid(
        self, now: datetime, selection: Optional[Selection] = None
    ) -> list[list[OccupancyCell]]:
        return self._index.week_grid(self.week, now, selection)

    def is_current_week(self, today: Optional[date] = None) -> bool:
        return self.week.contains(today or date.today())
