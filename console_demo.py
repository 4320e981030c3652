"""
Offline console demo: walks through booking and staff actions with no network.

Uses the real slot clock, availability index, booking state, status
machine, and the in-memory appointment store. Confirmation emails go to
the logging relay unless EMAILJS_* credentials are set.

Usage:
    python console_demo.py
    python console_demo.py --scenario admin
    python console_demo.py --scenario full-day
"""

import argparse
import asyncio
import sys
from datetime import date, datetime, time, timedelta
from typing import Optional

from service_booking.booking.admin_actions import AppointmentAdmin
from service_booking.booking.booking_state import BookingState
from service_booking.booking.dashboard import compute_stats
from service_booking.config import settings
from service_booking.logging_context import new_session_id
from service_booking.scheduling.availability import CellStatus, OccupancyCell
from service_booking.scheduling.calendar_view import CalendarView
from service_booking.scheduling.slot_clock import SLOT_CATALOG
from service_booking.scheduling.week_view import WeekView
from service_booking.schemas.appointment_schema import AppointmentStatus, NewAppointment
from service_booking.tools.appointment_store import InMemoryAppointmentStore
from service_booking.tools.notifications import build_relay

GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

CELL_WIDTH = 14

_CELL_COLOR: dict[CellStatus, str] = {
    CellStatus.DAY_FULL: RED,
    CellStatus.SLOT_FULL: RED,
    CellStatus.BREAK: DIM,
    CellStatus.SUNDAY: DIM,
    CellStatus.PAST: DIM,
    CellStatus.SELECTED: BOLD + GREEN,
    CellStatus.AVAILABLE: GREEN,
}


def _cell_text(cell: OccupancyCell) -> str:
    if cell.status == CellStatus.AVAILABLE:
        text = f"{cell.count}/{settings.capacity.slot_capacity}"
    else:
        text = cell.status.display_text
    return f"{_CELL_COLOR[cell.status]}{text:^{CELL_WIDTH}}{RESET}"


def render_week(view: CalendarView, now: datetime, selection=None) -> str:
    """Render the week grid as a text table."""
    week = view.week
    header = f"{'Time':<20}" + "".join(
        f"{d.strftime('%a %d'):^{CELL_WIDTH}}" for d in week.days
    )
    lines = [f"{BOLD}{week.range_label()}{RESET}", header]
    for slot, row in zip(SLOT_CATALOG, view.grid(now, selection)):
        lines.append(f"{slot.label:<20}" + "".join(_cell_text(c) for c in row))
    return "\n".join(lines)


def _first_open_weekday(week: WeekView, now: datetime) -> date:
    for day in week.days:
        if day.weekday() < 5 and day >= now.date() + timedelta(days=1):
            return day
    return week.next().start + timedelta(days=1)


def _demo_appointment(day: date, start: time, n: int) -> NewAppointment:
    return NewAppointment(
        appointment_date=day,
        appointment_time=start,
        full_name=f"Demo Customer {n}",
        phone=f"02400000{n:02d}",
        vehicle_make="Toyota",
        vehicle_model="Corolla",
        car_number=f"GR-{1000 + n}-24",
        service_type="Periodic Maintenance",
        region="greater-accra",
        branch="spintex",
    )


async def seed_store(store: InMemoryAppointmentStore, day: date, per_slot: dict[time, int]) -> None:
    n = 0
    for start, count in per_slot.items():
        for _ in range(count):
            n += 1
            await store.create(_demo_appointment(day, start, n))


def say(text: str) -> None:
    print(f"{GREEN}{text}{RESET}")


def system_log(text: str) -> None:
    print(f"{DIM}  >> {text}{RESET}")


class ConsoleSession:
    """Runs one scripted scenario against an in-memory store."""

    def __init__(self, now: Optional[datetime] = None) -> None:
        self.now = now or datetime.now()
        self.store = InMemoryAppointmentStore()

    async def run_booking(self) -> None:
        new_session_id("BOOK")
        async with CalendarView(self.store, today=self.now.date()) as view:
            day = _first_open_weekday(view.week, self.now)
            if not view.week.contains(day):
                view.next_week()
            await seed_store(self.store, day, {time(8, 0): 8, time(9, 0): 3})
            print(render_week(view, self.now))

            state = BookingState()
            system_log(f"Trying the full 8:00 slot on {day}")
            ok = state.select_slot(day, "8:00 AM - 8:30 AM", self.now, view.records)
            say(f"Selected: {ok}")
            system_log(f"Trying 9:00 on {day}")
            ok = state.select_slot(day, "9:00 AM - 9:30 AM", self.now, view.records)
            say(f"Selected: {ok} -> {state.selected_date} {state.selected_time}")

            state.toggle_service("Periodic Maintenance")
            state.toggle_service("Battery Check")
            for name, value in [
                ("full_name", "  Ama Mensah "),
                ("phone", "024 123 4567"),
                ("email", "ama@example.com"),
                ("vehicle_make", "Toyota"),
                ("vehicle_model", "Yaris"),
                ("car_number", "GR-2231-23"),
                ("region", "greater-accra"),
                ("branch", "east-legon"),
            ]:
                state.set_field(name, value)

            result = await state.submit(self.store)
            say(result.message)
            print(render_week(view, self.now, state.selection))

    async def run_admin(self) -> None:
        new_session_id("ADMIN")
        day = _first_open_weekday(WeekView.current(self.now.date()), self.now)
        booking = _demo_appointment(day, time(10, 0), 1).model_copy(
            update={"email": "demo@example.com"}
        )
        record = await self.store.create(booking)

        def confirm(title: str, message: str) -> bool:
            system_log(f"{title}: {message} -> yes")
            return True

        async with AppointmentAdmin(self.store, confirm, relay=build_relay()) as admin:
            for target in (AppointmentStatus.CONFIRMED, AppointmentStatus.COMPLETED):
                result = await admin.change_status(record.id, target)
                say(result.message)
                if result.notification is not None:
                    system_log(f"notification: {result.notification.message}")
            stats = compute_stats(admin.records, today=self.now.date())
            say(f"Dashboard: {stats}")

    async def run_full_day(self) -> None:
        async with CalendarView(self.store, today=self.now.date()) as view:
            day = _first_open_weekday(view.week, self.now)
            if not view.week.contains(day):
                view.next_week()
            open_starts = [s.start for s in SLOT_CATALOG if not s.is_break]
            await seed_store(self.store, day, {start: 7 for start in open_starts})
            print(render_week(view, self.now))
            day_count = view.index.count_for_day(day)
            say(f"{day}: {day_count} bookings, day full = {view.index.is_day_full(day)}")

    SCENARIOS = {
        "booking": "run_booking",
        "admin": "run_admin",
        "full-day": "run_full_day",
    }

    def run(self, scenario: str = "booking") -> None:
        asyncio.run(getattr(self, self.SCENARIOS[scenario])())


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Offline booking calendar demo")
    parser.add_argument(
        "--scenario", choices=sorted(ConsoleSession.SCENARIOS), default="booking",
    )
    args = parser.parse_args(argv)
    print(f"{YELLOW}{BOLD}{settings.business.name}{RESET}")
    ConsoleSession().run(args.scenario)
    return 0


if __name__ == "__main__":
    sys.exit(main())
