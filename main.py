"""
Command-line entry point.

Usage:
    Week grid:    python main.py week [YYYY-MM-DD]
    Console demo: python main.py console [booking|admin|full-day]
"""

import asyncio
import logging
import sys
from datetime import date, datetime

from service_booking.config import settings

logger = logging.getLogger(__name__)


async def _print_week(pivot: date) -> None:
    from console_demo import render_week
    from service_booking.scheduling.calendar_view import CalendarView
    from service_booking.tools.appointment_store import InMemoryAppointmentStore

    async with CalendarView(InMemoryAppointmentStore(), today=pivot) as view:
        print(render_week(view, datetime.now()))


def _run_week_mode(args: list[str]) -> None:
    """Print the availability grid for the week containing a date."""
    try:
        pivot = date.fromisoformat(args[0]) if args else date.today()
    except ValueError:
        logger.error("Expected a date as YYYY-MM-DD, got %r", args[0])
        sys.exit(2)
    asyncio.run(_print_week(pivot))


def _run_console_mode(args: list[str]) -> None:
    """Start the offline console demo."""
    from console_demo import ConsoleSession

    ConsoleSession().run(args[0] if args else "booking")


if __name__ == "__main__":
    logger.debug("Starting %s", settings.app_name)
    if len(sys.argv) > 1 and sys.argv[1] == "console":
        _run_console_mode(sys.argv[2:])
    elif len(sys.argv) > 1 and sys.argv[1] == "week":
        _run_week_mode(sys.argv[2:])
    else:
        print(__doc__)
