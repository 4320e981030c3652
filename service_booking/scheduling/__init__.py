from service_booking.scheduling.availability import (
    AvailabilityIndex,
    CellStatus,
    OccupancyCell,
    cell_status,
    count_for_day,
    count_in_slot,
    is_day_full,
    is_slot_full,
)
from service_booking.scheduling.calendar_view import CalendarView, LiveAppointments
from service_booking.scheduling.slot_clock import (
    Slot,
    is_break_slot,
    is_past_slot,
    match_by_start_time,
    parse_slot_label,
    slot_catalog,
)
from service_booking.scheduling.week_view import WeekView

__all__ = [
    "AvailabilityIndex",
    "CalendarView",
    "CellStatus",
    "LiveAppointments",
    "OccupancyCell",
    "Slot",
    "WeekView",
    "cell_status",
    "count_for_day",
    "count_in_slot",
    "is_break_slot",
    "is_day_full",
    "is_past_slot",
    "is_slot_full",
    "match_by_start_time",
    "parse_slot_label",
    "slot_catalog",
]
