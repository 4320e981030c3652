"""Tests for occupancy counting and cell status priority."""

from datetime import date, datetime, time

import pytest

from service_booking.scheduling.availability import (
    DAY_CAPACITY,
    SLOT_CAPACITY,
    AvailabilityIndex,
    CellStatus,
    cell_status,
    count_for_day,
    count_in_slot,
    is_clickable,
    is_day_full,
    is_slot_full,
)
from service_booking.scheduling.slot_clock import slot_catalog
from service_booking.scheduling.week_view import WeekView
from service_booking.schemas.appointment_schema import AppointmentStatus
from tests.conftest import EARLY_MONDAY, MONDAY, SUNDAY, make_record, make_records

SLOT_8 = "8:00 AM - 8:30 AM"
SLOT_9 = "9:00 AM - 9:30 AM"
BREAK = "11:00 AM - 11:30 AM"
OPEN_STARTS = [s.start for s in slot_catalog() if not s.is_break]


def _full_day(day: date = MONDAY) -> list:
    """35 records spread 7 per open slot, so no single slot is full."""
    return [r for start in OPEN_STARTS for r in make_records(7, day=day, start=start)]


class TestCapacities:
    def test_defaults(self):
        assert SLOT_CAPACITY == 8
        assert DAY_CAPACITY == 35


class TestCounting:
    def test_count_in_slot_matches_by_start_time(self):
        records = make_records(3, start=time(8, 0)) + make_records(2, start=time(9, 0))
        assert count_in_slot(MONDAY, SLOT_8, records) == 3
        assert count_in_slot(MONDAY, "9:00 AM", records) == 2

    def test_count_ignores_other_dates(self):
        records = make_records(2) + make_records(4, day=date(2024, 6, 11))
        assert count_in_slot(MONDAY, SLOT_8, records) == 2

    def test_count_includes_every_status(self):
        records = [
            make_record(status=AppointmentStatus.CANCELED),
            make_record(status=AppointmentStatus.COMPLETED),
        ]
        assert count_in_slot(MONDAY, SLOT_8, records) == 2

    def test_count_for_day_ignores_slot(self):
        records = make_records(3, start=time(8, 0)) + make_records(4, start=time(14, 0))
        assert count_for_day(MONDAY, records) == 7

    def test_off_catalog_time_counts_for_day_only(self):
        records = [make_record(start=time(8, 15))]
        assert count_in_slot(MONDAY, SLOT_8, records) == 0
        assert count_for_day(MONDAY, records) == 1

    def test_empty_records(self):
        assert count_in_slot(MONDAY, SLOT_8, []) == 0
        assert count_for_day(MONDAY, []) == 0


class TestFullness:
    def test_seven_is_not_full(self):
        assert not is_slot_full(MONDAY, SLOT_8, make_records(7))

    def test_eight_is_full(self):
        assert is_slot_full(MONDAY, SLOT_8, make_records(8))

    def test_slot_full_is_monotonic(self):
        records = make_records(8)
        for extra in range(1, 4):
            assert is_slot_full(MONDAY, SLOT_8, records + make_records(extra))

    def test_day_full_at_thirty_five(self):
        records = _full_day()
        assert len(records) == 35
        assert is_day_full(MONDAY, records)
        assert not is_day_full(MONDAY, records[:-1])

    def test_full_slot_does_not_make_day_full(self):
        records = make_records(8)
        assert is_slot_full(MONDAY, SLOT_8, records)
        assert not is_day_full(MONDAY, records)


class TestCellStatus:
    def test_scenario_a_slot_full(self):
        records = make_records(8)
        assert is_slot_full(MONDAY, SLOT_8, records)
        assert cell_status(MONDAY, SLOT_8, records, EARLY_MONDAY) == CellStatus.SLOT_FULL

    def test_scenario_b_sunday_blocks_every_slot(self):
        for slot in slot_catalog():
            status = cell_status(SUNDAY, slot.label, [], datetime(2024, 6, 1))
            expected = CellStatus.BREAK if slot.is_break else CellStatus.SUNDAY
            assert status == expected
            assert not is_clickable(status)

    def test_scenario_c_day_full_overrides_everything(self):
        records = _full_day()
        for slot in slot_catalog():
            assert count_in_slot(MONDAY, slot.label, records) < SLOT_CAPACITY
            assert cell_status(MONDAY, slot.label, records, EARLY_MONDAY) == CellStatus.DAY_FULL

    def test_break_beats_sunday(self):
        assert cell_status(SUNDAY, BREAK, [], datetime(2024, 6, 1)) == CellStatus.BREAK

    def test_sunday_beats_slot_full(self):
        records = make_records(8, day=SUNDAY)
        assert cell_status(SUNDAY, SLOT_8, records, datetime(2024, 6, 1)) == CellStatus.SUNDAY

    def test_slot_full_beats_past(self):
        records = make_records(8)
        late = datetime(2024, 6, 10, 18, 0)
        assert cell_status(MONDAY, SLOT_8, records, late) == CellStatus.SLOT_FULL

    def test_past_beats_selected(self):
        late = datetime(2024, 6, 10, 18, 0)
        status = cell_status(MONDAY, SLOT_8, [], late, selection=(MONDAY, "8:00 AM"))
        assert status == CellStatus.PAST

    def test_selected(self):
        status = cell_status(MONDAY, SLOT_9, [], EARLY_MONDAY, selection=(MONDAY, "9:00 AM"))
        assert status == CellStatus.SELECTED

    def test_selection_on_other_day_not_selected(self):
        status = cell_status(
            MONDAY, SLOT_9, [], EARLY_MONDAY, selection=(date(2024, 6, 11), "9:00 AM")
        )
        assert status == CellStatus.AVAILABLE

    def test_available(self):
        assert cell_status(MONDAY, SLOT_9, make_records(2), EARLY_MONDAY) == CellStatus.AVAILABLE

    @pytest.mark.parametrize("status,clickable", [
        (CellStatus.AVAILABLE, True),
        (CellStatus.SELECTED, True),
        (CellStatus.DAY_FULL, False),
        (CellStatus.BREAK, False),
        (CellStatus.SUNDAY, False),
        (CellStatus.SLOT_FULL, False),
        (CellStatus.PAST, False),
    ])
    def test_clickability(self, status, clickable):
        assert is_clickable(status) is clickable

    def test_display_text_for_full_day(self):
        assert CellStatus.DAY_FULL.display_text == "Fully Booked"


class TestAvailabilityIndex:
    def test_matches_function_forms(self):
        records = make_records(8) + make_records(3, start=time(13, 0))
        index = AvailabilityIndex(records)
        for slot in slot_catalog():
            assert index.count_in_slot(MONDAY, slot.label) == count_in_slot(
                MONDAY, slot.label, records
            )
            assert index.cell_status(MONDAY, slot.label, EARLY_MONDAY) == cell_status(
                MONDAY, slot.label, records, EARLY_MONDAY
            )
        assert index.count_for_day(MONDAY) == 11

    def test_week_grid_shape(self):
        week = WeekView.containing(MONDAY, week_starts_on=6)
        grid = AvailabilityIndex([]).week_grid(week, EARLY_MONDAY)
        assert len(grid) == 7
        assert all(len(row) == 7 for row in grid)
        assert grid[0][0].day == SUNDAY
        assert grid[0][0].slot.label == SLOT_8

    def test_week_grid_statuses(self):
        week = WeekView.containing(MONDAY, week_starts_on=6)
        grid = AvailabilityIndex(make_records(8)).week_grid(week, EARLY_MONDAY)
        monday_col = 1
        assert grid[0][monday_col].status == CellStatus.SLOT_FULL
        assert grid[0][monday_col].count == 8
        assert not grid[0][monday_col].clickable
        assert grid[1][monday_col].status == CellStatus.AVAILABLE
        assert grid[3][monday_col].status == CellStatus.BREAK
        assert grid[1][0].status == CellStatus.SUNDAY

    def test_day_summary(self):
        week = WeekView.containing(MONDAY, week_starts_on=6)
        summary = AvailabilityIndex(_full_day()).day_summary(week)
        assert summary[0].is_sunday
        assert summary[1].count == 35
        assert summary[1].is_full
        assert not summary[2].is_full

    def test_rebuild_reflects_new_records(self):
        records = make_records(7)
        assert not AvailabilityIndex(records).is_slot_full(MONDAY, SLOT_8)
        records.append(make_record())
        assert AvailabilityIndex(records).is_slot_full(MONDAY, SLOT_8)
