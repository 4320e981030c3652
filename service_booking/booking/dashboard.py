"""Filtering, pagination, and summary counts for the staff appointment list."""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union

from service_booking.config import settings
from service_booking.schemas.appointment_schema import AppointmentRecord, AppointmentStatus
from service_booking.utils import contains_ci

ALL = "all"


class SearchField(str, Enum):
    """Which record fields a free-text search looks at."""

    ALL = "all"
    NAME = "name"
    PHONE = "phone"
    EMAIL = "email"
    VEHICLE = "vehicle"
    PLATE = "plate"
    SERVICE = "service"
    REGION = "region"
    BRANCH = "branch"


def _matches_service(record: AppointmentRecord, term: str) -> bool:
    return any(contains_ci(service, term) for service in record.service_type)


def matches_search(record: AppointmentRecord, term: str, field: SearchField = SearchField.ALL) -> bool:
    if not term:
        return True
    field = SearchField(field)
    if field == SearchField.NAME:
        return contains_ci(record.full_name, term)
    if field == SearchField.PHONE:
        return contains_ci(record.phone, term)
    if field == SearchField.EMAIL:
        return contains_ci(record.email, term)
    if field == SearchField.VEHICLE:
        return contains_ci(record.vehicle_make, term) or contains_ci(record.vehicle_model, term)
    if field == SearchField.PLATE:
        return contains_ci(record.car_number, term)
    if field == SearchField.SERVICE:
        return _matches_service(record, term)
    if field == SearchField.REGION:
        return contains_ci(record.region, term)
    if field == SearchField.BRANCH:
        return contains_ci(record.branch, term)
    # Region and branch are only searched when picked explicitly.
    return (
        contains_ci(record.full_name, term)
        or contains_ci(record.phone, term)
        or contains_ci(record.email, term)
        or contains_ci(record.vehicle_make, term)
        or contains_ci(record.vehicle_model, term)
        or contains_ci(record.car_number, term)
        or _matches_service(record, term)
    )


def filter_appointments(
    records: Iterable[AppointmentRecord],
    search: str = "",
    field: SearchField = SearchField.ALL,
    status: Union[AppointmentStatus, str] = ALL,
    on_date: Optional[date] = None,
) -> list[AppointmentRecord]:
    """Apply search, status, and date filters together."""
    search = search.strip()
    return [
        r
        for r in records
        if matches_search(r, search, field)
        and (status == ALL or r.status == AppointmentStatus(status))
        and (on_date is None or r.appointment_date == on_date)
    ]


@dataclass(frozen=True)
class Page:
    """One page of the appointment table."""

    items: list[AppointmentRecord]
    number: int
    total_pages: int
    total_items: int


def paginate(
    records: Sequence[AppointmentRecord], page: int = 1, page_size: Optional[int] = None
) -> Page:
    """Slice ``records`` into a page; out-of-range pages fall back to page 1."""
    size = page_size or settings.admin.page_size
    total_pages = math.ceil(len(records) / size) or 1
    if page < 1 or page > total_pages:
        page = 1
    start = (page - 1) * size
    return Page(
        items=list(records[start:start + size]),
        number=page,
        total_pages=total_pages,
        total_items=len(records),
    )


@dataclass(frozen=True)
class DashboardStats:
    total: int = 0
    pending: int = 0
    confirmed: int = 0
    completed: int = 0
    canceled: int = 0
    today: int = 0


def compute_stats(records: Iterable[AppointmentRecord], today: Optional[date] = None) -> DashboardStats:
    """Headline counts for the dashboard cards."""
    today = today or date.today()
    counts = {status: 0 for status in AppointmentStatus}
    total = 0
    on_today = 0
    for record in records:
        total += 1
        counts[record.status] += 1
        if record.appointment_date == today:
            on_today += 1
    return DashboardStats(
        total=total,
        pending=counts[AppointmentStatus.PENDING],
        confirmed=counts[AppointmentStatus.CONFIRMED],
        completed=counts[AppointmentStatus.COMPLETED],
        canceled=counts[AppointmentStatus.CANCELED],
        today=on_today,
    )
