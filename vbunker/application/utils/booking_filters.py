"""Read-side views over the booking list.

All functions are pure and recomputed on every read; nothing here caches.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Iterable

from vbunker.domain.entities.booking import Booking


class AdminDateFilter(str, Enum):
    today = "today"
    upcoming = "upcoming"
    all = "all"


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _as_local(value: datetime, now: datetime) -> datetime:
    # compare in the wall-clock zone of `now`
    if value.tzinfo is not None and now.tzinfo is not None:
        return value.astimezone(now.tzinfo)
    return value


def is_same_day(value: datetime, now: datetime) -> bool:
    return _as_local(value, now).date() == now.date()


def filter_admin_bookings(
    bookings: Iterable[Booking],
    date_filter: AdminDateFilter,
    now: datetime,
    master: str | None = None,
) -> list[Booking]:
    """Bookings for the admin list: date window, optional exact master match, oldest first."""
    today_start = start_of_day(now)

    def in_window(booking: Booking) -> bool:
        if date_filter == AdminDateFilter.today:
            return is_same_day(booking.date, now)
        if date_filter == AdminDateFilter.upcoming:
            return booking.date >= today_start
        return True

    result = [
        b for b in bookings
        if in_window(b) and (master is None or b.master_name == master)
    ]
    return sorted(result, key=lambda b: b.date)


def master_names(bookings: Iterable[Booking]) -> list[str]:
    return sorted({b.master_name for b in bookings})


def upcoming_bookings(bookings: Iterable[Booking], now: datetime) -> list[Booking]:
    today_start = start_of_day(now)
    return sorted((b for b in bookings if b.date >= today_start), key=lambda b: b.date)


def past_bookings(bookings: Iterable[Booking], now: datetime) -> list[Booking]:
    today_start = start_of_day(now)
    return sorted((b for b in bookings if b.date < today_start), key=lambda b: b.date, reverse=True)
