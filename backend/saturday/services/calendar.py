"""Saturday date helpers for the availability grid."""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import List, Optional

SATURDAY = 5


def add_months(start: date, months: int) -> date:
    """Shift ``start`` by whole months, clamping to the last day of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def next_saturday(start: date) -> date:
    """First Saturday on or after ``start``."""
    return start + timedelta(days=(SATURDAY - start.weekday()) % 7)


def saturdays_between(start: date, end: date, today: Optional[date] = None) -> List[date]:
    """Every Saturday in ``[start, end]``, skipping dates before ``today``."""
    if today is not None and start < today:
        start = today
    current = next_saturday(start)
    result: List[date] = []
    while current <= end:
        result.append(current)
        current += timedelta(days=7)
    return result


def upcoming_saturdays(today: date, months: int = 3) -> List[date]:
    return saturdays_between(today, add_months(today, months), today=today)


def default_window(today: date, months: int) -> tuple[date, date]:
    return today, add_months(today, months)
