from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.enums import QuickRange
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_date_arg(value: str | None, field_name: str) -> date:
    """Like `parse_iso_date` but raises ValidationError for missing/malformed input."""
    if not value:
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every calendar date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def quick_range(kind: QuickRange, today: date) -> tuple[date, date]:
    """Preset report ranges. Weeks run Monday to Sunday."""
    if kind == QuickRange.TODAY:
        return today, today

    monday = today - timedelta(days=today.weekday())
    if kind == QuickRange.LAST_WEEK:
        monday -= timedelta(days=7)
    return monday, monday + timedelta(days=6)
