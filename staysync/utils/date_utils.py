"""
Date and time utility functions for billing months, contracts and reporting.
"""

from datetime import date, datetime, timezone
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta


def utc_now() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    return utc_now().date()


def month_start(value: date) -> date:
    """First day of the month containing ``value``."""
    return value.replace(day=1)


def add_months(value: date, months: int) -> date:
    """
    Add calendar months, clamping the day to the target month's length.

    Example:
        add_months(date(2024, 1, 31), 1) -> date(2024, 2, 29)
    """
    return value + relativedelta(months=months)


def parse_month(value: Optional[str]) -> Optional[date]:
    """
    Parse ``YYYY-MM`` (or a full ISO date) into the first day of that month.

    Raises:
        ValueError: If the string is not a valid month
    """
    if value is None or value == "":
        return None
    parts = value.strip().split("-")
    if len(parts) < 2:
        raise ValueError(f"Invalid month '{value}', expected YYYY-MM")
    year, month = int(parts[0]), int(parts[1])
    return date(year, month, 1)


def month_bounds(month: date) -> Tuple[datetime, datetime]:
    """Half-open ``[start, end)`` datetime range covering the month."""
    start = datetime(month.year, month.month, 1)
    end = start + relativedelta(months=1)
    return start, end


def format_month(value: date) -> str:
    return value.strftime("%Y-%m")


def months_back(anchor: date, count: int) -> List[date]:
    """The ``count`` month starts ending at ``anchor``'s month, oldest first."""
    first = month_start(anchor)
    return [first - relativedelta(months=offset) for offset in range(count - 1, -1, -1)]


def month_index(value: date) -> int:
    """Monotonic month number used to compare calendar months."""
    return value.year * 12 + (value.month - 1)
