"""
Calendar date helpers.

Transaction dates arrive as `YYYY-MM-DD` strings or ISO datetimes.
Only the calendar-date part matters to the engines, so every parser here
reduces its input to a `date` or to None. Nothing raises.
"""

from datetime import date, datetime, timedelta
from typing import Any, Optional


def parse_calendar_date(value: Any) -> Optional[date]:
    """
    Parse a date-like value into a calendar date.

    Accepts `date`, `datetime` and strings (`2025-01-10`,
    `2025-01-10T14:30:00Z`). Non-existent days such as `2024-02-30`
    are rejected.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    head = value.strip().split("T")[0].split(" ")[0]
    if len(head) != 10:
        return None
    try:
        return date.fromisoformat(head)
    except ValueError:
        return None


def is_same_month(value: Any, reference: date) -> bool:
    """True when `value` falls in the calendar month of `reference`."""
    parsed = parse_calendar_date(value)
    if parsed is None:
        return False
    return parsed.year == reference.year and parsed.month == reference.month


def end_of_month(reference: date) -> date:
    """Last calendar day of the month containing `reference`."""
    first_of_next = (reference.replace(day=1) + timedelta(days=32)).replace(day=1)
    return first_of_next - timedelta(days=1)


def resolve_reference_date(value: Any, today: Optional[date] = None) -> date:
    """Parse `value`, falling back to `today` (or the wall clock)."""
    parsed = parse_calendar_date(value)
    if parsed is not None:
        return parsed
    return today or date.today()
