"""
Sparklines

Per-day totals of one transaction type over the last N days, oldest
first, ending today. Raw amounts: no currency conversion and no shared
expense resolution.
"""

from datetime import date, timedelta
from typing import Any, Optional

from family_finance.config import get_settings
from family_finance.engines.base import resolve_today
from family_finance.models.domain import TransactionType
from family_finance.safety.numbers import precise_sum, to_safe_number
from family_finance.telemetry import Telemetry, ensure_telemetry
from family_finance.validation.sanitizer import sanitize_transactions


def calculate_sparkline_data(
    transactions: Any,
    transaction_type: Any,
    days: Optional[int] = None,
    today: Optional[date] = None,
    telemetry: Optional[Telemetry] = None,
) -> list[float]:
    """One total per day; empty list if the calculation fails."""
    telemetry = ensure_telemetry(telemetry)
    today = resolve_today(today)
    default_days = get_settings().dashboard.sparkline_days

    return telemetry.safe_calculate(
        lambda: _sparkline(transactions, transaction_type, days, default_days, today),
        "calculate_sparkline_data",
        "sparkline_calculation",
        [transactions, transaction_type, days],
        [],
    ).result


def _sparkline(
    transactions: Any,
    transaction_type: Any,
    days: Optional[int],
    default_days: int,
    today: date,
) -> list[float]:
    window = int(to_safe_number(days, default_days)) if days is not None else default_days
    window = max(0, min(window, 3660))
    wanted = TransactionType.parse(transaction_type)

    per_day: dict[date, list[float]] = {}
    if wanted is not None:
        for t in sanitize_transactions(transactions):
            booked = t.calendar_date
            if booked is not None and t.type == wanted:
                per_day.setdefault(booked, []).append(t.amount)

    return [
        precise_sum(per_day.get(today - timedelta(days=offset), []))
        for offset in range(window - 1, -1, -1)
    ]
