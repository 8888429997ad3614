"""
Upcoming Bills

Expense reminders due today or later, plus overdue ones of the current
month, soonest first.
"""

from datetime import date
from typing import Any, Optional

from family_finance.config import get_settings
from family_finance.engines.base import resolve_today
from family_finance.filters.visibility import should_show_transaction
from family_finance.models.domain import Transaction, TransactionType
from family_finance.telemetry import Telemetry, ensure_telemetry
from family_finance.validation.sanitizer import sanitize_transactions


def get_upcoming_bills(
    transactions: Any,
    today: Optional[date] = None,
    limit: Optional[int] = None,
    telemetry: Optional[Telemetry] = None,
) -> list[Transaction]:
    """
    The next bills to pay.

    Visible, non-refund EXPENSE transactions with notifications enabled,
    dated by their notification date (falling back to the transaction
    date).
    """
    telemetry = ensure_telemetry(telemetry)
    today = resolve_today(today)
    limit = limit if limit is not None else get_settings().dashboard.upcoming_bills_limit

    return telemetry.safe_calculate(
        lambda: _upcoming_bills(transactions, today, limit),
        "get_upcoming_bills",
        "upcoming_bills_calculation",
        [transactions],
        [],
    ).result


def _upcoming_bills(transactions: Any, today: date, limit: int) -> list[Transaction]:
    bills = []
    for t in sanitize_transactions(transactions):
        if not should_show_transaction(t):
            continue
        if not t.enable_notification or t.type != TransactionType.EXPENSE or t.is_refund:
            continue

        due = t.reminder_date
        if due is None:
            continue
        if due >= today or (due.year == today.year and due.month == today.month):
            bills.append((due, t))

    bills.sort(key=lambda item: item[0])
    return [t for _, t in bills[:max(0, limit)]]
