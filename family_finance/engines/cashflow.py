"""
Cash-Flow Series

Twelve monthly buckets of income (Receitas), expenses (Despesas) and a
running balance (Acumulado) for one year.

The running balance is anchored at today's account balances (liquidity
plus credit cards as liabilities) and moved to January 1st of the
selected year by replaying transactions:
- selected year in the future: add the flows between today and Jan 1st
- current or past year: undo the flows between Jan 1st and today

Months before the first recorded transaction carry Acumulado = None so
the chart can tell "no data" from "zero activity".
"""

from datetime import date
from typing import Any, Optional

from family_finance.engines.base import (
    index_accounts,
    money_places,
    resolve_currency,
    resolve_today,
)
from family_finance.engines.effective_value import calculate_effective_transaction_value
from family_finance.models.dashboard import CashFlowPoint
from family_finance.models.domain import AccountType, Transaction, TransactionType
from family_finance.safety.currency import is_reporting_currency, safe_currency_conversion
from family_finance.safety.numbers import precise_sum, round_money, to_safe_number
from family_finance.telemetry import Telemetry, ensure_telemetry
from family_finance.validation.sanitizer import sanitize_accounts, sanitize_transactions

MONTH_LABELS = (
    "JAN", "FEV", "MAR", "ABR", "MAI", "JUN",
    "JUL", "AGO", "SET", "OUT", "NOV", "DEZ",
)


def calculate_cash_flow_series(
    transactions: Any,
    accounts: Any,
    selected_year: Any,
    today: Optional[date] = None,
    telemetry: Optional[Telemetry] = None,
) -> list[CashFlowPoint]:
    """Monthly cash flow of `selected_year`; empty list if it fails."""
    telemetry = ensure_telemetry(telemetry)
    today = resolve_today(today)

    return telemetry.safe_calculate(
        lambda: _cash_flow_series(transactions, accounts, selected_year, today, telemetry),
        "calculate_cash_flow_series",
        "cash_flow_calculation",
        [transactions, accounts, selected_year],
        [],
    ).result


def has_cash_flow_data(points: list[CashFlowPoint]) -> bool:
    """True when any month shows activity or a non-zero balance."""
    return any(
        point.income > 0
        or point.expenses > 0
        or (point.accumulated is not None and point.accumulated != 0)
        for point in points
    )


def _cash_flow_series(
    transactions: Any,
    accounts: Any,
    selected_year: Any,
    today: date,
    telemetry: Telemetry,
) -> list[CashFlowPoint]:
    safe_accounts = sanitize_accounts(accounts)
    safe_transactions = [t for t in sanitize_transactions(transactions) if not t.deleted]
    accounts_by_id = index_accounts(safe_accounts)
    year = _resolve_year(selected_year, today)
    start_of_year = date(year, 1, 1)

    # 1. Anchor at today's balances
    anchor = []
    for account in safe_accounts:
        converted = safe_currency_conversion(account.balance, account.currency, telemetry)
        if account.is_liquidity:
            anchor.append(converted)
        elif account.type == AccountType.CREDIT_CARD:
            anchor.append(-abs(converted))
    accumulated = precise_sum(anchor)

    # 2. Move the balance to January 1st of the selected year
    shifts = []
    for t in safe_transactions:
        booked = t.calendar_date
        if booked is None or _is_unpaid_debt(t):
            continue
        account = accounts_by_id.get(t.account_id) if t.account_id else None
        if account is not None and not is_reporting_currency(account.currency):
            continue

        flow = _net_flow(t, accounts_by_id, telemetry)
        if start_of_year > today:
            if today <= booked < start_of_year:
                shifts.append(flow)
        elif start_of_year <= booked <= today:
            shifts.append(-flow)
    accumulated = precise_sum([accumulated, *shifts])

    # 3. Aggregate the selected year
    income = [[] for _ in range(12)]
    expenses = [[] for _ in range(12)]
    for t in safe_transactions:
        booked = t.calendar_date
        if booked is None or booked.year != year or _is_unpaid_debt(t):
            continue

        value = _amount_in_brl(t, accounts_by_id, telemetry)
        month = booked.month - 1
        if t.type == TransactionType.INCOME:
            # Refunds reduce expenses rather than income
            if t.is_refund:
                expenses[month].append(-value)
            else:
                income[month].append(value)
        elif t.type == TransactionType.EXPENSE:
            expenses[month].append(-value if t.is_refund else value)

    # 4. Running balance and masking of months without data
    first_month = _first_month_with_data(safe_transactions, today)
    places = money_places()
    points = []
    for month in range(12):
        month_income = precise_sum(income[month])
        month_expenses = precise_sum(expenses[month])
        accumulated = precise_sum([accumulated, month_income, -month_expenses])

        month_start = date(year, month + 1, 1)
        if month_start < first_month:
            points.append(CashFlowPoint(
                date=month_start,
                month=MONTH_LABELS[month],
                year=year,
                month_index=month,
                income=0.0,
                expenses=0.0,
                accumulated=None,
            ))
            continue

        points.append(CashFlowPoint(
            date=month_start,
            month=MONTH_LABELS[month],
            year=year,
            month_index=month,
            income=round_money(month_income, places),
            expenses=round_money(month_expenses, places),
            accumulated=round_money(accumulated, places),
        ))

    return points


def _resolve_year(selected_year: Any, today: date) -> int:
    year = int(to_safe_number(selected_year, today.year))
    return year if 1 <= year <= 9999 else today.year


def _is_unpaid_debt(t: Transaction) -> bool:
    return t.type == TransactionType.EXPENSE and not t.paid_by_me and not t.is_settled


def _amount_in_brl(
    t: Transaction,
    accounts_by_id: dict,
    telemetry: Telemetry,
) -> float:
    amount = t.amount
    if t.type == TransactionType.EXPENSE and t.is_shared and not t.paid_by_me:
        amount = calculate_effective_transaction_value(t, telemetry)
    return safe_currency_conversion(amount, resolve_currency(t, accounts_by_id), telemetry)


def _net_flow(t: Transaction, accounts_by_id: dict, telemetry: Telemetry) -> float:
    """Signed effect of a transaction on the running balance."""
    if t.type == TransactionType.INCOME:
        return _amount_in_brl(t, accounts_by_id, telemetry)
    if t.type == TransactionType.EXPENSE:
        value = _amount_in_brl(t, accounts_by_id, telemetry)
        return value if t.is_refund else -value
    return 0.0


def _first_month_with_data(transactions: list[Transaction], today: date) -> date:
    dates = [t.calendar_date for t in transactions if t.calendar_date is not None]
    earliest = min(dates) if dates else today
    return earliest.replace(day=1)
