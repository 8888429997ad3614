"""
Monthly Totals and Net Worth

Realized income and expenses of one calendar month, and the cash-basis
net worth.
"""

from datetime import date
from typing import Any, Optional

from family_finance.engines.base import (
    in_month,
    index_accounts,
    money_places,
    resolve_currency,
    resolve_today,
)
from family_finance.engines.effective_value import calculate_effective_transaction_value
from family_finance.models.dashboard import MonthlyTotals
from family_finance.models.domain import AccountType, Transaction, TransactionType
from family_finance.safety.currency import is_reporting_currency, safe_currency_conversion
from family_finance.safety.dates import resolve_reference_date
from family_finance.safety.numbers import precise_subtract, precise_sum, round_money
from family_finance.telemetry import Telemetry, ensure_telemetry
from family_finance.validation.sanitizer import sanitize_accounts, sanitize_transactions


# =============================================================================
# MONTHLY TOTALS
# =============================================================================

def calculate_monthly_totals(
    accounts: Any,
    transactions: Any,
    reference_date: Any,
    today: Optional[date] = None,
    telemetry: Optional[Telemetry] = None,
) -> MonthlyTotals:
    """
    Income, expenses and net flow of the reference date's month, in BRL.

    Refunds invert the sign. Unsettled debts paid by someone else are
    left out entirely.
    """
    telemetry = ensure_telemetry(telemetry)
    today = resolve_today(today)

    return telemetry.safe_calculate(
        lambda: _monthly_totals(accounts, transactions, reference_date, today, telemetry),
        "calculate_monthly_totals",
        "monthly_totals_calculation",
        [accounts, transactions, reference_date],
        MonthlyTotals(),
    ).result


def _monthly_totals(
    accounts: Any,
    transactions: Any,
    reference_date: Any,
    today: date,
    telemetry: Telemetry,
) -> MonthlyTotals:
    reference = resolve_reference_date(reference_date, today)
    accounts_by_id = index_accounts(sanitize_accounts(accounts))

    income = []
    expenses = []

    for t in sanitize_transactions(transactions):
        if t.deleted or not in_month(t, reference):
            continue

        if t.type == TransactionType.INCOME:
            value = -t.amount if t.is_refund else t.amount
            income.append(
                safe_currency_conversion(value, resolve_currency(t, accounts_by_id), telemetry)
            )

        elif t.type == TransactionType.EXPENSE:
            if not t.paid_by_me and not t.is_settled:
                continue
            value = _expense_value(t, telemetry)
            if t.is_refund:
                value = -value
            expenses.append(
                safe_currency_conversion(value, resolve_currency(t, accounts_by_id), telemetry)
            )

    places = money_places()
    total_income = round_money(precise_sum(income), places)
    total_expenses = round_money(precise_sum(expenses), places)

    return MonthlyTotals(
        income=total_income,
        expenses=total_expenses,
        net_flow=round_money(precise_subtract(total_income, total_expenses), places),
    )


def _expense_value(t: Transaction, telemetry: Telemetry) -> float:
    """
    Cost of an expense for the month.

    When I paid a shared expense only the shares still owed to me are
    deducted from the amount; settled shares are not.
    """
    if not t.paid_by_me:
        return calculate_effective_transaction_value(t, telemetry)
    if not (t.is_shared or t.shared_with):
        return t.amount

    unsettled = precise_sum(
        max(0.0, split.assigned_amount) for split in t.shared_with if not split.is_settled
    )
    if unsettled > t.amount:
        return t.amount
    return precise_subtract(t.amount, unsettled)


# =============================================================================
# NET WORTH
# =============================================================================

def calculate_net_worth(
    accounts: Any,
    telemetry: Optional[Telemetry] = None,
) -> float:
    """
    Cash-basis net worth of the BRL accounts.

    Liquidity balances count as assets, credit-card balances always as
    liabilities. Investments, receivables and payables are excluded.
    """
    telemetry = ensure_telemetry(telemetry)

    return telemetry.safe_calculate(
        lambda: _net_worth(accounts),
        "calculate_net_worth",
        "net_worth_calculation",
        [accounts],
        0.0,
    ).result


def _net_worth(accounts: Any) -> float:
    contributions = []
    for account in sanitize_accounts(accounts):
        if not is_reporting_currency(account.currency):
            continue
        if account.is_liquidity:
            contributions.append(account.balance)
        elif account.type == AccountType.CREDIT_CARD:
            contributions.append(-abs(account.balance))

    return round_money(precise_sum(contributions), money_places())
