"""
Projected Balance

Liquidity today and where it lands at the end of the viewed month.

Time window: from today through the end of the month containing the
reference date. Only transactions dated in that month are considered,
and only those dated after today count as pending cash flow.

Shared debts inside the month are counted regardless of their date,
since settling a debt does not follow the transaction date:
- I paid and others owe me: their unsettled shares are pending income
- Someone else paid and I have not settled: the amount is a pending expense
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
from family_finance.models.dashboard import ProjectedBalance
from family_finance.models.domain import Account, Transaction, TransactionType
from family_finance.safety.currency import is_reporting_currency, safe_currency_conversion
from family_finance.safety.dates import resolve_reference_date
from family_finance.safety.numbers import precise_sum, round_money, safe_operation, to_safe_number
from family_finance.telemetry import Telemetry, ensure_telemetry
from family_finance.validation.sanitizer import sanitize_accounts, sanitize_transactions


def calculate_projected_balance(
    accounts: Any,
    transactions: Any,
    reference_date: Any,
    today: Optional[date] = None,
    telemetry: Optional[Telemetry] = None,
) -> ProjectedBalance:
    """
    Current liquidity plus pending income minus pending expenses.

    Liquidity accounts are CHECKING, SAVINGS and CASH; credit cards and
    investments are excluded. All amounts are converted to BRL.
    """
    telemetry = ensure_telemetry(telemetry)
    today = resolve_today(today)

    return telemetry.safe_calculate(
        lambda: _projected_balance(accounts, transactions, reference_date, today, telemetry),
        "calculate_projected_balance",
        "projected_balance_calculation",
        [accounts, transactions, reference_date],
        ProjectedBalance(),
    ).result


def _projected_balance(
    accounts: Any,
    transactions: Any,
    reference_date: Any,
    today: date,
    telemetry: Telemetry,
) -> ProjectedBalance:
    safe_accounts = sanitize_accounts(accounts)
    reference = resolve_reference_date(reference_date, today)
    accounts_by_id = index_accounts(safe_accounts)

    liquidity_accounts = [account for account in safe_accounts if account.is_liquidity]
    liquidity_ids = {account.id for account in liquidity_accounts if account.id}

    current_balance = precise_sum(
        safe_currency_conversion(account.balance, account.currency, telemetry)
        for account in liquidity_accounts
    )

    def to_brl(amount: float, t: Transaction) -> float:
        rate = to_safe_number(t.exchange_rate)
        if rate > 0:
            return safe_operation(lambda: amount * rate, amount, "exchange_rate_conversion")
        return safe_currency_conversion(amount, resolve_currency(t, accounts_by_id), telemetry)

    pending_income = []
    pending_expenses = []

    for t in sanitize_transactions(transactions):
        if t.deleted or not in_month(t, reference):
            continue

        amount = t.amount
        foreign = bool(t.currency) and not is_reporting_currency(t.currency)

        if t.has_shared_context and t.type == TransactionType.EXPENSE and not foreign:
            if t.paid_by_me:
                receivable = precise_sum(
                    split.assigned_amount for split in t.shared_with if not split.is_settled
                )
                if receivable > 0:
                    pending_income.append(to_brl(receivable, t))
            elif not t.is_settled:
                pending_expenses.append(to_brl(amount, t))

        # Paid by someone else: a debt, never a movement of my own cash
        if t.type == TransactionType.EXPENSE and not t.paid_by_me:
            continue

        if t.calendar_date <= today:
            continue

        if t.type == TransactionType.TRANSFER:
            source_liquid = t.account_id in liquidity_ids
            destination_liquid = t.destination_account_id in liquidity_ids

            if source_liquid and not destination_liquid:
                # e.g. paying a credit card bill
                pending_expenses.append(to_brl(amount, t))
            elif destination_liquid and not source_liquid:
                pending_income.append(_incoming_transfer_value(t, accounts_by_id, to_brl, telemetry))
            continue

        if t.account_id not in liquidity_ids:
            continue
        if t.type == TransactionType.INCOME:
            pending_income.append(to_brl(amount, t))
        elif t.type == TransactionType.EXPENSE:
            pending_expenses.append(to_brl(amount, t))

    total_income = precise_sum(pending_income)
    total_expenses = precise_sum(pending_expenses)
    projected = safe_operation(
        lambda: precise_sum([current_balance, total_income, -total_expenses]),
        current_balance,
        "projected_balance_final_calculation",
    )

    places = money_places()
    return ProjectedBalance(
        current_balance=round_money(current_balance, places),
        projected_balance=round_money(projected, places),
        pending_income=round_money(total_income, places),
        pending_expenses=round_money(total_expenses, places),
    )


def _incoming_transfer_value(
    t: Transaction,
    accounts_by_id: dict[str, Account],
    to_brl,
    telemetry: Telemetry,
) -> float:
    """Destination amount in the destination currency, else the source amount."""
    destination_amount = to_safe_number(t.destination_amount)
    if destination_amount > 0:
        destination = accounts_by_id.get(t.destination_account_id)
        currency = destination.currency if destination is not None else None
        return safe_currency_conversion(destination_amount, currency, telemetry)
    return to_brl(t.amount, t)
