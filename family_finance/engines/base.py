"""Helpers shared by the engines."""

from datetime import date
from typing import Optional

from family_finance.config import get_settings
from family_finance.models.domain import Account, Transaction
from family_finance.safety.currency import REPORTING_CURRENCY, normalize_currency_code


def index_accounts(accounts: list[Account]) -> dict[str, Account]:
    return {account.id: account for account in accounts if account.id}


def resolve_currency(transaction: Transaction, accounts_by_id: dict[str, Account]) -> str:
    """Transaction currency, else the owning account's, else BRL."""
    if transaction.currency:
        return normalize_currency_code(transaction.currency)
    account = accounts_by_id.get(transaction.account_id) if transaction.account_id else None
    if account is not None:
        return normalize_currency_code(account.currency)
    return REPORTING_CURRENCY


def in_month(transaction: Transaction, reference: date) -> bool:
    booked = transaction.calendar_date
    return booked is not None and booked.year == reference.year and booked.month == reference.month


def money_places() -> int:
    return get_settings().dashboard.money_decimal_places


def resolve_today(today: Optional[date]) -> date:
    return today or date.today()
