"""
Visibility and Eligibility Filters

Decide which transactions a view may show and which belong to the
BRL-only dashboard. Pure predicates over typed records; raw records are
coerced first.
"""

from typing import Any, Optional

from family_finance.models.domain import Account, Transaction
from family_finance.safety.currency import is_reporting_currency
from family_finance.validation.boundary import coerce_transaction
from family_finance.validation.sanitizer import (
    sanitize_accounts,
    sanitize_transactions,
    sanitize_trips,
)


def is_unpaid_debt(transaction: Any) -> bool:
    """Someone else paid and I have not settled with them yet."""
    t = coerce_transaction(transaction)
    return not t.paid_by_me and not t.is_settled


def should_show_transaction(transaction: Any) -> bool:
    """
    Whether a transaction appears in lists, extracts and reports.

    Hidden: deleted records, unsettled imported card invoices, unpaid
    debts (they live in the shared view until settled) and records
    without an account, unless they are shared records paid by someone
    else.
    """
    t = coerce_transaction(transaction)

    if t.deleted:
        return False
    if t.is_pending_invoice and not t.is_settled:
        return False
    if not t.paid_by_me and not t.is_settled:
        return False
    if not t.account_id and not t.is_shared_pending:
        return False
    return True


def get_visible_transactions(transactions: Any) -> list[Transaction]:
    return [t for t in sanitize_transactions(transactions) if should_show_transaction(t)]


def is_foreign_transaction(transaction: Any, accounts: Any) -> bool:
    """
    Whether a transaction belongs outside the reporting-currency view.

    Foreign when its own currency is set to something else, or when its
    owning or destination account holds another currency, even if the
    transaction itself carries no currency.
    """
    return _is_foreign(coerce_transaction(transaction), _index_accounts(accounts))


def _is_foreign(t: Transaction, accounts_by_id: dict[str, Account]) -> bool:
    if t.currency and not is_reporting_currency(t.currency):
        return True
    for account_id in (t.account_id, t.destination_account_id):
        account = accounts_by_id.get(account_id) if account_id else None
        if account is not None and not is_reporting_currency(account.currency):
            return True
    return False


def filter_dashboard_transactions(
    transactions: Any,
    accounts: Any,
    trips: Optional[Any] = None,
) -> list[Transaction]:
    """
    Transactions of the BRL dashboard.

    Drops deleted and foreign transactions, and those linked to a trip
    held in another currency.
    """
    accounts_by_id = _index_accounts(accounts)
    trip_currencies = {
        trip.id: trip.currency for trip in sanitize_trips(trips) if trip.id
    }

    dashboard = []
    for t in sanitize_transactions(transactions):
        if t.deleted:
            continue
        if _is_foreign(t, accounts_by_id):
            continue
        trip_currency = trip_currencies.get(t.trip_id) if t.trip_id else None
        if trip_currency and not is_reporting_currency(trip_currency):
            continue
        dashboard.append(t)
    return dashboard


def _index_accounts(accounts: Any) -> dict[str, Account]:
    return {account.id: account for account in sanitize_accounts(accounts) if account.id}
