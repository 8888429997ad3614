"""
Bulk Sanitizers

Coerce whole lists of records. Records are never dropped: a list of N
raw records always yields N typed records, in the same order, with bad
numeric fields replaced by safe values and every other field kept.
"""

from typing import Any

from family_finance.models.domain import Account, Transaction, Trip
from family_finance.validation.boundary import (
    as_record_list,
    coerce_account,
    coerce_transaction,
    coerce_trip,
)


def sanitize_accounts(accounts: Any) -> list[Account]:
    """Typed accounts; non-list input gives an empty list."""
    return [coerce_account(account) for account in as_record_list(accounts)]


def sanitize_transactions(transactions: Any) -> list[Transaction]:
    """Typed transactions; non-list input gives an empty list."""
    return [coerce_transaction(transaction) for transaction in as_record_list(transactions)]


def sanitize_trips(trips: Any) -> list[Trip]:
    return [coerce_trip(trip) for trip in as_record_list(trips)]
