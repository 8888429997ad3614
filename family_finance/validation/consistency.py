"""
Dataset Consistency Checks

Cross-record checks that no single-record validator can make: orphaned
transactions, transfers pointing at unknown accounts, cross-currency
transfers without a destination amount. Deleted transactions are
skipped. Returns human-readable messages; raises nothing.
"""

from typing import Any

from family_finance.config import get_settings
from family_finance.models.domain import TransactionType
from family_finance.safety.currency import normalize_currency_code
from family_finance.safety.numbers import precise_sum
from family_finance.validation.sanitizer import sanitize_accounts, sanitize_transactions


def check_data_consistency(accounts: Any, transactions: Any) -> list[str]:
    """List of consistency problems found in the snapshot."""
    safe_accounts = sanitize_accounts(accounts)
    accounts_by_id = {account.id: account for account in safe_accounts if account.id}
    tolerance = get_settings().dashboard.split_tolerance

    issues = []
    for t in sanitize_transactions(transactions):
        if t.deleted:
            continue

        label = f"{t.description or '(no description)'} - transaction {t.id or '?'}"

        # Shared records paid by someone else may not have an account yet
        shared_pending = t.is_shared or not t.paid_by_me
        if (not t.account_id or t.account_id not in accounts_by_id) and not shared_pending:
            issues.append(f"Orphan transaction: {label} (unknown account)")

        if t.amount <= 0:
            issues.append(f"Invalid amount: {label} (amount {t.amount})")

        if t.shared_with:
            splits_total = precise_sum(split.assigned_amount for split in t.shared_with)
            if splits_total > t.amount + tolerance:
                issues.append(f"Incorrect split: {label} (parts exceed the total)")

        if t.type == TransactionType.TRANSFER:
            destination_id = t.destination_account_id
            if not destination_id or destination_id not in accounts_by_id:
                issues.append(f"Inconsistent transfer: {label} (unknown destination account)")
            if t.account_id == destination_id:
                issues.append(f"Circular transfer: {label} (source equals destination)")

            source = accounts_by_id.get(t.account_id)
            destination = accounts_by_id.get(destination_id)
            if (
                source is not None
                and destination is not None
                and normalize_currency_code(source.currency) != normalize_currency_code(destination.currency)
                and not (t.destination_amount or 0) > 0
            ):
                issues.append(f"Incomplete multi-currency transfer: {label} (no destination amount)")

    return issues
