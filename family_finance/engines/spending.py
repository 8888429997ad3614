"""
Spending Aggregation

Expense totals grouped by category or by money source, largest first.
Only positive totals are kept (a category that was fully refunded
disappears from the chart).
"""

from typing import Any, Optional

from family_finance.engines.base import index_accounts, money_places, resolve_currency
from family_finance.engines.effective_value import calculate_effective_transaction_value
from family_finance.models.dashboard import SpendingSlice, SpendingView
from family_finance.models.domain import Account, AccountType, TransactionType
from family_finance.safety.currency import safe_currency_conversion
from family_finance.safety.numbers import precise_sum, round_money
from family_finance.telemetry import Telemetry, ensure_telemetry
from family_finance.validation.sanitizer import sanitize_accounts, sanitize_transactions

SOURCE_LABELS = {
    AccountType.CREDIT_CARD: "Credit Card",
    AccountType.CHECKING: "Bank Account",
    AccountType.SAVINGS: "Bank Account",
    AccountType.CASH: "Cash",
}
OTHER_SOURCE = "Other"


def source_label(account: Optional[Account]) -> str:
    """Chart label of the account an expense was paid from."""
    if account is None or account.type is None:
        return OTHER_SOURCE
    return SOURCE_LABELS.get(account.type, OTHER_SOURCE)


def calculate_spending_chart_data(
    transactions: Any,
    accounts: Any,
    spending_view: Any = SpendingView.CATEGORY,
    telemetry: Optional[Telemetry] = None,
) -> list[SpendingSlice]:
    """Expense slices for the given grouping; empty list if it fails."""
    telemetry = ensure_telemetry(telemetry)

    return telemetry.safe_calculate(
        lambda: _spending(transactions, accounts, SpendingView.parse(spending_view), telemetry),
        "calculate_spending_chart_data",
        "spending_chart_calculation",
        [transactions, accounts, str(spending_view)],
        [],
    ).result


def _spending(
    transactions: Any,
    accounts: Any,
    view: SpendingView,
    telemetry: Telemetry,
) -> list[SpendingSlice]:
    accounts_by_id = index_accounts(sanitize_accounts(accounts))

    groups: dict[str, list[float]] = {}
    for t in sanitize_transactions(transactions):
        if t.type != TransactionType.EXPENSE:
            continue

        value = t.amount
        if t.is_shared and not t.paid_by_me:
            value = calculate_effective_transaction_value(t, telemetry)
        value = safe_currency_conversion(value, resolve_currency(t, accounts_by_id), telemetry)
        if t.is_refund:
            value = -value

        if view == SpendingView.SOURCE:
            account = accounts_by_id.get(t.account_id) if t.account_id else None
            key = source_label(account)
        else:
            key = t.category
        groups.setdefault(key, []).append(value)

    places = money_places()
    slices = [
        SpendingSlice(name=name, value=round_money(precise_sum(values), places))
        for name, values in groups.items()
    ]
    return sorted(
        (item for item in slices if item.value > 0),
        key=lambda item: item.value,
        reverse=True,
    )
