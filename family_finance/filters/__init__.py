"""Visibility and eligibility predicates."""

from family_finance.filters.visibility import (
    filter_dashboard_transactions,
    get_visible_transactions,
    is_foreign_transaction,
    is_unpaid_debt,
    should_show_transaction,
)

__all__ = [
    "filter_dashboard_transactions",
    "get_visible_transactions",
    "is_foreign_transaction",
    "is_unpaid_debt",
    "should_show_transaction",
]
