"""
Financial Engines

Pure functions from an account/transaction snapshot to dashboard
aggregates. Every public engine takes an optional `today` and an
optional `Telemetry`, runs inside `Telemetry.safe_calculate` and
returns a zero-valued aggregate instead of raising.
"""

from family_finance.engines.bills import get_upcoming_bills
from family_finance.engines.cashflow import (
    MONTH_LABELS,
    calculate_cash_flow_series,
    has_cash_flow_data,
)
from family_finance.engines.effective_value import calculate_effective_transaction_value
from family_finance.engines.health import analyze_financial_health
from family_finance.engines.projection import calculate_projected_balance
from family_finance.engines.sparklines import calculate_sparkline_data
from family_finance.engines.spending import calculate_spending_chart_data, source_label
from family_finance.engines.totals import calculate_monthly_totals, calculate_net_worth

__all__ = [
    "MONTH_LABELS",
    "analyze_financial_health",
    "calculate_cash_flow_series",
    "calculate_effective_transaction_value",
    "calculate_monthly_totals",
    "calculate_net_worth",
    "calculate_projected_balance",
    "calculate_sparkline_data",
    "calculate_spending_chart_data",
    "get_upcoming_bills",
    "has_cash_flow_data",
    "source_label",
]
