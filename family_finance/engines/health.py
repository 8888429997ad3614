"""
Financial Health Classification

POSITIVE, WARNING or CRITICAL from income against expenses:
- no income: CRITICAL if anything was spent, POSITIVE otherwise
- spending more than earning: CRITICAL
- saving less than the warning threshold (10% by default): WARNING
"""

from typing import Any, Optional

from family_finance.config import get_settings
from family_finance.models.dashboard import HealthStatus
from family_finance.safety.numbers import safe_operation, to_safe_number
from family_finance.telemetry import Telemetry, ensure_telemetry


def analyze_financial_health(
    income: Any,
    expenses: Any,
    telemetry: Optional[Telemetry] = None,
) -> HealthStatus:
    telemetry = ensure_telemetry(telemetry)

    return telemetry.safe_calculate(
        lambda: _classify(income, expenses),
        "analyze_financial_health",
        "financial_health_analysis",
        [income, expenses],
        HealthStatus.CRITICAL,
    ).result


def _classify(income: Any, expenses: Any) -> HealthStatus:
    safe_income = to_safe_number(income)
    safe_expenses = to_safe_number(expenses)

    if safe_income == 0:
        return HealthStatus.CRITICAL if safe_expenses > 0 else HealthStatus.POSITIVE

    saving_rate = safe_operation(
        lambda: (safe_income - safe_expenses) / safe_income,
        0.0,
        "saving_rate_calculation",
    )

    if saving_rate < 0:
        return HealthStatus.CRITICAL
    if saving_rate < get_settings().dashboard.saving_rate_warning_threshold:
        return HealthStatus.WARNING
    return HealthStatus.POSITIVE
