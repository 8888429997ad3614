"""Numeric safety primitives, monetary precision, dates and currency."""

from family_finance.safety.currency import (
    BRL_RATES,
    REPORTING_CURRENCY,
    convert_to_brl,
    get_rate,
    is_reporting_currency,
    normalize_currency_code,
    safe_currency_conversion,
)
from family_finance.safety.dates import (
    end_of_month,
    is_same_month,
    parse_calendar_date,
    resolve_reference_date,
)
from family_finance.safety.numbers import (
    is_finite_number,
    precise_subtract,
    precise_sum,
    round_money,
    safe_average,
    safe_operation,
    safe_percentage,
    safe_sum,
    to_safe_number,
)

__all__ = [
    # Numbers
    "is_finite_number",
    "precise_subtract",
    "precise_sum",
    "round_money",
    "safe_average",
    "safe_operation",
    "safe_percentage",
    "safe_sum",
    "to_safe_number",
    # Dates
    "end_of_month",
    "is_same_month",
    "parse_calendar_date",
    "resolve_reference_date",
    # Currency
    "BRL_RATES",
    "REPORTING_CURRENCY",
    "convert_to_brl",
    "get_rate",
    "is_reporting_currency",
    "normalize_currency_code",
    "safe_currency_conversion",
]
