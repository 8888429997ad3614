"""
Currency Conversion

Static table of multipliers to the reporting currency (BRL).

DESIGN DECISION: Rates are a lookup table, not a market feed. An unknown
code keeps multiplier 1 (the amount is treated as already in BRL), but
the miss is logged and, when a Telemetry is supplied, recorded as a LOW
INVALID_INPUT event so it shows up in the data-quality report.
"""

from typing import TYPE_CHECKING, Any, Optional

import structlog

from family_finance.config import get_settings
from family_finance.safety.numbers import safe_operation, to_safe_number

if TYPE_CHECKING:
    from family_finance.telemetry import Telemetry

REPORTING_CURRENCY = "BRL"

# Currency code -> BRL multiplier
BRL_RATES: dict[str, float] = {
    "BRL": 1.0,
    "USD": 5.0,
    "EUR": 5.4,
    "GBP": 6.3,
    "CHF": 5.6,
    "CAD": 3.7,
    "AUD": 3.3,
    "JPY": 0.033,
    "ARS": 0.0055,
    "CLP": 0.0053,
    "MXN": 0.29,
    "UYU": 0.13,
    "PYG": 0.00069,
}

logger = structlog.get_logger(__name__)


def normalize_currency_code(code: Any, default: str = REPORTING_CURRENCY) -> str:
    """Upper-case, stripped code; `default` for blanks and non-strings."""
    if not isinstance(code, str) or not code.strip():
        return default
    return code.strip().upper()


def is_reporting_currency(code: Any) -> bool:
    """A missing code counts as the reporting currency."""
    return normalize_currency_code(code) == REPORTING_CURRENCY


def get_rates() -> dict[str, float]:
    """Static table merged with configured overrides."""
    rates = dict(BRL_RATES)
    rates.update(get_settings().currency.rate_overrides)
    return rates


def get_rate(code: Any, telemetry: Optional["Telemetry"] = None) -> float:
    """Multiplier to BRL for `code`. Unknown codes return 1."""
    normalized = normalize_currency_code(code)
    rates = get_rates()

    if normalized in rates:
        return rates[normalized]

    if get_settings().currency.flag_unknown_currencies:
        logger.warning("unknown_currency_code", currency=normalized)
        if telemetry is not None:
            from family_finance.models.telemetry import ErrorSeverity, ErrorType

            telemetry.log_error(
                ErrorType.INVALID_INPUT,
                "currency",
                "rate_lookup",
                [normalized],
                f"Unknown currency code {normalized!r}, treated as {REPORTING_CURRENCY}",
                ErrorSeverity.LOW,
            )
    return 1.0


def convert_to_brl(amount: Any, code: Any, telemetry: Optional["Telemetry"] = None) -> float:
    """amount * rate(code). A product that overflows a float is 0."""
    return to_safe_number(to_safe_number(amount) * get_rate(code, telemetry))


def safe_currency_conversion(
    amount: Any,
    code: Any,
    telemetry: Optional["Telemetry"] = None,
) -> float:
    """`convert_to_brl`, falling back to the unconverted amount."""
    safe_amount = to_safe_number(amount)
    return safe_operation(
        lambda: convert_to_brl(safe_amount, code, telemetry),
        safe_amount,
        "currency_conversion",
    )
