"""
Numeric Safety Primitives

Every function in this module is total: it is defined for any input and
always returns a finite number (or the caller's fallback).

DESIGN DECISION: Monetary accumulation goes through `decimal.Decimal`
with ROUND_HALF_UP at two places, so long chains of additions never
drift (0.1 + 0.2 is 0.3 here). Results are handed back as floats, which
is what the read-model and the charts consume.
"""

import math
import re
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Any, Callable, Iterable, TypeVar

import structlog

T = TypeVar("T")

MONEY_PLACES = 2

# Wide enough to quantize any finite float to cents
_MONEY_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)

# Leading numeric prefix, the way a lenient float parser reads "12.5abc"
_NUMERIC_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

logger = structlog.get_logger(__name__)


# =============================================================================
# CONVERSION
# =============================================================================

def to_safe_number(value: Any, fallback: float = 0) -> float:
    """
    Convert any value to a finite float.

    - str: leading numeric prefix parsed, fallback if there is none
    - int/float/Decimal: itself if finite, fallback otherwise
    - bool: 1 or 0
    - None, containers, objects: fallback
    """
    if value is None:
        return fallback

    # bool first: it is an int subclass
    if isinstance(value, bool):
        return 1.0 if value else 0.0

    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value.strip())
        if match is None:
            return fallback
        return _finite_or(match.group(0), fallback)

    if isinstance(value, (int, float, Decimal)):
        return _finite_or(value, fallback)

    return fallback


def _finite_or(value: Any, fallback: float) -> float:
    try:
        number = float(value)
    except (OverflowError, ValueError, InvalidOperation):
        return fallback
    return number if math.isfinite(number) else fallback


def is_finite_number(value: Any) -> bool:
    """True for real numbers (not bools) that are neither NaN nor infinite."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return False
    return _finite_or(value, math.nan) == _finite_or(value, math.nan)


# =============================================================================
# MONETARY PRECISION
# =============================================================================

def _to_decimal(value: Any) -> Decimal:
    return Decimal(repr(to_safe_number(value)))


def _quantum(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


def _to_money(value: Decimal, places: int) -> float:
    """Quantized float; 0 when the result overflows a float."""
    return _finite_or(value.quantize(_quantum(places), context=_MONEY_CONTEXT), 0.0)


def round_money(value: Any, places: int = MONEY_PLACES) -> float:
    """Round to `places` decimals, half away from zero."""
    return _to_money(_to_decimal(value), places)


def precise_sum(values: Iterable[Any], places: int = MONEY_PLACES) -> float:
    """Sum monetary values without floating drift."""
    total = Decimal(0)
    for value in values:
        total = _MONEY_CONTEXT.add(total, _to_decimal(value))
    return _to_money(total, places)


def precise_subtract(a: Any, b: Any, places: int = MONEY_PLACES) -> float:
    """a - b, rounded to `places` decimals."""
    difference = _MONEY_CONTEXT.subtract(_to_decimal(a), _to_decimal(b))
    return _to_money(difference, places)


# =============================================================================
# AGGREGATES
# =============================================================================

def safe_sum(values: Any, log_invalid: bool = True) -> float:
    """
    Sum anything list-like, coercing each element with `to_safe_number`.

    Non-list input and empty lists sum to 0.
    """
    if not isinstance(values, (list, tuple)) or not values:
        return 0.0

    invalid = [
        {"index": index, "original": repr(value)}
        for index, value in enumerate(values)
        if isinstance(value, float) and not math.isfinite(value)
    ]
    if log_invalid and invalid:
        logger.warning("safe_sum_invalid_values", invalid=invalid)

    return precise_sum(to_safe_number(value) for value in values)


def safe_average(values: Any) -> float:
    """Mean of the coerced values, 0 for empty input."""
    if not isinstance(values, (list, tuple)) or not values:
        return 0.0
    return safe_sum(values, log_invalid=False) / len(values)


def safe_percentage(part: Any, total: Any) -> float:
    """(part / total) * 100, or 0 when total is 0. May be negative."""
    safe_part = to_safe_number(part)
    safe_total = to_safe_number(total)

    if safe_total == 0:
        return 0.0

    return to_safe_number((safe_part / safe_total) * 100)


# =============================================================================
# OPERATION BOUNDARY
# =============================================================================

def safe_operation(
    operation: Callable[[], T],
    fallback: T,
    context: str = "unknown",
) -> T:
    """
    Run `operation`, returning `fallback` if it raises or produces a
    non-finite number.
    """
    try:
        result = operation()
    except Exception as e:
        logger.warning("safe_operation_failed", context=context, error=str(e))
        return fallback

    if isinstance(result, (float, Decimal)) and not is_finite_number(result):
        logger.warning("safe_operation_invalid_number", context=context, result=repr(result))
        return fallback

    return result
