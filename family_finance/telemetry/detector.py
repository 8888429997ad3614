"""
Calculation Error Detector

DESIGN DECISION: Every engine call runs inside `Telemetry.safe_calculate`.
This provides:
1. One error boundary for the whole core (nothing escapes to the UI)
2. NaN detection on every result, however deeply nested
3. A bounded history of recovered failures for health reports
4. Operation/success counters for the data-quality score

Telemetry is a context object, not a module-level singleton: callers
build one per session (or per request) and pass it to the engines.
The buffer and counters are guarded by a lock so one instance can be
shared between threads.
"""

import math
import threading
import time
import traceback
from collections import Counter, deque
from datetime import timedelta
from decimal import Decimal
from typing import Any, Callable, Optional, TypeVar

import structlog
from pydantic import BaseModel

from family_finance.config import TelemetrySettings, get_settings
from family_finance.models.telemetry import (
    CalculationError,
    CalculationMetadata,
    ErrorSeverity,
    ErrorSourceCount,
    ErrorType,
    HealthReport,
    OperationSummary,
    SafeCalculationResult,
    utcnow,
)

T = TypeVar("T")

_SENSITIVE_KEYS = ("password", "secret", "token")


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class Telemetry:
    """
    Error buffer, counters and the safe-calculation wrapper.

    Usage:
        telemetry = Telemetry()
        outcome = telemetry.safe_calculate(
            lambda: compute(accounts), "projection", "current_balance",
            [accounts], fallback=0.0,
        )
        report = telemetry.get_health_report()
    """

    def __init__(self, settings: Optional[TelemetrySettings] = None):
        """
        Initialize telemetry.

        Args:
            settings: Buffer size, logging caps and report window.
                     If None, loaded from the environment.
        """
        self._settings = settings or get_settings().telemetry
        self._errors: deque[CalculationError] = deque(maxlen=self._settings.max_errors)
        self._lock = threading.Lock()
        self._operation_count = 0
        self._success_count = 0
        self._logger = structlog.get_logger("family_finance.telemetry")

    @property
    def operation_count(self) -> int:
        return self._operation_count

    @property
    def success_count(self) -> int:
        return self._success_count

    @property
    def errors(self) -> list[CalculationError]:
        """Snapshot of the buffer, oldest first."""
        with self._lock:
            return list(self._errors)

    # =========================================================================
    # RECORDING
    # =========================================================================

    def detect_and_log(self, error: CalculationError) -> None:
        """
        Append an error to the buffer and log it.

        CRITICAL/HIGH log at error level, MEDIUM at warning, LOW at info.
        The oldest entry is dropped once the buffer is full.
        """
        with self._lock:
            self._errors.append(error)

        log_dict = error.to_log_dict()
        if error.severity in (ErrorSeverity.CRITICAL, ErrorSeverity.HIGH):
            self._logger.error("calculation_error", **log_dict)
        elif error.severity == ErrorSeverity.MEDIUM:
            self._logger.warning("calculation_error", **log_dict)
        else:
            self._logger.info("calculation_error", **log_dict)

    def log_error(
        self,
        error_type: ErrorType,
        source: str,
        operation: str,
        inputs: list[Any],
        message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        metadata: Optional[dict[str, Any]] = None,
    ) -> CalculationError:
        """Build a CalculationError with sanitized inputs and record it."""
        error = CalculationError(
            type=error_type,
            source=source,
            operation=operation,
            inputs=self.sanitize_inputs_for_logging(inputs),
            message=message[:1000],
            severity=severity,
            stack_trace="".join(traceback.format_stack(limit=8)),
            metadata=metadata or {},
        )
        self.detect_and_log(error)
        return error

    def get_recent_errors(self, count: int = 10) -> list[CalculationError]:
        if count <= 0:
            return []
        with self._lock:
            return list(self._errors)[-count:]

    def clear_errors(self) -> None:
        """Reset the buffer and the counters."""
        with self._lock:
            self._errors.clear()
            self._operation_count = 0
            self._success_count = 0

    # =========================================================================
    # DETECTION
    # =========================================================================

    def detect_nan(
        self,
        result: Any,
        source: str,
        operation: str,
        inputs: list[Any],
    ) -> bool:
        """
        Look for NaN anywhere in `result` (numbers, lists, dicts, models).

        Infinity is not NaN and is not flagged here. Logs a HIGH
        NaN_DETECTED error and returns True when one is found.
        """
        if not _contains_nan(result):
            return False

        self.log_error(
            ErrorType.NAN_DETECTED,
            source,
            operation,
            inputs,
            f"NaN detected in {operation} from {source}",
            ErrorSeverity.HIGH,
            {"result": self._sanitize_value(result)},
        )
        return True

    def safe_calculate(
        self,
        operation: Callable[[], T],
        source: str,
        operation_name: str,
        inputs: list[Any],
        fallback: T,
    ) -> SafeCalculationResult[T]:
        """
        Run `operation` and return its result, or `fallback` on failure.

        A failure is either an exception or a NaN anywhere in the result.
        Invalid inputs only produce warnings; the operation still runs.
        """
        started = time.perf_counter()
        warnings, sanitized_count = self._validate_inputs(inputs)

        with self._lock:
            self._operation_count += 1

        try:
            result = operation()
        except Exception as e:
            error = self.log_error(
                ErrorType.CALCULATION_ERROR,
                source,
                operation_name,
                inputs,
                f"Calculation failed: {e}",
                ErrorSeverity.HIGH,
                {"error": str(e), "error_class": type(e).__name__},
            )
            return self._fallback_result(fallback, error, warnings, sanitized_count, started)

        if self.detect_nan(result, source, operation_name, inputs):
            error = self.log_error(
                ErrorType.NAN_DETECTED,
                source,
                operation_name,
                inputs,
                "Operation returned NaN, using fallback value",
                ErrorSeverity.HIGH,
                {"fallback_value": self._sanitize_value(fallback)},
            )
            return self._fallback_result(fallback, error, warnings, sanitized_count, started)

        with self._lock:
            self._success_count += 1

        return SafeCalculationResult(
            success=True,
            result=result,
            warnings=warnings,
            metadata=CalculationMetadata(
                inputs_validated=not warnings,
                fallbacks_used=sanitized_count,
                calculation_time=_elapsed_ms(started),
            ),
        )

    def _fallback_result(
        self,
        fallback: T,
        error: CalculationError,
        warnings: list[str],
        sanitized_count: int,
        started: float,
    ) -> SafeCalculationResult[T]:
        return SafeCalculationResult(
            success=False,
            result=fallback,
            errors=[error],
            warnings=warnings,
            metadata=CalculationMetadata(
                inputs_validated=not warnings,
                fallbacks_used=sanitized_count + 1,
                calculation_time=_elapsed_ms(started),
            ),
        )

    @staticmethod
    def _validate_inputs(inputs: Any) -> tuple[list[str], int]:
        """Warnings for None, non-finite numbers and lists holding them."""
        if not isinstance(inputs, (list, tuple)):
            inputs = [inputs]

        warnings = []
        for index, value in enumerate(inputs):
            if value is None:
                warnings.append(f"Input {index} is null/undefined")
            elif _is_bad_number(value):
                warnings.append(f"Input {index} is invalid number: {value!r}")
            elif isinstance(value, (list, tuple)) and any(_is_bad_number(item) for item in value):
                warnings.append(f"Input {index} array contains invalid numbers")

        return warnings, len(warnings)

    # =========================================================================
    # LOG SANITIZATION
    # =========================================================================

    def sanitize_inputs_for_logging(self, inputs: Any) -> list[Any]:
        """Redact sensitive keys and cap the size of every input."""
        if not isinstance(inputs, (list, tuple)):
            inputs = [inputs]
        return [self._sanitize_value(value) for value in inputs]

    def _sanitize_value(self, value: Any, depth: int = 0) -> Any:
        limit = self._settings.max_logged_fields

        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json", by_alias=True)

        if isinstance(value, dict):
            sanitized = {}
            for key in list(value)[:limit]:
                if any(word in str(key).lower() for word in _SENSITIVE_KEYS):
                    sanitized[key] = self._settings.redacted_placeholder
                elif depth < 2:
                    sanitized[key] = self._sanitize_value(value[key], depth + 1)
                else:
                    sanitized[key] = repr(value[key])[:200]
            return sanitized

        if isinstance(value, (list, tuple)):
            if depth >= 2:
                return f"<{len(value)} items>"
            return [self._sanitize_value(item, depth + 1) for item in list(value)[:limit]]

        if isinstance(value, float) and not math.isfinite(value):
            return repr(value)

        if value is None or isinstance(value, (str, int, float, bool)):
            return value

        return repr(value)[:200]

    # =========================================================================
    # REPORTING
    # =========================================================================

    def get_health_report(self, period_hours: Optional[float] = None) -> HealthReport:
        """
        Summarize the errors recorded in the last `period_hours`.

        errorRate is the share of failed safe_calculate calls since the
        last clear; dataQualityScore = max(0, 100 - errorRate * 2).
        """
        hours = period_hours if period_hours is not None else self._settings.health_report_period_hours
        now = utcnow()
        period_start = now - timedelta(hours=max(0.0, hours))

        with self._lock:
            period_errors = [
                error for error in self._errors
                if period_start <= error.timestamp <= now
            ]
            operation_count = self._operation_count
            success_count = self._success_count

        errors_by_type = dict(Counter(error.type.value for error in period_errors))
        errors_by_severity = dict(Counter(error.severity.value for error in period_errors))
        errors_by_source = Counter(error.source for error in period_errors)

        top_error_sources = [
            ErrorSourceCount(
                source=source,
                count=count,
                percentage=count / len(period_errors) * 100,
            )
            for source, count in errors_by_source.most_common(10)
        ]

        error_rate = 0.0
        if operation_count > 0:
            error_rate = (operation_count - success_count) / operation_count * 100

        return HealthReport(
            timestamp=now,
            period_start=period_start,
            period_end=now,
            summary=OperationSummary(
                total_operations=operation_count,
                successful_operations=success_count,
                error_count=len(period_errors),
                error_rate=error_rate,
            ),
            errors_by_type=errors_by_type,
            errors_by_severity=errors_by_severity,
            top_error_sources=top_error_sources,
            recommendations=_recommendations(
                errors_by_type, errors_by_severity, error_rate, top_error_sources
            ),
            data_quality_score=max(0.0, 100 - error_rate * 2),
        )


def ensure_telemetry(telemetry: Optional[Telemetry]) -> Telemetry:
    """The caller's Telemetry, or a fresh one for a standalone call."""
    return telemetry if telemetry is not None else Telemetry()


# =============================================================================
# HELPERS
# =============================================================================

def _contains_nan(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isnan(value)
    if isinstance(value, Decimal):
        return value.is_nan()
    if isinstance(value, BaseModel):
        return any(_contains_nan(item) for item in value.__dict__.values())
    if isinstance(value, dict):
        return any(_contains_nan(item) for item in value.values())
    if isinstance(value, (list, tuple, set, frozenset)):
        return any(_contains_nan(item) for item in value)
    return False


def _is_bad_number(value: Any) -> bool:
    if isinstance(value, float):
        return not math.isfinite(value)
    if isinstance(value, Decimal):
        return not value.is_finite()
    return False


def _elapsed_ms(started: float) -> float:
    return max(0.0, (time.perf_counter() - started) * 1000)


def _recommendations(
    errors_by_type: dict[str, int],
    errors_by_severity: dict[str, int],
    error_rate: float,
    top_error_sources: list[ErrorSourceCount],
) -> list[str]:
    recommendations = []

    if error_rate > 10:
        recommendations.append(
            "High error rate detected. Consider reviewing data validation processes."
        )
    if errors_by_type.get(ErrorType.NAN_DETECTED.value, 0) > 0:
        recommendations.append(
            "NaN values detected. Review mathematical operations and input validation."
        )
    if errors_by_type.get(ErrorType.INVALID_INPUT.value, 0) > 5:
        recommendations.append(
            "Multiple invalid inputs detected. Strengthen input validation at data entry points."
        )
    if errors_by_severity.get(ErrorSeverity.CRITICAL.value, 0) > 0:
        recommendations.append("Critical errors detected. Immediate investigation required.")
    if top_error_sources and top_error_sources[0].percentage > 50:
        recommendations.append(
            f"Primary error source: {top_error_sources[0].source}. Focus debugging efforts here."
        )
    if errors_by_type.get(ErrorType.DATA_CORRUPTION.value, 0) > 0:
        recommendations.append(
            "Data corruption detected. Review data storage and retrieval processes."
        )

    if not recommendations:
        recommendations.append(
            "Financial calculations are operating normally. Continue monitoring."
        )
    return recommendations
