"""
Telemetry Models for Family Finance

Every recovered calculation failure becomes a CalculationError.
This provides:
1. Traceability of where invalid numbers come from
2. A data-quality signal the dashboard can surface
3. Health reports for diagnosis

DESIGN DECISION: Errors are append-only records in a bounded buffer.
They never drive control flow; severity only decides the log level.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Optional, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


def _new_error_id() -> str:
    return f"error-{uuid4().hex[:12]}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErrorType(str, Enum):
    """Taxonomy of calculation failures."""
    NAN_DETECTED = "NaN_DETECTED"            # A numeric result was NaN
    INVALID_INPUT = "INVALID_INPUT"          # A record failed validation
    CALCULATION_ERROR = "CALCULATION_ERROR"  # An operation raised
    DATA_CORRUPTION = "DATA_CORRUPTION"      # Aggregate-level inconsistency


class ErrorSeverity(str, Enum):
    """Severity of a calculation error. Drives log level only."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class CalculationError(BaseModel):
    """
    A single recovered calculation failure.

    `inputs` are already sanitized for logging when the record is built
    through Telemetry.log_error.
    """

    id: str = Field(default_factory=_new_error_id)
    timestamp: datetime = Field(
        default_factory=utcnow,
        description="When the error was recorded (UTC)"
    )

    type: ErrorType
    severity: ErrorSeverity = ErrorSeverity.MEDIUM

    source: str = Field(..., description="Function or component that failed")
    operation: str = Field(..., description="Operation name inside the source")
    inputs: list[Any] = Field(default_factory=list)

    message: str = Field(..., max_length=1000)
    stack_trace: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "error_id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "error_type": self.type.value,
            "severity": self.severity.value,
            "source": self.source,
            "operation": self.operation,
            "message": self.message,
            "inputs": self.inputs,
            "metadata": self.metadata,
        }


class ErrorSourceCount(BaseModel):
    """One entry of the top-error-sources ranking."""

    source: str
    count: int = Field(ge=0)
    percentage: float = Field(ge=0.0, le=100.0)


class OperationSummary(BaseModel):
    total_operations: int = Field(default=0, ge=0)
    successful_operations: int = Field(default=0, ge=0)
    error_count: int = Field(default=0, ge=0)
    error_rate: float = Field(default=0.0, ge=0.0, le=100.0)


class HealthReport(BaseModel):
    """
    Health of the calculation layer over a time window.

    `data_quality_score` is 100 minus twice the error rate, floored at 0.
    """

    model_config = ConfigDict(populate_by_name=True)

    timestamp: datetime = Field(default_factory=utcnow)
    period_start: datetime
    period_end: datetime

    summary: OperationSummary = Field(default_factory=OperationSummary)
    errors_by_type: dict[str, int] = Field(default_factory=dict)
    errors_by_severity: dict[str, int] = Field(default_factory=dict)
    top_error_sources: list[ErrorSourceCount] = Field(default_factory=list)

    recommendations: list[str] = Field(default_factory=list)
    data_quality_score: float = Field(default=100.0, ge=0.0, le=100.0)


class CalculationMetadata(BaseModel):
    inputs_validated: bool = False
    fallbacks_used: int = Field(default=0, ge=0)
    calculation_time: float = Field(
        default=0.0,
        ge=0.0,
        description="Wall time of the operation in milliseconds"
    )


class SafeCalculationResult(BaseModel, Generic[T]):
    """
    Outcome of Telemetry.safe_calculate.

    `result` is the genuine result on success and the caller's fallback
    otherwise; it is always usable.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    result: T
    errors: list[CalculationError] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    metadata: CalculationMetadata = Field(default_factory=CalculationMetadata)
