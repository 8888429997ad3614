"""
Data Models Package

This package contains all Pydantic models used by the calculation core.
Raw input is coerced into these types at the boundary; engines only ever
see typed records.
"""

from family_finance.models.domain import (
    LIQUIDITY_ACCOUNT_TYPES,
    ME,
    Account,
    AccountType,
    SharedSplit,
    Transaction,
    TransactionType,
    Trip,
)
from family_finance.models.telemetry import (
    CalculationError,
    CalculationMetadata,
    ErrorSeverity,
    ErrorSourceCount,
    ErrorType,
    HealthReport,
    OperationSummary,
    SafeCalculationResult,
)
from family_finance.models.validation import (
    AccountBatchValidation,
    AccountValidationResult,
    BatchValidationResult,
    FinancialDataSummary,
    FinancialDataValidation,
    TransactionBatchValidation,
    TransactionValidationResult,
    ValidationIssue,
)
from family_finance.models.dashboard import (
    CashFlowPoint,
    DashboardReadModel,
    ExtendedDashboardReadModel,
    HealthStatus,
    MonthlyTotals,
    ProjectedBalance,
    SpendingSlice,
    SpendingView,
    ValidationSummary,
)

__all__ = [
    # Domain models
    "LIQUIDITY_ACCOUNT_TYPES",
    "ME",
    "Account",
    "AccountType",
    "SharedSplit",
    "Transaction",
    "TransactionType",
    "Trip",
    # Telemetry models
    "CalculationError",
    "CalculationMetadata",
    "ErrorSeverity",
    "ErrorSourceCount",
    "ErrorType",
    "HealthReport",
    "OperationSummary",
    "SafeCalculationResult",
    # Validation models
    "AccountBatchValidation",
    "AccountValidationResult",
    "BatchValidationResult",
    "FinancialDataSummary",
    "FinancialDataValidation",
    "TransactionBatchValidation",
    "TransactionValidationResult",
    "ValidationIssue",
    # Read-model
    "CashFlowPoint",
    "DashboardReadModel",
    "ExtendedDashboardReadModel",
    "HealthStatus",
    "MonthlyTotals",
    "ProjectedBalance",
    "SpendingSlice",
    "SpendingView",
    "ValidationSummary",
]
