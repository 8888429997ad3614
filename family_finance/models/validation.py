"""
Validation Models

Validators classify problems; they never raise and never edit the input.
A result always carries a sanitized record that is safe to calculate on.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from family_finance.models.domain import Account, Transaction


class ValidationIssue(BaseModel):
    """A single problem found on one field of a record."""

    field: str = Field(..., description="Field with the issue")
    issue_type: str = Field(
        ...,
        description="Kind of issue (e.g., 'missing', 'not_finite', 'split_overflow')"
    )
    message: str = Field(..., description="Human-readable description of the issue")
    severity: str = Field(
        default="error",
        pattern="^(error|warning)$",
    )
    original_value: Any = None
    suggested_value: Any = None

    def describe(self) -> str:
        return f"{self.field}: {self.message}"


class RecordValidationResult(BaseModel):
    """Common shape of per-record validation results."""

    is_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")


class AccountValidationResult(RecordValidationResult):
    sanitized_account: Account


class TransactionValidationResult(RecordValidationResult):
    sanitized_transaction: Transaction


class BatchValidationResult(BaseModel):
    """
    Validation of a whole list of records.

    `errors` flattens every issue as "field: message".
    """

    is_valid: bool
    total_count: int = Field(default=0, ge=0)
    valid_count: int = Field(default=0, ge=0)
    invalid_count: int = Field(default=0, ge=0)
    errors: list[str] = Field(default_factory=list)
    results: list[RecordValidationResult] = Field(default_factory=list)


class AccountBatchValidation(BatchValidationResult):
    sanitized_accounts: list[Account] = Field(default_factory=list)


class TransactionBatchValidation(BatchValidationResult):
    sanitized_transactions: list[Transaction] = Field(default_factory=list)


class FinancialDataSummary(BaseModel):
    total_transactions: int = 0
    valid_transactions: int = 0
    total_accounts: int = 0
    valid_accounts: int = 0
    total_errors: int = 0


class FinancialDataValidation(BaseModel):
    """Validation of a full snapshot (accounts and transactions)."""

    accounts: Optional[AccountBatchValidation] = None
    transactions: Optional[TransactionBatchValidation] = None
    overall_valid: bool = True
    summary: FinancialDataSummary = Field(default_factory=FinancialDataSummary)
