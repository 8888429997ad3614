"""
Record Validation

DESIGN DECISION: Validation classifies, it does not reject.

- Every issue found on a record is reported as a ValidationIssue
- The result always carries a sanitized record built from the input
- The input is never mutated and nothing is raised

Validators read the RAW field values (not the coerced ones) so that a
NaN balance or a "12abc" amount is reported even though the typed
record would silently hold a safe number.
"""

import math
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any, Optional
from uuid import uuid4

import structlog
from pydantic import BaseModel

from family_finance.config import get_settings
from family_finance.models.domain import AccountType, Transaction, TransactionType
from family_finance.models.validation import (
    AccountBatchValidation,
    AccountValidationResult,
    FinancialDataSummary,
    FinancialDataValidation,
    TransactionBatchValidation,
    TransactionValidationResult,
    ValidationIssue,
)
from family_finance.safety.dates import parse_calendar_date
from family_finance.safety.numbers import precise_sum, to_safe_number
from family_finance.validation.boundary import (
    coerce_account,
    coerce_transaction,
    read_field,
)

logger = structlog.get_logger(__name__)


# =============================================================================
# FIELD CHECKS
# =============================================================================

def _numeric_issue(field: str, value: Any, label: str) -> Optional[ValidationIssue]:
    """Issue for a raw monetary value that is not a usable number."""
    if value is None:
        return ValidationIssue(
            field=field,
            issue_type="missing",
            message=f"{label} cannot be null or undefined",
            original_value=value,
            suggested_value=0,
        )
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        return ValidationIssue(
            field=field,
            issue_type="invalid_type",
            message=f"{label} must be a number or numeric string",
            original_value=repr(value),
            suggested_value=0,
        )
    if isinstance(value, float) and math.isnan(value):
        return ValidationIssue(
            field=field,
            issue_type="not_a_number",
            message=f"{label} cannot be NaN",
            original_value=repr(value),
            suggested_value=0,
        )
    if isinstance(value, (int, float, Decimal)) and math.isnan(to_safe_number(value, math.nan)):
        return ValidationIssue(
            field=field,
            issue_type="not_finite",
            message=f"{label} must be finite",
            original_value=repr(value),
            suggested_value=0,
        )
    if isinstance(value, str) and math.isnan(to_safe_number(value, math.nan)):
        return ValidationIssue(
            field=field,
            issue_type="not_numeric",
            message=f"{label} is not a numeric string",
            original_value=value,
            suggested_value=0,
        )
    return None


def _missing_text(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _missing_identifier(value: Any) -> bool:
    if isinstance(value, int) and not isinstance(value, bool):
        return False
    return _missing_text(value)


def _temporary_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


def is_safe_for_calculation(value: Any) -> bool:
    """True for finite numbers and strings that parse to one."""
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal, str)):
        return not math.isnan(to_safe_number(value, math.nan))
    return False


# =============================================================================
# ACCOUNTS
# =============================================================================

def validate_account(raw: Any) -> AccountValidationResult:
    """
    Validate one raw account.

    Checks: id, balance, currency type, name, account type.
    """
    if raw is None:
        return AccountValidationResult(
            is_valid=False,
            issues=[ValidationIssue(
                field="account",
                issue_type="missing",
                message="Account is null or undefined",
            )],
            sanitized_account=coerce_account({}).model_copy(update={
                "id": _temporary_id("account"),
                "name": "Unnamed Account",
                "type": AccountType.CHECKING,
            }),
        )

    issues = []

    raw_id = read_field(raw, "id")
    if _missing_identifier(raw_id):
        issues.append(ValidationIssue(
            field="id",
            issue_type="missing",
            message="Account ID is required and must be a non-empty string",
            original_value=raw_id,
        ))

    balance_issue = _numeric_issue("balance", read_field(raw, "balance"), "Account balance")
    if balance_issue:
        issues.append(balance_issue)

    raw_currency = read_field(raw, "currency")
    if raw_currency is not None and not isinstance(raw_currency, str):
        issues.append(ValidationIssue(
            field="currency",
            issue_type="invalid_type",
            message="Account currency must be a string",
            original_value=repr(raw_currency),
            suggested_value="BRL",
        ))

    raw_name = read_field(raw, "name")
    if _missing_text(raw_name):
        issues.append(ValidationIssue(
            field="name",
            issue_type="missing",
            message="Account name is required and must be a non-empty string",
            original_value=raw_name,
            suggested_value="Unnamed Account",
        ))

    raw_type = read_field(raw, "type")
    if AccountType.parse(raw_type) is None:
        issues.append(ValidationIssue(
            field="type",
            issue_type="unknown_value",
            message="Account type is required and must be a known account type",
            original_value=repr(raw_type),
            suggested_value=AccountType.CHECKING.value,
        ))

    account = coerce_account(raw)
    updates = {}
    if not account.id:
        updates["id"] = _temporary_id("account")
    if not account.name:
        updates["name"] = "Unnamed Account"
    if account.type is None:
        updates["type"] = AccountType.CHECKING

    return AccountValidationResult(
        is_valid=not issues,
        issues=issues,
        sanitized_account=account.model_copy(update=updates) if updates else account,
    )


# =============================================================================
# TRANSACTIONS
# =============================================================================

def validate_transaction(raw: Any, today: Optional[date] = None) -> TransactionValidationResult:
    """
    Validate one raw transaction.

    Checks: id, amount, sign, date (including non-existent calendar
    days), type, owning account (not required for shared records paid
    by someone else), split consistency, transfer fields, description.
    """
    today = today or date.today()

    if raw is None:
        return TransactionValidationResult(
            is_valid=False,
            issues=[ValidationIssue(
                field="transaction",
                issue_type="missing",
                message="Transaction is null or undefined",
            )],
            sanitized_transaction=coerce_transaction({}).model_copy(update={
                "id": _temporary_id("temp"),
                "type": TransactionType.EXPENSE,
                "date": today.isoformat(),
            }),
        )

    issues = []
    transaction = coerce_transaction(raw)
    safe_amount = transaction.amount

    raw_id = read_field(raw, "id")
    if _missing_identifier(raw_id):
        issues.append(ValidationIssue(
            field="id",
            issue_type="missing",
            message="Transaction ID is required and must be a non-empty string",
            original_value=raw_id,
        ))

    amount_issue = _numeric_issue("amount", read_field(raw, "amount"), "Transaction amount")
    if amount_issue:
        issues.append(amount_issue)

    if safe_amount < 0 and transaction.type != TransactionType.TRANSFER and not transaction.is_refund:
        issues.append(ValidationIssue(
            field="amount",
            issue_type="negative",
            message="Transaction amount should be positive (use the refund flag instead of a sign)",
            original_value=safe_amount,
            suggested_value=abs(safe_amount),
        ))

    raw_date = read_field(raw, "date")
    if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
        issues.append(ValidationIssue(
            field="date",
            issue_type="missing",
            message="Transaction date is required",
            original_value=raw_date,
            suggested_value=today.isoformat(),
        ))
    elif parse_calendar_date(raw_date) is None:
        issues.append(ValidationIssue(
            field="date",
            issue_type="invalid_date",
            message=f"Transaction date is invalid: {raw_date!r} is not a calendar date",
            original_value=repr(raw_date),
            suggested_value=today.isoformat(),
        ))

    raw_type = read_field(raw, "type")
    if transaction.type is None:
        issues.append(ValidationIssue(
            field="type",
            issue_type="unknown_value",
            message="Transaction type is required and must be INCOME, EXPENSE or TRANSFER",
            original_value=repr(raw_type),
            suggested_value=TransactionType.EXPENSE.value,
        ))

    if not transaction.account_id and not transaction.is_shared_pending:
        issues.append(ValidationIssue(
            field="accountId",
            issue_type="missing",
            message="Transaction accountId is required and must be a string",
            original_value=read_field(raw, "account_id"),
        ))

    issues.extend(_split_issues(raw, transaction))

    if transaction.type == TransactionType.TRANSFER:
        issues.extend(_transfer_issues(raw, transaction))

    raw_description = read_field(raw, "description")
    if raw_description is not None and not isinstance(raw_description, str):
        issues.append(ValidationIssue(
            field="description",
            issue_type="invalid_type",
            message="Transaction description must be a string",
            original_value=repr(raw_description),
            suggested_value=str(raw_description),
        ))

    updates = {}
    if not transaction.id:
        updates["id"] = _temporary_id("temp")
    if transaction.type is None:
        updates["type"] = TransactionType.EXPENSE
    if transaction.calendar_date is None:
        updates["date"] = today.isoformat()

    return TransactionValidationResult(
        is_valid=not issues,
        issues=issues,
        sanitized_transaction=transaction.model_copy(update=updates) if updates else transaction,
    )


def _split_issues(raw: Any, transaction: Transaction) -> list[ValidationIssue]:
    raw_splits = read_field(raw, "shared_with")
    if not isinstance(raw_splits, (list, tuple)) or not raw_splits:
        return []

    issues = []
    invalid_splits = []
    for index, split in enumerate(raw_splits):
        if not isinstance(split, (Mapping, BaseModel)):
            invalid_splits.append({"index": index, "reason": "Split is not an object"})
            continue
        if not is_safe_for_calculation(read_field(split, "assigned_amount")):
            invalid_splits.append({"index": index, "reason": "Invalid assignedAmount"})

    if invalid_splits:
        issues.append(ValidationIssue(
            field="sharedWith",
            issue_type="invalid_split",
            message="Some splits have invalid data",
            original_value=invalid_splits,
            suggested_value="Fix split amounts to be valid numbers",
        ))

    tolerance = get_settings().dashboard.split_tolerance
    splits_total = precise_sum(split.assigned_amount for split in transaction.shared_with)
    if splits_total > transaction.amount + tolerance:
        issues.append(ValidationIssue(
            field="sharedWith",
            issue_type="split_overflow",
            message=(
                f"Splits total ({splits_total:.2f}) exceeds transaction amount "
                f"({transaction.amount:.2f}). This will cause incorrect calculations."
            ),
            original_value=splits_total,
            suggested_value=f"Adjust splits proportionally to total exactly {transaction.amount:.2f}",
        ))
        logger.error(
            "split_validation_failed",
            transaction_id=transaction.id,
            transaction_amount=transaction.amount,
            splits_total=splits_total,
            difference=splits_total - transaction.amount,
        )

    return issues


def _transfer_issues(raw: Any, transaction: Transaction) -> list[ValidationIssue]:
    issues = []

    if not transaction.destination_account_id:
        issues.append(ValidationIssue(
            field="destinationAccountId",
            issue_type="missing",
            message="Transfer transactions require a destination account ID",
            original_value=read_field(raw, "destination_account_id"),
        ))
    elif transaction.account_id == transaction.destination_account_id:
        issues.append(ValidationIssue(
            field="destinationAccountId",
            issue_type="circular_transfer",
            message="Transfer destination cannot be the same as source account",
            original_value=transaction.destination_account_id,
        ))

    raw_destination_amount = read_field(raw, "destination_amount")
    if raw_destination_amount is not None and not is_safe_for_calculation(raw_destination_amount):
        issues.append(ValidationIssue(
            field="destinationAmount",
            issue_type="not_numeric",
            message="Transfer destination amount is invalid",
            original_value=repr(raw_destination_amount),
            suggested_value=transaction.destination_amount,
        ))

    return issues


# =============================================================================
# BATCHES
# =============================================================================

def validate_account_array(accounts: Any) -> AccountBatchValidation:
    if not isinstance(accounts, (list, tuple)):
        return AccountBatchValidation(is_valid=False, errors=["Input is not an array"])

    results = [validate_account(account) for account in accounts]
    valid_count = sum(1 for result in results if result.is_valid)

    return AccountBatchValidation(
        is_valid=valid_count == len(results),
        total_count=len(results),
        valid_count=valid_count,
        invalid_count=len(results) - valid_count,
        errors=[issue.describe() for result in results for issue in result.issues],
        results=results,
        sanitized_accounts=[result.sanitized_account for result in results],
    )


def validate_transaction_array(
    transactions: Any,
    today: Optional[date] = None,
) -> TransactionBatchValidation:
    if not isinstance(transactions, (list, tuple)):
        return TransactionBatchValidation(is_valid=False, errors=["Input is not an array"])

    results = [validate_transaction(transaction, today) for transaction in transactions]
    valid_count = sum(1 for result in results if result.is_valid)

    return TransactionBatchValidation(
        is_valid=valid_count == len(results),
        total_count=len(results),
        valid_count=valid_count,
        invalid_count=len(results) - valid_count,
        errors=[issue.describe() for result in results for issue in result.issues],
        results=results,
        sanitized_transactions=[result.sanitized_transaction for result in results],
    )


def validate_financial_data(
    accounts: Any = None,
    transactions: Any = None,
    today: Optional[date] = None,
) -> FinancialDataValidation:
    """Validate a whole snapshot. A missing list is not an error."""
    account_results = validate_account_array(accounts) if accounts is not None else None
    transaction_results = (
        validate_transaction_array(transactions, today) if transactions is not None else None
    )

    return FinancialDataValidation(
        accounts=account_results,
        transactions=transaction_results,
        overall_valid=(
            (account_results.is_valid if account_results else True)
            and (transaction_results.is_valid if transaction_results else True)
        ),
        summary=FinancialDataSummary(
            total_transactions=transaction_results.total_count if transaction_results else 0,
            valid_transactions=transaction_results.valid_count if transaction_results else 0,
            total_accounts=account_results.total_count if account_results else 0,
            valid_accounts=account_results.valid_count if account_results else 0,
            total_errors=(
                (len(transaction_results.errors) if transaction_results else 0)
                + (len(account_results.errors) if account_results else 0)
            ),
        ),
    )
