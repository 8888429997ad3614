"""
Validation Package

The boundary between untrusted input and the engines: coercion into
typed records, per-record validation, bulk sanitizing and dataset
consistency checks.
"""

from family_finance.validation.boundary import (
    coerce_account,
    coerce_transaction,
    coerce_trip,
    read_field,
)
from family_finance.validation.consistency import check_data_consistency
from family_finance.validation.sanitizer import (
    sanitize_accounts,
    sanitize_transactions,
    sanitize_trips,
)
from family_finance.validation.validator import (
    is_safe_for_calculation,
    validate_account,
    validate_account_array,
    validate_financial_data,
    validate_transaction,
    validate_transaction_array,
)

__all__ = [
    "check_data_consistency",
    "coerce_account",
    "coerce_transaction",
    "coerce_trip",
    "is_safe_for_calculation",
    "read_field",
    "sanitize_accounts",
    "sanitize_transactions",
    "sanitize_trips",
    "validate_account",
    "validate_account_array",
    "validate_financial_data",
    "validate_transaction",
    "validate_transaction_array",
]
