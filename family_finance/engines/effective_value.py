"""
Effective Transaction Value

What an expense really cost me once shared splits and who paid are
taken into account. Every aggregate routes shared expenses through here
instead of using the raw amount.

- Not an expense, or not shared: the amount itself
- I paid: amount minus the other parties' shares (they will reimburse me)
- Someone else paid: my share, amount minus the others' shares

The result always lies between 0 and the amount.
"""

from typing import Any, Optional

from family_finance.models.domain import Transaction, TransactionType
from family_finance.models.telemetry import ErrorSeverity, ErrorType
from family_finance.safety.numbers import precise_subtract, precise_sum
from family_finance.telemetry import Telemetry, ensure_telemetry
from family_finance.validation.boundary import coerce_transaction


def calculate_effective_transaction_value(
    transaction: Any,
    telemetry: Optional[Telemetry] = None,
) -> float:
    """Economic cost of `transaction` to me; 0 if the calculation fails."""
    telemetry = ensure_telemetry(telemetry)
    t = coerce_transaction(transaction)

    return telemetry.safe_calculate(
        lambda: _effective_value(t, telemetry),
        "calculate_effective_transaction_value",
        "effective_transaction_calculation",
        [t],
        0.0,
    ).result


def _effective_value(t: Transaction, telemetry: Telemetry) -> float:
    amount = max(0.0, t.amount)

    if t.type != TransactionType.EXPENSE or not t.has_shared_context:
        return amount

    # Negative shares would push the result above the amount
    splits_total = precise_sum(max(0.0, split.assigned_amount) for split in t.shared_with)

    if splits_total > amount:
        telemetry.log_error(
            ErrorType.DATA_CORRUPTION,
            "calculate_effective_transaction_value",
            "splits_validation",
            [t],
            f"Splits total ({splits_total}) exceeds transaction amount ({amount})",
            ErrorSeverity.MEDIUM,
            {"transaction_id": t.id, "splits_total": splits_total, "amount": amount},
        )
        return amount

    # Rounding to cents must not lift a sub-cent amount
    return min(amount, max(0.0, precise_subtract(amount, splits_total)))
