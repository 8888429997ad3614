"""
Tests for the projected balance of the viewed month.
"""

import math
from datetime import date

from family_finance.engines import calculate_projected_balance

TODAY = date(2025, 1, 15)

ACCOUNTS = [
    {"id": "a1", "name": "Main", "type": "CHECKING", "balance": 1000, "currency": "BRL"},
    {"id": "cc1", "name": "Card", "type": "CREDIT_CARD", "balance": -250, "currency": "BRL"},
    {"id": "i1", "name": "Broker", "type": "INVESTMENT", "balance": 5000, "currency": "BRL"},
]


def _t(id, type, amount, day, account="a1", **extra):
    record = {"id": id, "type": type, "amount": amount, "date": day, "accountId": account}
    record.update(extra)
    return record


class TestCurrentBalance:
    """Tests for current liquidity."""

    def test_only_liquidity_accounts(self, telemetry):
        """Test that credit cards and investments are excluded."""
        result = calculate_projected_balance(ACCOUNTS, [], "2025-01-15", TODAY, telemetry)
        assert result.current_balance == 1000
        assert result.projected_balance == 1000

    def test_foreign_accounts_are_converted(self, telemetry):
        accounts = ACCOUNTS + [{"id": "u1", "type": "SAVINGS", "balance": 100, "currency": "USD"}]
        result = calculate_projected_balance(accounts, [], TODAY, TODAY, telemetry)
        assert result.current_balance == 1500

    def test_corrupted_accounts(self, telemetry):
        """Test that a NaN balance with null currency contributes nothing."""
        accounts = [
            {"id": "a1", "type": "CHECKING", "balance": 700, "currency": "BRL"},
            {"id": "a2", "type": "CASH", "balance": math.nan, "currency": None},
            None,
            {"id": "a3", "type": "SAVINGS", "balance": "300"},
        ]
        result = calculate_projected_balance(accounts, [], TODAY, TODAY, telemetry)
        assert result.current_balance == 1000
        assert math.isfinite(result.projected_balance)


class TestPendingFlows:
    """Tests for pending income and expenses."""

    def test_full_month(self, telemetry):
        transactions = [
            _t("inc", "INCOME", 200, "2025-01-20"),
            _t("exp", "EXPENSE", 100, "2025-01-25"),
            _t("past", "EXPENSE", 999, "2025-01-10"),
            _t("next-month", "INCOME", 999, "2025-02-05"),
            _t("card", "EXPENSE", 999, "2025-01-20", account="cc1"),
            _t("bill", "TRANSFER", 250, "2025-01-28", destinationAccountId="cc1"),
            _t("redeem", "TRANSFER", 999, "2025-01-29", account="i1",
               destinationAccountId="a1", destinationAmount=300),
            _t("lunch", "EXPENSE", 100, "2025-01-05", payerId="me", isShared=True,
               sharedWith=[
                   {"memberId": "m1", "assignedAmount": 40},
                   {"memberId": "m2", "assignedAmount": 10, "isSettled": True},
               ]),
            _t("dinner", "EXPENSE", 95, "2025-01-05", payerId="friend", isShared=True),
        ]

        result = calculate_projected_balance(ACCOUNTS, transactions, "2025-01-15", TODAY, telemetry)

        assert result.current_balance == 1000
        assert result.pending_income == 540
        assert result.pending_expenses == 445
        assert result.projected_balance == 1095

    def test_today_is_not_pending(self, telemetry):
        transactions = [_t("now", "EXPENSE", 100, "2025-01-15")]
        result = calculate_projected_balance(ACCOUNTS, transactions, TODAY, TODAY, telemetry)
        assert result.pending_expenses == 0

    def test_deleted_are_ignored(self, telemetry):
        transactions = [_t("gone", "INCOME", 100, "2025-01-20", deleted=True)]
        result = calculate_projected_balance(ACCOUNTS, transactions, TODAY, TODAY, telemetry)
        assert result.pending_income == 0

    def test_settled_debt_is_not_pending(self, telemetry):
        transactions = [_t("dinner", "EXPENSE", 95, "2025-01-05", payerId="friend",
                           isShared=True, isSettled=True)]
        result = calculate_projected_balance(ACCOUNTS, transactions, TODAY, TODAY, telemetry)
        assert result.pending_expenses == 0

    def test_exchange_rate_override(self, telemetry):
        """Test that a transaction's own exchange rate wins over the table."""
        transactions = [_t("usd", "EXPENSE", 10, "2025-01-20", currency="USD", exchangeRate=4)]
        result = calculate_projected_balance(ACCOUNTS, transactions, TODAY, TODAY, telemetry)
        assert result.pending_expenses == 40

    def test_incoming_transfer_without_destination_amount(self, telemetry):
        transactions = [_t("redeem", "TRANSFER", 120, "2025-01-29", account="i1", destinationAccountId="a1")]
        result = calculate_projected_balance(ACCOUNTS, transactions, TODAY, TODAY, telemetry)
        assert result.pending_income == 120

    def test_transfer_between_liquidity_accounts(self, telemetry):
        """Test that moving money between my own liquid accounts changes nothing."""
        accounts = ACCOUNTS + [{"id": "a2", "type": "SAVINGS", "balance": 0}]
        transactions = [_t("move", "TRANSFER", 100, "2025-01-29", destinationAccountId="a2")]
        result = calculate_projected_balance(accounts, transactions, TODAY, TODAY, telemetry)
        assert result.pending_income == 0
        assert result.pending_expenses == 0

    def test_future_reference_month(self, telemetry):
        transactions = [_t("feb", "INCOME", 300, "2025-02-05")]
        result = calculate_projected_balance(ACCOUNTS, transactions, "2025-02-01", TODAY, telemetry)
        assert result.pending_income == 300
        assert result.projected_balance == 1300


class TestFailureModes:
    """Tests for degraded inputs."""

    def test_garbage_inputs(self, telemetry):
        result = calculate_projected_balance("x", 42, None, TODAY, telemetry)
        assert result.model_dump() == {
            "current_balance": 0.0,
            "projected_balance": 0.0,
            "pending_income": 0.0,
            "pending_expenses": 0.0,
        }

    def test_deterministic(self, telemetry):
        transactions = [_t("inc", "INCOME", 200, "2025-01-20")]
        first = calculate_projected_balance(ACCOUNTS, transactions, TODAY, TODAY, telemetry)
        second = calculate_projected_balance(ACCOUNTS, transactions, TODAY, TODAY, telemetry)
        assert first == second
