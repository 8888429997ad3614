"""
Tests for monthly totals and net worth.
"""

from datetime import date

from family_finance.engines import calculate_monthly_totals, calculate_net_worth

TODAY = date(2025, 1, 15)

ACCOUNTS = [{"id": "a1", "name": "Main", "balance": 1000, "currency": "BRL", "type": "CHECKING"}]


def _t(type, amount, day="2025-01-12", **extra):
    record = {"type": type, "amount": amount, "date": day, "accountId": "a1"}
    record.update(extra)
    return record


class TestMonthlyTotals:
    """Tests for calculate_monthly_totals."""

    def test_simple_income_and_expense(self, telemetry):
        transactions = [
            {"type": "INCOME", "amount": 1000, "date": "2025-01-10", "accountId": "a1"},
            {"type": "EXPENSE", "amount": 300, "date": "2025-01-12", "accountId": "a1"},
        ]
        totals = calculate_monthly_totals(ACCOUNTS, transactions, date(2025, 1, 15), TODAY, telemetry)

        assert totals.income == 1000
        assert totals.expenses == 300
        assert totals.net_flow == 700

    def test_other_months_are_ignored(self, telemetry):
        transactions = [_t("INCOME", 500, "2024-12-31"), _t("EXPENSE", 50, "2025-02-01")]
        totals = calculate_monthly_totals(ACCOUNTS, transactions, TODAY, TODAY, telemetry)
        assert totals.income == 0
        assert totals.expenses == 0

    def test_unsettled_debt_is_excluded(self, telemetry):
        """Test that a friend's unsettled payment does not count until settled."""
        debt = _t("EXPENSE", 95, payerId="friend", isShared=True, isSettled=False)
        totals = calculate_monthly_totals(ACCOUNTS, [debt], TODAY, TODAY, telemetry)
        assert totals.expenses == 0

        settled = dict(debt, isSettled=True)
        totals = calculate_monthly_totals(ACCOUNTS, [settled], TODAY, TODAY, telemetry)
        assert totals.expenses == 95

    def test_refunds_invert_sign(self, telemetry):
        transactions = [
            _t("INCOME", 1000),
            _t("INCOME", 100, isRefund=True),
            _t("EXPENSE", 300),
            _t("EXPENSE", 50, isRefund=True),
        ]
        totals = calculate_monthly_totals(ACCOUNTS, transactions, TODAY, TODAY, telemetry)
        assert totals.income == 900
        assert totals.expenses == 250
        assert totals.net_flow == 650

    def test_i_paid_only_unsettled_shares_are_deducted(self, telemetry):
        """Test that settled shares are not subtracted from what I paid."""
        shared = _t("EXPENSE", 100, payerId="me", isShared=True, sharedWith=[
            {"memberId": "m1", "assignedAmount": 40},
            {"memberId": "m2", "assignedAmount": 20, "isSettled": True},
        ])
        totals = calculate_monthly_totals(ACCOUNTS, [shared], TODAY, TODAY, telemetry)
        assert totals.expenses == 60

    def test_foreign_currency_is_converted(self, telemetry):
        totals = calculate_monthly_totals(ACCOUNTS, [_t("EXPENSE", 10, currency="USD")], TODAY, TODAY, telemetry)
        assert totals.expenses == 50

    def test_deleted_and_transfers_are_ignored(self, telemetry):
        transactions = [_t("EXPENSE", 10, deleted=True), _t("TRANSFER", 500, destinationAccountId="x")]
        totals = calculate_monthly_totals(ACCOUNTS, transactions, TODAY, TODAY, telemetry)
        assert totals.expenses == 0
        assert totals.income == 0

    def test_garbage_inputs(self, telemetry):
        totals = calculate_monthly_totals(None, "x", "not a date", TODAY, telemetry)
        assert (totals.income, totals.expenses, totals.net_flow) == (0, 0, 0)


class TestNetWorth:
    """Tests for calculate_net_worth."""

    def test_liquidity_minus_cards(self, telemetry):
        accounts = [
            {"id": "a1", "type": "CHECKING", "balance": 1000},
            {"id": "s1", "type": "SAVINGS", "balance": 500},
            {"id": "cc1", "type": "CREDIT_CARD", "balance": -250},
            {"id": "cc2", "type": "CREDIT_CARD", "balance": 100},
        ]
        assert calculate_net_worth(accounts, telemetry) == 1150

    def test_investments_and_foreign_are_excluded(self, telemetry):
        accounts = [
            {"id": "a1", "type": "CHECKING", "balance": 1000},
            {"id": "i1", "type": "INVESTMENT", "balance": 9000},
            {"id": "u1", "type": "CHECKING", "balance": 100, "currency": "USD"},
        ]
        assert calculate_net_worth(accounts, telemetry) == 1000

    def test_empty(self, telemetry):
        assert calculate_net_worth([], telemetry) == 0
        assert calculate_net_worth(None, telemetry) == 0
