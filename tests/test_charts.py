"""
Tests for sparklines, spending aggregation, upcoming bills and the
financial health classification.
"""

import math
from datetime import date

import pytest

from family_finance.engines import (
    analyze_financial_health,
    calculate_sparkline_data,
    calculate_spending_chart_data,
    get_upcoming_bills,
    source_label,
)
from family_finance.models import Account, HealthStatus, SpendingView, TransactionType

TODAY = date(2025, 1, 15)

ACCOUNTS = [
    {"id": "a1", "type": "CHECKING", "balance": 0},
    {"id": "s1", "type": "SAVINGS", "balance": 0},
    {"id": "cc1", "type": "CREDIT_CARD", "balance": 0},
    {"id": "c1", "type": "CASH", "balance": 0},
    {"id": "i1", "type": "INVESTMENT", "balance": 0},
]


def _expense(amount, category, account="a1", **extra):
    record = {"type": "EXPENSE", "amount": amount, "category": category,
              "accountId": account, "date": "2025-01-10"}
    record.update(extra)
    return record


class TestSparklines:
    """Tests for calculate_sparkline_data."""

    TRANSACTIONS = [
        {"type": "EXPENSE", "amount": 10, "date": "2025-01-15"},
        {"type": "EXPENSE", "amount": 5, "date": "2025-01-15T20:00:00"},
        {"type": "EXPENSE", "amount": 3, "date": "2025-01-09"},
        {"type": "EXPENSE", "amount": 100, "date": "2025-01-08"},
        {"type": "INCOME", "amount": 50, "date": "2025-01-14"},
    ]

    def test_expense_days(self, telemetry):
        """Test per-day sums, oldest first, ending today."""
        data = calculate_sparkline_data(self.TRANSACTIONS, TransactionType.EXPENSE, 7, TODAY, telemetry)
        assert data == [3, 0, 0, 0, 0, 0, 15]

    def test_income_days(self, telemetry):
        data = calculate_sparkline_data(self.TRANSACTIONS, "INCOME", 7, TODAY, telemetry)
        assert data == [0, 0, 0, 0, 0, 50, 0]

    def test_default_window(self, telemetry):
        assert len(calculate_sparkline_data([], "EXPENSE", today=TODAY, telemetry=telemetry)) == 7

    def test_raw_amounts_are_not_converted(self, telemetry):
        transactions = [{"type": "EXPENSE", "amount": 10, "date": "2025-01-15", "currency": "USD"}]
        assert calculate_sparkline_data(transactions, "EXPENSE", 1, TODAY, telemetry) == [10]

    def test_unknown_type_and_empty_window(self, telemetry):
        assert calculate_sparkline_data(self.TRANSACTIONS, "GIFT", 3, TODAY, telemetry) == [0, 0, 0]
        assert calculate_sparkline_data(self.TRANSACTIONS, "EXPENSE", 0, TODAY, telemetry) == []


class TestSpendingChart:
    """Tests for calculate_spending_chart_data."""

    TRANSACTIONS = [
        _expense(100, "Food"),
        _expense(50, "Food", "cc1"),
        _expense(30, "Transport", "c1"),
        _expense(20, "Food", isRefund=True),
        _expense(10, "Fun", "i1"),
        _expense(100, "Travel", "cc1", payerId="friend", isShared=True,
                 sharedWith=[{"memberId": "m1", "assignedAmount": 40}]),
        {"type": "INCOME", "amount": 5000, "category": "Salary", "accountId": "a1"},
    ]

    def test_by_category(self, telemetry):
        slices = calculate_spending_chart_data(self.TRANSACTIONS, ACCOUNTS, "CATEGORY", telemetry)
        assert [(s.name, s.value) for s in slices] == [
            ("Food", 130), ("Travel", 60), ("Transport", 30), ("Fun", 10),
        ]

    def test_by_source(self, telemetry):
        slices = calculate_spending_chart_data(self.TRANSACTIONS, ACCOUNTS, SpendingView.SOURCE, telemetry)
        assert [(s.name, s.value) for s in slices] == [
            ("Credit Card", 110), ("Bank Account", 80), ("Cash", 30), ("Other", 10),
        ]

    def test_fully_refunded_category_disappears(self, telemetry):
        transactions = [_expense(10, "Gift"), _expense(10, "Gift", isRefund=True)]
        assert calculate_spending_chart_data(transactions, ACCOUNTS, "CATEGORY", telemetry) == []

    def test_currency_is_converted(self, telemetry):
        slices = calculate_spending_chart_data([_expense(10, "Food", currency="USD")], ACCOUNTS, "CATEGORY", telemetry)
        assert slices[0].value == 50

    def test_source_labels(self):
        assert source_label(Account(type="SAVINGS")) == "Bank Account"
        assert source_label(Account(type="INVESTMENT")) == "Other"
        assert source_label(None) == "Other"


class TestUpcomingBills:
    """Tests for get_upcoming_bills."""

    def _bill(self, id, day, **extra):
        record = {"id": id, "type": "EXPENSE", "amount": 10, "date": day,
                  "accountId": "a1", "enableNotification": True}
        record.update(extra)
        return record

    def test_selection_and_order(self, telemetry):
        transactions = [
            self._bill("later", "2025-01-20"),
            self._bill("overdue", "2025-01-05"),
            self._bill("last-month", "2024-12-30"),
            self._bill("february", "2025-02-10"),
            self._bill("march", "2025-03-01"),
            self._bill("refund", "2025-01-16", isRefund=True),
            self._bill("income", "2025-01-16", type="INCOME"),
            self._bill("silent", "2025-01-16", enableNotification=False),
            self._bill("deleted", "2025-01-16", deleted=True),
        ]
        bills = get_upcoming_bills(transactions, TODAY, telemetry=telemetry)
        assert [bill.id for bill in bills] == ["overdue", "later", "february"]

    def test_notification_date_wins(self, telemetry):
        transactions = [self._bill("b", "2024-11-01", notificationDate="2025-01-18")]
        assert [bill.id for bill in get_upcoming_bills(transactions, TODAY, telemetry=telemetry)] == ["b"]

    def test_limit(self, telemetry):
        transactions = [self._bill(str(day), f"2025-01-{day}") for day in range(16, 26)]
        assert len(get_upcoming_bills(transactions, TODAY, limit=5, telemetry=telemetry)) == 5


class TestFinancialHealth:
    """Tests for analyze_financial_health."""

    @pytest.mark.parametrize("income,expenses,expected", [
        (1000, 300, HealthStatus.POSITIVE),
        (1000, 900, HealthStatus.POSITIVE),
        (1000, 950, HealthStatus.WARNING),
        (1000, 1200, HealthStatus.CRITICAL),
        (0, 10, HealthStatus.CRITICAL),
        (0, 0, HealthStatus.POSITIVE),
        (math.nan, math.nan, HealthStatus.POSITIVE),
        ("1000", None, HealthStatus.POSITIVE),
    ])
    def test_classification(self, telemetry, income, expenses, expected):
        assert analyze_financial_health(income, expenses, telemetry) == expected
