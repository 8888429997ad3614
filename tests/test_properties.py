"""
Property-based totality checks.

Whatever the snapshot looks like, every public engine returns finite
numbers and well-typed lists, never raises and is deterministic.
"""

import math
from datetime import date

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from family_finance.dashboard import DashboardAggregator
from family_finance.engines import (
    calculate_cash_flow_series,
    calculate_effective_transaction_value,
    calculate_monthly_totals,
    calculate_net_worth,
    calculate_projected_balance,
    calculate_spending_chart_data,
)
from family_finance.safety import safe_percentage, to_safe_number
from family_finance.telemetry import Telemetry

TODAY = date(2025, 1, 15)

# Values a corrupted record may hold in any field
junk = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-10**9, max_value=10**9),
    st.floats(allow_nan=True, allow_infinity=True),
    st.text(max_size=8),
    st.sampled_from(["12.5", "abc", "", "NaN", "Infinity", "1e400"]),
)

amounts = st.one_of(junk, st.floats(min_value=0, max_value=1e6, allow_nan=False))
dates = st.one_of(
    junk,
    st.dates(min_value=date(2023, 1, 1), max_value=date(2026, 12, 31)).map(date.isoformat),
)


@st.composite
def accounts(draw):
    return {
        "id": draw(st.one_of(st.sampled_from(["a1", "a2", "cc1"]), junk)),
        "type": draw(st.one_of(st.sampled_from(["CHECKING", "SAVINGS", "CASH", "CREDIT_CARD", "INVESTMENT"]), junk)),
        "balance": draw(amounts),
        "currency": draw(st.one_of(st.sampled_from(["BRL", "USD", "XYZ"]), junk)),
    }


@st.composite
def transactions(draw):
    return {
        "id": draw(junk),
        "type": draw(st.one_of(st.sampled_from(["INCOME", "EXPENSE", "TRANSFER"]), junk)),
        "amount": draw(amounts),
        "date": draw(dates),
        "accountId": draw(st.one_of(st.sampled_from(["a1", "a2", "cc1"]), junk)),
        "destinationAccountId": draw(st.one_of(st.sampled_from(["a1", "a2", "cc1"]), junk)),
        "payerId": draw(st.one_of(st.sampled_from(["me", "friend"]), junk)),
        "isShared": draw(junk),
        "isSettled": draw(junk),
        "isRefund": draw(junk),
        "currency": draw(st.one_of(st.sampled_from(["BRL", "USD"]), junk)),
        "sharedWith": draw(st.one_of(
            junk,
            st.lists(st.one_of(junk, st.fixed_dictionaries({"assignedAmount": amounts})), max_size=3),
        )),
        "enableNotification": draw(junk),
    }


snapshots = st.tuples(
    st.one_of(junk, st.lists(st.one_of(junk, accounts()), max_size=5)),
    st.one_of(junk, st.lists(st.one_of(junk, transactions()), max_size=8)),
)

engine_settings = settings(max_examples=60, deadline=None, suppress_health_check=[HealthCheck.too_slow])


def _all_finite(*values):
    return all(isinstance(value, float) and math.isfinite(value) for value in values)


class TestPrimitiveProperties:
    """Properties of the numeric primitives."""

    @given(junk, st.floats(min_value=-1e6, max_value=1e6))
    def test_to_safe_number_is_finite(self, value, fallback):
        assert math.isfinite(to_safe_number(value, fallback))

    @given(st.floats(allow_nan=False, allow_infinity=False))
    def test_percentage_of_zero_total(self, part):
        assert safe_percentage(part, 0) == 0


class TestEngineTotality:
    """Every engine survives any snapshot."""

    @engine_settings
    @given(snapshots, dates)
    def test_projection(self, snapshot, reference):
        accounts_in, transactions_in = snapshot
        result = calculate_projected_balance(accounts_in, transactions_in, reference, TODAY, Telemetry())
        assert _all_finite(
            result.current_balance, result.projected_balance, result.pending_income, result.pending_expenses
        )

    @engine_settings
    @given(snapshots, dates)
    def test_monthly_totals_and_net_worth(self, snapshot, reference):
        accounts_in, transactions_in = snapshot
        telemetry = Telemetry()
        totals = calculate_monthly_totals(accounts_in, transactions_in, reference, TODAY, telemetry)
        assert _all_finite(totals.income, totals.expenses, totals.net_flow)
        assert _all_finite(calculate_net_worth(accounts_in, telemetry))

    @engine_settings
    @given(snapshots, junk)
    def test_cash_flow(self, snapshot, year):
        accounts_in, transactions_in = snapshot
        points = calculate_cash_flow_series(transactions_in, accounts_in, year, TODAY, Telemetry())
        assert len(points) == 12
        for point in points:
            assert _all_finite(point.income, point.expenses)
            assert point.accumulated is None or math.isfinite(point.accumulated)

    @engine_settings
    @given(snapshots, st.sampled_from(["CATEGORY", "SOURCE", None]))
    def test_spending(self, snapshot, view):
        accounts_in, transactions_in = snapshot
        slices = calculate_spending_chart_data(transactions_in, accounts_in, view, Telemetry())
        assert all(s.value > 0 and math.isfinite(s.value) for s in slices)
        assert [s.value for s in slices] == sorted((s.value for s in slices), reverse=True)

    @engine_settings
    @given(transactions())
    def test_effective_value_is_bounded(self, record):
        value = calculate_effective_transaction_value(record, Telemetry())
        amount = max(0.0, to_safe_number(record["amount"]))
        assert 0 <= value <= amount

    @engine_settings
    @given(snapshots, dates)
    def test_dashboard_is_deterministic(self, snapshot, reference):
        accounts_in, transactions_in = snapshot
        first = DashboardAggregator(Telemetry()).build_basic(accounts_in, transactions_in, reference, today=TODAY)
        second = DashboardAggregator(Telemetry()).build_basic(accounts_in, transactions_in, reference, today=TODAY)
        assert first == second
        assert _all_finite(first.current_balance, first.monthly_income, first.monthly_expense, first.net_worth)
