"""
Dashboard Aggregator

Composes validation, filtering, the engines and telemetry into the
single read-model the dashboard renders.

DESIGN DECISION: The aggregator never blocks on bad data.
- Validation only measures data quality (validationSummary)
- Engines always run on the sanitized snapshot
- Problems surface as telemetry, never as exceptions

Flow:
1. Validate → count issues, score data quality
2. Sanitize → typed records
3. Filter → BRL-only dashboard transactions and accounts
4. Engines → projection, monthly totals, health, net worth,
   cash flow, sparklines, bills, spending
5. Report → health report and execution summary
"""

from datetime import date
from typing import Any, Optional

from family_finance.config import Settings, get_settings
from family_finance.engines import (
    analyze_financial_health,
    calculate_cash_flow_series,
    calculate_monthly_totals,
    calculate_net_worth,
    calculate_projected_balance,
    calculate_sparkline_data,
    calculate_spending_chart_data,
    get_upcoming_bills,
    has_cash_flow_data,
)
from family_finance.engines.base import in_month, resolve_today
from family_finance.filters import filter_dashboard_transactions
from family_finance.models.dashboard import (
    DashboardReadModel,
    ExtendedDashboardReadModel,
    SpendingView,
    ValidationSummary,
)
from family_finance.models.domain import Account, Transaction, TransactionType
from family_finance.models.telemetry import ErrorSeverity, ErrorType
from family_finance.safety.currency import is_reporting_currency
from family_finance.safety.dates import resolve_reference_date
from family_finance.safety.numbers import precise_sum
from family_finance.telemetry import Telemetry
from family_finance.validation import (
    sanitize_accounts,
    sanitize_transactions,
    validate_financial_data,
)

SOURCE = "DashboardAggregator"


class DashboardAggregator:
    """
    Builds dashboard read-models.

    One aggregator holds one Telemetry; every recovered failure of a
    build lands in it and shows up in the returned health report.

    Usage:
        aggregator = DashboardAggregator()
        view = aggregator.build(accounts, transactions, date(2025, 1, 15))
        payload = view.model_dump(by_alias=True)
    """

    def __init__(
        self,
        telemetry: Optional[Telemetry] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._telemetry = telemetry or Telemetry(self._settings.telemetry)

    @property
    def telemetry(self) -> Telemetry:
        return self._telemetry

    def build(
        self,
        accounts: Any,
        transactions: Any,
        current_date: Any,
        spending_view: Any = SpendingView.CATEGORY,
        trips: Any = None,
        projected_accounts: Any = None,
        today: Optional[date] = None,
    ) -> ExtendedDashboardReadModel:
        """
        Full read-model including validation summary and health report.

        Args:
            accounts: Raw account records
            transactions: Raw transaction records
            current_date: The month being viewed (date, datetime or text)
            spending_view: CATEGORY or SOURCE grouping of the spending chart
            trips: Optional trips; transactions of foreign-currency trips are hidden
            projected_accounts: Optional accounts used for the projection only
            today: Wall-clock date, defaults to date.today()
        """
        telemetry = self._telemetry
        today = resolve_today(today)
        reference = resolve_reference_date(current_date, today)
        dashboard_settings = self._settings.dashboard

        # =====================================================================
        # STEP 1-2: Validate and sanitize
        # =====================================================================
        safe_accounts, safe_transactions, summary = telemetry.safe_calculate(
            lambda: self._validate_and_sanitize(accounts, transactions, today),
            SOURCE,
            "input_sanitization",
            [accounts, transactions],
            ([], [], ValidationSummary(errors_detected=1, data_quality_score=0)),
        ).result

        # =====================================================================
        # STEP 3: BRL-only view
        # =====================================================================
        dashboard_transactions = telemetry.safe_calculate(
            lambda: filter_dashboard_transactions(safe_transactions, safe_accounts, trips),
            SOURCE,
            "filter_dashboard_transactions",
            [safe_transactions, safe_accounts, trips],
            [],
        ).result

        dashboard_accounts = _reporting_accounts(safe_accounts)
        projection_accounts = _reporting_accounts(
            sanitize_accounts(projected_accounts)
            if projected_accounts is not None
            else safe_accounts
        )

        # =====================================================================
        # STEP 4: Engines
        # =====================================================================
        projection = calculate_projected_balance(
            projection_accounts, dashboard_transactions, reference, today, telemetry
        )

        month_transactions = [t for t in dashboard_transactions if in_month(t, reference)]

        monthly = calculate_monthly_totals(
            dashboard_accounts, month_transactions, reference, today, telemetry
        )

        health_status = analyze_financial_health(
            precise_sum([monthly.income, projection.pending_income]),
            precise_sum([monthly.expenses, projection.pending_expenses]),
            telemetry,
        )

        net_worth = calculate_net_worth(safe_accounts, telemetry)

        cash_flow = calculate_cash_flow_series(
            dashboard_transactions, safe_accounts, reference.year, today, telemetry
        )

        sparkline_days = dashboard_settings.sparkline_days
        income_sparkline = calculate_sparkline_data(
            dashboard_transactions, TransactionType.INCOME, sparkline_days, today, telemetry
        )
        expense_sparkline = calculate_sparkline_data(
            dashboard_transactions, TransactionType.EXPENSE, sparkline_days, today, telemetry
        )

        upcoming_bills = get_upcoming_bills(
            dashboard_transactions, today, dashboard_settings.upcoming_bills_limit, telemetry
        )

        spending = calculate_spending_chart_data(
            month_transactions, safe_accounts, spending_view, telemetry
        )

        # =====================================================================
        # STEP 5: Report
        # =====================================================================
        health_report = telemetry.get_health_report()

        if summary.errors_detected > 0:
            telemetry.log_error(
                ErrorType.DATA_CORRUPTION,
                SOURCE,
                "execution_summary",
                [],
                (
                    f"Dashboard built with {summary.errors_detected} errors detected. "
                    f"Data quality: {summary.data_quality_score}%"
                ),
                ErrorSeverity.HIGH if summary.data_quality_score < 50 else ErrorSeverity.MEDIUM,
                {
                    "validation_summary": summary.model_dump(),
                    "error_rate": health_report.summary.error_rate,
                    "data_quality_score": health_report.data_quality_score,
                },
            )

        return ExtendedDashboardReadModel(
            current_balance=projection.current_balance,
            projected_balance=projection.projected_balance,
            pending_income=projection.pending_income,
            pending_expenses=projection.pending_expenses,
            monthly_income=monthly.income,
            monthly_expense=monthly.expenses,
            net_worth=net_worth,
            health_status=health_status,
            cash_flow_data=cash_flow,
            has_cash_flow_data=has_cash_flow_data(cash_flow),
            income_sparkline=income_sparkline,
            expense_sparkline=expense_sparkline,
            upcoming_bills=upcoming_bills,
            spending_chart_data=spending,
            validation_summary=summary,
            health_report=health_report,
        )

    def build_basic(
        self,
        accounts: Any,
        transactions: Any,
        current_date: Any,
        spending_view: Any = SpendingView.CATEGORY,
        trips: Any = None,
        projected_accounts: Any = None,
        today: Optional[date] = None,
    ) -> DashboardReadModel:
        """Only the flat dashboard fields, without data-quality telemetry."""
        extended = self.build(
            accounts,
            transactions,
            current_date,
            spending_view,
            trips,
            projected_accounts,
            today,
        )
        return DashboardReadModel(
            **{name: getattr(extended, name) for name in DashboardReadModel.model_fields}
        )

    def _validate_and_sanitize(
        self,
        accounts: Any,
        transactions: Any,
        today: date,
    ) -> tuple[list[Account], list[Transaction], ValidationSummary]:
        validation = validate_financial_data(
            accounts if accounts is not None else [],
            transactions if transactions is not None else [],
            today,
        )

        if not validation.overall_valid:
            self._telemetry.log_error(
                ErrorType.INVALID_INPUT,
                SOURCE,
                "input_validation",
                [accounts, transactions],
                f"Invalid data detected: {validation.summary.total_errors} errors",
                ErrorSeverity.MEDIUM,
                {"validation_summary": validation.summary.model_dump()},
            )

        totals = validation.summary
        summary = ValidationSummary(
            total_accounts=totals.total_accounts,
            valid_accounts=totals.valid_accounts,
            total_transactions=totals.total_transactions,
            valid_transactions=totals.valid_transactions,
            errors_detected=totals.total_errors,
            data_quality_score=(
                100.0 if validation.overall_valid else max(0.0, 100.0 - totals.total_errors * 10)
            ),
        )

        return sanitize_accounts(accounts), sanitize_transactions(transactions), summary


def _reporting_accounts(accounts: list[Account]) -> list[Account]:
    return [account for account in accounts if is_reporting_currency(account.currency)]
