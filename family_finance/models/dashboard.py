"""
Read-Model Schemas

What the engines hand to the UI. Every numeric field is a finite float;
the only nullable number is `CashFlowPoint.accumulated`, which is None
for months before the first recorded transaction ("no data" rather
than "zero activity").

Serialized with `model_dump(by_alias=True)` the field names match the
web client's contract (currentBalance, monthlyIncome, Receitas, ...).
"""

from datetime import date as date_type
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from family_finance.models.domain import Transaction
from family_finance.models.telemetry import HealthReport


class HealthStatus(str, Enum):
    POSITIVE = "POSITIVE"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class SpendingView(str, Enum):
    """Grouping of the spending chart."""
    CATEGORY = "CATEGORY"
    SOURCE = "SOURCE"

    @classmethod
    def parse(cls, value: object) -> "SpendingView":
        """Unknown values group by category."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() == cls.SOURCE.value:
            return cls.SOURCE
        return cls.CATEGORY


class ReadModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProjectedBalance(ReadModel):
    """Liquidity now and at the end of the viewed month."""

    current_balance: float = 0.0
    projected_balance: float = 0.0
    pending_income: float = 0.0
    pending_expenses: float = 0.0


class MonthlyTotals(ReadModel):
    income: float = 0.0
    expenses: float = 0.0
    net_flow: float = 0.0


class CashFlowPoint(ReadModel):
    """One month of the annual cash-flow chart."""

    date: date_type
    month: str = Field(..., description="Short month label, e.g. JAN")
    year: int
    month_index: int = Field(..., ge=0, le=11)
    income: float = Field(default=0.0, alias="Receitas")
    expenses: float = Field(default=0.0, alias="Despesas")
    accumulated: Optional[float] = Field(default=0.0, alias="Acumulado")


class SpendingSlice(ReadModel):
    name: str
    value: float


class ValidationSummary(ReadModel):
    total_accounts: int = 0
    valid_accounts: int = 0
    total_transactions: int = 0
    valid_transactions: int = 0
    errors_detected: int = 0
    data_quality_score: float = Field(default=100.0, ge=0.0, le=100.0)


class DashboardReadModel(ReadModel):
    """The flat read-model consumed by the dashboard."""

    current_balance: float = 0.0
    projected_balance: float = 0.0
    pending_income: float = 0.0
    pending_expenses: float = 0.0
    monthly_income: float = 0.0
    monthly_expense: float = 0.0
    net_worth: float = 0.0
    health_status: HealthStatus = HealthStatus.POSITIVE
    cash_flow_data: list[CashFlowPoint] = Field(default_factory=list)
    has_cash_flow_data: bool = False
    income_sparkline: list[float] = Field(default_factory=list)
    expense_sparkline: list[float] = Field(default_factory=list)
    upcoming_bills: list[Transaction] = Field(default_factory=list)
    spending_chart_data: list[SpendingSlice] = Field(default_factory=list)


class ExtendedDashboardReadModel(DashboardReadModel):
    """Read-model plus data-quality telemetry."""

    validation_summary: ValidationSummary = Field(default_factory=ValidationSummary)
    health_report: Optional[HealthReport] = None
