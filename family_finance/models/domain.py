"""
Domain Models for Family Finance

Accounts, transactions, shared-expense splits and trips.

These models are the typed side of the boundary between untrusted input
and the calculation engines. They are designed to:
1. Accept any raw shape (camelCase or snake_case keys, wrong types)
2. Coerce every field to a safe value instead of rejecting the record
3. Keep unknown fields untouched (records are derived from, never edited)
4. Be immutable once built

DESIGN DECISION: Field coercion lives in `mode="before"` validators that
are total, so building a model from a dict never raises. Reporting WHAT
was wrong with a record is the validators' job (family_finance.validation),
not the model's.
"""

from datetime import date as date_type
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from family_finance.safety.dates import parse_calendar_date
from family_finance.safety.numbers import to_safe_number

ME = "me"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """
    Kinds of money holdings.

    Liquidity accounts (CHECKING, SAVINGS, CASH) drive cash-flow figures.
    CREDIT_CARD is a liability; INVESTMENT is outside cash flow.
    """
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    CASH = "CASH"
    CREDIT_CARD = "CREDIT_CARD"
    INVESTMENT = "INVESTMENT"

    @classmethod
    def parse(cls, value: Any) -> Optional["AccountType"]:
        """Enum member for a name or legacy label, None if unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().upper()
        if key in cls.__members__:
            return cls[key]
        return _ACCOUNT_TYPE_LABELS.get(key)

    @property
    def is_liquidity(self) -> bool:
        return self in LIQUIDITY_ACCOUNT_TYPES


class TransactionType(str, Enum):
    """Direction of a monetary event. The stored amount is never signed."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"

    @classmethod
    def parse(cls, value: Any) -> Optional["TransactionType"]:
        """Enum member for a name or legacy label, None if unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().upper()
        if key in cls.__members__:
            return cls[key]
        return _TRANSACTION_TYPE_LABELS.get(key)


# Portuguese labels stored by the web client
_ACCOUNT_TYPE_LABELS = {
    "CONTA CORRENTE": AccountType.CHECKING,
    "POUPANÇA": AccountType.SAVINGS,
    "POUPANCA": AccountType.SAVINGS,
    "DINHEIRO": AccountType.CASH,
    "CARTÃO DE CRÉDITO": AccountType.CREDIT_CARD,
    "CARTAO DE CREDITO": AccountType.CREDIT_CARD,
    "INVESTIMENTOS": AccountType.INVESTMENT,
}

_TRANSACTION_TYPE_LABELS = {
    "RECEITA": TransactionType.INCOME,
    "DESPESA": TransactionType.EXPENSE,
    "TRANSFERÊNCIA": TransactionType.TRANSFER,
    "TRANSFERENCIA": TransactionType.TRANSFER,
}

LIQUIDITY_ACCOUNT_TYPES = frozenset({
    AccountType.CHECKING,
    AccountType.SAVINGS,
    AccountType.CASH,
})


# =============================================================================
# FIELD COERCION
# =============================================================================

def as_text(value: Any) -> Optional[str]:
    """Stripped string for str/int input, None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int):
        return str(value)
    return None


def as_flag(value: Any) -> bool:
    """Truthiness that reads "false"/"0" strings as False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "sim")
    if isinstance(value, (int, float)):
        return to_safe_number(value) != 0
    return False


def as_day_of_month(value: Any) -> Optional[int]:
    """Day 1-31, None when missing or out of range."""
    if value is None:
        return None
    day = int(to_safe_number(value))
    return day if 1 <= day <= 31 else None


def as_date_text(value: Any) -> Optional[str]:
    """ISO text for dates, stripped text for strings, None otherwise."""
    if isinstance(value, (date_type, datetime)):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip()
    return None


class FinanceRecord(BaseModel):
    """Base for input records: camelCase aliases, immutable, extras kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )


# =============================================================================
# ACCOUNTS
# =============================================================================

class Account(FinanceRecord):
    """
    A holding of money.

    `balance` is in units of the account's own currency.
    """

    id: str = Field(default="", description="Unique account identifier")
    name: str = Field(default="", description="Display name")
    type: Optional[AccountType] = Field(
        default=None,
        description="Account kind, None when unrecognized"
    )
    balance: float = Field(default=0.0, description="Current balance")
    initial_balance: float = Field(default=0.0)
    currency: str = Field(default="BRL", description="ISO-like currency code")

    # Credit cards only
    closing_day: Optional[int] = None
    due_day: Optional[int] = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return as_text(v) or ""

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> Optional[AccountType]:
        return AccountType.parse(v)

    @field_validator("balance", "initial_balance", mode="before")
    @classmethod
    def coerce_money(cls, v: Any) -> float:
        return to_safe_number(v)

    @field_validator("currency", mode="before")
    @classmethod
    def coerce_currency(cls, v: Any) -> str:
        if isinstance(v, str) and v.strip():
            return v.strip().upper()
        return "BRL"

    @field_validator("closing_day", "due_day", mode="before")
    @classmethod
    def coerce_day(cls, v: Any) -> Optional[int]:
        return as_day_of_month(v)

    @property
    def is_liquidity(self) -> bool:
        return self.type is not None and self.type.is_liquidity


# =============================================================================
# TRANSACTIONS
# =============================================================================

class SharedSplit(FinanceRecord):
    """
    One other party's share of a shared expense.

    `assigned_amount` is what that party owes (or is owed).
    """

    member_id: str = ""
    percentage: float = 0.0
    assigned_amount: float = 0.0
    is_settled: bool = False

    @field_validator("member_id", mode="before")
    @classmethod
    def coerce_member(cls, v: Any) -> str:
        return as_text(v) or ""

    @field_validator("percentage", "assigned_amount", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> float:
        return to_safe_number(v)

    @field_validator("is_settled", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        return as_flag(v)


class Transaction(FinanceRecord):
    """
    A single monetary event.

    The sign is implied by `type` and `is_refund`, never by `amount`.
    `currency` stays None when the record does not set one; engines then
    fall back to the owning account's currency.
    """

    id: str = ""
    description: str = ""
    amount: float = 0.0
    type: Optional[TransactionType] = None
    date: Optional[str] = Field(
        default=None,
        description="YYYY-MM-DD or ISO datetime, as received"
    )
    category: str = ""
    currency: Optional[str] = None

    account_id: Optional[str] = None
    destination_account_id: Optional[str] = None
    destination_amount: Optional[float] = None

    deleted: bool = False
    is_refund: bool = False

    # Shared expenses
    is_shared: bool = False
    payer_id: Optional[str] = None
    shared_with: list[SharedSplit] = Field(default_factory=list)
    is_settled: bool = False

    # Bill reminders
    enable_notification: bool = False
    notification_date: Optional[str] = None

    trip_id: Optional[str] = None

    is_installment: bool = False
    current_installment: Optional[int] = None
    total_installments: Optional[int] = None

    is_pending_invoice: bool = False
    exchange_rate: Optional[float] = None
    source_transaction_id: Optional[str] = None

    @field_validator("id", "description", "category", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if isinstance(v, Enum):
            v = v.value
        return as_text(v) or ""

    @field_validator(
        "account_id",
        "destination_account_id",
        "payer_id",
        "trip_id",
        "source_transaction_id",
        mode="before",
    )
    @classmethod
    def coerce_reference(cls, v: Any) -> Optional[str]:
        return as_text(v) or None

    @field_validator("currency", mode="before")
    @classmethod
    def coerce_currency(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and v.strip():
            return v.strip().upper()
        return None

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        return to_safe_number(v)

    @field_validator("destination_amount", "exchange_rate", mode="before")
    @classmethod
    def coerce_optional_number(cls, v: Any) -> Optional[float]:
        if v is None:
            return None
        return to_safe_number(v)

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> Optional[TransactionType]:
        return TransactionType.parse(v)

    @field_validator("date", "notification_date", mode="before")
    @classmethod
    def coerce_date(cls, v: Any) -> Optional[str]:
        return as_date_text(v)

    @field_validator(
        "deleted",
        "is_refund",
        "is_shared",
        "is_settled",
        "enable_notification",
        "is_installment",
        "is_pending_invoice",
        mode="before",
    )
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        return as_flag(v)

    @field_validator("shared_with", mode="before")
    @classmethod
    def coerce_splits(cls, v: Any) -> list:
        if not isinstance(v, (list, tuple)):
            return []
        return [
            split if isinstance(split, (dict, SharedSplit)) else {}
            for split in v
        ]

    @field_validator("current_installment", "total_installments", mode="before")
    @classmethod
    def coerce_count(cls, v: Any) -> Optional[int]:
        if v is None:
            return None
        return int(to_safe_number(v))

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    @property
    def calendar_date(self) -> Optional[date_type]:
        """Calendar date of the transaction, None when unparseable."""
        return parse_calendar_date(self.date)

    @property
    def reminder_date(self) -> Optional[date_type]:
        """Notification date, falling back to the transaction date."""
        return parse_calendar_date(self.notification_date or self.date)

    @property
    def paid_by_me(self) -> bool:
        return self.payer_id is None or self.payer_id == ME

    @property
    def has_shared_context(self) -> bool:
        """Shared flag set, splits present, or someone else paid."""
        return self.is_shared or bool(self.shared_with) or not self.paid_by_me

    @property
    def is_shared_pending(self) -> bool:
        """Shared record paid by someone else; may lack an account."""
        return self.is_shared and not self.paid_by_me


# =============================================================================
# TRIPS
# =============================================================================

class Trip(FinanceRecord):
    """A trip; only its currency matters to the dashboard."""

    id: str = ""
    name: str = ""
    currency: Optional[str] = None

    @field_validator("id", "name", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return as_text(v) or ""

    @field_validator("currency", mode="before")
    @classmethod
    def coerce_currency(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and v.strip():
            return v.strip().upper()
        return None
