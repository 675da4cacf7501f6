"""Domain model entities for checkbook.

These are pure data classes representing business concepts, independent of
database schema. Checks and cash entries are kept as two separate variants of
a ledger entry: checks always belong to an account, cash is pooled per user.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


ZERO = Decimal("0")


class EntryKind(str, Enum):
    """Kind of ledger entry a recurring template produces."""

    CHECK = "check"
    CASH = "cash"


class CheckDirection(str, Enum):
    """Direction of a check relative to its account."""

    INCOMING = "incoming"
    OUTGOING = "outgoing"


class CashDirection(str, Enum):
    """Direction of a cash movement."""

    CREDIT = "credit"
    DEBIT = "debit"


class Frequency(str, Enum):
    """Recurrence frequency of a template."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class User:
    """Owner of accounts, cash entries and recurring templates."""

    id: int
    username: str
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    user_id: int
    name: str
    bank_name: str
    opening_balance: Decimal
    low_balance_threshold: Decimal
    created_at: datetime


@dataclass(frozen=True)
class Check:
    """Check ledger entry, always scoped to a bank account."""

    id: int
    account_id: int
    direction: CheckDirection
    amount: Decimal
    date: date
    payee: Optional[str]
    recurring_id: Optional[int]
    created_at: datetime

    @property
    def kind(self) -> EntryKind:
        return EntryKind.CHECK

    @property
    def signed_amount(self) -> Decimal:
        if self.direction == CheckDirection.INCOMING:
            return self.amount
        return -self.amount


@dataclass(frozen=True)
class CashEntry:
    """Cash ledger entry, pooled per user with no account reference."""

    id: int
    user_id: int
    direction: CashDirection
    amount: Decimal
    date: date
    description: Optional[str]
    recurring_id: Optional[int]
    created_at: datetime

    @property
    def kind(self) -> EntryKind:
        return EntryKind.CASH

    @property
    def signed_amount(self) -> Decimal:
        if self.direction == CashDirection.CREDIT:
            return self.amount
        return -self.amount


LedgerEntry = Union[Check, CashEntry]


@dataclass(frozen=True)
class NewCheck:
    """Check to be inserted into the ledger."""

    account_id: int
    direction: CheckDirection
    amount: Decimal
    date: date
    payee: Optional[str] = None
    recurring_id: Optional[int] = None


@dataclass(frozen=True)
class NewCashEntry:
    """Cash entry to be inserted into the ledger."""

    user_id: int
    direction: CashDirection
    amount: Decimal
    date: date
    description: Optional[str] = None
    recurring_id: Optional[int] = None


LedgerDraft = Union[NewCheck, NewCashEntry]


@dataclass(frozen=True)
class RecurringTemplate:
    """Recurring transaction template.

    ``next_due_date`` is stored but always equals the next due date computed
    from the anchor (``last_created_date`` or, before the first firing,
    ``start_date``).
    """

    id: int
    user_id: int
    kind: EntryKind
    amount: Decimal
    frequency: Frequency
    start_date: date
    next_due_date: date
    account_id: Optional[int] = None
    check_direction: Optional[CheckDirection] = None
    payee: Optional[str] = None
    cash_direction: Optional[CashDirection] = None
    description: Optional[str] = None
    end_date: Optional[date] = None
    day_of_month: Optional[int] = None
    day_of_week: Optional[int] = None
    is_active: bool = True
    last_created_date: Optional[date] = None
    created_at: Optional[datetime] = None

    @property
    def anchor_date(self) -> date:
        """Date the next occurrence is computed from."""
        if self.last_created_date is not None:
            return self.last_created_date
        return self.start_date


@dataclass(frozen=True)
class MaterializedTransaction:
    """Result of firing a recurring template."""

    template_id: int
    entry: LedgerEntry
    last_created_date: date
    next_due_date: date


@dataclass(frozen=True)
class ProcessingError:
    """A single template failure recorded by the batch job."""

    template_id: int
    error: str


@dataclass(frozen=True)
class ProcessingResults:
    """Summary of a batch run over due recurring templates."""

    as_of: date
    processed: int = 0
    failed: int = 0
    errors: tuple[ProcessingError, ...] = ()


@dataclass(frozen=True)
class AccountBalance:
    """Balance of one account as of a date."""

    account_id: int
    name: str
    bank_name: str
    opening_balance: Decimal
    balance: Decimal
    low_balance_threshold: Decimal
    is_low_balance: bool


@dataclass(frozen=True)
class BalanceSnapshot:
    """Balances for a user as of a date. Computed on demand, never stored."""

    user_id: int
    date: date
    overall_balance: Decimal
    cash_balance: Decimal
    account_balances: tuple[AccountBalance, ...] = ()


@dataclass(frozen=True)
class DailyTotals:
    """Movement totals for a single day."""

    incoming: Decimal = ZERO
    outgoing: Decimal = ZERO
    credit_cash: Decimal = ZERO
    debit_cash: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.incoming - self.outgoing + self.credit_cash - self.debit_cash


@dataclass(frozen=True)
class DailySummary:
    """Dashboard view of a single day."""

    date: date
    balance: BalanceSnapshot
    incoming_checks: tuple[Check, ...] = ()
    outgoing_checks: tuple[Check, ...] = ()
    credit_cash: tuple[CashEntry, ...] = ()
    debit_cash: tuple[CashEntry, ...] = ()
    totals: DailyTotals = field(default_factory=DailyTotals)


@dataclass(frozen=True)
class AccountFlow:
    """Income and expense through one account over a period."""

    account_id: int
    name: str
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class FinancialSummary:
    """Income versus expense over an inclusive date range."""

    start_date: date
    end_date: date
    check_income: Decimal
    cash_income: Decimal
    check_expense: Decimal
    cash_expense: Decimal
    accounts: tuple[AccountFlow, ...] = ()

    @property
    def total_income(self) -> Decimal:
        return self.check_income + self.cash_income

    @property
    def total_expense(self) -> Decimal:
        return self.check_expense + self.cash_expense

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass(frozen=True)
class MonthlyTrend:
    """Income and expense for one calendar month (``YYYY-MM``)."""

    month: str
    income: Decimal = ZERO
    expense: Decimal = ZERO
    cash_income: Decimal = ZERO
    cash_expense: Decimal = ZERO

    @property
    def total_income(self) -> Decimal:
        return self.income + self.cash_income

    @property
    def total_expense(self) -> Decimal:
        return self.expense + self.cash_expense

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass(frozen=True)
class AccountPerformance:
    """Per-account activity and balance report."""

    account_id: int
    name: str
    opening_balance: Decimal
    current_balance: Decimal
    incoming_count: int
    incoming_total: Decimal
    outgoing_count: int
    outgoing_total: Decimal

    @property
    def net_flow(self) -> Decimal:
        return self.incoming_total - self.outgoing_total
