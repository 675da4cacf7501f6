"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from checkbook.domain.entities import (
    User,
    Account,
    Check,
    CashEntry,
    CashDirection,
    CheckDirection,
    EntryKind,
    LedgerDraft,
    LedgerEntry,
    RecurringTemplate,
)


class Database(ABC):
    """Abstract database interface for checkbook.

    Implementations raise ``StorageError`` for transport or driver failures
    and ``ConflictError`` for uniqueness or stale-write conflicts.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, username: str) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        """List all users."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        user_id: int,
        name: str,
        bank_name: str,
        opening_balance: Decimal,
        low_balance_threshold: Decimal,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, user_id: int) -> list[Account]:
        """List all accounts owned by a user."""
        pass

    @abstractmethod
    def update_account_threshold(self, account_id: int, low_balance_threshold: Decimal) -> None:
        """Update the low-balance threshold of an account."""
        pass

    @abstractmethod
    def update_account(
        self, account_id: int, name: Optional[str] = None, bank_name: Optional[str] = None
    ) -> None:
        """Rename an account or change its bank name."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_dependency_counts(self, account_id: int) -> tuple[int, int]:
        """Return (check count, recurring template count) for an account."""
        pass

    # Ledger operations
    @abstractmethod
    def insert_ledger_entry(self, draft: LedgerDraft) -> LedgerEntry:
        """Insert a check or cash entry. Returns the stored entry."""
        pass

    @abstractmethod
    def get_check(self, check_id: int) -> Optional[Check]:
        """Get check by ID."""
        pass

    @abstractmethod
    def get_cash(self, cash_id: int) -> Optional[CashEntry]:
        """Get cash entry by ID."""
        pass

    @abstractmethod
    def update_check(self, check_id: int, **fields: Any) -> Check:
        """Update check fields. Returns the stored check."""
        pass

    @abstractmethod
    def update_cash(self, cash_id: int, **fields: Any) -> CashEntry:
        """Update cash entry fields. Returns the stored entry."""
        pass

    @abstractmethod
    def delete_check(self, check_id: int) -> None:
        """Delete a check."""
        pass

    @abstractmethod
    def delete_cash(self, cash_id: int) -> None:
        """Delete a cash entry."""
        pass

    @abstractmethod
    def list_checks(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        direction: Optional[CheckDirection] = None,
    ) -> list[Check]:
        """List checks on a user's accounts, newest first."""
        pass

    @abstractmethod
    def list_cash(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        direction: Optional[CashDirection] = None,
    ) -> list[CashEntry]:
        """List a user's cash entries, newest first."""
        pass

    @abstractmethod
    def sum_checks(
        self,
        account_id: int,
        direction: CheckDirection,
        up_to: Optional[date] = None,
        start: Optional[date] = None,
    ) -> Decimal:
        """Sum check amounts for an account and direction within the date bounds."""
        pass

    @abstractmethod
    def sum_cash(
        self,
        user_id: int,
        direction: CashDirection,
        up_to: Optional[date] = None,
        start: Optional[date] = None,
    ) -> Decimal:
        """Sum cash amounts for a user and direction within the date bounds."""
        pass

    # Recurring template operations
    @abstractmethod
    def create_template(self, user_id: int, **fields: Any) -> int:
        """Create a recurring template. Returns template ID."""
        pass

    @abstractmethod
    def get_template(self, template_id: int) -> Optional[RecurringTemplate]:
        """Get recurring template by ID."""
        pass

    @abstractmethod
    def list_templates(
        self,
        user_id: Optional[int] = None,
        is_active: Optional[bool] = None,
        kind: Optional[EntryKind] = None,
    ) -> list[RecurringTemplate]:
        """List recurring templates ordered by next due date."""
        pass

    @abstractmethod
    def update_template(self, template_id: int, **fields: Any) -> None:
        """Update recurring template fields."""
        pass

    @abstractmethod
    def delete_template(self, template_id: int) -> None:
        """Delete a recurring template."""
        pass

    @abstractmethod
    def update_template_schedule(
        self,
        template_id: int,
        last_created_date: date,
        next_due_date: date,
        expected_next_due_date: Optional[date] = None,
    ) -> None:
        """Advance a template's schedule.

        When ``expected_next_due_date`` is given the write only applies if the
        stored next due date still matches it; otherwise ``ConflictError``.
        """
        pass

    @abstractmethod
    def materialize(
        self,
        template_id: int,
        draft: LedgerDraft,
        last_created_date: date,
        next_due_date: date,
        expected_next_due_date: date,
    ) -> LedgerEntry:
        """Insert a ledger entry and advance the template schedule atomically."""
        pass
