"""Ledger domain service for checks and cash entries."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from checkbook.database.base import Database
from checkbook.domain.entities import (
    CashDirection,
    CashEntry,
    Check,
    CheckDirection,
    NewCashEntry,
    NewCheck,
)
from checkbook.domain.errors import NotFoundError, ValidationError, account_not_found, user_not_found
from checkbook.utils.amount_parser import require_positive_amount
from checkbook.utils.date_parser import parse_iso_date

logger = logging.getLogger(__name__)


def coerce_check_direction(value: CheckDirection | str) -> CheckDirection:
    """Convert a string into a CheckDirection, raising ValidationError."""
    try:
        return CheckDirection(value)
    except ValueError as e:
        raise ValidationError(f"Check direction must be 'incoming' or 'outgoing', got '{value}'") from e


def coerce_cash_direction(value: CashDirection | str) -> CashDirection:
    """Convert a string into a CashDirection, raising ValidationError."""
    try:
        return CashDirection(value)
    except ValueError as e:
        raise ValidationError(f"Cash direction must be 'credit' or 'debit', got '{value}'") from e


class LedgerService:
    """Service for recording and listing checks and cash entries."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def record_check(
        self,
        user_id: int,
        account_id: int,
        direction: CheckDirection | str,
        amount: Decimal | int | str,
        on_date: date | str,
        payee: Optional[str] = None,
    ) -> Check:
        """Record a check against one of the user's accounts.

        Raises:
            NotFoundError: If the account does not exist or is not the user's
            ValidationError: If direction, amount or date is invalid
        """
        account = self.db.get_account(account_id)
        if account is None or account.user_id != user_id:
            raise NotFoundError(account_not_found(account_id))

        check = self.db.insert_ledger_entry(
            NewCheck(
                account_id=account_id,
                direction=coerce_check_direction(direction),
                amount=require_positive_amount(amount),
                date=parse_iso_date(on_date),
                payee=payee.strip() if payee else None,
            )
        )
        logger.info("Recorded %s check %s on account %s", check.direction.value, check.id, account_id)
        return check

    def record_cash(
        self,
        user_id: int,
        direction: CashDirection | str,
        amount: Decimal | int | str,
        on_date: date | str,
        description: Optional[str] = None,
    ) -> CashEntry:
        """Record a cash movement for the user.

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If direction, amount or date is invalid
        """
        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))

        entry = self.db.insert_ledger_entry(
            NewCashEntry(
                user_id=user_id,
                direction=coerce_cash_direction(direction),
                amount=require_positive_amount(amount),
                date=parse_iso_date(on_date),
                description=description.strip() if description else None,
            )
        )
        logger.info("Recorded %s cash entry %s for user %s", entry.direction.value, entry.id, user_id)
        return entry

    def list_checks(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[Check]:
        return self.db.list_checks(
            user_id, start_date=start_date, end_date=end_date, account_id=account_id
        )

    def list_cash(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[CashEntry]:
        return self.db.list_cash(user_id, start_date=start_date, end_date=end_date)

    def _require_check(self, check_id: int, user_id: int) -> Check:
        check = self.db.get_check(check_id)
        account = self.db.get_account(check.account_id) if check is not None else None
        if check is None or account is None or account.user_id != user_id:
            raise NotFoundError(f"Check {check_id} not found")
        return check

    def _require_cash(self, cash_id: int, user_id: int) -> CashEntry:
        entry = self.db.get_cash(cash_id)
        if entry is None or entry.user_id != user_id:
            raise NotFoundError(f"Cash entry {cash_id} not found")
        return entry

    def update_check(
        self,
        check_id: int,
        user_id: int,
        account_id: Optional[int] = None,
        direction: CheckDirection | str | None = None,
        amount: Decimal | int | str | None = None,
        on_date: date | str | None = None,
        payee: Optional[str] = None,
    ) -> Check:
        """Change fields of one of the user's checks.

        Only the given fields change. A blank payee clears it. Moving the
        check to another account requires that account to be the user's too.

        Raises:
            NotFoundError: If the check or the new account is not the user's
            ValidationError: If direction, amount or date is invalid
            ConflictError: If a recurring check would repeat a date
        """
        self._require_check(check_id, user_id)

        changes: dict = {}
        if account_id is not None:
            account = self.db.get_account(account_id)
            if account is None or account.user_id != user_id:
                raise NotFoundError(account_not_found(account_id))
            changes["account_id"] = account_id
        if direction is not None:
            changes["direction"] = coerce_check_direction(direction)
        if amount is not None:
            changes["amount"] = require_positive_amount(amount)
        if on_date is not None:
            changes["date"] = parse_iso_date(on_date)
        if payee is not None:
            changes["payee"] = payee.strip() or None
        if not changes:
            raise ValidationError("No check fields to update")

        check = self.db.update_check(check_id, **changes)
        logger.info("Updated check %s (%s)", check_id, ", ".join(sorted(changes)))
        return check

    def update_cash(
        self,
        cash_id: int,
        user_id: int,
        direction: CashDirection | str | None = None,
        amount: Decimal | int | str | None = None,
        on_date: date | str | None = None,
        description: Optional[str] = None,
    ) -> CashEntry:
        """Change fields of one of the user's cash entries. A blank description clears it."""
        self._require_cash(cash_id, user_id)

        changes: dict = {}
        if direction is not None:
            changes["direction"] = coerce_cash_direction(direction)
        if amount is not None:
            changes["amount"] = require_positive_amount(amount)
        if on_date is not None:
            changes["date"] = parse_iso_date(on_date)
        if description is not None:
            changes["description"] = description.strip() or None
        if not changes:
            raise ValidationError("No cash entry fields to update")

        entry = self.db.update_cash(cash_id, **changes)
        logger.info("Updated cash entry %s (%s)", cash_id, ", ".join(sorted(changes)))
        return entry

    def delete_check(self, check_id: int, user_id: int) -> None:
        """Delete one of the user's checks."""
        self._require_check(check_id, user_id)
        self.db.delete_check(check_id)

    def delete_cash(self, cash_id: int, user_id: int) -> None:
        """Delete one of the user's cash entries."""
        self._require_cash(cash_id, user_id)
        self.db.delete_cash(cash_id)
