"""Balance engine.

Balances are a pure function of ledger state as of a date:

    account balance = opening balance + incoming checks - outgoing checks
    overall balance = cash credits - cash debits + sum of account balances

Nothing is cached; every call re-reads the store so balances are never stale.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from checkbook.database.base import Database
from checkbook.domain.clock import Clock, SystemClock
from checkbook.domain.entities import (
    Account,
    AccountBalance,
    BalanceSnapshot,
    CashDirection,
    CheckDirection,
    ZERO,
)
from checkbook.domain.errors import NotFoundError, user_not_found
from checkbook.utils.date_parser import parse_iso_date

logger = logging.getLogger(__name__)


class BalanceService:
    """Computes balance snapshots from accounts, checks and cash entries."""

    def __init__(self, db: Database, clock: Optional[Clock] = None):
        """Initialize balance service.

        Args:
            db: Database instance
            clock: Source of "today" when no date is given
        """
        self.db = db
        self.clock = clock or SystemClock()

    def account_balance(self, account: Account, as_of: date) -> AccountBalance:
        """Balance of a single account including checks dated on or before ``as_of``."""
        incoming = self.db.sum_checks(account.id, CheckDirection.INCOMING, up_to=as_of)
        outgoing = self.db.sum_checks(account.id, CheckDirection.OUTGOING, up_to=as_of)
        balance = account.opening_balance + incoming - outgoing
        threshold = account.low_balance_threshold or ZERO
        return AccountBalance(
            account_id=account.id,
            name=account.name,
            bank_name=account.bank_name,
            opening_balance=account.opening_balance,
            balance=balance,
            low_balance_threshold=threshold,
            is_low_balance=balance < threshold,
        )

    def cash_balance(self, user_id: int, as_of: date) -> Decimal:
        """Net cash position (credits minus debits) on or before ``as_of``."""
        credit = self.db.sum_cash(user_id, CashDirection.CREDIT, up_to=as_of)
        debit = self.db.sum_cash(user_id, CashDirection.DEBIT, up_to=as_of)
        return credit - debit

    def compute_balance(self, user_id: int, as_of: date | str | None = None) -> BalanceSnapshot:
        """Compute per-account and overall balances for a user as of a date.

        Args:
            user_id: Owning user ID
            as_of: Target date (``date`` or ``YYYY-MM-DD``); defaults to today

        Returns:
            BalanceSnapshot for the date

        Raises:
            ValidationError: If the date is malformed
            NotFoundError: If the user does not exist
            StorageError: If the store cannot be read
        """
        target = self.clock.today() if as_of is None else parse_iso_date(as_of)
        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))

        logger.debug("Calculating balance for user %s as of %s", user_id, target)
        cash_net = self.cash_balance(user_id, target)
        account_balances = tuple(
            self.account_balance(account, target) for account in self.db.list_accounts(user_id)
        )
        overall = cash_net + sum((ab.balance for ab in account_balances), ZERO)

        logger.debug(
            "Balance for user %s on %s: overall=%s cash=%s accounts=%d",
            user_id,
            target,
            overall,
            cash_net,
            len(account_balances),
        )
        return BalanceSnapshot(
            user_id=user_id,
            date=target,
            overall_balance=overall,
            cash_balance=cash_net,
            account_balances=account_balances,
        )
