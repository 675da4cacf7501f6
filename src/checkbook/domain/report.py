"""Dashboard and reporting domain service."""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from checkbook.database.base import Database
from checkbook.domain.balance import BalanceService
from checkbook.domain.clock import Clock, SystemClock
from checkbook.domain.entities import (
    AccountFlow,
    AccountPerformance,
    CashDirection,
    CheckDirection,
    DailySummary,
    DailyTotals,
    FinancialSummary,
    MonthlyTrend,
    ZERO,
)
from checkbook.domain.errors import NotFoundError, ValidationError, account_not_found, user_not_found
from checkbook.utils.date_parser import parse_iso_date

logger = logging.getLogger(__name__)

MAX_TREND_MONTHS = 1200


def _total(entries) -> Decimal:
    return sum((e.amount for e in entries), ZERO)


class ReportService:
    """Service for building dashboard and report views."""

    def __init__(self, db: Database, clock: Optional[Clock] = None):
        """Initialize report service.

        Args:
            db: Database instance
            clock: Source of "today" for default dates
        """
        self.db = db
        self.clock = clock or SystemClock()
        self.balances = BalanceService(db, self.clock)

    def _require_user(self, user_id: int) -> None:
        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))

    def daily_summary(self, user_id: int, on_date: date | str | None = None) -> DailySummary:
        """Balance snapshot plus the day's movements.

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If the date is malformed
        """
        target = self.clock.today() if on_date is None else parse_iso_date(on_date)
        snapshot = self.balances.compute_balance(user_id, target)

        checks = self.db.list_checks(user_id, start_date=target, end_date=target)
        cash = self.db.list_cash(user_id, start_date=target, end_date=target)
        incoming = tuple(c for c in checks if c.direction == CheckDirection.INCOMING)
        outgoing = tuple(c for c in checks if c.direction == CheckDirection.OUTGOING)
        credit = tuple(c for c in cash if c.direction == CashDirection.CREDIT)
        debit = tuple(c for c in cash if c.direction == CashDirection.DEBIT)

        return DailySummary(
            date=target,
            balance=snapshot,
            incoming_checks=incoming,
            outgoing_checks=outgoing,
            credit_cash=credit,
            debit_cash=debit,
            totals=DailyTotals(
                incoming=_total(incoming),
                outgoing=_total(outgoing),
                credit_cash=_total(credit),
                debit_cash=_total(debit),
            ),
        )

    def financial_summary(
        self, user_id: int, start_date: date | str, end_date: date | str
    ) -> FinancialSummary:
        """Income versus expense over an inclusive date range.

        Income is incoming checks plus cash credits; expense is outgoing
        checks plus cash debits.

        Raises:
            ValidationError: If a date is malformed or start is after end
            NotFoundError: If the user does not exist
        """
        start = parse_iso_date(start_date, "start_date")
        end = parse_iso_date(end_date, "end_date")
        if start > end:
            raise ValidationError("start_date must not be after end_date")
        self._require_user(user_id)

        flows = []
        for account in self.db.list_accounts(user_id):
            flows.append(
                AccountFlow(
                    account_id=account.id,
                    name=account.name,
                    income=self.db.sum_checks(
                        account.id, CheckDirection.INCOMING, up_to=end, start=start
                    ),
                    expense=self.db.sum_checks(
                        account.id, CheckDirection.OUTGOING, up_to=end, start=start
                    ),
                )
            )

        summary = FinancialSummary(
            start_date=start,
            end_date=end,
            check_income=sum((f.income for f in flows), ZERO),
            cash_income=self.db.sum_cash(user_id, CashDirection.CREDIT, up_to=end, start=start),
            check_expense=sum((f.expense for f in flows), ZERO),
            cash_expense=self.db.sum_cash(user_id, CashDirection.DEBIT, up_to=end, start=start),
            accounts=tuple(flows),
        )
        logger.debug("Financial summary for user %s %s..%s: net=%s", user_id, start, end, summary.net)
        return summary

    def monthly_trends(
        self, user_id: int, year: Optional[int] = None, months: int = 12
    ) -> list[MonthlyTrend]:
        """Per-month income and expense, oldest month first.

        With ``year`` the range is January to December of that year, otherwise
        the last ``months`` months ending with the current month. Months with
        no activity are left out.
        """
        if not 1 <= months <= MAX_TREND_MONTHS:
            raise ValidationError(f"months must be between 1 and {MAX_TREND_MONTHS}")
        if year is not None and not 1 <= year <= 9999:
            raise ValidationError(f"Invalid year {year}")
        self._require_user(user_id)

        if year is not None:
            start = date(year, 1, 1)
            end = date(year, 12, 31)
        else:
            first_of_month = self.clock.today().replace(day=1)
            start = first_of_month - relativedelta(months=months - 1)
            end = first_of_month + relativedelta(months=1, days=-1)

        buckets: dict[str, dict[str, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))
        for check in self.db.list_checks(user_id, start_date=start, end_date=end):
            key = "income" if check.direction == CheckDirection.INCOMING else "expense"
            buckets[check.date.strftime("%Y-%m")][key] += check.amount
        for entry in self.db.list_cash(user_id, start_date=start, end_date=end):
            key = "cash_income" if entry.direction == CashDirection.CREDIT else "cash_expense"
            buckets[entry.date.strftime("%Y-%m")][key] += entry.amount

        return [MonthlyTrend(month=month, **buckets[month]) for month in sorted(buckets)]

    def account_performance(
        self,
        user_id: int,
        account_id: Optional[int] = None,
        start_date: date | str | None = None,
        end_date: date | str | None = None,
    ) -> list[AccountPerformance]:
        """Activity and balance per account.

        Counts and totals cover checks in the optional date range; the current
        balance is taken as of ``end_date`` (default today).

        Raises:
            NotFoundError: If the user or the requested account does not exist
        """
        start = parse_iso_date(start_date, "start_date") if start_date is not None else None
        end = parse_iso_date(end_date, "end_date") if end_date is not None else None
        if start is not None and end is not None and start > end:
            raise ValidationError("start_date must not be after end_date")
        self._require_user(user_id)

        accounts = self.db.list_accounts(user_id)
        if account_id is not None:
            accounts = [a for a in accounts if a.id == account_id]
            if not accounts:
                raise NotFoundError(account_not_found(account_id))

        as_of = end or self.clock.today()
        report = []
        for account in accounts:
            checks = self.db.list_checks(
                user_id, start_date=start, end_date=end, account_id=account.id
            )
            incoming = [c for c in checks if c.direction == CheckDirection.INCOMING]
            outgoing = [c for c in checks if c.direction == CheckDirection.OUTGOING]
            report.append(
                AccountPerformance(
                    account_id=account.id,
                    name=account.name,
                    opening_balance=account.opening_balance,
                    current_balance=self.balances.account_balance(account, as_of).balance,
                    incoming_count=len(incoming),
                    incoming_total=_total(incoming),
                    outgoing_count=len(outgoing),
                    outgoing_total=_total(outgoing),
                )
            )
        return report
