"""Tests for domain entities."""

import dataclasses
from datetime import date, datetime
from decimal import Decimal
import pytest

from checkbook.domain.entities import (
    AccountFlow,
    CashDirection,
    CashEntry,
    Check,
    CheckDirection,
    DailyTotals,
    EntryKind,
    FinancialSummary,
    MonthlyTrend,
    ProcessingResults,
)


def make_check(direction):
    return Check(
        id=1,
        account_id=1,
        direction=direction,
        amount=Decimal("10.00"),
        date=date(2024, 1, 1),
        payee=None,
        recurring_id=None,
        created_at=datetime(2024, 1, 1),
    )


def test_check_signed_amount():
    assert make_check(CheckDirection.INCOMING).signed_amount == Decimal("10.00")
    assert make_check(CheckDirection.OUTGOING).signed_amount == Decimal("-10.00")


def test_cash_signed_amount():
    entry = CashEntry(
        id=1,
        user_id=1,
        direction=CashDirection.DEBIT,
        amount=Decimal("2.50"),
        date=date(2024, 1, 1),
        description=None,
        recurring_id=None,
        created_at=datetime(2024, 1, 1),
    )
    assert entry.kind == EntryKind.CASH
    assert entry.signed_amount == Decimal("-2.50")


def test_entities_are_frozen():
    check = make_check(CheckDirection.INCOMING)
    with pytest.raises(dataclasses.FrozenInstanceError):
        check.amount = Decimal("1")


def test_enums_compare_with_strings():
    assert CheckDirection("incoming") == "incoming"
    assert EntryKind.CHECK.value == "check"


def test_daily_totals_net():
    totals = DailyTotals(
        incoming=Decimal("100"), outgoing=Decimal("30"), credit_cash=Decimal("5"), debit_cash=Decimal("1")
    )
    assert totals.net == Decimal("74")
    assert DailyTotals().net == Decimal("0")


def test_financial_summary_totals():
    summary = FinancialSummary(
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
        check_income=Decimal("100"),
        cash_income=Decimal("20"),
        check_expense=Decimal("50"),
        cash_expense=Decimal("10"),
        accounts=(AccountFlow(1, "A", Decimal("100"), Decimal("50")),),
    )
    assert summary.total_income == Decimal("120")
    assert summary.total_expense == Decimal("60")
    assert summary.net == Decimal("60")
    assert summary.accounts[0].net == Decimal("50")


def test_monthly_trend_defaults():
    trend = MonthlyTrend(month="2024-01", income=Decimal("3"))
    assert trend.total_expense == Decimal("0")
    assert trend.net == Decimal("3")


def test_processing_results_defaults():
    results = ProcessingResults(as_of=date(2024, 1, 1))
    assert results.processed == 0
    assert results.failed == 0
    assert results.errors == ()
