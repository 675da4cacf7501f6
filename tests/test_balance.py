"""Tests for the balance engine."""

from datetime import date, timedelta
from decimal import Decimal
import pytest

from checkbook.domain.errors import NotFoundError, ValidationError


def test_zero_activity_identity(balance_service, account_service, sample_user, sample_account):
    savings_id = account_service.create_account(
        user_id=sample_user.id, name="Savings", opening_balance="250.50"
    )

    snapshot = balance_service.compute_balance(sample_user.id, "2024-01-01")

    assert snapshot.cash_balance == Decimal("0")
    balances = {ab.account_id: ab.balance for ab in snapshot.account_balances}
    assert balances == {sample_account.id: Decimal("1000.00"), savings_id: Decimal("250.50")}
    assert snapshot.overall_balance == Decimal("1250.50")


def test_no_accounts_no_cash(balance_service, sample_user):
    snapshot = balance_service.compute_balance(sample_user.id)
    assert snapshot.date == date(2024, 3, 15)
    assert snapshot.overall_balance == Decimal("0")
    assert snapshot.account_balances == ()


def test_checks_and_cash(balance_service, ledger_service, sample_user, sample_account):
    ledger_service.record_check(sample_user.id, sample_account.id, "incoming", "500.00", "2024-01-10")
    ledger_service.record_check(sample_user.id, sample_account.id, "outgoing", "200.25", "2024-01-12")
    ledger_service.record_cash(sample_user.id, "credit", "80.00", "2024-01-11")
    ledger_service.record_cash(sample_user.id, "debit", "30.10", "2024-01-13")

    snapshot = balance_service.compute_balance(sample_user.id, "2024-01-31")

    assert snapshot.account_balances[0].balance == Decimal("1299.75")
    assert snapshot.cash_balance == Decimal("49.90")
    assert snapshot.overall_balance == Decimal("1349.65")


def test_additivity(balance_service, ledger_service, account_service, sample_user, sample_account):
    other_id = account_service.create_account(
        user_id=sample_user.id, name="Joint", opening_balance="-40"
    )
    ledger_service.record_check(sample_user.id, other_id, "incoming", "15.00", "2024-02-01")
    ledger_service.record_cash(sample_user.id, "debit", "7.77", "2024-02-02")

    snapshot = balance_service.compute_balance(sample_user.id, "2024-02-28")

    assert snapshot.overall_balance == snapshot.cash_balance + sum(
        ab.balance for ab in snapshot.account_balances
    )


def test_entries_after_date_are_excluded(
    balance_service, ledger_service, sample_user, sample_account
):
    ledger_service.record_check(sample_user.id, sample_account.id, "outgoing", "100", "2024-02-01")
    ledger_service.record_cash(sample_user.id, "credit", "10", "2024-02-01")

    before = balance_service.compute_balance(sample_user.id, "2024-01-31")
    on_day = balance_service.compute_balance(sample_user.id, "2024-02-01")

    assert before.overall_balance == Decimal("1000.00")
    # Entries dated exactly on the target date are included
    assert on_day.overall_balance == Decimal("910.00")


def test_history_is_stable(balance_service, ledger_service, sample_user, sample_account):
    ledger_service.record_check(sample_user.id, sample_account.id, "incoming", "40", "2024-01-05")
    first = balance_service.compute_balance(sample_user.id, "2024-01-10")

    ledger_service.record_check(sample_user.id, sample_account.id, "incoming", "99", "2024-01-11")
    ledger_service.record_cash(sample_user.id, "debit", "5", "2024-02-01")
    second = balance_service.compute_balance(sample_user.id, "2024-01-10")

    assert first == second


def test_balance_walks_by_day(balance_service, ledger_service, sample_user, sample_account):
    start = date(2024, 1, 1)
    for offset in range(5):
        ledger_service.record_cash(sample_user.id, "credit", "1.00", start + timedelta(days=offset))

    for offset in range(5):
        snapshot = balance_service.compute_balance(sample_user.id, start + timedelta(days=offset))
        assert snapshot.cash_balance == Decimal(offset + 1)


def test_low_balance_is_strict(balance_service, ledger_service, sample_user, sample_account):
    # Threshold is 100.00, opening balance 1000.00
    ledger_service.record_check(sample_user.id, sample_account.id, "outgoing", "900.00", "2024-01-02")
    at_threshold = balance_service.compute_balance(sample_user.id, "2024-01-02")
    assert at_threshold.account_balances[0].balance == Decimal("100.00")
    assert at_threshold.account_balances[0].is_low_balance is False

    ledger_service.record_check(sample_user.id, sample_account.id, "outgoing", "0.01", "2024-01-03")
    below = balance_service.compute_balance(sample_user.id, "2024-01-03")
    assert below.account_balances[0].is_low_balance is True


def test_other_users_data_is_ignored(
    balance_service, ledger_service, account_service, sample_user, other_user, sample_account
):
    bobs = account_service.create_account(user_id=other_user.id, name="Checking", opening_balance="5")
    ledger_service.record_check(other_user.id, bobs, "incoming", "1000", "2024-01-01")
    ledger_service.record_cash(other_user.id, "credit", "1000", "2024-01-01")

    snapshot = balance_service.compute_balance(sample_user.id, "2024-01-31")
    assert snapshot.overall_balance == Decimal("1000.00")
    assert [ab.account_id for ab in snapshot.account_balances] == [sample_account.id]


def test_unknown_user(balance_service):
    with pytest.raises(NotFoundError):
        balance_service.compute_balance(12345, "2024-01-01")


@pytest.mark.parametrize("bad", ["2024-13-01", "2024/01/01", "yesterday", ""])
def test_malformed_date(balance_service, sample_user, bad):
    with pytest.raises(ValidationError):
        balance_service.compute_balance(sample_user.id, bad)


def test_repeated_calls_are_identical(balance_service, ledger_service, sample_user, sample_account):
    ledger_service.record_check(sample_user.id, sample_account.id, "incoming", "12.34", "2024-01-01")
    assert balance_service.compute_balance(sample_user.id, "2024-06-30") == balance_service.compute_balance(
        sample_user.id, "2024-06-30"
    )
