"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from checkbook.domain import entities
from checkbook.domain.entities import (
    CashDirection,
    CheckDirection,
    EntryKind,
    Frequency,
    NewCashEntry,
    NewCheck,
)
from checkbook.domain.errors import ConflictError, NotFoundError


@pytest.fixture
def user_id(temp_db):
    return temp_db.create_user("carol")


@pytest.fixture
def account_id(temp_db, user_id):
    return temp_db.create_account(
        user_id=user_id,
        name="Main",
        bank_name="Bank",
        opening_balance=Decimal("10.00"),
        low_balance_threshold=Decimal("0"),
    )


@pytest.fixture
def template_id(temp_db, user_id):
    return temp_db.create_template(
        user_id,
        kind=EntryKind.CASH,
        cash_direction=CashDirection.CREDIT,
        description="Interest",
        amount=Decimal("1.50"),
        frequency=Frequency.MONTHLY,
        start_date=date(2024, 1, 1),
        next_due_date=date(2024, 2, 1),
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db, account_id, user_id):
        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.user_id == user_id
        assert account.opening_balance == Decimal("10.00")
        assert isinstance(account.opening_balance, Decimal)
        assert isinstance(account.created_at, datetime)

    def test_insert_check_returns_domain_model(self, temp_db, account_id):
        check = temp_db.insert_ledger_entry(
            NewCheck(
                account_id=account_id,
                direction=CheckDirection.INCOMING,
                amount=Decimal("3.00"),
                date=date(2024, 1, 1),
            )
        )
        assert isinstance(check, entities.Check)
        assert check.direction == CheckDirection.INCOMING
        assert temp_db.get_check(check.id) == check

    def test_insert_cash_returns_domain_model(self, temp_db, user_id):
        entry = temp_db.insert_ledger_entry(
            NewCashEntry(
                user_id=user_id,
                direction=CashDirection.DEBIT,
                amount=Decimal("4.00"),
                date=date(2024, 1, 1),
                description="Coffee",
            )
        )
        assert isinstance(entry, entities.CashEntry)
        assert entry.kind == EntryKind.CASH

    def test_sums_respect_bounds(self, temp_db, account_id, user_id):
        for day, amount in ((1, "1.10"), (2, "2.20"), (3, "3.30")):
            temp_db.insert_ledger_entry(
                NewCheck(account_id, CheckDirection.OUTGOING, Decimal(amount), date(2024, 1, day))
            )
            temp_db.insert_ledger_entry(
                NewCashEntry(user_id, CashDirection.CREDIT, Decimal(amount), date(2024, 1, day))
            )

        assert temp_db.sum_checks(account_id, CheckDirection.OUTGOING) == Decimal("6.60")
        assert temp_db.sum_checks(account_id, CheckDirection.INCOMING) == Decimal("0")
        assert temp_db.sum_checks(
            account_id, CheckDirection.OUTGOING, up_to=date(2024, 1, 2)
        ) == Decimal("3.30")
        assert temp_db.sum_cash(
            user_id, CashDirection.CREDIT, up_to=date(2024, 1, 3), start=date(2024, 1, 2)
        ) == Decimal("5.50")

    def test_template_round_trip(self, temp_db, template_id, user_id):
        template = temp_db.get_template(template_id)

        assert isinstance(template, entities.RecurringTemplate)
        assert template.user_id == user_id
        assert template.kind == EntryKind.CASH
        assert template.frequency == Frequency.MONTHLY
        assert template.cash_direction == CashDirection.CREDIT
        assert template.is_active is True
        assert template.anchor_date == date(2024, 1, 1)

    def test_list_templates_filters(self, temp_db, template_id, user_id):
        assert [t.id for t in temp_db.list_templates(user_id=user_id)] == [template_id]
        assert temp_db.list_templates(kind=EntryKind.CHECK) == []
        temp_db.update_template(template_id, is_active=False)
        assert temp_db.list_templates(is_active=True) == []

    def test_update_template_unknown_field(self, temp_db, template_id):
        with pytest.raises(ValueError):
            temp_db.update_template(template_id, colour="red")

    def test_update_schedule_conditional(self, temp_db, template_id):
        temp_db.update_template_schedule(
            template_id,
            last_created_date=date(2024, 2, 1),
            next_due_date=date(2024, 3, 1),
            expected_next_due_date=date(2024, 2, 1),
        )
        template = temp_db.get_template(template_id)
        assert template.anchor_date == date(2024, 2, 1)
        assert template.next_due_date == date(2024, 3, 1)

        with pytest.raises(ConflictError):
            temp_db.update_template_schedule(
                template_id,
                last_created_date=date(2024, 2, 1),
                next_due_date=date(2024, 3, 1),
                expected_next_due_date=date(2024, 2, 1),
            )

    def test_update_schedule_missing_template(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_template_schedule(999, date(2024, 1, 1), date(2024, 1, 2))

    def test_materialize_rolls_back_on_conflict(self, temp_db, template_id, user_id):
        draft = NewCashEntry(
            user_id, CashDirection.CREDIT, Decimal("1.50"), date(2024, 2, 1), recurring_id=template_id
        )
        with pytest.raises(ConflictError):
            temp_db.materialize(
                template_id,
                draft,
                last_created_date=date(2024, 2, 1),
                next_due_date=date(2024, 3, 1),
                expected_next_due_date=date(2024, 1, 15),
            )
        assert temp_db.list_cash(user_id) == []
        assert temp_db.get_template(template_id).next_due_date == date(2024, 2, 1)

    def test_duplicate_materialization_is_conflict(self, temp_db, template_id, user_id):
        draft = NewCashEntry(
            user_id, CashDirection.CREDIT, Decimal("1.50"), date(2024, 2, 1), recurring_id=template_id
        )
        temp_db.insert_ledger_entry(draft)
        with pytest.raises(ConflictError):
            temp_db.insert_ledger_entry(draft)

    def test_account_dependency_counts(self, temp_db, account_id, user_id):
        temp_db.insert_ledger_entry(
            NewCheck(account_id, CheckDirection.INCOMING, Decimal("1.00"), date(2024, 1, 1))
        )
        assert temp_db.get_account_dependency_counts(account_id) == (1, 0)

    def test_duplicate_username(self, temp_db, user_id):
        with pytest.raises(ConflictError):
            temp_db.create_user("carol")

    def test_update_check_returns_domain_model(self, temp_db, account_id):
        check = temp_db.insert_ledger_entry(
            NewCheck(account_id, CheckDirection.INCOMING, Decimal("3.00"), date(2024, 1, 1))
        )
        updated = temp_db.update_check(
            check.id, direction=CheckDirection.OUTGOING, amount=Decimal("4.50"), payee="Shop"
        )
        assert isinstance(updated, entities.Check)
        assert updated.direction == CheckDirection.OUTGOING
        assert updated.amount == Decimal("4.50")
        assert temp_db.get_check(check.id) == updated

    def test_update_ledger_unknown_field(self, temp_db, user_id):
        entry = temp_db.insert_ledger_entry(
            NewCashEntry(user_id, CashDirection.DEBIT, Decimal("4.00"), date(2024, 1, 1))
        )
        with pytest.raises(ValueError):
            temp_db.update_cash(entry.id, payee="Shop")
        with pytest.raises(NotFoundError):
            temp_db.update_check(999, amount=Decimal("1.00"))

    def test_update_account_name(self, temp_db, account_id, user_id):
        temp_db.update_account(account_id, name="Renamed")
        account = temp_db.get_account(account_id)
        assert account.name == "Renamed"
        assert account.bank_name == "Bank"

        other = temp_db.create_account(
            user_id=user_id,
            name="Other",
            bank_name="Bank",
            opening_balance=Decimal("0"),
            low_balance_threshold=Decimal("0"),
        )
        with pytest.raises(ConflictError):
            temp_db.update_account(other, name="Renamed")
