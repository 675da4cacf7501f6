"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum values and Decimal
amounts are normalized in one place.
"""

from checkbook.domain import entities as domain
from checkbook.database.models import (
    User as ORMUser,
    Account as ORMAccount,
    Check as ORMCheck,
    Cash as ORMCash,
    RecurringTransaction as ORMRecurringTransaction,
)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        username=orm_user.username,
        created_at=orm_user.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        user_id=orm_account.user_id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        opening_balance=orm_account.opening_balance,
        low_balance_threshold=orm_account.low_balance_threshold,
        created_at=orm_account.created_at,
    )


def check_to_domain(orm_check: ORMCheck) -> domain.Check:
    """Convert SQLAlchemy Check model to domain Check entity."""
    return domain.Check(
        id=orm_check.id,
        account_id=orm_check.account_id,
        direction=domain.CheckDirection(orm_check.direction),
        amount=orm_check.amount,
        date=orm_check.date,
        payee=orm_check.payee,
        recurring_id=orm_check.recurring_id,
        created_at=orm_check.created_at,
    )


def cash_to_domain(orm_cash: ORMCash) -> domain.CashEntry:
    """Convert SQLAlchemy Cash model to domain CashEntry entity."""
    return domain.CashEntry(
        id=orm_cash.id,
        user_id=orm_cash.user_id,
        direction=domain.CashDirection(orm_cash.direction),
        amount=orm_cash.amount,
        date=orm_cash.date,
        description=orm_cash.description,
        recurring_id=orm_cash.recurring_id,
        created_at=orm_cash.created_at,
    )


def template_to_domain(orm_template: ORMRecurringTransaction) -> domain.RecurringTemplate:
    """Convert SQLAlchemy RecurringTransaction model to domain RecurringTemplate."""
    return domain.RecurringTemplate(
        id=orm_template.id,
        user_id=orm_template.user_id,
        kind=domain.EntryKind(orm_template.kind),
        amount=orm_template.amount,
        frequency=domain.Frequency(orm_template.frequency),
        start_date=orm_template.start_date,
        next_due_date=orm_template.next_due_date,
        account_id=orm_template.account_id,
        check_direction=(
            domain.CheckDirection(orm_template.check_direction)
            if orm_template.check_direction
            else None
        ),
        payee=orm_template.payee,
        cash_direction=(
            domain.CashDirection(orm_template.cash_direction)
            if orm_template.cash_direction
            else None
        ),
        description=orm_template.description,
        end_date=orm_template.end_date,
        day_of_month=orm_template.day_of_month,
        day_of_week=orm_template.day_of_week,
        is_active=bool(orm_template.is_active),
        last_created_date=orm_template.last_created_date,
        created_at=orm_template.created_at,
    )
