"""Recurring transaction scheduling.

Due-date math and due-set selection are pure functions; ``RecurrenceService``
wraps them with template storage, validation and materialization.
"""

import calendar
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Iterable, Optional

from dateutil.relativedelta import relativedelta

from checkbook.database.base import Database
from checkbook.domain.clock import Clock, SystemClock
from checkbook.domain.entities import (
    CashDirection,
    CheckDirection,
    EntryKind,
    Frequency,
    LedgerDraft,
    MaterializedTransaction,
    NewCashEntry,
    NewCheck,
    RecurringTemplate,
)
from checkbook.domain.errors import (
    NotFoundError,
    StateError,
    ValidationError,
    account_not_found,
    template_not_active,
    template_not_found,
    user_not_found,
)
from checkbook.domain.ledger import coerce_cash_direction, coerce_check_direction
from checkbook.utils.amount_parser import require_positive_amount
from checkbook.utils.date_parser import parse_iso_date

logger = logging.getLogger(__name__)

SCHEDULE_FIELDS = frozenset({"frequency", "start_date", "day_of_month", "day_of_week"})


def coerce_frequency(value: Frequency | str) -> Frequency:
    """Convert a string into a Frequency, raising ValidationError."""
    try:
        return Frequency(value)
    except ValueError as e:
        raise ValidationError(
            f"Frequency must be 'daily', 'weekly', 'monthly', or 'yearly', got '{value}'"
        ) from e


def coerce_kind(value: EntryKind | str) -> EntryKind:
    """Convert a string into an EntryKind, raising ValidationError."""
    try:
        return EntryKind(value)
    except ValueError as e:
        raise ValidationError(f"Transaction type must be 'check' or 'cash', got '{value}'") from e


def validate_day_of_month(day_of_month: Optional[int]) -> Optional[int]:
    if day_of_month is not None and not 1 <= day_of_month <= 31:
        raise ValidationError("day_of_month must be between 1 and 31")
    return day_of_month


def validate_day_of_week(day_of_week: Optional[int]) -> Optional[int]:
    if day_of_week is not None and not 0 <= day_of_week <= 6:
        raise ValidationError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")
    return day_of_week


def _clamp_day(target: date, day_of_month: int) -> date:
    last_day = calendar.monthrange(target.year, target.month)[1]
    return target.replace(day=min(day_of_month, last_day))


def next_due_date(
    frequency: Frequency | str,
    anchor: date,
    day_of_month: Optional[int] = None,
    day_of_week: Optional[int] = None,
) -> date:
    """Compute the occurrence that follows ``anchor``.

    Args:
        frequency: daily, weekly, monthly or yearly
        anchor: Last materialized date, or the start date before the first run
        day_of_month: Preferred day (1-31) for monthly/yearly schedules; clamped
            to the last day of shorter months and re-applied every occurrence
        day_of_week: Weekday for weekly schedules, 0 = Sunday ... 6 = Saturday

    Returns:
        The next due date, always strictly after ``anchor``

    Raises:
        ValidationError: If the frequency or day values are invalid
    """
    frequency = coerce_frequency(frequency)
    validate_day_of_month(day_of_month)
    validate_day_of_week(day_of_week)

    if frequency == Frequency.DAILY:
        return anchor + timedelta(days=1)

    if frequency == Frequency.WEEKLY:
        if day_of_week is None:
            return anchor + timedelta(days=7)
        # date.weekday() counts from Monday; day_of_week counts from Sunday
        anchor_dow = (anchor.weekday() + 1) % 7
        days_ahead = (day_of_week - anchor_dow) % 7 or 7
        return anchor + timedelta(days=days_ahead)

    if frequency == Frequency.MONTHLY:
        target = anchor + relativedelta(months=1)
    elif frequency == Frequency.YEARLY:
        target = anchor + relativedelta(years=1)
    else:
        raise ValidationError(f"Unknown frequency: {frequency}")

    if day_of_month is not None:
        target = _clamp_day(target, day_of_month)
    return target


def is_due(template: RecurringTemplate, as_of: date) -> bool:
    """Whether a template should materialize on or before ``as_of``."""
    due = template.next_due_date
    return (
        template.is_active
        and due <= as_of
        and template.start_date <= due
        and (template.end_date is None or template.end_date >= due)
    )


def find_due(templates: Iterable[RecurringTemplate], as_of: date) -> list[RecurringTemplate]:
    """Select the templates due as of a date, earliest due first.

    Templates past their end date are never returned even though they stay
    active.
    """
    due = [t for t in templates if is_due(t, as_of)]
    return sorted(due, key=lambda t: (t.next_due_date, t.id))


def build_draft(template: RecurringTemplate, effective_date: date) -> LedgerDraft:
    """Build the ledger entry a template produces for a date."""
    if template.kind == EntryKind.CHECK:
        return NewCheck(
            account_id=template.account_id,
            direction=template.check_direction,
            amount=template.amount,
            date=effective_date,
            payee=template.payee,
            recurring_id=template.id,
        )
    return NewCashEntry(
        user_id=template.user_id,
        direction=template.cash_direction,
        amount=template.amount,
        date=effective_date,
        description=template.description,
        recurring_id=template.id,
    )


class RecurrenceService:
    """Service for recurring templates and their materialization."""

    def __init__(self, db: Database, clock: Optional[Clock] = None):
        """Initialize recurrence service.

        Args:
            db: Database instance
            clock: Source of "today" for due checks
        """
        self.db = db
        self.clock = clock or SystemClock()

    def _require_owned_account(self, account_id: Optional[int], user_id: int) -> None:
        account = self.db.get_account(account_id) if account_id is not None else None
        if account is None or account.user_id != user_id:
            logger.warning("Account not found or access denied: %s", account_id)
            raise NotFoundError(account_not_found(account_id))

    def _validate(self, user_id: int, values: dict[str, Any]) -> dict[str, Any]:
        """Normalize and validate a complete set of template fields."""
        kind = coerce_kind(values["kind"])
        out: dict[str, Any] = {
            "kind": kind,
            "amount": require_positive_amount(values["amount"]),
            "frequency": coerce_frequency(values["frequency"]),
            "start_date": parse_iso_date(values["start_date"], "start_date"),
            "end_date": (
                parse_iso_date(values["end_date"], "end_date")
                if values.get("end_date") is not None
                else None
            ),
            "day_of_month": validate_day_of_month(values.get("day_of_month")),
            "day_of_week": validate_day_of_week(values.get("day_of_week")),
        }
        if out["end_date"] is not None and out["end_date"] < out["start_date"]:
            raise ValidationError("end_date must not be before start_date")

        if kind == EntryKind.CHECK:
            if values.get("account_id") is None:
                raise ValidationError("account_id is required for check transactions")
            if not values.get("check_direction"):
                raise ValidationError("check_direction is required for check transactions")
            payee = (values.get("payee") or "").strip()
            if not payee:
                raise ValidationError("payee is required for check transactions")
            self._require_owned_account(values["account_id"], user_id)
            out.update(
                account_id=values["account_id"],
                check_direction=coerce_check_direction(values["check_direction"]),
                payee=payee,
                cash_direction=None,
                description=None,
            )
        else:
            if not values.get("cash_direction"):
                raise ValidationError("cash_direction is required for cash transactions")
            description = (values.get("description") or "").strip()
            if not description:
                raise ValidationError("description is required for cash transactions")
            out.update(
                account_id=None,
                check_direction=None,
                payee=None,
                cash_direction=coerce_cash_direction(values["cash_direction"]),
                description=description,
            )
        return out

    def create_template(
        self,
        user_id: int,
        kind: EntryKind | str,
        amount: Decimal | int | str,
        frequency: Frequency | str,
        start_date: date | str,
        end_date: date | str | None = None,
        day_of_month: Optional[int] = None,
        day_of_week: Optional[int] = None,
        account_id: Optional[int] = None,
        check_direction: CheckDirection | str | None = None,
        payee: Optional[str] = None,
        cash_direction: CashDirection | str | None = None,
        description: Optional[str] = None,
    ) -> RecurringTemplate:
        """Create a recurring template with its first due date.

        The first due date is the occurrence after ``start_date``.

        Raises:
            ValidationError: If any field is missing or invalid
            NotFoundError: If the user or the check account does not exist
        """
        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))

        values = self._validate(
            user_id,
            dict(
                kind=kind,
                amount=amount,
                frequency=frequency,
                start_date=start_date,
                end_date=end_date,
                day_of_month=day_of_month,
                day_of_week=day_of_week,
                account_id=account_id,
                check_direction=check_direction,
                payee=payee,
                cash_direction=cash_direction,
                description=description,
            ),
        )
        values["next_due_date"] = next_due_date(
            values["frequency"], values["start_date"], values["day_of_month"], values["day_of_week"]
        )
        template_id = self.db.create_template(user_id, **values)
        logger.info(
            "Created recurring %s transaction %s for user %s, next due %s",
            values["kind"].value,
            template_id,
            user_id,
            values["next_due_date"],
        )
        return self.db.get_template(template_id)

    def get_template(self, template_id: int, user_id: Optional[int] = None) -> RecurringTemplate:
        """Get a template, checking ownership when a user is given.

        Raises:
            NotFoundError: If the template is missing or owned by another user
        """
        template = self.db.get_template(template_id)
        if template is None or (user_id is not None and template.user_id != user_id):
            raise NotFoundError(template_not_found(template_id))
        return template

    def list_templates(
        self,
        user_id: int,
        is_active: Optional[bool] = None,
        kind: EntryKind | str | None = None,
    ) -> list[RecurringTemplate]:
        return self.db.list_templates(
            user_id=user_id,
            is_active=is_active,
            kind=coerce_kind(kind) if kind is not None else None,
        )

    def update_template(self, template_id: int, user_id: int, **changes: Any) -> RecurringTemplate:
        """Update template fields.

        Changing any schedule field recomputes ``next_due_date`` from the
        anchor (last created date, or start date before the first run).

        Raises:
            NotFoundError: If the template or a new check account is not found
            ValidationError: If the merged fields are invalid
        """
        current = self.get_template(template_id, user_id)
        allowed = {
            "kind",
            "amount",
            "frequency",
            "start_date",
            "end_date",
            "day_of_month",
            "day_of_week",
            "account_id",
            "check_direction",
            "payee",
            "cash_direction",
            "description",
            "is_active",
        }
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        merged = {
            name: getattr(current, name) for name in allowed if name != "is_active"
        }
        merged.update({k: v for k, v in changes.items() if k != "is_active"})
        values = self._validate(user_id, merged)

        if "is_active" in changes:
            values["is_active"] = bool(changes["is_active"])
        if SCHEDULE_FIELDS & set(changes):
            anchor = current.last_created_date or values["start_date"]
            values["next_due_date"] = next_due_date(
                values["frequency"], anchor, values["day_of_month"], values["day_of_week"]
            )

        self.db.update_template(template_id, **values)
        logger.info("Updated recurring transaction %s", template_id)
        return self.db.get_template(template_id)

    def set_active(self, template_id: int, user_id: int, is_active: bool) -> RecurringTemplate:
        """Activate or deactivate a template without touching its history."""
        self.get_template(template_id, user_id)
        self.db.update_template(template_id, is_active=is_active)
        logger.info(
            "%s recurring transaction %s", "Activated" if is_active else "Deactivated", template_id
        )
        return self.db.get_template(template_id)

    def delete_template(self, template_id: int, user_id: int) -> None:
        """Delete a template. Entries it already created are kept."""
        self.get_template(template_id, user_id)
        self.db.delete_template(template_id)
        logger.info("Deleted recurring transaction %s", template_id)

    def find_due(self, as_of: date | str | None = None) -> list[RecurringTemplate]:
        """Active templates due on or before ``as_of`` (default today), earliest first."""
        target = self.clock.today() if as_of is None else parse_iso_date(as_of)
        due = find_due(self.db.list_templates(is_active=True), target)
        logger.debug("Found %d recurring transactions due up to %s", len(due), target)
        return due

    def fire(
        self, template: RecurringTemplate, effective_date: date | str
    ) -> MaterializedTransaction:
        """Materialize one ledger entry from a template and advance its schedule.

        The insert and the schedule update happen in one storage transaction.
        The schedule update only applies while the stored next due date still
        matches ``template.next_due_date``, and a template can produce at most
        one entry per date.

        Raises:
            StateError: If the template is inactive
            NotFoundError: If a check template's account no longer exists
            ConflictError: If the template was fired concurrently or already
                produced an entry for this date
        """
        on_date = parse_iso_date(effective_date)
        if not template.is_active:
            raise StateError(template_not_active(template.id))
        if template.kind == EntryKind.CHECK:
            self._require_owned_account(template.account_id, template.user_id)

        following = next_due_date(
            template.frequency, on_date, template.day_of_month, template.day_of_week
        )
        entry = self.db.materialize(
            template.id,
            build_draft(template, on_date),
            last_created_date=on_date,
            next_due_date=following,
            expected_next_due_date=template.next_due_date,
        )
        logger.info(
            "Created %s transaction %s from recurring template %s for %s",
            entry.kind.value,
            entry.id,
            template.id,
            on_date,
        )
        return MaterializedTransaction(
            template_id=template.id,
            entry=entry,
            last_created_date=on_date,
            next_due_date=following,
        )

    def trigger(
        self, template_id: int, user_id: int, on_date: date | str | None = None
    ) -> MaterializedTransaction:
        """Fire a template now, for ``on_date`` or its next due date.

        Raises:
            NotFoundError: If the template does not exist or is not the user's
            StateError: If the template is not active
        """
        template = self.get_template(template_id, user_id)
        if not template.is_active:
            logger.warning("Refusing to trigger inactive recurring transaction %s", template_id)
            raise StateError(template_not_active(template_id))
        logger.info("Manually triggering recurring transaction %s for user %s", template_id, user_id)
        return self.fire(template, on_date if on_date is not None else template.next_due_date)
