"""Recurring transaction commands."""

import click

from checkbook.cli.date_filters import parse_cli_date
from checkbook.cli.error_handling import handle_domain_error
from checkbook.cli.resolution import current_user_or_exit, resolve_account_or_exit
from checkbook.domain.account import AccountService
from checkbook.domain.entities import EntryKind, RecurringTemplate
from checkbook.domain.errors import DomainError
from checkbook.domain.jobs import RecurringJob
from checkbook.domain.recurrence import RecurrenceService

FREQUENCIES = ["daily", "weekly", "monthly", "yearly"]


def _describe(t: RecurringTemplate) -> str:
    if t.kind == EntryKind.CHECK:
        what = f"{t.check_direction.value} check to account {t.account_id} ({t.payee})"
    else:
        what = f"cash {t.cash_direction.value} ({t.description})"
    status = "active" if t.is_active else "inactive"
    return (
        f"ID: {t.id:3d} | {t.frequency.value:7s} | {t.amount:10.2f} | {what} | "
        f"next {t.next_due_date.isoformat()} | {status}"
    )


@click.group("recurring")
def recurring_group():
    """Manage recurring transactions."""
    pass


@recurring_group.command("create")
@click.argument("kind", type=click.Choice(["check", "cash"]))
@click.argument("amount")
@click.argument("frequency", type=click.Choice(FREQUENCIES))
@click.option("--start-date", required=True, help="First anchor date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="Last date an occurrence may fall on")
@click.option("--day-of-month", type=int, help="Day of month (1-31) for monthly/yearly schedules")
@click.option("--day-of-week", type=int, help="Day of week (0=Sunday ... 6=Saturday) for weekly schedules")
@click.option("--account", help="Account name or ID (check templates)")
@click.option(
    "--direction",
    type=click.Choice(["incoming", "outgoing", "credit", "debit"]),
    required=True,
    help="incoming/outgoing for checks, credit/debit for cash",
)
@click.option("--payee", help="Payee (check templates)")
@click.option("--description", help="Description (cash templates)")
@click.pass_context
def create_recurring(
    ctx,
    kind: str,
    amount: str,
    frequency: str,
    start_date: str,
    end_date: str | None,
    day_of_month: int | None,
    day_of_week: int | None,
    account: str | None,
    direction: str,
    payee: str | None,
    description: str | None,
):
    """Create a recurring check or cash template.

    The first occurrence is one period after --start-date.

    Examples:
        checkbook --user alice recurring create check 1200 monthly --start-date 2024-01-01 \\
            --day-of-month 1 --account Checking --direction outgoing --payee Rent
        checkbook --user alice recurring create cash 20 weekly --start-date today \\
            --day-of-week 5 --direction debit --description "Lunch money"
    """
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    clock = ctx.obj["clock"]
    today = clock.today()

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)

    start = parse_cli_date(ctx, start_date, today, "start date")
    end = parse_cli_date(ctx, end_date, today, "end date") if end_date else None

    try:
        template = RecurrenceService(db, clock).create_template(
            user_id=user_id,
            kind=kind,
            amount=amount,
            frequency=frequency,
            start_date=start,
            end_date=end,
            day_of_month=day_of_month,
            day_of_week=day_of_week,
            account_id=account_id,
            check_direction=direction if kind == "check" else None,
            payee=payee,
            cash_direction=direction if kind == "cash" else None,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Created recurring transaction {template.id}, next due {template.next_due_date.isoformat()}"
    )


@recurring_group.command("list")
@click.option("--active/--inactive", "is_active", default=None, help="Filter by status")
@click.option("--kind", type=click.Choice(["check", "cash"]), help="Filter by kind")
@click.pass_context
def list_recurring(ctx, is_active: bool | None, kind: str | None):
    """List your recurring templates by next due date."""
    user_id = current_user_or_exit(ctx)
    templates = RecurrenceService(ctx.obj["db"], ctx.obj["clock"]).list_templates(
        user_id, is_active=is_active, kind=kind
    )
    if not templates:
        click.echo("No recurring transactions found.")
        return
    for t in templates:
        click.echo(_describe(t))


@recurring_group.command("show")
@click.argument("template_id", type=int)
@click.pass_context
def show_recurring(ctx, template_id: int):
    """Show a recurring template."""
    user_id = current_user_or_exit(ctx)
    try:
        t = RecurrenceService(ctx.obj["db"], ctx.obj["clock"]).get_template(template_id, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(_describe(t))
    click.echo(f"  Start date:   {t.start_date.isoformat()}")
    click.echo(f"  End date:     {t.end_date.isoformat() if t.end_date else '-'}")
    if t.day_of_month is not None:
        click.echo(f"  Day of month: {t.day_of_month}")
    if t.day_of_week is not None:
        click.echo(f"  Day of week:  {t.day_of_week}")
    last = t.last_created_date.isoformat() if t.last_created_date else "never"
    click.echo(f"  Last created: {last}")


@recurring_group.command("update")
@click.argument("template_id", type=int)
@click.option("--amount", help="New amount")
@click.option("--frequency", type=click.Choice(FREQUENCIES), help="New frequency")
@click.option("--start-date", help="New start date")
@click.option("--end-date", help="New end date")
@click.option("--day-of-month", type=int, help="New day of month")
@click.option("--day-of-week", type=int, help="New day of week")
@click.option("--account", help="New account name or ID (check templates)")
@click.option("--payee", help="New payee (check templates)")
@click.option("--description", help="New description (cash templates)")
@click.pass_context
def update_recurring(
    ctx,
    template_id: int,
    amount: str | None,
    frequency: str | None,
    start_date: str | None,
    end_date: str | None,
    day_of_month: int | None,
    day_of_week: int | None,
    account: str | None,
    payee: str | None,
    description: str | None,
):
    """Update a recurring template.

    Updates only the fields that are provided. Changing the schedule
    recomputes the next due date.
    """
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    clock = ctx.obj["clock"]
    today = clock.today()

    changes: dict = {}
    if amount is not None:
        changes["amount"] = amount
    if frequency is not None:
        changes["frequency"] = frequency
    if start_date is not None:
        changes["start_date"] = parse_cli_date(ctx, start_date, today, "start date")
    if end_date is not None:
        changes["end_date"] = parse_cli_date(ctx, end_date, today, "end date")
    if day_of_month is not None:
        changes["day_of_month"] = day_of_month
    if day_of_week is not None:
        changes["day_of_week"] = day_of_week
    if account is not None:
        changes["account_id"] = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
    if payee is not None:
        changes["payee"] = payee
    if description is not None:
        changes["description"] = description

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        template = RecurrenceService(db, clock).update_template(template_id, user_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Updated recurring transaction {template_id}, next due {template.next_due_date.isoformat()}"
    )


def _set_active(ctx, template_id: int, is_active: bool) -> None:
    user_id = current_user_or_exit(ctx)
    try:
        RecurrenceService(ctx.obj["db"], ctx.obj["clock"]).set_active(template_id, user_id, is_active)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"{'Activated' if is_active else 'Deactivated'} recurring transaction {template_id}")


@recurring_group.command("activate")
@click.argument("template_id", type=int)
@click.pass_context
def activate_recurring(ctx, template_id: int):
    """Resume a paused recurring template."""
    _set_active(ctx, template_id, True)


@recurring_group.command("deactivate")
@click.argument("template_id", type=int)
@click.pass_context
def deactivate_recurring(ctx, template_id: int):
    """Pause a recurring template."""
    _set_active(ctx, template_id, False)


@recurring_group.command("delete")
@click.argument("template_id", type=int)
@click.pass_context
def delete_recurring(ctx, template_id: int):
    """Delete a recurring template. Entries it already created are kept."""
    user_id = current_user_or_exit(ctx)
    try:
        RecurrenceService(ctx.obj["db"], ctx.obj["clock"]).delete_template(template_id, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted recurring transaction {template_id}")


@recurring_group.command("due")
@click.option("--date", "on_date", help="Show templates due on or before this date; defaults to today")
@click.pass_context
def due_recurring(ctx, on_date: str | None):
    """List your templates that are due."""
    user_id = current_user_or_exit(ctx)
    clock = ctx.obj["clock"]
    target = parse_cli_date(ctx, on_date, clock.today())
    due = [
        t
        for t in RecurrenceService(ctx.obj["db"], clock).find_due(target)
        if t.user_id == user_id
    ]
    if not due:
        click.echo(f"Nothing due as of {target.isoformat()}.")
        return
    for t in due:
        click.echo(_describe(t))


@recurring_group.command("trigger")
@click.argument("template_id", type=int)
@click.option("--date", "on_date", help="Date for the created entry; defaults to the next due date")
@click.pass_context
def trigger_recurring(ctx, template_id: int, on_date: str | None):
    """Create the entry for a recurring template right now."""
    user_id = current_user_or_exit(ctx)
    clock = ctx.obj["clock"]
    effective = parse_cli_date(ctx, on_date, clock.today()) if on_date else None
    try:
        result = RecurrenceService(ctx.obj["db"], clock).trigger(template_id, user_id, effective)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Created {result.entry.kind.value} entry {result.entry.id} dated "
        f"{result.last_created_date.isoformat()}; next due {result.next_due_date.isoformat()}"
    )


@click.command("run-recurring")
@click.option("--date", "on_date", help="Processing date; defaults to today")
@click.pass_context
def run_recurring(ctx, on_date: str | None):
    """Materialize every due recurring transaction for all users.

    Individual failures are reported and do not stop the run.
    """
    clock = ctx.obj["clock"]
    job = RecurringJob(ctx.obj["db"], clock)
    try:
        if on_date:
            results = job.process_due(parse_cli_date(ctx, on_date, clock.today()))
        else:
            results = job.run()
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Processed {results.processed} recurring transactions for {results.as_of.isoformat()}, "
        f"{results.failed} failed"
    )
    for err in results.errors:
        click.echo(f"  Recurring transaction {err.template_id}: {err.error}", err=True)


def register_commands(cli):
    """Register recurring commands with main CLI."""
    cli.add_command(recurring_group)
    cli.add_command(run_recurring)
