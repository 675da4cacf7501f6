"""Cash entry commands."""

import click

from checkbook.cli.date_filters import (
    parse_cli_date,
    period_flags_from,
    period_options,
    resolve_cli_date_range,
)
from checkbook.cli.error_handling import handle_domain_error
from checkbook.cli.resolution import current_user_or_exit
from checkbook.domain.errors import DomainError
from checkbook.domain.ledger import LedgerService


@click.group("cash")
def cash_group():
    """Record and list cash movements."""
    pass


@cash_group.command("add")
@click.argument("direction", type=click.Choice(["credit", "debit"]))
@click.argument("amount")
@click.option("--date", "on_date", help="Entry date (YYYY-MM-DD or relative like 'yesterday'); defaults to today")
@click.option("--description", help="What the cash was for")
@click.pass_context
def add_cash(ctx, direction: str, amount: str, on_date: str | None, description: str | None):
    """Record a cash credit or debit.

    Examples:
        checkbook --user alice cash add credit 50 --description "Sold bike"
        checkbook --user alice cash add debit 12.40 --date yesterday
    """
    user_id = current_user_or_exit(ctx)
    entry_date = parse_cli_date(ctx, on_date, ctx.obj["clock"].today())

    try:
        entry = LedgerService(ctx.obj["db"]).record_cash(
            user_id, direction, amount, entry_date, description=description
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded cash {entry.direction.value} {entry.id}: {entry.amount} on {entry.date}")


@cash_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.pass_context
def list_cash(ctx, start_date: str | None, end_date: str | None, **kwargs):
    """List your cash entries, newest first."""
    user_id = current_user_or_exit(ctx)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(kwargs),
        today=ctx.obj["clock"].today(),
    )

    entries = LedgerService(ctx.obj["db"]).list_cash(user_id, start, end)
    if not entries:
        click.echo("No cash entries found.")
        return

    click.echo(f"\n{'ID':>5s}  {'Date':10s}  {'Direction':9s}  {'Amount':>12s}  Description")
    click.echo("-" * 70)
    for e in entries:
        click.echo(
            f"{e.id:5d}  {e.date.isoformat():10s}  {e.direction.value:9s}  "
            f"{e.amount:12.2f}  {e.description or ''}"
        )


@cash_group.command("edit")
@click.argument("cash_id", type=int)
@click.option("--direction", type=click.Choice(["credit", "debit"]), help="New direction")
@click.option("--amount", help="New amount")
@click.option("--date", "on_date", help="New entry date")
@click.option("--description", help="New description; an empty string clears it")
@click.pass_context
def edit_cash(
    ctx,
    cash_id: int,
    direction: str | None,
    amount: str | None,
    on_date: str | None,
    description: str | None,
):
    """Change a recorded cash entry. Only the given fields change."""
    user_id = current_user_or_exit(ctx)

    changes: dict = {}
    if direction is not None:
        changes["direction"] = direction
    if amount is not None:
        changes["amount"] = amount
    if on_date is not None:
        changes["on_date"] = parse_cli_date(ctx, on_date, ctx.obj["clock"].today())
    if description is not None:
        changes["description"] = description

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        entry = LedgerService(ctx.obj["db"]).update_cash(cash_id, user_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated cash entry {entry.id}: {entry.direction.value} {entry.amount} on {entry.date}")


@cash_group.command("delete")
@click.argument("cash_id", type=int)
@click.pass_context
def delete_cash(ctx, cash_id: int):
    """Delete a cash entry."""
    user_id = current_user_or_exit(ctx)
    try:
        LedgerService(ctx.obj["db"]).delete_cash(cash_id, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted cash entry {cash_id}")


def register_commands(cli):
    """Register cash commands with main CLI."""
    cli.add_command(cash_group)
