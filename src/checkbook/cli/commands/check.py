"""Check commands."""

import click

from checkbook.cli.date_filters import (
    parse_cli_date,
    period_flags_from,
    period_options,
    resolve_cli_date_range,
)
from checkbook.cli.error_handling import handle_domain_error
from checkbook.cli.resolution import current_user_or_exit, resolve_account_or_exit
from checkbook.domain.account import AccountService
from checkbook.domain.errors import DomainError
from checkbook.domain.ledger import LedgerService


@click.group("check")
def check_group():
    """Record and list checks."""
    pass


@check_group.command("add")
@click.argument("account", metavar="ACCOUNT")
@click.argument("direction", type=click.Choice(["incoming", "outgoing"]))
@click.argument("amount")
@click.option("--date", "on_date", help="Check date (YYYY-MM-DD or relative like 'yesterday'); defaults to today")
@click.option("--payee", help="Payee or payer")
@click.pass_context
def add_check(ctx, account: str, direction: str, amount: str, on_date: str | None, payee: str | None):
    """Record a check against an account.

    Examples:
        checkbook --user alice check add Checking outgoing 120.50 --payee "Landlord"
        checkbook --user alice check add 1 incoming 2000 --date 2024-03-01
    """
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
    check_date = parse_cli_date(ctx, on_date, ctx.obj["clock"].today())

    try:
        check = LedgerService(db).record_check(
            user_id, account_id, direction, amount, check_date, payee=payee
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded {check.direction.value} check {check.id}: {check.amount} on {check.date}")


@check_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.pass_context
def list_checks(ctx, account: str | None, start_date: str | None, end_date: str | None, **kwargs):
    """List checks on your accounts, newest first."""
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(kwargs),
        today=ctx.obj["clock"].today(),
    )

    checks = LedgerService(db).list_checks(user_id, start, end, account_id)
    if not checks:
        click.echo("No checks found.")
        return

    click.echo(f"\n{'ID':>5s}  {'Date':10s}  {'Account':>7s}  {'Direction':9s}  {'Amount':>12s}  Payee")
    click.echo("-" * 70)
    for c in checks:
        click.echo(
            f"{c.id:5d}  {c.date.isoformat():10s}  {c.account_id:7d}  "
            f"{c.direction.value:9s}  {c.amount:12.2f}  {c.payee or ''}"
        )


@check_group.command("edit")
@click.argument("check_id", type=int)
@click.option("--account", help="Move the check to this account (name or ID)")
@click.option("--direction", type=click.Choice(["incoming", "outgoing"]), help="New direction")
@click.option("--amount", help="New amount")
@click.option("--date", "on_date", help="New check date")
@click.option("--payee", help="New payee; an empty string clears it")
@click.pass_context
def edit_check(
    ctx,
    check_id: int,
    account: str | None,
    direction: str | None,
    amount: str | None,
    on_date: str | None,
    payee: str | None,
):
    """Change a recorded check. Only the given fields change."""
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]

    changes: dict = {}
    if account is not None:
        changes["account_id"] = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
    if direction is not None:
        changes["direction"] = direction
    if amount is not None:
        changes["amount"] = amount
    if on_date is not None:
        changes["on_date"] = parse_cli_date(ctx, on_date, ctx.obj["clock"].today())
    if payee is not None:
        changes["payee"] = payee

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        check = LedgerService(db).update_check(check_id, user_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Updated check {check.id}: {check.direction.value} {check.amount} on {check.date} "
        f"(account {check.account_id})"
    )


@check_group.command("delete")
@click.argument("check_id", type=int)
@click.pass_context
def delete_check(ctx, check_id: int):
    """Delete a check."""
    user_id = current_user_or_exit(ctx)
    try:
        LedgerService(ctx.obj["db"]).delete_check(check_id, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted check {check_id}")


def register_commands(cli):
    """Register check commands with main CLI."""
    cli.add_command(check_group)
