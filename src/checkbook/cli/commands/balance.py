"""Balance and dashboard commands."""

import click

from checkbook.cli.date_filters import parse_cli_date
from checkbook.cli.error_handling import handle_domain_error
from checkbook.cli.resolution import current_user_or_exit
from checkbook.domain.balance import BalanceService
from checkbook.domain.entities import BalanceSnapshot
from checkbook.domain.errors import DomainError
from checkbook.domain.report import ReportService


def _echo_snapshot(snapshot: BalanceSnapshot) -> None:
    click.echo(f"\nBalance as of {snapshot.date.isoformat()}")
    click.echo("-" * 60)
    for ab in snapshot.account_balances:
        flag = "  LOW" if ab.is_low_balance else ""
        click.echo(f"{ab.name:25s} {ab.bank_name:20s} {ab.balance:12.2f}{flag}")
    click.echo(f"{'Cash':46s} {snapshot.cash_balance:12.2f}")
    click.echo("-" * 60)
    click.echo(f"{'Overall':46s} {snapshot.overall_balance:12.2f}")


@click.command("balance")
@click.option("--date", "on_date", help="Balance date (YYYY-MM-DD or relative); defaults to today")
@click.pass_context
def balance(ctx, on_date: str | None):
    """Show account, cash and overall balances as of a date.

    Accounts below their low-balance threshold are marked LOW.
    """
    user_id = current_user_or_exit(ctx)
    clock = ctx.obj["clock"]
    target = parse_cli_date(ctx, on_date, clock.today())
    try:
        snapshot = BalanceService(ctx.obj["db"], clock).compute_balance(user_id, target)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_snapshot(snapshot)


@click.command("dashboard")
@click.option("--date", "on_date", help="Day to show (YYYY-MM-DD or relative); defaults to today")
@click.pass_context
def dashboard(ctx, on_date: str | None):
    """Show balances and the day's checks and cash movements."""
    user_id = current_user_or_exit(ctx)
    clock = ctx.obj["clock"]
    target = parse_cli_date(ctx, on_date, clock.today())
    try:
        summary = ReportService(ctx.obj["db"], clock).daily_summary(user_id, target)
    except DomainError as e:
        handle_domain_error(ctx, e)

    _echo_snapshot(summary.balance)
    click.echo(f"\nActivity on {summary.date.isoformat()}")
    for label, entries in (
        ("Incoming checks", summary.incoming_checks),
        ("Outgoing checks", summary.outgoing_checks),
    ):
        click.echo(f"{label}:")
        for c in entries:
            click.echo(f"  #{c.id:<5d} {c.amount:12.2f}  {c.payee or ''}")
    for label, entries in (
        ("Cash credit", summary.credit_cash),
        ("Cash debit", summary.debit_cash),
    ):
        click.echo(f"{label}:")
        for e in entries:
            click.echo(f"  #{e.id:<5d} {e.amount:12.2f}  {e.description or ''}")

    totals = summary.totals
    click.echo("-" * 60)
    click.echo(
        f"In: {totals.incoming:.2f}  Out: {totals.outgoing:.2f}  "
        f"Cash+: {totals.credit_cash:.2f}  Cash-: {totals.debit_cash:.2f}  Net: {totals.net:.2f}"
    )


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(balance)
    cli.add_command(dashboard)
