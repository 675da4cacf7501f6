"""Report commands."""

from datetime import date

import click

from checkbook.cli.date_filters import period_flags_from, period_options, resolve_cli_date_range
from checkbook.cli.error_handling import handle_domain_error
from checkbook.cli.resolution import current_user_or_exit, resolve_account_or_exit
from checkbook.domain.account import AccountService
from checkbook.domain.errors import DomainError
from checkbook.domain.report import ReportService
from checkbook.utils.date_parser import get_date_range


@click.group("report")
def report_group():
    """Financial reports."""
    pass


@report_group.command("summary")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.pass_context
def summary(ctx, start_date: str | None, end_date: str | None, **kwargs):
    """Income versus expense over a date range (default: this month)."""
    user_id = current_user_or_exit(ctx)
    clock = ctx.obj["clock"]
    today = clock.today()
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(kwargs),
        today=today,
        default_range=get_date_range("this-month", today=today),
    )
    try:
        report = ReportService(ctx.obj["db"], clock).financial_summary(
            user_id, start or date.min, end or today
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nSummary {report.start_date.isoformat()} to {report.end_date.isoformat()}")
    click.echo("-" * 50)
    click.echo(f"{'Check income':20s} {report.check_income:12.2f}")
    click.echo(f"{'Cash income':20s} {report.cash_income:12.2f}")
    click.echo(f"{'Check expense':20s} {report.check_expense:12.2f}")
    click.echo(f"{'Cash expense':20s} {report.cash_expense:12.2f}")
    click.echo("-" * 50)
    click.echo(f"{'Total income':20s} {report.total_income:12.2f}")
    click.echo(f"{'Total expense':20s} {report.total_expense:12.2f}")
    click.echo(f"{'Net':20s} {report.net:12.2f}")
    if report.accounts:
        click.echo("\nBy account:")
        for flow in report.accounts:
            click.echo(
                f"  {flow.name:20s} in {flow.income:10.2f}  out {flow.expense:10.2f}  net {flow.net:10.2f}"
            )


@report_group.command("trends")
@click.option("--year", type=int, help="Calendar year to report on")
@click.option("--months", type=int, default=12, show_default=True, help="Number of recent months")
@click.pass_context
def trends(ctx, year: int | None, months: int):
    """Monthly income and expense trends."""
    user_id = current_user_or_exit(ctx)
    try:
        rows = ReportService(ctx.obj["db"], ctx.obj["clock"]).monthly_trends(
            user_id, year=year, months=months
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo("No activity found.")
        return

    click.echo(f"\n{'Month':7s}  {'Income':>12s}  {'Expense':>12s}  {'Net':>12s}")
    click.echo("-" * 50)
    for row in rows:
        click.echo(
            f"{row.month:7s}  {row.total_income:12.2f}  {row.total_expense:12.2f}  {row.net:12.2f}"
        )


@report_group.command("accounts")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative)")
@click.pass_context
def accounts(ctx, account: str | None, start_date: str | None, end_date: str | None):
    """Per-account activity and balance."""
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    clock = ctx.obj["clock"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={},
        today=clock.today(),
    )
    try:
        rows = ReportService(db, clock).account_performance(user_id, account_id, start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not rows:
        click.echo("No accounts found.")
        return

    for row in rows:
        click.echo(f"\n{row.name} (ID: {row.account_id})")
        click.echo(f"  Opening balance: {row.opening_balance:12.2f}")
        click.echo(f"  Current balance: {row.current_balance:12.2f}")
        click.echo(f"  Incoming: {row.incoming_count:4d} checks {row.incoming_total:12.2f}")
        click.echo(f"  Outgoing: {row.outgoing_count:4d} checks {row.outgoing_total:12.2f}")
        click.echo(f"  Net flow: {row.net_flow:12.2f}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group)
