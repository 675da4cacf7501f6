"""Main CLI entry point."""

import logging

import click

from checkbook.database.factories import create_sqlite_database
from checkbook.domain.clock import FixedClock, SystemClock
from checkbook.domain.errors import ValidationError
from checkbook.utils.date_parser import parse_iso_date

# Import and register all commands at module level
from checkbook.cli.commands import (
    user,
    account,
    check,
    cash,
    balance,
    report,
    recurring,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides CHECKBOOK_DB_PATH environment variable)",
    envvar="CHECKBOOK_DB_PATH",
)
@click.option(
    "--today",
    help="Treat this date (YYYY-MM-DD) as today (overrides CHECKBOOK_TODAY)",
    envvar="CHECKBOOK_TODAY",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="CHECKBOOK_LOG_LEVEL",
    help="Logging verbosity",
)
@click.option(
    "--user",
    help="Username or ID the command acts for (overrides CHECKBOOK_USER)",
    envvar="CHECKBOOK_USER",
)
@click.pass_context
def cli(ctx, db_path: str | None, today: str | None, log_level: str, user: str | None):
    """Checkbook - multi-user account, cash and recurring transaction tracker.

    Balances are always computed from the ledger as of a date. Recurring
    templates produce checks or cash entries when they fall due.
    """
    ctx.ensure_object(dict)

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if today:
        try:
            ctx.obj["clock"] = FixedClock(parse_iso_date(today, "--today"))
        except ValidationError as e:
            raise click.BadParameter(str(e), param_hint="--today") from e
    else:
        ctx.obj["clock"] = SystemClock()
    ctx.obj["user"] = user

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
account.register_commands(cli)
check.register_commands(cli)
cash.register_commands(cli)
balance.register_commands(cli)
report.register_commands(cli)
recurring.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
