"""CLI helpers for user and account resolution."""

from __future__ import annotations

import click

from checkbook.cli.error_handling import handle_domain_error
from checkbook.domain.account import AccountService, UserService
from checkbook.domain.errors import DomainError
from checkbook.utils.resolver import resolve_account, resolve_user


def current_user_or_exit(ctx: click.Context) -> int:
    """Resolve the --user option (or CHECKBOOK_USER), or exit with a CLI error."""
    user = ctx.obj.get("user")
    if not user:
        click.echo("Error: No user selected. Pass --user or set CHECKBOOK_USER.", err=True)
        ctx.exit(1)
    try:
        return resolve_user(UserService(ctx.obj["db"]), user)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, user_id: int, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, user_id, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
