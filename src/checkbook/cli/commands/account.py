"""Account management commands."""

import click

from checkbook.cli.error_handling import handle_domain_error
from checkbook.cli.resolution import current_user_or_exit, resolve_account_or_exit
from checkbook.domain.account import AccountService
from checkbook.domain.errors import DomainError


@click.group("account")
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--bank", help="Bank name (defaults to account name if not provided)")
@click.option("--opening-balance", default="0", show_default=True, help="Opening balance")
@click.option(
    "--threshold", default="0", show_default=True, help="Low-balance warning threshold"
)
@click.pass_context
def create_account(ctx, name: str, bank: str | None, opening_balance: str, threshold: str):
    """Create a new account.

    If --bank is not provided, the bank name will be set to the account name.

    Examples:
        checkbook --user alice account create "Checking" --opening-balance 500
        checkbook --user alice account create "Savings" --bank "Credit Union" --threshold 100
    """
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])

    try:
        account_id = service.create_account(
            user_id=user_id,
            name=name,
            bank_name=bank,
            opening_balance=opening_balance,
            low_balance_threshold=threshold,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")
    if bank is None:
        click.echo(f"Bank name set to '{name}'")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List your accounts."""
    user_id = current_user_or_exit(ctx)
    accounts = AccountService(ctx.obj["db"]).list_accounts(user_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | Bank: {acc.bank_name:20s} "
            f"| Opening: {acc.opening_balance:>10} | Threshold: {acc.low_balance_threshold}"
        )


@account_group.command("threshold")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount")
@click.pass_context
def set_threshold(ctx, account: str, amount: str) -> None:
    """Set the low-balance threshold of an account.

    ACCOUNT can be an account name or ID.
    """
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, user_id, account)

    try:
        service.update_threshold(account_id, user_id, amount)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Low-balance threshold for account {account_id} set to {amount}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--bank", help="New bank name")
@click.pass_context
def update_account(ctx, account: str, name: str | None, bank: str | None) -> None:
    """Rename an account or change its bank.

    ACCOUNT can be an account name or ID. The opening balance cannot be changed.
    """
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, user_id, account)

    if name is None and bank is None:
        click.echo("Nothing to update.")
        return

    try:
        updated = service.update_account(account_id, user_id, name=name, bank_name=bank)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account '{updated.name}' (ID: {account_id}), bank '{updated.bank_name}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    The account can only be deleted if it has no checks and no recurring
    check templates. Delete those first.

    Examples:
        checkbook --user alice account delete "Savings"
        checkbook --user alice account delete 2 --yes
    """
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, user_id, account)
    account_obj = service.require_account(account_id, user_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account '{account_obj.name}' (ID: {account_id})")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group)
