"""User management commands."""

import click

from checkbook.cli.error_handling import handle_domain_error
from checkbook.domain.account import UserService
from checkbook.domain.errors import DomainError


@click.group("user")
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("username")
@click.pass_context
def create_user(ctx, username: str):
    """Create a new user.

    Examples:
        checkbook user create alice
    """
    service = UserService(ctx.obj["db"])
    try:
        user_id = service.create_user(username)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created user '{username.strip()}' (ID: {user_id})")


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all users."""
    users = UserService(ctx.obj["db"]).list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 40)
    for u in users:
        click.echo(f"ID: {u.id:3d} | {u.username}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group)
