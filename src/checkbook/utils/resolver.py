"""Utility for resolving user and account names to IDs."""

from checkbook.domain.account import AccountService, UserService
from checkbook.domain.errors import NotFoundError, user_not_found


def _as_id(value: str | int) -> int | None:
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def resolve_user(user_service: UserService, user: str | int) -> int:
    """Resolve a username or ID to a user ID.

    Raises:
        NotFoundError: If no such user exists
    """
    user_id = _as_id(user)
    if user_id is not None and user_service.get_user(user_id) is not None:
        return user_id

    # Numeric usernames are allowed, so fall back to a name lookup
    found = user_service.get_user_by_username(str(user))
    if found is None:
        raise NotFoundError(user_not_found(user_id if user_id is not None else str(user)))
    return found.id


def resolve_account(account_service: AccountService, user_id: int, account: str | int) -> int:
    """Resolve an account name or ID to one of the user's account IDs.

    Args:
        account_service: AccountService instance
        user_id: Owning user ID; accounts of other users are never matched
        account: Account name or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If the user has no such account
    """
    account_id = _as_id(account)
    if account_id is not None:
        return account_service.require_account(account_id, user_id).id

    for acc in account_service.list_accounts(user_id):
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Account '{account}' not found")
