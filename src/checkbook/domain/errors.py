"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist or is not owned by the user."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or stale schedule state."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class StateError(DomainError):
    """Operation not allowed in the entity's current state."""


class StorageError(DomainError):
    """Reading or writing the underlying store failed."""


def user_not_found(user: int | str) -> str:
    """Return message for missing user."""
    if isinstance(user, int):
        return f"User {user} not found"
    return f"User '{user}' not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def template_not_found(template_id: int) -> str:
    """Return message for missing recurring template."""
    return f"Recurring transaction {template_id} not found"


def template_not_active(template_id: int) -> str:
    """Return message when firing a deactivated template."""
    return f"Recurring transaction {template_id} is not active"


def schedule_conflict(template_id: int) -> str:
    """Return message when the stored schedule changed underneath a fire."""
    return (
        f"Recurring transaction {template_id} was modified concurrently; "
        "its schedule no longer matches"
    )


def account_delete_blocked(account_id: int, check_count: int, template_count: int) -> str:
    """Return message when account has dependent checks or templates."""
    parts = []
    if check_count > 0:
        parts.append(f"{check_count} check{'s' if check_count != 1 else ''}")
    if template_count > 0:
        parts.append(
            f"{template_count} recurring transaction{'s' if template_count != 1 else ''}"
        )
    return (
        f"Cannot delete account {account_id}: it has {', '.join(parts)}. "
        "Please delete them first."
    )
