"""User and account domain services."""

import logging
from decimal import Decimal
from typing import Optional

from checkbook.database.base import Database
from checkbook.domain.entities import Account as AccountEntity, User as UserEntity
from checkbook.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    user_not_found,
)
from checkbook.utils.amount_parser import require_money

logger = logging.getLogger(__name__)


class UserService:
    """Service for managing the users that own ledger data."""

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_user(self, username: str) -> int:
        """Create a new user.

        Raises:
            ValidationError: If the username is empty
            ConflictError: If the username is taken
        """
        username = username.strip()
        if not username:
            raise ValidationError("Username must not be empty")
        if self.db.get_user_by_username(username) is not None:
            raise ConflictError(f"User '{username}' already exists")
        user_id = self.db.create_user(username)
        logger.info("Created user %s (%s)", user_id, username)
        return user_id

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        return self.db.get_user(user_id)

    def require_user(self, user_id: int) -> UserEntity:
        """Get a user or raise NotFoundError."""
        user = self.db.get_user(user_id)
        if user is None:
            raise NotFoundError(user_not_found(user_id))
        return user

    def get_user_by_username(self, username: str) -> Optional[UserEntity]:
        return self.db.get_user_by_username(username)

    def list_users(self) -> list[UserEntity]:
        return self.db.list_users()


class AccountService:
    """Service for managing bank accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        user_id: int,
        name: str,
        bank_name: Optional[str] = None,
        opening_balance: Decimal | int | str = Decimal("0"),
        low_balance_threshold: Decimal | int | str = Decimal("0"),
    ) -> int:
        """Create a new account.

        Args:
            user_id: Owning user ID
            name: Account name, unique per user
            bank_name: Bank name (defaults to the account name)
            opening_balance: Balance before any recorded check, may be negative
            low_balance_threshold: Balances strictly below this are flagged

        Returns:
            Account ID

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If amounts are malformed or the threshold is negative
            ConflictError: If the user already has an account with this name
        """
        if self.db.get_user(user_id) is None:
            raise NotFoundError(user_not_found(user_id))

        name = name.strip()
        if not name:
            raise ValidationError("Account name must not be empty")
        opening = require_money(opening_balance, "opening_balance")
        threshold = require_money(low_balance_threshold, "low_balance_threshold")
        if threshold < 0:
            raise ValidationError("low_balance_threshold must not be negative")

        for acc in self.db.list_accounts(user_id):
            if acc.name == name:
                raise ConflictError(f"Account with name '{name}' already exists")

        account_id = self.db.create_account(
            user_id=user_id,
            name=name,
            bank_name=bank_name or name,
            opening_balance=opening,
            low_balance_threshold=threshold,
        )
        logger.info("Created account %s for user %s", account_id, user_id)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        return self.db.get_account(account_id)

    def require_account(self, account_id: int, user_id: Optional[int] = None) -> AccountEntity:
        """Get an account, checking ownership when a user is given.

        Raises:
            NotFoundError: If the account is missing or owned by another user
        """
        account = self.db.get_account(account_id)
        if account is None or (user_id is not None and account.user_id != user_id):
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self, user_id: int) -> list[AccountEntity]:
        return self.db.list_accounts(user_id)

    def update_threshold(
        self, account_id: int, user_id: int, low_balance_threshold: Decimal | int | str
    ) -> None:
        """Change the low-balance threshold of an account."""
        self.require_account(account_id, user_id)
        threshold = require_money(low_balance_threshold, "low_balance_threshold")
        if threshold < 0:
            raise ValidationError("low_balance_threshold must not be negative")
        self.db.update_account_threshold(account_id, threshold)

    def update_account(
        self,
        account_id: int,
        user_id: int,
        name: Optional[str] = None,
        bank_name: Optional[str] = None,
    ) -> AccountEntity:
        """Rename an account or change its bank name.

        The opening balance is fixed at creation and cannot be changed here.

        Raises:
            NotFoundError: If the account is missing or owned by another user
            ValidationError: If a new name is empty or nothing is given
            ConflictError: If the user already has another account with the name
        """
        self.require_account(account_id, user_id)
        if name is None and bank_name is None:
            raise ValidationError("No account fields to update")

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("Account name must not be empty")
            for acc in self.db.list_accounts(user_id):
                if acc.name == name and acc.id != account_id:
                    raise ConflictError(f"Account with name '{name}' already exists")
        if bank_name is not None:
            bank_name = bank_name.strip()
            if not bank_name:
                raise ValidationError("Bank name must not be empty")

        self.db.update_account(account_id, name=name, bank_name=bank_name)
        logger.info("Updated account %s", account_id)
        return self.require_account(account_id, user_id)

    def delete_account(self, account_id: int, user_id: int) -> None:
        """Delete an account.

        Raises:
            NotFoundError: If the account is missing or owned by another user
            DependencyError: If the account still has checks or recurring templates
        """
        self.require_account(account_id, user_id)
        check_count, template_count = self.db.get_account_dependency_counts(account_id)
        if check_count > 0 or template_count > 0:
            raise DependencyError(account_delete_blocked(account_id, check_count, template_count))
        self.db.delete_account(account_id)
        logger.info("Deleted account %s", account_id)
