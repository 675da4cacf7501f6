"""Shared pytest fixtures for checkbook tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from checkbook.database.factories import create_sqlite_database
from checkbook.domain.account import AccountService, UserService
from checkbook.domain.balance import BalanceService
from checkbook.domain.clock import FixedClock
from checkbook.domain.ledger import LedgerService
from checkbook.domain.recurrence import RecurrenceService
from checkbook.domain.report import ReportService

TODAY = date(2024, 3, 15)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    """Clock pinned to a fixed 'today'."""
    return FixedClock(TODAY)


@pytest.fixture
def user_service(temp_db):
    return UserService(temp_db)


@pytest.fixture
def account_service(temp_db):
    return AccountService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    return LedgerService(temp_db)


@pytest.fixture
def balance_service(temp_db, clock):
    return BalanceService(temp_db, clock)


@pytest.fixture
def recurrence_service(temp_db, clock):
    return RecurrenceService(temp_db, clock)


@pytest.fixture
def report_service(temp_db, clock):
    return ReportService(temp_db, clock)


@pytest.fixture
def sample_user(user_service):
    """Create a sample user for testing."""
    user_id = user_service.create_user("alice")
    return user_service.get_user(user_id)


@pytest.fixture
def other_user(user_service):
    """Create a second user to check isolation between users."""
    user_id = user_service.create_user("bob")
    return user_service.get_user(user_id)


@pytest.fixture
def sample_account(account_service, sample_user):
    """Create a sample account with an opening balance of 1000."""
    account_id = account_service.create_account(
        user_id=sample_user.id,
        name="Checking",
        bank_name="Test Bank",
        opening_balance=Decimal("1000.00"),
        low_balance_threshold=Decimal("100.00"),
    )
    return account_service.get_account(account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_args(temp_db, sample_user):
    """Global CLI options pointing at the temporary database as the sample user."""
    return ["--db-path", temp_db.database_path, "--today", TODAY.isoformat(), "--user", "alice"]
