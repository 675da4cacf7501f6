"""SQLAlchemy models for checkbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    CheckConstraint,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

MONEY = Numeric(15, 2)


class User(Base):
    """User model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    accounts = relationship("Account", back_populates="user", cascade="all, delete-orphan")


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    bank_name = Column(String, nullable=False)
    opening_balance = Column(MONEY, default=0, nullable=False)
    low_balance_threshold = Column(MONEY, default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_account_user_name"),
        CheckConstraint("low_balance_threshold >= 0", name="ck_account_threshold"),
    )

    # Relationships
    user = relationship("User", back_populates="accounts")
    checks = relationship("Check", back_populates="account")


class Check(Base):
    """Check model. Checks are always scoped to a bank account."""

    __tablename__ = "checks"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    direction = Column(String(20), nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    payee = Column(String, nullable=True)
    recurring_id = Column(
        Integer, ForeignKey("recurring_transactions.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # A template materializes at most once per day
    __table_args__ = (
        UniqueConstraint("recurring_id", "date", name="uq_check_recurring_date"),
        CheckConstraint("amount > 0", name="ck_check_amount"),
        CheckConstraint("direction IN ('incoming', 'outgoing')", name="ck_check_direction"),
        Index("ix_checks_account_date", "account_id", "date"),
    )

    # Relationships
    account = relationship("Account", back_populates="checks")


class Cash(Base):
    """Cash model. Cash entries are pooled per user with no account."""

    __tablename__ = "cash"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    direction = Column(String(20), nullable=False)
    amount = Column(MONEY, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    recurring_id = Column(
        Integer, ForeignKey("recurring_transactions.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint("recurring_id", "date", name="uq_cash_recurring_date"),
        CheckConstraint("amount > 0", name="ck_cash_amount"),
        CheckConstraint("direction IN ('credit', 'debit')", name="ck_cash_direction"),
        Index("ix_cash_user_date", "user_id", "date"),
    )


class RecurringTransaction(Base):
    """Recurring transaction template model."""

    __tablename__ = "recurring_transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    kind = Column(String(20), nullable=False)
    # Check templates
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    check_direction = Column(String(20), nullable=True)
    payee = Column(String, nullable=True)
    # Cash templates
    cash_direction = Column(String(20), nullable=True)
    description = Column(String, nullable=True)
    # Common fields
    amount = Column(MONEY, nullable=False)
    frequency = Column(String(20), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    day_of_month = Column(Integer, nullable=True)
    day_of_week = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    last_created_date = Column(Date, nullable=True)
    next_due_date = Column(Date, nullable=False, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_recurring_amount"),
        CheckConstraint("kind IN ('check', 'cash')", name="ck_recurring_kind"),
        CheckConstraint(
            "frequency IN ('daily', 'weekly', 'monthly', 'yearly')", name="ck_recurring_frequency"
        ),
        CheckConstraint(
            "day_of_month IS NULL OR (day_of_month >= 1 AND day_of_month <= 31)",
            name="ck_recurring_day_of_month",
        ),
        CheckConstraint(
            "day_of_week IS NULL OR (day_of_week >= 0 AND day_of_week <= 6)",
            name="ck_recurring_day_of_week",
        ),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
