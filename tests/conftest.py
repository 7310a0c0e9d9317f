"""
Pytest fixtures for the bank kernel test suite.

Provides:
- A session-scoped engine with tables created once
- Per-test database sessions isolated by transaction rollback
- Structured log capture
- Account and customer factories

Environment Variables:
- DATABASE_URL: SQLAlchemy URL of the test database.
  If not set, an in-memory SQLite database is used.
"""

import json
import logging
import os
from datetime import date
from io import StringIO
from typing import Generator

import pytest
from sqlalchemy.orm import Session, sessionmaker

from bank_kernel.db.engine import (
    create_tables,
    drop_tables,
    init_engine_from_url,
    reset_engine,
)
from bank_kernel.db.field_rules import register_field_rule_listeners
from bank_kernel.db.lifecycle import LifecycleHookRegistry
from bank_kernel.domain.account_type import AccountType
from bank_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from bank_kernel.models.account import Account
from bank_kernel.models.customer import Customer

DEFAULT_DATABASE_URL = "sqlite://"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "postgres: mark test as requiring PostgreSQL"
    )


def get_database_url() -> str:
    """Get database URL from environment, or use in-memory SQLite."""
    return os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture bank_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, account_service, make_account):
            account_service.create(make_account())
            logs = captured_logs()
            assert any(r["message"] == "account_created" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("bank_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Session-scoped DB infrastructure (create engine + tables ONCE per suite)
# =============================================================================


@pytest.fixture(scope="session")
def db_engine():
    """Single engine for the entire test session."""
    eng = init_engine_from_url(get_database_url(), echo=False)
    yield eng
    reset_engine()


@pytest.fixture(scope="session")
def db_tables(db_engine):
    """Create all tables once per session, drop once at end.

    Field rule listeners are registered once and remain active.
    """
    drop_tables()
    create_tables()
    register_field_rule_listeners()
    yield
    drop_tables()


# =============================================================================
# Per-test session with automatic rollback
# =============================================================================


@pytest.fixture
def db_connection(db_tables, db_engine):
    """A connection holding an outer transaction that is rolled back at teardown."""
    conn = db_engine.connect()
    trans = conn.begin()
    yield conn
    try:
        trans.rollback()
    finally:
        conn.close()


@pytest.fixture
def session(db_connection) -> Generator[Session, None, None]:
    """Provide a database session for testing.

    The session joins the outer transaction of ``db_connection``; any
    ``session.commit()`` inside the test releases a savepoint and does NOT
    commit to the database.
    """
    sess = Session(
        bind=db_connection,
        join_transaction_mode="create_savepoint",
        expire_on_commit=False,
    )
    yield sess
    sess.close()


@pytest.fixture
def session_factory(db_connection) -> sessionmaker[Session]:
    """Session factory whose sessions all join the test's outer transaction.

    Used for code that owns its own unit of work (BankingFacade,
    session_scope): their commits release savepoints only.
    """
    return sessionmaker(
        bind=db_connection,
        join_transaction_mode="create_savepoint",
        expire_on_commit=False,
    )


# =============================================================================
# Lifecycle hooks
# =============================================================================


@pytest.fixture
def lifecycle_registry() -> Generator[LifecycleHookRegistry, None, None]:
    """A fresh, installed hook registry, uninstalled at teardown."""
    registry = LifecycleHookRegistry()
    registry.install()
    yield registry
    registry.uninstall()
    registry.clear()


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_account():
    """Factory for transient Account objects (defaults: account 101, CHECKING)."""

    def _make(
        account_id: int = 101,
        account_number: int = 123456,
        account_balance: float = 5_000_000.0,
        account_type: AccountType | str = AccountType.CHECKING,
    ) -> Account:
        return Account(
            account_id=account_id,
            account_number=account_number,
            account_balance=account_balance,
            account_type=account_type,
        )

    return _make


@pytest.fixture
def make_customer():
    """Factory for transient Customer objects."""

    def _make(
        customer_id: str = "0012345678",
        customer_name: str = "Sara",
        customer_family: str = "Karimi",
        customer_address: str | None = "12 Valiasr St, Tehran",
        customer_phone: str = "09121234567",
        customer_birthday: date = date(1990, 5, 17),
    ) -> Customer:
        return Customer(
            customer_id=customer_id,
            customer_name=customer_name,
            customer_family=customer_family,
            customer_address=customer_address,
            customer_phone=customer_phone,
            customer_birthday=customer_birthday,
        )

    return _make
