"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest
from contextlib import contextmanager
from pathlib import Path

from config import Config, get_migrations_dir
from db.manager import DatabaseManager
from services.base import Services
from services.seeder import CatalogEntry, CatalogItem
from tests.helpers import run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database with foreign keys on.
    """
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary database.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "hearthbudget",
        db_data_dir=tmp_path / "hearthbudget" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "hearthbudget" / "logs",
        seed_on_signup=True,
        catalog_path=None,
        enable_reset=False,
    )


class TestDatabaseManager(DatabaseManager):
    """Database manager that reuses one in-memory connection.

    Transactions come from DatabaseManager.transaction, on top of the
    shared connection.
    """

    __test__ = False

    def __init__(self, conn):
        self.conn = conn

    @contextmanager
    def connect(self):
        """Yield the test connection without closing it."""
        yield self.conn

    def get_db_path(self):
        """Return a fake path for the test database."""
        return Path(":memory:")

    def get_migrations_dir(self):
        """Get the migrations directory path."""
        return get_migrations_dir()


@pytest.fixture
def db_manager_with_schema(test_db):
    """Create a DatabaseManager with schema already set up.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        TestDatabaseManager: Database manager with schema ready.
    """
    run_migrations(test_db, get_migrations_dir())
    return TestDatabaseManager(test_db)


@pytest.fixture
def small_catalog():
    """A two-family catalog that keeps seeding tests readable."""
    return [
        CatalogEntry(
            "Transport",
            "Car",
            "#45B7D1",
            (
                CatalogItem("Fuel", "Fuel", "#45B7D1"),
                CatalogItem("Parking", "Car", "#45B7D1"),
            ),
        ),
        CatalogEntry("Other", "Briefcase", "#B2BEC3"),
    ]


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with test database and bundled catalog.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def user(services):
    """A user without any categories."""
    return services.users.create("Dana", "dana@example.com")


@pytest.fixture
def other_user(services):
    """A second user, for ownership checks."""
    return services.users.create("Noa", "noa@example.com")
