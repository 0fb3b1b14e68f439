"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest
from pathlib import Path

from config import Config, get_migrations_dir
from services.base import Services
from tests.helpers import run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Foreign keys are switched on the same way DatabaseManager does it.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
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
        base_dir=tmp_path / "tallybook",
        db_data_dir=tmp_path / "tallybook" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "tallybook" / "logs",
        owner_id="test-owner",
    )


@pytest.fixture
def db_manager_with_schema(test_db):
    """Create a DatabaseManager with schema already set up.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        DatabaseManager-like object sharing the in-memory connection.
    """
    run_migrations(test_db, get_migrations_dir())

    class TestDatabaseManager:
        """Test database manager that uses in-memory connection."""

        def __init__(self, conn):
            self.conn = conn

        def connect(self):
            """Return a context manager for the test connection."""
            return _TestConnectionContext(self.conn)

        def get_db_path(self):
            """Return a fake path for the test database."""
            return Path(":memory:")

        def get_migrations_dir(self):
            """Get the migrations directory path."""
            return get_migrations_dir()

    class _TestConnectionContext:
        """Context manager for test database connections."""

        def __init__(self, conn):
            self.conn = conn

        def __enter__(self):
            return self.conn

        def __exit__(self, exc_type, exc_val, exc_tb):
            # Don't close the connection - let the fixture handle it
            pass

    return TestDatabaseManager(test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with test database.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def other_owner_services(test_config, db_manager_with_schema):
    """Services for a second owner sharing the same database."""
    return Services(test_config, db_manager=db_manager_with_schema, owner_id="other-owner")


@pytest.fixture
def transport_tree(services):
    """Transport with Fuel and Parking below it, plus a Food root.

    Returns:
        dict: name -> Category for the created categories.
    """
    transport = services.categories.create("Transport")
    fuel = services.categories.create("Fuel", parent_id=transport.id)
    parking = services.categories.create("Parking", parent_id=transport.id)
    food = services.categories.create("Food")
    return {"Transport": transport, "Fuel": fuel, "Parking": parking, "Food": food}
