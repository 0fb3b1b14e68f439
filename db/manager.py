"""Database manager for SQLite connections and store error tagging."""

import sqlite3
from contextlib import contextmanager
from config import Config, get_migrations_dir
from errors import StoreError


class DatabaseManager:
    """Manages database connections and paths.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Foreign keys are enabled on every connection so that category deletes
        cascade to subcategories and clear transactions.category_id.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self):
        """Get the current database path.

        Returns:
            Path: Path to the database file.
        """
        return self.config.db_path

    def get_migrations_dir(self):
        """Get the migrations directory path.

        Returns:
            Path: Path to the migrations directory.
        """
        return get_migrations_dir()


@contextmanager
def store_operation(operation: str):
    """Translate sqlite3 errors raised inside the block into StoreError.

    Args:
        operation: Logical operation name attached to the raised error.

    Raises:
        StoreError: Chained to the original sqlite3.Error.
    """
    try:
        yield
    except sqlite3.Error as e:
        raise StoreError(operation, str(e)) from e
