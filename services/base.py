"""Base services container for dependency injection."""

from typing import Optional

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    Every service is scoped to one owner, taken from the configuration unless
    given explicitly. Tests inject an in-memory database manager.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config
            is only used for the owner id.
        owner_id: Optional owner override.
    """

    def __init__(self, config: Config, db_manager=None, owner_id: Optional[str] = None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)
        self.owner_id = owner_id or config.owner_id

        # Lazy import to avoid circular dependencies
        from services.accounts import AccountService
        from services.transactions import TransactionService
        from services.categories import CategoryService
        from services.snapshots import TransactionSnapshot

        self.accounts = AccountService(self.db_manager, self.owner_id)
        self.transactions = TransactionService(self.db_manager, self.owner_id)
        self.categories = CategoryService(
            self.db_manager, self.owner_id, self.transactions
        )
        self.snapshot = TransactionSnapshot(self.transactions)
