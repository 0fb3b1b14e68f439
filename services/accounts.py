"""Account service for database operations."""

from typing import List, Optional

from db.manager import store_operation
from models.account import ACCOUNT_TYPES, Account

_ACCOUNT_FIELDS = "id, name, bank_name, account_type, account_number"


class AccountService:
    """Service for managing one owner's bank accounts."""

    def __init__(self, db_manager, owner_id: str):
        """Initialize the account service.

        Args:
            db_manager: Database manager instance for database operations.
            owner_id: Owner every query is scoped to.
        """
        self.db_manager = db_manager
        self.owner_id = owner_id

    def find_all(self) -> List[Account]:
        """Get all accounts, ordered by id."""
        with store_operation("accounts.find_all"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_ACCOUNT_FIELDS} FROM accounts WHERE owner_id = ? ORDER BY id",
                (self.owner_id,),
            )
            return [self._row_to_account(row) for row in cursor.fetchall()]

    def find(self, account_id: int) -> Optional[Account]:
        """Get a single account by ID, or None."""
        with store_operation("accounts.find"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_ACCOUNT_FIELDS} FROM accounts WHERE id = ? AND owner_id = ?",
                (account_id, self.owner_id),
            )
            row = cursor.fetchone()
            return self._row_to_account(row) if row else None

    def find_by_name(self, name: str) -> Optional[Account]:
        """Get a single account by its (case-sensitive) name, or None."""
        with store_operation("accounts.find_by_name"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_ACCOUNT_FIELDS} FROM accounts WHERE name = ? AND owner_id = ?",
                (name, self.owner_id),
            )
            row = cursor.fetchone()
            return self._row_to_account(row) if row else None

    def create(
        self,
        name: str,
        bank_name: str,
        account_type: str = "checking",
        account_number: Optional[str] = None,
    ) -> Account:
        """Create a new account.

        Args:
            name: Account handle, unique per owner.
            bank_name: Name of the bank.
            account_type: One of ACCOUNT_TYPES.
            account_number: Optional account number as printed by the bank.

        Returns:
            The created Account object with id populated.

        Raises:
            ValueError: If account_type is not supported.
            StoreError: If the insert fails (e.g., duplicate name).
        """
        if account_type not in ACCOUNT_TYPES:
            raise ValueError(
                f"Unsupported account type {account_type!r}. "
                f"Allowed: {', '.join(ACCOUNT_TYPES)}"
            )

        with store_operation("accounts.create"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO accounts (owner_id, name, bank_name, account_type, account_number)
                VALUES (?, ?, ?, ?, ?)
                """,
                (self.owner_id, name, bank_name, account_type, account_number),
            )
            conn.commit()

            return Account(
                id=cursor.lastrowid,
                name=name,
                bank_name=bank_name,
                account_type=account_type,
                account_number=account_number,
            )

    def delete(self, account_id: int) -> bool:
        """Delete an account by ID.

        Transactions keep their rows; their account_id is cleared.

        Returns:
            True if account was deleted, False if not found.
        """
        with store_operation("accounts.delete"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM accounts WHERE id = ? AND owner_id = ?",
                (account_id, self.owner_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def _row_to_account(self, row: tuple) -> Account:
        return Account(
            id=row[0],
            name=row[1],
            bank_name=row[2],
            account_type=row[3],
            account_number=row[4],
        )
