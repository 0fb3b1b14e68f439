"""Transaction service for database operations."""

from decimal import Decimal
from typing import List, Optional, Set

from db.manager import store_operation
from deduplication import existing_fingerprints, filter_new
from errors import ValidationError, ValidationKind
from logger import get_logger
from models.transaction import Transaction

logger = get_logger(__name__)

_TRANSACTION_FIELDS = (
    "id, account_id, date, description, amount, balance, category, category_id"
)

# Automatically generate placeholders from field count (owner_id is appended)
_TRANSACTION_INSERT_PLACEHOLDERS = (
    f"({', '.join(['?'] * (len(_TRANSACTION_FIELDS.split(',')) + 1))})"
)


class TransactionService:
    """Service for managing one owner's transactions."""

    def __init__(self, db_manager, owner_id: str):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
            owner_id: Owner every query is scoped to.
        """
        self.db_manager = db_manager
        self.owner_id = owner_id

    def bulk_create(self, transactions: List[Transaction]) -> int:
        """Insert multiple transactions in a single database transaction.

        Args:
            transactions: Transaction objects to insert.

        Returns:
            Number of transactions inserted.

        Raises:
            StoreError: If the insert fails. Nothing is inserted in that case.
        """
        if not transactions:
            return 0

        data = [
            (
                t.id,
                t.account_id,
                t.date,
                t.description,
                str(t.amount),
                str(t.balance) if t.balance is not None else None,
                t.category,
                t.category_id,
                self.owner_id,
            )
            for t in transactions
        ]

        with store_operation("transactions.bulk_create"), self.db_manager.connect() as conn:
            try:
                cursor = conn.executemany(
                    f"""
                    INSERT INTO transactions ({_TRANSACTION_FIELDS}, owner_id)
                    VALUES {_TRANSACTION_INSERT_PLACEHOLDERS}
                    """,
                    data,
                )
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            return cursor.rowcount

    def fingerprints(self) -> Set[str]:
        """Fingerprints of every stored transaction for this owner."""
        return existing_fingerprints(self.find_all())

    def import_batch(self, candidates: List[Transaction]) -> List[Transaction]:
        """Insert the candidates that are not already stored.

        The stored fingerprints are read immediately before the insert so a
        batch imported in the meantime is taken into account. Two imports
        racing between that read and the insert can still both succeed;
        SQLite offers no cheaper guard for a content-based key.

        Args:
            candidates: Parsed transactions in file order.

        Returns:
            The transactions that were inserted.
        """
        accepted = filter_new(candidates, self.fingerprints())
        inserted = self.bulk_create(accepted)
        logger.info(
            f"Imported {inserted} of {len(candidates)} transaction(s) "
            f"({len(candidates) - len(accepted)} duplicate(s) skipped)"
        )
        return accepted

    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Returns:
            Transaction object if found, None otherwise.
        """
        with store_operation("transactions.find"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_FIELDS}
                FROM transactions
                WHERE id = ? AND owner_id = ?
                """,
                (transaction_id, self.owner_id),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_transaction(row)
            return None

    def find_all(self) -> List[Transaction]:
        """Get all transactions, newest first."""
        with store_operation("transactions.find_all"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_FIELDS}
                FROM transactions
                WHERE owner_id = ?
                ORDER BY date DESC, rowid
                """,
                (self.owner_id,),
            )
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def find_by_account(self, account_id: int) -> List[Transaction]:
        """Get all transactions for a specific account, newest first."""
        with store_operation("transactions.find_by_account"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_FIELDS}
                FROM transactions
                WHERE owner_id = ? AND account_id = ?
                ORDER BY date DESC, rowid
                """,
                (self.owner_id, account_id),
            )
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def find_by_category_label(self, label: str) -> List[Transaction]:
        """Get transactions whose display label is exactly label."""
        with store_operation("transactions.find_by_category_label"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_FIELDS}
                FROM transactions
                WHERE owner_id = ? AND category = ?
                ORDER BY date DESC, rowid
                """,
                (self.owner_id, label),
            )
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def set_category(
        self, transaction_id: str, category_id: Optional[int], label: str
    ) -> Transaction:
        """Change the category of one transaction.

        Args:
            transaction_id: Transaction to update.
            category_id: Category reference, or None for a legacy label that is
                stored without a reference.
            label: Display label to store (the category's full path).

        Returns:
            The updated Transaction.

        Raises:
            ValidationError: If the label is blank or the transaction is unknown.
        """
        label = (label or "").strip()
        if not label:
            raise ValidationError(ValidationKind.REQUIRED_FIELD, "Category label is required")

        with store_operation("transactions.set_category"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE transactions
                SET category = ?, category_id = ?
                WHERE id = ? AND owner_id = ?
                """,
                (label, category_id, transaction_id, self.owner_id),
            )
            conn.commit()

            if cursor.rowcount == 0:
                raise ValidationError(
                    ValidationKind.NOT_FOUND,
                    f"Transaction with ID {transaction_id} not found",
                )

        return self.find(transaction_id)

    def relabel(self, old_label: str, new_label: str) -> int:
        """Rewrite every label exactly equal to old_label.

        Safe to repeat: once applied, no row matches old_label any more.

        Returns:
            Number of transactions changed.
        """
        with store_operation("transactions.relabel"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                UPDATE transactions
                SET category = ?
                WHERE owner_id = ? AND category = ?
                """,
                (new_label, self.owner_id, old_label),
            )
            conn.commit()
            return cursor.rowcount

    def delete(self, transaction_id: str) -> bool:
        """Delete a transaction by ID.

        Returns:
            True if the transaction was deleted, False if not found.
        """
        with store_operation("transactions.delete"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ? AND owner_id = ?",
                (transaction_id, self.owner_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def clear(self) -> int:
        """Delete every transaction of this owner.

        Returns:
            Number of transactions deleted.
        """
        with store_operation("transactions.clear"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE owner_id = ?", (self.owner_id,)
            )
            conn.commit()
            return cursor.rowcount

    def _row_to_transaction(self, row: tuple) -> Transaction:
        """Convert a database row to a Transaction object."""
        return Transaction(
            id=row[0],
            account_id=row[1],
            date=row[2],
            description=row[3],
            amount=Decimal(row[4]),
            balance=Decimal(row[5]) if row[5] is not None else None,
            category=row[6],
            category_id=row[7],
        )
