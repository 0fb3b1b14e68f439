"""Cache-aside view of the transactions for the currently selected account.

Loads are tagged with a generation number. When the selection changes before
an earlier load completes, the earlier result is dropped instead of
overwriting the newer selection.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from logger import get_logger
from models.transaction import Transaction

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoadTicket:
    """Identifies one load request."""

    generation: int
    account_id: Optional[int]


class TransactionSnapshot:
    """Holds the last accepted transaction list for one account selection.

    Args:
        transactions: TransactionService used to fetch rows.
    """

    def __init__(self, transactions):
        self._service = transactions
        self._generation = 0
        self.account_id: Optional[int] = None
        self.transactions: List[Transaction] = []

    @property
    def generation(self) -> int:
        return self._generation

    def begin_load(self, account_id: Optional[int]) -> LoadTicket:
        """Start a load; any ticket issued earlier becomes stale."""
        self._generation += 1
        return LoadTicket(generation=self._generation, account_id=account_id)

    def is_current(self, ticket: LoadTicket) -> bool:
        return ticket.generation == self._generation

    def fetch(self, ticket: LoadTicket) -> List[Transaction]:
        """Read the rows a ticket asks for (all accounts when account_id is None)."""
        if ticket.account_id is None:
            return self._service.find_all()
        return self._service.find_by_account(ticket.account_id)

    def complete_load(self, ticket: LoadTicket, rows: Iterable[Transaction]) -> bool:
        """Apply a finished load unless a newer one has started.

        Returns:
            True if the rows were applied, False if they were discarded.
        """
        if not self.is_current(ticket):
            logger.debug(
                f"Discarding stale load for account {ticket.account_id} "
                f"(generation {ticket.generation}, current {self._generation})"
            )
            return False

        self.account_id = ticket.account_id
        self.transactions = list(rows)
        return True

    def select_account(self, account_id: Optional[int]) -> bool:
        """Switch to an account and load its transactions."""
        ticket = self.begin_load(account_id)
        return self.complete_load(ticket, self.fetch(ticket))

    def refresh(self) -> bool:
        """Reload the current selection from the store."""
        return self.select_account(self.account_id)
