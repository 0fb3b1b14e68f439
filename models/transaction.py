from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import uuid

from models.category import SYSTEM_CATEGORY_NAME


@dataclass
class Transaction:
    id: str  # random UUID4, assigned at ingestion
    date: str  # YYYY-MM-DD when the source date was parseable, raw text otherwise
    description: str
    amount: Decimal  # signed: positive = inflow, negative = outflow
    balance: Optional[Decimal] = None  # running balance as printed on the statement
    category: str = SYSTEM_CATEGORY_NAME  # display label (full category path)
    category_id: Optional[int] = None  # None = legacy/system label only
    account_id: Optional[int] = None

    @classmethod
    def create(
        cls,
        date: str,
        description: str,
        amount: Decimal,
        balance: Optional[Decimal] = None,
        category: str = SYSTEM_CATEGORY_NAME,
        account_id: Optional[int] = None,
    ) -> "Transaction":
        """Create a Transaction with a freshly generated ID."""
        return cls(
            id=str(uuid.uuid4()),
            date=date,
            description=description,
            amount=amount,
            balance=balance,
            category=category,
            category_id=None,
            account_id=account_id,
        )
