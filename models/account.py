from dataclasses import dataclass
from typing import Optional

ACCOUNT_TYPES = ("checking", "savings", "credit_card", "investment", "other")


@dataclass
class Account:
    id: int
    name: str  # short handle used on the command line, e.g. "fnb_cheque"
    bank_name: str  # human readable, e.g. "First National Bank"
    account_type: str  # one of ACCOUNT_TYPES
    account_number: Optional[str] = None
