"""Header role inference for bank statement CSVs.

Each role is matched by a predicate over the lowercased, trimmed header text.
The first header that satisfies a role's predicate wins that role; roles are
resolved independently, so one header can serve several roles (for example
"Debit Amount" matches both "amount" and "debit").

Supporting a new bank layout usually means adding a keyword to a rule here.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from errors import FormatError


def _contains_any(*keywords: str) -> Callable[[str], bool]:
    return lambda header: any(keyword in header for keyword in keywords)


COLUMN_RULES: Tuple[Tuple[str, Callable[[str], bool]], ...] = (
    ("date", _contains_any("date")),
    ("description", _contains_any("description", "narration", "details", "reference")),
    ("amount", lambda header: "amount" in header and "balance" not in header),
    ("balance", _contains_any("balance")),
    ("debit", _contains_any("debit", "withdrawal")),
    ("credit", _contains_any("credit", "deposit")),
)


@dataclass(frozen=True)
class ColumnMap:
    """Column index for each role; None when the role has no column."""

    date: int
    description: int
    amount: Optional[int] = None
    balance: Optional[int] = None
    debit: Optional[int] = None
    credit: Optional[int] = None

    @property
    def has_debit_credit(self) -> bool:
        return self.debit is not None and self.credit is not None

    @property
    def required_width(self) -> int:
        """Minimum number of fields a row needs to be mapped."""
        return max(self.date, self.description) + 1


def find_column(headers: Sequence[str], predicate: Callable[[str], bool]) -> Optional[int]:
    """Return the index of the first header matching predicate, or None."""
    for index, header in enumerate(headers):
        if predicate(header):
            return index
    return None


def infer_columns(headers: List[str]) -> ColumnMap:
    """Map roles to column indices for a header row.

    Args:
        headers: Header fields as produced by the tokenizer.

    Returns:
        ColumnMap for the header row.

    Raises:
        FormatError: If date or description is missing, or if there is
            neither an amount column nor a complete debit/credit pair.
    """
    normalized = [header.strip().lower() for header in headers]
    found = {role: find_column(normalized, predicate) for role, predicate in COLUMN_RULES}

    if found["date"] is None or found["description"] is None:
        raise FormatError(
            "Could not find date or description columns. "
            "Ensure your CSV has proper headers."
        )

    if found["amount"] is None and (found["debit"] is None or found["credit"] is None):
        raise FormatError("Could not find amount, debit, or credit columns.")

    return ColumnMap(**found)
