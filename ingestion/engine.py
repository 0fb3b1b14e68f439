"""Generic bank statement ingestion.

Turns CSV text with any recognisable header layout into Transaction records.
Column roles come from ingestion.columns; cell values go through the
tokenizer and the normalizers, so a bad cell never fails the whole file.
"""

from decimal import Decimal
from typing import List, Optional, TextIO

from errors import FormatError
from ingestion.columns import ColumnMap, infer_columns
from ingestion.normalizers import ZERO, normalize_amount, normalize_date
from ingestion.tokenizer import split_line
from logger import get_logger
from models.category import SYSTEM_CATEGORY_NAME
from models.transaction import Transaction

logger = get_logger(__name__)


def _cell(values: List[str], index: Optional[int]) -> str:
    if index is None or index >= len(values):
        return ""
    return values[index]


def row_amount(values: List[str], columns: ColumnMap) -> Decimal:
    """Compute the signed amount for one tokenized row.

    The amount column wins whenever its cell is non-empty. Otherwise the
    debit/credit pair is used (credit - debit), with missing cells as zero.
    """
    amount_cell = _cell(values, columns.amount)
    if columns.amount is not None and amount_cell:
        return normalize_amount(amount_cell)

    debit_cell = _cell(values, columns.debit)
    credit_cell = _cell(values, columns.credit)
    debit = normalize_amount(debit_cell) if debit_cell else ZERO
    credit = normalize_amount(credit_cell) if credit_cell else ZERO
    return credit - debit


def row_to_transaction(
    values: List[str],
    columns: ColumnMap,
    default_category: str = SYSTEM_CATEGORY_NAME,
    account_id: Optional[int] = None,
) -> Transaction:
    """Convert a tokenized data row to a Transaction.

    Args:
        values: Row fields from split_line; must cover columns.required_width.
        columns: Column map inferred from the header.
        default_category: Label given to the new transaction.
        account_id: Optional account the statement belongs to.

    Returns:
        Transaction with a fresh ID.
    """
    balance_cell = _cell(values, columns.balance)
    balance = normalize_amount(balance_cell) if balance_cell else None

    return Transaction.create(
        date=normalize_date(values[columns.date]),
        description=values[columns.description].strip(),
        amount=row_amount(values, columns),
        balance=balance,
        category=default_category,
        account_id=account_id,
    )


def parse_csv(
    csv_text: str,
    default_category: str = SYSTEM_CATEGORY_NAME,
    account_id: Optional[int] = None,
) -> List[Transaction]:
    """Parse a bank statement CSV export.

    Args:
        csv_text: Whole file contents, header row first.
        default_category: Label given to every parsed transaction.
        account_id: Optional account the statement belongs to.

    Returns:
        Transactions in file order. Blank lines and rows too short to hold
        the date and description are skipped.

    Raises:
        FormatError: If the file has no data row or its header is not
            recognised.
    """
    lines = csv_text.strip().split("\n")
    if len(lines) < 2:
        raise FormatError("CSV file must have at least a header row and one data row")

    columns = infer_columns(split_line(lines[0]))
    logger.debug(f"Inferred columns: {columns}")

    transactions = []
    for line_num, raw_line in enumerate(lines[1:], start=2):
        line = raw_line.strip()
        if not line:
            continue

        values = split_line(line)
        if len(values) < columns.required_width:
            logger.warning(f"Skipping malformed line {line_num}: {line}")
            continue

        transactions.append(
            row_to_transaction(values, columns, default_category, account_id)
        )

    logger.info(f"Parsed {len(transactions)} transactions")
    return transactions


def ingest(
    source: TextIO,
    account_id: Optional[int] = None,
    default_category: str = SYSTEM_CATEGORY_NAME,
) -> List[Transaction]:
    """Ingest a bank statement CSV from an open text stream.

    Raises:
        FormatError: See parse_csv.
    """
    return parse_csv(source.read(), default_category=default_category, account_id=account_id)
