"""Content-based duplicate detection for imported transactions.

Two transactions are considered the same statement line when their date,
case-insensitive description and amount (to the cent) match. The filter is
a pure function of its inputs, so running it twice over the same data gives
the same result.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable, List, Set, Union

from logger import get_logger
from models.transaction import Transaction

logger = get_logger(__name__)

_CENTS = Decimal("0.01")


def format_amount(amount: Decimal) -> str:
    """Format an amount with exactly two decimal places.

    Works for amounts of any magnitude; the context precision is raised to
    fit every integer digit plus the cents.
    """
    amount = Decimal(amount)
    with localcontext() as ctx:
        ctx.prec = max(28, amount.adjusted() + 3)
        return f"{amount.quantize(_CENTS, rounding=ROUND_HALF_UP):.2f}"


def fingerprint(transaction: Transaction) -> str:
    """Build the duplicate-detection key for a transaction.

    Format: "<date>|<lowercased description>|<amount to 2dp>", for example
    "2024-11-01|salary deposit|15000.00".
    """
    date = transaction.date.strip()
    description = transaction.description.strip().lower()
    return f"{date}|{description}|{format_amount(transaction.amount)}"


def existing_fingerprints(transactions: Iterable[Transaction]) -> Set[str]:
    """Fingerprint every already-stored transaction."""
    return {fingerprint(t) for t in transactions}


def filter_new(
    candidates: Iterable[Transaction],
    existing: Iterable[Union[str, Transaction]],
) -> List[Transaction]:
    """Drop candidates already known or repeated earlier in the same batch.

    Args:
        candidates: Newly parsed transactions, in import order.
        existing: Fingerprint strings, stored transactions, or a mix of
            both, in any iterable.

    Returns:
        Accepted candidates in their original order. The first occurrence of
        a repeated line within the batch is kept.
    """
    seen = {item if isinstance(item, str) else fingerprint(item) for item in existing}

    accepted = []
    rejected = 0
    for transaction in candidates:
        key = fingerprint(transaction)
        if key in seen:
            rejected += 1
            continue
        seen.add(key)
        accepted.append(transaction)

    if rejected:
        logger.info(f"Skipped {rejected} duplicate transaction(s)")
    return accepted
