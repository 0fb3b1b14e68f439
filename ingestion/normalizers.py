"""Amount and date normalizers for statement cells.

Both functions are total: a cell that cannot be understood degrades to a
neutral value (zero, or the raw text) instead of failing the import.
"""

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation

from dateutil import parser as date_parser

# Currency symbols, thousands separators, whitespace and parentheses.
# Parentheses are removed without negating the value.
_AMOUNT_NOISE = re.compile(r"[R$£€,\s()]")

# Longest leading numeric prefix, the same prefix a lenient float parser reads
_NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Magnitudes past the range of a double read as infinity, which degrades to zero
_MAX_EXPONENT = 308

_COMPACT_DATE = re.compile(r"^\d{8}$")
_HAS_DIGIT = re.compile(r"\d")

# Supplies fields a cell leaves out, so "Nov 2025" is the 1st and not today's day
_DATE_DEFAULTS = datetime(2000, 1, 1)

ZERO = Decimal("0")


def normalize_amount(value: str) -> Decimal:
    """Convert a statement amount cell to a Decimal.

    Examples:
        "R 1,234.56" -> Decimal("1234.56")
        "(500.00)"   -> Decimal("500.00")  (not negated)
        "garbage"    -> Decimal("0")

    Args:
        value: Raw cell text.

    Returns:
        Parsed amount, or zero when no number can be read.
    """
    if value is None:
        return ZERO

    cleaned = _AMOUNT_NOISE.sub("", value)
    match = _NUMERIC_PREFIX.match(cleaned)
    if not match:
        return ZERO

    try:
        amount = Decimal(match.group(0))
    except InvalidOperation:
        return ZERO

    if not amount.is_finite() or amount.adjusted() > _MAX_EXPONENT:
        return ZERO
    return amount


def normalize_date(value: str) -> str:
    """Convert a statement date cell to YYYY-MM-DD where possible.

    Eight-digit values are read positionally as YYYYMMDD. Anything else goes
    through dateutil's parser; timezone-aware results are shifted to local
    time before the calendar date is taken. Input without any digit, or that
    dateutil rejects, is returned trimmed but otherwise unchanged.

    Args:
        value: Raw cell text.

    Returns:
        ISO calendar date string, or the trimmed input.
    """
    trimmed = (value or "").strip()

    if _COMPACT_DATE.match(trimmed):
        return f"{trimmed[0:4]}-{trimmed[4:6]}-{trimmed[6:8]}"

    # Placeholders such as "N/A" would otherwise be matched as fuzzy tokens
    if not _HAS_DIGIT.search(trimmed):
        return trimmed

    try:
        parsed = date_parser.parse(trimmed, default=_DATE_DEFAULTS)
    except (ValueError, OverflowError):
        return trimmed

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return _format_date(parsed)


def _format_date(value: datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
