"""Exception types raised by Tallybook.

Every error derives from TallybookError so callers (the CLI in particular)
can catch the whole family in one place.
"""

from enum import Enum
from typing import Optional


class TallybookError(Exception):
    """Base class for all Tallybook errors."""


class FormatError(TallybookError, ValueError):
    """The CSV input has a shape the ingestion engine cannot read."""


class ValidationKind(Enum):
    """Reasons a category or transaction mutation can be rejected."""

    REQUIRED_FIELD = "required-field"
    SELF_REFERENCE = "self-reference"
    CYCLIC_REPARENT = "cyclic-reparent"
    SYSTEM_PROTECTED = "system-category-protection"
    NOT_FOUND = "not-found"
    DUPLICATE_NAME = "duplicate-name"


_DEFAULT_MESSAGES = {
    ValidationKind.REQUIRED_FIELD: "Category name is required",
    ValidationKind.SELF_REFERENCE: "A category cannot be its own parent",
    ValidationKind.CYCLIC_REPARENT: (
        "A category cannot be moved under one of its subcategories"
    ),
    ValidationKind.SYSTEM_PROTECTED: "System categories cannot be modified",
    ValidationKind.NOT_FOUND: "Category not found",
    ValidationKind.DUPLICATE_NAME: (
        "A category with this name already exists under the same parent"
    ),
}


class ValidationError(TallybookError, ValueError):
    """A requested mutation violates an invariant and was not attempted.

    Args:
        kind: Which rule was violated.
        message: Optional override for the kind's default message.
    """

    def __init__(self, kind: ValidationKind, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or _DEFAULT_MESSAGES[kind])


class StructuralError(TallybookError):
    """The stored category forest is corrupt (for example it contains a cycle)."""


class StoreError(TallybookError):
    """A persistence call failed.

    Args:
        operation: Logical name of the failed operation, e.g. "categories.update".
        message: Description of the failure, usually the driver's message.
    """

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"{operation} failed: {message}")
