"""Category model for hierarchical transaction categorization."""

from dataclasses import dataclass, field
from typing import List, Optional

SYSTEM_CATEGORY_NAME = "Uncategorized"


@dataclass
class Category:
    """Represents a user-defined transaction category.

    Attributes:
        id: Unique identifier (auto-generated).
        name: Category name, unique among siblings sharing the same parent.
        parent_id: Optional parent category ID; None for root categories.
        is_system: True for the owner's default bucket, which cannot be
            renamed, moved or deleted.
    """

    id: int
    name: str
    parent_id: Optional[int] = None
    is_system: bool = False


@dataclass
class CategoryNode:
    """A category placed in the tree, with its materialized path."""

    category: Category
    full_path: str
    children: List["CategoryNode"] = field(default_factory=list)

    @property
    def id(self) -> int:
        return self.category.id

    @property
    def name(self) -> str:
        return self.category.name


@dataclass(frozen=True)
class CategoryOption:
    """Flattened category choice offered when labelling a transaction.

    ``id`` is None only for the placeholder offered when no categories exist.
    """

    id: Optional[int]
    label: str
    is_system: bool
