"""Category service: owner-scoped CRUD plus tree edits with label cascades."""

import json
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional

import reconciliation
from category_tree import (
    CategoryTree,
    build_descendants,
    build_paths,
    build_tree,
    category_options,
    find_system_category,
    full_path_for,
    system_label,
)
from config import get_seed_path
from db.manager import store_operation
from errors import ValidationError, ValidationKind
from logger import get_logger
from models.category import SYSTEM_CATEGORY_NAME, Category, CategoryOption
from models.transaction import Transaction

logger = get_logger(__name__)

# Marks an update() argument that should be left as it is
UNCHANGED = object()

_CATEGORY_FIELDS = "id, name, parent_id, is_system"


class CategoryService:
    """Service for managing one owner's category tree.

    Every mutating operation reloads the owner's categories, validates the
    request against that snapshot and only then writes. Label cascades on
    transactions go through the transaction service.
    """

    def __init__(self, db_manager, owner_id: str, transactions):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
            owner_id: Owner every query is scoped to.
            transactions: TransactionService used to relabel transactions.
        """
        self.db_manager = db_manager
        self.owner_id = owner_id
        self.transactions = transactions

    def find_all(self) -> List[Category]:
        """Get all categories of this owner, ordered by name."""
        with store_operation("categories.find_all"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_FIELDS} FROM categories WHERE owner_id = ? ORDER BY name, id",
                (self.owner_id,),
            )
            return [self._row_to_category(row) for row in cursor.fetchall()]

    def find(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID.

        Returns:
            Category object if found, None otherwise.
        """
        with store_operation("categories.find"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_FIELDS} FROM categories WHERE id = ? AND owner_id = ?",
                (category_id, self.owner_id),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_category(row)
            return None

    def find_by_name(self, name: str) -> Optional[Category]:
        """Get the first category with this exact name (lowest id wins).

        Names are only unique among siblings; use find_by_path to address a
        specific node.
        """
        with store_operation("categories.find_by_name"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_CATEGORY_FIELDS} FROM categories
                WHERE name = ? AND owner_id = ?
                ORDER BY id
                LIMIT 1
                """,
                (name, self.owner_id),
            )
            row = cursor.fetchone()
            return self._row_to_category(row) if row else None

    def find_by_path(self, path: str) -> Optional[Category]:
        """Get a category by its full path, e.g. "Transport → Fuel"."""
        categories = self.find_all()
        paths = build_paths(categories)
        for category in categories:
            if paths.get(category.id) == path:
                return category
        return None

    def tree(self) -> CategoryTree:
        """Build the category tree from the current store contents."""
        return build_tree(self.find_all())

    def paths(self) -> Dict[int, str]:
        """Map of category id to full path."""
        return build_paths(self.find_all())

    def options(self) -> List[CategoryOption]:
        """Category choices for labelling transactions, system first.

        An owner that has categories but lost its system category gets it
        back here. An owner with no categories at all gets the placeholder.
        """
        categories = self.find_all()
        if categories and find_system_category(categories) is None:
            self.ensure_system_category()
            categories = self.find_all()
        return category_options(categories)

    def system_category(self) -> Optional[Category]:
        """The owner's system (uncategorized) category, if it exists."""
        return find_system_category(self.find_all())

    def system_label(self) -> str:
        """Label given to new and orphaned transactions."""
        return system_label(self.find_all())

    def full_path(self, category_id: Optional[int]) -> str:
        """Display label for a category reference (None = system label)."""
        categories = self.find_all()
        return full_path_for(
            category_id, build_paths(categories), find_system_category(categories)
        )

    def create(self, name: str, parent_id: Optional[int] = None) -> Category:
        """Create a new, non-system category.

        The owner's system category is created first if it does not exist
        yet, so a tree never lacks the fallback for deleted categories.
        "Uncategorized" is reserved at the top level while it is missing.

        Args:
            name: Category name; surrounding whitespace is removed.
            parent_id: Optional parent category ID.

        Returns:
            The created Category object with id populated.

        Raises:
            ValidationError: If the name is empty, the parent does not exist,
                or a sibling (or the missing system category) already uses
                the name.
        """
        trimmed = (name or "").strip()
        if not trimmed:
            raise ValidationError(ValidationKind.REQUIRED_FIELD)

        categories = self.find_all()
        if parent_id is not None and parent_id not in {c.id for c in categories}:
            raise ValidationError(ValidationKind.NOT_FOUND, "Parent category not found")
        self._check_sibling_name(categories, trimmed, parent_id)

        if find_system_category(categories) is None:
            if parent_id is None and trimmed == SYSTEM_CATEGORY_NAME:
                raise ValidationError(ValidationKind.DUPLICATE_NAME)
            self.ensure_system_category()

        with store_operation("categories.create"), self.db_manager.connect() as conn:
            category = self._insert(conn, trimmed, parent_id, is_system=False)
            conn.commit()

        logger.info(f"Created category {category.id}: {trimmed!r}")
        return category

    def update(self, category_id: int, name=UNCHANGED, parent_id=UNCHANGED) -> Category:
        """Rename and/or move a category, then relabel affected transactions.

        Args:
            category_id: Category to edit.
            name: New name, or UNCHANGED.
            parent_id: New parent ID, None to move to the top level, or
                UNCHANGED.

        Returns:
            The updated Category.

        Raises:
            ValidationError: If the category is missing or is the system
                category, the name is blank, the new parent is the category
                itself, one of its descendants, or missing, or the new name
                clashes with a sibling.
            StoreError: If a store call fails. Relabels already issued stay
                applied and each one is safe to issue again, so the
                remaining ones can be replayed with transactions.relabel.
        """
        categories = self.find_all()
        by_id = {c.id: c for c in categories}

        category = by_id.get(category_id)
        if category is None:
            raise ValidationError(ValidationKind.NOT_FOUND)
        if category.is_system:
            raise ValidationError(ValidationKind.SYSTEM_PROTECTED)

        new_name = category.name
        if name is not UNCHANGED:
            new_name = (name or "").strip()
            if not new_name:
                raise ValidationError(ValidationKind.REQUIRED_FIELD)

        descendants = build_descendants(categories)
        new_parent_id = category.parent_id
        if parent_id is not UNCHANGED:
            if parent_id is not None:
                if parent_id == category_id:
                    raise ValidationError(ValidationKind.SELF_REFERENCE)
                if parent_id in descendants[category_id]:
                    raise ValidationError(ValidationKind.CYCLIC_REPARENT)
                if parent_id not in by_id:
                    raise ValidationError(
                        ValidationKind.NOT_FOUND, "Parent category not found"
                    )
            new_parent_id = parent_id

        if new_name == category.name and new_parent_id == category.parent_id:
            return category

        self._check_sibling_name(categories, new_name, new_parent_id, exclude_id=category_id)

        old_paths = build_paths(categories)
        updated = replace(category, name=new_name, parent_id=new_parent_id)

        with store_operation("categories.update"), self.db_manager.connect() as conn:
            conn.execute(
                "UPDATE categories SET name = ?, parent_id = ? WHERE id = ? AND owner_id = ?",
                (new_name, new_parent_id, category_id, self.owner_id),
            )
            conn.commit()

        new_paths = build_paths(updated if c.id == category_id else c for c in categories)
        rewrites = reconciliation.plan_rewrites(
            old_paths, new_paths, {category_id} | descendants[category_id]
        )
        relabelled = reconciliation.apply(rewrites, self.transactions.relabel)

        logger.info(
            f"Updated category {category_id}: {old_paths[category_id]!r} -> "
            f"{new_paths[category_id]!r} ({len(rewrites)} path(s), "
            f"{relabelled} transaction(s) relabelled)"
        )
        return updated

    def delete(self, category_id: int) -> List[int]:
        """Delete a category and its subtree, resetting affected labels.

        Transactions labelled with the path of any removed category get the
        system category's label. Their category_id is cleared by the
        foreign key (ON DELETE SET NULL).

        Returns:
            IDs of all removed categories, ascending.

        Raises:
            ValidationError: If the category is missing or is the system category.
            StoreError: If a store call fails.
        """
        categories = self.find_all()
        category = next((c for c in categories if c.id == category_id), None)
        if category is None:
            raise ValidationError(ValidationKind.NOT_FOUND)
        if category.is_system:
            raise ValidationError(ValidationKind.SYSTEM_PROTECTED)

        paths = build_paths(categories)
        removed = sorted({category_id} | build_descendants(categories)[category_id])
        fallback = system_label(categories, paths)

        with store_operation("categories.delete"), self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM categories WHERE id = ? AND owner_id = ?",
                (category_id, self.owner_id),
            )
            conn.commit()
            if cursor.rowcount == 0:
                raise ValidationError(ValidationKind.NOT_FOUND)

        rewrites = reconciliation.plan_resets(paths, removed, fallback)
        relabelled = reconciliation.apply(rewrites, self.transactions.relabel)

        logger.info(
            f"Deleted category {category_id} ({paths[category_id]!r}) with "
            f"{len(removed) - 1} subcategory(ies); {relabelled} transaction(s) "
            f"reset to {fallback!r}"
        )
        return removed

    def assign(self, transaction_id: str, category_id: Optional[int]) -> Transaction:
        """Put a transaction in a category, storing the category's full path.

        Args:
            transaction_id: Transaction to update.
            category_id: Category to assign, or None for the system label.

        Raises:
            ValidationError: If the category or transaction does not exist.
        """
        categories = self.find_all()
        paths = build_paths(categories)
        if category_id is not None and category_id not in paths:
            raise ValidationError(ValidationKind.NOT_FOUND)

        label = full_path_for(category_id, paths, find_system_category(categories))
        return self.transactions.set_category(transaction_id, category_id, label)

    def ensure_system_category(self) -> Category:
        """Return the system category, creating or promoting it if needed."""
        categories = self.find_all()
        system = find_system_category(categories)
        if system is not None:
            return system

        existing = next(
            (
                c
                for c in categories
                if c.parent_id is None and c.name == SYSTEM_CATEGORY_NAME
            ),
            None,
        )
        with store_operation("categories.ensure_system"), self.db_manager.connect() as conn:
            if existing is not None:
                conn.execute(
                    "UPDATE categories SET is_system = 1 WHERE id = ?", (existing.id,)
                )
                system = replace(existing, is_system=True)
            else:
                system = self._insert(conn, SYSTEM_CATEGORY_NAME, None, is_system=True)
            conn.commit()

        logger.info(f"System category is {system.id}: {system.name!r}")
        return system

    def seed_defaults(self, seed_path: Optional[Path] = None) -> int:
        """Create the default category taxonomy for an owner with no categories.

        Args:
            seed_path: JSON file of nested {"name", "is_system", "children"}
                entries; defaults to db/seed/categories.json.

        Returns:
            Number of categories created (0 if any category already exists).
        """
        if self.find_all():
            logger.info("Categories already exist; skipping seed")
            return 0

        with open(seed_path or get_seed_path(), "r") as f:
            seeds = json.load(f)

        created = 0
        with store_operation("categories.seed"), self.db_manager.connect() as conn:
            try:
                stack = [(seed, None) for seed in reversed(seeds)]
                while stack:
                    seed, parent_id = stack.pop()
                    category = self._insert(
                        conn,
                        seed["name"].strip(),
                        parent_id,
                        is_system=bool(seed.get("is_system", False)),
                    )
                    created += 1
                    for child in reversed(seed.get("children", [])):
                        stack.append((child, category.id))
                conn.commit()
            except Exception:
                conn.rollback()
                raise

        if find_system_category(self.find_all()) is None:
            self.ensure_system_category()
            created = len(self.find_all())

        logger.info(f"Seeded {created} default categories")
        return created

    def _insert(self, conn, name: str, parent_id: Optional[int], is_system: bool) -> Category:
        cursor = conn.execute(
            "INSERT INTO categories (owner_id, name, parent_id, is_system) VALUES (?, ?, ?, ?)",
            (self.owner_id, name, parent_id, int(is_system)),
        )
        return Category(
            id=cursor.lastrowid, name=name, parent_id=parent_id, is_system=is_system
        )

    def _check_sibling_name(
        self,
        categories: List[Category],
        name: str,
        parent_id: Optional[int],
        exclude_id: Optional[int] = None,
    ) -> None:
        for other in categories:
            if other.id == exclude_id:
                continue
            if other.parent_id == parent_id and other.name == name:
                raise ValidationError(ValidationKind.DUPLICATE_NAME)

    def _row_to_category(self, row: tuple) -> Category:
        """Convert a database row to a Category object."""
        return Category(
            id=row[0], name=row[1], parent_id=row[2], is_system=bool(row[3])
        )
