"""Tree algorithms over a flat list of categories.

Everything here works on an explicit snapshot (a list of Category records for
one owner) and never touches the database. Traversals are iterative and keep a
visited set, so a corrupt parent chain raises StructuralError instead of
looping.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from errors import StructuralError
from logger import get_logger
from models.category import (
    SYSTEM_CATEGORY_NAME,
    Category,
    CategoryNode,
    CategoryOption,
)

logger = get_logger(__name__)

PATH_SEPARATOR = " → "


@dataclass
class CategoryTree:
    """Nested forest plus a flat id -> full path lookup."""

    roots: List[CategoryNode] = field(default_factory=list)
    paths: Dict[int, str] = field(default_factory=dict)

    def walk(self) -> Iterable[CategoryNode]:
        """Yield every node depth-first, siblings in display order."""
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


def _sibling_key(category: Category):
    return (category.name.casefold(), category.name, category.id)


def join_path(parent_path: Optional[str], name: str) -> str:
    """Append a name to a parent path (None for roots)."""
    return f"{parent_path}{PATH_SEPARATOR}{name}" if parent_path else name


def children_map(categories: Iterable[Category]) -> Dict[Optional[int], List[Category]]:
    """Group categories by parent id, siblings sorted case-insensitively.

    Categories whose parent is missing from the collection are grouped under
    None and treated as roots.
    """
    categories = list(categories)
    known_ids = {c.id for c in categories}
    grouped: Dict[Optional[int], List[Category]] = defaultdict(list)

    for category in categories:
        parent_id = category.parent_id
        if parent_id is not None and parent_id not in known_ids:
            logger.warning(
                f"Category {category.id} ({category.name!r}) references missing "
                f"parent {parent_id}; treating it as a root"
            )
            parent_id = None
        grouped[parent_id].append(category)

    for siblings in grouped.values():
        siblings.sort(key=_sibling_key)
    return grouped


def _find_cycle(start: Category, by_id: Dict[int, Category]) -> List[int]:
    """Follow parent links from start until an id repeats; return the loop."""
    chain: List[int] = []
    current: Optional[Category] = start
    while current is not None and current.id not in chain:
        chain.append(current.id)
        current = by_id.get(current.parent_id) if current.parent_id is not None else None
    if current is None:
        return []
    return chain[chain.index(current.id):]


def build_tree(categories: Iterable[Category]) -> CategoryTree:
    """Build the nested tree and the full-path map.

    Args:
        categories: One owner's categories.

    Returns:
        CategoryTree whose roots and children are sorted by name.

    Raises:
        StructuralError: If the parent links contain a cycle.
    """
    categories = list(categories)
    grouped = children_map(categories)
    tree = CategoryTree()
    visited: Set[int] = set()

    # (category, parent node or None for roots)
    stack = [(root, None) for root in reversed(grouped.get(None, []))]
    while stack:
        category, parent = stack.pop()
        if category.id in visited:
            raise StructuralError(f"Category {category.id} is reachable twice")
        visited.add(category.id)

        full_path = join_path(parent.full_path if parent else None, category.name)
        node = CategoryNode(category=category, full_path=full_path)
        tree.paths[category.id] = full_path
        if parent is None:
            tree.roots.append(node)
        else:
            parent.children.append(node)

        for child in reversed(grouped.get(category.id, [])):
            stack.append((child, node))

    if len(visited) < len(categories):
        # Every node that is not reachable from a root sits on or below a cycle
        by_id = {c.id: c for c in categories}
        for category in categories:
            if category.id in visited:
                continue
            cycle = _find_cycle(category, by_id)
            message = f"Category cycle detected: {' -> '.join(str(i) for i in cycle)}"
            logger.error(message)
            raise StructuralError(message)

    return tree


def build_paths(categories: Iterable[Category]) -> Dict[int, str]:
    """Shortcut for build_tree(categories).paths."""
    return build_tree(categories).paths


def build_descendants(categories: Iterable[Category]) -> Dict[int, Set[int]]:
    """Map every category id to the ids of all its descendants.

    Raises:
        StructuralError: If following child links revisits a node.
    """
    categories = list(categories)
    grouped = children_map(categories)
    descendants: Dict[int, Set[int]] = {}

    for category in categories:
        found: Set[int] = set()
        stack = [child.id for child in grouped.get(category.id, [])]
        while stack:
            child_id = stack.pop()
            if child_id == category.id or child_id in found:
                message = f"Category cycle detected below category {category.id}"
                logger.error(message)
                raise StructuralError(message)
            found.add(child_id)
            stack.extend(c.id for c in grouped.get(child_id, []))
        descendants[category.id] = found

    return descendants


def find_system_category(categories: Iterable[Category]) -> Optional[Category]:
    """Return the first category flagged as system, if any."""
    for category in categories:
        if category.is_system:
            return category
    return None


def system_label(categories: Iterable[Category], paths: Optional[Dict[int, str]] = None) -> str:
    """Label that orphaned transactions fall back to."""
    categories = list(categories)
    system = find_system_category(categories)
    if system is None:
        return SYSTEM_CATEGORY_NAME
    if paths is None:
        paths = build_paths(categories)
    return paths.get(system.id, system.name)


def full_path_for(
    category_id: Optional[int],
    paths: Dict[int, str],
    system: Optional[Category] = None,
) -> str:
    """Resolve the label to show for a category reference.

    None resolves to the system category's path; unknown ids resolve to the
    default system name.
    """
    if category_id is None:
        if system is None:
            return SYSTEM_CATEGORY_NAME
        return paths.get(system.id, system.name)
    return paths.get(category_id, SYSTEM_CATEGORY_NAME)


def category_options(
    categories: Iterable[Category], paths: Optional[Dict[int, str]] = None
) -> List[CategoryOption]:
    """Flatten categories into label choices, system category first.

    An empty collection yields a single placeholder system option so there
    is always something to pick.
    """
    categories = list(categories)
    if not categories:
        return [CategoryOption(id=None, label=SYSTEM_CATEGORY_NAME, is_system=True)]

    if paths is None:
        paths = build_paths(categories)

    options = [
        CategoryOption(id=c.id, label=paths.get(c.id, c.name), is_system=c.is_system)
        for c in categories
    ]
    options.sort(key=lambda o: (not o.is_system, o.label.casefold(), o.label))
    return options
