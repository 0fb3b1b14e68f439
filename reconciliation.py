"""Keep transaction category labels in step with the category tree.

Transactions store the full path of their category as a plain label. When a
category is renamed, moved or deleted, the labels that pointed at the old
paths have to be rewritten. Planning is pure; applying issues one relabel
call per distinct old label, in ascending category id order, so a failed
cascade can be re-run safely.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List

from logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LabelRewrite:
    """Replace every transaction label equal to old_label with new_label."""

    old_label: str
    new_label: str


def plan_rewrites(
    old_paths: Dict[int, str],
    new_paths: Dict[int, str],
    affected_ids: Iterable[int],
) -> List[LabelRewrite]:
    """Plan label rewrites after a rename or move.

    Args:
        old_paths: id -> full path before the edit.
        new_paths: id -> full path after the edit.
        affected_ids: The edited category and all of its descendants.

    Returns:
        One rewrite per id whose path actually changed, ordered by id.
    """
    rewrites: List[LabelRewrite] = []
    planned = set()
    for category_id in sorted(set(affected_ids)):
        old_path = old_paths.get(category_id)
        new_path = new_paths.get(category_id)
        if not old_path or not new_path or old_path == new_path:
            continue
        if old_path in planned:
            continue
        planned.add(old_path)
        rewrites.append(LabelRewrite(old_path, new_path))
    return rewrites


def plan_resets(
    old_paths: Dict[int, str],
    removed_ids: Iterable[int],
    fallback_label: str,
) -> List[LabelRewrite]:
    """Plan resets of labels that pointed at deleted categories.

    Args:
        old_paths: id -> full path before the delete.
        removed_ids: The deleted category and all of its descendants.
        fallback_label: Label of the system category.

    Returns:
        One rewrite per distinct removed path, ordered by category id.
    """
    rewrites: List[LabelRewrite] = []
    planned = set()
    for category_id in sorted(set(removed_ids)):
        old_path = old_paths.get(category_id)
        if not old_path or old_path == fallback_label or old_path in planned:
            continue
        planned.add(old_path)
        rewrites.append(LabelRewrite(old_path, fallback_label))
    return rewrites


def apply(rewrites: Iterable[LabelRewrite], relabel: Callable[[str, str], int]) -> int:
    """Issue the planned rewrites.

    Args:
        rewrites: Output of plan_rewrites or plan_resets.
        relabel: Callable performing one store update, returning rows changed.
            Store errors propagate unchanged; rewrites already applied stay
            applied.

    Returns:
        Total number of transactions relabelled.
    """
    total = 0
    for rewrite in rewrites:
        changed = relabel(rewrite.old_label, rewrite.new_label)
        logger.debug(
            f"Relabelled {changed} transaction(s): {rewrite.old_label!r} -> "
            f"{rewrite.new_label!r}"
        )
        total += changed
    return total
