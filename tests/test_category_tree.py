import pytest

from category_tree import (
    PATH_SEPARATOR,
    build_descendants,
    build_paths,
    build_tree,
    category_options,
    children_map,
    full_path_for,
    join_path,
    system_label,
)
from errors import StructuralError
from models.category import Category, CategoryOption


def _sample():
    return [
        Category(id=1, name="Uncategorized", is_system=True),
        Category(id=2, name="Transport"),
        Category(id=3, name="Fuel", parent_id=2),
        Category(id=4, name="parking", parent_id=2),
        Category(id=5, name="Diesel", parent_id=3),
        Category(id=6, name="Food"),
    ]


class TestBuildTree:
    """Tests for build_tree function."""

    def test_roots_sorted_case_insensitively(self):
        """Test that roots are ordered by name ignoring case."""
        tree = build_tree(_sample())

        assert [node.name for node in tree.roots] == ["Food", "Transport", "Uncategorized"]

    def test_children_nested(self):
        """Test that children hang below their parent, sorted by name."""
        tree = build_tree(_sample())
        transport = tree.roots[1]

        assert [child.name for child in transport.children] == ["Fuel", "parking"]
        assert [child.name for child in transport.children[0].children] == ["Diesel"]

    def test_full_paths(self):
        """Test that each node carries its materialized path."""
        tree = build_tree(_sample())

        assert tree.paths[5] == "Transport → Fuel → Diesel"
        assert tree.paths[2] == "Transport"
        assert tree.paths[4] == f"Transport{PATH_SEPARATOR}parking"

    def test_walk_is_depth_first(self):
        """Test that walk yields parents before children."""
        names = [node.name for node in build_tree(_sample()).walk()]

        assert names == ["Food", "Transport", "Fuel", "Diesel", "parking", "Uncategorized"]

    def test_empty(self):
        """Test that no categories give an empty tree."""
        tree = build_tree([])

        assert tree.roots == []
        assert tree.paths == {}

    def test_every_category_appears_once(self):
        """Test that the tree holds each category exactly once."""
        tree = build_tree(_sample())

        ids = [node.id for node in tree.walk()]
        assert sorted(ids) == [1, 2, 3, 4, 5, 6]

    def test_missing_parent_becomes_root(self):
        """Test that a dangling parent reference is treated as a root."""
        categories = [Category(id=1, name="Orphan", parent_id=99)]

        tree = build_tree(categories)

        assert [node.name for node in tree.roots] == ["Orphan"]
        assert tree.paths[1] == "Orphan"

    def test_cycle_raises(self):
        """Test that a parent cycle is reported instead of looping."""
        categories = [
            Category(id=1, name="A", parent_id=2),
            Category(id=2, name="B", parent_id=1),
            Category(id=3, name="Root"),
        ]

        with pytest.raises(StructuralError, match="cycle"):
            build_tree(categories)

    def test_self_parent_raises(self):
        """Test that a category that is its own parent is a cycle."""
        with pytest.raises(StructuralError):
            build_tree([Category(id=1, name="Loop", parent_id=1)])

    def test_paths_independent_of_input_order(self):
        """Test that shuffling the input does not change any path."""
        assert build_paths(list(reversed(_sample()))) == build_paths(_sample())

    def test_build_paths_shortcut(self):
        """Test that build_paths returns the tree's path map."""
        assert build_paths(_sample()) == build_tree(_sample()).paths


class TestHelpers:
    """Tests for the smaller tree helpers."""

    def test_join_path(self):
        """Test joining names onto a parent path."""
        assert join_path(None, "Transport") == "Transport"
        assert join_path("Transport", "Fuel") == "Transport → Fuel"

    def test_children_map(self):
        """Test grouping by parent id."""
        grouped = children_map(_sample())

        assert [c.id for c in grouped[None]] == [6, 2, 1]
        assert [c.id for c in grouped[2]] == [3, 4]

    def test_build_descendants(self):
        """Test collecting all descendants of each category."""
        descendants = build_descendants(_sample())

        assert descendants[2] == {3, 4, 5}
        assert descendants[3] == {5}
        assert descendants[5] == set()

    def test_build_descendants_cycle_raises(self):
        """Test that a cycle below a category is reported."""
        categories = [
            Category(id=1, name="A", parent_id=2),
            Category(id=2, name="B", parent_id=1),
        ]

        with pytest.raises(StructuralError):
            build_descendants(categories)

    def test_system_label(self):
        """Test the label for orphaned transactions."""
        assert system_label(_sample()) == "Uncategorized"

    def test_system_label_without_system_category(self):
        """Test that the default name is used without a system category."""
        assert system_label([Category(id=1, name="Food")]) == "Uncategorized"

    def test_full_path_for(self):
        """Test resolving category references to labels."""
        categories = _sample()
        paths = build_paths(categories)

        assert full_path_for(5, paths, categories[0]) == "Transport → Fuel → Diesel"
        assert full_path_for(None, paths, categories[0]) == "Uncategorized"
        assert full_path_for(404, paths) == "Uncategorized"
        assert full_path_for(None, paths) == "Uncategorized"


class TestCategoryOptions:
    """Tests for category_options function."""

    def test_system_first_then_by_label(self):
        """Test that the system option leads and the rest sort by label."""
        labels = [option.label for option in category_options(_sample())]

        assert labels == [
            "Uncategorized",
            "Food",
            "Transport",
            "Transport → Fuel",
            "Transport → Fuel → Diesel",
            "Transport → parking",
        ]

    def test_options_carry_ids(self):
        """Test that each option points at its category."""
        options = category_options(_sample())

        assert options[0] == CategoryOption(id=1, label="Uncategorized", is_system=True)
        assert {o.id for o in options} == {1, 2, 3, 4, 5, 6}

    def test_empty_gives_placeholder(self):
        """Test that no categories still offer the system label."""
        assert category_options([]) == [
            CategoryOption(id=None, label="Uncategorized", is_system=True)
        ]
