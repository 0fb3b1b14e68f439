#!/usr/bin/env python3

import sys
from errors import StructuralError, ValidationError
from logger import get_logger

logger = get_logger()


def _confirm(prompt: str) -> bool:
    return input(f"\n{prompt} (yes/no): ").strip().lower() == "yes"


def cmd_list(args, services):
    """Show the category tree with IDs and full paths."""
    try:
        tree = services.categories.tree()
    except StructuralError as e:
        logger.error(f"Category tree is corrupt: {e}")
        sys.exit(1)

    if not tree.roots:
        logger.info("No categories found. Run 'python -m cli categories seed'.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    depth = {}
    for node in tree.walk():
        parent_id = node.category.parent_id
        level = depth.get(parent_id, -1) + 1 if parent_id is not None else 0
        depth[node.id] = level
        marker = " [system]" if node.category.is_system else ""
        logger.info(f"{'  ' * level}{node.name} (ID: {node.id}){marker}")

    logger.info(f"\nTotal categories: {len(tree.paths)}")


def cmd_options(args, services):
    """List category labels in the order offered for transactions."""
    for option in services.categories.options():
        option_id = option.id if option.id is not None else "-"
        logger.info(f"{option_id}\t{option.label}")


def cmd_create(args, services):
    """Create a new category."""
    try:
        category = services.categories.create(args.name, args.parent)
    except ValidationError as e:
        logger.error(f"Error creating category: {e}")
        sys.exit(1)

    logger.info(f"✓ Category created with ID: {category.id}")
    logger.info(f"  Path: {services.categories.full_path(category.id)}")


def cmd_rename(args, services):
    """Rename a category and relabel its transactions."""
    try:
        category = services.categories.update(args.category_id, name=args.name)
    except ValidationError as e:
        logger.error(f"Error renaming category: {e}")
        sys.exit(1)

    logger.info(f"✓ Category renamed: {services.categories.full_path(category.id)}")


def cmd_move(args, services):
    """Move a category under another parent (or to the top level)."""
    try:
        category = services.categories.update(args.category_id, parent_id=args.parent)
    except ValidationError as e:
        logger.error(f"Error moving category: {e}")
        sys.exit(1)

    logger.info(f"✓ Category moved: {services.categories.full_path(category.id)}")


def cmd_delete(args, services):
    """Delete a category, its subcategories, and reset their transactions."""
    category = services.categories.find(args.category_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    path = services.categories.full_path(category.id)
    logger.info(f"\nCategory to delete: {path} (ID: {category.id})")
    logger.info("Subcategories are deleted too; their transactions become uncategorized.")

    if not args.yes and not _confirm("Are you sure you want to delete this category?"):
        logger.info("Deletion cancelled.")
        return

    try:
        removed = services.categories.delete(category.id)
    except ValidationError as e:
        logger.error(f"Error deleting category: {e}")
        sys.exit(1)

    logger.info(f"✓ Deleted {len(removed)} categor{'y' if len(removed) == 1 else 'ies'}.")


def cmd_seed(args, services):
    """Create the default category taxonomy."""
    created = services.categories.seed_defaults(services.config.seed_path)
    if created:
        logger.info(f"✓ Created {created} default categories")
    else:
        logger.info("Categories already exist; nothing seeded.")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, rename, move, delete and list transaction categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="Show the category tree")
    list_parser.set_defaults(func=cmd_list)

    options_parser = categories_subparsers.add_parser(
        "options", help="List category labels offered for transactions"
    )
    options_parser.set_defaults(func=cmd_options)

    create_parser = categories_subparsers.add_parser("create", help="Create a category")
    create_parser.add_argument("name", help="Category name")
    create_parser.add_argument(
        "--parent", type=int, default=None, help="Parent category ID"
    )
    create_parser.set_defaults(func=cmd_create)

    rename_parser = categories_subparsers.add_parser("rename", help="Rename a category")
    rename_parser.add_argument("category_id", type=int, help="Category ID")
    rename_parser.add_argument("name", help="New name")
    rename_parser.set_defaults(func=cmd_rename)

    move_parser = categories_subparsers.add_parser(
        "move", help="Move a category under a new parent"
    )
    move_parser.add_argument("category_id", type=int, help="Category ID")
    move_parser.add_argument(
        "--parent",
        type=int,
        default=None,
        help="New parent category ID (omit to move to the top level)",
    )
    move_parser.set_defaults(func=cmd_move)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category and its subcategories"
    )
    delete_parser.add_argument("category_id", type=int, help="Category ID")
    delete_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    delete_parser.set_defaults(func=cmd_delete)

    seed_parser = categories_subparsers.add_parser(
        "seed", help="Create the default categories"
    )
    seed_parser.set_defaults(func=cmd_seed)
