#!/usr/bin/env python3

import sys
from pathlib import Path
from errors import FormatError, ValidationError
from ingestion import ingest
from logger import get_logger

logger = get_logger()


def _confirm(prompt: str) -> bool:
    return input(f"\n{prompt} (yes/no): ").strip().lower() == "yes"


def _lookup_account(services, account_name):
    if not account_name:
        return None
    account = services.accounts.find_by_name(account_name)
    if not account:
        logger.error(f"Account '{account_name}' not found.")
        logger.info("Use 'python -m cli accounts list' to see available accounts.")
        sys.exit(1)
    return account


def cmd_ingest(args, services):
    """Import transactions from a bank statement CSV.

    Args:
        args: Parsed command-line arguments with csv_file and account_name
        services: Services container
    """
    csv_path = Path(args.csv_file)
    if not csv_path.exists():
        logger.error(f"File not found: {args.csv_file}")
        sys.exit(1)

    account = _lookup_account(services, args.account_name)
    account_id = account.id if account else None
    if account:
        logger.info(f"Importing into account: {account.name} (ID: {account.id})")
    logger.info(f"CSV file: {args.csv_file}")
    logger.info("-" * 80)

    # New transactions are filed under the system category, created on first use
    services.categories.ensure_system_category()
    default_label = services.categories.system_label()

    try:
        with open(csv_path, "r", encoding=services.config.csv_encoding) as f:
            parsed = ingest(f, account_id=account_id, default_category=default_label)
    except FormatError as e:
        logger.error(f"Could not read {csv_path.name}: {e}")
        sys.exit(1)

    logger.info(f"Parsed {len(parsed)} transactions from CSV")
    if not parsed:
        logger.info("No transactions to import.")
        return

    inserted = services.transactions.import_batch(parsed)
    logger.info(f"✓ Successfully inserted {len(inserted)} transactions")

    if len(inserted) < len(parsed):
        skipped = len(parsed) - len(inserted)
        logger.info(f"  ({skipped} duplicate transaction(s) skipped)")


def cmd_list(args, services):
    """List transactions, newest first."""
    account = _lookup_account(services, args.account_name)
    services.snapshot.select_account(account.id if account else None)
    transactions = services.snapshot.transactions

    if not transactions:
        logger.info("No transactions found.")
        return

    for t in transactions[: args.limit] if args.limit else transactions:
        balance = f"  (balance {t.balance})" if t.balance is not None else ""
        logger.info(
            f"{t.date}  {t.amount:>12}  {t.description[:40]:<40}  [{t.category}]  "
            f"{t.id}{balance}"
        )

    logger.info(f"\nTotal transactions: {len(transactions)}")


def cmd_set_category(args, services):
    """Set the category for a transaction.

    CATEGORY is a category ID, a full path, or a bare name (the oldest
    category with that name); with --legacy it is stored as a free-text
    label without a category reference.
    """
    try:
        if args.legacy:
            transaction = services.transactions.set_category(
                args.transaction_id, None, args.category
            )
        else:
            try:
                category_id = int(args.category)
            except ValueError:
                category = services.categories.find_by_path(
                    args.category
                ) or services.categories.find_by_name(args.category)
                if not category:
                    logger.error(f"Category '{args.category}' not found.")
                    logger.info(
                        "Use 'python -m cli categories options' to see available categories."
                    )
                    sys.exit(1)
                category_id = category.id
            transaction = services.categories.assign(args.transaction_id, category_id)
    except ValidationError as e:
        logger.error(f"Error updating transaction: {e}")
        sys.exit(1)

    logger.info("✓ Transaction categorized successfully")
    logger.info(f"  Transaction: {transaction.description[:50]}")
    logger.info(f"  Category: {transaction.category}")


def cmd_delete(args, services):
    """Delete a single transaction."""
    transaction = services.transactions.find(args.transaction_id)
    if not transaction:
        logger.error(f"Transaction with ID '{args.transaction_id}' not found.")
        sys.exit(1)

    logger.info(
        f"\nTransaction to delete: {transaction.date} {transaction.description} "
        f"{transaction.amount}"
    )
    if not args.yes and not _confirm("Delete this transaction?"):
        logger.info("Deletion cancelled.")
        return

    services.transactions.delete(transaction.id)
    logger.info("✓ Transaction deleted.")


def cmd_clear(args, services):
    """Delete every transaction."""
    if not args.yes and not _confirm("Delete ALL transactions?"):
        logger.info("Clear cancelled.")
        return

    deleted = services.transactions.clear()
    logger.info(f"✓ Deleted {deleted} transaction(s).")


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Import and manage transactions",
        description="Import bank statement CSVs and categorize transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    ingest_parser = transactions_subparsers.add_parser(
        "ingest", help="Import transactions from a bank statement CSV"
    )
    ingest_parser.add_argument("csv_file", help="Path to the CSV file")
    ingest_parser.add_argument(
        "--account-name", default=None, help="Account the statement belongs to"
    )
    ingest_parser.set_defaults(func=cmd_ingest)

    list_parser = transactions_subparsers.add_parser("list", help="List transactions")
    list_parser.add_argument(
        "--account-name", default=None, help="Only show this account's transactions"
    )
    list_parser.add_argument(
        "--limit", type=int, default=None, help="Show at most this many rows"
    )
    list_parser.set_defaults(func=cmd_list)

    set_category_parser = transactions_subparsers.add_parser(
        "set-category", help="Set the category of a transaction"
    )
    set_category_parser.add_argument("transaction_id", help="Transaction ID")
    set_category_parser.add_argument(
        "category", help="Category ID, full path (e.g. 'Transport → Fuel') or name"
    )
    set_category_parser.add_argument(
        "--legacy",
        action="store_true",
        help="Store CATEGORY as a plain label without linking a category",
    )
    set_category_parser.set_defaults(func=cmd_set_category)

    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction"
    )
    delete_parser.add_argument("transaction_id", help="Transaction ID")
    delete_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    delete_parser.set_defaults(func=cmd_delete)

    clear_parser = transactions_subparsers.add_parser(
        "clear", help="Delete all transactions"
    )
    clear_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation"
    )
    clear_parser.set_defaults(func=cmd_clear)
