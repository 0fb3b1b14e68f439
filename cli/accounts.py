#!/usr/bin/env python3

import sys
from errors import StoreError
from logger import get_logger
from models.account import ACCOUNT_TYPES

logger = get_logger()


def cmd_list(args, services):
    """List all accounts."""
    accounts = services.accounts.find_all()

    if not accounts:
        logger.info("No accounts found.")
        return

    logger.info("\nAccounts:")
    logger.info("=" * 80)
    for account in accounts:
        logger.info(f"ID: {account.id}")
        logger.info(f"Name: {account.name}")
        logger.info(f"Bank: {account.bank_name}")
        logger.info(f"Type: {account.account_type}")
        if account.account_number:
            logger.info(f"Number: {account.account_number}")
        logger.info("-" * 80)

    logger.info(f"\nTotal accounts: {len(accounts)}")


def cmd_create(args, services):
    """Create a new account."""
    name = args.name.strip()
    if not name:
        logger.error("Account name cannot be empty.")
        sys.exit(1)

    try:
        account = services.accounts.create(
            name, args.bank_name.strip(), args.type, args.number
        )
    except (ValueError, StoreError) as e:
        logger.error(f"Error creating account: {e}")
        sys.exit(1)

    logger.info(f"✓ Account created successfully with ID: {account.id}")
    logger.info(f"  Name: {account.name}")
    logger.info(f"  Bank: {account.bank_name}")
    logger.info(f"  Type: {account.account_type}")


def setup_parser(subparsers):
    """Setup accounts subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "accounts",
        help="Manage accounts",
        description="Create and list bank accounts",
    )

    accounts_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available account commands",
        dest="subcommand",
        required=True,
    )

    list_parser = accounts_subparsers.add_parser("list", help="List all accounts")
    list_parser.set_defaults(func=cmd_list)

    create_parser = accounts_subparsers.add_parser("create", help="Create a new account")
    create_parser.add_argument("name", help="Short account handle, e.g. fnb_cheque")
    create_parser.add_argument("bank_name", help="Name of the bank")
    create_parser.add_argument(
        "--type",
        choices=ACCOUNT_TYPES,
        default="checking",
        help="Account type (default: checking)",
    )
    create_parser.add_argument("--number", default=None, help="Account number")
    create_parser.set_defaults(func=cmd_create)
