#!/usr/bin/env python3
"""
Tallybook CLI - import bank statements and organise transactions into categories.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    accounts     Manage bank accounts
    transactions Import and manage transactions
    categories   Manage the category tree
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli categories seed
    python -m cli accounts create fnb_cheque "First National Bank"
    python -m cli transactions ingest statement.csv --account-name fnb_cheque
    python -m cli categories rename 12 "Travel"
"""

import sys
import argparse
from cli import accounts, transactions, migrate, categories
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Tallybook - Bank statement import and categorisation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    accounts.setup_parser(subparsers)
    transactions.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # migrate works on the raw database, everything else on services
            if args.command == "migrate":
                args.func(args, DatabaseManager(config))
            else:
                args.func(args, Services(config))
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
