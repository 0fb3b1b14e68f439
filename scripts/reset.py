#!/usr/bin/env python3
"""Reset script for Tallybook.

Deletes the data directory (database and logs), recreates the schema and
seeds the default category tree for the configured owner.
"""

import shutil
import sys
from types import SimpleNamespace

from cli.migrate import cmd_apply
from config import get_config_path, load_config
from db.manager import DatabaseManager
from services.base import Services


def reset():
    """Reset the application state."""
    print("Tallybook Reset Script")
    print("=" * 50)

    config = load_config()

    if not config.enable_reset:
        print("\nReset is disabled in configuration (enable_reset=false).")
        print(f"To enable reset, set enable_reset=true in {get_config_path()}")
        sys.exit(1)

    print(f"\nData directory: {config.base_dir}")
    print(f"Database: {config.db_path}")
    print(f"Logs: {config.log_dir}")
    print(f"Owner: {config.owner_id}")

    response = input("\nThis will delete ALL data. Continue? (yes/no): ")
    if response.lower() != "yes":
        print("Reset cancelled.")
        sys.exit(0)

    if config.base_dir.exists():
        print(f"\nDeleting {config.base_dir}...")
        shutil.rmtree(config.base_dir)
        print("✓ Data directory deleted")
    else:
        print(f"\n✓ Data directory does not exist: {config.base_dir}")

    print("\nRunning migrations...")
    db_manager = DatabaseManager(config)
    cmd_apply(SimpleNamespace(), db_manager)

    print("\nSeeding default categories...")
    services = Services(config, db_manager=db_manager)
    created = services.categories.seed_defaults(config.seed_path)
    print(f"✓ Created {created} categories")

    print("\n" + "=" * 50)
    print("Reset complete! Database has been recreated.")
    print(f"Database location: {config.db_path}")


if __name__ == "__main__":
    reset()
