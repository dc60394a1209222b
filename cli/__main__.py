#!/usr/bin/env python3
"""
Hearthbudget CLI - Unified command-line interface for household categories.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    users        Manage household users
    categories   Manage a user's spending categories
    migrate      Database migrations

Examples:
    python -m cli users create
    python -m cli categories list --user-id 1
    python -m cli categories create --user-id 1 --name Pets --icon Dog --color "#AA8844"
    python -m cli categories seed-all
    python -m cli migrate apply
"""

import sys
import argparse
from cli import users, categories, migrate
from config import load_config
from services.base import Services
from services.errors import CategoryError
from db.manager import DatabaseManager
from logger import setup_logging, get_logger


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Hearthbudget - Household spending categories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    # Register each command's subparser
    users.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # Commands that use services: users, categories
            # Commands that use db_manager directly: migrate
            if args.command in ("users", "categories"):
                services = Services(config)
                args.func(args, services)
            elif args.command == "migrate":
                db_manager = DatabaseManager(config)
                args.func(args, db_manager)
            else:
                args.func(args)
        except CategoryError as e:
            # Business-rule failures are the caller's to fix
            get_logger().error(str(e))
            sys.exit(1)
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
