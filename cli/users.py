#!/usr/bin/env python3

import sys
from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List all users in the database."""
    users = services.users.find_all()

    if not users:
        logger.info("No users found.")
        return

    logger.info("\nUsers:")
    logger.info("=" * 80)
    for user in users:
        logger.info(f"ID: {user.id}")
        logger.info(f"Name: {user.name}")
        logger.info(f"Email: {user.email}")
        logger.info("-" * 80)

    logger.info(f"\nTotal users: {len(users)}")


def cmd_create(args, services):
    """Interactively create a new user and seed their default categories."""
    print("\nCreate New User")
    print("=" * 80)

    name = args.name or input("Name: ").strip()
    if not name:
        logger.error("Name cannot be empty.")
        sys.exit(1)

    email = args.email or input("Email: ").strip()
    if not email:
        logger.error("Email cannot be empty.")
        sys.exit(1)

    if services.users.find_by_email(email):
        logger.error(f"A user with email '{email}' already exists.")
        sys.exit(1)

    user = services.register_user(name, email)

    logger.info(f"\n✓ User created successfully with ID: {user.id}")
    logger.info(f"  Name: {user.name}")
    logger.info(f"  Email: {user.email}")
    if services.config.seed_on_signup:
        count = len(services.categories.list_by_owner(user.id))
        logger.info(f"  Default categories: {count}")


def setup_parser(subparsers):
    """Setup users subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "users",
        help="Manage users",
        description="Create and list household users",
    )

    users_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available user commands",
        dest="subcommand",
        required=True,
    )

    # users list
    list_parser = users_subparsers.add_parser("list", help="List all users")
    list_parser.set_defaults(func=cmd_list)

    # users create
    create_parser = users_subparsers.add_parser(
        "create", help="Create a new user (prompts for missing values)"
    )
    create_parser.add_argument("--name", help="Display name")
    create_parser.add_argument("--email", help="Email address")
    create_parser.set_defaults(func=cmd_create)
