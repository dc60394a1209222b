#!/usr/bin/env python3

import sys
from logger import get_logger

logger = get_logger()


def _describe(category) -> str:
    flags = []
    if category.is_default:
        flags.append("default")
    if not category.is_active:
        flags.append("inactive")
    suffix = f" [{', '.join(flags)}]" if flags else ""
    return f"{category.name} (ID: {category.id}, {category.icon}, {category.color}){suffix}"


def cmd_list(args, services):
    """List a user's categories as a tree."""
    trees = services.categories.get_category_tree(
        args.user_id, active_only=args.active_only
    )

    if not trees:
        logger.info("No categories found.")
        return

    logger.info(f"\nCategories for user {args.user_id}:")
    logger.info("=" * 80)
    total = 0
    for tree in trees:
        logger.info(_describe(tree.category))
        for subcategory in tree.subcategories:
            logger.info(f"  └─ {_describe(subcategory)}")
        total += 1 + len(tree.subcategories)
    logger.info("-" * 80)

    logger.info(f"\nTotal categories: {total}")


def cmd_create(args, services):
    """Create a new category for a user."""
    category = services.categories.create(
        args.user_id, args.name, args.icon, args.color, args.parent_id
    )

    logger.info(f"\n✓ Category created successfully with ID: {category.id}")
    logger.info(f"  Name: {category.name}")
    logger.info(f"  Icon: {category.icon}")
    logger.info(f"  Color: {category.color}")
    if category.parent_category_id:
        logger.info(f"  Parent ID: {category.parent_category_id}")


def cmd_update(args, services):
    """Update a category's content or parent."""
    updates = {}
    for field_name in ("name", "icon", "color"):
        value = getattr(args, field_name)
        if value is not None:
            updates[field_name] = value
    if args.top_level:
        updates["parent_category_id"] = None
    elif args.parent_id is not None:
        updates["parent_category_id"] = args.parent_id

    if not updates:
        logger.error("Nothing to update. Pass --name, --icon, --color, --parent-id or --top-level.")
        sys.exit(1)

    category = services.categories.update(args.category_id, args.user_id, updates)
    logger.info(f"✓ Category updated: {_describe(category)}")


def cmd_activate(args, services):
    """Mark a category as active."""
    category = services.categories.update(
        args.category_id, args.user_id, {"is_active": True}
    )
    logger.info(f"✓ Category activated: {_describe(category)}")


def cmd_deactivate(args, services):
    """Mark a category as inactive."""
    category = services.categories.update(
        args.category_id, args.user_id, {"is_active": False}
    )
    logger.info(f"✓ Category deactivated: {_describe(category)}")


def cmd_delete(args, services):
    """Delete a category, and its subcategories, by ID."""
    category = services.categories.find(args.category_id, args.user_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    subcategories = services.categories.get_subcategories(args.user_id, category.id)

    logger.info("\nCategory to delete:")
    logger.info(f"  {_describe(category)}")
    for subcategory in subcategories:
        logger.info(f"  └─ {_describe(subcategory)}")

    if not args.yes:
        confirm = (
            input("\nAre you sure you want to delete this category? (yes/no): ")
            .strip()
            .lower()
        )
        if confirm != "yes":
            logger.info("Deletion cancelled.")
            return

    deleted_ids = services.categories.delete(category.id, args.user_id)
    logger.info(
        f"✓ Category '{category.name}' deleted successfully "
        f"({len(deleted_ids)} categories removed)."
    )


def cmd_seed(args, services):
    """Seed the default categories for one user."""
    if services.users.find(args.user_id) is None:
        logger.error(f"User with ID {args.user_id} not found.")
        sys.exit(1)

    if services.seeder.has_defaults(args.user_id):
        logger.info(f"⊘ User {args.user_id} already has default categories.")
        return

    created = services.seeder.seed_for_user(args.user_id)
    logger.info(f"✓ Seeded {created} default categories for user {args.user_id}")


def cmd_seed_all(args, services):
    """Seed the default categories for every user that has none."""
    seeded = services.seeder.seed_for_all_users()

    logger.info("\nSeeding complete!")
    logger.info(f"Users seeded: {len(seeded)}")
    logger.info(f"Categories created: {sum(seeded.values())}")


def _add_user_argument(parser):
    parser.add_argument(
        "--user-id",
        type=int,
        required=True,
        help="ID of the user owning the categories",
    )


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Create, list, update, and delete spending categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    # categories list
    list_parser = categories_subparsers.add_parser(
        "list", help="List a user's categories as a tree"
    )
    _add_user_argument(list_parser)
    list_parser.add_argument(
        "--active-only", action="store_true", help="Hide inactive categories"
    )
    list_parser.set_defaults(func=cmd_list)

    # categories create
    create_parser = categories_subparsers.add_parser(
        "create", help="Create a new category"
    )
    _add_user_argument(create_parser)
    create_parser.add_argument("--name", required=True, help="Category name")
    create_parser.add_argument("--icon", required=True, help="Icon name (e.g., Car)")
    create_parser.add_argument("--color", required=True, help="Color (e.g., #45B7D1)")
    create_parser.add_argument(
        "--parent-id", type=int, help="Top-level category to nest under"
    )
    create_parser.set_defaults(func=cmd_create)

    # categories update
    update_parser = categories_subparsers.add_parser(
        "update", help="Update a category"
    )
    _add_user_argument(update_parser)
    update_parser.add_argument("category_id", type=int, help="ID of the category")
    update_parser.add_argument("--name", help="New name")
    update_parser.add_argument("--icon", help="New icon")
    update_parser.add_argument("--color", help="New color")
    parent_group = update_parser.add_mutually_exclusive_group()
    parent_group.add_argument("--parent-id", type=int, help="New parent category ID")
    parent_group.add_argument(
        "--top-level", action="store_true", help="Move to the top level"
    )
    update_parser.set_defaults(func=cmd_update)

    # categories activate / deactivate
    for name, func, help_text in (
        ("activate", cmd_activate, "Mark a category as active"),
        ("deactivate", cmd_deactivate, "Mark a category as inactive"),
    ):
        toggle_parser = categories_subparsers.add_parser(name, help=help_text)
        _add_user_argument(toggle_parser)
        toggle_parser.add_argument(
            "category_id", type=int, help="ID of the category"
        )
        toggle_parser.set_defaults(func=func)

    # categories delete
    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category and its subcategories"
    )
    _add_user_argument(delete_parser)
    delete_parser.add_argument(
        "category_id",
        type=int,
        help="ID of the category to delete",
    )
    delete_parser.add_argument(
        "--yes", action="store_true", help="Skip the confirmation prompt"
    )
    delete_parser.set_defaults(func=cmd_delete)

    # categories seed
    seed_parser = categories_subparsers.add_parser(
        "seed", help="Seed the default categories for one user"
    )
    _add_user_argument(seed_parser)
    seed_parser.set_defaults(func=cmd_seed)

    # categories seed-all
    seed_all_parser = categories_subparsers.add_parser(
        "seed-all", help="Seed default categories for every user that has none"
    )
    seed_all_parser.set_defaults(func=cmd_seed_all)
