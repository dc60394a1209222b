"""Helper utilities for tests."""

from pathlib import Path
import sqlite3


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in sorted(migrations_dir.glob("*.sql")):
        with open(migration_file, "r") as f:
            conn.executescript(f.read())

    conn.commit()


def count_rows(conn: sqlite3.Connection, owner_id: int) -> int:
    """Count the category rows of one owner straight from the table."""
    cursor = conn.execute(
        "SELECT COUNT(*) FROM categories WHERE owner_id = ?", (owner_id,)
    )
    return cursor.fetchone()[0]


def create_family(services, owner_id: int, name: str, children=()):
    """Create a top-level category with the given subcategory names.

    Returns:
        Tuple of (parent, [subcategories]).
    """
    parent = services.categories.create(owner_id, name, "Tag", "#123456")
    subcategories = [
        services.categories.create(owner_id, child, "Tag", "#123456", parent.id)
        for child in children
    ]
    return parent, subcategories
