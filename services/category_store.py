"""Row gateway for the categories table.

Every method takes an open connection so callers can compose several row
operations into one transaction. No hierarchy rules live here.
"""

import sqlite3
from typing import Iterable, List, Optional
from models.category import Category

_CATEGORY_SELECT_FIELDS = (
    "id, owner_id, name, icon, color, is_active, parent_category_id, is_default"
)

# Columns callers may change after insert
UPDATABLE_FIELDS = ("name", "icon", "color", "is_active", "parent_category_id")


class CategoryStore:
    """Owner-scoped CRUD on category rows."""

    def list_by_owner(self, conn: sqlite3.Connection, owner_id: int) -> List[Category]:
        """Get all categories of one owner.

        Args:
            conn: Open database connection.
            owner_id: The owning user ID.

        Returns:
            List of Category objects, ordered by id.
        """
        cursor = conn.execute(
            f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories "
            "WHERE owner_id = ? ORDER BY id",
            (owner_id,),
        )
        return [self._row_to_category(row) for row in cursor.fetchall()]

    def get(
        self, conn: sqlite3.Connection, category_id: int, owner_id: int
    ) -> Optional[Category]:
        """Get a single category by ID, scoped to its owner.

        Returns:
            Category object if found for that owner, None otherwise.
        """
        cursor = conn.execute(
            f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories "
            "WHERE id = ? AND owner_id = ?",
            (category_id, owner_id),
        )
        row = cursor.fetchone()

        if row:
            return self._row_to_category(row)
        return None

    def list_children(
        self, conn: sqlite3.Connection, parent_id: int, owner_id: int
    ) -> List[Category]:
        """Get the subcategories of a category, ordered by id."""
        cursor = conn.execute(
            f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories "
            "WHERE parent_category_id = ? AND owner_id = ? ORDER BY id",
            (parent_id, owner_id),
        )
        return [self._row_to_category(row) for row in cursor.fetchall()]

    def insert(
        self,
        conn: sqlite3.Connection,
        owner_id: int,
        name: str,
        icon: str,
        color: str,
        parent_category_id: Optional[int] = None,
        is_default: bool = False,
        is_active: bool = True,
    ) -> Category:
        """Insert a category row.

        Returns:
            The created Category object with id populated.

        Raises:
            sqlite3.IntegrityError: On constraint violations (unknown owner,
                NULL columns, duplicate default family).
        """
        cursor = conn.execute(
            """
            INSERT INTO categories
                (owner_id, name, icon, color, is_active, parent_category_id, is_default)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                owner_id,
                name,
                icon,
                color,
                int(is_active),
                parent_category_id,
                int(is_default),
            ),
        )

        return Category(
            id=cursor.lastrowid,
            owner_id=owner_id,
            name=name,
            icon=icon,
            color=color,
            is_active=is_active,
            parent_category_id=parent_category_id,
            is_default=is_default,
        )

    def update_fields(
        self, conn: sqlite3.Connection, category_id: int, owner_id: int, fields: dict
    ) -> Optional[Category]:
        """Apply only the provided columns to one row.

        Args:
            conn: Open database connection.
            category_id: The category ID to update.
            owner_id: The owning user ID.
            fields: Column name to new value. Keys must be in UPDATABLE_FIELDS.

        Returns:
            The updated Category, or None when the row does not exist for
            that owner or there was nothing to update.

        Raises:
            ValueError: If unsupported field names are provided.
        """
        if not fields:
            return None

        invalid_fields = set(fields) - set(UPDATABLE_FIELDS)
        if invalid_fields:
            raise ValueError(f"Unsupported field names: {invalid_fields}")

        # Fixed column order keeps the generated SQL stable
        names = [name for name in UPDATABLE_FIELDS if name in fields]
        set_clause = ", ".join(f"{name} = ?" for name in names)
        values = [
            int(fields[name]) if name == "is_active" else fields[name]
            for name in names
        ]

        cursor = conn.execute(
            f"UPDATE categories SET {set_clause} WHERE id = ? AND owner_id = ?",
            (*values, category_id, owner_id),
        )
        if cursor.rowcount == 0:
            return None

        return self.get(conn, category_id, owner_id)

    def delete(self, conn: sqlite3.Connection, category_id: int, owner_id: int) -> bool:
        """Delete a category by ID.

        Returns:
            True if the category was deleted, False if not found for that owner.
        """
        cursor = conn.execute(
            "DELETE FROM categories WHERE id = ? AND owner_id = ?",
            (category_id, owner_id),
        )
        return cursor.rowcount > 0

    def delete_many(
        self, conn: sqlite3.Connection, category_ids: Iterable[int], owner_id: int
    ) -> int:
        """Delete several categories of one owner.

        Returns:
            Number of rows removed.
        """
        category_ids = list(category_ids)
        if not category_ids:
            return 0

        placeholders = ", ".join(["?"] * len(category_ids))
        cursor = conn.execute(
            f"DELETE FROM categories WHERE owner_id = ? AND id IN ({placeholders})",
            (owner_id, *category_ids),
        )
        return cursor.rowcount

    def count_defaults(self, conn: sqlite3.Connection, owner_id: int) -> int:
        """Count the seeded default categories of one owner."""
        cursor = conn.execute(
            "SELECT COUNT(*) FROM categories WHERE owner_id = ? AND is_default = 1",
            (owner_id,),
        )
        return cursor.fetchone()[0]

    def _row_to_category(self, row: tuple) -> Category:
        return Category(
            id=row[0],
            owner_id=row[1],
            name=row[2],
            icon=row[3],
            color=row[4],
            is_active=bool(row[5]),
            parent_category_id=row[6],
            is_default=bool(row[7]),
        )
