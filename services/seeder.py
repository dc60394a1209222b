"""Default category seeding from the static system catalog."""

import json
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from config import get_default_catalog_path
from services.category_store import CategoryStore
from services.errors import CatalogError
from logger import get_logger

logger = get_logger()


@dataclass(frozen=True)
class CatalogItem:
    """A subcategory entry of the default catalog."""

    name: str
    icon: str
    color: str


@dataclass(frozen=True)
class CatalogEntry:
    """A top-level entry of the default catalog with its subcategories."""

    name: str
    icon: str
    color: str
    subcategories: Tuple[CatalogItem, ...] = ()

    @property
    def size(self) -> int:
        """Number of category rows this entry seeds."""
        return 1 + len(self.subcategories)


def load_catalog(path: Optional[Path] = None) -> List[CatalogEntry]:
    """Load and validate the default category catalog.

    Args:
        path: JSON catalog file. Defaults to the bundled
            db/seed/default_categories.json.

    Returns:
        Catalog entries in file order.

    Raises:
        CatalogError: If the file is missing, not valid JSON, or an entry
            lacks a non-empty name, icon or color.
    """
    path = Path(path) if path else get_default_catalog_path()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Error parsing catalog {path}: {e}") from e

    if not isinstance(data, list):
        raise CatalogError(f"Catalog {path} must contain a list of categories")

    entries = []
    for position, entry_data in enumerate(data, start=1):
        where = f"entry {position}"
        name, icon, color = _read_triple(entry_data, where)

        subcategories_data = entry_data.get("subcategories", [])
        if not isinstance(subcategories_data, list):
            raise CatalogError(f"Catalog {where}: subcategories must be a list")

        subcategories = tuple(
            CatalogItem(*_read_triple(item, f"{where}, subcategory {sub_position}"))
            for sub_position, item in enumerate(subcategories_data, start=1)
        )
        entries.append(CatalogEntry(name, icon, color, subcategories))

    return entries


def _read_triple(data, where: str) -> Tuple[str, str, str]:
    if not isinstance(data, dict):
        raise CatalogError(f"Catalog {where} must be an object")

    values = []
    for key in ("name", "icon", "color"):
        value = data.get(key)
        if not isinstance(value, str) or not value.strip():
            raise CatalogError(f"Catalog {where} is missing '{key}'")
        values.append(value)
    return tuple(values)


class DefaultCategorySeeder:
    """Gives every user the same starting taxonomy exactly once.

    Args:
        db_manager: Database manager instance for database operations.
        catalog: Catalog entries to seed. Loaded from the bundled JSON file
            when omitted.
        store: Optional row gateway (a fresh CategoryStore by default).
    """

    def __init__(
        self,
        db_manager,
        catalog: Optional[List[CatalogEntry]] = None,
        store: Optional[CategoryStore] = None,
    ):
        self.db_manager = db_manager
        self.catalog = catalog if catalog is not None else load_catalog()
        self.store = store or CategoryStore()

    def seed_for_user(self, owner_id: int) -> int:
        """Insert the whole catalog for one user as default categories.

        Runs as one transaction: if any insert fails, none of the user's
        default rows persist.

        Args:
            owner_id: The user to seed.

        Returns:
            Number of category rows created.

        Raises:
            sqlite3.Error: If an insert fails (after rolling back).
        """
        try:
            with self.db_manager.transaction() as conn:
                created = self._insert_catalog(conn, owner_id)
        except Exception as e:
            logger.error(f"Seeding default categories for user {owner_id} failed: {e}")
            raise

        logger.info(f"Seeded {created} default categories for user {owner_id}")
        return created

    def seed_for_all_users(self) -> Dict[int, int]:
        """Seed every user that has no default categories yet.

        Users with any default category, even a partial set, are left alone,
        so running this repeatedly never duplicates a taxonomy.

        Returns:
            Mapping of seeded user ID to the number of rows created.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("SELECT id FROM users ORDER BY id")
            user_ids = [row[0] for row in cursor.fetchall()]

        seeded = {}
        for owner_id in user_ids:
            try:
                # The count is re-checked inside the seeding transaction
                with self.db_manager.transaction() as conn:
                    if self.store.count_defaults(conn, owner_id) > 0:
                        logger.debug(f"User {owner_id} already has default categories")
                        continue
                    seeded[owner_id] = self._insert_catalog(conn, owner_id)
            except Exception as e:
                logger.error(
                    f"Seeding default categories for user {owner_id} failed: {e}"
                )
                raise
            logger.info(
                f"Seeded {seeded[owner_id]} default categories for user {owner_id}"
            )

        logger.info(
            f"Default category seeding complete: {len(seeded)} of "
            f"{len(user_ids)} users seeded"
        )
        return seeded

    def has_defaults(self, owner_id: int) -> bool:
        """Whether the user already has any default category."""
        with self.db_manager.connect() as conn:
            return self.store.count_defaults(conn, owner_id) > 0

    def _insert_catalog(self, conn: sqlite3.Connection, owner_id: int) -> int:
        created = 0
        for entry in self.catalog:
            # The parent ID must be known before its subcategories go in
            parent = self.store.insert(
                conn, owner_id, entry.name, entry.icon, entry.color, is_default=True
            )
            created += 1

            for item in entry.subcategories:
                self.store.insert(
                    conn,
                    owner_id,
                    item.name,
                    item.icon,
                    item.color,
                    parent_category_id=parent.id,
                    is_default=True,
                )
                created += 1
        return created
