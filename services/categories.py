"""Category service enforcing the two-level hierarchy rules."""

import sqlite3
from typing import List, Mapping, Optional
from models.category import Category, CategoryTree
from services.category_store import CategoryStore
from services.errors import (
    CategoryNotFoundError,
    MaxDepthExceededError,
    ParentNotFoundError,
    ProtectedCategoryError,
    ValidationError,
)
from services.tree import build_category_tree, family_ids
from logger import get_logger

logger = get_logger()

# Fields locked on default categories
CONTENT_FIELDS = ("name", "icon", "color")


class CategoryService:
    """Service for managing a user's category forest.

    The only writer of category rows on behalf of a user. Every mutation
    re-reads the rows it depends on inside the same write transaction.
    """

    def __init__(self, db_manager, store: Optional[CategoryStore] = None):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
            store: Optional row gateway (a fresh CategoryStore by default).
        """
        self.db_manager = db_manager
        self.store = store or CategoryStore()

    def list_by_owner(self, owner_id: int) -> List[Category]:
        """Get all categories of a user.

        Args:
            owner_id: The owning user ID.

        Returns:
            List of Category objects with parent pointers, ordered by id.
        """
        with self.db_manager.connect() as conn:
            return self.store.list_by_owner(conn, owner_id)

    def find(self, category_id: int, owner_id: int) -> Optional[Category]:
        """Get a single category of a user.

        Returns:
            Category object if found for that owner, None otherwise.
        """
        with self.db_manager.connect() as conn:
            return self.store.get(conn, category_id, owner_id)

    def get_category_tree(
        self, owner_id: int, active_only: bool = False
    ) -> List[CategoryTree]:
        """Get a user's categories as a two-level tree.

        Args:
            owner_id: The owning user ID.
            active_only: Drop inactive categories. An inactive parent hides
                its whole family.

        Returns:
            List of CategoryTree objects in id order of the parents.
        """
        categories = self.list_by_owner(owner_id)
        if active_only:
            categories = [c for c in categories if c.is_active]
        return build_category_tree(categories)

    def get_subcategories(self, owner_id: int, parent_id: int) -> List[Category]:
        """Get the subcategories of a category.

        Returns:
            List of Category objects, empty if the parent has no children or
            does not exist.
        """
        return [
            category
            for category in self.list_by_owner(owner_id)
            if category.parent_category_id == parent_id
        ]

    def get_family_ids(self, owner_id: int, category_id: int) -> List[int]:
        """Get the IDs that make up one spending bucket.

        Returns:
            The category ID followed by its subcategory IDs, or an empty list
            if the category does not exist for that owner.
        """
        return family_ids(self.list_by_owner(owner_id), category_id)

    def create(
        self,
        owner_id: int,
        name: str,
        icon: str,
        color: str,
        parent_category_id: Optional[int] = None,
    ) -> Category:
        """Create a user category.

        Args:
            owner_id: The owning user ID.
            name: Category name.
            icon: Icon name.
            color: Display color.
            parent_category_id: Optional top-level category to nest under.

        Returns:
            The created Category object (active, not default).

        Raises:
            ValidationError: If name, icon or color is empty.
            ParentNotFoundError: If the parent does not exist for the owner.
            MaxDepthExceededError: If the parent is itself a subcategory.
        """
        for field_name, value in (("name", name), ("icon", icon), ("color", color)):
            _require_text(field_name, value)
        if parent_category_id is not None:
            _require_id("parent_category_id", parent_category_id)

        with self.db_manager.transaction() as conn:
            if parent_category_id is not None:
                self._check_parent(conn, owner_id, parent_category_id)

            category = self.store.insert(
                conn,
                owner_id,
                name,
                icon,
                color,
                parent_category_id=parent_category_id,
            )

        logger.info(
            f"Created category {category.id} '{category.name}' for user {owner_id}"
            + (f" under {parent_category_id}" if parent_category_id else "")
        )
        return category

    def update(
        self, category_id: int, owner_id: int, updates: Mapping[str, object]
    ) -> Category:
        """Update a category.

        Recognized keys are name, icon, color, is_active and
        parent_category_id; other keys are ignored. Only values that differ
        from the stored row are written, and an update that changes nothing
        returns the current row.

        Args:
            category_id: The category ID to update.
            owner_id: The owning user ID.
            updates: Field name to new value.

        Returns:
            The updated (or unchanged) Category object.

        Raises:
            CategoryNotFoundError: If the category does not exist for the owner.
            ValidationError: If a provided value is empty or of the wrong type.
            ProtectedCategoryError: If a default category would get new
                content or a new parent.
            ParentNotFoundError: If the new parent does not exist for the owner.
            MaxDepthExceededError: If the move would create a third level.
        """
        for field_name in CONTENT_FIELDS:
            if field_name in updates:
                _require_text(field_name, updates[field_name])
        if "is_active" in updates and not isinstance(updates["is_active"], bool):
            raise ValidationError("is_active must be true or false")
        if updates.get("parent_category_id") is not None:
            _require_id("parent_category_id", updates["parent_category_id"])

        with self.db_manager.transaction() as conn:
            current = self.store.get(conn, category_id, owner_id)
            if current is None:
                raise CategoryNotFoundError(category_id)

            changes = {
                field_name: updates[field_name]
                for field_name in CONTENT_FIELDS + ("is_active", "parent_category_id")
                if field_name in updates
                and updates[field_name] != getattr(current, field_name)
            }

            if current.is_default:
                locked = [name for name in CONTENT_FIELDS if name in changes]
                if locked:
                    self._reject(
                        ProtectedCategoryError(
                            f"Default category '{current.name}' cannot change "
                            f"{', '.join(locked)}"
                        ),
                        owner_id,
                    )
                if "parent_category_id" in changes:
                    self._reject(
                        ProtectedCategoryError(
                            f"Default category '{current.name}' cannot be moved"
                        ),
                        owner_id,
                    )

            new_parent_id = changes.get("parent_category_id")
            if new_parent_id is not None:
                if new_parent_id == current.id:
                    self._reject(
                        ValidationError("A category cannot be its own parent"),
                        owner_id,
                    )
                self._check_parent(conn, owner_id, new_parent_id)
                if self.store.list_children(conn, current.id, owner_id):
                    self._reject(
                        MaxDepthExceededError(
                            f"Category '{current.name}' has subcategories and "
                            "cannot become a subcategory itself"
                        ),
                        owner_id,
                    )

            if not changes:
                return current

            updated = self.store.update_fields(conn, category_id, owner_id, changes)

        logger.info(
            f"Updated category {category_id} for user {owner_id}: "
            f"{', '.join(sorted(changes))}"
        )
        return updated

    def delete(self, category_id: int, owner_id: int) -> List[int]:
        """Delete a category, together with its subcategories.

        A top-level category and all of its subcategories are removed in one
        transaction. Rows in other tables are not touched.

        Args:
            category_id: The category ID to delete.
            owner_id: The owning user ID.

        Returns:
            IDs of the removed categories, the requested one first.

        Raises:
            CategoryNotFoundError: If the category does not exist for the owner.
            ProtectedCategoryError: If the category, or one of its
                subcategories, is a default category.
        """
        with self.db_manager.transaction() as conn:
            category = self.store.get(conn, category_id, owner_id)
            if category is None:
                raise CategoryNotFoundError(category_id)

            if category.is_default:
                self._reject(
                    ProtectedCategoryError(
                        f"Default category '{category.name}' cannot be deleted; "
                        "deactivate it instead"
                    ),
                    owner_id,
                )

            children = []
            if category.is_top_level:
                children = self.store.list_children(conn, category_id, owner_id)
                if any(child.is_default for child in children):
                    self._reject(
                        ProtectedCategoryError(
                            f"Category '{category.name}' holds default "
                            "subcategories and cannot be deleted"
                        ),
                        owner_id,
                    )

            deleted_ids = [category.id] + [child.id for child in children]
            # One statement, so parent and children go together
            self.store.delete_many(conn, deleted_ids, owner_id)

        logger.info(
            f"Deleted category {category_id} for user {owner_id}"
            + (f" with {len(children)} subcategories" if children else "")
        )
        return deleted_ids

    def _check_parent(
        self, conn: sqlite3.Connection, owner_id: int, parent_id: int
    ) -> Category:
        """Load a candidate parent and check it can hold subcategories."""
        parent = self.store.get(conn, parent_id, owner_id)
        if parent is None:
            self._reject(ParentNotFoundError(parent_id), owner_id)
        if not parent.is_top_level:
            self._reject(
                MaxDepthExceededError(
                    f"Category '{parent.name}' is a subcategory and cannot have "
                    "subcategories of its own"
                ),
                owner_id,
            )
        return parent

    def _reject(self, error: Exception, owner_id: int):
        logger.warning(f"Rejected category change for user {owner_id}: {error}")
        raise error


def _require_text(field_name: str, value) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required and cannot be empty")


def _require_id(field_name: str, value) -> None:
    # bool is an int subclass but never a valid row ID
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer ID")
