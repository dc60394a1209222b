"""
Exceptions raised by the category services.

The CategoryError subclasses are business-rule failures the caller can
correct. Anything else (sqlite3 errors, CatalogError) is internal.
"""


class CategoryError(Exception):
    """Base exception for category business-rule failures."""
    pass


class ValidationError(CategoryError, ValueError):
    """Raised when a required field is missing or has the wrong shape."""
    pass


class CategoryNotFoundError(CategoryError, LookupError):
    """Raised when a category does not exist for the calling owner.

    Categories of other owners are reported the same way as missing ones.
    """

    def __init__(self, category_id: int):
        super().__init__(f"Category with ID {category_id} not found")
        self.category_id = category_id


class ParentNotFoundError(CategoryError):
    """Raised when the requested parent category does not exist for the owner."""

    def __init__(self, parent_id: int):
        super().__init__(f"Parent category with ID {parent_id} not found")
        self.parent_id = parent_id


class MaxDepthExceededError(CategoryError):
    """Raised when a change would nest a category below a subcategory."""
    pass


class ProtectedCategoryError(CategoryError, PermissionError):
    """Raised on content changes, reparenting or deletion of a default category."""
    pass


class CatalogError(Exception):
    """Raised when the default category catalog cannot be loaded."""
    pass
