"""Category models for the household spending taxonomy."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Category:
    """Represents a node in a user's two-level spending taxonomy.

    Attributes:
        id: Unique identifier (auto-generated, never reused).
        owner_id: ID of the owning user.
        name: Display label.
        icon: Icon name used by the UI (e.g., "Car").
        color: Display color (e.g., "#45B7D1").
        is_active: Whether the category is offered for new entries.
        parent_category_id: Parent category ID, or None for a top-level category.
        is_default: True for categories seeded from the system catalog.
    """

    id: int
    owner_id: int
    name: str
    icon: str
    color: str
    is_active: bool = True
    parent_category_id: Optional[int] = None
    is_default: bool = False

    @property
    def is_top_level(self) -> bool:
        """Whether this category sits at the top of its family."""
        return self.parent_category_id is None

    def to_dict(self) -> dict:
        """Convert category to dictionary using the persisted column names."""
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "icon": self.icon,
            "color": self.color,
            "is_active": self.is_active,
            "parent_category_id": self.parent_category_id,
            "is_default": self.is_default,
        }


@dataclass
class CategoryTree:
    """A top-level category together with its subcategories.

    Derived on every read and never stored.
    """

    category: Category
    subcategories: List[Category] = field(default_factory=list)

    def ids(self) -> List[int]:
        """Parent ID followed by the subcategory IDs."""
        return [self.category.id] + [sub.id for sub in self.subcategories]

    def to_dict(self) -> dict:
        data = self.category.to_dict()
        data["subcategories"] = [sub.to_dict() for sub in self.subcategories]
        return data
