import pytest

from services.errors import (
    CategoryError,
    CategoryNotFoundError,
    MaxDepthExceededError,
    ParentNotFoundError,
    ProtectedCategoryError,
    ValidationError,
)
from tests.helpers import count_rows, create_family


def _find_by_name(services, owner_id, name):
    return next(c for c in services.categories.list_by_owner(owner_id) if c.name == name)


class TestCategoryServiceCreate:
    """Tests for CategoryService.create."""

    def test_create_top_level_category(self, services, user):
        """Test creating a simple category without parent."""
        category = services.categories.create(user.id, "Transport", "Car", "#45B7D1")

        assert category.id > 0
        assert category.owner_id == user.id
        assert category.name == "Transport"
        assert category.icon == "Car"
        assert category.color == "#45B7D1"
        assert category.parent_category_id is None
        assert category.is_active is True
        assert category.is_default is False

    def test_create_subcategory(self, services, user):
        """Test creating a category under a top-level parent."""
        parent = services.categories.create(user.id, "Transport", "Car", "#45B7D1")
        child = services.categories.create(user.id, "Fuel", "Fuel", "#45B7D1", parent.id)

        assert child.parent_category_id == parent.id
        assert services.categories.find(parent.id, user.id).parent_category_id is None

    def test_create_under_subcategory_exceeds_max_depth(self, services, user):
        """Test that a third level is rejected and nothing is written."""
        transport = services.categories.create(user.id, "Transport", "Car", "#45B7D1")
        fuel = services.categories.create(user.id, "Fuel", "Fuel", "#45B7D1", transport.id)

        with pytest.raises(MaxDepthExceededError):
            services.categories.create(user.id, "Diesel", "Fuel", "#45B7D1", fuel.id)

        assert len(services.categories.list_by_owner(user.id)) == 2

    def test_create_with_missing_parent(self, services, user):
        """Test that an unknown parent is reported as ParentNotFound."""
        with pytest.raises(ParentNotFoundError, match="9999"):
            services.categories.create(user.id, "Fuel", "Fuel", "#45B7D1", 9999)

    def test_create_with_parent_of_other_owner(self, services, user, other_user):
        """Test that another user's category cannot be used as parent."""
        foreign = services.categories.create(other_user.id, "Transport", "Car", "#45B7D1")

        with pytest.raises(ParentNotFoundError):
            services.categories.create(user.id, "Fuel", "Fuel", "#45B7D1", foreign.id)

    @pytest.mark.parametrize(
        "name, icon, color",
        [
            ("", "Car", "#45B7D1"),
            ("Transport", "", "#45B7D1"),
            ("Transport", "Car", "   "),
            (None, "Car", "#45B7D1"),
        ],
    )
    def test_create_requires_name_icon_color(self, services, user, name, icon, color):
        """Test that empty required fields raise ValidationError."""
        with pytest.raises(ValidationError):
            services.categories.create(user.id, name, icon, color)

        assert services.categories.list_by_owner(user.id) == []

    def test_business_errors_share_a_base(self, services, user):
        """Test that rule violations can be caught as CategoryError."""
        with pytest.raises(CategoryError):
            services.categories.create(user.id, "Fuel", "Fuel", "#45B7D1", 9999)


class TestCategoryServiceUpdate:
    """Tests for CategoryService.update."""

    def test_update_content_fields(self, services, user):
        """Test updating name, icon and color of a user category."""
        category = services.categories.create(user.id, "Pets", "Dog", "#AA8844")

        updated = services.categories.update(
            category.id, user.id, {"name": "Animals", "icon": "Cat", "color": "#000000"}
        )

        assert updated.name == "Animals"
        assert updated.icon == "Cat"
        assert updated.color == "#000000"
        assert services.categories.find(category.id, user.id) == updated

    def test_update_missing_category(self, services, user):
        """Test updating an unknown category raises NotFound."""
        with pytest.raises(CategoryNotFoundError, match="Category with ID 9999 not found"):
            services.categories.update(9999, user.id, {"name": "X"})

    def test_update_category_of_other_owner_is_not_found(self, services, user, other_user):
        """Test that another user's category looks the same as a missing one."""
        category = services.categories.create(other_user.id, "Pets", "Dog", "#AA8844")

        with pytest.raises(CategoryNotFoundError):
            services.categories.update(category.id, user.id, {"name": "Mine"})

        assert services.categories.find(category.id, other_user.id).name == "Pets"

    def test_update_with_no_recognized_fields_returns_current_row(self, services, user):
        """Test that an empty or unknown-key update is a no-op."""
        category = services.categories.create(user.id, "Pets", "Dog", "#AA8844")

        assert services.categories.update(category.id, user.id, {}) == category
        assert services.categories.update(category.id, user.id, {"bogus": 1}) == category

    def test_update_rejects_empty_name(self, services, user):
        """Test that content fields cannot be blanked."""
        category = services.categories.create(user.id, "Pets", "Dog", "#AA8844")

        with pytest.raises(ValidationError):
            services.categories.update(category.id, user.id, {"name": ""})

    def test_update_rejects_non_bool_is_active(self, services, user):
        """Test that is_active must be a real boolean."""
        category = services.categories.create(user.id, "Pets", "Dog", "#AA8844")

        with pytest.raises(ValidationError):
            services.categories.update(category.id, user.id, {"is_active": "no"})

    def test_toggle_is_active(self, services, user):
        """Test deactivating and reactivating a category."""
        category = services.categories.create(user.id, "Pets", "Dog", "#AA8844")

        inactive = services.categories.update(category.id, user.id, {"is_active": False})
        active = services.categories.update(category.id, user.id, {"is_active": True})

        assert inactive.is_active is False
        assert active.is_active is True

    def test_reparent_under_top_level_category(self, services, user):
        """Test moving a category under a new parent."""
        food, _ = create_family(services, user.id, "Food")
        coffee = services.categories.create(user.id, "Coffee", "Coffee", "#FF6B6B")

        moved = services.categories.update(coffee.id, user.id, {"parent_category_id": food.id})

        assert moved.parent_category_id == food.id

    def test_promote_subcategory_to_top_level(self, services, user):
        """Test that setting parent_category_id to None makes it top-level."""
        _, (coffee,) = create_family(services, user.id, "Food", ["Coffee"])

        promoted = services.categories.update(
            coffee.id, user.id, {"parent_category_id": None}
        )

        assert promoted.parent_category_id is None

    def test_reparent_under_subcategory_exceeds_max_depth(self, services, user):
        """Test that moving under a subcategory is rejected."""
        _, (restaurants,) = create_family(services, user.id, "Food", ["Restaurants"])
        pets = services.categories.create(user.id, "Pets", "Dog", "#AA8844")

        with pytest.raises(MaxDepthExceededError):
            services.categories.update(
                pets.id, user.id, {"parent_category_id": restaurants.id}
            )

        assert services.categories.find(pets.id, user.id).parent_category_id is None

    def test_reparent_category_with_children_exceeds_max_depth(self, services, user):
        """Test that a parent with subcategories cannot become a subcategory."""
        food, _ = create_family(services, user.id, "Food")
        pets, _ = create_family(services, user.id, "Pets", ["Vet"])

        with pytest.raises(MaxDepthExceededError):
            services.categories.update(pets.id, user.id, {"parent_category_id": food.id})

    def test_reparent_to_missing_parent(self, services, user):
        """Test that moving under an unknown parent raises ParentNotFound."""
        pets = services.categories.create(user.id, "Pets", "Dog", "#AA8844")

        with pytest.raises(ParentNotFoundError):
            services.categories.update(pets.id, user.id, {"parent_category_id": 9999})

    def test_reparent_to_self_rejected(self, services, user):
        """Test that a category cannot become its own parent."""
        pets = services.categories.create(user.id, "Pets", "Dog", "#AA8844")

        with pytest.raises(ValidationError):
            services.categories.update(pets.id, user.id, {"parent_category_id": pets.id})

    def test_update_default_name_is_protected(self, services, user):
        """Test that seeded categories keep their name."""
        services.seeder.seed_for_user(user.id)
        fuel = _find_by_name(services, user.id, "Fuel")

        with pytest.raises(ProtectedCategoryError):
            services.categories.update(fuel.id, user.id, {"name": "Gasoline"})

        assert services.categories.find(fuel.id, user.id).name == "Fuel"

    def test_protected_error_is_a_permission_error(self, services, user):
        """Test that protection failures surface as permission errors."""
        services.seeder.seed_for_user(user.id)
        transport = _find_by_name(services, user.id, "Transport")

        with pytest.raises(PermissionError):
            services.categories.update(transport.id, user.id, {"color": "#000000"})

    def test_update_default_is_active_changes_only_that_field(self, services, user):
        """Test that default categories can still be deactivated."""
        services.seeder.seed_for_user(user.id)
        fuel = _find_by_name(services, user.id, "Fuel")

        updated = services.categories.update(fuel.id, user.id, {"is_active": False})

        assert updated.is_active is False
        assert updated.name == fuel.name
        assert updated.icon == fuel.icon
        assert updated.color == fuel.color
        assert updated.parent_category_id == fuel.parent_category_id
        assert updated.is_default is True

    def test_update_default_with_unchanged_content_is_allowed(self, services, user):
        """Test that resending a default category's current values is not a change."""
        services.seeder.seed_for_user(user.id)
        fuel = _find_by_name(services, user.id, "Fuel")

        updated = services.categories.update(
            fuel.id, user.id, {"name": fuel.name, "is_active": False}
        )

        assert updated.is_active is False

    def test_reparent_default_is_protected(self, services, user):
        """Test that default categories cannot be moved."""
        services.seeder.seed_for_user(user.id)
        fuel = _find_by_name(services, user.id, "Fuel")
        food = _find_by_name(services, user.id, "Food")

        with pytest.raises(ProtectedCategoryError):
            services.categories.update(fuel.id, user.id, {"parent_category_id": food.id})

        with pytest.raises(ProtectedCategoryError):
            services.categories.update(fuel.id, user.id, {"parent_category_id": None})

    def test_user_category_can_move_under_default_parent(self, services, user):
        """Test that a user category may join a seeded family."""
        services.seeder.seed_for_user(user.id)
        transport = _find_by_name(services, user.id, "Transport")
        tolls = services.categories.create(user.id, "Tolls", "Car", "#45B7D1")

        moved = services.categories.update(
            tolls.id, user.id, {"parent_category_id": transport.id}
        )

        assert moved.parent_category_id == transport.id


class TestCategoryServiceDelete:
    """Tests for CategoryService.delete."""

    def test_delete_leaf_category(self, services, user):
        """Test deleting a childless category."""
        pets = services.categories.create(user.id, "Pets", "Dog", "#AA8844")

        assert services.categories.delete(pets.id, user.id) == [pets.id]
        assert services.categories.find(pets.id, user.id) is None

    def test_delete_subcategory_keeps_parent(self, services, user):
        """Test deleting a subcategory leaves its family otherwise intact."""
        food, (coffee, restaurants) = create_family(
            services, user.id, "Food", ["Coffee", "Restaurants"]
        )

        services.categories.delete(coffee.id, user.id)

        remaining = services.categories.list_by_owner(user.id)
        assert [c.id for c in remaining] == [food.id, restaurants.id]

    def test_delete_parent_cascades_to_subcategories(self, services, user):
        """Test deleting a parent removes it and its two subcategories."""
        food, (coffee, restaurants) = create_family(
            services, user.id, "Food", ["Coffee", "Restaurants"]
        )
        pets = services.categories.create(user.id, "Pets", "Dog", "#AA8844")

        deleted = services.categories.delete(food.id, user.id)

        assert deleted == [food.id, coffee.id, restaurants.id]
        remaining_ids = [c.id for c in services.categories.list_by_owner(user.id)]
        assert remaining_ids == [pets.id]

    def test_delete_missing_category(self, services, user):
        """Test deleting an unknown category raises NotFound."""
        with pytest.raises(CategoryNotFoundError):
            services.categories.delete(9999, user.id)

    def test_delete_category_of_other_owner_is_not_found(self, services, user, other_user):
        """Test that another user's categories cannot be deleted."""
        pets = services.categories.create(other_user.id, "Pets", "Dog", "#AA8844")

        with pytest.raises(CategoryNotFoundError):
            services.categories.delete(pets.id, user.id)

        assert services.categories.find(pets.id, other_user.id) is not None

    @pytest.mark.parametrize("name", ["Transport", "Fuel"])
    def test_delete_default_category_is_protected(self, services, user, test_db, name):
        """Test that default parents and children can never be deleted."""
        services.seeder.seed_for_user(user.id)
        before = services.categories.list_by_owner(user.id)
        category = _find_by_name(services, user.id, name)

        with pytest.raises(ProtectedCategoryError):
            services.categories.delete(category.id, user.id)

        assert services.categories.list_by_owner(user.id) == before
        assert count_rows(test_db, user.id) == len(before)

    def test_delete_user_subcategory_under_default_parent(self, services, user):
        """Test that user categories inside a seeded family can be deleted."""
        services.seeder.seed_for_user(user.id)
        transport = _find_by_name(services, user.id, "Transport")
        tolls = services.categories.create(user.id, "Tolls", "Car", "#45B7D1", transport.id)

        assert services.categories.delete(tolls.id, user.id) == [tolls.id]


class TestCategoryServiceReads:
    """Tests for the tree and subcategory reads."""

    def test_get_category_tree(self, services, user):
        """Test the tree for [A(parent), B(child of A), C(parent)]."""
        a = services.categories.create(user.id, "A", "Tag", "#111111")
        b = services.categories.create(user.id, "B", "Tag", "#111111", a.id)
        c = services.categories.create(user.id, "C", "Tag", "#111111")

        trees = services.categories.get_category_tree(user.id)

        assert [t.category for t in trees] == [a, c]
        assert trees[0].subcategories == [b]
        assert trees[1].subcategories == []

    def test_get_category_tree_empty(self, services, user):
        """Test the tree of a user without categories."""
        assert services.categories.get_category_tree(user.id) == []

    def test_get_category_tree_active_only(self, services, user):
        """Test that inactive categories and families can be hidden."""
        food, (coffee, restaurants) = create_family(
            services, user.id, "Food", ["Coffee", "Restaurants"]
        )
        pets, _ = create_family(services, user.id, "Pets", ["Vet"])
        services.categories.update(coffee.id, user.id, {"is_active": False})
        services.categories.update(pets.id, user.id, {"is_active": False})

        trees = services.categories.get_category_tree(user.id, active_only=True)

        assert [t.category.id for t in trees] == [food.id]
        assert [s.id for s in trees[0].subcategories] == [restaurants.id]

    def test_get_subcategories(self, services, user):
        """Test listing the children of a parent in id order."""
        food, children = create_family(services, user.id, "Food", ["Coffee", "Restaurants"])
        create_family(services, user.id, "Pets", ["Vet"])

        assert services.categories.get_subcategories(user.id, food.id) == children

    def test_get_subcategories_of_missing_parent_is_empty(self, services, user):
        """Test that an unknown parent simply has no subcategories."""
        assert services.categories.get_subcategories(user.id, 9999) == []

    def test_get_family_ids(self, services, user):
        """Test collecting the ids of a spending bucket."""
        food, (coffee, restaurants) = create_family(
            services, user.id, "Food", ["Coffee", "Restaurants"]
        )

        assert services.categories.get_family_ids(user.id, food.id) == [
            food.id,
            coffee.id,
            restaurants.id,
        ]
        assert services.categories.get_family_ids(user.id, coffee.id) == [coffee.id]
        assert services.categories.get_family_ids(user.id, 9999) == []

    def test_reads_are_scoped_to_owner(self, services, user, other_user):
        """Test that one user's categories never show up for another."""
        create_family(services, other_user.id, "Food", ["Coffee"])

        assert services.categories.list_by_owner(user.id) == []
        assert services.categories.get_category_tree(user.id) == []
