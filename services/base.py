"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject mock services for testing.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is ignored.
        catalog: Optional default category catalog for testing. If None, the
            catalog is loaded from config.catalog_path or the bundled file.
    """

    def __init__(self, config: Config, db_manager=None, catalog=None):
        """Initialize services with configuration.

        Args:
            config: Config object containing application configuration.
            db_manager: Optional database manager for dependency injection (testing).
                       If None, creates DatabaseManager from config.
            catalog: Optional list of CatalogEntry objects to seed from.
        """
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.users import UserService
        from services.categories import CategoryService
        from services.seeder import DefaultCategorySeeder, load_catalog
        from services.aggregation import SpendAggregator

        if catalog is None:
            catalog = load_catalog(config.catalog_path)

        self.users = UserService(self.db_manager)
        self.categories = CategoryService(self.db_manager)
        self.seeder = DefaultCategorySeeder(self.db_manager, catalog=catalog)
        self.spending = SpendAggregator(self.categories)

    def register_user(self, name: str, email: str):
        """Create a user and, when enabled, seed their default categories.

        The user row and the seed are separate units of work; a failed seed
        leaves the user without defaults, to be picked up by seed_for_all_users.

        Args:
            name: Display name.
            email: Email address (must be unique).

        Returns:
            The created User object.
        """
        user = self.users.create(name, email)
        if self.config.seed_on_signup:
            self.seeder.seed_for_user(user.id)
        return user
