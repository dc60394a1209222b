"""User service for database operations."""

from typing import List, Optional
from datetime import datetime
from models.user import User


class UserService:
    """Service for managing household users.

    Identity verification lives outside this project; users exist here so
    categories have an owner and maintenance seeding can find every account.
    """

    def __init__(self, db_manager):
        """Initialize the user service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(self, name: str, email: str) -> User:
        """Create a new user.

        Args:
            name: Display name.
            email: Email address (must be unique).

        Returns:
            The created User object with id and created_at populated.

        Raises:
            sqlite3.IntegrityError: If the email is already registered.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO users (name, email) VALUES (?, ?)",
                (name, email),
            )
            conn.commit()
            user_id = cursor.lastrowid

            cursor = conn.execute(
                "SELECT id, name, email, created_at FROM users WHERE id = ?",
                (user_id,),
            )
            return self._row_to_user(cursor.fetchone())

    def find(self, user_id: int) -> Optional[User]:
        """Get a single user by ID.

        Args:
            user_id: The user ID to find.

        Returns:
            User object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, email, created_at FROM users WHERE id = ?",
                (user_id,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_user(row)
            return None

    def find_by_email(self, email: str) -> Optional[User]:
        """Get a single user by email.

        Args:
            email: The email address to find.

        Returns:
            User object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, email, created_at FROM users WHERE email = ?",
                (email,),
            )
            row = cursor.fetchone()

            if row:
                return self._row_to_user(row)
            return None

    def find_all(self) -> List[User]:
        """Get all users from the database.

        Returns:
            List of User objects, ordered by id.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "SELECT id, name, email, created_at FROM users ORDER BY id"
            )
            return [self._row_to_user(row) for row in cursor.fetchall()]

    def _row_to_user(self, row: tuple) -> User:
        return User(
            id=row[0],
            name=row[1],
            email=row[2],
            created_at=datetime.fromisoformat(row[3]),
        )
