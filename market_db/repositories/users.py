# market_db/repositories/users.py
"""
User data operations
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from ..connection import Pool
from ..constants import GENERIC_CONFLICT_MESSAGE
from ..decorators import repository_operation
from ..error_classifier import classify
from ..exceptions import ConflictError
from ..models import NewUser, User
from ..schema import users
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """Users table access"""

    resource_name = "User"

    def __init__(self, pool: Pool):
        super().__init__(pool, users, User)

    def _conflict_for(self, error: IntegrityError, user: NewUser):
        classified = classify(error, context="users")
        if isinstance(classified, ConflictError) and classified.message == GENERIC_CONFLICT_MESSAGE:
            return ConflictError(
                f"User with username '{user.username}' or email '{user.email}' already exists",
                error,
                constraint=classified.constraint,
            )
        return classified

    @repository_operation()
    def create_user(self, new_user: NewUser) -> User:
        """
        Insert a user.

        Raises:
            ConflictError: username or email already taken; the existing row
                is left untouched
        """
        try:
            user = self._create(new_user.model_dump())
        except IntegrityError as e:
            raise self._conflict_for(e, new_user) from e
        logger.info(f"Created user id={user.id}")
        return user

    @repository_operation()
    def get_user_by_id(self, user_id: int) -> User:
        return self._get(user_id)

    @repository_operation()
    def get_user_by_email(self, email: str) -> User:
        return self._get_one_where(users.c.email == email)

    @repository_operation()
    def get_all_users(self, limit: Optional[int] = None, offset: int = 0) -> List[User]:
        return self._get_all(limit=limit, offset=offset)

    @repository_operation()
    def update_user(self, user_id: int, updated_user: NewUser) -> User:
        """Replace a user's fields; ConflictError when it collides with another user"""
        try:
            return self._update(user_id, updated_user.model_dump(exclude_unset=True))
        except IntegrityError as e:
            raise self._conflict_for(e, updated_user) from e

    @repository_operation()
    def delete_user(self, user_id: int) -> None:
        self._delete(user_id)
        logger.info(f"Deleted user id={user_id}")
