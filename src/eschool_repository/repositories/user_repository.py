"""
User repository for handling user-specific database operations.

Extends BaseRepository with lookups by email and by credentials, and a public
projection (`UserInfo`) for showing a user to other users.
"""

import logging

from eschool_repository.domain.entities import ID, User, UserInfo
from eschool_repository.models.user import UserRecord
from .base_repository import BaseRepository, SessionSource
from .statements import build_select

logger = logging.getLogger(__name__)

_user_table = UserRecord.__table__

SELECT_USER_BY_EMAIL = build_select(_user_table, "email")
SELECT_USER_BY_CREDENTIALS = build_select(_user_table, "email", "password")


class UserRepository(BaseRepository[UserRecord, User]):
    """
    Repository for User entity operations.

    Inherits the uniform CRUD contract; `email` is unique, so creating a second
    user with the same address raises DuplicateError.
    """

    def __init__(self, db: SessionSource):
        super().__init__(UserRecord, db)

    # =================================================================================================================
    # Read Operations (Single Entity)
    # =================================================================================================================

    async def find_by_email(self, email: str) -> User:
        """
        Get a user by their email address (exact match).

        Raises:
            NotFoundError: If no user has this email.
        """
        record = await self._fetch_one(SELECT_USER_BY_EMAIL, {"email": email})
        return record.to_domain()

    async def find_by_credentials(self, email: str, password: str) -> User:
        """
        Get the user whose email and password both match.

        The password is compared exactly as stored; hashing it first is the caller's job.
        A wrong password and an unknown email are indistinguishable to the caller.

        Raises:
            NotFoundError: If no user matches both values.
        """
        record = await self._fetch_one(
            SELECT_USER_BY_CREDENTIALS, {"email": email, "password": password}
        )
        logger.debug("repo.user.credentials_matched", extra={"entity": self.entity_name, "id": record.id})
        return record.to_domain()

    async def find_user_info(self, user_id: ID) -> UserInfo:
        """
        Get the public projection (name and surname) of a user.

        Raises:
            NotFoundError: If no user has this ID.
        """
        user = await self.find_by_id(user_id)
        return UserInfo(name=user.name, surname=user.surname)
