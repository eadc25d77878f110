"""
User profile service.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AlreadyExistsError, InvalidCredentialsError
from app.core.security import PasswordHasher
from app.models.user import User
from app.repositories.user import UserRepository
from app.schemas.user import BankingUpdate, PasswordChange, ProfileUpdate


logger = logging.getLogger(__name__)


class UserService:
    """Profile, banking and password management for the current user."""

    def __init__(self, db: AsyncSession, hasher: PasswordHasher):
        self.db = db
        self.hasher = hasher
        self.users = UserRepository(db)

    async def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Update name, email, address or phone.

        Raises:
            AlreadyExistsError: If the new email belongs to another account
        """
        fields = data.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in fields and fields["email"] != user.email:
            if await self.users.email_taken(fields["email"], exclude_user_id=user.id):
                raise AlreadyExistsError("Email already in use")

        return await self.users.update_fields(user, fields)

    async def update_banking(self, user: User, data: BankingUpdate) -> User:
        return await self.users.update_fields(user, data.model_dump(exclude_unset=True))

    async def change_password(self, user: User, data: PasswordChange) -> None:
        """
        Replace the password after checking the current one.

        Raises:
            InvalidCredentialsError: If the current password does not match
        """
        if not self.hasher.compare(user.hashed_password, data.current_password):
            logger.warning(f"Password change rejected for user {user.id}")
            raise InvalidCredentialsError("Current password is incorrect")

        await self.users.update_fields(
            user, {"hashed_password": self.hasher.hash(data.new_password)}
        )
        logger.info(f"Password changed for user {user.id}")
