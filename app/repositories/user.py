"""
User store.
Persistence operations for accounts, including soft deletion and restore.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User


class UserRepository:
    """Data access for users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user: User) -> User:
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def get_by_id(self, user_id: int, include_deleted: bool = False) -> User | None:
        """Get user by ID; deactivated accounts only when asked for."""
        query = select(User).where(User.id == user_id)
        if not include_deleted:
            query = query.where(User.deleted_at.is_(None))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str, include_deleted: bool = False) -> User | None:
        """
        Get user by email.

        With include_deleted the lookup also sees deactivated accounts, which
        is what signup needs to decide between create and reactivate.
        """
        query = select(User).where(User.email == email)
        if not include_deleted:
            query = query.where(User.deleted_at.is_(None))
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def email_taken(self, email: str, exclude_user_id: int | None = None) -> bool:
        """Whether any account row, active or not, already holds this email."""
        query = select(User.id).where(User.email == email)
        if exclude_user_id is not None:
            query = query.where(User.id != exclude_user_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def update_fields(self, user: User, fields: dict[str, Any]) -> User:
        for name, value in fields.items():
            setattr(user, name, value)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def soft_delete(self, user: User, deleted_at: datetime) -> None:
        user.deleted_at = deleted_at
        await self.db.flush()

    async def restore(self, user: User, fields: dict[str, Any]) -> User:
        """Clear the deletion marker and overwrite the profile with `fields`."""
        user.deleted_at = None
        return await self.update_fields(user, fields)
