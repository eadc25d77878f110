"""
Account lifecycle service.
Deactivation cascades a soft delete over the user's data; signing up again
with the same email reactivates the account and brings that data back.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import unit_of_work
from app.core.exceptions import NotFoundError
from app.models.base import utcnow
from app.models.user import User
from app.repositories.client import ClientRepository
from app.repositories.invoice import InvoiceRepository
from app.repositories.user import UserRepository


logger = logging.getLogger(__name__)


class AccountService:
    """Service for account deactivation and reactivation."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserRepository(db)
        self.clients = ClientRepository(db)
        self.invoices = InvoiceRepository(db)

    async def deactivate(self, user_id: int) -> User:
        """
        Soft-delete the user's clients, then invoices, then the user.

        All three steps share one timestamp and one transaction, so either
        everything is marked deleted or nothing is. Deactivating an account
        that is already deactivated changes nothing.

        Args:
            user_id: Account to deactivate

        Returns:
            The deactivated user

        Raises:
            NotFoundError: If no user has this id
        """
        user = await self.users.get_by_id(user_id, include_deleted=True)
        if user is None:
            raise NotFoundError("User not found")

        if user.deleted_at is not None:
            logger.info(f"User {user_id} is already deactivated")
            return user

        deleted_at = utcnow()
        async with unit_of_work(self.db):
            clients = await self.clients.soft_delete_by_owner(user.id, deleted_at)
            invoices = await self.invoices.soft_delete_by_owner(user.id, deleted_at)
            await self.users.soft_delete(user, deleted_at)

        logger.info(
            f"Deactivated user {user_id} ({clients} clients, {invoices} invoices)"
        )
        return user

    async def reactivate(self, user: User, profile: dict[str, Any]) -> User:
        """
        Restore a deactivated user with a fresh profile.

        Every client and invoice the user owns is restored, including the ones
        deleted individually before the deactivation.

        Args:
            user: Soft-deleted user found by email
            profile: Column values overwriting the stored profile, including
                the new password hash

        Returns:
            The active user
        """
        async with unit_of_work(self.db):
            user = await self.users.restore(user, profile)
            clients = await self.clients.restore_by_owner(user.id)
            invoices = await self.invoices.restore_by_owner(user.id)

        logger.info(
            f"Reactivated user {user.id} ({clients} clients, {invoices} invoices restored)"
        )
        return user
