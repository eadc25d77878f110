"""
Client store.
Every query is scoped by the owning user and ignores soft-deleted rows.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.client import Client


class ClientRepository:
    """Data access for clients."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, client: Client) -> Client:
        self.db.add(client)
        await self.db.flush()
        await self.db.refresh(client)
        return client

    async def get_by_id(self, client_id: int, user_id: int) -> Client | None:
        """
        Get an active client by ID, ensuring owner access.

        Args:
            client_id: Client ID
            user_id: Owner's user ID

        Returns:
            Client if found and owned by user, None otherwise
        """
        result = await self.db.execute(
            select(Client).where(
                Client.id == client_id,
                Client.user_id == user_id,
                Client.deleted_at.is_(None),
            )
        )
        return result.scalar_one_or_none()

    async def list_by_owner(
        self,
        user_id: int,
        skip: int = 0,
        limit: int = 20,
        search: str | None = None,
    ) -> tuple[list[Client], int]:
        """
        List active clients with pagination and search.

        Returns:
            Tuple of (clients list, total count)
        """
        conditions = [Client.user_id == user_id, Client.deleted_at.is_(None)]

        if search:
            search_filter = f"%{search}%"
            conditions.append(
                (Client.name.ilike(search_filter)) |
                (Client.email.ilike(search_filter))
            )

        total_result = await self.db.execute(
            select(func.count(Client.id)).where(*conditions)
        )
        total = total_result.scalar() or 0

        result = await self.db.execute(
            select(Client)
            .where(*conditions)
            .order_by(Client.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def update(self, client: Client, fields: dict[str, Any]) -> Client:
        for name, value in fields.items():
            setattr(client, name, value)
        await self.db.flush()
        await self.db.refresh(client)
        return client

    async def soft_delete(self, client: Client, deleted_at: datetime) -> None:
        client.deleted_at = deleted_at
        await self.db.flush()

    async def soft_delete_by_owner(self, user_id: int, deleted_at: datetime) -> int:
        """Soft-delete every active client of a user. Returns affected rows."""
        result = await self.db.execute(
            update(Client)
            .where(Client.user_id == user_id, Client.deleted_at.is_(None))
            .values(deleted_at=deleted_at)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def restore_by_owner(self, user_id: int) -> int:
        """Clear the soft-delete marker on every client of a user. Returns affected rows."""
        result = await self.db.execute(
            update(Client)
            .where(Client.user_id == user_id, Client.deleted_at.is_not(None))
            .values(deleted_at=None)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
