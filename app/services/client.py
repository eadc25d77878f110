"""
Client service.
Handles client CRUD operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.base import utcnow
from app.models.client import Client
from app.repositories.client import ClientRepository
from app.schemas.client import ClientCreate, ClientUpdate


class ClientService:
    """Service for client operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.clients = ClientRepository(db)

    async def create(self, user_id: int, data: ClientCreate) -> Client:
        """
        Create a new client.

        Args:
            user_id: Owner's user ID
            data: Client data

        Returns:
            Created client
        """
        return await self.clients.create(Client(user_id=user_id, **data.model_dump()))

    async def get_or_404(self, client_id: int, user_id: int) -> Client:
        """
        Get client by ID or raise 404.

        Raises:
            NotFoundError: If the client does not exist, is deleted or
                belongs to another user
        """
        client = await self.clients.get_by_id(client_id, user_id)
        if not client:
            raise NotFoundError(f"Client with ID {client_id} not found")
        return client

    async def list(
        self,
        user_id: int,
        skip: int = 0,
        limit: int = 20,
        search: str | None = None,
    ) -> tuple[list[Client], int]:
        return await self.clients.list_by_owner(user_id, skip, limit, search)

    async def update(self, client_id: int, user_id: int, data: ClientUpdate) -> Client:
        client = await self.get_or_404(client_id, user_id)
        return await self.clients.update(client, data.model_dump(exclude_unset=True))

    async def delete(self, client_id: int, user_id: int) -> None:
        """Soft-delete a client. Invoices linked to it keep their reference."""
        client = await self.get_or_404(client_id, user_id)
        await self.clients.soft_delete(client, utcnow())
