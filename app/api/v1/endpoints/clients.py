"""
Client management endpoints.
CRUD operations for clients.
"""

from fastapi import APIRouter, Query, status

from app.api.deps import DbSession, CurrentUser
from app.schemas.client import (
    ClientCreate,
    ClientUpdate,
    ClientResponse,
    ClientListResponse,
)
from app.schemas.base import MessageResponse
from app.services.client import ClientService


router = APIRouter()


@router.post(
    "",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create client",
    description="Add a new client",
)
async def create_client(
    data: ClientCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> ClientResponse:
    service = ClientService(db)
    client = await service.create(current_user.id, data)
    return ClientResponse.model_validate(client)


@router.get(
    "",
    response_model=ClientListResponse,
    summary="List clients",
    description="Paginated list of active clients",
)
async def list_clients(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Page number"),
    per_page: int = Query(20, ge=1, le=100, description="Items per page"),
    search: str | None = Query(None, description="Search by name or email"),
) -> ClientListResponse:
    service = ClientService(db)
    skip = (page - 1) * per_page

    clients, total = await service.list(
        user_id=current_user.id,
        skip=skip,
        limit=per_page,
        search=search,
    )

    return ClientListResponse(
        items=[ClientResponse.model_validate(c) for c in clients],
        total=total,
        page=page,
        per_page=per_page,
        pages=ClientListResponse.page_count(total, per_page),
    )


@router.get(
    "/{client_id}",
    response_model=ClientResponse,
    summary="Client details",
)
async def get_client(
    client_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> ClientResponse:
    service = ClientService(db)
    client = await service.get_or_404(client_id, current_user.id)
    return ClientResponse.model_validate(client)


@router.put(
    "/{client_id}",
    response_model=ClientResponse,
    summary="Update client",
)
async def update_client(
    client_id: int,
    data: ClientUpdate,
    current_user: CurrentUser,
    db: DbSession,
) -> ClientResponse:
    service = ClientService(db)
    client = await service.update(client_id, current_user.id, data)
    return ClientResponse.model_validate(client)


@router.delete(
    "/{client_id}",
    response_model=MessageResponse,
    summary="Delete client",
    description="Soft-delete a client; invoices keep their link to it",
)
async def delete_client(
    client_id: int,
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    service = ClientService(db)
    await service.delete(client_id, current_user.id)
    return MessageResponse(message="Client deleted")
