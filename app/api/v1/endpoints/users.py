"""
User management endpoints.
Profile, banking details, password change and account deactivation.
"""

from fastapi import APIRouter

from app.api.deps import DbSession, CurrentUser, Hasher
from app.schemas.user import (
    BankingUpdate,
    PasswordChange,
    ProfileUpdate,
    UserResponse,
)
from app.schemas.base import MessageResponse
from app.services.account import AccountService
from app.services.user import UserService


router = APIRouter()


@router.get(
    "/me",
    response_model=UserResponse,
    summary="My profile",
    description="Get the authenticated user's profile",
)
async def get_my_profile(
    current_user: CurrentUser,
) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put(
    "/me/profile",
    response_model=UserResponse,
    summary="Update my profile",
    description="Update name, email, address or phone",
)
async def update_my_profile(
    data: ProfileUpdate,
    current_user: CurrentUser,
    db: DbSession,
    hasher: Hasher,
) -> UserResponse:
    service = UserService(db, hasher)
    user = await service.update_profile(current_user, data)
    return UserResponse.model_validate(user)


@router.put(
    "/me/banking",
    response_model=UserResponse,
    summary="Update my banking details",
    description="Update the bank account printed on invoices",
)
async def update_my_banking(
    data: BankingUpdate,
    current_user: CurrentUser,
    db: DbSession,
    hasher: Hasher,
) -> UserResponse:
    service = UserService(db, hasher)
    user = await service.update_banking(current_user, data)
    return UserResponse.model_validate(user)


@router.post(
    "/me/change-password",
    response_model=MessageResponse,
    summary="Change password",
    description="Change my password",
)
async def change_password(
    data: PasswordChange,
    current_user: CurrentUser,
    db: DbSession,
    hasher: Hasher,
) -> MessageResponse:
    service = UserService(db, hasher)
    await service.change_password(current_user, data)
    return MessageResponse(message="Password changed")


@router.post(
    "/me/deactivate",
    response_model=MessageResponse,
    summary="Deactivate my account",
    description=(
        "Soft-delete the account with all its clients and invoices. "
        "Signing up again with the same email restores them."
    ),
)
async def deactivate_account(
    current_user: CurrentUser,
    db: DbSession,
) -> MessageResponse:
    service = AccountService(db)
    await service.deactivate(current_user.id)
    return MessageResponse(message="Account deactivated")
