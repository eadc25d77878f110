"""
Authentication endpoints.
Sign-up, sign-in, refresh token.
"""

from fastapi import APIRouter, status

from app.api.deps import DbSession, Hasher, Tokens
from app.schemas.auth import (
    SignInRequest,
    SignUpRequest,
    TokenPair,
    RefreshTokenRequest,
)
from app.services.auth import AuthService


router = APIRouter()


@router.post(
    "/sign-up",
    response_model=TokenPair,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up",
    description="Create an account, or reactivate a deactivated one with the same email",
)
async def sign_up(
    data: SignUpRequest,
    db: DbSession,
    hasher: Hasher,
    tokens: Tokens,
) -> TokenPair:
    service = AuthService(db, hasher, tokens)
    _, pair = await service.sign_up(data)
    return TokenPair.model_validate(pair)


@router.post(
    "/sign-in",
    response_model=TokenPair,
    summary="Sign in",
    description="Sign in with email and password",
)
async def sign_in(
    data: SignInRequest,
    db: DbSession,
    hasher: Hasher,
    tokens: Tokens,
) -> TokenPair:
    service = AuthService(db, hasher, tokens)
    _, pair = await service.sign_in(data)
    return TokenPair.model_validate(pair)


@router.post(
    "/refresh",
    response_model=TokenPair,
    summary="Refresh tokens",
    description="Exchange a refresh token for a new token pair",
)
async def refresh_token(
    data: RefreshTokenRequest,
    db: DbSession,
    hasher: Hasher,
    tokens: Tokens,
) -> TokenPair:
    service = AuthService(db, hasher, tokens)
    pair = await service.refresh(data.refresh_token)
    return TokenPair.model_validate(pair)
