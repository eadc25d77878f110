"""
API Dependencies.
Common dependencies for authentication, database sessions and services.
"""

import logging
from typing import Annotated
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.database import get_db
from app.core.exceptions import InvalidTokenError
from app.core.security import ACCESS_TOKEN, PasswordHasher, TokenService
from app.models.user import User
from app.repositories.user import UserRepository
from app.services.pdf import PDFService


# Logger
logger = logging.getLogger(__name__)

# Bearer token scheme
security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_pdf_service(settings: Settings = Depends(get_settings)) -> PDFService:
    return PDFService(currency=settings.CURRENCY, footer=settings.PDF_FOOTER)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    tokens: TokenService = Depends(get_token_service),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the active user from the JWT bearer token.

    Args:
        credentials: Bearer JWT
        tokens: Token parser
        db: Database session

    Returns:
        The authenticated, active user

    Raises:
        InvalidTokenError: If the token is missing, invalid, not an access
            token, or its user is unknown or deactivated
    """
    if not credentials:
        logger.warning("Access attempt without token")
        raise InvalidTokenError("Not authenticated")

    token_data = tokens.parse(credentials.credentials)

    if token_data.token_type != ACCESS_TOKEN:
        logger.warning("Invalid token type")
        raise InvalidTokenError("Invalid token type")

    user = await UserRepository(db).get_by_id(token_data.user_id)

    if user is None:
        logger.warning(f"User {token_data.user_id} not found or deactivated")
        raise InvalidTokenError()

    logger.debug(f"Authenticated user: {user.email}")
    return user


# Type aliases for cleaner route signatures
CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Tokens = Annotated[TokenService, Depends(get_token_service)]
Hasher = Annotated[PasswordHasher, Depends(get_password_hasher)]
PDFRenderer = Annotated[PDFService, Depends(get_pdf_service)]
