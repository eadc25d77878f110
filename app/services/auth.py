"""
Authentication service.
Handles sign-up (including reactivation), sign-in and token refresh.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import unit_of_work
from app.core.exceptions import (
    AlreadyExistsError,
    InvalidCredentialsError,
    InvalidTokenError,
)
from app.core.security import (
    REFRESH_TOKEN,
    PasswordHasher,
    TokenPair,
    TokenService,
)
from app.models.user import User
from app.repositories.user import UserRepository
from app.schemas.auth import SignInRequest, SignUpRequest
from app.services.account import AccountService


logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(
        self,
        db: AsyncSession,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self.db = db
        self.hasher = hasher
        self.tokens = tokens
        self.users = UserRepository(db)

    async def sign_up(self, data: SignUpRequest) -> tuple[User, TokenPair]:
        """
        Register a new user or reactivate a deactivated one.

        Args:
            data: Sign-up data

        Returns:
            Tuple of (user, token_pair)

        Raises:
            AlreadyExistsError: If an active user already has this email
        """
        existing = await self.users.get_by_email(data.email, include_deleted=True)
        if existing is not None and existing.is_active:
            logger.warning(f"Sign-up attempt with email already in use: {data.email}")
            raise AlreadyExistsError("Email already in use")

        profile = data.model_dump(exclude={"password"})
        profile["hashed_password"] = self.hasher.hash(data.password)

        if existing is not None:
            user = await AccountService(self.db).reactivate(existing, profile)
        else:
            async with unit_of_work(self.db):
                user = await self.users.create(User(**profile))
            logger.info(f"Registered user {user.id}")

        return user, self.tokens.issue_pair(user.id)

    async def sign_in(self, data: SignInRequest) -> tuple[User, TokenPair]:
        """
        Authenticate user and generate tokens.

        Raises:
            InvalidCredentialsError: If no active user matches the credentials
        """
        user = await self.users.get_by_email(data.email)

        if not user or not self.hasher.compare(user.hashed_password, data.password):
            logger.warning(f"Failed sign-in for {data.email}")
            raise InvalidCredentialsError("Invalid email or password")

        return user, self.tokens.issue_pair(user.id)

    async def refresh(self, refresh_token: str) -> TokenPair:
        """
        Generate new token pair from refresh token.

        Raises:
            InvalidTokenError: If the token is invalid, not a refresh token,
                or its user is no longer active
        """
        token_data = self.tokens.parse(refresh_token)

        if token_data.token_type != REFRESH_TOKEN:
            raise InvalidTokenError("Not a refresh token")

        user = await self.users.get_by_id(token_data.user_id)
        if not user:
            logger.warning(f"Refresh token for unknown or inactive user {token_data.user_id}")
            raise InvalidTokenError("User not found or deactivated")

        return self.tokens.issue_pair(user.id)
