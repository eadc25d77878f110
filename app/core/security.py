"""
Security utilities for authentication.
JWT token handling and password hashing.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import bcrypt
from jose import JWTError, jwt
from pydantic import BaseModel

from app.core.config import Settings
from app.core.exceptions import InvalidTokenError


ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class TokenData(BaseModel):
    """Token payload data."""
    user_id: int
    token_type: str = ACCESS_TOKEN
    expires_at: Optional[datetime] = None


class TokenPair(BaseModel):
    """Access and refresh token pair."""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class PasswordHasher:
    """bcrypt based password hashing."""

    def hash(self, password: str) -> str:
        """Generate password hash."""
        return bcrypt.hashpw(
            password.encode('utf-8'),
            bcrypt.gensalt()
        ).decode('utf-8')

    def compare(self, hashed_password: str, plain_password: str) -> bool:
        """Verify a password against its hash."""
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except ValueError:
            # Stored value is not a bcrypt hash
            return False


class TokenService:
    """Issues and parses signed JWTs for a user id."""

    def __init__(self, settings: Settings):
        self.secret_key = settings.SECRET_KEY
        self.algorithm = settings.ALGORITHM
        self.access_ttl = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_ttl = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    def generate(
        self,
        user_id: int,
        ttl: timedelta,
        token_type: str = ACCESS_TOKEN,
    ) -> str:
        """
        Create a signed token.

        Args:
            user_id: Subject of the token
            ttl: Lifetime of the token
            token_type: "access" or "refresh"

        Returns:
            Encoded JWT token
        """
        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": str(user_id),
            "type": token_type,
            "iat": now,
            "exp": now + ttl,
        }

        return jwt.encode(
            to_encode,
            self.secret_key,
            algorithm=self.algorithm
        )

    def parse(self, token: str) -> TokenData:
        """
        Decode and validate a token.

        Raises:
            InvalidTokenError: If the signature, expiry or payload is invalid
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm]
            )
        except JWTError as e:
            raise InvalidTokenError() from e

        subject = payload.get("sub")
        if subject is None or not str(subject).isdigit():
            raise InvalidTokenError("Token has no user identifier")

        exp = payload.get("exp")
        return TokenData(
            user_id=int(subject),
            token_type=payload.get("type", ACCESS_TOKEN),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
        )

    def issue_pair(self, user_id: int) -> TokenPair:
        """
        Create access and refresh token pair.

        Args:
            user_id: User ID to encode

        Returns:
            TokenPair with access and refresh tokens
        """
        return TokenPair(
            access_token=self.generate(user_id, self.access_ttl, ACCESS_TOKEN),
            refresh_token=self.generate(user_id, self.refresh_ttl, REFRESH_TOKEN),
        )
