"""
Security utilities: password hashing, JWT session tokens and shared-secret
checks for machine-to-machine endpoints (cron, automated backups).
"""

import hmac
import secrets
import string
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

import bcrypt
import jwt

from staysync.config.settings import Settings
from staysync.core.exceptions import AuthenticationError, ErrorCode
from staysync.core.logging import get_logger

logger = get_logger(__name__)


class TokenType(str, Enum):
    ACCESS = "access"


class PasswordManager:
    """Password hashing and verification"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Returns:
            True if password matches, False otherwise
        """
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
        except ValueError as e:
            logger.warning(f"Password verification failed: {e}")
            return False

    @staticmethod
    def generate_temporary_password(length: int = 8) -> str:
        """Generate a random password for invited users."""
        alphabet = string.ascii_letters + string.digits
        return "".join(secrets.choice(alphabet) for _ in range(length))


class TokenManager:
    """JWT token management"""

    def __init__(self, settings: Settings):
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def create_token(self, data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        Create a signed access token.

        Args:
            data: Claims to encode (``sub``, ``org``, ``role``, ``email``)
            expires_delta: Custom lifetime, defaults to the configured expiry

        Returns:
            Encoded JWT token
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.expire_minutes))
        to_encode = data.copy()
        to_encode.update({
            "exp": expire,
            "iat": now,
            "type": TokenType.ACCESS.value,
            "jti": secrets.token_urlsafe(16),
        })
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Raises:
            AuthenticationError: If the token is expired or invalid
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired", ErrorCode.TOKEN_EXPIRED)
        except jwt.InvalidTokenError as e:
            logger.warning(f"Token verification failed: {e}")
            raise AuthenticationError("Invalid token", ErrorCode.TOKEN_INVALID)

        if payload.get("type") != TokenType.ACCESS.value or not payload.get("sub"):
            raise AuthenticationError("Invalid token", ErrorCode.TOKEN_INVALID)
        return payload


def verify_shared_secret(provided: Optional[str], expected: Optional[str]) -> bool:
    """Constant-time comparison of a bearer secret; an unset secret never matches."""
    if not expected or not provided:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


__all__ = [
    "PasswordManager",
    "TokenManager",
    "TokenType",
    "verify_shared_secret",
    "extract_bearer",
]
