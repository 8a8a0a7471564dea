"""
Authentication helpers for Thriftly
- Password hashing (passlib / bcrypt)
- JWT issuing and validation (python-jose)
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import HTTPException, status
from fastapi.security import HTTPBearer
from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import BaseModel

from .config import settings


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)


class PasswordHasher:
    """
    Password hashing capability consumed by UserService

    Wraps a passlib CryptContext; bcrypt by default.
    """

    def __init__(self, schemes: Optional[List[str]] = None, **context_kwargs):
        self.context = CryptContext(
            schemes=schemes or settings.get_password_schemes(),
            deprecated="auto",
            **context_kwargs,
        )

    def hash(self, plaintext: str) -> str:
        return self.context.hash(plaintext)

    def verify(self, plaintext: str, hashed: str) -> bool:
        try:
            return self.context.verify(plaintext, hashed)
        except ValueError:
            # Unrecognized or malformed hash
            return False


class TokenPayload(BaseModel):
    """Claims carried by an access token"""
    sub: str
    exp: int


class AuthConfig:
    """Authentication configuration"""

    @staticmethod
    def get_auth_secret() -> str:
        """Get the AUTH_SECRET from settings"""
        secret = settings.AUTH_SECRET
        if not secret:
            raise ValueError("AUTH_SECRET is not set")
        return secret

    @staticmethod
    def get_jwt_algorithm() -> str:
        return settings.JWT_ALGORITHM

    @staticmethod
    def get_expiry() -> timedelta:
        return timedelta(hours=settings.JWT_EXPIRY_HOURS)


def create_access_token(user_id: int, expires_in: Optional[timedelta] = None) -> str:
    """
    Issue a signed token for `user_id`

    Payload:
    {
        "sub": "42",
        "exp": 1234567890
    }
    """
    expires_at = datetime.now(timezone.utc) + (expires_in or AuthConfig.get_expiry())
    payload = {"sub": str(user_id), "exp": expires_at}
    return jwt.encode(payload, AuthConfig.get_auth_secret(), algorithm=AuthConfig.get_jwt_algorithm())


def decode_access_token(token: str) -> TokenPayload:
    """
    Decode and validate an access token

    Raises:
        HTTPException 401 if the token is expired, tampered with or malformed
    """
    try:
        decoded = jwt.decode(
            token,
            AuthConfig.get_auth_secret(),
            algorithms=[AuthConfig.get_jwt_algorithm()],
        )
        return TokenPayload(**decoded)
    except JWTError as e:
        error_msg = str(e).lower()
        if "expired" in error_msg:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"}
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"}
        )
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"}
        )
