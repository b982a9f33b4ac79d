"""
Bearer token authentication.

Tokens are JWTs carrying the user id in ``sub`` and the user's role. Issuing
tokens (login, sessions) happens outside this service; this module only
signs tokens for trusted callers and resolves the current user from a
request.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
import secrets

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from pydantic import BaseModel

from .config import get_settings
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

settings = get_settings()

security = HTTPBearer(auto_error=False)


class TokenData(BaseModel):
    """Token payload data."""

    user_id: int
    role: str
    email: Optional[str] = None
    token_id: Optional[str] = None


class AuthenticatedUser(BaseModel):
    """Identity resolved from a bearer token."""

    id: int
    role: str
    email: Optional[str] = None


def create_access_token(
    user_id: int,
    role: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed JWT access token."""
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user_id),
        "role": role,
        "exp": expire,
        "iat": now,
        "iss": settings.JWT_ISSUER,
        "jti": secrets.token_urlsafe(16),
        "type": "access",
    }
    if email:
        to_encode["email"] = email

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Optional[TokenData]:
    """
    Verify and decode a JWT access token.

    Returns:
        TokenData if valid, None otherwise
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
        )
    except JWTError as e:
        logger.warning("Rejected bearer token: %s", e)
        return None

    if payload.get("type") != "access":
        logger.warning("Rejected bearer token with type %s", payload.get("type"))
        return None

    subject = payload.get("sub")
    role = payload.get("role")
    if subject is None or role is None:
        return None

    try:
        user_id = int(subject)
    except (TypeError, ValueError):
        return None

    return TokenData(
        user_id=user_id,
        role=role,
        email=payload.get("email"),
        token_id=payload.get("jti"),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    """Resolve the current authenticated user from the bearer token."""
    if not credentials:
        raise AuthenticationError("Not authenticated")

    token_data = verify_token(credentials.credentials)
    if token_data is None:
        raise AuthenticationError()

    return AuthenticatedUser(
        id=token_data.user_id, role=token_data.role, email=token_data.email
    )
