"""
Security utilities for authentication and authorization.
Handles password hashing and JWT issuance/validation.
"""
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Dict, Any

import jwt
from passlib.context import CryptContext

from callhub.config import settings
from callhub.core.exceptions import AuthError
from callhub.models.user import UserRole
from callhub.utils.datetime_utils import utc_now

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass(frozen=True)
class CallerIdentity:
    """Verified identity of the caller, taken from the access token."""

    user_id: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT access token.

    Args:
        data: Payload data to encode
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT token

    Example:
        ```python
        token = create_access_token(
            data={"sub": user.id, "role": user.role.value},
            expires_delta=timedelta(hours=24)
        )
        ```
    """
    to_encode = data.copy()
    now = utc_now()

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(hours=settings.jwt_expiration_hours)

    to_encode.update({"exp": expire, "iat": now})

    return jwt.encode(
        to_encode,
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm
    )


def create_user_access_token(user_id: str, role: UserRole) -> str:
    """Issue an access token carrying the user's identity and role."""
    return create_access_token({"sub": user_id, "role": UserRole(role).value})


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded token payload

    Raises:
        AuthError: If token is invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise AuthError("Token has expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")


def extract_token_from_header(authorization: Optional[str]) -> str:
    """
    Extract JWT token from Authorization header.

    Args:
        authorization: Authorization header value (e.g., "Bearer <token>")

    Returns:
        Extracted token

    Raises:
        AuthError: If header is missing or its format is invalid
    """
    if not authorization:
        raise AuthError("Missing authorization header")

    parts = authorization.split()

    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthError("Invalid authorization header format")

    return parts[1]


def verify_access_token(token: str) -> CallerIdentity:
    """
    Verify an access token and return the caller identity.

    Raises:
        AuthError: If the token is invalid, expired, or lacks identity claims
    """
    payload = decode_token(token)

    user_id = payload.get("sub")
    if not user_id:
        raise AuthError("Token does not contain user ID")

    try:
        role = UserRole(payload.get("role", UserRole.USER.value))
    except ValueError:
        raise AuthError("Token carries an unknown role")

    return CallerIdentity(user_id=str(user_id), role=role)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against its bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)
