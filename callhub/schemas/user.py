"""
Pydantic schemas for account and authentication endpoints.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from callhub.models.user import UserRole
from callhub.utils.datetime_utils import to_iso_utc


# ============================================================================
# Request Schemas
# ============================================================================

class RegisterRequest(BaseModel):
    """Schema for registering a new account."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: str = Field(..., min_length=3, max_length=255, description="Email address")
    password: str = Field(..., min_length=6, max_length=72, description="Password (bcrypt limit: 72 bytes)")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure name is not whitespace only."""
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace only")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Normalize email and check its basic shape."""
        v = v.strip().lower()
        local, _, domain = v.partition("@")
        if not local or "." not in domain or " " in v:
            raise ValueError("Invalid email address")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Jane Doe",
                "email": "jane@example.com",
                "password": "s3cret-pass"
            }
        }
    )


class LoginRequest(BaseModel):
    """Login request schema with email and password."""

    email: str = Field(..., min_length=1, description="User email address")
    password: str = Field(..., min_length=1, description="User password")


# ============================================================================
# Response Schemas
# ============================================================================

class AuthResponse(BaseModel):
    """Account data plus tokens returned by register and login."""

    user_id: str = Field(alias="userId")
    name: str
    email: str
    role: UserRole
    token: str = Field(description="Bearer access token for this API")
    signaling_token: Optional[str] = Field(
        default=None,
        alias="signalingToken",
        description="Join token for the signaling provider"
    )

    model_config = ConfigDict(populate_by_name=True)


class UserResponse(BaseModel):
    """Current user profile."""

    id: str = Field(alias="userId")
    name: str
    email: str
    role: UserRole
    created_at: datetime = Field(alias="createdAt")
    signaling_token: Optional[str] = Field(default=None, alias="signalingToken")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> Optional[str]:
        return to_iso_utc(value)


class TokenValidationResponse(BaseModel):
    """Token validation response schema."""

    valid: bool
    user_id: str = Field(alias="userId")
    role: UserRole

    model_config = ConfigDict(populate_by_name=True)
