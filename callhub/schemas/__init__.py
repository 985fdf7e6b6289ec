"""
Pydantic schema exports.
Provides request/response models for API endpoints.
"""
from callhub.schemas.call import (
    CallResponse,
    CallSettings,
    CallSettingsRequest,
    CallSummaryResponse,
    CreateCallRequest,
    ParticipantResponse,
    SignalingTokenResponse,
)
from callhub.schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TokenValidationResponse,
    UserResponse,
)

__all__ = [
    "AuthResponse",
    "CallResponse",
    "CallSettings",
    "CallSettingsRequest",
    "CallSummaryResponse",
    "CreateCallRequest",
    "LoginRequest",
    "ParticipantResponse",
    "RegisterRequest",
    "SignalingTokenResponse",
    "TokenValidationResponse",
    "UserResponse",
]
