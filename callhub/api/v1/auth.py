"""
Authentication API endpoints.
Provides registration, credential login and token validation.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from callhub.config import settings
from callhub.core.database import get_db
from callhub.core.rate_limit import limiter
from callhub.core.security import CallerIdentity
from callhub.core.signaling import SignalingProvider
from callhub.dependencies import get_current_user, get_signaling_provider
from callhub.schemas.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    TokenValidationResponse,
    UserResponse,
)
from callhub.services.user_service import UserService

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account"
)
@limiter.limit(settings.auth_rate_limit)
async def register(
    request: Request,
    payload: RegisterRequest,
    db: AsyncSession = Depends(get_db),
    signaling: SignalingProvider = Depends(get_signaling_provider)
):
    """
    Register a new account and return an access token.

    **Errors:**
    - 400: Missing fields, malformed email, or email already registered
    """
    service = UserService(db)
    user, token = await service.register(payload.name, payload.email, payload.password)

    return AuthResponse(
        user_id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        token=token,
        signaling_token=signaling.create_user_token(user.id),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in with email and password"
)
@limiter.limit(settings.auth_rate_limit)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    signaling: SignalingProvider = Depends(get_signaling_provider)
):
    """
    Authenticate with email and password, return an access token.

    **Errors:**
    - 401: Invalid email or password
    """
    service = UserService(db)
    user, token = await service.authenticate(credentials.email, credentials.password)

    return AuthResponse(
        user_id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        token=token,
        signaling_token=signaling.create_user_token(user.id),
    )


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current user's profile"
)
async def get_me(
    caller: CallerIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    signaling: SignalingProvider = Depends(get_signaling_provider)
):
    """
    Get the authenticated user's profile with a fresh signaling token.

    **Errors:**
    - 401: Missing or invalid token
    - 404: Account no longer exists
    """
    service = UserService(db)
    user = await service.get_user(caller.user_id)

    response = UserResponse.model_validate(user)
    response.signaling_token = signaling.create_user_token(user.id)
    return response


@router.post(
    "/validate",
    response_model=TokenValidationResponse,
    summary="Validate the bearer token"
)
async def validate_token(caller: CallerIdentity = Depends(get_current_user)):
    """Return the identity carried by a valid token; 401 otherwise."""
    return TokenValidationResponse(valid=True, user_id=caller.user_id, role=caller.role)
