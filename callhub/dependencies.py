"""
Dependency injection for FastAPI routes.
Provides reusable dependencies for authentication, signaling, pagination, etc.
"""
from typing import Optional

from fastapi import Header, Query

from callhub.core.security import CallerIdentity, extract_token_from_header, verify_access_token
from callhub.core.signaling import SignalingProvider, signaling_provider


async def get_current_user(
    authorization: Optional[str] = Header(None)
) -> CallerIdentity:
    """
    Dependency to get the current authenticated caller.

    The identity and role come from the signed access token only; no
    database round trip is made.

    Args:
        authorization: Authorization header containing Bearer token

    Returns:
        Verified caller identity

    Raises:
        AuthError: 401 if token is missing, invalid or expired

    Example:
        ```python
        @router.get("/protected")
        async def protected_route(caller: CallerIdentity = Depends(get_current_user)):
            return {"userId": caller.user_id}
        ```
    """
    token = extract_token_from_header(authorization)
    return verify_access_token(token)


def get_signaling_provider() -> SignalingProvider:
    """
    Dependency returning the signaling provider.

    Tests override this to substitute a fake provider.
    """
    return signaling_provider


def get_pagination_params(
    limit: int = Query(default=50, ge=1, le=100, description="Number of items to return"),
    offset: int = Query(default=0, ge=0, description="Number of items to skip")
) -> dict:
    """
    Dependency for offset-based pagination parameters.

    Returns:
        Dictionary with limit and offset
    """
    return {
        "limit": limit,
        "offset": offset,
    }
