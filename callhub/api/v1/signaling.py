"""
Signaling provider API routes.
Lets clients refresh their provider join token without re-joining a call.
"""
from fastapi import APIRouter, Depends

from callhub.core.security import CallerIdentity
from callhub.core.signaling import SignalingProvider
from callhub.dependencies import get_current_user, get_signaling_provider
from callhub.schemas.call import SignalingTokenResponse

router = APIRouter()


@router.post(
    "/token",
    response_model=SignalingTokenResponse,
    summary="Issue a signaling join token",
    description="Issue a fresh signaling provider token for the caller."
)
async def create_signaling_token(
    caller: CallerIdentity = Depends(get_current_user),
    signaling: SignalingProvider = Depends(get_signaling_provider)
):
    """
    Issue a join token for the signaling provider.

    **Errors:**
    - 401: Missing or invalid token
    """
    return SignalingTokenResponse(token=signaling.create_user_token(caller.user_id))
