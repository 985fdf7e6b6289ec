"""
Call API routes.
Provides endpoints for the call lifecycle and call history.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from callhub.core.database import get_db
from callhub.core.security import CallerIdentity
from callhub.core.signaling import SignalingProvider
from callhub.dependencies import get_current_user, get_pagination_params, get_signaling_provider
from callhub.schemas.call import CallResponse, CallSummaryResponse, CreateCallRequest
from callhub.services.call_service import CallService

router = APIRouter()


@router.post(
    "",
    response_model=CallResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new call",
    description="Create a call owned by the caller, who becomes its first participant."
)
async def create_call(
    payload: Optional[CreateCallRequest] = None,
    caller: CallerIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    signaling: SignalingProvider = Depends(get_signaling_provider)
):
    """
    Create a new call.

    - **callId**: Optional client-chosen ID (400 if already taken)
    - **name**, **type**, **settings**: Optional room name, `default` or `audio_room`, media flags

    Returns the call plus the caller's signaling join token.
    """
    payload = payload or CreateCallRequest()
    settings = payload.settings

    service = CallService(db, signaling)
    call = await service.create_call(
        caller.user_id,
        call_id=payload.call_id,
        name=payload.name,
        call_type=payload.call_type,
        audio=settings.audio if settings else None,
        video=settings.video if settings else None,
    )

    response = CallResponse.model_validate(call)
    response.token = signaling.create_user_token(caller.user_id)
    return response


@router.get(
    "",
    response_model=List[CallSummaryResponse],
    summary="Get the caller's call history",
    description="Calls the caller created or took part in, newest first."
)
async def list_calls(
    pagination: dict = Depends(get_pagination_params),
    caller: CallerIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    signaling: SignalingProvider = Depends(get_signaling_provider)
):
    """
    Get call history.

    - **limit**: Number of calls (max 100)
    - **offset**: Number of calls to skip
    """
    service = CallService(db, signaling)
    calls = await service.list_calls_for_identity(
        caller.user_id,
        limit=pagination["limit"],
        offset=pagination["offset"]
    )
    return [CallSummaryResponse.model_validate(call) for call in calls]


@router.get(
    "/{call_id}",
    response_model=CallResponse,
    summary="Get call details"
)
async def get_call(
    call_id: str,
    caller: CallerIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    signaling: SignalingProvider = Depends(get_signaling_provider)
):
    """Get a call with its participant history."""
    service = CallService(db, signaling)
    call = await service.get_call_details(call_id)
    return CallResponse.model_validate(call)


@router.post(
    "/{call_id}/join",
    response_model=CallResponse,
    summary="Join a call"
)
async def join_call(
    call_id: str,
    caller: CallerIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    signaling: SignalingProvider = Depends(get_signaling_provider)
):
    """
    Join a call. Joining again while still in the call is a no-op.

    **Errors:**
    - 404: Call not found
    - 400: Call has ended
    """
    service = CallService(db, signaling)
    call = await service.join_call(call_id, caller.user_id)

    response = CallResponse.model_validate(call)
    response.token = signaling.create_user_token(caller.user_id)
    return response


@router.post(
    "/{call_id}/leave",
    response_model=CallResponse,
    summary="Leave a call"
)
async def leave_call(
    call_id: str,
    caller: CallerIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    signaling: SignalingProvider = Depends(get_signaling_provider)
):
    """
    Leave a call. The last participant out ends it.

    **Errors:**
    - 404: Call not found
    """
    service = CallService(db, signaling)
    call = await service.leave_call(call_id, caller.user_id)
    return CallResponse.model_validate(call)


@router.post(
    "/{call_id}/end",
    response_model=CallResponse,
    summary="End a call",
    description="End a call for every participant. Owner or admin only."
)
async def end_call(
    call_id: str,
    caller: CallerIdentity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    signaling: SignalingProvider = Depends(get_signaling_provider)
):
    """
    End a call.

    **Errors:**
    - 404: Call not found
    - 403: Caller is neither the owner nor an admin
    - 400: Call already ended
    """
    service = CallService(db, signaling)
    call = await service.end_call(call_id, caller.user_id, caller.role)
    return CallResponse.model_validate(call)
