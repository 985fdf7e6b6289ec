"""
Pydantic schemas for call requests and responses.
Field names are camelCase on the wire, snake_case in Python.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from callhub.models.call import CallStatus, CallType
from callhub.utils.datetime_utils import to_iso_utc


class CallSettings(BaseModel):
    """Media flags of a call."""

    audio: bool = True
    video: bool = True


class CallSettingsRequest(BaseModel):
    """Requested media flags; omitted flags take the call type's default."""

    audio: Optional[bool] = None
    video: Optional[bool] = None


class CreateCallRequest(BaseModel):
    """Optional body for creating a call."""

    call_id: Optional[str] = Field(
        default=None,
        alias="callId",
        min_length=1,
        max_length=36,
        pattern=r"^[A-Za-z0-9_-]+$",
        description="Client-chosen call ID; generated when omitted"
    )
    name: Optional[str] = Field(default=None, max_length=255, description="Display name")
    call_type: CallType = Field(default=CallType.DEFAULT, alias="type")
    settings: Optional[CallSettingsRequest] = Field(
        default=None,
        description="Media flags; audio rooms default to audio only"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Standup",
                "type": "audio_room",
                "settings": {"audio": True, "video": False}
            }
        }
    )


class ParticipantResponse(BaseModel):
    """One membership span of a user in a call."""

    user_id: str = Field(alias="userId")
    joined_at: datetime = Field(alias="joinedAt")
    left_at: Optional[datetime] = Field(default=None, alias="leftAt")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @field_serializer("joined_at", "left_at")
    def serialize_timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return to_iso_utc(value)


class CallSummaryResponse(BaseModel):
    """Call history entry."""

    id: str = Field(alias="callId")
    created_by: str = Field(alias="createdBy")
    status: CallStatus
    name: Optional[str] = None
    call_type: CallType = Field(alias="type")
    settings: CallSettings
    started_at: datetime = Field(alias="startedAt")
    ended_at: Optional[datetime] = Field(default=None, alias="endedAt")
    duration: float = Field(description="Seconds from start to end, 0 until the call ends")

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @field_serializer("started_at", "ended_at")
    def serialize_timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return to_iso_utc(value)


class CallResponse(CallSummaryResponse):
    """Full call detail with participant history."""

    participants: List[ParticipantResponse] = Field(default_factory=list)
    external_call_handle: Optional[str] = Field(default=None, alias="externalCallHandle")
    token: Optional[str] = Field(
        default=None,
        description="Signaling provider join token for the caller (create and join only)"
    )

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "callId": "0b7d5c7e-3c55-4d0c-9a8a-5b1f9f0f6a11",
                "createdBy": "5f3c2a9e-1d4b-4a8e-8c2f-0f6b7e1d2c3a",
                "status": "active",
                "name": None,
                "type": "default",
                "settings": {"audio": True, "video": True},
                "startedAt": "2025-12-16T11:30:00.123456Z",
                "endedAt": None,
                "duration": 0,
                "participants": [
                    {
                        "userId": "5f3c2a9e-1d4b-4a8e-8c2f-0f6b7e1d2c3a",
                        "joinedAt": "2025-12-16T11:30:00.123456Z",
                        "leftAt": None
                    }
                ],
                "externalCallHandle": "0b7d5c7e-3c55-4d0c-9a8a-5b1f9f0f6a11",
                "token": None
            }
        }
    )


class SignalingTokenResponse(BaseModel):
    """Fresh signaling provider join token."""

    token: Optional[str] = Field(description="Join token, null when the provider has no secret configured")
