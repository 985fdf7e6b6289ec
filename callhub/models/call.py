"""
Call and CallParticipant models.

Tracks calls, their lifecycle status, and the membership history of every
participant.
"""
import enum
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from callhub.models.base import Base, UUIDMixin
from callhub.utils.datetime_utils import seconds_between

if TYPE_CHECKING:
    from callhub.models.user import User


class CallStatus(str, enum.Enum):
    """Enum for call lifecycle statuses."""
    CREATED = "created"
    ACTIVE = "active"
    ENDED = "ended"


class CallType(str, enum.Enum):
    """Enum for the kind of session requested from the signaling provider."""
    DEFAULT = "default"
    AUDIO_ROOM = "audio_room"


class Call(Base, UUIDMixin):
    """
    Call model - one communication session.

    Status only moves forward: created -> active -> ended, or created -> ended.
    The version column backs optimistic concurrency for every mutation.
    """

    __tablename__ = "calls"

    created_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        doc="Current owner; moves to another participant when the owner leaves"
    )

    status: Mapped[CallStatus] = mapped_column(
        SQLEnum(CallStatus, name="call_status", native_enum=False),
        default=CallStatus.CREATED,
        nullable=False,
        doc="Lifecycle status: created, active, or ended"
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Optional display name (audio rooms get a generated one)"
    )

    call_type: Mapped[CallType] = mapped_column(
        SQLEnum(CallType, name="call_type", native_enum=False),
        default=CallType.DEFAULT,
        nullable=False,
        doc="Provider call type: default (video) or audio_room"
    )

    # Media settings
    audio_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    video_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Call timing
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="When the call was created"
    )

    ended_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="When the call ended (set once)"
    )

    external_call_handle: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Opaque call handle from the signaling provider"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Last mutation time"
    )

    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Optimistic concurrency counter"
    )

    # Relationships
    participants: Mapped[List["CallParticipant"]] = relationship(
        back_populates="call",
        cascade="all, delete-orphan",
        order_by="CallParticipant.id",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_ended(self) -> bool:
        return self.status == CallStatus.ENDED

    @property
    def settings(self) -> dict:
        return {"audio": self.audio_enabled, "video": self.video_enabled}

    @property
    def duration(self) -> float:
        """Seconds between start and end, 0 while the call has not ended."""
        if not self.is_ended:
            return 0.0
        return seconds_between(self.started_at, self.ended_at)

    def active_participants(self) -> List["CallParticipant"]:
        """Participant entries without a departure time, in join order."""
        return [p for p in self.participants if p.left_at is None]

    def find_active_participant(self, user_id: str) -> Optional["CallParticipant"]:
        for participant in self.participants:
            if participant.user_id == user_id and participant.left_at is None:
                return participant
        return None

    def __repr__(self) -> str:
        return f"<Call(id={self.id}, status={self.status}, created_by={self.created_by})>"


class CallParticipant(Base):
    """
    CallParticipant model - one membership span of a user in a call.

    Re-joining after leaving creates a new row. The auto-increment id is the
    join order.
    """

    __tablename__ = "call_participants"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Surrogate key, also the join order"
    )

    call_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("calls.id", ondelete="CASCADE"),
        nullable=False,
        doc="Call ID"
    )

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        doc="User ID"
    )

    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="When the participant joined"
    )

    left_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="When the participant left (null while active)"
    )

    # Relationships
    call: Mapped["Call"] = relationship(back_populates="participants")
    user: Mapped["User"] = relationship(back_populates="call_participations")

    @property
    def is_active(self) -> bool:
        return self.left_at is None

    def __repr__(self) -> str:
        return f"<CallParticipant(call_id={self.call_id}, user_id={self.user_id}, left_at={self.left_at})>"


# Indexes for performance
Index("idx_calls_started_at", Call.started_at)
Index("idx_call_participants_call", CallParticipant.call_id)
Index("idx_call_participants_user", CallParticipant.user_id)
# At most one open membership span per user and call
Index(
    "uq_call_participants_active",
    CallParticipant.call_id,
    CallParticipant.user_id,
    unique=True,
    postgresql_where=CallParticipant.left_at.is_(None),
    sqlite_where=CallParticipant.left_at.is_(None),
)
