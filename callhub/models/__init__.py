"""
SQLAlchemy models for the CallHub application.

All models must be imported here so metadata.create_all sees every table.
"""

# Import Base first
from callhub.models.base import Base, TimestampMixin, UUIDMixin

# Import all models (order matters for relationships)
from callhub.models.user import User, UserRole
from callhub.models.call import Call, CallParticipant, CallStatus, CallType

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Users
    "User",
    "UserRole",
    # Calls
    "Call",
    "CallParticipant",
    "CallStatus",
    "CallType",
]
