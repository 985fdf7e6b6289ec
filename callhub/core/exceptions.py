"""
Application error taxonomy.

Services raise these exceptions; the handler registered in main.py maps
them to HTTP responses with a ``{"message": ...}`` body.
"""
from typing import Dict, Optional

from fastapi import status


class CallHubError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message: Optional[str] = None

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None

    def response_message(self) -> str:
        """Message safe to return to the caller."""
        return self.public_message or self.message


class ValidationError(CallHubError):
    """Missing or malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(CallHubError):
    """Missing, invalid or expired credential."""
    status_code = status.HTTP_401_UNAUTHORIZED

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class Forbidden(CallHubError):
    """Authenticated but not allowed to perform the action."""
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(CallHubError):
    """Referenced entity does not exist."""
    status_code = status.HTTP_404_NOT_FOUND


class InvalidState(CallHubError):
    """Operation is illegal for the current lifecycle state."""
    status_code = status.HTTP_400_BAD_REQUEST


class PersistenceError(CallHubError):
    """Storage failure. Details are logged, never returned."""
    public_message = "Server error while saving data"


class SignalingProviderError(CallHubError):
    """Signaling provider failure. Details are logged, never returned."""
    public_message = "Call service is temporarily unavailable"
