"""
Service layer exports.
Provides business logic for the application.
"""
from callhub.services.call_service import CallService
from callhub.services.user_service import UserService

__all__ = [
    "CallService",
    "UserService",
]
