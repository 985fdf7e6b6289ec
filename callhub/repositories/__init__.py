"""
Repository layer exports.
Provides database access layer for the application.
"""
from callhub.repositories.base import BaseRepository
from callhub.repositories.call_repo import CallRepository
from callhub.repositories.user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "CallRepository",
    "UserRepository",
]
