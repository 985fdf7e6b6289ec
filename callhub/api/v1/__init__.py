"""
API v1 router exports.
Provides API endpoint routers.
"""
from callhub.api.v1 import auth, calls, signaling

__all__ = [
    "auth",
    "calls",
    "signaling",
]
