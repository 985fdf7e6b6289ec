"""
Signaling provider client.

The provider establishes and tears down the real-time media session for a
call and issues the join tokens clients present to it. The application only
stores the handle it returns; everything else about the provider is opaque.
"""
import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Optional, Dict, Any

import httpx
import jwt

from callhub.config import settings
from callhub.core.exceptions import SignalingProviderError
from callhub.models.call import CallType
from callhub.utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)


class SignalingProvider(ABC):
    """Capability used by the call lifecycle to reach the signaling provider."""

    @abstractmethod
    async def create_call(
        self,
        call_id: str,
        created_by: str,
        call_type: CallType = CallType.DEFAULT,
    ) -> Optional[str]:
        """
        Create the external call for a new call id.

        Returns:
            Opaque call handle, or None when no external call was created

        Raises:
            SignalingProviderError: If the provider rejects or cannot be reached
        """

    @abstractmethod
    async def end_call(self, handle: str) -> None:
        """
        Tear down an external call.

        Raises:
            SignalingProviderError: If the provider rejects or cannot be reached
        """

    @abstractmethod
    def create_user_token(self, user_id: str) -> Optional[str]:
        """Issue a join token for the user, or None when tokens are disabled."""


class HTTPSignalingProvider(SignalingProvider):
    """
    Signaling provider reached over its REST API.

    Remote calls are skipped when no base URL is configured, which keeps
    local development working without provider credentials.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        api_secret: str | None = None,
        timeout: int | None = None,
        token_ttl_seconds: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url if base_url is not None else settings.signaling_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.signaling_api_key
        self.api_secret = api_secret if api_secret is not None else settings.signaling_api_secret
        self.timeout = timeout if timeout is not None else settings.signaling_api_timeout
        self.token_ttl_seconds = (
            token_ttl_seconds if token_ttl_seconds is not None else settings.signaling_token_ttl_seconds
        )
        self.transport = transport

        if not self.base_url:
            logger.warning("Signaling provider URL not configured. External calls will not be created.")

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def _get_headers(self) -> Dict[str, str]:
        """Get default headers for provider requests."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}{path}",
                    headers=self._get_headers(),
                    json=payload,
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise SignalingProviderError(
                    f"Signaling provider returned {e.response.status_code}: {e.response.text[:200]}"
                )
            except httpx.RequestError as e:
                raise SignalingProviderError(f"Signaling provider unavailable: {str(e)}")

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            raise SignalingProviderError("Signaling provider returned a non-JSON body")

    async def create_call(
        self,
        call_id: str,
        created_by: str,
        call_type: CallType = CallType.DEFAULT,
    ) -> Optional[str]:
        if not self.enabled:
            return None

        data = await self._post(
            "/calls",
            {
                "id": call_id,
                "type": CallType(call_type).value,
                "created_by": created_by,
                "members": [created_by],
            },
        )
        handle = data.get("id") or data.get("call_id") or call_id
        logger.info(f"Created external call {handle} for call {call_id}")
        return str(handle)

    async def end_call(self, handle: str) -> None:
        if not self.enabled or not handle:
            return

        await self._post(f"/calls/{handle}/end", {})
        logger.info(f"Ended external call {handle}")

    def create_user_token(self, user_id: str) -> Optional[str]:
        if not self.api_secret:
            return None

        now = utc_now()
        return jwt.encode(
            {
                "user_id": user_id,
                "iat": now,
                "exp": now + timedelta(seconds=self.token_ttl_seconds),
            },
            self.api_secret,
            algorithm="HS256",
        )


# Global signaling provider instance
signaling_provider = HTTPSignalingProvider()
