"""Bot Framework Connector client for outbound replies."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import urlsplit

import httpx

from artbot.domain.activities import Activity, Reply
from artbot.errors import UntrustedServiceUrlError

_logger = logging.getLogger(__name__)

TOKEN_URL = "https://login.microsoftonline.com/botframework.com/oauth2/v2.0/token"
TOKEN_SCOPE = "https://api.botframework.com/.default"
# Refresh a cached token this many seconds before it expires.
_TOKEN_REFRESH_MARGIN = 300
DEFAULT_TRUSTED_HOSTS = ("botframework.com", "localhost", "127.0.0.1")


class ConnectorClient(Protocol):
    """Interface for sending replies back to the channel."""

    async def send_activity(self, activity: Activity, reply: Reply) -> None:
        """Send a reply to the conversation of an inbound activity."""


@dataclass
class HttpxConnectorClient(ConnectorClient):
    """Connector client implemented with httpx."""

    app_id: str | None
    app_password: str | None
    http_client: httpx.AsyncClient
    trusted_hosts: tuple[str, ...] = DEFAULT_TRUSTED_HOSTS
    timeout: float = 15.0
    clock: Callable[[], float] = time.monotonic
    _token: str | None = field(default=None, init=False, repr=False)
    _token_expires_at: float = field(default=0.0, init=False, repr=False)

    @classmethod
    def create(
        cls,
        app_id: str | None,
        app_password: str | None,
        trusted_hosts: tuple[str, ...] = DEFAULT_TRUSTED_HOSTS,
        timeout: float = 15.0,
    ) -> "HttpxConnectorClient":
        """Create a connector client with a managed httpx session."""
        return cls(
            app_id=app_id,
            app_password=app_password,
            trusted_hosts=trusted_hosts,
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def send_activity(self, activity: Activity, reply: Reply) -> None:
        """Post a reply activity to the conversation's service URL."""
        if not activity.service_url:
            raise ValueError("Activity has no serviceUrl")
        if not self.is_trusted(activity.service_url):
            raise UntrustedServiceUrlError(
                f"Refusing to reply to untrusted service URL {activity.service_url}"
            )
        base = activity.service_url.rstrip("/")
        url = f"{base}/v3/conversations/{activity.conversation.id}/activities"
        if activity.id:
            url = f"{url}/{activity.id}"

        payload = reply.to_payload()
        payload["conversation"] = {"id": activity.conversation.id}
        payload["from"] = (
            activity.recipient.model_dump(exclude_none=True)
            if activity.recipient
            else {}
        )
        payload["recipient"] = activity.from_account.model_dump(exclude_none=True)
        if activity.id:
            payload["replyToId"] = activity.id

        headers: dict[str, str] = {}
        token = await self._access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        response = await self.http_client.post(
            url, json=payload, headers=headers, timeout=self.timeout
        )
        response.raise_for_status()

    def is_trusted(self, service_url: str) -> bool:
        """Return True when the service URL host is on the allowlist."""
        host = (urlsplit(service_url).hostname or "").lower()
        if not host:
            return False
        return any(
            host == trusted or host.endswith(f".{trusted}")
            for trusted in self.trusted_hosts
        )

    async def _access_token(self) -> str | None:
        if not self.app_id or not self.app_password:
            return None
        if self._token and self.clock() < self._token_expires_at:
            return self._token

        response = await self.http_client.post(
            TOKEN_URL,
            data={
                "grant_type": "client_credentials",
                "client_id": self.app_id,
                "client_secret": self.app_password,
                "scope": TOKEN_SCOPE,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json()
        expires_in = int(payload.get("expires_in") or 3600)
        self._token = str(payload["access_token"])
        self._token_expires_at = self.clock() + max(
            0, expires_in - _TOKEN_REFRESH_MARGIN
        )
        _logger.debug("Fetched connector token valid for %ss", expires_in)
        return self._token

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
