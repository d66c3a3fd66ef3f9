"""
RouterOS REST API Client

Fetches WireGuard peer records from a MikroTik router.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
from typing import Any

import httpx

from peerwatch.config import get_config
from peerwatch.logging_config import get_logger, track_error


PEERS_PATH = "/rest/interface/wireguard/peers"

logger = get_logger(__name__)


class PeerSourceError(Exception):
    """Raised when peer records cannot be fetched from the router."""


class RouterOSClient:
    """Client for the RouterOS REST API with connection pooling.

    Args:
        base_url: Router base URL, e.g. "http://router.example.com:50002"
        username: HTTP Basic username
        password: HTTP Basic password
        verify_ssl: Verify the router's TLS certificate
        timeout: Request timeout in seconds
        transport: Optional httpx transport (used by tests)
    """

    def __init__(
        self,
        base_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        verify_ssl: bool | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        config = get_config()
        self.base_url = (base_url or config.router_url).rstrip("/")
        self.username = username if username is not None else config.router_username
        self.password = password if password is not None else config.router_password
        self.verify_ssl = config.verify_ssl if verify_ssl is None else verify_ssl
        self.timeout = timeout or config.timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def peers_url(self) -> str:
        return f"{self.base_url}{PEERS_PATH}"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client with connection pooling."""
        if self._client is None or self._client.is_closed:
            auth = None
            if self.username:
                auth = httpx.BasicAuth(self.username, self.password)
            self._client = httpx.AsyncClient(
                auth=auth,
                verify=self.verify_ssl,
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def fetch_peers_async(self) -> list[dict[str, Any]]:
        """Fetch the raw peer list.

        Returns:
            Decoded JSON array of peer objects

        Raises:
            PeerSourceError: On missing URL, HTTP/transport errors or bad JSON
        """
        if not self.base_url:
            raise PeerSourceError(
                "Router URL not configured (set PEERWATCH_ROUTER_URL)"
            )

        logger.info("Fetching WireGuard peers from %s", self.base_url)
        client = await self._get_client()

        try:
            resp = await client.get(
                self.peers_url,
                headers={"Content-Type": "application/json"},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            track_error("router_http_error", f"HTTP {status}", context={"url": self.peers_url})
            raise PeerSourceError(
                f"RouterOS API responded with status: {status}"
            ) from e
        except httpx.HTTPError as e:
            track_error("router_connection_error", str(e), exception=e)
            raise PeerSourceError(f"Could not reach router: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            track_error("router_invalid_json", str(e))
            raise PeerSourceError("RouterOS API returned invalid JSON") from e

        if not isinstance(data, list):
            track_error("router_invalid_json", f"expected array, got {type(data).__name__}")
            raise PeerSourceError(
                f"RouterOS API returned {type(data).__name__}, expected a list of peers"
            )

        logger.info("Successfully fetched %d peers", len(data))
        return data

    def fetch_peers(self) -> list[dict[str, Any]]:
        """Synchronous fetch."""

        async def _fetch() -> list[dict[str, Any]]:
            async with self:
                return await self.fetch_peers_async()

        return asyncio.run(_fetch())
