"""
Unit tests for peers.source module.

HTTP is served by httpx.MockTransport; no network access.
"""

import base64

import httpx
import pytest

from peerwatch.config import PeerwatchConfig, set_config
from peerwatch.logging_config import get_error_stats
from peerwatch.peers.source import PEERS_PATH, PeerSourceError, RouterOSClient

ROUTER = "http://router.example.com:50002"


def make_client(handler, **kwargs) -> RouterOSClient:
    kwargs.setdefault("base_url", ROUTER)
    kwargs.setdefault("username", "admin")
    kwargs.setdefault("password", "secret")
    return RouterOSClient(transport=httpx.MockTransport(handler), **kwargs)


class TestRouterOSClient:
    """Tests for fetching raw peers."""

    def test_fetch_peers(self, raw_peers) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=raw_peers)

        peers = make_client(handler).fetch_peers()

        assert peers == raw_peers
        assert seen["url"] == f"{ROUTER}{PEERS_PATH}"
        expected = base64.b64encode(b"admin:secret").decode()
        assert seen["auth"] == f"Basic {expected}"

    def test_trailing_slash_in_base_url(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == PEERS_PATH
            return httpx.Response(200, json=[])

        assert make_client(handler, base_url=f"{ROUTER}/").fetch_peers() == []

    def test_no_auth_without_username(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert "Authorization" not in request.headers
            return httpx.Response(200, json=[])

        assert make_client(handler, username="").fetch_peers() == []

    def test_http_error(self) -> None:
        client = make_client(lambda request: httpx.Response(401, text="unauthorized"))

        with pytest.raises(PeerSourceError, match="responded with status: 401"):
            client.fetch_peers()
        assert get_error_stats() == {"router_http_error": 1}

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(PeerSourceError, match="Could not reach router"):
            make_client(handler).fetch_peers()
        assert get_error_stats() == {"router_connection_error": 1}

    def test_invalid_json(self) -> None:
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(PeerSourceError, match="invalid JSON"):
            client.fetch_peers()

    def test_non_list_json(self) -> None:
        client = make_client(lambda request: httpx.Response(200, json={"error": "x"}))

        with pytest.raises(PeerSourceError, match="expected a list"):
            client.fetch_peers()

    def test_missing_router_url(self) -> None:
        client = make_client(lambda request: httpx.Response(200, json=[]), base_url="")

        with pytest.raises(PeerSourceError, match="Router URL not configured"):
            client.fetch_peers()

    def test_defaults_from_config(self) -> None:
        set_config(PeerwatchConfig(
            router_url=ROUTER,
            router_username="monitor",
            router_password="pw",
            verify_ssl=False,
            timeout=3.0,
        ))

        client = RouterOSClient()

        assert client.peers_url == f"{ROUTER}{PEERS_PATH}"
        assert client.username == "monitor"
        assert client.password == "pw"
        assert client.verify_ssl is False
        assert client.timeout == 3.0

    def test_repeated_fetches(self) -> None:
        client = make_client(lambda request: httpx.Response(200, json=[{".id": "*1"}]))

        assert client.fetch_peers() == [{".id": "*1"}]
        assert client.fetch_peers() == [{".id": "*1"}]
