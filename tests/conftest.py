"""
Shared fixtures for peerwatch tests.
"""

import logging

import pytest

from peerwatch.config import PeerwatchConfig, set_config
from peerwatch.logging_config import reset_error_stats


@pytest.fixture(autouse=True)
def isolated_config():
    """Keep every test independent of the caller's environment and .env files."""
    set_config(PeerwatchConfig())
    reset_error_stats()
    yield
    set_config(None)
    logger = logging.getLogger("peerwatch")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


@pytest.fixture
def raw_peers() -> list[dict]:
    """Peers in the shape returned by /rest/interface/wireguard/peers."""
    return [
        {
            ".id": "*1",
            "allowed-address": "100.100.100.7/32,192.168.7.0/24",
            "name": "MC7",
            "comment": "Sucursal Norte",
            "last-handshake": "2d3h",
            "current-endpoint-address": "201.1.1.7",
            "interface": "wg-mc",
            "disabled": "false",
        },
        {
            ".id": "*2",
            "allowed-address": "100.100.100.8/32,190.2.221.40:10554",
            "name": "MC8",
            "interface": "wg-mc",
        },
        {
            ".id": "*3",
            "allowed-address": "100.100.100.99/32,10.99.0.0/24",
            "comment": "MC99 Bodega",
            "last-handshake": "15s",
            "current-endpoint-address": "201.1.1.99",
        },
        {
            ".id": "*4",
            "allowed-address": "100.100.100.40/32",
            "name": "MC40",
            "last-handshake": "1w2d",
        },
        {
            ".id": "*5",
            "allowed-address": "",
        },
    ]
