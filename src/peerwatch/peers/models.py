"""
WireGuard peer data models.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any


UNNAMED = "unnamed"
NOT_AVAILABLE = "N/A"
NEVER = "never"

STATUS_ALL = "all"

# Dynamic-DNS reserved MC numbers
DEFAULT_RESERVED_IDS = frozenset({2, 7, 14, 20, 26, 46, 62, 66, 70})

# MC number -> fixed LAN address
DEFAULT_STATIC_OVERRIDES = {
    5: "172.16.100.26",
    8: "190.2.221.40:10554",
    19: "192.168.13.0/24",
    21: "201.193.161.165",
    22: "192.168.11.0/24",
    31: "177.93.6.24",
    38: "201.192.162.70:5554",
    63: "177.93.31.175",
}

DEFAULT_POOL_CAPACITY = 200

# Tunnel-management and gateway-management subnets
DEFAULT_INFRASTRUCTURE_PREFIXES = ("100.100.100", "172.16.100")


class PeerStatus(str, Enum):
    """Peer link status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    RESERVED = "reserved"
    STATIC_OVERRIDE = "static-override"


def _as_bool(value: Any) -> bool:
    # RouterOS REST encodes booleans as "true"/"false"
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True)
class RawPeerRecord:
    """Peer record as returned by /rest/interface/wireguard/peers."""

    identifier: str = ""
    allowed_address: str | None = None
    name: str | None = None
    comment: str | None = None
    last_handshake: str | None = None
    endpoint_address: str | None = None
    interface: str | None = None
    client_endpoint: str | None = None
    disabled: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RawPeerRecord":
        """Build a record from a RouterOS JSON object."""
        return cls(
            identifier=_as_str(data.get(".id")) or "",
            allowed_address=_as_str(data.get("allowed-address")),
            name=_as_str(data.get("name")),
            comment=_as_str(data.get("comment")),
            last_handshake=_as_str(data.get("last-handshake")),
            endpoint_address=_as_str(data.get("current-endpoint-address")),
            interface=_as_str(data.get("interface")),
            client_endpoint=_as_str(data.get("client-endpoint")),
            disabled=_as_bool(data.get("disabled", False)),
        )


@dataclass(frozen=True)
class NormalizedPeer:
    """Display-ready peer."""

    id: str
    name: str
    tunnel_address: str
    local_networks: tuple[str, ...]
    status: PeerStatus
    last_handshake: str = NEVER
    comment: str = ""
    endpoint_address: str = NOT_AVAILABLE
    interface: str | None = None
    disabled: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "tunnel_address": self.tunnel_address,
            "local_networks": list(self.local_networks),
            "status": self.status.value,
            "last_handshake": self.last_handshake,
            "comment": self.comment,
            "endpoint_address": self.endpoint_address,
            "interface": self.interface,
            "disabled": self.disabled,
        }


@dataclass(frozen=True)
class ClassificationRules:
    """Static lookup tables and constants used to classify peers.

    Static-override membership takes precedence over reserved membership,
    which takes precedence over handshake recency.
    """

    reserved_ids: frozenset[int] = DEFAULT_RESERVED_IDS
    static_overrides: Mapping[int, str] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_STATIC_OVERRIDES))
    )
    pool_capacity: int = DEFAULT_POOL_CAPACITY
    infrastructure_prefixes: tuple[str, str] = DEFAULT_INFRASTRUCTURE_PREFIXES

    def __post_init__(self) -> None:
        # Freeze caller-supplied collections
        object.__setattr__(self, "reserved_ids", frozenset(self.reserved_ids))
        if not isinstance(self.static_overrides, MappingProxyType):
            object.__setattr__(
                self, "static_overrides", MappingProxyType(dict(self.static_overrides))
            )
        prefixes = tuple(self.infrastructure_prefixes)
        if len(prefixes) != 2:
            raise ValueError(
                f"Expected two infrastructure prefixes, got {len(prefixes)}"
            )
        object.__setattr__(self, "infrastructure_prefixes", prefixes)


@dataclass(frozen=True)
class AggregateStats:
    """Per-status counts and remaining pool capacity."""

    total: int = 0
    active: int = 0
    inactive: int = 0
    reserved: int = 0
    static_override: int = 0
    available: int = 0

    def count(self, status: PeerStatus) -> int:
        """Get the count for a single status."""
        return {
            PeerStatus.ACTIVE: self.active,
            PeerStatus.INACTIVE: self.inactive,
            PeerStatus.RESERVED: self.reserved,
            PeerStatus.STATIC_OVERRIDE: self.static_override,
        }[status]

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "active": self.active,
            "inactive": self.inactive,
            "reserved": self.reserved,
            "static_override": self.static_override,
            "available": self.available,
        }
