"""
Peer record normalization.

Extracts the display name, tunnel address and local networks from a raw
RouterOS peer record. Everything here is total: missing fields fall back to
sentinel values instead of raising.
"""

import re

from peerwatch.peers.models import (
    NEVER,
    NOT_AVAILABLE,
    UNNAMED,
    ClassificationRules,
    NormalizedPeer,
    PeerStatus,
    RawPeerRecord,
)


IPV4_PATTERN = re.compile(r"(\d+\.\d+\.\d+\.\d+)")


def resolve_name(record: RawPeerRecord) -> str:
    """Name resolution order: name, comment, then "unnamed"."""
    return record.name or record.comment or UNNAMED


def extract_tunnel_address(allowed_address: str | None) -> str:
    """Return the first dotted quad in the allowed-address field.

    This is positional: if a LAN entry is listed before the tunnel
    address, the LAN entry wins.
    """
    if not allowed_address:
        return NOT_AVAILABLE
    match = IPV4_PATTERN.search(allowed_address)
    return match.group(1) if match else NOT_AVAILABLE


def extract_local_networks(
    allowed_address: str | None,
    infrastructure_prefixes: tuple[str, ...],
) -> tuple[str, ...]:
    """Return the LAN entries of the allowed-address field.

    The entry holding the tunnel address is dropped, as is any entry
    containing an infrastructure prefix. Order and duplicates are kept;
    empty pieces such as a trailing comma are dropped.
    """
    if not allowed_address:
        return ()

    entries = [entry.strip() for entry in allowed_address.split(",")]

    # Matches never span a comma, so the first entry holding a dotted
    # quad is where the tunnel address came from.
    for index, entry in enumerate(entries):
        if IPV4_PATTERN.search(entry):
            del entries[index]
            break

    return tuple(
        entry for entry in entries
        if entry and not any(prefix in entry for prefix in infrastructure_prefixes)
    )


def normalize_peer(
    record: RawPeerRecord,
    rules: ClassificationRules,
    status: PeerStatus = PeerStatus.INACTIVE,
) -> NormalizedPeer:
    """Normalize a raw record. The status is supplied by the classifier."""
    return NormalizedPeer(
        id=record.identifier,
        name=resolve_name(record),
        tunnel_address=extract_tunnel_address(record.allowed_address),
        local_networks=extract_local_networks(
            record.allowed_address, rules.infrastructure_prefixes
        ),
        status=status,
        last_handshake=record.last_handshake or NEVER,
        comment=record.comment or "",
        endpoint_address=record.endpoint_address or NOT_AVAILABLE,
        interface=record.interface,
        disabled=record.disabled,
    )
