"""
Peer processing pipeline.

Raw RouterOS records go through normalization, classification and
aggregation. ``PeerMonitor`` ties the pipeline to a data source.
"""

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from netaddr import IPAddress, IPNetwork, IPSet, AddrFormatError

from peerwatch.peers.aggregator import aggregate
from peerwatch.peers.classifier import StatusClassifier
from peerwatch.peers.models import (
    AggregateStats,
    ClassificationRules,
    NormalizedPeer,
    RawPeerRecord,
)
from peerwatch.peers.normalizer import normalize_peer, resolve_name
from peerwatch.peers.source import PeerSourceError


class PeerDataError(TypeError):
    """Raised when raw peer data is not a list of JSON objects."""


class PeerSource(Protocol):
    async def fetch_peers_async(self) -> list[dict[str, Any]]: ...


def process_peers(
    raw_peers: Sequence[Mapping[str, Any]],
    rules: ClassificationRules | None = None,
) -> list[NormalizedPeer]:
    """Normalize and classify a batch of raw peer records.

    Args:
        raw_peers: Decoded JSON array from the router
        rules: Classification tables (defaults apply when omitted)

    Returns:
        One NormalizedPeer per input record, in input order

    Raises:
        PeerDataError: If the input is not a list of objects
    """
    if not isinstance(raw_peers, (list, tuple)):
        raise PeerDataError(
            f"Expected a list of peer records, got {type(raw_peers).__name__}"
        )

    rules = rules or ClassificationRules()
    classifier = StatusClassifier(rules)
    peers = []

    for index, item in enumerate(raw_peers):
        if not isinstance(item, Mapping):
            raise PeerDataError(
                f"Peer record {index} is {type(item).__name__}, expected an object"
            )
        record = RawPeerRecord.from_dict(item)
        status = classifier.classify(record.last_handshake, resolve_name(record))
        peers.append(normalize_peer(record, rules, status))

    return peers


@dataclass(frozen=True)
class RefreshResult:
    """Outcome of a single refresh."""
    success: bool
    peers: tuple[NormalizedPeer, ...] = ()
    stats: AggregateStats = field(default_factory=AggregateStats)
    error: str | None = None


class PeerMonitor:
    """Fetch, process and aggregate peers on demand.

    Each refresh returns a fresh result; nothing is merged with previous
    refreshes and overlapping calls are not serialized.
    """

    def __init__(self, source: PeerSource, rules: ClassificationRules | None = None):
        self.source = source
        self.rules = rules or ClassificationRules()

    def process(self, raw_peers: Sequence[Mapping[str, Any]]) -> RefreshResult:
        """Run the pipeline over already-fetched records."""
        peers = process_peers(raw_peers, self.rules)
        return RefreshResult(
            success=True,
            peers=tuple(peers),
            stats=aggregate(peers, self.rules.pool_capacity),
        )

    async def refresh_async(self) -> RefreshResult:
        try:
            raw = await self.source.fetch_peers_async()
            return self.process(raw)
        except (PeerSourceError, PeerDataError) as e:
            return RefreshResult(success=False, error=str(e))

    def refresh(self) -> RefreshResult:
        """Synchronous refresh."""

        async def _refresh() -> RefreshResult:
            try:
                return await self.refresh_async()
            finally:
                # Pooled clients must not outlive the event loop
                close = getattr(self.source, "close", None)
                if close is not None:
                    await close()

        return asyncio.run(_refresh())


def free_tunnel_addresses(
    peers: Sequence[NormalizedPeer],
    subnet: str,
    limit: int | None = None,
) -> list[str]:
    """List host addresses of the tunnel subnet not assigned to any peer.

    Args:
        peers: Normalized peers
        subnet: Tunnel overlay CIDR, e.g. "100.100.100.0/24"
        limit: Stop after this many addresses (0 or less lists none)

    Raises:
        ValueError: If the subnet is not a valid CIDR
    """
    try:
        net = IPNetwork(subnet)
    except (AddrFormatError, ValueError) as e:
        raise ValueError(f"Invalid tunnel subnet: {subnet}") from e

    used = IPSet()
    for peer in peers:
        try:
            used.add(IPAddress(peer.tunnel_address))
        except (AddrFormatError, ValueError):
            # "N/A" or a dotted quad with out-of-range octets
            continue

    # Network and broadcast addresses are not assignable below /31
    hosts = net.iter_hosts() if net.prefixlen < 31 else iter(net)

    free = []
    for address in hosts:
        if limit is not None and len(free) >= limit:
            break
        if address in used:
            continue
        free.append(str(address))
    return free
