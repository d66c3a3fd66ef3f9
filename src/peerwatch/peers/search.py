"""
Search and status filtering over normalized peers.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from collections.abc import Sequence
from dataclasses import dataclass, replace

from peerwatch.peers.models import STATUS_ALL, NormalizedPeer, PeerStatus


def parse_status_filter(status: str | PeerStatus | None) -> PeerStatus | None:
    """Parse a status filter. Returns None for "all".

    Raises:
        ValueError: If the value is neither "all" nor a known status
    """
    if status is None or status == STATUS_ALL:
        return None
    if isinstance(status, PeerStatus):
        return status
    return PeerStatus(status)


def matches_query(peer: NormalizedPeer, query: str) -> bool:
    """Case-insensitive match against name, tunnel address or comment."""
    if not query:
        return True
    needle = query.lower()
    return (
        needle in peer.name.lower()
        or query in peer.tunnel_address
        or needle in peer.comment.lower()
    )


def filter_peers(
    peers: Sequence[NormalizedPeer],
    query: str = "",
    status: str | PeerStatus | None = STATUS_ALL,
) -> list[NormalizedPeer]:
    """Apply the text and status predicates. Input order is preserved.

    Args:
        peers: Normalized peers
        query: Free-text search, empty matches everything
        status: "all" or a PeerStatus value

    Returns:
        Peers matching both predicates
    """
    wanted = parse_status_filter(status)
    return [
        peer for peer in peers
        if matches_query(peer, query)
        and (wanted is None or peer.status == wanted)
    ]


@dataclass(frozen=True)
class PeerView:
    """Search term, status filter and loaded peers for one display."""

    peers: tuple[NormalizedPeer, ...] = ()
    query: str = ""
    status_filter: str = STATUS_ALL

    @property
    def visible(self) -> list[NormalizedPeer]:
        """Peers passing the current search and filter."""
        return filter_peers(self.peers, self.query, self.status_filter)

    def with_query(self, query: str) -> "PeerView":
        return replace(self, query=query)

    def with_status(self, status: str | PeerStatus) -> "PeerView":
        # Validate eagerly so a bad filter never reaches rendering
        parsed = parse_status_filter(status)
        return replace(self, status_filter=parsed.value if parsed else STATUS_ALL)

    def with_peers(self, peers: Sequence[NormalizedPeer]) -> "PeerView":
        """Swap in a freshly loaded list, keeping search and filter."""
        return replace(self, peers=tuple(peers))
