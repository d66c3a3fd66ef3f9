"""
Aggregate statistics over normalized peers.
"""

from collections import Counter
from collections.abc import Iterable

from peerwatch.peers.models import (
    DEFAULT_POOL_CAPACITY,
    AggregateStats,
    NormalizedPeer,
    PeerStatus,
)


def aggregate(
    peers: Iterable[NormalizedPeer],
    pool_capacity: int = DEFAULT_POOL_CAPACITY,
) -> AggregateStats:
    """Count peers per status and compute remaining pool capacity.

    ``available`` goes negative when the pool is over-provisioned; it is
    not clamped.
    """
    counts: Counter[PeerStatus] = Counter()
    total = 0
    for peer in peers:
        counts[peer.status] += 1
        total += 1

    return AggregateStats(
        total=total,
        active=counts[PeerStatus.ACTIVE],
        inactive=counts[PeerStatus.INACTIVE],
        reserved=counts[PeerStatus.RESERVED],
        static_override=counts[PeerStatus.STATIC_OVERRIDE],
        available=pool_capacity - total,
    )
