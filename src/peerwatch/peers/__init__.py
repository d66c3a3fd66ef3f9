"""
WireGuard Peer Module

Turns raw RouterOS peer records into a classified, searchable list
with aggregate statistics.
"""

from peerwatch.peers.models import (
    RawPeerRecord,
    NormalizedPeer,
    PeerStatus,
    ClassificationRules,
    AggregateStats,
)
from peerwatch.peers.normalizer import normalize_peer
from peerwatch.peers.classifier import StatusClassifier, extract_tunnel_number
from peerwatch.peers.aggregator import aggregate
from peerwatch.peers.search import filter_peers, PeerView

__all__ = [
    "RawPeerRecord",
    "NormalizedPeer",
    "PeerStatus",
    "ClassificationRules",
    "AggregateStats",
    "normalize_peer",
    "StatusClassifier",
    "extract_tunnel_number",
    "aggregate",
    "filter_peers",
    "PeerView",
]
