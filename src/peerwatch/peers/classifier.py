"""
Peer status classification.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import re

from peerwatch.peers.models import ClassificationRules, PeerStatus


TUNNEL_NUMBER_PATTERN = re.compile(r"MC(\d+)", re.IGNORECASE)

# Unit markers of a RouterOS relative time ("45s", "3m12s", "2d3h", "1w")
STALE_HANDSHAKE_MARKERS = ("h", "d", "w")


def handshake_status(last_handshake: str | None) -> PeerStatus:
    """Classify a peer by handshake recency alone.

    A handshake counts as recent when it is reported and only carries
    seconds/minutes units. This is a textual check, not a parsed duration.
    """
    if last_handshake and not any(
        marker in last_handshake for marker in STALE_HANDSHAKE_MARKERS
    ):
        return PeerStatus.ACTIVE
    return PeerStatus.INACTIVE


def extract_tunnel_number(name: str | None) -> int | None:
    """Extract the tunnel number from a name like "MC14" or "mc7-site"."""
    if not name:
        return None
    match = TUNNEL_NUMBER_PATTERN.search(name)
    if not match:
        return None
    return int(match.group(1))


class StatusClassifier:
    """Assign each peer exactly one status.

    Args:
        rules: Reserved-ID set and static-override table to apply
    """

    def __init__(self, rules: ClassificationRules | None = None):
        self.rules = rules or ClassificationRules()

    def classify(self, last_handshake: str | None, name: str | None) -> PeerStatus:
        """Classify a peer from its handshake field and display name."""
        status = handshake_status(last_handshake)

        number = extract_tunnel_number(name)
        if number is None:
            return status

        if number in self.rules.reserved_ids:
            status = PeerStatus.RESERVED
        # Checked after the reserved set so static overrides always win
        if number in self.rules.static_overrides:
            status = PeerStatus.STATIC_OVERRIDE

        return status
