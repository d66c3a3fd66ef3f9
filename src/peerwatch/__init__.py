"""
peerwatch - WireGuard Peer Monitoring

Fetches WireGuard peers from a MikroTik router, classifies each link
(active, inactive, DDNS-reserved, static override) and reports pool usage.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "0.1.0"
__author__ = "DNS Science.io"
__copyright__ = "Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company"
