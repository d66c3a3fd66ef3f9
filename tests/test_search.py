"""
Unit tests for peers.search module.
"""

import pytest

from peerwatch.peers.models import NormalizedPeer, PeerStatus
from peerwatch.peers.search import PeerView, filter_peers, parse_status_filter


@pytest.fixture
def peers() -> list[NormalizedPeer]:
    return [
        NormalizedPeer("*1", "MC7", "100.100.100.7", ("192.168.7.0/24",), PeerStatus.RESERVED, comment="Sucursal Norte"),
        NormalizedPeer("*2", "MC8", "100.100.100.8", (), PeerStatus.STATIC_OVERRIDE),
        NormalizedPeer("*3", "Bodega", "100.100.100.99", (), PeerStatus.ACTIVE, comment="mc99 temporal"),
        NormalizedPeer("*4", "MC40", "100.100.100.40", (), PeerStatus.INACTIVE),
        NormalizedPeer("*5", "unnamed", "N/A", (), PeerStatus.INACTIVE),
    ]


def ids(peers: list[NormalizedPeer]) -> list[str]:
    return [peer.id for peer in peers]


# ============================================================================
# filter_peers Tests
# ============================================================================


class TestFilterPeers:
    """Tests for the combined text and status predicates."""

    def test_identity(self, peers) -> None:
        assert filter_peers(peers, "", "all") == peers

    def test_defaults_are_identity(self, peers) -> None:
        assert filter_peers(peers) == peers

    def test_name_is_case_insensitive(self, peers) -> None:
        assert ids(filter_peers(peers, "mc4")) == ["*4"]

    def test_comment_is_case_insensitive(self, peers) -> None:
        assert ids(filter_peers(peers, "NORTE")) == ["*1"]

    def test_matches_comment_or_name(self, peers) -> None:
        assert ids(filter_peers(peers, "MC99")) == ["*3"]

    def test_tunnel_address(self, peers) -> None:
        assert ids(filter_peers(peers, "100.100.100.4")) == ["*4"]

    def test_status_only(self, peers) -> None:
        assert ids(filter_peers(peers, status="inactive")) == ["*4", "*5"]

    def test_status_enum(self, peers) -> None:
        assert ids(filter_peers(peers, status=PeerStatus.STATIC_OVERRIDE)) == ["*2"]

    def test_text_and_status(self, peers) -> None:
        assert ids(filter_peers(peers, "100.100.100", "reserved")) == ["*1"]

    def test_no_matches(self, peers) -> None:
        assert filter_peers(peers, "zzz") == []

    def test_preserves_order(self, peers) -> None:
        assert ids(filter_peers(peers, "mc")) == ["*1", "*2", "*3", "*4"]

    def test_unknown_status_rejected(self, peers) -> None:
        with pytest.raises(ValueError):
            filter_peers(peers, status="reserved-ddns")


class TestParseStatusFilter:
    """Tests for status filter parsing."""

    def test_all(self) -> None:
        assert parse_status_filter("all") is None
        assert parse_status_filter(None) is None

    def test_values(self) -> None:
        assert parse_status_filter("static-override") == PeerStatus.STATIC_OVERRIDE
        assert parse_status_filter(PeerStatus.ACTIVE) == PeerStatus.ACTIVE


# ============================================================================
# PeerView Tests
# ============================================================================


class TestPeerView:
    """Tests for the immutable view state."""

    def test_empty_view(self) -> None:
        assert PeerView().visible == []

    def test_updates_return_new_views(self, peers) -> None:
        view = PeerView().with_peers(peers)
        searched = view.with_query("mc")
        filtered = searched.with_status("inactive")

        assert ids(view.visible) == ["*1", "*2", "*3", "*4", "*5"]
        assert ids(searched.visible) == ["*1", "*2", "*3", "*4"]
        assert ids(filtered.visible) == ["*4"]
        assert view.query == ""
        assert view.status_filter == "all"

    def test_reload_keeps_search(self, peers) -> None:
        view = PeerView().with_query("mc8").with_peers(peers)
        assert ids(view.visible) == ["*2"]
        assert ids(view.with_peers(peers[:1]).visible) == []

    def test_with_status_validates(self) -> None:
        with pytest.raises(ValueError):
            PeerView().with_status("bogus")

    def test_with_status_all(self, peers) -> None:
        view = PeerView(peers=tuple(peers)).with_status("active").with_status("all")
        assert len(view.visible) == 5
