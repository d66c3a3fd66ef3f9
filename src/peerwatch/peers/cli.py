"""
WireGuard peer CLI commands.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape

from peerwatch.config import ConfigError, PeerwatchConfig, get_config
from peerwatch.logging_config import get_logger
from peerwatch.peers.models import STATUS_ALL, AggregateStats, NormalizedPeer, PeerStatus
from peerwatch.peers.pipeline import (
    PeerDataError,
    PeerMonitor,
    RefreshResult,
    free_tunnel_addresses,
)
from peerwatch.peers.search import filter_peers
from peerwatch.peers.source import RouterOSClient

console = Console()
logger = get_logger(__name__)

STATUS_CHOICES = [STATUS_ALL] + [status.value for status in PeerStatus]

STATUS_BADGES = {
    PeerStatus.ACTIVE: "[green]Active[/green]",
    PeerStatus.INACTIVE: "[yellow]Inactive[/yellow]",
    PeerStatus.RESERVED: "[blue]DDNS[/blue]",
    PeerStatus.STATIC_OVERRIDE: "[magenta]Static[/magenta]",
}


def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}")
    sys.exit(1)


def _get_config() -> PeerwatchConfig:
    try:
        return get_config()
    except ConfigError as e:
        _fail(str(e))


def _load_peers(file: str | None) -> RefreshResult:
    """Load peers from a saved JSON export or from the router."""
    try:
        monitor = PeerMonitor(RouterOSClient(), _get_config().rules())
    except ConfigError as e:
        _fail(str(e))

    if file:
        try:
            raw = json.loads(Path(file).read_text())
        except (OSError, ValueError) as e:
            _fail(f"Could not read {file}: {e}")
        try:
            return monitor.process(raw)
        except PeerDataError as e:
            _fail(str(e))

    with console.status("[cyan]Fetching peers from router...[/cyan]"):
        result = monitor.refresh()

    if not result.success:
        _fail(result.error)
    return result


@click.group()
def peers():
    """WireGuard peer monitoring.

    Peers are read from the RouterOS REST API configured with
    PEERWATCH_ROUTER_URL, or from a saved JSON export with --file.
    """
    pass


@peers.command("list")
@click.option("--search", "-s", default="", help="Match name, tunnel IP or comment")
@click.option(
    "--status",
    type=click.Choice(STATUS_CHOICES),
    default=STATUS_ALL,
    help="Only show peers with this status",
)
@click.option("--file", "-f", type=click.Path(exists=True), help="Read peers from a JSON export")
@click.option("--json", "-j", "output_json", is_flag=True, help="Output as JSON")
def list_peers(search: str, status: str, file: str | None, output_json: bool):
    """List peers with their status.

    Examples:
        peerwatch peers list
        peerwatch peers list --status inactive
        peerwatch peers list --search mc14 --file peers.json
    """
    result = _load_peers(file)
    visible = filter_peers(result.peers, search, status)
    logger.debug("Showing %d of %d peers", len(visible), len(result.peers))

    if output_json:
        click.echo(json.dumps({
            "peers": [peer.to_dict() for peer in visible],
            "stats": result.stats.to_dict(),
        }, indent=2))
        return

    _output_stats(result.stats)
    console.print()
    _output_peer_table(visible)


@peers.command("stats")
@click.option("--file", "-f", type=click.Path(exists=True), help="Read peers from a JSON export")
@click.option("--json", "-j", "output_json", is_flag=True, help="Output as JSON")
def stats(file: str | None, output_json: bool):
    """Show peer counts and remaining pool capacity."""
    result = _load_peers(file)

    if output_json:
        click.echo(json.dumps(result.stats.to_dict(), indent=2))
        return

    _output_stats(result.stats)


@peers.command("free")
@click.option("--subnet", help="Tunnel subnet CIDR (defaults to PEERWATCH_TUNNEL_SUBNET)")
@click.option("--limit", "-n", type=click.IntRange(min=0), default=10, show_default=True, help="Maximum addresses to list")
@click.option("--file", "-f", type=click.Path(exists=True), help="Read peers from a JSON export")
def free(subnet: str | None, limit: int, file: str | None):
    """List tunnel addresses not assigned to any peer.

    Examples:
        peerwatch peers free --subnet 100.100.100.0/24
        peerwatch peers free -n 5
    """
    subnet = subnet or _get_config().tunnel_subnet
    if not subnet:
        _fail("No tunnel subnet given (use --subnet or PEERWATCH_TUNNEL_SUBNET)")

    result = _load_peers(file)

    try:
        addresses = free_tunnel_addresses(result.peers, subnet, limit=limit)
    except ValueError as e:
        _fail(str(e))

    if not addresses:
        console.print(f"[yellow]No free addresses in {subnet}[/yellow]")
        return

    table = Table(title=f"Free Tunnel Addresses: {subnet}")
    table.add_column("#", style="dim")
    table.add_column("Address", style="cyan")
    for index, address in enumerate(addresses, 1):
        table.add_row(str(index), address)
    console.print(table)


def _output_stats(stats: AggregateStats) -> None:
    """Output the stats panel."""
    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", justify="right")

    table.add_row("Total", str(stats.total))
    table.add_row("Active", f"[green]{stats.active}[/green]")
    table.add_row("Inactive", f"[yellow]{stats.inactive}[/yellow]")
    table.add_row("DDNS", f"[blue]{stats.reserved}[/blue]")
    table.add_row("Static", f"[magenta]{stats.static_override}[/magenta]")

    available_style = "red" if stats.available < 0 else "white"
    table.add_row("Available", f"[{available_style}]{stats.available}[/{available_style}]")

    console.print(Panel(table, title="[bold]WireGuard Peers[/bold]", expand=False))


def _output_peer_table(peers: list[NormalizedPeer]) -> None:
    """Output the peer table."""
    if not peers:
        console.print("[dim]No peers found[/dim]")
        return

    table = Table()
    table.add_column("ID", style="bold")
    table.add_column("WireGuard IP", style="cyan")
    table.add_column("LANs")
    table.add_column("Status")
    table.add_column("Last Handshake")
    table.add_column("Comment", style="dim")

    for peer in peers:
        table.add_row(
            escape(peer.name),
            escape(peer.tunnel_address),
            escape(", ".join(peer.local_networks)) or "-",
            STATUS_BADGES.get(peer.status, peer.status.value),
            escape(peer.last_handshake),
            escape(peer.comment) or "-",
        )

    console.print(table)
