"""
peerwatch command line entry point.
"""

import click

from peerwatch import __version__
from peerwatch.logging_config import configure_logging
from peerwatch.peers.cli import peers


@click.group()
@click.version_option(__version__, prog_name="peerwatch")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write logs to this file")
def main(debug: bool, log_file: str | None):
    """peerwatch - WireGuard peer monitoring for MikroTik routers."""
    configure_logging(debug=debug, log_file=log_file)


main.add_command(peers)


if __name__ == "__main__":
    main()
