"""
udpdump CLI - main entry point.
"""
import click
from .listen import listen

@click.group()
def cli():
    """udpdump - dump every received UDP datagram to its own file."""

cli.add_command(listen)

if __name__ == "__main__":
    cli()
