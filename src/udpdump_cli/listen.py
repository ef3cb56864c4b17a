"""
CLI command for UDP capture.
"""
import sys
from typing import Optional

import click

from capture.config import BUFFER_SIZE, ENV_ADDRESS, ENV_OUTPUT_DIR, ENV_PORT, CaptureConfig
from capture.errors import FATAL_ERRORS
from capture.udp_session import CaptureSession


@click.command()
@click.argument('ip_address', envvar=ENV_ADDRESS)
@click.argument('port', envvar=ENV_PORT)
@click.argument('output_directory', envvar=ENV_OUTPUT_DIR)
@click.option('--buffer-size', type=int, default=BUFFER_SIZE, show_default=True,
              help='Receive buffer size in bytes (smaller values truncate large datagrams)')
@click.option('--count', '-c', type=click.IntRange(min=1), help='Stop after this many saved packets')
@click.option('--duration', '-d', type=click.FloatRange(min=0, min_open=True),
              help='Duration in seconds (default: run until Ctrl+C)')
@click.option('--quiet', '-q', is_flag=True, help='Only report errors and the final summary')
def listen(ip_address: str, port: str, output_directory: str, buffer_size: int,
           count: Optional[int], duration: Optional[float], quiet: bool):
    """
    Listen for UDP datagrams and save each one as a .dump file.

    Files are named packet_<ip>_<port>_<nanos>.dump.

    Examples:
      udpdump listen 127.0.0.1 12060 C:/ftpup/N1MM/newfiles
      udpdump listen 0.0.0.0 12060 ./captures --count 10
    """
    try:
        config = CaptureConfig(
            bind_address=ip_address,
            bind_port=port,
            output_dir=output_directory,
            buffer_size=buffer_size,
        )
        session = CaptureSession(config, quiet=quiet)
        session.open()
    except FATAL_ERRORS as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if duration:
        click.echo(f"Duration: {duration} seconds")
    click.echo("Press Ctrl+C to stop\n")

    try:
        metadata = session.run(max_packets=count, duration=duration)
    except KeyboardInterrupt:
        click.echo("\n\nStopping capture...")
        session.stop()
        session.close()
        metadata = session.summary()

    stats = metadata['stats_summary']
    elapsed = (stats['end_ts'] or stats['start_ts'] or 0) - (stats['start_ts'] or 0)
    click.echo("\n" + "=" * 50)
    click.echo("CAPTURE SUMMARY")
    click.echo("=" * 50)
    click.echo(f"Listening on:   {metadata['bind_address']}:{metadata['bind_port']}")
    click.echo(f"Output dir:     {metadata['output_dir']}")
    click.echo(f"Duration:       {elapsed:.2f}s")
    click.echo(f"Saved Packets:  {stats['packets_total']}")
    click.echo(f"Total Bytes:    {stats['bytes_total']:,}")
    click.echo(f"Receive Errors: {stats['receive_errors']}")
    click.echo(f"Write Errors:   {stats['persist_errors'] + stats['dropped_clock']}")
