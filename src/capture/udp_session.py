"""
UDP capture session: bind, receive, persist, repeat.
"""
import socket
import threading
import time
from typing import Any, Dict, Optional, Tuple

import click

from .config import CaptureConfig
from .dump_writer import DumpWriter
from .errors import BindError, ClockError, PersistError, ReceiveError


class CaptureSession:
    """Receive datagrams on one UDP socket and dump each one to its own file.

    Everything runs on the calling thread. Each datagram is written before the
    next receive, so a slow disk pushes back onto the OS receive buffer (and
    the OS drops what doesn't fit). ``stop()`` may be called from another
    thread; the loop notices it between receives.
    """

    def __init__(self, config: CaptureConfig, writer: Optional[DumpWriter] = None,
                 quiet: bool = False):
        self.config = config
        self.writer = writer or DumpWriter(config.output_dir)
        self.quiet = quiet

        self._sock: Optional[socket.socket] = None
        self._buffer = bytearray(config.buffer_size)
        self._view = memoryview(self._buffer)
        self._stop_event = threading.Event()
        self.stats: Dict[str, Any] = {
            'packets_total': 0,
            'bytes_total': 0,
            'receive_errors': 0,
            'persist_errors': 0,
            'dropped_clock': 0,
            'start_ts': None,
            'end_ts': None,
        }

    @property
    def address(self) -> Tuple[str, int]:
        """Actual (ip, port) the socket is bound to."""
        if self._sock is None:
            raise RuntimeError("Session is not open")
        host, port = self._sock.getsockname()[:2]
        return host, port

    @property
    def is_open(self) -> bool:
        return self._sock is not None

    def open(self) -> None:
        """Create the output directory and bind the socket.

        Raises SetupError or BindError; both are fatal.
        """
        self.writer.ensure_output_dir()

        family = socket.AF_INET6 if self.config.is_ipv6 else socket.AF_INET
        sock = None
        try:
            sock = socket.socket(family, socket.SOCK_DGRAM)
            sock.bind((self.config.bind_address, self.config.bind_port))
        except OSError as e:
            if sock is not None:
                sock.close()
            raise BindError(
                f"Failed to bind to {self.config.bind_address}:{self.config.bind_port}: {e}"
            ) from e
        sock.settimeout(self.config.poll_interval)
        self._sock = sock

        host, port = self.address
        click.echo(f"Listening for UDP packets on {host}:{port}...")

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    def stop(self) -> None:
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def receive(self) -> Optional[Tuple[memoryview, str, int]]:
        """Block for one datagram.

        Returns (payload view, sender ip, sender port), or None when the poll
        interval elapsed with nothing to read. The payload view aliases the
        session buffer and is only valid until the next receive.
        """
        try:
            size, source = self._sock.recvfrom_into(self._buffer)
        except socket.timeout:
            return None
        except OSError as e:
            raise ReceiveError(str(e)) from e
        return self._view[:size], source[0], source[1]

    def handle(self, payload, sender_ip: str, sender_port: int) -> bool:
        """Persist one datagram. Per-datagram failures are reported, not raised."""
        try:
            datagram = self.writer.persist(payload, sender_ip, sender_port)
        except ClockError as e:
            self.stats['dropped_clock'] += 1
            click.echo(f"Error timestamping packet: {e}", err=True)
            return False
        except PersistError as e:
            self.stats['persist_errors'] += 1
            click.echo(f"Error saving packet to file: {e}", err=True)
            return False

        self.stats['packets_total'] += 1
        self.stats['bytes_total'] += datagram.size
        if not self.quiet:
            click.echo(f"Received packet from {datagram.sender}")
            click.echo(f"Packet saved to: {datagram.file_path(self.writer.output_dir)}")
        return True

    def run(self, max_packets: Optional[int] = None,
            duration: Optional[float] = None) -> Dict[str, Any]:
        """Receive-and-persist loop.

        Runs until ``stop()`` is called, ``max_packets`` datagrams were saved,
        or ``duration`` seconds passed. Opens the session if needed and closes
        it on the way out. Returns the capture summary.
        """
        if not self.is_open:
            self.open()

        self.stats['start_ts'] = time.time()
        deadline = self.stats['start_ts'] + duration if duration else None

        try:
            while not self.stopped:
                if deadline is not None and time.time() >= deadline:
                    break

                try:
                    received = self.receive()
                except ReceiveError as e:
                    self.stats['receive_errors'] += 1
                    click.echo(f"Error receiving packet: {e}", err=True)
                    continue
                if received is None:
                    continue

                payload, sender_ip, sender_port = received
                self.handle(payload, sender_ip, sender_port)

                if max_packets and self.stats['packets_total'] >= max_packets:
                    break
        finally:
            self.stats['end_ts'] = time.time()
            self.close()

        return self.summary()

    def summary(self) -> Dict[str, Any]:
        return {
            'bind_address': self.config.bind_address,
            'bind_port': self.config.bind_port,
            'output_dir': self.writer.output_dir,
            'buffer_size': self.config.buffer_size,
            'stats_summary': self.stats.copy(),
        }
