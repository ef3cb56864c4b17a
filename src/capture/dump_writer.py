"""
Writes captured datagrams to individual .dump files.
"""
import os
import time
from typing import Callable, Optional

from models.datagram import CapturedDatagram
from .errors import ClockError, PersistError, SetupError


class DumpWriter:
    """Persist datagram payloads verbatim, one new file per datagram.

    Capture timestamps come from ``clock`` (nanoseconds since the epoch).
    Within one writer they never go backwards and never repeat: a reading
    equal to or older than the previous one is bumped to previous + 1 ns.
    Files are opened with exclusive create, so an existing capture is never
    overwritten.
    """

    def __init__(self, output_dir: str, clock: Callable[[], int] = time.time_ns):
        self.output_dir = os.fspath(output_dir)
        self._clock = clock
        self._last_ns: Optional[int] = None

    def ensure_output_dir(self) -> None:
        """Create the output directory (leaf only) if missing."""
        try:
            os.mkdir(self.output_dir)
        except FileExistsError:
            if not os.path.isdir(self.output_dir):
                raise SetupError(f"Output path exists and is not a directory: {self.output_dir}")
        except OSError as e:
            raise SetupError(f"Failed to create output directory {self.output_dir}: {e}") from e

    def capture_instant(self) -> int:
        now = self._clock()
        if now < 0:
            raise ClockError(f"Time went backwards: clock reads {now} ns before epoch")
        if self._last_ns is not None and now <= self._last_ns:
            now = self._last_ns + 1
        self._last_ns = now
        return now

    def persist(self, payload, sender_ip: str, sender_port: int) -> CapturedDatagram:
        """Write ``payload`` to a new file and return what was written."""
        datagram = CapturedDatagram(
            payload=bytes(payload),
            sender_ip=sender_ip,
            sender_port=sender_port,
            captured_ns=self.capture_instant(),
        )
        path = datagram.file_path(self.output_dir)
        try:
            f = open(path, "xb")
        except FileExistsError as e:
            raise PersistError(f"Refusing to overwrite existing capture {path}") from e
        except OSError as e:
            raise PersistError(str(e)) from e

        try:
            with f:
                f.write(datagram.payload)
        except OSError as e:
            # Partial file would look like a truncated capture
            try:
                os.remove(path)
            except OSError:
                pass
            raise PersistError(str(e)) from e
        return datagram
