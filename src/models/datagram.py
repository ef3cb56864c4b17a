# Datagram data model
"""
Captured datagram model for udpdump.

A CapturedDatagram only lives between the socket read and the file write.
It is immutable so the payload written is exactly the payload received.
"""

from dataclasses import dataclass
import os

DUMP_PREFIX = "packet"
DUMP_SUFFIX = ".dump"


@dataclass(frozen=True)  # IMMUTABLE: payload must reach disk unchanged
class CapturedDatagram:
    """
    One UDP datagram as delivered by the network stack.

    Timestamps are nanoseconds since the Unix epoch.
    """
    payload: bytes
    """Raw datagram bytes, no header or encoding."""

    sender_ip: str
    sender_port: int

    captured_ns: int
    """Capture instant, nanoseconds since 1970-01-01."""

    @property
    def size(self) -> int:
        return len(self.payload)

    @property
    def sender(self) -> str:
        return f"{self.sender_ip}:{self.sender_port}"

    @property
    def file_name(self) -> str:
        """packet_<ip>_<port>_<nanos>.dump"""
        return dump_file_name(self.sender_ip, self.sender_port, self.captured_ns)

    def file_path(self, output_dir: str) -> str:
        return dump_file_path(output_dir, self.file_name)


def dump_file_name(sender_ip: str, sender_port: int, captured_ns: int) -> str:
    return f"{DUMP_PREFIX}_{sender_ip}_{sender_port}_{captured_ns}{DUMP_SUFFIX}"


def dump_file_path(output_dir: str, file_name: str) -> str:
    # Keep forward slash joins so Windows style defaults stay readable
    return f"{os.fspath(output_dir).rstrip('/')}/{file_name}"
