"""
Capture configuration.

Values come from the command line, the environment, or the fixed defaults
used by the N1MM logging setup.
"""
import ipaddress
import os
from dataclasses import dataclass

from .errors import ConfigError

BUFFER_SIZE = 65536  # 2^16, max UDP payload over IPv4 is 65527

DEFAULT_ADDRESS = "127.0.0.1"
DEFAULT_PORT = 12060
DEFAULT_OUTPUT_DIR = "C:/ftpup/N1MM/newfiles"
DEFAULT_POLL_INTERVAL = 0.5

ENV_ADDRESS = "UDPDUMP_ADDRESS"
ENV_PORT = "UDPDUMP_PORT"
ENV_OUTPUT_DIR = "UDPDUMP_OUTPUT_DIR"


def parse_address(value: str) -> str:
    """Return the normalized textual form of an IPv4/IPv6 address."""
    try:
        return str(ipaddress.ip_address(str(value).strip()))
    except ValueError:
        raise ConfigError(f"Invalid IP address: {value!r}") from None


def parse_port(value) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid port: {value!r}") from None
    if not 0 <= port <= 65535:
        raise ConfigError(f"Port out of range (0-65535): {port}")
    return port


def parse_buffer_size(value) -> int:
    try:
        size = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid buffer size: {value!r}") from None
    if not 1 <= size <= BUFFER_SIZE:
        raise ConfigError(f"Buffer size must be between 1 and {BUFFER_SIZE}")
    return size


def parse_poll_interval(value) -> float:
    """Receive timeout in seconds; without one a stop request is never seen."""
    try:
        interval = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid poll interval: {value!r}") from None
    if not interval > 0:
        raise ConfigError("Poll interval must be positive")
    return interval


@dataclass
class CaptureConfig:
    """Where to listen and where to write captures."""
    bind_address: str = DEFAULT_ADDRESS
    bind_port: int = DEFAULT_PORT
    output_dir: str = DEFAULT_OUTPUT_DIR
    buffer_size: int = BUFFER_SIZE
    poll_interval: float = DEFAULT_POLL_INTERVAL

    def __post_init__(self):
        self.bind_address = parse_address(self.bind_address)
        self.bind_port = parse_port(self.bind_port)
        if not self.output_dir:
            raise ConfigError("Output directory must not be empty")
        self.output_dir = os.fspath(self.output_dir)
        self.buffer_size = parse_buffer_size(self.buffer_size)
        self.poll_interval = parse_poll_interval(self.poll_interval)

    @property
    def is_ipv6(self) -> bool:
        return ipaddress.ip_address(self.bind_address).version == 6

