"""
UDP capture subsystem.
"""

from .config import CaptureConfig, BUFFER_SIZE
from .dump_writer import DumpWriter
from .errors import (
    UdpDumpError,
    ConfigError,
    SetupError,
    BindError,
    ReceiveError,
    ClockError,
    PersistError,
)
from .udp_session import CaptureSession

__all__ = [
    'CaptureConfig',
    'BUFFER_SIZE',
    'DumpWriter',
    'CaptureSession',
    'UdpDumpError',
    'ConfigError',
    'SetupError',
    'BindError',
    'ReceiveError',
    'ClockError',
    'PersistError',
]
