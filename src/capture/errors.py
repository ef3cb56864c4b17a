"""
Error taxonomy for UDP capture.

ConfigError, SetupError and BindError are fatal at startup.
ReceiveError, ClockError and PersistError only cost the current datagram.
"""


class UdpDumpError(Exception):
    """Base class for all capture errors."""


class ConfigError(UdpDumpError):
    """Invalid address, port or other configuration value."""


class SetupError(UdpDumpError):
    """Output directory could not be created."""


class BindError(UdpDumpError):
    """UDP socket could not be bound."""


class ReceiveError(UdpDumpError):
    """OS-level error while receiving a datagram."""


class ClockError(UdpDumpError):
    """Wall clock reports a time before the Unix epoch."""


class PersistError(UdpDumpError):
    """Datagram payload could not be written to disk."""


FATAL_ERRORS = (ConfigError, SetupError, BindError)
