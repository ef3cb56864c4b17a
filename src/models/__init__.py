"""
Capture data models.
"""

from .datagram import CapturedDatagram, dump_file_name, dump_file_path

__all__ = [
    'CapturedDatagram',
    'dump_file_name',
    'dump_file_path',
]
