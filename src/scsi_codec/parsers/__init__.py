"""
SCSI parsing module.

This module provides parsers for TransportIDs, both binary and textual, and
for REPORT SUPPORTED OPERATION CODES parameter data.
"""

from .base import BaseParser
from .transport_id import TransportIdParser
from .transport_id_list import (
    CarryState,
    TransportIdLineReader,
    TransportIdListParser,
    build_transport_ids,
)
from .supported_opcodes import SupportedOpcodesParser, sort_descriptors

__all__ = [
    'BaseParser',
    'TransportIdParser',
    'CarryState',
    'TransportIdLineReader',
    'TransportIdListParser',
    'build_transport_ids',
    'SupportedOpcodesParser',
    'sort_descriptors'
]
