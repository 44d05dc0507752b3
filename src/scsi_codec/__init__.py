"""
SCSI Codec Library

A Python library for the SCSI data structures exchanged when managing
persistent reservations and discovering supported commands: TransportID
encoding, decoding and packing, and REPORT SUPPORTED OPERATION CODES
parameter data parsing.

Version: 1.0.0
"""

from .client import ScsiCommandClient
from .exceptions import (
    CapacityExceededError,
    LengthViolationError,
    ParseError,
    SCSICodecError,
    TransportError,
    TransportIdIOError,
    TransportIdParseError,
    TruncatedInputError,
    UnrecognizedNotationError,
)
from .models import (
    CommandDescriptor,
    CommandSupport,
    CommandTimeoutDescriptor,
    DecodedTransportId,
    OneCommandInfo,
    SortPolicy,
)
from .parsers import (
    SupportedOpcodesParser,
    TransportIdListParser,
    TransportIdParser,
    build_transport_ids,
    sort_descriptors,
)
from .protocol import (
    ProtocolIdentifier,
    TransportIdArray,
    compact_transport_id_array,
    encode_transport_id,
    get_opcode_sa_name,
)

__version__ = "1.0.0"
__all__ = [
    "ScsiCommandClient",
    "SCSICodecError",
    "UnrecognizedNotationError",
    "LengthViolationError",
    "TransportIdParseError",
    "ParseError",
    "CapacityExceededError",
    "TruncatedInputError",
    "TransportIdIOError",
    "TransportError",
    "CommandDescriptor",
    "CommandSupport",
    "CommandTimeoutDescriptor",
    "DecodedTransportId",
    "OneCommandInfo",
    "SortPolicy",
    "SupportedOpcodesParser",
    "TransportIdListParser",
    "TransportIdParser",
    "build_transport_ids",
    "sort_descriptors",
    "ProtocolIdentifier",
    "TransportIdArray",
    "compact_transport_id_array",
    "encode_transport_id",
    "get_opcode_sa_name"
]
