"""
SCSI Codec Data Models

Structured data classes for decoded TransportIDs and supported operation code
responses. Provides type safety and clear interfaces instead of generic
dictionaries.

References:
- SPC-4 Section 7.5.4 "TransportID identifiers"
- SPC-4 Section 6.35 "REPORT SUPPORTED OPERATION CODES command"
"""

from dataclasses import dataclass
from enum import IntEnum

from .protocol.constants import RSOC_DESCRIPTOR_LEN, RSOC_DESCRIPTOR_WITH_TIMEOUTS_LEN
from .protocol.types import ProtocolIdentifier


class SortPolicy(IntEnum):
    """Ordering applied to an all-commands descriptor list."""
    UNSORTED = 0     # Keep the order the device returned
    NUMERIC = 1      # Opcode, then service action
    ALPHABETIC = 2   # Resolved command name, byte-wise


class CommandSupport(IntEnum):
    """
    SUPPORT field of the one command parameter data.

    Reference: SPC-4 Section 6.35.3, Table 250
    """
    NOT_AVAILABLE = 0     # Data about the command is not currently available
    NOT_SUPPORTED = 1     # Command is not supported
    STANDARD = 3          # Supported, conforming to a SCSI standard
    VENDOR_SPECIFIC = 5   # Supported, in a vendor specific manner


@dataclass(frozen=True)
class CommandTimeoutDescriptor:
    """
    Command timeouts descriptor.

    Reference: SPC-4 Section 6.35.4, Table 251

    Timeout values of 0 mean "not specified" and are reported as None.
    """

    descriptor_length: int                 # Bytes 0-1, always 10 when valid
    command_specific: int                  # Byte 3
    nominal_timeout: int | None            # Bytes 4-7, seconds
    recommended_timeout: int | None        # Bytes 8-11, seconds


@dataclass(frozen=True)
class CommandDescriptor:
    """
    One command descriptor from an all-commands response.

    Reference: SPC-4 Section 6.35.2, Table 248
    """

    offset: int                          # Offset of the descriptor in the response buffer
    raw: bytes                           # Descriptor bytes (8 or 20)
    opcode: int                          # Byte 0
    service_action_valid: bool           # SERVACTV: byte 5 bit 0
    service_action: int                  # Bytes 2-3, 0 when not valid
    cdb_length: int                      # Bytes 6-7
    timeout_descriptor_present: bool     # CTDP: byte 5 bit 1
    cdlp: int = 0                        # Byte 5 bits 3:2, command duration limit page
    mlu: int = 0                         # Byte 5 bits 5:4, multiple logical units
    rwcdlp: bool = False                 # Byte 5 bit 6, read/write CDL policy
    timeouts: CommandTimeoutDescriptor | None = None  # Bytes 8-19 when CTDP is set

    @property
    def length(self) -> int:
        """Descriptor length in bytes."""
        return RSOC_DESCRIPTOR_WITH_TIMEOUTS_LEN if self.timeout_descriptor_present else RSOC_DESCRIPTOR_LEN

    @property
    def nominal_timeout(self) -> int | None:
        """Nominal command processing timeout in seconds, None if unspecified."""
        return self.timeouts.nominal_timeout if self.timeouts else None

    @property
    def recommended_timeout(self) -> int | None:
        """Recommended command timeout in seconds, None if unspecified."""
        return self.timeouts.recommended_timeout if self.timeouts else None

    @property
    def command_specific(self) -> int | None:
        return self.timeouts.command_specific if self.timeouts else None

    @property
    def sort_service_action(self) -> int:
        """Service action used for ordering (0 when not valid)."""
        return self.service_action if self.service_action_valid else 0


@dataclass(frozen=True)
class OneCommandInfo:
    """
    One command parameter data (reporting options 1-3).

    Reference: SPC-4 Section 6.35.3, Table 249
    """

    support: int                        # SUPPORT: byte 1 bits 2:0
    cdb_size: int                       # Bytes 2-3
    usage_data: bytes                   # CDB usage bitmap, cdb_size bytes
    timeout_descriptor_present: bool    # CTDP: byte 1 bit 7
    cdlp: int = 0                       # Byte 1 bits 4:3
    mlu: int = 0                        # Byte 1 bits 6:5
    rwcdlp: bool = False                # Byte 0 bit 0
    timeouts: CommandTimeoutDescriptor | None = None

    @property
    def is_supported(self) -> bool:
        """Check if the device reports the command as supported."""
        return self.support in (CommandSupport.STANDARD, CommandSupport.VENDOR_SPECIFIC)


@dataclass
class DecodedTransportId:
    """
    Fields recovered from one binary TransportID.

    Only the fields that apply to the protocol are set.

    Reference: SPC-4 Section 7.6.4 "TransportID identifiers"
    """

    protocol_id: int                    # Byte 0 bits 3:0
    format_code: int                    # Byte 0 bits 7:6
    length: int                         # Bytes occupied by this TransportID

    address: int | None = None          # SAS address, FCP N_Port name or SBP EUI-64
    port_identifier: bytes | None = None  # SRP initiator port identifier (16 bytes)
    scsi_address: int | None = None     # SPI SCSI address
    relative_port: int | None = None    # SPI relative target port identifier
    routing_id: int | None = None       # SOP routing identifier
    iscsi_name: str | None = None       # iSCSI name, including any ",i,0x" suffix

    @property
    def protocol(self) -> ProtocolIdentifier | None:
        """Protocol identifier as an enum, None if not a known value."""
        try:
            return ProtocolIdentifier(self.protocol_id)
        except ValueError:
            return None

    @property
    def has_session_id(self) -> bool:
        """Check if an iSCSI TransportID carries an initiator session id."""
        return self.protocol_id == ProtocolIdentifier.ISCSI and self.format_code == 1
