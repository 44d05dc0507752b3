"""
SCSI Protocol Types and Enums

Type definitions and enums for the SCSI commands and structures handled by
the codecs.
"""

from enum import IntEnum


class ProtocolIdentifier(IntEnum):
    """
    Protocol identifiers carried in the low nibble of TransportID byte 0.

    Reference: SPC-4 Section 7.6.1, Table 362 "PROTOCOL IDENTIFIER values"
    """
    FCP = 0x0       # Fibre Channel
    SPI = 0x1       # Parallel SCSI
    SSA = 0x2       # Serial Storage Architecture
    SBP = 0x3       # IEEE 1394
    SRP = 0x4       # SCSI RDMA
    ISCSI = 0x5     # Internet SCSI
    SAS = 0x6       # Serial Attached SCSI
    ADT = 0x7       # Automation/Drive Interface
    ATA = 0x8       # AT Attachment Interface
    UAS = 0x9       # USB Attached SCSI
    SOP = 0xA       # SCSI over PCI Express
    PCIE = 0xB      # PCI Express
    NONE = 0xF      # No specific protocol


class ScsiOpcode(IntEnum):
    """SCSI operation codes referenced by the codecs."""
    PERSISTENT_RESERVE_IN = 0x5E
    PERSISTENT_RESERVE_OUT = 0x5F
    VARIABLE_LENGTH = 0x7F
    SERVICE_ACTION_IN_16 = 0x9E
    SERVICE_ACTION_OUT_16 = 0x9F
    MAINTENANCE_IN = 0xA3
    MAINTENANCE_OUT = 0xA4
    SERVICE_ACTION_OUT_12 = 0xA9
    SERVICE_ACTION_IN_12 = 0xAB


class ReportingOptions(IntEnum):
    """
    REPORTING OPTIONS field of REPORT SUPPORTED OPERATION CODES.

    Reference: SPC-4 Section 6.35.1, Table 246
    """
    ALL_COMMANDS = 0                # All commands, list format
    ONE_COMMAND = 1                 # Opcode only, no service action
    ONE_COMMAND_SERVICE_ACTION = 2  # Opcode and service action


class PersistentReserveOutAction(IntEnum):
    """
    PERSISTENT RESERVE OUT service actions.

    Reference: SPC-4 Section 6.15.2, Table 170
    """
    REGISTER = 0x00
    REGISTER_AND_IGNORE_EXISTING_KEY = 0x06
    REGISTER_AND_MOVE = 0x07
