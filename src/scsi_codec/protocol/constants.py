"""
SCSI Codec Constants

All sizes, limits and magic numbers used by the TransportID and supported
operation code codecs.
"""

# TransportID Sizes
# Reference: SPC-4 Section 7.5.4 "TransportID identifiers"
TRANSPORT_ID_MIN_LEN = 24               # Every TransportID is at least 24 bytes
TRANSPORT_ID_HEADER_LEN = 4             # Bytes preceding the iSCSI name
ISCSI_MIN_ADDITIONAL_LEN = 20           # Smallest iSCSI additional length
ISCSI_MAX_ADDITIONAL_LEN = 241          # SAM-5 Annex A.2 name length ceiling
ISCSI_SESSION_ID_MARKER = ",i,0x"       # Separator before an initiator session id

# TransportID Byte 0 Bit Fields
TPROTO_ID_MASK = 0x0F                   # Bits 3:0 protocol identifier
TPROTO_FORMAT_SHIFT = 6                 # Bits 7:6 format code
TPROTO_FORMAT_MASK = 0x3
TPROTO_ISCSI_SESSION_ID_FLAG = 0x40     # Format code 01b for iSCSI

# Working Array Limits
MAX_TRANSPORT_IDS = 32                  # TransportIDs per working array
TRANSPORT_ID_SLOT_SIZE = 256            # Bytes per working array slot
MAX_INPUT_LINES = 512                   # Line chunks read by the batch reader
MAX_INPUT_LINE_LEN = 512                # Characters per line chunk

# Hex list parsing
HEX_DIGITS = "0123456789abcdefABCDEF"
HEX_LIST_SEPARATORS = " ,\t"
COMMENT_CHAR = "#"

# REPORT SUPPORTED OPERATION CODES
# Reference: SPC-4 Section 6.35, Tables 245-250
RSOC_HEADER_LEN = 4                     # Command data length field
RSOC_DESCRIPTOR_LEN = 8                 # Command descriptor without timeouts
RSOC_DESCRIPTOR_WITH_TIMEOUTS_LEN = 20  # Command descriptor with timeouts descriptor
RSOC_ONE_COMMAND_HEADER_LEN = 4         # One command parameter data header
RSOC_SERVICE_ACTION = 0x0C              # MAINTENANCE IN service action
COMMAND_TIMEOUTS_DESCRIPTOR_LEN = 12    # Whole timeouts descriptor
COMMAND_TIMEOUTS_DESCRIPTOR_LENGTH_FIELD = 10  # Value expected in bytes 0-1

# Command Descriptor Byte 5 Bit Fields
RSOC_SERVACTV_MASK = 0x01               # Service action valid
RSOC_CTDP_MASK = 0x02                   # Command timeouts descriptor present
RSOC_CDLP_SHIFT = 2                     # Bits 3:2 command duration limit page
RSOC_MLU_SHIFT = 4                      # Bits 5:4 multiple logical units
RSOC_RWCDLP_MASK = 0x40                 # Read/write command duration limit policy

# One Command Byte 1 Bit Fields
ONE_COMMAND_SUPPORT_MASK = 0x07
ONE_COMMAND_CDLP_SHIFT = 3
ONE_COMMAND_MLU_SHIFT = 5
ONE_COMMAND_CTDP_MASK = 0x80

# Name resolution
NAME_BUFFER_SIZE = 128                  # Bound on resolved command names

# Command Sizes
RSOC_CDB_LEN = 12                       # MAINTENANCE IN CDB
PROUT_CDB_LEN = 10                      # PERSISTENT RESERVE OUT CDB
PROUT_PARAMETER_HEADER_LEN = 24         # Basic parameter list length
DEFAULT_ALLOCATION_LENGTH = 8192        # Response buffer size

# PERSISTENT RESERVE OUT parameter list flags
# Reference: SPC-4 Section 6.15.3, Table 173
PROUT_SPEC_I_PT = 0x08                  # Byte 20 bit 3
PROUT_ALL_TG_PT = 0x04                  # Byte 20 bit 2
PROUT_APTPL = 0x01                      # Byte 20 bit 0
PROUT_MOVE_UNREG = 0x02                 # Byte 17 bit 1 (register and move)
PROUT_MOVE_APTPL = 0x01                 # Byte 17 bit 0 (register and move)
