"""
SCSI Codec Exception Classes

Custom exception classes for TransportID encoding and supported operation
code parsing. Provides specific error types for different failure scenarios.

References:
- SPC-4 Section 7.5.4 (TransportID identifiers)
- SPC-4 Section 6.35 (REPORT SUPPORTED OPERATION CODES command)
"""


class SCSICodecError(Exception):
    """Base exception class for all SCSI codec errors."""
    pass


class UnrecognizedNotationError(SCSICodecError):
    """
    Raised when text matches none of the known TransportID notations.

    Known notations are the protocol prefixes (sas, spi, fcp, sbp, srp, sop)
    followed by a comma, and iSCSI names starting with "iqn.".
    """
    pass


class LengthViolationError(SCSICodecError):
    """
    Raised when a field does not have the length the wire format requires.

    Covers:
    - Hex addresses with the wrong number of digits
    - iSCSI names too long for the 241 byte limit
    - Numeric fields that do not fit their 16-bit slot
    - Descriptor length fields with unexpected values
    """
    pass


class TransportIdParseError(SCSICodecError):
    """
    Raised when TransportID text cannot be parsed.

    Includes failures due to:
    - Characters that are not hex digits or separators
    - Hex values larger than 0xff
    - Malformed numeric fields in a symbolic notation

    Attributes:
        line: 1-based input line number, when read from a line source
        column: 1-based position within the line
    """
    def __init__(self, message, line=None, column=None):
        if line is not None and column is not None:
            message = f"{message} at line {line}, pos {column}"
        elif line is not None:
            message = f"{message} in line {line}"
        elif column is not None:
            message = f"{message} at pos {column}"
        super().__init__(message)
        self.line = line
        self.column = column


class CapacityExceededError(SCSICodecError):
    """
    Raised when a fixed bound is reached.

    Covers:
    - More TransportIDs than the working array holds
    - More input lines than the reader accepts
    - A single TransportID longer than its slot
    """
    pass


class TruncatedInputError(SCSICodecError):
    """Raised when a response buffer is shorter than its own declared length."""
    pass


class TransportIdIOError(SCSICodecError):
    """Raised when a TransportID file cannot be opened or read."""
    pass


class TransportError(SCSICodecError):
    """
    Raised by the client facade when the injected transport fails.

    Attributes:
        cdb: Command descriptor block that was being sent
    """
    def __init__(self, message, cdb=None):
        super().__init__(message)
        self.cdb = cdb


# Alias for cleaner imports
ParseError = TransportIdParseError
