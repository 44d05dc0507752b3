"""
Base parser class with common utilities for SCSI data parsing.

SCSI data structures are big-endian throughout.
"""

import struct
import logging

from ..exceptions import TruncatedInputError

logger = logging.getLogger(__name__)


class BaseParser:
    """Base class for all SCSI data parsers."""

    @staticmethod
    def safe_unpack(format_string: str, data: bytes, offset: int = 0) -> tuple:
        """
        Safely unpack binary data with error handling.

        Args:
            format_string: struct format string
            data: binary data to unpack
            offset: offset into data buffer

        Returns:
            Unpacked tuple

        Raises:
            TruncatedInputError: If the data ends before the field does
        """
        size = struct.calcsize(format_string)
        if len(data) < offset + size:
            raise TruncatedInputError(f"Insufficient data: need {offset + size} bytes, got {len(data)}")
        return struct.unpack_from(format_string, data, offset)

    @classmethod
    def get_be16(cls, data: bytes, offset: int) -> int:
        """Unpack a big-endian 16-bit field."""
        return cls.safe_unpack('>H', data, offset)[0]

    @classmethod
    def get_be32(cls, data: bytes, offset: int) -> int:
        """Unpack a big-endian 32-bit field."""
        return cls.safe_unpack('>L', data, offset)[0]

    @classmethod
    def get_be64(cls, data: bytes, offset: int) -> int:
        """Unpack a big-endian 64-bit field."""
        return cls.safe_unpack('>Q', data, offset)[0]

    @staticmethod
    def extract_string(data: bytes, offset: int, length: int, encoding: str = 'ascii') -> str:
        """
        Extract and clean a string from binary data.

        Args:
            data: binary data
            offset: offset into data
            length: maximum string length
            encoding: string encoding

        Returns:
            String up to the first null byte
        """
        raw_bytes = bytes(data[offset:offset + length])
        # Stop at the first null, iSCSI names are null terminated
        raw_bytes = raw_bytes.split(b'\x00', 1)[0]
        try:
            return raw_bytes.decode(encoding)
        except UnicodeDecodeError as e:
            logger.warning(f"Failed to decode string at offset {offset}: {e}")
            return raw_bytes.decode(encoding, errors='replace')

    @staticmethod
    def bytes_to_hex_string(data: bytes) -> str:
        """Convert bytes to hex string representation."""
        return data.hex() if data else ""

    @staticmethod
    def validate_data_length(data: bytes, expected_min_length: int, name: str = "data") -> None:
        """
        Validate that data meets minimum length requirements.

        Args:
            data: binary data to validate
            expected_min_length: minimum expected length
            name: descriptive name for error messages

        Raises:
            TruncatedInputError: If data is too short
        """
        if len(data) < expected_min_length:
            raise TruncatedInputError(
                f"{name} too short: got {len(data)} bytes, need at least {expected_min_length}"
            )
