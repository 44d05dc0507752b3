"""
REPORT SUPPORTED OPERATION CODES parameter data parsing.

This module handles parsing of the all-commands and one-command parameter
data formats, and ordering of the all-commands descriptor list.

References:
- SPC-4 Section 6.35.2 "All_commands parameter data format"
- SPC-4 Section 6.35.3 "One_command parameter data format"
- SPC-4 Section 6.35.4 "Command timeouts descriptor"
"""

import logging
from typing import Callable, Iterable

from .base import BaseParser
from ..exceptions import LengthViolationError, TruncatedInputError
from ..models import (
    CommandDescriptor,
    CommandTimeoutDescriptor,
    OneCommandInfo,
    SortPolicy,
)
from ..protocol.constants import (
    COMMAND_TIMEOUTS_DESCRIPTOR_LEN,
    COMMAND_TIMEOUTS_DESCRIPTOR_LENGTH_FIELD,
    NAME_BUFFER_SIZE,
    ONE_COMMAND_CDLP_SHIFT,
    ONE_COMMAND_CTDP_MASK,
    ONE_COMMAND_MLU_SHIFT,
    ONE_COMMAND_SUPPORT_MASK,
    RSOC_CDLP_SHIFT,
    RSOC_CTDP_MASK,
    RSOC_DESCRIPTOR_LEN,
    RSOC_DESCRIPTOR_WITH_TIMEOUTS_LEN,
    RSOC_HEADER_LEN,
    RSOC_MLU_SHIFT,
    RSOC_ONE_COMMAND_HEADER_LEN,
    RSOC_RWCDLP_MASK,
    RSOC_SERVACTV_MASK,
)
from ..protocol.opcode_names import get_opcode_sa_name

logger = logging.getLogger(__name__)

NameResolver = Callable[[int, int, int], str]


class SupportedOpcodesParser(BaseParser):
    """Parser for REPORT SUPPORTED OPERATION CODES parameter data."""

    @classmethod
    def parse_all_commands(cls, data: bytes, response_length: int | None = None) -> list[CommandDescriptor]:
        """
        Parse all-commands parameter data into command descriptors.

        A COMMAND DATA LENGTH larger than the data received is clamped to the
        largest multiple of 8 that fits, so nothing past the buffer is read.

        Args:
            data: response buffer
            response_length: number of valid bytes in data (defaults to len(data))

        Returns:
            List of CommandDescriptor, in response order

        Raises:
            TruncatedInputError: If the header is incomplete, or a descriptor
                runs past a command data length that fits the buffer

        Reference: SPC-4 Section 6.35.2, Tables 247-248
        """
        if response_length is not None:
            data = data[:response_length]
        cls.validate_data_length(data, RSOC_HEADER_LEN, "Supported operation codes data")

        # Bytes 0-3: COMMAND DATA LENGTH
        cd_len = cls.get_be32(data, 0)
        available = len(data) - RSOC_HEADER_LEN
        clamped = False
        if cd_len > available:
            logger.warning("Command data length=%d, allocation=%d; truncate", cd_len, available)
            cd_len = (available // RSOC_DESCRIPTOR_LEN) * RSOC_DESCRIPTOR_LEN
            clamped = True

        if cd_len == 0:
            logger.debug("No commands to report")
            return []

        descriptors = []
        region = data[RSOC_HEADER_LEN:RSOC_HEADER_LEN + cd_len]
        offset = 0

        while offset < cd_len:
            # CTDP in byte 5 decides the descriptor length
            if offset + 6 > cd_len:
                length = RSOC_DESCRIPTOR_LEN
            elif region[offset + 5] & RSOC_CTDP_MASK:
                length = RSOC_DESCRIPTOR_WITH_TIMEOUTS_LEN
            else:
                length = RSOC_DESCRIPTOR_LEN

            if offset + length > cd_len:
                if clamped:
                    logger.warning("Dropping command descriptor %d cut by truncation", len(descriptors))
                    break
                raise TruncatedInputError(
                    f"Command descriptor {len(descriptors)} at offset {offset} needs {length} bytes, "
                    f"only {cd_len - offset} remain in command data length {cd_len}"
                )

            descriptor = cls.parse_command_descriptor(region[offset:offset + length],
                                                      offset + RSOC_HEADER_LEN)
            descriptors.append(descriptor)
            offset += length

        logger.debug("Parsed %d command descriptors", len(descriptors))
        return descriptors

    @classmethod
    def parse_command_descriptor(cls, data: bytes, offset: int = 0) -> CommandDescriptor:
        """
        Parse one command descriptor (8 or 20 bytes).

        Structure:
        - Byte 0: OPERATION CODE
        - Bytes 2-3: SERVICE ACTION
        - Byte 5: RWCDLP (bit 6), MLU (bits 5:4), CDLP (bits 3:2),
          CTDP (bit 1), SERVACTV (bit 0)
        - Bytes 6-7: CDB LENGTH
        - Bytes 8-19: command timeouts descriptor, when CTDP is set

        Args:
            data: descriptor bytes
            offset: offset of the descriptor in the response buffer

        Reference: SPC-4 Section 6.35.2, Table 248
        """
        cls.validate_data_length(data, RSOC_DESCRIPTOR_LEN, "Command descriptor")

        flags = data[5]
        service_action_valid = bool(flags & RSOC_SERVACTV_MASK)
        ctdp = bool(flags & RSOC_CTDP_MASK)

        timeouts = None
        if ctdp:
            cls.validate_data_length(data, RSOC_DESCRIPTOR_WITH_TIMEOUTS_LEN, "Command descriptor")
            timeouts = cls.parse_timeout_descriptor(data[8:20], strict=False)

        length = RSOC_DESCRIPTOR_WITH_TIMEOUTS_LEN if ctdp else RSOC_DESCRIPTOR_LEN
        descriptor = CommandDescriptor(
            offset=offset,
            raw=bytes(data[:length]),
            opcode=data[0],
            service_action_valid=service_action_valid,
            service_action=cls.get_be16(data, 2) if service_action_valid else 0,
            cdb_length=cls.get_be16(data, 6),
            timeout_descriptor_present=ctdp,
            cdlp=(flags >> RSOC_CDLP_SHIFT) & 0x3,
            mlu=(flags >> RSOC_MLU_SHIFT) & 0x3,
            rwcdlp=bool(flags & RSOC_RWCDLP_MASK),
            timeouts=timeouts,
        )
        logger.debug("Command descriptor at %d: %s", offset, cls.bytes_to_hex_string(descriptor.raw))
        return descriptor

    @classmethod
    def parse_timeout_descriptor(cls, data: bytes, strict: bool = True) -> CommandTimeoutDescriptor:
        """
        Parse a command timeouts descriptor (12 bytes).

        Structure:
        - Bytes 0-1: DESCRIPTOR LENGTH (10)
        - Byte 3: COMMAND SPECIFIC
        - Bytes 4-7: NOMINAL COMMAND PROCESSING TIMEOUT (seconds)
        - Bytes 8-11: RECOMMENDED COMMAND TIMEOUT (seconds)

        A timeout of 0 means the device did not specify one and is returned
        as None.

        Args:
            data: descriptor bytes
            strict: raise if DESCRIPTOR LENGTH is not 10

        Raises:
            LengthViolationError: If strict and DESCRIPTOR LENGTH is not 10

        Reference: SPC-4 Section 6.35.4, Table 251
        """
        cls.validate_data_length(data, COMMAND_TIMEOUTS_DESCRIPTOR_LEN, "Command timeouts descriptor")

        descriptor_length = cls.get_be16(data, 0)
        if descriptor_length != COMMAND_TIMEOUTS_DESCRIPTOR_LENGTH_FIELD:
            if strict:
                raise LengthViolationError(
                    f"command timeout descriptor length {descriptor_length} "
                    f"(expect {COMMAND_TIMEOUTS_DESCRIPTOR_LENGTH_FIELD})"
                )
            logger.warning("Command timeout descriptor length %d (expect %d)",
                           descriptor_length, COMMAND_TIMEOUTS_DESCRIPTOR_LENGTH_FIELD)

        nominal = cls.get_be32(data, 4)
        recommended = cls.get_be32(data, 8)
        return CommandTimeoutDescriptor(
            descriptor_length=descriptor_length,
            command_specific=data[3],
            nominal_timeout=nominal or None,
            recommended_timeout=recommended or None,
        )

    @classmethod
    def parse_one_command(cls, data: bytes) -> OneCommandInfo:
        """
        Parse one-command parameter data.

        Structure:
        - Byte 0: RWCDLP (bit 0)
        - Byte 1: CTDP (bit 7), MLU (bits 6:5), CDLP (bits 4:3), SUPPORT (bits 2:0)
        - Bytes 2-3: CDB SIZE
        - Bytes 4 to 4+CDB SIZE-1: CDB USAGE DATA
        - Then a command timeouts descriptor, when CTDP is set

        Raises:
            TruncatedInputError: If the usage data or timeouts descriptor is incomplete
            LengthViolationError: If the timeouts descriptor length is not 10

        Reference: SPC-4 Section 6.35.3, Table 249
        """
        cls.validate_data_length(data, RSOC_ONE_COMMAND_HEADER_LEN, "One command data")

        flags = data[1]
        ctdp = bool(flags & ONE_COMMAND_CTDP_MASK)
        cdb_size = cls.get_be16(data, 2)

        usage_end = RSOC_ONE_COMMAND_HEADER_LEN + cdb_size
        cls.validate_data_length(data, usage_end, "CDB usage data")
        usage_data = bytes(data[RSOC_ONE_COMMAND_HEADER_LEN:usage_end])

        timeouts = None
        if ctdp:
            timeouts = cls.parse_timeout_descriptor(
                data[usage_end:usage_end + COMMAND_TIMEOUTS_DESCRIPTOR_LEN]
            )

        return OneCommandInfo(
            support=flags & ONE_COMMAND_SUPPORT_MASK,
            cdb_size=cdb_size,
            usage_data=usage_data,
            timeout_descriptor_present=ctdp,
            cdlp=(flags >> ONE_COMMAND_CDLP_SHIFT) & 0x3,
            mlu=(flags >> ONE_COMMAND_MLU_SHIFT) & 0x3,
            rwcdlp=bool(data[0] & 0x1),
            timeouts=timeouts,
        )


def _name_key(name: str) -> bytes:
    """Fixed width byte key: names compare like bounded, null terminated buffers."""
    return name.encode('utf-8', errors='replace')[:NAME_BUFFER_SIZE - 1]


def sort_descriptors(descriptors: Iterable[CommandDescriptor | None],
                     policy: SortPolicy = SortPolicy.NUMERIC,
                     name_resolver: NameResolver | None = None,
                     peripheral_type: int = 0) -> list[CommandDescriptor | None]:
    """
    Order command descriptors.

    NUMERIC orders by opcode, then by service action (0 when not valid).
    ALPHABETIC orders by the resolved command name, compared byte-wise.
    UNSORTED keeps response order. None entries sort first.

    Args:
        descriptors: command descriptors
        policy: ordering to apply
        name_resolver: (opcode, service_action, peripheral_type) -> name,
                       defaults to get_opcode_sa_name
        peripheral_type: peripheral device type passed to the resolver

    Returns:
        New list in the requested order
    """
    descriptors = list(descriptors)
    if policy == SortPolicy.UNSORTED:
        return descriptors

    if policy == SortPolicy.ALPHABETIC:
        resolve = name_resolver or get_opcode_sa_name

        def key(descriptor):
            if descriptor is None:
                return (0, b'')
            name = resolve(descriptor.opcode, descriptor.sort_service_action, peripheral_type)
            return (1, _name_key(name))
    else:
        def key(descriptor):
            if descriptor is None:
                return (0, 0, 0)
            return (1, descriptor.opcode, descriptor.sort_service_action)

    return sorted(descriptors, key=key)
