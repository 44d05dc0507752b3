"""
SCSI TransportID decoding.

This module turns binary TransportIDs, singly or as a packed list, back into
their protocol fields.
"""

import logging

from .base import BaseParser
from ..models import DecodedTransportId
from ..protocol.constants import (
    TPROTO_FORMAT_MASK,
    TPROTO_FORMAT_SHIFT,
    TPROTO_ID_MASK,
    TRANSPORT_ID_HEADER_LEN,
    TRANSPORT_ID_MIN_LEN,
)
from ..protocol.transport_id_array import transport_id_length
from ..protocol.types import ProtocolIdentifier

logger = logging.getLogger(__name__)


class TransportIdParser(BaseParser):
    """Parser for SPC-4 TransportIDs."""

    @classmethod
    def parse_transport_id(cls, data: bytes, offset: int = 0) -> DecodedTransportId:
        """
        Decode one TransportID.

        Args:
            data: buffer holding the TransportID
            offset: offset of its first byte

        Returns:
            DecodedTransportId with the fields of its protocol set

        Raises:
            TruncatedInputError: If data ends before the TransportID does

        Reference: SPC-4 Section 7.6.4, Tables 389-402
        """
        tid = bytes(data[offset:])
        cls.validate_data_length(tid, TRANSPORT_ID_MIN_LEN, "TransportID")

        length = transport_id_length(tid)
        cls.validate_data_length(tid, length, "TransportID")

        protocol_id = tid[0] & TPROTO_ID_MASK
        decoded = DecodedTransportId(
            protocol_id=protocol_id,
            format_code=(tid[0] >> TPROTO_FORMAT_SHIFT) & TPROTO_FORMAT_MASK,
            length=length,
        )

        if protocol_id in (ProtocolIdentifier.FCP, ProtocolIdentifier.SBP):
            # Bytes 8-15: N_Port name or EUI-64 name
            decoded.address = cls.get_be64(tid, 8)
        elif protocol_id == ProtocolIdentifier.SAS:
            # Bytes 4-11: SAS address
            decoded.address = cls.get_be64(tid, 4)
        elif protocol_id == ProtocolIdentifier.SPI:
            decoded.scsi_address = cls.get_be16(tid, 2)
            decoded.relative_port = cls.get_be16(tid, 6)
        elif protocol_id == ProtocolIdentifier.SRP:
            # Bytes 8-23: initiator port identifier
            decoded.port_identifier = tid[8:24]
        elif protocol_id == ProtocolIdentifier.SOP:
            decoded.routing_id = cls.get_be16(tid, 2)
        elif protocol_id == ProtocolIdentifier.ISCSI:
            additional_length = cls.get_be16(tid, 2)
            decoded.iscsi_name = cls.extract_string(tid, TRANSPORT_ID_HEADER_LEN,
                                                    additional_length, 'utf-8')
        else:
            logger.debug("No field layout for protocol id 0x%x", protocol_id)

        return decoded

    @classmethod
    def parse_transport_id_list(cls, data: bytes) -> list[DecodedTransportId]:
        """
        Decode a packed list of TransportIDs, as produced by compaction.

        Args:
            data: packed TransportIDs

        Returns:
            List of DecodedTransportId, in order

        Raises:
            TruncatedInputError: If the last TransportID is incomplete
        """
        transport_ids = []
        offset = 0

        while offset < len(data):
            decoded = cls.parse_transport_id(data, offset)
            transport_ids.append(decoded)
            offset += decoded.length

        return transport_ids
