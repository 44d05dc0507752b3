"""
TransportID Working Array

A fixed-slot working array for TransportIDs and its compaction into the
packed form carried by PERSISTENT RESERVE OUT parameter lists.

Each TransportID is assembled in its own slot. Compaction moves the records
together, in slot order, so that each occupies exactly its wire length.

Reference: SPC-4 Section 6.15.3 "Basic PERSISTENT RESERVE OUT parameter list"
"""

import logging

from .constants import (
    MAX_TRANSPORT_IDS,
    TPROTO_ID_MASK,
    TRANSPORT_ID_HEADER_LEN,
    TRANSPORT_ID_MIN_LEN,
    TRANSPORT_ID_SLOT_SIZE,
)
from .transport_id import encode_transport_id
from .types import ProtocolIdentifier
from ..exceptions import CapacityExceededError, LengthViolationError

logger = logging.getLogger(__name__)


def transport_id_length(data, offset: int = 0) -> int:
    """
    Return the wire length of the TransportID starting at data[offset].

    iSCSI TransportIDs are ADDITIONAL LENGTH + 4 bytes (at least 24), every
    other protocol is exactly 24 bytes.

    Args:
        data: bytes-like buffer holding the TransportID
        offset: offset of byte 0 of the TransportID

    Returns:
        Length in bytes
    """
    if (data[offset] & TPROTO_ID_MASK) == ProtocolIdentifier.ISCSI:
        length = ((data[offset + 2] << 8) | data[offset + 3]) + TRANSPORT_ID_HEADER_LEN
        return max(length, TRANSPORT_ID_MIN_LEN)
    return TRANSPORT_ID_MIN_LEN


def compact_transport_id_array(buffer: bytearray, count: int,
                               slot_size: int = TRANSPORT_ID_SLOT_SIZE) -> int:
    """
    Compact a fixed-slot TransportID array in place.

    Slots 0..count-1 are moved down so that each record directly follows the
    previous one. Records never grow, so a record is never moved up.

    Args:
        buffer: working array, one TransportID at the start of each slot
        count: number of populated slots
        slot_size: bytes per slot

    Returns:
        Total length of the packed TransportIDs

    Raises:
        LengthViolationError: If a record declares more bytes than its slot holds
    """
    count = min(count, len(buffer) // slot_size)
    compact_len = 0

    for k in range(count):
        off = k * slot_size
        length = transport_id_length(buffer, off)
        if length > slot_size:
            raise LengthViolationError(
                f"TransportID {k} declares length {length}, larger than its {slot_size} byte slot"
            )
        if off > compact_len:
            # Slice copy happens before assignment, so overlapping moves are safe
            buffer[compact_len:compact_len + length] = buffer[off:off + length]
        compact_len += length

    return compact_len


class TransportIdArray:
    """
    Working array of TransportIDs.

    Populated one slot at a time (whole records via add(), or byte by byte
    via new_slot() and set_byte() for raw hex input), then compacted once.

    Example:
        tids = TransportIdArray()
        tids.add_notation("sas,5000c50005b32001")
        tids.add_notation("iqn.1998-01.com.example:host1")
        packed = tids.compact()
    """

    def __init__(self, max_count: int = MAX_TRANSPORT_IDS, slot_size: int = TRANSPORT_ID_SLOT_SIZE):
        self.max_count = max_count
        self.slot_size = slot_size
        self.buffer = bytearray(max_count * slot_size)
        self.count = 0
        self._packed: bytes | None = None

    def __len__(self) -> int:
        return self.count

    @property
    def is_compacted(self) -> bool:
        return self._packed is not None

    def slot_offset(self, index: int) -> int:
        """Offset of slot index in the working buffer."""
        return index * self.slot_size

    def new_slot(self) -> int:
        """
        Reserve the next slot.

        Returns:
            Index of the reserved slot

        Raises:
            CapacityExceededError: If every slot is in use
        """
        if self._packed is not None:
            raise ValueError("TransportID array already compacted")
        if self.count >= self.max_count:
            raise CapacityExceededError(
                f"too many TransportIDs: array holds at most {self.max_count}"
            )
        index = self.count
        self.count += 1
        return index

    def set_byte(self, index: int, position: int, value: int) -> None:
        """
        Write one byte of the TransportID in slot index.

        Raises:
            CapacityExceededError: If position lies outside the slot
        """
        if position >= self.slot_size:
            raise CapacityExceededError(
                f"TransportID {index} longer than {self.slot_size} bytes"
            )
        self.buffer[self.slot_offset(index) + position] = value

    def add(self, record: bytes) -> int:
        """
        Store a complete binary TransportID in the next slot.

        Returns:
            Index of the slot used
        """
        if len(record) > self.slot_size:
            raise CapacityExceededError(
                f"TransportID of {len(record)} bytes does not fit a {self.slot_size} byte slot"
            )
        index = self.new_slot()
        off = self.slot_offset(index)
        self.buffer[off:off + len(record)] = record
        logger.debug("Stored TransportID %d (protocol 0x%x, %d bytes)",
                     index, record[0] & TPROTO_ID_MASK, len(record))
        return index

    def add_notation(self, text: str) -> int:
        """Encode a symbolic TransportID and store it in the next slot."""
        return self.add(encode_transport_id(text))

    def records(self) -> list[bytes]:
        """
        Return the TransportIDs held in the array, in slot order.

        Before compaction each record is read from its slot; afterwards the
        packed form is walked.
        """
        records = []
        if self._packed is not None:
            off = 0
            while off < len(self._packed):
                length = transport_id_length(self._packed, off)
                records.append(self._packed[off:off + length])
                off += length
            return records
        for index in range(self.count):
            off = self.slot_offset(index)
            length = min(transport_id_length(self.buffer, off), self.slot_size)
            records.append(bytes(self.buffer[off:off + length]))
        return records

    def compact(self) -> bytes:
        """
        Compact the array and return the packed TransportIDs.

        The array is compacted in place the first time this is called; later
        calls return the same packed bytes.
        """
        if self._packed is None:
            total = compact_transport_id_array(self.buffer, self.count, self.slot_size)
            self._packed = bytes(self.buffer[:total])
            logger.debug("Compacted %d TransportIDs into %d bytes", self.count, total)
        return self._packed
