"""
TransportID Encoding

Encoding of the symbolic TransportID notations into SPC-4 binary
TransportIDs.

Each notation is a small object that recognises its own prefix and encodes
its payload; encode_transport_id() tries them in order. Adding a notation
means appending to TRANSPORT_ID_NOTATIONS.

Reference: SPC-4 Section 7.6.4 "TransportID identifiers"
"""

import re
import struct

from .constants import (
    HEX_DIGITS,
    ISCSI_MAX_ADDITIONAL_LEN,
    ISCSI_MIN_ADDITIONAL_LEN,
    ISCSI_SESSION_ID_MARKER,
    TPROTO_ISCSI_SESSION_ID_FLAG,
    TRANSPORT_ID_HEADER_LEN,
    TRANSPORT_ID_MIN_LEN,
)
from .types import ProtocolIdentifier
from ..exceptions import (
    LengthViolationError,
    TransportIdParseError,
    UnrecognizedNotationError,
)

_SPI_PAYLOAD = re.compile(r'\s*(\d+)\s*,\s*(\d+)')
_SOP_PAYLOAD = re.compile(r'\s*(?:0[xX])?([0-9a-fA-F]+)')


def decode_hex_digits(payload: str, digit_count: int, name: str) -> bytes:
    """
    Decode a run of exactly digit_count hex digits at the start of payload.

    Text following the run of digits is ignored.

    Args:
        payload: text following the notation prefix
        digit_count: number of hex digits required
        name: notation name for error messages

    Returns:
        digit_count // 2 bytes

    Raises:
        LengthViolationError: If the run of hex digits has the wrong length
    """
    digits = payload[:len(payload) - len(payload.lstrip(HEX_DIGITS))]
    if len(digits) != digit_count:
        raise LengthViolationError(
            f"badly formed symbolic {name} TransportID: expected {digit_count} "
            f"hex digits, got {len(digits)}"
        )
    return bytes.fromhex(digits)


def iscsi_additional_length(name_length: int) -> int:
    """
    Compute the ADDITIONAL LENGTH for an iSCSI name of name_length bytes.

    At least one trailing null is reserved, the result is never below 20
    and is always a multiple of 4.

    Raises:
        LengthViolationError: If the result exceeds 241
    """
    alen = name_length + 1
    if alen < ISCSI_MIN_ADDITIONAL_LEN:
        alen = ISCSI_MIN_ADDITIONAL_LEN
    elif alen % 4:
        alen = ((alen // 4) + 1) * 4
    if alen > ISCSI_MAX_ADDITIONAL_LEN:
        raise LengthViolationError(f"iSCSI name too long, additional length={alen}")
    return alen


class TransportIdNotation:
    """A symbolic TransportID notation: a case-insensitive prefix and a payload encoder."""

    prefix = ""
    name = ""
    protocol = ProtocolIdentifier.NONE

    def matches(self, text: str) -> bool:
        return text[:len(self.prefix)].lower() == self.prefix

    def encode(self, text: str) -> bytes:
        payload = text[len(self.prefix):]
        tid = bytearray(TRANSPORT_ID_MIN_LEN)
        tid[0] = self.protocol
        self.encode_payload(payload, tid)
        return bytes(tid)

    def encode_payload(self, payload: str, tid: bytearray) -> None:
        raise NotImplementedError


class HexAddressNotation(TransportIdNotation):
    """Notations whose payload is a fixed number of hex digits placed at a fixed offset."""

    def __init__(self, prefix: str, name: str, protocol: ProtocolIdentifier,
                 offset: int, digit_count: int = 16):
        self.prefix = prefix
        self.name = name
        self.protocol = protocol
        self.offset = offset
        self.digit_count = digit_count

    def encode_payload(self, payload: str, tid: bytearray) -> None:
        address = decode_hex_digits(payload, self.digit_count, self.name)
        tid[self.offset:self.offset + len(address)] = address


class SpiNotation(TransportIdNotation):
    """spi,<scsi address>,<relative target port> (decimal)."""

    prefix = "spi,"
    name = "SPI"
    protocol = ProtocolIdentifier.SPI

    def encode_payload(self, payload: str, tid: bytearray) -> None:
        match = _SPI_PAYLOAD.match(payload)
        if not match:
            raise TransportIdParseError(
                f"badly formed symbolic SPI TransportID: {payload!r}", column=len(self.prefix) + 1
            )
        scsi_address, relative_port = (int(value) for value in match.groups())
        if scsi_address > 0xFFFF or relative_port > 0xFFFF:
            raise LengthViolationError(
                f"SPI TransportID field does not fit in 16 bits: {scsi_address},{relative_port}"
            )
        struct.pack_into('>H', tid, 2, scsi_address)
        struct.pack_into('>H', tid, 6, relative_port)


class SopNotation(TransportIdNotation):
    """sop,<routing id> (hex)."""

    prefix = "sop,"
    name = "SOP"
    protocol = ProtocolIdentifier.SOP

    def encode_payload(self, payload: str, tid: bytearray) -> None:
        match = _SOP_PAYLOAD.match(payload)
        if not match:
            raise TransportIdParseError(
                f"badly formed symbolic SOP TransportID: {payload!r}", column=len(self.prefix) + 1
            )
        routing_id = int(match.group(1), 16)
        if routing_id > 0xFFFF:
            raise LengthViolationError(f"SOP routing id 0x{routing_id:x} does not fit in 16 bits")
        struct.pack_into('>H', tid, 2, routing_id)


class IscsiNotation(TransportIdNotation):
    """
    iSCSI names starting with "iqn.".

    The name runs to the first whitespace character. When ",i,0x" appears in the name
    the format code is set to 01b (name and session id). The session id that
    follows the marker is carried as part of the name and not decoded.
    """

    prefix = "iqn."
    name = "iSCSI"
    protocol = ProtocolIdentifier.ISCSI

    def encode(self, text: str) -> bytes:
        name = re.split(r'\s', text, maxsplit=1)[0]
        encoded = name.encode('utf-8')
        alen = iscsi_additional_length(len(encoded))

        tid = bytearray(TRANSPORT_ID_HEADER_LEN + alen)
        tid[0] = self.protocol
        if ISCSI_SESSION_ID_MARKER in name:
            tid[0] |= TPROTO_ISCSI_SESSION_ID_FLAG
        struct.pack_into('>H', tid, 2, alen)
        tid[TRANSPORT_ID_HEADER_LEN:TRANSPORT_ID_HEADER_LEN + len(encoded)] = encoded
        return bytes(tid)


TRANSPORT_ID_NOTATIONS = (
    HexAddressNotation("sas,", "SAS", ProtocolIdentifier.SAS, offset=4),
    SpiNotation(),
    HexAddressNotation("fcp,", "FCP", ProtocolIdentifier.FCP, offset=8),
    HexAddressNotation("sbp,", "SBP", ProtocolIdentifier.SBP, offset=8),
    HexAddressNotation("srp,", "SRP", ProtocolIdentifier.SRP, offset=8, digit_count=32),
    SopNotation(),
    IscsiNotation(),
)


def encode_transport_id(text: str) -> bytes:
    """
    Encode one symbolic TransportID.

    Args:
        text: notation such as "sas,5000c50005b32001", "spi,3,7" or
              "iqn.1998-01.com.example:host1"

    Returns:
        Binary TransportID, 24 bytes for fixed kinds, 4 + additional length
        bytes for iSCSI

    Raises:
        UnrecognizedNotationError: If text matches no notation
        LengthViolationError: If a field has the wrong length
        TransportIdParseError: If a numeric field is malformed

    Reference: SPC-4 Section 7.6.4
    """
    text = text.lstrip(" \t")
    for notation in TRANSPORT_ID_NOTATIONS:
        if notation.matches(text):
            return notation.encode(text)
    raise UnrecognizedNotationError(f"unable to parse symbolic TransportID: {text!r}")
