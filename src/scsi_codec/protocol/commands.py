"""
SCSI Command Builders

Packing functions for the CDBs and parameter lists that carry the structures
handled by this package: REPORT SUPPORTED OPERATION CODES (which returns the
command descriptors) and PERSISTENT RESERVE OUT (which carries packed
TransportIDs).
"""

import struct

from .constants import (
    PROUT_ALL_TG_PT,
    PROUT_APTPL,
    PROUT_CDB_LEN,
    PROUT_MOVE_APTPL,
    PROUT_MOVE_UNREG,
    PROUT_PARAMETER_HEADER_LEN,
    PROUT_SPEC_I_PT,
    RSOC_CDB_LEN,
    RSOC_SERVICE_ACTION,
)
from .types import PersistentReserveOutAction, ReportingOptions, ScsiOpcode


def pack_report_supported_opcodes_cdb(reporting_options: int = ReportingOptions.ALL_COMMANDS,
                                      opcode: int = 0, service_action: int = 0,
                                      rctd: bool = False,
                                      allocation_length: int = 8192) -> bytes:
    """
    Pack REPORT SUPPORTED OPERATION CODES CDB.

    Args:
        reporting_options: ReportingOptions value (0 = all commands)
        opcode: Requested operation code (one-command formats)
        service_action: Requested service action (one-command formats)
        rctd: Ask for command timeouts descriptors
        allocation_length: Maximum response length

    Returns:
        12-byte MAINTENANCE IN CDB

    Reference: SPC-4 Section 6.35.1, Table 245
    """
    cdb = bytearray(RSOC_CDB_LEN)

    # Byte 0: MAINTENANCE IN, byte 1: service action 0x0C
    cdb[0] = ScsiOpcode.MAINTENANCE_IN
    cdb[1] = RSOC_SERVICE_ACTION

    # Byte 2: RCTD (bit 7) | REPORTING OPTIONS (bits 2:0)
    cdb[2] = (0x80 if rctd else 0) | (reporting_options & 0x07)
    cdb[3] = opcode & 0xFF
    struct.pack_into('>H', cdb, 4, service_action & 0xFFFF)
    struct.pack_into('>L', cdb, 6, allocation_length)

    return bytes(cdb)


def pack_persistent_reserve_out_cdb(service_action: int, scope: int = 0,
                                    reservation_type: int = 0,
                                    parameter_length: int = PROUT_PARAMETER_HEADER_LEN) -> bytes:
    """
    Pack PERSISTENT RESERVE OUT CDB.

    Args:
        service_action: PersistentReserveOutAction value
        scope: SCOPE field (0 = logical unit)
        reservation_type: Persistent reservation TYPE code, 0 when unused
        parameter_length: Parameter list length in bytes

    Returns:
        10-byte PERSISTENT RESERVE OUT CDB

    Reference: SPC-4 Section 6.15.1, Table 169
    """
    cdb = bytearray(PROUT_CDB_LEN)

    cdb[0] = ScsiOpcode.PERSISTENT_RESERVE_OUT
    cdb[1] = service_action & 0x1F
    # Byte 2: SCOPE (bits 7:4) | TYPE (bits 3:0)
    cdb[2] = ((scope & 0x0F) << 4) | (reservation_type & 0x0F)
    struct.pack_into('>L', cdb, 5, parameter_length)

    return bytes(cdb)


def pack_prout_parameter_list(reservation_key: int, service_action_key: int = 0,
                              transport_ids: bytes = b"", all_tg_pt: bool = False,
                              aptpl: bool = False) -> bytes:
    """
    Pack basic PERSISTENT RESERVE OUT parameter list.

    When transport_ids is not empty SPEC_I_PT is set and the packed
    TransportIDs follow the header, preceded by their length.

    Args:
        reservation_key: RESERVATION KEY (bytes 0-7)
        service_action_key: SERVICE ACTION RESERVATION KEY (bytes 8-15)
        transport_ids: Packed TransportIDs, as returned by compaction
        all_tg_pt: Set ALL_TG_PT
        aptpl: Set APTPL

    Returns:
        Parameter list (24 bytes, or 28 + len(transport_ids))

    Reference: SPC-4 Section 6.15.3, Table 174
    """
    header_len = PROUT_PARAMETER_HEADER_LEN
    if transport_ids:
        header_len += 4
    data = bytearray(header_len + len(transport_ids))

    struct.pack_into('>QQ', data, 0, reservation_key, service_action_key)

    flags = 0
    if transport_ids:
        flags |= PROUT_SPEC_I_PT
    if all_tg_pt:
        flags |= PROUT_ALL_TG_PT
    if aptpl:
        flags |= PROUT_APTPL
    data[20] = flags

    if transport_ids:
        # Bytes 24-27: TRANSPORTID PARAMETER DATA LENGTH
        struct.pack_into('>L', data, 24, len(transport_ids))
        data[28:] = transport_ids

    return bytes(data)


def pack_register_and_move_parameter_list(reservation_key: int, service_action_key: int,
                                          relative_target_port: int, transport_ids: bytes,
                                          unreg: bool = False, aptpl: bool = False) -> bytes:
    """
    Pack REGISTER AND MOVE parameter list.

    Args:
        reservation_key: RESERVATION KEY (bytes 0-7)
        service_action_key: SERVICE ACTION RESERVATION KEY (bytes 8-15)
        relative_target_port: RELATIVE TARGET PORT IDENTIFIER (bytes 18-19)
        transport_ids: Packed TransportIDs naming the new I_T nexus
        unreg: Set UNREG
        aptpl: Set APTPL

    Returns:
        Parameter list (24 + len(transport_ids) bytes)

    Reference: SPC-4 Section 6.15.4, Table 176
    """
    data = bytearray(PROUT_PARAMETER_HEADER_LEN + len(transport_ids))

    struct.pack_into('>QQ', data, 0, reservation_key, service_action_key)

    flags = 0
    if unreg:
        flags |= PROUT_MOVE_UNREG
    if aptpl:
        flags |= PROUT_MOVE_APTPL
    data[17] = flags

    struct.pack_into('>H', data, 18, relative_target_port)
    struct.pack_into('>L', data, 20, len(transport_ids))
    data[24:] = transport_ids

    return bytes(data)


def pack_register_command(reservation_key: int, service_action_key: int,
                          transport_ids: bytes = b"", all_tg_pt: bool = False,
                          aptpl: bool = False,
                          service_action: int = PersistentReserveOutAction.REGISTER) -> tuple[bytes, bytes]:
    """
    Pack a PERSISTENT RESERVE OUT REGISTER CDB with its parameter list.

    service_action selects REGISTER or REGISTER AND IGNORE EXISTING KEY.

    Returns:
        Tuple of (cdb, parameter_list)
    """
    parameters = pack_prout_parameter_list(reservation_key, service_action_key,
                                           transport_ids, all_tg_pt, aptpl)
    cdb = pack_persistent_reserve_out_cdb(service_action, parameter_length=len(parameters))
    return cdb, parameters
