"""
SCSI Command Name Definitions

Command names for SCSI operation codes and service actions, used to label
and alphabetically order supported operation code reports.

Entries may be restricted to a peripheral device type; a lookup first tries
the device type of the caller and then the entry shared by all device types.

References:
- SPC-4 Annex D "Operation codes"
- SBC-3 Section 5 "Commands for direct access block devices"
- SSC-4 Section 7 "Commands for sequential-access devices"
"""

from .types import ScsiOpcode

# Peripheral device types that change the meaning of an opcode
PDT_DISK = 0x00      # Direct access block device
PDT_TAPE = 0x01      # Sequential access device
PDT_MCHANGER = 0x08  # Media changer
ALL_DEVICE_TYPES = -1

# Opcode names keyed by (opcode, peripheral device type)
SCSI_OPCODE_NAMES: dict[tuple[int, int], str] = {
    (0x00, ALL_DEVICE_TYPES): "Test Unit Ready",
    (0x01, ALL_DEVICE_TYPES): "Rezero Unit",
    (0x01, PDT_TAPE): "Rewind",
    (0x03, ALL_DEVICE_TYPES): "Request Sense",
    (0x04, ALL_DEVICE_TYPES): "Format Unit",
    (0x04, PDT_TAPE): "Format medium",
    (0x07, ALL_DEVICE_TYPES): "Reassign blocks",
    (0x07, PDT_MCHANGER): "Initialize element status",
    (0x08, ALL_DEVICE_TYPES): "Read(6)",
    (0x0a, ALL_DEVICE_TYPES): "Write(6)",
    (0x0b, ALL_DEVICE_TYPES): "Seek(6)",
    (0x10, PDT_TAPE): "Write filemarks(6)",
    (0x11, PDT_TAPE): "Space(6)",
    (0x12, ALL_DEVICE_TYPES): "Inquiry",
    (0x15, ALL_DEVICE_TYPES): "Mode select(6)",
    (0x16, ALL_DEVICE_TYPES): "Reserve(6)",
    (0x17, ALL_DEVICE_TYPES): "Release(6)",
    (0x19, PDT_TAPE): "Erase(6)",
    (0x1a, ALL_DEVICE_TYPES): "Mode sense(6)",
    (0x1b, ALL_DEVICE_TYPES): "Start stop unit",
    (0x1b, PDT_TAPE): "Load unload",
    (0x1c, ALL_DEVICE_TYPES): "Receive diagnostic results",
    (0x1d, ALL_DEVICE_TYPES): "Send diagnostic",
    (0x1e, ALL_DEVICE_TYPES): "Prevent allow medium removal",
    (0x25, ALL_DEVICE_TYPES): "Read capacity(10)",
    (0x28, ALL_DEVICE_TYPES): "Read(10)",
    (0x2a, ALL_DEVICE_TYPES): "Write(10)",
    (0x2b, ALL_DEVICE_TYPES): "Seek(10)",
    (0x2b, PDT_TAPE): "Locate(10)",
    (0x2e, ALL_DEVICE_TYPES): "Write and verify(10)",
    (0x2f, ALL_DEVICE_TYPES): "Verify(10)",
    (0x34, ALL_DEVICE_TYPES): "Pre-fetch(10)",
    (0x34, PDT_TAPE): "Read position",
    (0x35, ALL_DEVICE_TYPES): "Synchronize cache(10)",
    (0x37, ALL_DEVICE_TYPES): "Read defect data(10)",
    (0x3b, ALL_DEVICE_TYPES): "Write buffer",
    (0x3c, ALL_DEVICE_TYPES): "Read buffer(10)",
    (0x41, ALL_DEVICE_TYPES): "Write same(10)",
    (0x42, ALL_DEVICE_TYPES): "Unmap",
    (0x4c, ALL_DEVICE_TYPES): "Log select",
    (0x4d, ALL_DEVICE_TYPES): "Log sense",
    (0x55, ALL_DEVICE_TYPES): "Mode select(10)",
    (0x56, ALL_DEVICE_TYPES): "Reserve(10)",
    (0x57, ALL_DEVICE_TYPES): "Release(10)",
    (0x5a, ALL_DEVICE_TYPES): "Mode sense(10)",
    (0x5e, ALL_DEVICE_TYPES): "Persistent reserve in",
    (0x5f, ALL_DEVICE_TYPES): "Persistent reserve out",
    (0x83, ALL_DEVICE_TYPES): "Third party copy out",
    (0x84, ALL_DEVICE_TYPES): "Third party copy in",
    (0x86, ALL_DEVICE_TYPES): "Access control in",
    (0x87, ALL_DEVICE_TYPES): "Access control out",
    (0x88, ALL_DEVICE_TYPES): "Read(16)",
    (0x89, ALL_DEVICE_TYPES): "Compare and write",
    (0x8a, ALL_DEVICE_TYPES): "Write(16)",
    (0x8e, ALL_DEVICE_TYPES): "Write and verify(16)",
    (0x8f, ALL_DEVICE_TYPES): "Verify(16)",
    (0x91, ALL_DEVICE_TYPES): "Synchronize cache(16)",
    (0x93, ALL_DEVICE_TYPES): "Write same(16)",
    (0x93, PDT_TAPE): "Erase(16)",
    (0xa0, ALL_DEVICE_TYPES): "Report luns",
    (0xa2, ALL_DEVICE_TYPES): "Security protocol in",
    (0xa5, PDT_MCHANGER): "Move medium",
    (0xa8, ALL_DEVICE_TYPES): "Read(12)",
    (0xaa, ALL_DEVICE_TYPES): "Write(12)",
    (0xb5, ALL_DEVICE_TYPES): "Security protocol out",
    (0xb8, PDT_MCHANGER): "Read element status",
}

# Service action names keyed by (opcode, service action, peripheral device type)
SCSI_SERVICE_ACTION_NAMES: dict[tuple[int, int, int], str] = {
    # PERSISTENT RESERVE IN (5Eh)
    (0x5e, 0x00, ALL_DEVICE_TYPES): "Persistent reserve in, read keys",
    (0x5e, 0x01, ALL_DEVICE_TYPES): "Persistent reserve in, read reservation",
    (0x5e, 0x02, ALL_DEVICE_TYPES): "Persistent reserve in, report capabilities",
    (0x5e, 0x03, ALL_DEVICE_TYPES): "Persistent reserve in, read full status",

    # PERSISTENT RESERVE OUT (5Fh)
    (0x5f, 0x00, ALL_DEVICE_TYPES): "Persistent reserve out, register",
    (0x5f, 0x01, ALL_DEVICE_TYPES): "Persistent reserve out, reserve",
    (0x5f, 0x02, ALL_DEVICE_TYPES): "Persistent reserve out, release",
    (0x5f, 0x03, ALL_DEVICE_TYPES): "Persistent reserve out, clear",
    (0x5f, 0x04, ALL_DEVICE_TYPES): "Persistent reserve out, preempt",
    (0x5f, 0x05, ALL_DEVICE_TYPES): "Persistent reserve out, preempt and abort",
    (0x5f, 0x06, ALL_DEVICE_TYPES): "Persistent reserve out, register and ignore existing key",
    (0x5f, 0x07, ALL_DEVICE_TYPES): "Persistent reserve out, register and move",
    (0x5f, 0x08, ALL_DEVICE_TYPES): "Persistent reserve out, replace lost reservation",

    # VARIABLE LENGTH (7Fh)
    (0x7f, 0x0009, ALL_DEVICE_TYPES): "Read(32)",
    (0x7f, 0x000a, ALL_DEVICE_TYPES): "Verify(32)",
    (0x7f, 0x000b, ALL_DEVICE_TYPES): "Write(32)",
    (0x7f, 0x000c, ALL_DEVICE_TYPES): "Write and verify(32)",
    (0x7f, 0x000d, ALL_DEVICE_TYPES): "Write same(32)",

    # SERVICE ACTION IN(16) (9Eh)
    (0x9e, 0x10, ALL_DEVICE_TYPES): "Read capacity(16)",
    (0x9e, 0x11, ALL_DEVICE_TYPES): "Read long(16)",
    (0x9e, 0x12, ALL_DEVICE_TYPES): "Get LBA status",
    (0x9e, 0x13, ALL_DEVICE_TYPES): "Report referrals",

    # SERVICE ACTION OUT(16) (9Fh)
    (0x9f, 0x11, ALL_DEVICE_TYPES): "Write long(16)",

    # MAINTENANCE IN (A3h)
    (0xa3, 0x05, ALL_DEVICE_TYPES): "Report identifying information",
    (0xa3, 0x0a, ALL_DEVICE_TYPES): "Report target port groups",
    (0xa3, 0x0b, ALL_DEVICE_TYPES): "Report aliases",
    (0xa3, 0x0c, ALL_DEVICE_TYPES): "Report supported operation codes",
    (0xa3, 0x0d, ALL_DEVICE_TYPES): "Report supported task management functions",
    (0xa3, 0x0e, ALL_DEVICE_TYPES): "Report priority",
    (0xa3, 0x0f, ALL_DEVICE_TYPES): "Report timestamp",
    (0xa3, 0x10, ALL_DEVICE_TYPES): "Management protocol in",

    # MAINTENANCE OUT (A4h)
    (0xa4, 0x06, ALL_DEVICE_TYPES): "Set identifying information",
    (0xa4, 0x0a, ALL_DEVICE_TYPES): "Set target port groups",
    (0xa4, 0x0b, ALL_DEVICE_TYPES): "Change aliases",
    (0xa4, 0x0c, ALL_DEVICE_TYPES): "Remove I_T nexus",
    (0xa4, 0x0e, ALL_DEVICE_TYPES): "Set priority",
    (0xa4, 0x0f, ALL_DEVICE_TYPES): "Set timestamp",
    (0xa4, 0x10, ALL_DEVICE_TYPES): "Management protocol out",

    # SERVICE ACTION OUT(12) (A9h) and SERVICE ACTION IN(12) (ABh)
    (0xab, 0x01, ALL_DEVICE_TYPES): "Read media serial number",
}

# Placeholder used when a service action has no table entry
SERVICE_ACTION_PLACEHOLDERS: dict[int, str] = {
    ScsiOpcode.PERSISTENT_RESERVE_IN: "Persistent reserve in, service action=0x{:x}",
    ScsiOpcode.PERSISTENT_RESERVE_OUT: "Persistent reserve out, service action=0x{:x}",
    ScsiOpcode.VARIABLE_LENGTH: "Variable length service action=0x{:x}",
    ScsiOpcode.SERVICE_ACTION_IN_16: "Service action in(16)=0x{:x}",
    ScsiOpcode.SERVICE_ACTION_OUT_16: "Service action out(16)=0x{:x}",
    ScsiOpcode.MAINTENANCE_IN: "Maintenance in service action=0x{:x}",
    ScsiOpcode.MAINTENANCE_OUT: "Maintenance out service action=0x{:x}",
    ScsiOpcode.SERVICE_ACTION_OUT_12: "Service action out(12)=0x{:x}",
    ScsiOpcode.SERVICE_ACTION_IN_12: "Service action in(12)=0x{:x}",
}


def get_opcode_name(opcode: int, peripheral_type: int = PDT_DISK) -> str:
    """
    Return the name of an operation code.

    Args:
        opcode: SCSI operation code (byte 0 of the CDB)
        peripheral_type: peripheral device type of the logical unit

    Returns:
        Command name, or a placeholder for unknown operation codes

    Reference: SPC-4 Section 4.3.4 "Operation code"
    """
    if opcode == ScsiOpcode.VARIABLE_LENGTH:
        return "Variable length"

    group = (opcode >> 5) & 0x7
    if group == 3:
        return f"Reserved [0x{opcode:x}]"
    if group in (6, 7):
        return f"Vendor specific [0x{opcode:x}]"

    name = SCSI_OPCODE_NAMES.get((opcode, peripheral_type))
    if name is None:
        name = SCSI_OPCODE_NAMES.get((opcode, ALL_DEVICE_TYPES))
    if name is None:
        return f"Opcode=0x{opcode:x}"
    return name


def get_opcode_sa_name(opcode: int, service_action: int = 0, peripheral_type: int = PDT_DISK) -> str:
    """
    Return the name of an operation code and service action.

    Operation codes that do not take a service action ignore it.

    Args:
        opcode: SCSI operation code
        service_action: service action, when the opcode has one
        peripheral_type: peripheral device type of the logical unit

    Returns:
        Command name, or a placeholder; never raises
    """
    placeholder = SERVICE_ACTION_PLACEHOLDERS.get(opcode)
    if placeholder is None:
        return get_opcode_name(opcode, peripheral_type)

    name = SCSI_SERVICE_ACTION_NAMES.get((opcode, service_action, peripheral_type))
    if name is None:
        name = SCSI_SERVICE_ACTION_NAMES.get((opcode, service_action, ALL_DEVICE_TYPES))
    if name is None:
        return placeholder.format(service_action)
    return name
