"""
SCSI Command Client

Client class that issues REPORT SUPPORTED OPERATION CODES and PERSISTENT
RESERVE OUT commands over an injected transport and decodes the results.
The transport does the actual I/O (pass-through ioctl, a target emulator,
a test double), so this module never touches a device itself.

References:
- SPC-4 Section 6.35 (REPORT SUPPORTED OPERATION CODES command)
- SPC-4 Section 6.15 (PERSISTENT RESERVE OUT command)
"""

import logging
from typing import Callable

from .exceptions import SCSICodecError, TransportError
from .models import CommandDescriptor, OneCommandInfo, SortPolicy
from .parsers import SupportedOpcodesParser, build_transport_ids, sort_descriptors
from .protocol import (
    # Types and Enums
    PersistentReserveOutAction,
    ReportingOptions,
    TransportIdArray,
    # Constants
    DEFAULT_ALLOCATION_LENGTH,
    # Functions
    get_opcode_sa_name,
    pack_persistent_reserve_out_cdb,
    pack_register_and_move_parameter_list,
    pack_register_command,
    pack_report_supported_opcodes_cdb,
)


Transport = Callable[..., bytes]


class ScsiCommandClient:
    """
    SCSI command client over an injected transport.

    The transport is called as transport(cdb, allocation_length) for
    data-in commands and transport(cdb, 0, data_out=parameters) for
    data-out commands, and returns the bytes received.

    Example:
        client = ScsiCommandClient(sg_transport, peripheral_type=0)

        for descriptor in client.list_supported_commands(rctd=True):
            print(client.command_name(descriptor), descriptor.nominal_timeout)

        cdb, parameters = client.register_transport_ids(
            0x0, 0x123abc, "sas,5000c50005b32001")
    """

    def __init__(self, transport: Transport, peripheral_type: int = 0,
                 allocation_length: int = DEFAULT_ALLOCATION_LENGTH,
                 sort_policy: SortPolicy = SortPolicy.NUMERIC):
        """
        Initialize SCSI command client.

        Args:
            transport: Callable performing the command, see class docstring
            peripheral_type: Peripheral device type used to resolve command names
            allocation_length: Allocation length for data-in commands
            sort_policy: Default ordering for list_supported_commands()
        """
        self._transport = transport
        self.peripheral_type = peripheral_type
        self.allocation_length = allocation_length
        self.sort_policy = sort_policy
        self._logger = logging.getLogger(__name__)

    def _execute(self, cdb: bytes, allocation_length: int, data_out: bytes | None = None) -> bytes:
        """
        Send a CDB through the transport.

        Raises:
            TransportError: If the transport raises
        """
        name = get_opcode_sa_name(cdb[0], cdb[1] & 0x1F, self.peripheral_type)
        try:
            self._logger.debug(f"Sending {name}: cdb={cdb.hex()}")
            if data_out is None:
                response = self._transport(cdb, allocation_length)
            else:
                response = self._transport(cdb, allocation_length, data_out=data_out)
        except Exception as e:
            self._logger.error(f"{name} failed: {e}")
            raise TransportError(f"{name} failed: {e}", cdb=cdb) from e

        response = bytes(response or b"")
        self._logger.debug(f"{name} returned {len(response)} bytes")
        return response

    def command_name(self, descriptor: CommandDescriptor) -> str:
        """Resolve the name of the command a descriptor reports."""
        return get_opcode_sa_name(descriptor.opcode, descriptor.sort_service_action,
                                  self.peripheral_type)

    def list_supported_commands(self, rctd: bool = False,
                                sort_policy: SortPolicy | None = None) -> list[CommandDescriptor]:
        """
        List every command the device supports.

        Args:
            rctd: Ask the device for command timeouts descriptors
            sort_policy: Ordering to apply (defaults to the client's sort_policy)

        Returns:
            List of CommandDescriptor

        Raises:
            TransportError: If the transport fails
            TruncatedInputError: If the response is malformed
        """
        cdb = pack_report_supported_opcodes_cdb(ReportingOptions.ALL_COMMANDS, rctd=rctd,
                                                allocation_length=self.allocation_length)
        response = self._execute(cdb, self.allocation_length)
        descriptors = SupportedOpcodesParser.parse_all_commands(response)

        policy = self.sort_policy if sort_policy is None else sort_policy
        return sort_descriptors(descriptors, policy, peripheral_type=self.peripheral_type)

    def get_command_info(self, opcode: int, service_action: int | None = None,
                         rctd: bool = False) -> OneCommandInfo:
        """
        Get support information for one command.

        Args:
            opcode: Operation code
            service_action: Service action, None for commands without one
            rctd: Ask the device for a command timeouts descriptor

        Returns:
            OneCommandInfo
        """
        if service_action is None:
            options = ReportingOptions.ONE_COMMAND
            service_action = 0
        else:
            options = ReportingOptions.ONE_COMMAND_SERVICE_ACTION

        cdb = pack_report_supported_opcodes_cdb(options, opcode, service_action, rctd,
                                                self.allocation_length)
        response = self._execute(cdb, self.allocation_length)
        return SupportedOpcodesParser.parse_one_command(response)

    def list_supported_commands_with_usage(self, rctd: bool = False) -> list[tuple[CommandDescriptor, OneCommandInfo]]:
        """
        List every supported command together with its CDB usage data.

        Issues one additional one-command request per descriptor.

        Returns:
            List of (CommandDescriptor, OneCommandInfo) tuples
        """
        results = []
        for descriptor in self.list_supported_commands(rctd=rctd):
            service_action = descriptor.service_action if descriptor.service_action_valid else None
            try:
                info = self.get_command_info(descriptor.opcode, service_action, rctd)
            except SCSICodecError as e:
                self._logger.error(f"Usage data for {self.command_name(descriptor)} failed: {e}")
                raise
            results.append((descriptor, info))
        return results

    @staticmethod
    def _packed_transport_ids(transport_ids) -> bytes:
        """Accept an argument string, a TransportIdArray or packed bytes."""
        if isinstance(transport_ids, str):
            transport_ids = build_transport_ids(transport_ids)
        if isinstance(transport_ids, TransportIdArray):
            return transport_ids.compact()
        return bytes(transport_ids or b"")

    def register_transport_ids(self, reservation_key: int, service_action_key: int,
                               transport_ids, all_tg_pt: bool = False, aptpl: bool = False,
                               ignore_existing_key: bool = False) -> tuple[bytes, bytes]:
        """
        Register a reservation key for the I_T nexuses named by TransportIDs.

        Args:
            reservation_key: Current reservation key
            service_action_key: Key to register
            transport_ids: TransportID argument string ("-", "file=...", a
                           symbolic TransportID or a hex list), a
                           TransportIdArray, or packed TransportID bytes
            all_tg_pt: Register on all target ports
            aptpl: Activate persist through power loss
            ignore_existing_key: Use REGISTER AND IGNORE EXISTING KEY

        Returns:
            Tuple of (cdb, parameter_list) sent to the device
        """
        packed = self._packed_transport_ids(transport_ids)
        action = (PersistentReserveOutAction.REGISTER_AND_IGNORE_EXISTING_KEY
                  if ignore_existing_key else PersistentReserveOutAction.REGISTER)

        cdb, parameters = pack_register_command(reservation_key, service_action_key, packed,
                                                all_tg_pt, aptpl, service_action=action)
        self._execute(cdb, 0, data_out=parameters)
        return cdb, parameters

    def register_and_move(self, reservation_key: int, service_action_key: int,
                          relative_target_port: int, transport_ids,
                          reservation_type: int, unreg: bool = False,
                          aptpl: bool = False) -> tuple[bytes, bytes]:
        """
        Move the reservation to the I_T nexus named by a TransportID.

        Returns:
            Tuple of (cdb, parameter_list) sent to the device
        """
        packed = self._packed_transport_ids(transport_ids)
        parameters = pack_register_and_move_parameter_list(reservation_key, service_action_key,
                                                           relative_target_port, packed,
                                                           unreg, aptpl)
        cdb = pack_persistent_reserve_out_cdb(PersistentReserveOutAction.REGISTER_AND_MOVE,
                                              reservation_type=reservation_type,
                                              parameter_length=len(parameters))
        self._execute(cdb, 0, data_out=parameters)
        return cdb, parameters
