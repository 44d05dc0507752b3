"""
Unit tests for REPORT SUPPORTED OPERATION CODES parsing

Tests the all-commands descriptor walk, truncation handling, the one-command
format, timeouts descriptors and descriptor ordering.
"""

import os
import sys
import unittest

from scsi_codec.exceptions import LengthViolationError, TruncatedInputError
from scsi_codec.models import CommandSupport, SortPolicy
from scsi_codec.parsers.supported_opcodes import SupportedOpcodesParser, sort_descriptors

# Add the fixtures directory to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'fixtures'))

# Import test fixtures (must come after sys.path manipulation)
from mock_responses import (  # noqa: E402
    create_all_commands_response,
    create_command_descriptor,
    create_one_command_response,
    create_timeout_descriptor,
)


class TestParseAllCommands(unittest.TestCase):
    """Test SupportedOpcodesParser.parse_all_commands."""

    def test_empty_list(self):
        """Test a zero command data length."""
        self.assertEqual(SupportedOpcodesParser.parse_all_commands(b'\x00\x00\x00\x00'), [])

    def test_empty_list_ignores_trailing_data(self):
        """Test a zero command data length with more bytes in the buffer."""
        data = b'\x00\x00\x00\x00' + create_command_descriptor(0x12)
        self.assertEqual(SupportedOpcodesParser.parse_all_commands(data), [])

    def test_header_too_short(self):
        """Test a response without a complete header."""
        with self.assertRaises(TruncatedInputError):
            SupportedOpcodesParser.parse_all_commands(b'\x00\x00\x00')

    def test_plain_descriptors(self):
        """Test 8-byte descriptors."""
        data = create_all_commands_response([
            create_command_descriptor(0x00, cdb_length=6),
            create_command_descriptor(0x5e, service_action=0x01, cdb_length=10),
        ])

        descriptors = SupportedOpcodesParser.parse_all_commands(data)

        self.assertEqual(len(descriptors), 2)
        first, second = descriptors
        self.assertEqual(first.opcode, 0x00)
        self.assertFalse(first.service_action_valid)
        self.assertEqual(first.service_action, 0)
        self.assertEqual(first.cdb_length, 6)
        self.assertEqual(first.offset, 4)
        self.assertEqual(first.length, 8)
        self.assertIsNone(first.nominal_timeout)

        self.assertEqual(second.opcode, 0x5e)
        self.assertTrue(second.service_action_valid)
        self.assertEqual(second.service_action, 0x01)
        self.assertEqual(second.cdb_length, 10)
        self.assertEqual(second.offset, 12)
        self.assertEqual(second.raw, data[12:20])

    def test_service_action_ignored_when_not_valid(self):
        """Test bytes 2-3 are reported as 0 without SERVACTV."""
        descriptor = bytearray(create_command_descriptor(0x12))
        descriptor[2:4] = b'\x00\x07'
        parsed = SupportedOpcodesParser.parse_all_commands(create_all_commands_response([bytes(descriptor)]))
        self.assertEqual(parsed[0].service_action, 0)

    def test_descriptors_with_timeouts(self):
        """Test 20-byte stride when CTDP is set."""
        data = create_all_commands_response([
            create_command_descriptor(0x28, cdb_length=10,
                                      timeouts=create_timeout_descriptor(30, 60, command_specific=2)),
            create_command_descriptor(0x2a, cdb_length=10, timeouts=create_timeout_descriptor(0, 0)),
            create_command_descriptor(0x00),
        ])

        descriptors = SupportedOpcodesParser.parse_all_commands(data)

        self.assertEqual([d.opcode for d in descriptors], [0x28, 0x2a, 0x00])
        self.assertEqual([d.offset for d in descriptors], [4, 24, 44])
        self.assertTrue(descriptors[0].timeout_descriptor_present)
        self.assertEqual(descriptors[0].length, 20)
        self.assertEqual(descriptors[0].nominal_timeout, 30)
        self.assertEqual(descriptors[0].recommended_timeout, 60)
        self.assertEqual(descriptors[0].command_specific, 2)
        self.assertIsNone(descriptors[1].nominal_timeout)
        self.assertIsNone(descriptors[1].recommended_timeout)
        self.assertFalse(descriptors[2].timeout_descriptor_present)

    def test_byte5_fields(self):
        """Test CDLP, MLU and RWCDLP decoding."""
        data = create_all_commands_response([
            create_command_descriptor(0x88, cdb_length=16, extra_flags=0x40 | (2 << 4) | (1 << 2)),
        ])
        descriptor = SupportedOpcodesParser.parse_all_commands(data)[0]
        self.assertTrue(descriptor.rwcdlp)
        self.assertEqual(descriptor.mlu, 2)
        self.assertEqual(descriptor.cdlp, 1)

    def test_declared_length_clamped(self):
        """Test a command data length larger than the buffer."""
        data = create_all_commands_response([
            create_command_descriptor(0x00),
            create_command_descriptor(0x12),
        ], declared_length=1000)

        with self.assertLogs('scsi_codec.parsers.supported_opcodes', level='WARNING'):
            descriptors = SupportedOpcodesParser.parse_all_commands(data)

        self.assertEqual([d.opcode for d in descriptors], [0x00, 0x12])

    def test_clamp_rounds_down_to_descriptor(self):
        """Test a partial trailing descriptor is not read."""
        data = create_all_commands_response([
            create_command_descriptor(0x00),
            create_command_descriptor(0x12)[:5],
        ], declared_length=16)

        descriptors = SupportedOpcodesParser.parse_all_commands(data)

        self.assertEqual(len(descriptors), 1)

    def test_clamp_drops_cut_timeouts_descriptor(self):
        """Test a 20-byte descriptor cut by the clamp is dropped."""
        data = create_all_commands_response([
            create_command_descriptor(0x00),
            create_command_descriptor(0x28, timeouts=create_timeout_descriptor(30, 60)),
        ], declared_length=28)[:20]

        with self.assertLogs('scsi_codec.parsers.supported_opcodes', level='WARNING') as logs:
            descriptors = SupportedOpcodesParser.parse_all_commands(data)

        self.assertEqual([d.opcode for d in descriptors], [0x00])
        self.assertTrue(any("Dropping" in line for line in logs.output))

    def test_response_length(self):
        """Test only response_length bytes are used."""
        data = create_all_commands_response([
            create_command_descriptor(0x00),
            create_command_descriptor(0x12),
        ]) + bytes(100)

        descriptors = SupportedOpcodesParser.parse_all_commands(data, response_length=12)

        self.assertEqual(len(descriptors), 1)

    def test_partial_descriptor_in_declared_length(self):
        """Test a command data length that ends inside a descriptor."""
        data = create_all_commands_response([
            create_command_descriptor(0x28, timeouts=create_timeout_descriptor(30, 60)),
        ], declared_length=16)

        with self.assertRaises(TruncatedInputError):
            SupportedOpcodesParser.parse_all_commands(data)

    def test_declared_length_shorter_than_data(self):
        """Test trailing bytes past the command data length are ignored."""
        data = create_all_commands_response([
            create_command_descriptor(0x00),
            create_command_descriptor(0x12),
        ], declared_length=8)

        self.assertEqual(len(SupportedOpcodesParser.parse_all_commands(data)), 1)


class TestTimeoutDescriptor(unittest.TestCase):
    """Test SupportedOpcodesParser.parse_timeout_descriptor."""

    def test_values(self):
        timeouts = SupportedOpcodesParser.parse_timeout_descriptor(
            create_timeout_descriptor(30, 120, command_specific=5))
        self.assertEqual(timeouts.descriptor_length, 10)
        self.assertEqual(timeouts.command_specific, 5)
        self.assertEqual(timeouts.nominal_timeout, 30)
        self.assertEqual(timeouts.recommended_timeout, 120)

    def test_zero_is_unspecified(self):
        timeouts = SupportedOpcodesParser.parse_timeout_descriptor(create_timeout_descriptor())
        self.assertIsNone(timeouts.nominal_timeout)
        self.assertIsNone(timeouts.recommended_timeout)

    def test_bad_length(self):
        with self.assertRaises(LengthViolationError):
            SupportedOpcodesParser.parse_timeout_descriptor(create_timeout_descriptor(30, 60, length=8))

    def test_bad_length_tolerated_in_descriptor_list(self):
        """Test the all-commands walk only warns on a bad length."""
        data = create_all_commands_response([
            create_command_descriptor(0x28, timeouts=create_timeout_descriptor(30, 60, length=8)),
        ])
        with self.assertLogs('scsi_codec.parsers.supported_opcodes', level='WARNING'):
            descriptors = SupportedOpcodesParser.parse_all_commands(data)
        self.assertEqual(descriptors[0].nominal_timeout, 30)

    def test_truncated(self):
        with self.assertRaises(TruncatedInputError):
            SupportedOpcodesParser.parse_timeout_descriptor(create_timeout_descriptor()[:8])


class TestParseOneCommand(unittest.TestCase):
    """Test SupportedOpcodesParser.parse_one_command."""

    def test_supported(self):
        usage = b'\x12\x01\xff\xff\xff\x07'
        info = SupportedOpcodesParser.parse_one_command(create_one_command_response(3, usage))

        self.assertEqual(info.support, CommandSupport.STANDARD)
        self.assertTrue(info.is_supported)
        self.assertEqual(info.cdb_size, 6)
        self.assertEqual(info.usage_data, usage)
        self.assertFalse(info.timeout_descriptor_present)
        self.assertIsNone(info.timeouts)

    def test_not_supported(self):
        info = SupportedOpcodesParser.parse_one_command(create_one_command_response(1, b''))
        self.assertEqual(info.support, CommandSupport.NOT_SUPPORTED)
        self.assertFalse(info.is_supported)
        self.assertEqual(info.cdb_size, 0)

    def test_flags(self):
        data = create_one_command_response(5, b'\xa3\x0c', extra_flags=(3 << 5) | (2 << 3), rwcdlp=True)
        info = SupportedOpcodesParser.parse_one_command(data)
        self.assertEqual(info.support, CommandSupport.VENDOR_SPECIFIC)
        self.assertEqual(info.mlu, 3)
        self.assertEqual(info.cdlp, 2)
        self.assertTrue(info.rwcdlp)

    def test_with_timeouts(self):
        data = create_one_command_response(3, bytes(10), timeouts=create_timeout_descriptor(15, 0))
        info = SupportedOpcodesParser.parse_one_command(data)
        self.assertTrue(info.timeout_descriptor_present)
        self.assertEqual(info.timeouts.nominal_timeout, 15)
        self.assertIsNone(info.timeouts.recommended_timeout)

    def test_truncated_usage_data(self):
        data = create_one_command_response(3, bytes(10))[:8]
        with self.assertRaises(TruncatedInputError):
            SupportedOpcodesParser.parse_one_command(data)

    def test_truncated_timeouts(self):
        data = create_one_command_response(3, bytes(6), timeouts=create_timeout_descriptor(15, 30))[:-2]
        with self.assertRaises(TruncatedInputError):
            SupportedOpcodesParser.parse_one_command(data)

    def test_bad_timeout_length(self):
        data = create_one_command_response(3, bytes(6), timeouts=create_timeout_descriptor(15, 30, length=12))
        with self.assertRaises(LengthViolationError):
            SupportedOpcodesParser.parse_one_command(data)


class TestSortDescriptors(unittest.TestCase):
    """Test sort_descriptors."""

    def setUp(self):
        """Set up descriptors in response order."""
        data = create_all_commands_response([
            create_command_descriptor(0x5e, service_action=0x03),
            create_command_descriptor(0x1a),
            create_command_descriptor(0x03),
            create_command_descriptor(0x5e, service_action=0x00),
        ])
        self.descriptors = SupportedOpcodesParser.parse_all_commands(data)

    def test_unsorted(self):
        result = sort_descriptors(self.descriptors, SortPolicy.UNSORTED)
        self.assertEqual([d.opcode for d in result], [0x5e, 0x1a, 0x03, 0x5e])

    def test_numeric(self):
        result = sort_descriptors(self.descriptors, SortPolicy.NUMERIC)
        self.assertEqual([(d.opcode, d.service_action) for d in result],
                         [(0x03, 0), (0x1a, 0), (0x5e, 0x00), (0x5e, 0x03)])

    def test_numeric_two_descriptors(self):
        result = sort_descriptors(self.descriptors[1:3], SortPolicy.NUMERIC)
        self.assertEqual([d.opcode for d in result], [0x03, 0x1a])

    def test_alphabetic_default_names(self):
        """Test ordering by the built-in command names."""
        result = sort_descriptors(self.descriptors, SortPolicy.ALPHABETIC)
        # "Mode sense(6)" < "Persistent reserve in, ..." < "Request Sense"
        self.assertEqual([(d.opcode, d.service_action) for d in result],
                         [(0x1a, 0), (0x5e, 0x03), (0x5e, 0x00), (0x03, 0)])

    def test_alphabetic_resolver(self):
        """Test ordering with an injected name resolver."""
        names = {0x1a: "b", 0x03: "c", 0x5e: "a"}
        calls = []

        def resolver(opcode, service_action, peripheral_type):
            calls.append(peripheral_type)
            return names[opcode] + str(service_action)

        result = sort_descriptors(self.descriptors, SortPolicy.ALPHABETIC, resolver, peripheral_type=1)

        self.assertEqual([(d.opcode, d.service_action) for d in result],
                         [(0x5e, 0x00), (0x5e, 0x03), (0x1a, 0), (0x03, 0)])
        self.assertTrue(all(pdt == 1 for pdt in calls))

    def test_alphabetic_is_bytewise(self):
        """Test upper case sorts before lower case."""
        names = {0x1a: "apple", 0x03: "Zebra", 0x5e: "mango"}
        result = sort_descriptors(self.descriptors[1:3], SortPolicy.ALPHABETIC,
                                  lambda op, sa, pdt: names[op])
        self.assertEqual([d.opcode for d in result], [0x03, 0x1a])

    def test_alphabetic_names_truncated(self):
        """Test names only compare up to the name buffer size."""
        prefix = "x" * 200
        names = {0x1a: prefix + "b", 0x03: prefix + "a"}
        result = sort_descriptors(self.descriptors[1:3], SortPolicy.ALPHABETIC,
                                  lambda op, sa, pdt: names[op])
        # Equal after truncation, so response order is kept
        self.assertEqual([d.opcode for d in result], [0x1a, 0x03])

    def test_none_entries_first(self):
        result = sort_descriptors([self.descriptors[1], None, self.descriptors[2]], SortPolicy.NUMERIC)
        self.assertIsNone(result[0])
        self.assertEqual([d.opcode for d in result[1:]], [0x03, 0x1a])

        result = sort_descriptors([self.descriptors[1], None], SortPolicy.ALPHABETIC)
        self.assertIsNone(result[0])

    def test_input_not_modified(self):
        sort_descriptors(self.descriptors, SortPolicy.NUMERIC)
        self.assertEqual([d.opcode for d in self.descriptors], [0x5e, 0x1a, 0x03, 0x5e])

    def test_empty(self):
        self.assertEqual(sort_descriptors([], SortPolicy.ALPHABETIC), [])


if __name__ == '__main__':
    unittest.main()
