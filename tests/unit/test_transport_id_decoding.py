"""
Unit tests for binary TransportID decoding
"""

import os
import sys
import unittest

from scsi_codec.exceptions import TruncatedInputError
from scsi_codec.parsers.transport_id import TransportIdParser
from scsi_codec.protocol.transport_id import encode_transport_id
from scsi_codec.protocol.types import ProtocolIdentifier

# Add the fixtures directory to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'fixtures'))

# Import test fixtures (must come after sys.path manipulation)
from mock_responses import (  # noqa: E402
    FCP_TRANSPORT_ID,
    SAS_TRANSPORT_ID,
    create_iscsi_transport_id,
)


class TestTransportIdParser(unittest.TestCase):
    """Test decoding single TransportIDs."""

    def test_sas(self):
        decoded = TransportIdParser.parse_transport_id(SAS_TRANSPORT_ID)
        self.assertEqual(decoded.protocol, ProtocolIdentifier.SAS)
        self.assertEqual(decoded.address, 0x5000c50005b32001)
        self.assertEqual(decoded.length, 24)

    def test_fcp(self):
        decoded = TransportIdParser.parse_transport_id(FCP_TRANSPORT_ID)
        self.assertEqual(decoded.protocol, ProtocolIdentifier.FCP)
        self.assertEqual(decoded.address, 0x21000024ff3b5a6c)

    def test_spi(self):
        decoded = TransportIdParser.parse_transport_id(encode_transport_id("spi,3,7"))
        self.assertEqual(decoded.scsi_address, 3)
        self.assertEqual(decoded.relative_port, 7)

    def test_srp(self):
        port = "00112233445566778899aabbccddeeff"
        decoded = TransportIdParser.parse_transport_id(encode_transport_id("srp," + port))
        self.assertEqual(decoded.port_identifier, bytes.fromhex(port))

    def test_sop(self):
        decoded = TransportIdParser.parse_transport_id(encode_transport_id("sop,1f"))
        self.assertEqual(decoded.protocol, ProtocolIdentifier.SOP)
        self.assertEqual(decoded.routing_id, 0x1f)

    def test_iscsi(self):
        name = "iqn.1998-01.com.example:host1"
        decoded = TransportIdParser.parse_transport_id(create_iscsi_transport_id(name))
        self.assertEqual(decoded.iscsi_name, name)
        self.assertEqual(decoded.length, 36)
        self.assertFalse(decoded.has_session_id)

    def test_iscsi_session_id(self):
        name = "iqn.1998-01.com.example:host1,i,0x23d000000001"
        decoded = TransportIdParser.parse_transport_id(encode_transport_id(name))
        self.assertEqual(decoded.format_code, 1)
        self.assertTrue(decoded.has_session_id)
        self.assertEqual(decoded.iscsi_name, name)

    def test_unknown_protocol(self):
        """Test a protocol without a field layout."""
        tid = bytes([0x0E]) + bytes(23)
        decoded = TransportIdParser.parse_transport_id(tid)
        self.assertIsNone(decoded.protocol)
        self.assertEqual(decoded.protocol_id, 0x0E)
        self.assertIsNone(decoded.address)

    def test_offset(self):
        decoded = TransportIdParser.parse_transport_id(bytes(8) + SAS_TRANSPORT_ID, offset=8)
        self.assertEqual(decoded.address, 0x5000c50005b32001)

    def test_truncated(self):
        with self.assertRaises(TruncatedInputError):
            TransportIdParser.parse_transport_id(SAS_TRANSPORT_ID[:20])

    def test_truncated_iscsi(self):
        """Test an iSCSI TransportID shorter than its additional length."""
        tid = create_iscsi_transport_id("iqn.a", 40)
        with self.assertRaises(TruncatedInputError):
            TransportIdParser.parse_transport_id(tid[:30])


class TestEncodeDecodeRoundTrip(unittest.TestCase):
    """Test encoded TransportIDs decode back to their fields."""

    def test_protocol_from_byte0(self):
        """Test every notation yields its protocol identifier."""
        cases = {
            "sas,5000c50005b32001": ProtocolIdentifier.SAS,
            "spi,3,7": ProtocolIdentifier.SPI,
            "fcp,21000024ff3b5a6c": ProtocolIdentifier.FCP,
            "sbp,0011223344556677": ProtocolIdentifier.SBP,
            "srp,00112233445566778899aabbccddeeff": ProtocolIdentifier.SRP,
            "sop,1f": ProtocolIdentifier.SOP,
            "iqn.1998-01.com.example:host1": ProtocolIdentifier.ISCSI,
        }
        for text, protocol in cases.items():
            with self.subTest(text=text):
                decoded = TransportIdParser.parse_transport_id(encode_transport_id(text))
                self.assertEqual(decoded.protocol, protocol)

    def test_addresses_recovered(self):
        """Test 64-bit addresses survive encoding."""
        for prefix in ("sas,", "fcp,", "sbp,"):
            for address in ("0000000000000000", "5000c50005b32001", "ffffffffffffffff"):
                with self.subTest(prefix=prefix, address=address):
                    decoded = TransportIdParser.parse_transport_id(encode_transport_id(prefix + address))
                    self.assertEqual(decoded.address, int(address, 16))


class TestTransportIdListDecoding(unittest.TestCase):
    """Test decoding packed TransportIDs."""

    def test_packed_list(self):
        """Test walking a compacted blob."""
        iscsi = create_iscsi_transport_id("iqn.2003-01.org.x:a", 24)
        decoded = TransportIdParser.parse_transport_id_list(SAS_TRANSPORT_ID + iscsi + FCP_TRANSPORT_ID)

        self.assertEqual([d.protocol for d in decoded],
                         [ProtocolIdentifier.SAS, ProtocolIdentifier.ISCSI, ProtocolIdentifier.FCP])
        self.assertEqual([d.length for d in decoded], [24, 28, 24])
        self.assertEqual(decoded[1].iscsi_name, "iqn.2003-01.org.x:a")

    def test_empty(self):
        self.assertEqual(TransportIdParser.parse_transport_id_list(b''), [])

    def test_trailing_partial(self):
        with self.assertRaises(TruncatedInputError):
            TransportIdParser.parse_transport_id_list(SAS_TRANSPORT_ID + bytes(10))


if __name__ == '__main__':
    unittest.main()
