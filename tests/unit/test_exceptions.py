"""
Unit tests for exception classes

Tests custom exception hierarchy and error information.
"""

import unittest

from scsi_codec.exceptions import (
    CapacityExceededError,
    LengthViolationError,
    ParseError,
    SCSICodecError,
    TransportError,
    TransportIdIOError,
    TransportIdParseError,
    TruncatedInputError,
    UnrecognizedNotationError,
)


class TestExceptionHierarchy(unittest.TestCase):
    """Test exception class hierarchy."""

    def test_base_exception(self):
        """Test base SCSICodecError exception."""
        exc = SCSICodecError("Base error")
        self.assertIsInstance(exc, Exception)
        self.assertEqual(str(exc), "Base error")

    def test_subclasses(self):
        """Test every error derives from SCSICodecError."""
        for cls in (UnrecognizedNotationError, LengthViolationError, TransportIdParseError,
                    CapacityExceededError, TruncatedInputError, TransportIdIOError,
                    TransportError):
            with self.subTest(cls=cls.__name__):
                exc = cls("failed")
                self.assertIsInstance(exc, SCSICodecError)
                self.assertEqual(str(exc), "failed")

    def test_parse_error_alias(self):
        """Test ParseError alias."""
        self.assertIs(ParseError, TransportIdParseError)


class TestTransportIdParseError(unittest.TestCase):
    """Test TransportIdParseError with position information."""

    def test_line_and_column(self):
        exc = TransportIdParseError("syntax error", line=3, column=7)
        self.assertEqual(exc.line, 3)
        self.assertEqual(exc.column, 7)
        self.assertEqual(str(exc), "syntax error at line 3, pos 7")

    def test_line_only(self):
        exc = TransportIdParseError("bad symbolic TransportID", line=2)
        self.assertEqual(str(exc), "bad symbolic TransportID in line 2")
        self.assertIsNone(exc.column)

    def test_column_only(self):
        exc = TransportIdParseError("unexpected character", column=5)
        self.assertEqual(str(exc), "unexpected character at pos 5")
        self.assertIsNone(exc.line)


class TestTransportError(unittest.TestCase):
    """Test TransportError with CDB."""

    def test_cdb(self):
        exc = TransportError("Inquiry failed", cdb=b'\x12\x00\x00\x00\x24\x00')
        self.assertEqual(exc.cdb, b'\x12\x00\x00\x00\x24\x00')

    def test_default_cdb(self):
        self.assertIsNone(TransportError("failed").cdb)


if __name__ == '__main__':
    unittest.main()
