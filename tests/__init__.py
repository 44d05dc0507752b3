"""
SCSI Codec Test Suite

This package contains tests for the TransportID codecs and the supported
operation code parsers.

Test Categories:
- unit/: Unit tests, no device required
- fixtures/: Response builders and helper utilities
"""
