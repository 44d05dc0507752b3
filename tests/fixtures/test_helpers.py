"""
Test Helper Functions

Common utilities and helpers used across multiple test modules.
"""

import os
from unittest.mock import Mock

from scsi_codec.client import ScsiCommandClient


def get_test_client_config():
    """Get client configuration from environment variables."""
    return {
        'peripheral_type': int(os.getenv('SCSI_CODEC_PERIPHERAL_TYPE', '0'), 0),
        'allocation_length': int(os.getenv('SCSI_CODEC_ALLOCATION_LENGTH', '8192'), 0),
    }


def create_mock_transport(responses: list[bytes] | None = None, error: Exception | None = None):
    """Create a mock transport returning the given responses in sequence."""
    transport = Mock()
    if error is not None:
        transport.side_effect = error
    else:
        transport.side_effect = list(responses or [])
    return transport


def create_client(responses: list[bytes] | None = None, error: Exception | None = None, **kwargs):
    """Create a ScsiCommandClient over a mock transport."""
    config = get_test_client_config()
    config.update(kwargs)
    transport = create_mock_transport(responses, error)
    return ScsiCommandClient(transport, **config), transport


def transport_id_lines(*lines: str):
    """Return lines as newline terminated chunks, as read from a file."""
    return [line + '\n' for line in lines]
