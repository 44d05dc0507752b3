"""
SCSI Protocol Package

Re-exports all protocol functionality.
"""

# Import all constants
from .constants import *  # noqa: F401,F403

# Import all enums and types
from .types import *  # noqa: F401,F403

# Import TransportID encoding and compaction
from .transport_id import *  # noqa: F401,F403
from .transport_id_array import *  # noqa: F401,F403

# Import command builders
from .commands import *  # noqa: F401,F403

# Import command name tables
from .opcode_names import *  # noqa: F401,F403
