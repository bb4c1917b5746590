"""
tailstream

Primitives for reading a file that another process may append to,
delete, or recreate at any time, and for turning its bytes into text
lines without losing or duplicating data across read boundaries.

Features:
- ResilientFileStream: read-only stream that survives delete/recreate
- PollingChangeTracker: stream decorator notifying on length changes
- LineReader: buffered, encoding-aware line enumeration
- Sub-sequence and sorted-sequence search helpers
"""

from .models import (
    OutcomeKind,
    FileOutcome,
    PathEventType,
    PathEvent,
    attempt,
)

from .config import TailConfig, DEFAULT_BLOCK_SIZE

from .exceptions import (
    TailStreamError,
    TrackingError,
    TrackingAlreadyStartedError,
)

from .search import (
    binary_search_floor,
    find_value,
    find_first_subsequence,
    find_last_subsequence,
)
from .streams import stream_length, stream_position, read_block
from .fs_watcher import PathWatcher, PathEventHandler
from .resilient_file import ResilientFileStream
from .tracking import PollingChangeTracker
from .lines import BaseLinesReader, LineReader, encode_terminator


__all__ = [
    # Models
    "OutcomeKind",
    "FileOutcome",
    "PathEventType",
    "PathEvent",
    "attempt",
    # Config
    "TailConfig",
    "DEFAULT_BLOCK_SIZE",
    # Exceptions
    "TailStreamError",
    "TrackingError",
    "TrackingAlreadyStartedError",
    # Search
    "binary_search_floor",
    "find_value",
    "find_first_subsequence",
    "find_last_subsequence",
    # Stream helpers
    "stream_length",
    "stream_position",
    "read_block",
    # Components
    "PathWatcher",
    "PathEventHandler",
    "ResilientFileStream",
    "PollingChangeTracker",
    "BaseLinesReader",
    "LineReader",
    "encode_terminator",
]

__version__ = "0.1.0"
