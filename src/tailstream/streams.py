"""Duck-typed access to length, position and block reads of arbitrary streams.

Streams from this package expose ``length`` and ``position`` properties.
Plain ``io`` objects do not, so these helpers fall back to ``tell``/``seek``.
"""

import io
from typing import Any


def stream_length(stream: Any) -> int:
    """Return the total length of a stream in bytes."""
    length = getattr(stream, "length", None)
    if length is not None:
        return int(length)
    current = stream.tell()
    end = stream.seek(0, io.SEEK_END)
    stream.seek(current, io.SEEK_SET)
    return end


def stream_position(stream: Any) -> int:
    """Return the current read position of a stream."""
    position = getattr(stream, "position", None)
    if position is not None:
        return int(position)
    return stream.tell()


def read_block(stream: Any, size: int) -> bytes:
    """
    Read up to size bytes from a stream.

    Returns fewer bytes when fewer are available and b"" when none are.
    """
    if size <= 0:
        return b""
    if hasattr(stream, "readinto"):
        buffer = bytearray(size)
        count = stream.readinto(buffer) or 0
        return bytes(buffer[:count])
    return stream.read(size) or b""
