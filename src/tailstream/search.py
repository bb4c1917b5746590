"""Search primitives over sorted sequences and byte buffers."""

from bisect import bisect_right
from typing import Any, Optional, Sequence


_BYTES_TYPES = (bytes, bytearray)


def binary_search_floor(values: Sequence[Any], needle: Any) -> int:
    """
    Find the index of the greatest element less than or equal to needle.

    Args:
        values: Ascending-sorted sequence of comparable elements
        needle: Value to look up

    Returns:
        Index of the floor element, or -1 if values is empty or needle
        is below the first element

    Raises:
        ValueError: If values is None
    """
    if values is None:
        raise ValueError("values must not be None")
    if len(values) == 0 or needle < values[0]:
        return -1
    return bisect_right(values, needle) - 1


def find_value(values: Sequence[Any], needle: Any) -> Optional[int]:
    """Like binary_search_floor, but returns None instead of a negative index."""
    index = binary_search_floor(values, needle)
    return index if index >= 0 else None


def _is_match(buffer: Sequence[Any], position: int, pattern: Sequence[Any]) -> bool:
    if len(pattern) > len(buffer) - position:
        return False
    for i, item in enumerate(pattern):
        if buffer[position + i] != item:
            return False
    return True


def _check_search_args(buffer, pattern, from_offset: int) -> bool:
    """Return True if a search can possibly succeed."""
    if from_offset is not None and from_offset < 0:
        raise ValueError(f"from_offset must not be negative: {from_offset}")
    if not buffer or not pattern or len(pattern) > len(buffer):
        return False
    if from_offset is not None and from_offset > len(buffer):
        return False
    return True


def find_first_subsequence(buffer: Sequence[Any], pattern: Sequence[Any], from_offset: int = 0) -> int:
    """
    Find the first occurrence of pattern in buffer at or after from_offset.

    Args:
        buffer: Sequence to scan
        pattern: Sub-sequence to look for
        from_offset: Index to start scanning from

    Returns:
        Index where the first match starts, or -1

    Raises:
        ValueError: If from_offset is negative
    """
    if not _check_search_args(buffer, pattern, from_offset):
        return -1

    if isinstance(buffer, _BYTES_TYPES) and isinstance(pattern, _BYTES_TYPES):
        return buffer.find(pattern, from_offset)

    for i in range(from_offset, len(buffer)):
        if _is_match(buffer, i, pattern):
            return i
    return -1


def find_last_subsequence(
    buffer: Sequence[Any],
    pattern: Sequence[Any],
    from_offset: Optional[int] = None,
) -> int:
    """
    Find the last occurrence of pattern in buffer starting at or before from_offset.

    Scans backward from from_offset down to 0.

    Args:
        buffer: Sequence to scan
        pattern: Sub-sequence to look for
        from_offset: Highest start index to consider (None = end of buffer)

    Returns:
        Index where the last match starts, or -1

    Raises:
        ValueError: If from_offset is negative
    """
    if not _check_search_args(buffer, pattern, from_offset):
        return -1

    if from_offset is None:
        from_offset = len(buffer)

    if isinstance(buffer, _BYTES_TYPES) and isinstance(pattern, _BYTES_TYPES):
        return buffer.rfind(pattern, 0, from_offset + len(pattern))

    for i in range(from_offset, -1, -1):
        if _is_match(buffer, i, pattern):
            return i
    return -1
