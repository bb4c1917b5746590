"""Encoding-aware line readers over byte streams."""

import codecs
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterator, Optional

from .config import DEFAULT_BLOCK_SIZE, TailConfig
from .search import find_first_subsequence
from .streams import read_block, stream_length, stream_position

logger = logging.getLogger(__name__)

BOM = "\ufeff"


def encode_terminator(encoding: str) -> bytes:
    """
    Encode the line feed character with the given codec.

    Codecs that prefix their output with a byte-order mark (utf-16,
    utf-8-sig, ...) write it only once, so the mark is removed by
    encoding two line feeds and keeping the tail.

    Raises:
        LookupError: If the encoding is unknown
    """
    codecs.lookup(encoding)
    single = "\n".encode(encoding)
    double = "\n\n".encode(encoding)
    return double[len(single):]


class BaseLinesReader(ABC):
    """
    Abstract base for readers that enumerate text lines of a stream.

    Holds the stream, the codec and the position counter: the number
    of source bytes already resolved into emitted lines.
    """

    def __init__(
        self,
        base_stream: Any,
        encoding: str = "utf-8",
        block_size: int = DEFAULT_BLOCK_SIZE,
        errors: str = "replace",
    ):
        """
        Initialize the reader.

        Args:
            base_stream: Readable byte stream
            encoding: Text encoding of the stream
            block_size: Bytes read from the stream per read call
            errors: Codec error handler used when decoding lines

        Raises:
            ValueError: If the stream is None or not readable, or block_size is not positive
            LookupError: If the encoding is unknown
        """
        if base_stream is None:
            raise ValueError("base_stream must not be None")
        readable = getattr(base_stream, "readable", None)
        if readable is not None and not readable():
            raise ValueError("base_stream must be readable")
        if block_size <= 0:
            raise ValueError(f"block_size must be positive: {block_size}")

        self._base = base_stream
        self._encoding = encoding
        self._errors = errors
        self._block_size = block_size
        self._terminator = encode_terminator(encoding)
        self._position = 0

    @property
    def position(self) -> int:
        """Source bytes resolved into emitted lines."""
        return self._position

    @property
    def length(self) -> int:
        """Length of the underlying stream."""
        return stream_length(self._base)

    @property
    def base_stream(self) -> Any:
        return self._base

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def terminator(self) -> bytes:
        """Encoded line terminator."""
        return self._terminator

    @abstractmethod
    def read_lines(self) -> Iterator[str]:
        """Enumerate the lines of the stream from its current position."""

    def __iter__(self) -> Iterator[str]:
        return iter(self.read_lines())

    def _decode(self, data: bytes) -> str:
        """Decode a raw line, dropping a leading BOM and surrounding CR/LF."""
        text = data.decode(self._encoding, self._errors)
        return text.lstrip(BOM).strip("\r\n")


class LineReader(BaseLinesReader):
    """
    Lazily enumerates decoded lines of a byte stream.

    Lines that straddle block boundaries are reassembled; a final line
    without a terminator is emitted once the stream is exhausted.
    Enumeration starts wherever the stream's position currently is, so
    enumerating again after the source grows yields only the new lines.

    Example::

        reader = LineReader(stream, encoding="utf-8")
        for line in reader.read_lines():
            print(line)
    """

    def __init__(
        self,
        base_stream: Any,
        encoding: str = "utf-8",
        block_size: int = DEFAULT_BLOCK_SIZE,
        max_line_length: Optional[int] = None,
        errors: str = "replace",
    ):
        """
        Initialize the reader.

        Args:
            base_stream: Readable byte stream
            encoding: Text encoding of the stream
            block_size: Bytes read from the stream per read call
            max_line_length: Split emitted lines longer than this (None = no limit)
            errors: Codec error handler used when decoding lines
        """
        super().__init__(base_stream, encoding, block_size, errors)
        _check_max_line_length(max_line_length)
        self.max_line_length = max_line_length

    @classmethod
    def from_config(cls, base_stream: Any, config: TailConfig) -> "LineReader":
        """Create a reader using the codec and size settings of a TailConfig."""
        return cls(
            base_stream,
            encoding=config.encoding,
            block_size=config.block_size,
            max_line_length=config.max_line_length,
            errors=config.errors,
        )

    def read_lines(self, max_line_length: Optional[int] = None) -> Iterator[str]:
        """
        Enumerate lines, splitting those longer than the length limit.

        Args:
            max_line_length: Limit for this enumeration (default: the reader's)

        Yields:
            Decoded lines, or consecutive pieces of over-long lines
        """
        _check_max_line_length(max_line_length)
        limit = max_line_length or self.max_line_length

        for line in self._read_raw_lines():
            if limit is None:
                yield line
                continue
            start = 0
            while len(line) - start > limit:
                yield line[start:start + limit]
                start += limit
            yield line[start:]

    def _find_terminator(self, buffer: bytes, line_start: int, scan_from: int) -> int:
        """
        Find the next terminator at or after scan_from.

        For multi-byte encodings a match only counts on a code unit
        boundary relative to line_start.
        """
        width = len(self._terminator)
        index = find_first_subsequence(buffer, self._terminator, scan_from)
        while index >= 0 and (index - line_start) % width:
            index = find_first_subsequence(buffer, self._terminator, index + 1)
        return index

    def _read_raw_lines(self) -> Iterator[str]:
        stream = self._base
        width = len(self._terminator)
        self._position = stream_position(stream)
        remainder = b""

        while True:
            position = stream_position(stream)
            length = stream_length(stream)
            if position >= length:
                break

            block = read_block(stream, min(length - position, self._block_size))
            if not block:
                logger.debug(f"No bytes available from {stream!r}, ending enumeration")
                break

            buffer = remainder + block
            processed = 0
            # Bytes of the remainder were already scanned without a match
            scan_from = max(0, len(remainder) - width + 1)

            while True:
                end = self._find_terminator(buffer, processed, max(processed, scan_from))
                if end < 0:
                    break
                line_end = end + width
                raw_line = buffer[processed:line_end]
                self._position += len(raw_line)
                processed = line_end
                yield self._decode(raw_line)

            remainder = buffer[processed:]

        if remainder:
            self._position += len(remainder)
            yield self._decode(remainder)


def _check_max_line_length(max_line_length: Optional[int]) -> None:
    if max_line_length is not None and max_line_length <= 0:
        raise ValueError(f"max_line_length must be positive: {max_line_length}")
