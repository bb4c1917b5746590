"""Read-only file stream that survives its file being deleted and recreated."""

import io
import logging
import os
import threading
from pathlib import Path
from typing import Callable, Optional

from .fs_watcher import PathWatcher
from .models import FileOutcome, PathEvent, attempt

logger = logging.getLogger(__name__)


class ResilientFileStream(io.RawIOBase):
    """
    Readable, seekable view of a single file path.

    The underlying file is opened lazily on first access and closed
    whenever the file is reported created or deleted, the path no
    longer refers to the open file, a read fails because the file is
    gone or inaccessible, or a read returns no bytes. The next access
    opens it again. While the file is absent,
    reads return 0 bytes and length/position report 0 instead of
    raising.

    Example::

        with ResilientFileStream("/var/log/app.log") as stream:
            data = stream.read(4096)
    """

    def __init__(
        self,
        file_path,
        watch_events: bool = True,
        join_timeout: float = 5.0,
    ):
        """
        Initialize the stream.

        Args:
            file_path: Path of the file to read (str or os.PathLike)
            watch_events: Subscribe to create/delete signals for the path
            join_timeout: Seconds to wait for the watcher thread on close

        Raises:
            ValueError: If file_path is None
        """
        super().__init__()
        self._lock = threading.RLock()
        self._handle: Optional[io.FileIO] = None
        self._watcher: Optional[PathWatcher] = None

        if file_path is None:
            raise ValueError("file_path must not be None")

        self._path = Path(os.path.abspath(os.fspath(file_path)))

        if watch_events:
            self._watcher = PathWatcher(self._path, self._on_path_event, join_timeout)
            self._watcher.start()

    @property
    def file_path(self) -> Path:
        """Absolute path this stream is bound to."""
        return self._path

    @property
    def is_watching(self) -> bool:
        """Whether create/delete signals are currently being received."""
        return self._watcher is not None and self._watcher.is_active

    @property
    def is_bound(self) -> bool:
        """Whether an underlying file handle is currently open."""
        with self._lock:
            return self._handle is not None

    def _on_path_event(self, event: PathEvent) -> None:
        """Watcher callback: drop the handle so the next access reopens."""
        logger.debug(f"{event.event_type.value} signal for {self._path}")
        self._close_handle()

    def _close_handle(self) -> None:
        with self._lock:
            if self._handle is None:
                return
            self._handle.close()
            self._handle = None
            logger.debug(f"Unbound {self._path}")

    def _try_open(self) -> FileOutcome:
        with self._lock:
            outcome = attempt(lambda: open(self._path, "rb", buffering=0))
            if outcome.ok:
                self._handle = outcome.value
                logger.debug(f"Bound {self._path}")
                if self._watcher is not None and not self._watcher.is_active:
                    # The directory may not have existed when the stream was created
                    self._watcher.start()
            else:
                logger.debug(f"Cannot open {self._path}: {outcome.kind.value}")
            return outcome

    def _perform(self, operation: Callable[[io.FileIO], object]) -> FileOutcome:
        """
        Run an operation against the handle, binding first if needed.

        Args:
            operation: Callable receiving the open handle

        Returns:
            The classified outcome; fatal errors propagate
        """
        self._check_open()
        with self._lock:
            if self._handle is not None and self._is_replaced():
                logger.debug(f"{self._path} no longer refers to the open file")
                self._close_handle()
            if self._handle is None:
                opened = self._try_open()
                if not opened.ok:
                    return opened
            handle = self._handle
            outcome = attempt(lambda: operation(handle))
            if not outcome.ok:
                logger.debug(f"Swallowed {outcome.kind.value} on {self._path}: {outcome.error}")
            return outcome

    def _is_replaced(self) -> bool:
        """Check if the path is gone or now names a different file than the handle."""
        current = attempt(lambda: os.stat(self._path))
        if not current.ok:
            return True
        bound = os.fstat(self._handle.fileno())
        return (current.value.st_ino, current.value.st_dev) != (bound.st_ino, bound.st_dev)

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed stream")

    def read_into(self, buffer, offset: int = 0, count: Optional[int] = None) -> int:
        """
        Read up to count bytes into buffer starting at offset.

        Args:
            buffer: Writable bytes-like object
            offset: Index in buffer where the data is stored
            count: Maximum number of bytes (default: rest of buffer)

        Returns:
            Number of bytes read; 0 when the file is absent or exhausted

        Raises:
            ValueError: On a None buffer or an invalid offset/count
        """
        if buffer is None:
            raise ValueError("buffer must not be None")
        if offset < 0:
            raise ValueError(f"offset must not be negative: {offset}")
        if count is None:
            count = len(buffer) - offset
        if count < 0:
            raise ValueError(f"count must not be negative: {count}")
        if offset + count > len(buffer):
            raise ValueError(
                f"offset + count exceeds buffer length: {offset} + {count} > {len(buffer)}"
            )

        with self._lock, memoryview(buffer) as whole, whole[offset:offset + count] as view:
            outcome = self._perform(lambda handle: handle.readinto(view))
            bytes_read = outcome.value_or(0) or 0
            if bytes_read == 0:
                # Absent, inaccessible or at end: re-evaluate on next access
                self._close_handle()
            return bytes_read

    def readinto(self, b) -> int:
        return self.read_into(b)

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def writable(self) -> bool:
        return False

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        """Move the read position; returns 0 if the file is unavailable."""
        return self._perform(lambda handle: handle.seek(offset, whence)).value_or(0)

    def tell(self) -> int:
        return self.position

    @property
    def length(self) -> int:
        """Current file size in bytes, or 0 if the file is unavailable."""
        return self._perform(lambda handle: os.fstat(handle.fileno()).st_size).value_or(0)

    @property
    def position(self) -> int:
        """Current read position, or 0 if the file is unavailable."""
        return self._perform(lambda handle: handle.tell()).value_or(0)

    @position.setter
    def position(self, value: int) -> None:
        self._perform(lambda handle: handle.seek(value, io.SEEK_SET))

    def write(self, b):
        raise io.UnsupportedOperation("ResilientFileStream is read-only")

    def truncate(self, size=None):
        raise io.UnsupportedOperation("ResilientFileStream is read-only")

    def flush(self) -> None:
        pass

    def close(self) -> None:
        """Stop watching the path and release the file handle."""
        if self.closed:
            return
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None
        self._close_handle()
        super().close()

    def __repr__(self) -> str:
        return f"ResilientFileStream({str(self._path)!r})"
