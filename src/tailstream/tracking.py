"""Stream decorator that polls the wrapped stream for length changes."""

import io
import logging
import threading
from typing import Any, Callable, List, Optional

from .exceptions import TrackingAlreadyStartedError
from .streams import stream_length, stream_position

logger = logging.getLogger(__name__)


class PollingChangeTracker(io.RawIOBase):
    """
    Wraps a stream and notifies observers when its length changes.

    Reads, seeks and writes pass through to the wrapped stream
    unchanged. Once tracking is started, a check cycle runs
    immediately and then every recheck_interval seconds. The timer is
    disarmed while a cycle (observer callbacks included) runs and
    re-armed afterwards, so cycles never overlap.
    """

    def __init__(self, base_stream: Any, recheck_interval: float = 1.0):
        """
        Initialize the tracker.

        Args:
            base_stream: Stream to wrap; anything with a length or tell/seek
            recheck_interval: Seconds between check cycles

        Raises:
            ValueError: If base_stream is None or the interval is not positive
        """
        super().__init__()
        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self._tracking = False
        self._in_cycle = False
        self._recheck_pending = False
        self._observers: List[Callable[["PollingChangeTracker"], None]] = []
        self._last_seen_length = 0
        self._base: Any = None

        if base_stream is None:
            raise ValueError("base_stream must not be None")
        if recheck_interval <= 0:
            raise ValueError(f"recheck_interval must be positive: {recheck_interval}")

        self._base = base_stream
        self._recheck_interval = recheck_interval

    @property
    def base_stream(self) -> Any:
        """The wrapped stream."""
        return self._base

    @property
    def recheck_interval(self) -> float:
        return self._recheck_interval

    @property
    def is_tracking(self) -> bool:
        with self._lock:
            return self._tracking

    @property
    def last_seen_length(self) -> int:
        """Length observed by the most recent check cycle."""
        return self._last_seen_length

    def subscribe(self, callback: Callable[["PollingChangeTracker"], None]) -> None:
        """Register an observer called with this tracker when the length changes."""
        with self._lock:
            self._observers.append(callback)

    def unsubscribe(self, callback: Callable[["PollingChangeTracker"], None]) -> bool:
        """
        Remove an observer.

        Returns:
            True if the observer was registered
        """
        with self._lock:
            try:
                self._observers.remove(callback)
                return True
            except ValueError:
                return False

    def start_tracking(self) -> None:
        """
        Start tracking, running the first check cycle on the calling thread.

        Raises:
            TrackingAlreadyStartedError: If tracking is already started
            ValueError: If the tracker is closed
        """
        with self._lock:
            if self.closed:
                raise ValueError("I/O operation on closed stream")
            if self._tracking:
                raise TrackingAlreadyStartedError("Tracking is already started")
            self._tracking = True
        logger.debug(f"Started tracking {self._base!r}")
        self._run_cycle()

    def stop_tracking(self) -> None:
        """Stop tracking. No further check cycles are scheduled."""
        with self._lock:
            if not self._tracking:
                return
            self._tracking = False
            self._disarm()
        logger.debug(f"Stopped tracking {self._base!r}")

    def _arm(self) -> None:
        timer = threading.Timer(self._recheck_interval, self._run_cycle)
        timer.daemon = True
        timer.name = "PollingChangeTracker"
        self._timer = timer
        timer.start()

    def _disarm(self) -> None:
        if self._timer is None:
            return
        self._timer.cancel()
        self._timer = None

    def _run_cycle(self) -> None:
        """Compare the current length with the last seen one, notify on change."""
        with self._lock:
            if not self._tracking:
                return
            if self._in_cycle:
                # Run again as soon as the current cycle finishes
                self._recheck_pending = True
                return
            self._in_cycle = True
            self._disarm()
            try:
                current_length = stream_length(self._base)
            except OSError as e:
                logger.debug(f"Length check of {self._base!r} failed: {e}")
                current_length = None
            changed = current_length is not None and current_length != self._last_seen_length
            if changed:
                self._last_seen_length = current_length
            observers = list(self._observers)

        try:
            if changed:
                logger.debug(f"{self._base!r} length changed to {current_length}")
                for callback in observers:
                    callback(self)
        finally:
            with self._lock:
                self._in_cycle = False
                rerun = self._recheck_pending and self._tracking and not self.closed
                self._recheck_pending = False
                if not rerun and self._tracking and self._timer is None and not self.closed:
                    self._arm()
            if rerun:
                self._run_cycle()

    # Pass-through stream interface

    def readable(self) -> bool:
        return self._base.readable()

    def seekable(self) -> bool:
        return self._base.seekable()

    def writable(self) -> bool:
        return self._base.writable()

    def readinto(self, b) -> int:
        with self._lock:
            return self._base.readinto(b)

    def read(self, size: int = -1) -> bytes:
        with self._lock:
            return self._base.read(size)

    def write(self, b) -> int:
        with self._lock:
            return self._base.write(b)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        with self._lock:
            return self._base.seek(offset, whence)

    def tell(self) -> int:
        with self._lock:
            return self._base.tell()

    def truncate(self, size=None) -> int:
        with self._lock:
            return self._base.truncate(size)

    def flush(self) -> None:
        if self.closed or self._base is None:
            return
        with self._lock:
            self._base.flush()

    @property
    def length(self) -> int:
        with self._lock:
            return stream_length(self._base)

    @property
    def position(self) -> int:
        with self._lock:
            return stream_position(self._base)

    @position.setter
    def position(self, value: int) -> None:
        self.seek(value, io.SEEK_SET)

    def close(self) -> None:
        """Stop tracking, release the timer and close the wrapped stream."""
        with self._lock:
            if self.closed:
                return
            self._tracking = False
            self._disarm()
            super().close()
        if self._base is not None:
            self._base.close()

    def __repr__(self) -> str:
        return f"PollingChangeTracker({self._base!r})"
