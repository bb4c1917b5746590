"""Single-path filesystem watcher using the watchdog library."""

import logging
import os
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from watchdog.observers import Observer
from watchdog.events import (
    FileSystemEventHandler,
    FileSystemEvent,
    FileSystemMovedEvent,
)

from .models import PathEvent, PathEventType

logger = logging.getLogger(__name__)


class PathEventHandler(FileSystemEventHandler):
    """Handler that turns watchdog events for one file name into PathEvents."""

    def __init__(self, path: Path, callback: Callable[[PathEvent], None]):
        super().__init__()
        self.path = path
        self.callback = callback

    def _matches(self, raw_path) -> bool:
        """Check if a raw watchdog path refers to the watched file."""
        return Path(os.fsdecode(raw_path)).name == self.path.name

    def _emit(self, event_type: PathEventType, is_directory: bool) -> None:
        """Emit a PathEvent to the callback."""
        event = PathEvent(
            event_type=event_type,
            path=self.path,
            is_directory=is_directory,
            timestamp=time.time(),
        )
        self.callback(event)

    def on_created(self, event: FileSystemEvent):
        if self._matches(event.src_path):
            self._emit(PathEventType.CREATED, event.is_directory)

    def on_deleted(self, event: FileSystemEvent):
        if self._matches(event.src_path):
            self._emit(PathEventType.DELETED, event.is_directory)

    def on_moved(self, event: FileSystemMovedEvent):
        # Renaming away from the path is a deletion, renaming onto it a creation
        if self._matches(event.src_path):
            self._emit(PathEventType.DELETED, event.is_directory)
        if self._matches(event.dest_path):
            self._emit(PathEventType.CREATED, event.is_directory)


class PathWatcher:
    """
    Delivers created/deleted signals for a single file path.

    Owns one watchdog observer scheduled non-recursively on the
    file's directory. Signals arrive on the observer thread.
    """

    def __init__(
        self,
        path: Path,
        callback: Callable[[PathEvent], None],
        join_timeout: float = 5.0,
    ):
        """
        Initialize the watcher.

        Args:
            path: Absolute path of the file to watch
            callback: Called with a PathEvent for every signal
            join_timeout: Seconds to wait for the observer thread on stop
        """
        self.path = path
        self.callback = callback
        self.join_timeout = join_timeout
        self._observer: Optional[Observer] = None
        self._lock = threading.Lock()

    def start(self) -> bool:
        """
        Start watching.

        Returns:
            True if watching started, False if already watching or the
            directory cannot be watched
        """
        directory = self.path.parent

        with self._lock:
            if self._observer is not None:
                return False

            if not directory.is_dir():
                logger.warning(f"Cannot watch {self.path}: directory does not exist")
                return False

            observer = Observer()
            handler = PathEventHandler(self.path, self.callback)
            observer.schedule(handler, str(directory), recursive=False)
            try:
                observer.start()
            except OSError as e:
                logger.warning(f"Cannot watch {self.path}: {e}")
                return False

            self._observer = observer
            logger.info(f"Started watching {self.path}")
            return True

    def stop(self) -> bool:
        """
        Stop watching.

        Returns:
            True if watching stopped, False if not watching
        """
        with self._lock:
            observer = self._observer
            if observer is None:
                return False
            self._observer = None

        observer.stop()
        # A callback may close its stream from the observer thread itself
        if threading.current_thread() is not observer:
            observer.join(timeout=self.join_timeout)
        logger.info(f"Stopped watching {self.path}")
        return True

    @property
    def is_active(self) -> bool:
        """Whether the observer is currently running."""
        with self._lock:
            return self._observer is not None
