"""Tests for filesystem watcher module."""

import pytest
import time
import threading
from pathlib import Path

from watchdog.events import (
    DirCreatedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from src.tailstream.models import PathEventType
from src.tailstream.fs_watcher import PathWatcher, PathEventHandler


class TestPathEventHandler:
    """Tests for PathEventHandler class."""

    def test_created_for_watched_file(self, tmp_path):
        events = []
        target = tmp_path / "app.log"
        handler = PathEventHandler(target, events.append)

        handler.on_created(FileCreatedEvent(str(target)))

        assert len(events) == 1
        assert events[0].event_type is PathEventType.CREATED
        assert events[0].path == target
        assert events[0].is_directory is False

    def test_deleted_for_watched_file(self, tmp_path):
        events = []
        target = tmp_path / "app.log"
        handler = PathEventHandler(target, events.append)

        handler.on_deleted(FileDeletedEvent(str(target)))

        assert [e.event_type for e in events] == [PathEventType.DELETED]

    def test_ignores_other_files(self, tmp_path):
        events = []
        handler = PathEventHandler(tmp_path / "app.log", events.append)

        handler.on_created(FileCreatedEvent(str(tmp_path / "other.log")))
        handler.on_deleted(FileDeletedEvent(str(tmp_path / "app.log.1")))

        assert events == []

    def test_directory_created_at_path(self, tmp_path):
        events = []
        target = tmp_path / "app.log"
        handler = PathEventHandler(target, events.append)

        handler.on_created(DirCreatedEvent(str(target)))

        assert len(events) == 1
        assert events[0].is_directory is True

    def test_move_away_is_deletion(self, tmp_path):
        events = []
        target = tmp_path / "app.log"
        handler = PathEventHandler(target, events.append)

        handler.on_moved(FileMovedEvent(str(target), str(tmp_path / "app.log.1")))

        assert [e.event_type for e in events] == [PathEventType.DELETED]

    def test_move_onto_is_creation(self, tmp_path):
        events = []
        target = tmp_path / "app.log"
        handler = PathEventHandler(target, events.append)

        handler.on_moved(FileMovedEvent(str(tmp_path / "app.log.tmp"), str(target)))

        assert [e.event_type for e in events] == [PathEventType.CREATED]

    def test_modified_is_ignored(self, tmp_path):
        events = []
        target = tmp_path / "app.log"
        handler = PathEventHandler(target, events.append)

        handler.dispatch(FileModifiedEvent(str(target)))

        assert events == []


class TestPathWatcher:
    """Tests for PathWatcher class."""

    def test_start_and_stop(self, tmp_path):
        watcher = PathWatcher(tmp_path / "app.log", lambda e: None)

        assert watcher.start() is True
        assert watcher.is_active

        assert watcher.stop() is True
        assert not watcher.is_active

    def test_start_twice(self, tmp_path):
        watcher = PathWatcher(tmp_path / "app.log", lambda e: None)

        watcher.start()
        assert watcher.start() is False

        watcher.stop()

    def test_stop_when_not_started(self, tmp_path):
        watcher = PathWatcher(tmp_path / "app.log", lambda e: None)
        assert watcher.stop() is False

    def test_missing_directory(self, tmp_path):
        watcher = PathWatcher(tmp_path / "missing" / "app.log", lambda e: None)

        assert watcher.start() is False
        assert not watcher.is_active

    def test_detects_creation_and_deletion(self, tmp_path):
        target = tmp_path / "app.log"
        events = []
        lock = threading.Lock()

        def callback(event):
            with lock:
                events.append(event)

        watcher = PathWatcher(target, callback)
        watcher.start()

        # Give watcher time to start
        time.sleep(0.2)

        target.write_text("hello")
        time.sleep(0.3)
        target.unlink()

        # Wait for events
        time.sleep(0.5)

        watcher.stop()

        with lock:
            types = {e.event_type for e in events}

        assert PathEventType.CREATED in types
        assert PathEventType.DELETED in types

    def test_ignores_sibling_files(self, tmp_path):
        events = []
        lock = threading.Lock()

        def callback(event):
            with lock:
                events.append(event)

        watcher = PathWatcher(tmp_path / "app.log", callback)
        watcher.start()

        time.sleep(0.2)

        (tmp_path / "other.log").write_text("not watched")
        (tmp_path / "other.log").unlink()

        time.sleep(0.5)

        watcher.stop()

        with lock:
            assert events == []
