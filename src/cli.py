#!/usr/bin/env python3
"""
CLI for following a file that may grow, vanish and reappear.

Usage:
    python -m src.cli follow /var/log/app.log
    python -m src.cli follow /var/log/app.log --from-start --encoding utf-16-le
    python -m src.cli follow ./out.log --max-line-length 200 --interval-ms 250
"""

import argparse
import io
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Callable, List, Optional

from dotenv import load_dotenv

from src.tailstream import (
    LineReader,
    PollingChangeTracker,
    ResilientFileStream,
    TailConfig,
)


logger = logging.getLogger("cli")


class GracefulShutdown:
    """Set a stop event on SIGINT/SIGTERM."""

    def __init__(self, stop_event: threading.Event):
        self.stop_event = stop_event
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)

    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        self.stop_event.set()


def follow(
    path: Path,
    config: TailConfig,
    emit: Callable[[str], None],
    stop_event: threading.Event,
    from_start: bool = False,
) -> int:
    """
    Emit the lines of a file until stop_event is set.

    The file is re-read whenever its length changes; deleting and
    recreating it starts over from the new file's beginning.

    Args:
        path: File to follow
        config: Codec, polling and watcher settings
        emit: Called with every line
        stop_event: Set to stop following
        from_start: Emit existing content first instead of starting at the end

    Returns:
        Number of lines emitted
    """
    changed = threading.Event()
    stream = ResilientFileStream(
        path,
        watch_events=config.watch_events,
        join_timeout=config.observer_join_timeout_s,
    )
    count = 0

    with PollingChangeTracker(stream, config.recheck_interval) as tracker:
        if not from_start:
            tracker.seek(0, io.SEEK_END)

        reader = LineReader.from_config(tracker, config)
        tracker.subscribe(lambda _: changed.set())
        tracker.start_tracking()

        while not stop_event.is_set():
            for line in reader.read_lines():
                emit(line)
                count += 1
            changed.wait(timeout=config.recheck_interval)
            changed.clear()

    logger.debug(f"Emitted {count} line(s) from {path}")
    return count


def cmd_follow(args) -> int:
    """Run the follow command."""
    path = Path(args.path).resolve()

    config = TailConfig.from_env(
        encoding=args.encoding,
        max_line_length=args.max_line_length,
        recheck_interval_ms=args.interval_ms,
        watch_events=False if args.no_watch else None,
    )

    stop_event = threading.Event()
    GracefulShutdown(stop_event)

    logger.info(f"Following {path}")
    logger.info("Press Ctrl+C to stop")

    def emit(line: str) -> None:
        print(line, flush=True)

    follow(path, config, emit, stop_event, from_start=args.from_start)
    logger.info("Stopped")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tailstream",
        description="Follow files that may be appended to, deleted and recreated",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    follow_parser = subparsers.add_parser("follow", help="Print lines of a file as it grows")
    follow_parser.add_argument("path", help="File to follow")
    follow_parser.add_argument("--encoding", default=None, help="Text encoding (default: utf-8)")
    follow_parser.add_argument(
        "--max-line-length",
        type=int,
        default=None,
        help="Split lines longer than this many characters",
    )
    follow_parser.add_argument(
        "--interval-ms",
        type=int,
        default=None,
        help="Length recheck interval in milliseconds (default: 1000)",
    )
    follow_parser.add_argument(
        "--from-start",
        action="store_true",
        help="Print existing content before following",
    )
    follow_parser.add_argument(
        "--no-watch",
        action="store_true",
        help="Do not subscribe to filesystem create/delete signals",
    )
    follow_parser.set_defaults(func=cmd_follow)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )

    try:
        return args.func(args)
    except (ValueError, LookupError) as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
