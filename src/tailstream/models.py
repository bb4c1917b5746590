"""Data models for the tailstream package."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional
import time


class OutcomeKind(Enum):
    """Classification of a file operation result."""
    OK = "ok"
    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"


class PathEventType(Enum):
    """Types of signals delivered for a watched path."""
    CREATED = "created"
    DELETED = "deleted"


@dataclass(frozen=True)
class FileOutcome:
    """
    Result of a file operation that may find the file missing.

    Only the "file not there right now" family is captured here; any
    other error raised by the operation propagates to the caller.

    Attributes:
        kind: What happened
        value: Return value of the operation (OK only)
        error: The swallowed exception (NOT_FOUND / ACCESS_DENIED only)
    """
    kind: OutcomeKind
    value: Any = None
    error: Optional[OSError] = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.OK

    def value_or(self, default: Any) -> Any:
        """Return the operation's value, or default if the file was unavailable."""
        return self.value if self.ok else default


def attempt(operation: Callable[[], Any]) -> FileOutcome:
    """
    Run a file operation and classify its result.

    Args:
        operation: Zero-argument callable performing the file access

    Returns:
        FileOutcome tagged OK, NOT_FOUND or ACCESS_DENIED

    Raises:
        Any exception other than FileNotFoundError / PermissionError
    """
    try:
        return FileOutcome(OutcomeKind.OK, value=operation())
    except FileNotFoundError as e:
        return FileOutcome(OutcomeKind.NOT_FOUND, error=e)
    except PermissionError as e:
        return FileOutcome(OutcomeKind.ACCESS_DENIED, error=e)


@dataclass(frozen=True)
class PathEvent:
    """
    Creation or deletion signal for a single watched path.

    Attributes:
        event_type: CREATED or DELETED
        path: The path the signal refers to
        is_directory: Whether the filesystem reported a directory
        timestamp: Unix timestamp when the signal was received
    """
    event_type: PathEventType
    path: Path
    is_directory: bool = False
    timestamp: float = field(default_factory=time.time)
