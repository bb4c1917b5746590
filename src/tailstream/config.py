"""Configuration for the tailstream package."""

import codecs
import os
from dataclasses import dataclass
from typing import Any, Optional


DEFAULT_BLOCK_SIZE = 65535

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class TailConfig:
    """
    Configuration options for following a file.

    Attributes:
        encoding: Text encoding of the followed file
        errors: Codec error handler used when decoding lines
        block_size: Bytes read from the stream per read call
        max_line_length: Emitted lines longer than this are split (None = no limit)
        recheck_interval_ms: Interval between length checks of the tracker
        watch_events: Whether to subscribe to filesystem create/delete signals
        observer_join_timeout_s: How long to wait for the watcher thread on close
    """
    encoding: str = "utf-8"
    errors: str = "replace"
    block_size: int = DEFAULT_BLOCK_SIZE
    max_line_length: Optional[int] = None
    recheck_interval_ms: int = 1000
    watch_events: bool = True
    observer_join_timeout_s: float = 5.0

    def __post_init__(self):
        codecs.lookup(self.encoding)
        codecs.lookup_error(self.errors)
        if self.block_size <= 0:
            raise ValueError(f"block_size must be positive: {self.block_size}")
        if self.max_line_length is not None and self.max_line_length <= 0:
            raise ValueError(f"max_line_length must be positive: {self.max_line_length}")
        if self.recheck_interval_ms <= 0:
            raise ValueError(f"recheck_interval_ms must be positive: {self.recheck_interval_ms}")
        if self.observer_join_timeout_s < 0:
            raise ValueError(
                f"observer_join_timeout_s must not be negative: {self.observer_join_timeout_s}"
            )

    @property
    def recheck_interval(self) -> float:
        """Recheck interval in seconds."""
        return self.recheck_interval_ms / 1000.0

    @classmethod
    def from_env(cls, prefix: str = "TAILSTREAM_", **overrides: Any) -> "TailConfig":
        """
        Build a config from environment variables.

        Explicit keyword overrides win over the environment, which wins
        over the defaults. Overrides set to None are ignored.

        Args:
            prefix: Prefix of the environment variable names
            **overrides: Field values taking precedence

        Returns:
            A validated TailConfig
        """
        values: dict = {}
        env = os.environ

        if f"{prefix}ENCODING" in env:
            values["encoding"] = env[f"{prefix}ENCODING"]
        if f"{prefix}ERRORS" in env:
            values["errors"] = env[f"{prefix}ERRORS"]
        if f"{prefix}BLOCK_SIZE" in env:
            values["block_size"] = int(env[f"{prefix}BLOCK_SIZE"])
        if f"{prefix}MAX_LINE_LENGTH" in env:
            raw = env[f"{prefix}MAX_LINE_LENGTH"].strip()
            values["max_line_length"] = int(raw) if raw else None
        if f"{prefix}RECHECK_INTERVAL_MS" in env:
            values["recheck_interval_ms"] = int(env[f"{prefix}RECHECK_INTERVAL_MS"])
        if f"{prefix}WATCH_EVENTS" in env:
            name = f"{prefix}WATCH_EVENTS"
            values["watch_events"] = _parse_bool(name, env[name])
        if f"{prefix}OBSERVER_JOIN_TIMEOUT_S" in env:
            values["observer_join_timeout_s"] = float(env[f"{prefix}OBSERVER_JOIN_TIMEOUT_S"])

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
