"""Limits, paths, and environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 256_000
DEFAULT_MAX_MESSAGES = 14
DEFAULT_MAX_CHARS = 5_000
DEFAULT_MAX_LINE_CHARS = 420

MIN_MAX_BYTES = 1
MIN_MAX_MESSAGES = 1
MIN_MAX_CHARS = 200
MIN_MAX_LINE_CHARS = 50


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        _LOGGER.warning("Invalid %s=%r; using default %d.", name, raw, default)
        return default


def _default_sessions_dir() -> Path:
    raw = os.environ.get("HEARTBEAT_CONTEXT_SESSIONS_DIR")
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".openclaw" / "sessions"


@dataclass
class Config:
    """Runtime configuration resolved from env vars and defaults."""

    # Tail window size in bytes
    max_bytes: int = field(
        default_factory=lambda: _env_int("HEARTBEAT_CONTEXT_MAX_BYTES", DEFAULT_MAX_BYTES)
    )

    # Most recent messages kept
    max_messages: int = field(
        default_factory=lambda: _env_int("HEARTBEAT_CONTEXT_MAX_MESSAGES", DEFAULT_MAX_MESSAGES)
    )

    # Budget for the whole rendered block, header included
    max_chars: int = field(
        default_factory=lambda: _env_int("HEARTBEAT_CONTEXT_MAX_CHARS", DEFAULT_MAX_CHARS)
    )

    # Budget for one rendered message line
    max_line_chars: int = field(
        default_factory=lambda: _env_int("HEARTBEAT_CONTEXT_MAX_LINE_CHARS", DEFAULT_MAX_LINE_CHARS)
    )

    # Where session transcripts live (used by the CLI's --latest)
    sessions_dir: Path = field(default_factory=_default_sessions_dir)

    def clamped(self) -> Config:
        """Return a copy with every limit raised to its floor."""
        return replace(
            self,
            max_bytes=max(MIN_MAX_BYTES, self.max_bytes),
            max_messages=max(MIN_MAX_MESSAGES, self.max_messages),
            max_chars=max(MIN_MAX_CHARS, self.max_chars),
            max_line_chars=max(MIN_MAX_LINE_CHARS, self.max_line_chars),
        )
