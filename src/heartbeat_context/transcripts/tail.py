"""Read the tail of a session transcript and parse its message records."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path

_LOGGER = logging.getLogger(__name__)

_LINE_SPLIT_RE = re.compile(r"\r?\n")

MESSAGE_ROLES = ("user", "assistant")


@dataclass(frozen=True)
class TailWindow:
    """Decoded text of the last bytes of a file and where it starts."""

    text: str
    offset: int  # byte offset of the window within the full file


def read_tail_text(path: Path, max_bytes: int) -> TailWindow:
    """Read at most *max_bytes* from the end of *path*.

    The window is decoded as UTF-8 without aligning on a codepoint or line
    boundary; invalid sequences at the cut are replaced. OSError propagates.
    """
    path = Path(path)
    size = path.stat().st_size
    if size <= 0:
        return TailWindow(text="", offset=0)

    read_size = min(size, max(1, max_bytes))
    offset = max(0, size - read_size)
    with path.open("rb") as handle:
        handle.seek(offset)
        raw = handle.read(read_size)
    return TailWindow(text=raw.decode("utf-8", errors="replace"), offset=offset)


def split_tail_lines(text: str, offset: int) -> list[str]:
    """Split tail text into lines, dropping the leading line when it may be partial."""
    lines = _LINE_SPLIT_RE.split(text)
    # A window that doesn't start at byte 0 may begin mid-record.
    if lines and offset > 0:
        dropped = lines.pop(0)
        _LOGGER.debug("Dropped leading tail line (%d chars) at offset %d", len(dropped), offset)
    return lines


def parse_message_records(lines: list[str]) -> list[dict]:
    """Parse JSONL lines and return the user/assistant message payloads in order.

    Lines that fail to parse, records that are not ``type == "message"``, and
    payloads with any other role are skipped.
    """
    messages: list[dict] = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError as exc:
            _LOGGER.debug("Skipping malformed transcript line: %s", exc)
            continue

        if not isinstance(entry, dict) or entry.get("type") != "message":
            continue
        msg = entry.get("message")
        if not isinstance(msg, dict):
            continue
        if msg.get("role") not in MESSAGE_ROLES:
            continue
        messages.append(msg)

    return messages


def read_message_records(path: Path, max_bytes: int) -> list[dict]:
    """Read the tail window of *path* and return its message payloads."""
    window = read_tail_text(path, max_bytes)
    if not window.text.strip():
        return []
    return parse_message_records(split_tail_lines(window.text, window.offset))
