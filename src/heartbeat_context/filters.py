"""Noise filtering and progress-turn classification for transcript text.

The heartbeat writes its own prompt and exec echoes into the same transcript
it later reads back, so those lines are dropped before anything else.

Assistant turns that only announce in-flight work ("let me check...",
"正在为你查询...") alongside a tool call are classified as progress-only.
The pattern table below is a tunable policy, not an exact language model.
"""

from __future__ import annotations

import re
from typing import Any

from .transcripts.content import has_tool_call, text_segments

HEARTBEAT_PROMPT_PREFIX = "Read HEARTBEAT.md if it exists."
HEARTBEAT_ACK_INSTRUCTION = "reply HEARTBEAT_OK"
HEARTBEAT_NO_MESSAGE_TOOL = "Never call the message tool to send HEARTBEAT_OK"

IGNORED_PREFIXES = (HEARTBEAT_PROMPT_PREFIX,)
IGNORED_SUBSTRINGS = (HEARTBEAT_ACK_INSTRUCTION, HEARTBEAT_NO_MESSAGE_TOOL)

# Longer text is treated as substantive even if it opens like a status update.
PROGRESS_MAX_CHARS = 140

_WS_RE = re.compile(r"\s+")

PROGRESS_PATTERNS: tuple[re.Pattern[str], ...] = (
    # English
    re.compile(
        r"^(?:ok(?:ay)?[,.!]?\s+|sure[,.!]?\s+|alright[,.!]?\s+)?(?:let me|lemme|let's)\s+"
        r"(?:quickly\s+|now\s+|first\s+|just\s+)?"
        r"(?:check|look|search|see|find|verify|confirm|pull|fetch|grab|dig|investigate|"
        r"query|review|research|run|try|double[- ]check|take a look)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(?:i'?m|i am)\s+(?:currently\s+|now\s+|just\s+|still\s+)?"
        r"(?:checking|looking|searching|working|pulling|fetching|querying|investigating|"
        r"reviewing|verifying|researching|gathering|running|digging|trying)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(?:i'?ll|i will)\s+(?:now\s+|quickly\s+|first\s+)?"
        r"(?:check|look|search|find|verify|pull|fetch|dig|investigate|query|run)\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(?:working on it|on it|one (?:moment|sec(?:ond)?)|hang on|hold on|"
        r"give me a (?:moment|sec(?:ond)?)|just a (?:moment|sec(?:ond)?))\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"^(?:checking|looking into|searching|fetching|querying|investigating)\b",
        re.IGNORECASE,
    ),
    # Chinese
    re.compile(r"^(?:好的?[，,。！!]?\s*)?(?:我?正在|现在正在|目前正在)"),
    re.compile(r"^(?:好的?[，,。！!]?\s*)?(?:让我|我来|我先|先让我|我去|我马上|马上|稍等|请稍等|稍候)"),
    re.compile(r"(?:查询中|搜索中|处理中|检查中|查找中)[。.…!！]*$"),
)


def collapse_whitespace(text: str) -> str:
    return _WS_RE.sub(" ", text.strip())


def should_ignore_text(text: str) -> bool:
    """Return True for empty text and injected heartbeat/system boilerplate."""
    trimmed = text.strip()
    if not trimmed:
        return True
    if trimmed.startswith(IGNORED_PREFIXES):
        return True
    if any(marker in trimmed for marker in IGNORED_SUBSTRINGS):
        return True
    if trimmed.startswith("System:") and "Exec completed" in trimmed:
        return True
    return False


def is_progress_text(text: str) -> bool:
    """Return True if a short text segment reads as a status announcement."""
    collapsed = collapse_whitespace(text)
    if not collapsed or len(collapsed) > PROGRESS_MAX_CHARS:
        return False
    return any(pattern.search(collapsed) for pattern in PROGRESS_PATTERNS)


def is_progress_only(content: Any) -> bool:
    """Classify assistant content as a transient in-flight update.

    Requires a tool-call block, and either no text at all or only text
    segments that each match a progress phrase.
    """
    if not has_tool_call(content):
        return False
    return all(is_progress_text(segment) for segment in text_segments(content))
