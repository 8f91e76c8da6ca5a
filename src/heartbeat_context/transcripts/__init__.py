"""Session transcript reading for the heartbeat context builder."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TranscriptMessage:
    """A user or assistant turn recovered from the transcript tail."""

    role: str  # "user" or "assistant"
    text: str  # extracted text or non-text placeholder, never empty
    is_progress_only: bool | None = None  # assistant only; None for user turns
