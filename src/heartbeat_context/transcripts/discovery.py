"""Locate session transcript files on disk."""

from __future__ import annotations

from pathlib import Path


def find_latest_session(sessions_dir: Path) -> Path | None:
    """Return the most recently modified session .jsonl file under sessions_dir."""
    if not sessions_dir.exists():
        return None
    sessions = [p for p in sessions_dir.rglob("*.jsonl") if p.is_file()]
    if not sessions:
        return None
    return max(sessions, key=lambda p: p.stat().st_mtime)
