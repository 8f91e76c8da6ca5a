"""Heartbeat context: a denoised, read-only tail of a chat session transcript."""

from .config import Config
from .context import ContextResult, Diagnostics, build, build_block

__all__ = ["Config", "ContextResult", "Diagnostics", "build", "build_block"]
