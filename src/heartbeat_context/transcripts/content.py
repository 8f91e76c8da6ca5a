"""Extract plain text from structured transcript message content."""

from __future__ import annotations

from typing import Any

# Block types that carry a tool invocation rather than narration.
TOOL_CALL_TYPES = frozenset({
    "toolCall", "toolUse", "tool_call", "tool_use", "functionCall", "function_call",
})


def _content_blocks(content: Any) -> list:
    """Normalize message content to a list of blocks."""
    if isinstance(content, str):
        return [{"type": "text", "text": content}]
    if isinstance(content, list):
        return content
    return []


def text_segments(content: Any) -> list[str]:
    """Return the non-blank text of every ``text`` block, in order."""
    segments = []
    for block in _content_blocks(content):
        if not isinstance(block, dict) or block.get("type") != "text":
            continue
        text = block.get("text")
        if isinstance(text, str) and text.strip():
            segments.append(text)
    return segments


def block_types(content: Any) -> list[str]:
    """Distinct, trimmed block type tags in order of first appearance."""
    types: list[str] = []
    for block in _content_blocks(content):
        if not isinstance(block, dict):
            continue
        tag = block.get("type")
        if not isinstance(tag, str) or not tag.strip():
            continue
        tag = tag.strip()
        if tag not in types:
            types.append(tag)
    return types


def has_tool_call(content: Any) -> bool:
    return any(
        isinstance(block, dict) and block.get("type") in TOOL_CALL_TYPES
        for block in _content_blocks(content)
    )


def extract_text_or_placeholder(message: dict) -> str | None:
    """Extract readable text from a message payload.

    User turns without text (an image, say) become a ``[non-text message: ...]``
    placeholder listing their block types. Assistant turns without text
    yield None.
    """
    content = message.get("content")
    combined = "\n".join(text_segments(content)).strip()
    if combined:
        return combined

    # Placeholders describe real block lists only; blank string content is dropped.
    if message.get("role") != "user" or not isinstance(content, list):
        return None

    types = block_types(content)
    if not types:
        return None
    return f"[non-text message: {', '.join(types)}]"
