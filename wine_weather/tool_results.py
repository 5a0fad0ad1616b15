"""Decode wine weather tool results returned by a FastMCP client."""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable


def _text_blocks(blocks: Iterable[Any]) -> Iterable[str]:
    for block in blocks:
        if getattr(block, "type", None) == "text" and getattr(block, "text", None):
            yield block.text


def tool_result_payload(result: Any) -> Dict[str, Any]:
    """Parse the JSON object carried by a tool call.

    Every wine weather tool answers with a single JSON object, serialised
    into the first text block of the call result. ``result`` may be the
    ``CallToolResult`` itself or its list of content blocks.
    """
    blocks = getattr(result, "content", result) or []
    text = next(iter(_text_blocks(blocks)), None)
    if text is None:
        raise ValueError("tool result has no text content")

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"tool result is not JSON: {text[:80]!r}") from exc
    if not isinstance(payload, dict):
        raise TypeError(f"expected a JSON object, got {type(payload).__name__}")
    return payload
