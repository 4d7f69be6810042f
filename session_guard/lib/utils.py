"""
Utility functions for session-guard.
"""
from typing import Any
import json
def truncate_text(text: str, max_len: int, suffix: str = "...") -> str:
    """Truncate text to max length with suffix.
    Args:
        text: Text to truncate
        max_len: Maximum length including suffix
        suffix: Suffix to append if truncated
    Returns:
        Truncated text
    """
    if len(text) <= max_len:
        return text
    truncate_at = max_len - len(suffix)
    if truncate_at <= 0:
        return suffix[:max_len]
    return text[:truncate_at] + suffix
def to_tool_content(value: Any) -> str:
    """Render a tool result as the string sent back to the model.
    Strings pass through unchanged; anything else is JSON encoded, with
    non-serializable values converted via str().
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)
