"""
Utility functions for heyi.
"""
import re


def truncate_string(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate a string to a maximum length.

    Args:
        text: The string to truncate
        max_length: Maximum length of the output string
        suffix: Suffix to append when truncating

    Returns:
        Truncated string
    """
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix


def format_bytes(num_bytes: float) -> str:
    """
    Format byte count to human-readable string.

    Args:
        num_bytes: Number of bytes

    Returns:
        Formatted string (e.g., "1.5 KB")
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if abs(num_bytes) < 1024.0:
            return f"{num_bytes:.1f} {unit}"
        num_bytes /= 1024.0
    return f"{num_bytes:.1f} PB"


def strip_code_fence(text: str) -> str:
    """
    Remove a surrounding Markdown code fence, if present.

    Args:
        text: Text possibly wrapped in ```lang ... ```

    Returns:
        The inner text, or the stripped input when no fence is present
    """
    match = re.match(r'^\s*```[\w-]*\s*\n(.*?)\n?```\s*$', text, re.DOTALL)
    if match:
        return match.group(1)
    return text.strip()
