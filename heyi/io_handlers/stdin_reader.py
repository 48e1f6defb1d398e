"""
Standard input handling for heyi.
"""
import sys
from typing import Optional, TextIO


def has_stdin_data(stream: Optional[TextIO] = None) -> bool:
    """Check whether text is being piped in (stdin is not a terminal)."""
    stream = stream or sys.stdin
    if stream is None or stream.closed:
        return False
    return not stream.isatty()


def read_stdin(stream: Optional[TextIO] = None) -> str:
    """
    Read all of standard input.

    Args:
        stream: Stream to read (defaults to sys.stdin)

    Returns:
        The piped text with surrounding whitespace removed
    """
    stream = stream or sys.stdin
    return stream.read().strip()
