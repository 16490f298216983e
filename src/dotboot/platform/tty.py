"""
Terminal handling.
"""

import os
import sys
from typing import Optional, TextIO


def is_tty(stream: Optional[TextIO] = None) -> bool:
    """Check if the given stream (or stdout) is a TTY."""
    if stream is None:
        stream = sys.stdout

    try:
        return stream.isatty()
    except AttributeError:
        return False


def supports_color(stream: Optional[TextIO] = None) -> bool:
    """
    Check if the stream supports ANSI color codes.

    NO_COLOR always wins; FORCE_COLOR enables color even when the stream
    is not a terminal.
    """
    if os.environ.get("NO_COLOR"):
        return False

    if os.environ.get("FORCE_COLOR"):
        return True

    if not is_tty(stream):
        return False

    term = os.environ.get("TERM", "")
    return term != "dumb"
