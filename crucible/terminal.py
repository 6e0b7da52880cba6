"""Terminal detection helpers."""

from __future__ import annotations

import os
from typing import Any

_FALLBACK_WIDTH = 80


def is_terminal(stream: Any) -> bool:
    """Report whether the stream is connected to a terminal."""
    try:
        return bool(stream.isatty())
    except (AttributeError, ValueError, OSError):
        return False


def terminal_width(stream: Any) -> int:
    """Return the width of the terminal attached to the stream, or 80."""
    try:
        columns = os.get_terminal_size(stream.fileno()).columns
    except (AttributeError, ValueError, OSError):
        return _FALLBACK_WIDTH
    return columns or _FALLBACK_WIDTH