"""Removal of a leading shebang line from script source."""

from __future__ import annotations


def strip_shebang(source: bytes | None) -> bytes | None:
    """Blank out a leading ``#!`` line, keeping its newline so line numbers hold.

    Source without a shebang is returned unchanged.
    """
    if source is None or not source.startswith(b"#!"):
        return source
    idx = source.find(b"\n")
    if idx < 0:
        return b" " * len(source)
    return b" " * idx + source[idx:]