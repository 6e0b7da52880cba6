"""Node-compatible path helpers exposed to scripts."""

from __future__ import annotations


def _clean(path: str) -> str:
    """Return the shortest equivalent slash-separated path."""
    if path == "":
        return "."
    rooted = path.startswith("/")
    stack: list[str] = []
    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if stack and stack[-1] != "..":
                stack.pop()
            elif not rooted:
                stack.append("..")
            continue
        stack.append(part)
    joined = "/".join(stack)
    if rooted:
        return "/" + joined
    return joined or "."


def describe_js_type(value: object) -> str:
    """Describe a non-string value for a TypeError message."""
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "type boolean"
    if isinstance(value, (int, float)):
        return "type number"
    return f"type {type(value).__name__}"


def join(*args: object) -> str:
    """Join path segments and normalize the result; ``.`` for no segments.

    Raises TypeError if any segment is not a string.
    """
    for index, arg in enumerate(args):
        if not isinstance(arg, str):
            raise TypeError(
                f"Path must be a string. Received {describe_js_type(arg)} at index {index}"
            )
    if not args:
        return "."
    segments = [s for s in args if s]
    if not segments:
        return ""
    return _clean("/".join(segments))