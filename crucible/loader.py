"""Discovery of the script entry point in a source directory."""

from __future__ import annotations

import os

ENTRY_POINT_NAME = "crucible.js"


class NoScriptError(Exception):
    """Raised when no crucible.js entry point exists in the source directory."""

    def __init__(self, source_dir: str) -> None:
        self.source_dir = source_dir
        super().__init__(f"no {ENTRY_POINT_NAME} found in {source_dir}")


class Loader:
    """Finds and reads the script entry point of a source directory."""

    def __init__(self, source_dir: str) -> None:
        self.source_dir = source_dir

    def entry_point(self) -> tuple[str, bytes]:
        """Return the path and content of the entry point.

        Raises NoScriptError if it does not exist; other read errors propagate.
        """
        path = os.path.join(self.source_dir, ENTRY_POINT_NAME)
        try:
            with open(path, "rb") as fh:
                content = fh.read()
        except FileNotFoundError as exc:
            raise NoScriptError(self.source_dir) from exc
        return path, content