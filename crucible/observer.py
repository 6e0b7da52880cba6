"""Non-interactive observer that logs action lifecycle events."""

from __future__ import annotations

import json
import logging
from typing import Any


def _output_tail(err: BaseException | None) -> str:
    seen = set()
    while err is not None and id(err) not in seen:
        seen.add(id(err))
        tail = getattr(err, "output_tail", None)
        if callable(tail):
            return tail() or ""
        err = err.__cause__ or err.__context__
    return ""


def _format_value(value: Any) -> str:
    text = str(value)
    if text == "" or any(c.isspace() or c in '="' or not c.isprintable() for c in text):
        return json.dumps(text, ensure_ascii=False)
    return text


def _format(message: str, attrs: list[tuple[str, Any]]) -> str:
    return " ".join([message, *(f"{k}={_format_value(v)}" for k, v in attrs)])


class LogObserver:
    """Writes a log line for each action lifecycle event."""

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    @staticmethod
    def _base(action: Any) -> list[tuple[str, Any]]:
        return [("action", str(action.type)), ("description", action.description)]

    def action_started(self, index: int, action: Any) -> None:
        self.logger.info(_format("executing", self._base(action)))

    def action_output(self, index: int, line: str) -> None:
        """Record per-action output at debug level only; it is not shown by default."""
        self.logger.debug(_format("action output", [("index", index), ("line", line)]))

    def action_completed(self, index: int, action: Any, err: BaseException | None) -> None:
        if err is None:
            self.logger.info(_format("action completed", self._base(action)))
            return
        attrs = self._base(action) + [("err", err)]
        tail = _output_tail(err)
        if tail:
            attrs.append(("output", tail))
        self.logger.error(_format("action failed", attrs))

    def wait(self) -> None:
        """Flush the logger's handlers so every line has been written."""
        for handler in self.logger.handlers:
            handler.flush()