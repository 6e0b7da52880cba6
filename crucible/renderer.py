"""Live-updating terminal display of action progress."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TextIO

from crucible.terminal import terminal_width

_SPINNER_FRAMES = ["◐", "◓", "◑", "◒"]
_CLEAR = "\033[K\n"


class ActionStatus(Enum):
    """Lifecycle state of one action."""

    PENDING = 0
    RUNNING = 1
    DONE = 2
    FAILED = 3


@dataclass
class ActionState:
    """Display state of one action."""

    action: Any = None
    status: ActionStatus = ActionStatus.PENDING
    lines: list[str] = field(default_factory=list)
    err: BaseException | None = None
    spinner_tick: int = 0


def first_line(text: str) -> str:
    """Return text up to its first newline."""
    return text.split("\n", 1)[0]


class Renderer:
    """Draws each action's status and trailing output, redrawn periodically.

    Observer methods are safe to call from several threads.
    """

    def __init__(self, stream: TextIO, total: int, max_lines: int, term_width: int | None = None) -> None:
        self.stream = stream
        self.actions = [ActionState() for _ in range(total)]
        self.max_lines = max_lines
        self.term_width = term_width if term_width is not None else terminal_width(stream)
        self._lock = threading.Lock()
        self._last_line_count = 0
        self._done = threading.Event()
        self._thread: threading.Thread | None = None
        self._stopped = False

    def start(self) -> None:
        """Hide the cursor and begin the render loop."""
        self.stream.write("\033[?25l")
        self._thread = threading.Thread(target=self._loop, daemon=True)
        self._thread.start()

    def _loop(self) -> None:
        while not self._done.wait(0.1):
            self.render()
        self.render()

    def action_started(self, index: int, action: Any) -> None:
        with self._lock:
            self.actions[index] = ActionState(action=action, status=ActionStatus.RUNNING)

    def action_output(self, index: int, line: str) -> None:
        with self._lock:
            state = self.actions[index]
            state.lines.append(line)
            if len(state.lines) > self.max_lines:
                del state.lines[: len(state.lines) - self.max_lines]

    def action_completed(self, index: int, action: Any, err: BaseException | None) -> None:
        with self._lock:
            state = self.actions[index]
            if err is not None:
                state.status = ActionStatus.FAILED
                state.err = err
            else:
                state.status = ActionStatus.DONE

    def wait(self) -> None:
        """Do a final render, stop the loop and restore the cursor. Idempotent."""
        if self._stopped:
            return
        self._stopped = True
        self._done.set()
        if self._thread is not None:
            self._thread.join()
        else:
            self.render()
        self.stream.write("\033[?25h")
        self.stream.flush()

    def render(self) -> None:
        """Draw one frame over the previous one."""
        with self._lock:
            out: list[str] = []
            if self._last_line_count > 0:
                out.append(f"\033[{self._last_line_count}A")
            line_count = 0
            completed = failed = 0

            def emit(text: str) -> None:
                nonlocal line_count
                out.append(self.truncate(text))
                out.append(_CLEAR)
                line_count += 1

            for state in self.actions:
                desc = getattr(state.action, "description", "")
                if state.status is not ActionStatus.PENDING and getattr(state.action, "needs_sudo", False):
                    desc = "[sudo] " + desc
                if state.status is ActionStatus.PENDING:
                    emit(f"  \033[2m○ {desc}\033[0m")
                elif state.status is ActionStatus.RUNNING:
                    frame = _SPINNER_FRAMES[state.spinner_tick % len(_SPINNER_FRAMES)]
                    state.spinner_tick += 1
                    emit(f"  \033[36m{frame} {desc}\033[0m")
                    for line in state.lines:
                        emit(f"    \033[2m{line}\033[0m")
                elif state.status is ActionStatus.DONE:
                    completed += 1
                    emit(f"  \033[32m✓ {desc}\033[0m")
                else:
                    completed += 1
                    failed += 1
                    emit(f"  \033[31m✗ {desc}: {first_line(str(state.err))}\033[0m")
                    for line in state.lines:
                        emit(f"    \033[31m│\033[0m \033[2m{line}\033[0m")

            summary = f"  [{completed}/{len(self.actions)} complete"
            if failed:
                summary += f", {failed} failed"
            emit(summary + "]")

            while line_count < self._last_line_count:
                out.append(_CLEAR)
                line_count += 1

            self._last_line_count = line_count
            self.stream.write("".join(out))

    def truncate(self, text: str) -> str:
        """Cut text to the terminal width, not counting ANSI escape sequences."""
        visible = 0
        in_esc = False
        for i, ch in enumerate(text):
            if ch == "\033":
                in_esc = True
                continue
            if in_esc:
                if ch.isascii() and ch.isalpha():
                    in_esc = False
                continue
            visible += 1
            if visible >= self.term_width:
                return text[: i + 1]
        return text