"""Errors raised while executing configuration scripts."""

from __future__ import annotations


class ScriptException(Exception):
    """A value thrown by a running script, with its stack trace."""

    def __init__(self, value: object, stack: str = "") -> None:
        self.value = value
        self.stack = stack
        super().__init__(str(value))

    def __str__(self) -> str:
        if self.stack:
            return f"{self.value}\n{self.stack}"
        return str(self.value)


class ScriptInterrupted(Exception):
    """Raised when script execution is interrupted."""

    def __init__(self, value: object, stack: str = "") -> None:
        self.value = value
        self.stack = stack
        super().__init__(str(value))

    def __str__(self) -> str:
        if self.stack:
            return f"{self.value}\n{self.stack}"
        return str(self.value)


class ScriptError(Exception):
    """An error from script execution, with file and stack information."""

    def __init__(
        self,
        message: str,
        file: str = "",
        stack: str = "",
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.file = file
        self.message = message
        self.stack = stack
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        if self.file:
            return f"{self.file}: {self.message}"
        return self.message


def wrap_error(err: BaseException | None, file: str) -> BaseException | None:
    """Convert a script exception or interrupt into a ScriptError.

    Other errors are returned unchanged.
    """
    if err is None:
        return None
    if isinstance(err, (ScriptException, ScriptInterrupted)):
        return ScriptError(str(err.value), file=file, stack=str(err), cause=err)
    return err