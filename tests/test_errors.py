import pytest

from crucible.errors import ScriptError, ScriptException, ScriptInterrupted, wrap_error


@pytest.mark.parametrize(
    "err, want",
    [
        (ScriptError("something broke", file="crucible.js"), "crucible.js: something broke"),
        (ScriptError("something broke"), "something broke"),
    ],
)
def test_script_error_str(err, want):
    assert str(err) == want


def test_script_error_keeps_cause():
    cause = ValueError("root cause")
    se = ScriptError("wrapped", cause=cause)
    assert se.cause is cause
    assert se.__cause__ is cause


def test_wrap_none():
    assert wrap_error(None, "test.js") is None


def test_wrap_script_exception():
    exc = ScriptException("Error: boom", stack="at <eval>:1:7")
    wrapped = wrap_error(exc, "test.js")
    assert isinstance(wrapped, ScriptError)
    assert wrapped.file == "test.js"
    assert wrapped.message == "Error: boom"
    assert wrapped.stack != ""
    assert "at <eval>:1:7" in wrapped.stack
    assert wrapped.cause is exc
    assert str(wrapped) == "test.js: Error: boom"


def test_wrap_interrupted():
    intr = ScriptInterrupted("context cancelled")
    wrapped = wrap_error(intr, "crucible.js")
    assert isinstance(wrapped, ScriptError)
    assert wrapped.message == "context cancelled"
    assert wrapped.cause is intr


def test_wrap_non_script_passes_through():
    orig = RuntimeError("plain error")
    assert wrap_error(orig, "test.js") is orig