import logging
from dataclasses import dataclass

from crucible.observer import LogObserver


@dataclass
class Action:
    type: str
    description: str


class TailErr(Exception):
    def __init__(self, msg, tail):
        super().__init__(msg)
        self.tail = tail

    def output_tail(self):
        return self.tail


def make(caplog):
    caplog.set_level(logging.DEBUG, logger="obs-test")
    return LogObserver(logging.getLogger("obs-test"))


def test_failure_surfaces_output_attr(caplog):
    o = make(caplog)
    o.action_completed(0, Action("InstallPackage", "brew install foo"),
                       TailErr("exit status 1", "Error: No formula\nsecond"))
    rec = caplog.records[-1]
    assert rec.levelname == "ERROR"
    msg = rec.getMessage()
    assert 'err="exit status 1"' in msg
    assert "output=" in msg
    assert "Error: No formula" in msg


def test_failure_without_output_carrier(caplog):
    o = make(caplog)
    o.action_completed(0, Action("WriteFile", "write ~/.gitconfig"), OSError("permission denied"))
    rec = caplog.records[-1]
    assert rec.levelname == "ERROR"
    assert "output=" not in rec.getMessage()


def test_failure_with_empty_tail_omits_attr(caplog):
    o = make(caplog)
    o.action_completed(0, Action("InstallPackage", "brew install foo"), TailErr("exit status 1", ""))
    assert "output=" not in caplog.records[-1].getMessage()


def test_wrapped_carrier_found(caplog):
    o = make(caplog)
    try:
        try:
            raise TailErr("inner", "captured")
        except TailErr as exc:
            raise RuntimeError("outer") from exc
    except RuntimeError as err:
        o.action_completed(0, Action("X", "d"), err)
    assert "output=captured" in caplog.records[-1].getMessage()


def test_success_logs_info(caplog):
    o = make(caplog)
    o.action_completed(0, Action("InstallPackage", "brew install foo"), None)
    rec = caplog.records[-1]
    assert rec.levelname == "INFO"
    assert "action completed" in rec.getMessage()


def test_started_logs_executing(caplog):
    o = make(caplog)
    o.action_started(0, Action("InstallPackage", "brew install foo"))
    assert caplog.records[-1].getMessage().startswith("executing")