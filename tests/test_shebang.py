import pytest

from crucible.shebang import strip_shebang


@pytest.mark.parametrize(
    "given, want",
    [
        (b"const c = require('crucible');\n", b"const c = require('crucible');\n"),
        (
            b"#!/usr/bin/env crucible\nconst c = require('crucible');\n",
            b"                       \nconst c = require('crucible');\n",
        ),
        (b"#!/usr/bin/env crucible", b"                       "),
        (b"", b""),
        (None, None),
        (b"# comment\ncode\n", b"# comment\ncode\n"),
        (b"#!/usr/bin/env crucible\nline2\nline3\n", b"                       \nline2\nline3\n"),
    ],
)
def test_strip_shebang(given, want):
    assert strip_shebang(given) == want


def test_strip_shebang_keeps_length_and_lines():
    src = b"#!/usr/bin/env crucible\na\nb\n"
    out = strip_shebang(src)
    assert len(out) == len(src)
    assert out.count(b"\n") == src.count(b"\n")


def test_strip_shebang_does_not_mutate_input():
    data = bytearray(b"#!/usr/bin/env crucible\ncode\n")
    original = bytes(data)
    strip_shebang(bytes(data))
    assert bytes(data) == original