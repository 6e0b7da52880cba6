"""Rendering of dotfile templates written in the Go text/template syntax subset."""

from __future__ import annotations

import json
import os
import re
import shutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any


class TemplateError(Exception):
    """Raised when a template cannot be parsed or executed."""


def _default(fallback: Any, value: Any) -> Any:
    if value is None or value == "":
        return fallback
    return value


def template_funcs() -> dict[str, Callable[..., Any]]:
    """Return the built-in template functions."""
    return {
        "env": lambda name: os.environ.get(name, ""),
        "lookPath": lambda name: shutil.which(name) or "",
        "default": _default,
        "hasPrefix": lambda s, prefix: s.startswith(prefix),
        "hasSuffix": lambda s, suffix: s.endswith(suffix),
        "contains": lambda s, sub: sub in s,
        "replace": lambda old, new, s: s.replace(old, new),
        "lower": lambda s: s.lower(),
        "upper": lambda s: s.upper(),
        "trimSpace": lambda s: s.strip(),
        "join": lambda sep, elems: sep.join(elems),
    }


def template_func_names() -> list[str]:
    """Return the sorted names of all built-in template functions."""
    return sorted(template_funcs())


def merge_template_data(base: dict[str, Any], user: Mapping[str, Any] | None) -> dict[str, Any]:
    """Overlay user data on the auto-injected base data at the top level."""
    if user:
        base.update(user)
    return base


# ---------------------------------------------------------------- parsing

_ACTION = re.compile(r"\{\{(-\s)?(.*?)(\s-)?\}\}", re.DOTALL)
_LEXEME = re.compile(
    r"""\s*(?:
        (?P<str>"(?:\\.|[^"\\])*")
      | (?P<raw>`[^`]*`)
      | (?P<pipe>\|)
      | (?P<lparen>\()
      | (?P<rparen>\))
      | (?P<field>(?:\.[A-Za-z_]\w*)+|\.)
      | (?P<num>-?\d+(?:\.\d+)?)
      | (?P<ident>[A-Za-z_]\w*)
    )""",
    re.VERBOSE,
)

_KEYWORDS = {"if", "else", "end", "range"}
_CONSTANTS = {"true": True, "false": False, "nil": None}


@dataclass
class _Arg:
    kind: str
    value: Any = None


@dataclass
class _If:
    pipeline: list[list[_Arg]]
    then: list[Any] = field(default_factory=list)
    otherwise: list[Any] = field(default_factory=list)
    chained: bool = False


@dataclass
class _Range:
    pipeline: list[list[_Arg]]
    then: list[Any] = field(default_factory=list)
    otherwise: list[Any] = field(default_factory=list)
    chained: bool = False


@dataclass
class _Output:
    pipeline: list[list[_Arg]]


def _lex(text: str) -> list[tuple[str, str]]:
    lexemes = []
    pos = 0
    stripped_end = len(text.rstrip())
    while pos < stripped_end:
        match = _LEXEME.match(text, pos)
        if not match or match.end() == pos:
            raise TemplateError(f"unexpected {text[pos:].strip()!r} in command")
        kind = match.lastgroup or ""
        lexemes.append((kind, match.group(kind or 0)))
        pos = match.end()
    return lexemes


def _parse_pipeline(lexemes: list[tuple[str, str]], funcs: Mapping[str, Any]) -> list[list[_Arg]]:
    pipeline, rest = _parse_pipe_lexemes(lexemes, 0, funcs)
    if rest != len(lexemes):
        raise TemplateError("unexpected right paren")
    if not pipeline or any(not cmd for cmd in pipeline):
        raise TemplateError("missing value for command")
    return pipeline


def _parse_pipe_lexemes(lexemes, pos, funcs):
    pipeline: list[list[_Arg]] = [[]]
    while pos < len(lexemes):
        kind, value = lexemes[pos]
        if kind == "rparen":
            break
        pos += 1
        if kind == "pipe":
            pipeline.append([])
        elif kind == "lparen":
            inner, pos = _parse_pipe_lexemes(lexemes, pos, funcs)
            if pos >= len(lexemes) or lexemes[pos][0] != "rparen":
                raise TemplateError("unclosed left paren")
            pos += 1
            pipeline[-1].append(_Arg("pipe", inner))
        elif kind == "str":
            try:
                pipeline[-1].append(_Arg("lit", json.loads(value)))
            except ValueError as exc:
                raise TemplateError(f"bad string literal {value}") from exc
        elif kind == "raw":
            pipeline[-1].append(_Arg("lit", value[1:-1]))
        elif kind == "num":
            pipeline[-1].append(_Arg("lit", float(value) if "." in value else int(value)))
        elif kind == "field":
            names = [n for n in value.split(".") if n]
            pipeline[-1].append(_Arg("field", names))
        else:
            if value in _CONSTANTS:
                pipeline[-1].append(_Arg("lit", _CONSTANTS[value]))
            elif value in funcs:
                pipeline[-1].append(_Arg("func", value))
            else:
                raise TemplateError(f'function "{value}" not defined')
    return pipeline, pos


def _parse(content: str, funcs: Mapping[str, Any]) -> list[Any]:
    root: list[Any] = []
    stack: list[tuple[Any, list[Any]]] = [(None, root)]
    pos = 0
    trim_next = False
    for match in _ACTION.finditer(content):
        text = content[pos:match.start()]
        if trim_next:
            text = text.lstrip()
        if match.group(1):
            text = text.rstrip()
        if text:
            stack[-1][1].append(text)
        pos = match.end()
        trim_next = bool(match.group(3))
        body = match.group(2).strip()
        if body.startswith("/*") and body.endswith("*/"):
            continue
        lexemes = _lex(body)
        if not lexemes:
            raise TemplateError("missing value for command")
        head = lexemes[0][1] if lexemes[0][0] == "ident" else None
        if head in ("if", "range"):
            node_cls = _If if head == "if" else _Range
            node = node_cls(_parse_pipeline(lexemes[1:], funcs))
            stack[-1][1].append(node)
            stack.append((node, node.then))
        elif head == "else":
            node = stack[-1][0]
            if node is None:
                raise TemplateError("unexpected {{else}}")
            if len(lexemes) > 1 and lexemes[1] == ("ident", "if"):
                nested = _If(_parse_pipeline(lexemes[2:], funcs), chained=True)
                node.otherwise.append(nested)
                stack[-1] = (node, node.otherwise)
                stack.append((nested, nested.then))
            else:
                stack[-1] = (node, node.otherwise)
        elif head == "end":
            if len(lexemes) != 1 or stack[-1][0] is None:
                raise TemplateError("unexpected {{end}}")
            while True:
                node, _ = stack.pop()
                if not node.chained:
                    break
        else:
            stack[-1][1].append(_Output(_parse_pipeline(lexemes, funcs)))
    text = content[pos:]
    if trim_next:
        text = text.lstrip()
    if text:
        stack[-1][1].append(text)
    if len(stack) != 1:
        raise TemplateError("unexpected EOF")
    return root


# -------------------------------------------------------------- execution


def _format(value: Any) -> str:
    if value is None:
        return "<no value>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format(v) for v in value) + "]"
    if isinstance(value, Mapping):
        return "map[" + " ".join(f"{k}:{_format(value[k])}" for k in sorted(value)) + "]"
    if isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return str(value)


class _Executor:
    def __init__(self, funcs: Mapping[str, Callable[..., Any]]) -> None:
        self.funcs = funcs

    def field(self, dot: Any, names: list[str]) -> Any:
        value = dot
        for name in names:
            if isinstance(value, Mapping):
                value = value.get(name)
            elif value is None:
                raise TemplateError(f"nil pointer evaluating field {name}")
            else:
                raise TemplateError(f"can't evaluate field {name} in type {type(value).__name__}")
        return value

    def arg(self, dot: Any, arg: _Arg) -> Any:
        if arg.kind == "lit":
            return arg.value
        if arg.kind == "field":
            return self.field(dot, arg.value)
        if arg.kind == "pipe":
            return self.pipeline(dot, arg.value)
        return self.call(arg.value, [])

    def call(self, name: str, args: list[Any]) -> Any:
        try:
            return self.funcs[name](*args)
        except TemplateError:
            raise
        except Exception as exc:
            raise TemplateError(f"error calling {name}: {exc}") from exc

    def pipeline(self, dot: Any, pipeline: list[list[_Arg]]) -> Any:
        result: Any = None
        for index, command in enumerate(pipeline):
            first = command[0]
            if first.kind == "func":
                args = [self.arg(dot, a) for a in command[1:]]
                if index > 0:
                    args.append(result)
                result = self.call(first.value, args)
            else:
                if len(command) > 1 or index > 0:
                    raise TemplateError("can't give argument to non-function")
                result = self.arg(dot, first)
        return result

    def run(self, nodes: list[Any], dot: Any, out: list[str]) -> None:
        for node in nodes:
            if isinstance(node, str):
                out.append(node)
            elif isinstance(node, _Output):
                out.append(_format(self.pipeline(dot, node.pipeline)))
            elif isinstance(node, _If):
                branch = node.then if self.pipeline(dot, node.pipeline) else node.otherwise
                self.run(branch, dot, out)
            elif isinstance(node, _Range):
                value = self.pipeline(dot, node.pipeline)
                if isinstance(value, Mapping):
                    items = [value[k] for k in sorted(value)]
                elif value is None:
                    items = []
                else:
                    items = list(value)
                if not items:
                    self.run(node.otherwise, dot, out)
                for item in items:
                    self.run(node.then, item, out)


def render_template(
    name: str,
    content: str,
    data: Any,
    funcs: Mapping[str, Callable[..., Any]] | None = None,
) -> bytes:
    """Render a template with data and return the rendered bytes."""
    functions = template_funcs() if funcs is None else funcs
    try:
        nodes = _parse(content, functions)
        out: list[str] = []
        _Executor(functions).run(nodes, data, out)
    except TemplateError as exc:
        raise TemplateError(f"template: {name}: {exc}") from exc
    return "".join(out).encode("utf-8")