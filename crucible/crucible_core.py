"""Script-facing API for declaring files, directories, links, packages and settings."""

from __future__ import annotations

import logging
import math
from typing import Any

from crucible.decl import Declaration, DeclType, DockFolder, State
from crucible.jspath import join as _join_path


class CrucibleError(Exception):
    """Raised when a script calls the declaration API incorrectly."""


def _js_string(value: Any) -> str:
    """Convert a script value to its string form."""
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else _js_string(item) for item in value)
    if isinstance(value, dict):
        return "[object Object]"
    return str(value)


def _to_integer(value: Any) -> int:
    """Convert a script value to an integer, truncating toward zero."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return 0
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text, 0)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return 0
        return 0 if math.isnan(number) or math.isinf(number) else int(number)
    return 0


def _to_object(value: Any) -> dict[str, Any]:
    """Return the properties of a script value; undefined cannot be converted."""
    if value is None:
        raise CrucibleError("Cannot convert undefined or null to object")
    if isinstance(value, dict):
        return value
    return {}


def _coerce_defaults_value(value: Any) -> Any:
    """Map a script value onto the type stored for a defaults entry."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        return value
    return _js_string(value)


def _export_to_map(value: Any) -> dict[str, Any]:
    """Convert a script value to a plain dictionary."""
    return dict(_to_object(value))


class CrucibleCore:
    """Collects declarations made by a script for a target directory."""

    def __init__(
        self,
        target_dir: str,
        declarations: list[Declaration] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.target_dir = target_dir
        self.declarations: list[Declaration] = [] if declarations is None else declarations
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    # ------------------------------------------------------------ helpers

    @staticmethod
    def _is_absent(opts: dict[str, Any] | None) -> bool:
        if opts is None:
            return False
        state = opts.get("state")
        if state is None:
            return False
        return _js_string(state) == "absent"

    @staticmethod
    def _parse_package_state(opts: dict[str, Any] | None) -> State:
        if opts is None:
            return State.PRESENT
        state = opts.get("state")
        if state is None:
            return State.PRESENT
        text = _js_string(state)
        if text in ("", "present"):
            return State.PRESENT
        if text == "absent":
            return State.ABSENT
        if text == "latest":
            return State.LATEST
        raise CrucibleError(
            f'brew(): unknown state "{text}"; valid values: present, absent, latest'
        )

    def expand_path(self, path: str) -> str:
        """Resolve a leading ``~`` to the target directory and clean the path."""
        if path.startswith("~/"):
            path = _join_path(self.target_dir, path[2:])
        elif path == "~":
            path = self.target_dir
        return (_join_path(path) if path else "") or "."

    # --------------------------------------------------------------- API

    def file(self, *args: Any) -> None:
        """Declare a managed file, by inline content, source file or template."""
        if len(args) < 1:
            raise CrucibleError("file() requires a path argument")
        d = Declaration(type=DeclType.FILE, path=self.expand_path(_js_string(args[0])), mode=0o644)
        if len(args) >= 2:
            opts = _to_object(args[1])
            if self._is_absent(opts):
                d.state = State.ABSENT
            else:
                self._apply_file_opts(d, opts)
        self.declarations.append(d)

    @staticmethod
    def _apply_file_opts(d: Declaration, opts: dict[str, Any]) -> None:
        if opts.get("content") is not None:
            d.content = _js_string(opts["content"]).encode("utf-8")
        if opts.get("source") is not None:
            d.source_file = _js_string(opts["source"])
        if opts.get("template") is not None:
            d.template_file = _js_string(opts["template"])
        if opts.get("data") is not None:
            d.template_data = _export_to_map(opts["data"])
        if opts.get("mode") is not None:
            d.mode = _to_integer(opts["mode"])

    def dir(self, *args: Any) -> None:
        """Declare a managed directory."""
        if len(args) < 1:
            raise CrucibleError("dir() requires a path argument")
        d = Declaration(type=DeclType.DIR, path=self.expand_path(_js_string(args[0])), mode=0o700)
        if len(args) >= 2:
            opts = _to_object(args[1])
            if self._is_absent(opts):
                d.state = State.ABSENT
            elif opts.get("mode") is not None:
                d.mode = _to_integer(opts["mode"])
        self.declarations.append(d)

    def symlink(self, *args: Any) -> None:
        """Declare a managed symbolic link."""
        if len(args) < 2:
            raise CrucibleError("symlink() requires path and options arguments")
        path = self.expand_path(_js_string(args[0]))
        opts = _to_object(args[1])
        if self._is_absent(opts):
            self.declarations.append(
                Declaration(type=DeclType.SYMLINK, path=path, state=State.ABSENT)
            )
            return
        target = opts.get("target")
        if target is None:
            raise CrucibleError("symlink() requires a target option")
        self.declarations.append(
            Declaration(
                type=DeclType.SYMLINK,
                path=path,
                link_target=self.expand_path(_js_string(target)),
            )
        )

    def brew(self, *args: Any) -> None:
        """Declare one or more Homebrew packages."""
        if len(args) < 1:
            raise CrucibleError("brew() requires a package name argument")
        state = State.PRESENT
        if len(args) >= 2:
            state = self._parse_package_state(_to_object(args[1]))
        names = args[0]
        if isinstance(names, str):
            names = [names]
        elif isinstance(names, (list, tuple)):
            if not all(isinstance(item, str) for item in names):
                raise CrucibleError("brew() array elements must be strings")
        else:
            raise CrucibleError("brew() argument must be a string or array of strings")
        self.declarations.extend(
            Declaration(type=DeclType.PACKAGE, package_name=name, state=state) for name in names
        )

    def defaults(self, *args: Any) -> None:
        """Declare macOS defaults, as (domain, key, value) or (domain, {key: value})."""
        if len(args) < 2:
            raise CrucibleError("defaults() requires at least domain and key/object arguments")
        domain = _js_string(args[0])
        if len(args) >= 3:
            key = _js_string(args[1])
            third = args[2]
            if self._is_absent(_to_object(third)):
                self.declarations.append(
                    Declaration(
                        type=DeclType.DEFAULTS,
                        defaults_domain=domain,
                        defaults_key=key,
                        state=State.ABSENT,
                    )
                )
            else:
                self.declarations.append(
                    Declaration(
                        type=DeclType.DEFAULTS,
                        defaults_domain=domain,
                        defaults_key=key,
                        defaults_value=_coerce_defaults_value(third),
                    )
                )
            return
        for key, value in _to_object(args[1]).items():
            self.declarations.append(
                Declaration(
                    type=DeclType.DEFAULTS,
                    defaults_domain=domain,
                    defaults_key=key,
                    defaults_value=_coerce_defaults_value(value),
                )
            )

    def dock(self, *args: Any) -> None:
        """Declare the desired Dock layout of apps and folders."""
        if len(args) < 1:
            raise CrucibleError("dock() requires an options argument")
        opts = _to_object(args[0])
        d = Declaration(type=DeclType.DOCK)
        apps = opts.get("apps")
        if isinstance(apps, (list, tuple)):
            d.dock_apps = [app for app in apps if isinstance(app, str)]
        folders = opts.get("folders")
        if isinstance(folders, (list, tuple)):
            for item in folders:
                if not isinstance(item, dict):
                    continue
                folder = DockFolder()
                if isinstance(item.get("path"), str):
                    folder.path = self.expand_path(item["path"])
                if isinstance(item.get("view"), str):
                    folder.view = item["view"]
                if isinstance(item.get("display"), str):
                    folder.display = item["display"]
                d.dock_folders.append(folder)
        self.declarations.append(d)

    def git(self, *args: Any) -> None:
        """Declare a git repository that should exist at a path."""
        if len(args) < 2:
            raise CrucibleError("git() requires path and options arguments")
        path = self.expand_path(_js_string(args[0]))
        opts = _to_object(args[1])
        d = Declaration(type=DeclType.GIT_REPO, path=path)
        if opts.get("url") is not None:
            d.git_url = _js_string(opts["url"])
        if opts.get("branch") is not None:
            d.git_branch = _js_string(opts["branch"])
        self.declarations.append(d)