"""The full script-facing declaration API, including fonts, apps, tools and settings."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from crucible.crucible_core import (
    CrucibleCore,
    CrucibleError,
    _js_string,
    _to_integer,
    _to_object,
)
from crucible.decl import (
    Declaration,
    DeclType,
    KeyRemapEntry,
    State,
    valid_key_name,
    valid_key_names,
    valid_menu_bar_spacing,
    valid_sidebar_icon_size,
    valid_sidebar_icon_sizes,
)
from crucible.jspath import join as _join_path


def _base_name(path: str) -> str:
    """Return the last element of a slash-separated path."""
    if path == "":
        return "."
    trimmed = path.rstrip("/")
    if trimmed == "":
        return "/"
    return trimmed.rsplit("/", 1)[-1]


def _to_int64(value: Any) -> int | None:
    """Convert a numeric script value to an integer, or None if not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return None


class CrucibleModule(CrucibleCore):
    """The complete declaration API offered to configuration scripts."""

    def font(self, *args: Any) -> None:
        """Declare one or more font files to install."""
        if len(args) < 1:
            raise CrucibleError("font() requires a source path argument")
        dest_dir = _join_path(self.target_dir, "Library", "Fonts")
        state = State.PRESENT
        if len(args) >= 2:
            opts = _to_object(args[-1])
            if self._is_absent(opts):
                state = State.ABSENT
                args = args[:-1]
            elif opts.get("dest") is not None:
                dest_dir = self.expand_path(_js_string(opts["dest"]))
                args = args[:-1]
        first = args[0]
        if isinstance(first, str):
            sources = [first]
        elif isinstance(first, (list, tuple)):
            sources = [item for item in first if isinstance(item, str)]
        else:
            raise CrucibleError("font() argument must be a string or array of strings")
        self.declarations.extend(
            Declaration(
                type=DeclType.FONT,
                font_source=src,
                font_name=_base_name(src),
                font_dest_dir=dest_dir,
                state=state,
            )
            for src in sources
        )

    def mas(self, *args: Any) -> None:
        """Declare Mac App Store apps by numeric ID, singly or as a list of objects."""
        if len(args) < 1:
            raise CrucibleError("mas() requires an app ID or array argument")
        first = args[0]
        if isinstance(first, (int, float)) and not isinstance(first, bool):
            name = ""
            if len(args) > 1 and args[1] is not None:
                name = _js_string(args[1])
            self._add_mas_app(int(first), name)
        elif isinstance(first, (list, tuple)):
            for item in first:
                if not isinstance(item, dict):
                    raise CrucibleError("mas() array elements must be objects with an id field")
                app_id = _to_int64(item.get("id"))
                if app_id is None:
                    raise CrucibleError("mas() array element missing numeric id field")
                name = item.get("name")
                self._add_mas_app(app_id, name if isinstance(name, str) else "")
        else:
            raise CrucibleError("mas() argument must be a numeric ID or array of objects")

    def _add_mas_app(self, app_id: int, name: str) -> None:
        self.declarations.append(
            Declaration(type=DeclType.MAS_APP, mas_app_id=app_id, mas_app_name=name)
        )

    def mise(self, *args: Any) -> None:
        """Declare a globally installed mise tool and its version, or its absence."""
        if len(args) < 1:
            raise CrucibleError("mise() requires a tool name argument")
        name = _js_string(args[0])
        if len(args) < 2:
            raise CrucibleError('mise() requires a version argument (or { state: "absent" })')
        second = args[1]
        if isinstance(second, str):
            self.declarations.append(
                Declaration(
                    type=DeclType.MISE_TOOL, mise_tool_name=name, mise_tool_version=second
                )
            )
            return
        if self._is_absent(_to_object(second)):
            self.declarations.append(
                Declaration(type=DeclType.MISE_TOOL, mise_tool_name=name, state=State.ABSENT)
            )
            return
        raise CrucibleError(
            'mise() second argument must be a version string or { state: "absent" }'
        )

    def shell(self, *args: Any) -> None:
        """Declare the desired login shell, optionally for a named user."""
        if len(args) < 1:
            raise CrucibleError("shell() requires a shell path argument")
        shell_path = _js_string(args[0])
        username = ""
        if len(args) >= 2:
            opts = _to_object(args[1])
            if opts.get("user") is not None:
                username = _js_string(opts["user"])
        self.declarations.append(
            Declaration(type=DeclType.SHELL, shell_path=shell_path, shell_username=username)
        )

    def key_remap(self, *args: Any) -> None:
        """Declare modifier key remappings for all keyboards, or their removal."""
        if len(args) < 1:
            raise CrucibleError("keyRemap() requires an options object")
        opts = _to_object(args[0])
        if self._is_absent(opts):
            self.declarations.append(Declaration(type=DeclType.KEY_REMAP, state=State.ABSENT))
            return
        names = ", ".join(valid_key_names())
        remaps: list[KeyRemapEntry] = []
        for key, value in opts.items():
            if key == "state":
                continue
            if not valid_key_name(key):
                raise CrucibleError(
                    f'keyRemap(): unknown key name "{key}"; valid names: {names}'
                )
            to_name = _js_string(value)
            if not valid_key_name(to_name):
                raise CrucibleError(
                    f'keyRemap(): unknown key name "{to_name}" for value of "{key}"; '
                    f"valid names: {names}"
                )
            remaps.append(KeyRemapEntry(from_key=key, to_key=to_name))
        if not remaps:
            raise CrucibleError("keyRemap() requires at least one key mapping")
        self.declarations.append(Declaration(type=DeclType.KEY_REMAP, key_remaps=remaps))

    def display(self, *args: Any) -> None:
        """Declare display density and resolution settings."""
        if len(args) < 1:
            raise CrucibleError("display() requires an options object")
        opts = _to_object(args[0])
        d = Declaration(type=DeclType.DISPLAY)
        if opts.get("sidebarIconSize") is not None:
            size = _js_string(opts["sidebarIconSize"])
            if not valid_sidebar_icon_size(size):
                raise CrucibleError(
                    f'display(): invalid sidebarIconSize "{size}"; valid values: '
                    f"{', '.join(valid_sidebar_icon_sizes())}"
                )
            d.display_sidebar_icon_size = size
        if opts.get("menuBarSpacing") is not None:
            spacing = _js_string(opts["menuBarSpacing"])
            if not valid_menu_bar_spacing(spacing):
                raise CrucibleError(
                    f'display(): invalid menuBarSpacing "{spacing}"; valid values: compact, default'
                )
            d.display_menu_bar_spacing = spacing
        if opts.get("resolution") is not None:
            d.display_resolution = _js_string(opts["resolution"])
        if opts.get("hz") is not None:
            d.display_hz = _to_integer(opts["hz"])
        if not (d.display_sidebar_icon_size or d.display_menu_bar_spacing or d.display_resolution):
            raise CrucibleError(
                "display() requires at least one of: sidebarIconSize, menuBarSpacing, resolution"
            )
        self.declarations.append(d)

    def script(self, *args: Any) -> None:
        """Declare a tool installed by a shell command and checked by another."""
        if len(args) < 2:
            raise CrucibleError("script() requires a name and options argument")
        name = _js_string(args[0])
        opts = _to_object(args[1])
        install = opts.get("install")
        if install is None:
            raise CrucibleError("script() requires an install option")
        check = opts.get("check")
        if check is None:
            raise CrucibleError("script() requires a check option")
        self.declarations.append(
            Declaration(
                type=DeclType.SCRIPT,
                script_name=name,
                script_install=_js_string(install),
                script_check=_js_string(check),
            )
        )

    def log(self, *args: Any) -> None:
        """Log a message from the script; does nothing without arguments."""
        if not args:
            return
        self.logger.info(_js_string(args[0]), extra={"source": "script"})

    def export(self) -> dict[str, Callable[..., Any]]:
        """Return the API as the mapping of names a script sees."""
        return {
            "file": self.file,
            "dir": self.dir,
            "symlink": self.symlink,
            "brew": self.brew,
            "defaults": self.defaults,
            "dock": self.dock,
            "git": self.git,
            "font": self.font,
            "mas": self.mas,
            "mise": self.mise,
            "shell": self.shell,
            "keyRemap": self.key_remap,
            "display": self.display,
            "script": self.script,
            "log": self.log,
        }