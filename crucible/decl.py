"""Declaration types describing desired system state produced by scripts."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class State(IntEnum):
    """Whether a declaration should be present or absent."""

    PRESENT = 0
    ABSENT = 1
    LATEST = 2  # installed and at the current upstream version


class DeclType(IntEnum):
    """What a script declaration manages."""

    FILE = 0
    DIR = 1
    SYMLINK = 2
    PACKAGE = 3
    DEFAULTS = 4
    DOCK = 5
    GIT_REPO = 6
    FONT = 7
    MISE_TOOL = 8
    SHELL = 9
    MAS_APP = 10
    KEY_REMAP = 11
    DISPLAY = 12
    SCRIPT = 13

    def __str__(self) -> str:
        return type_name(self)


_names_lock = threading.Lock()
_type_names: dict[int, str] = {}


def register_name(t: int, name: str) -> None:
    """Record the human-readable name for a declaration type."""
    with _names_lock:
        _type_names[int(t)] = name


def type_name(t: int) -> str:
    """Return the registered name of a type, or ``decl(N)`` when unregistered."""
    with _names_lock:
        name = _type_names.get(int(t))
    return name if name is not None else f"decl({int(t)})"


def all_types() -> list[DeclType | int]:
    """Return every registered declaration type, sorted by ordinal."""
    with _names_lock:
        keys = sorted(_type_names)
    known = {member.value for member in DeclType}
    return [DeclType(k) if k in known else k for k in keys]


@dataclass
class KeyRemapEntry:
    """A single key remapping."""

    from_key: str
    to_key: str


@dataclass
class DockFolder:
    """A folder entry in the Dock declaration."""

    path: str = ""
    view: str = ""
    display: str = ""


@dataclass
class Declaration:
    """A single desired-state entry produced by a script."""

    type: DeclType = DeclType.FILE
    state: State = State.PRESENT
    path: str = ""
    content: bytes = b""
    source_file: str = ""
    template_file: str = ""
    template_data: dict[str, Any] = field(default_factory=dict)
    mode: int = 0
    link_target: str = ""
    package_name: str = ""
    defaults_domain: str = ""
    defaults_key: str = ""
    defaults_value: Any = None
    dock_apps: list[str] = field(default_factory=list)
    dock_folders: list[DockFolder] = field(default_factory=list)
    git_url: str = ""
    git_branch: str = ""
    font_source: str = ""
    font_name: str = ""
    font_dest_dir: str = ""
    mise_tool_name: str = ""
    mise_tool_version: str = ""
    shell_path: str = ""
    shell_username: str = ""
    mas_app_id: int = 0
    mas_app_name: str = ""
    key_remaps: list[KeyRemapEntry] = field(default_factory=list)
    display_sidebar_icon_size: str = ""
    display_menu_bar_spacing: str = ""
    display_resolution: str = ""
    display_hz: int = 0
    script_name: str = ""
    script_install: str = ""
    script_check: str = ""


# USB HID usage codes with the 0x700000000 usage page prefix.
_HID_KEY_CODES: dict[str, int] = {
    "capsLock": 0x700000039,
    "control": 0x7000000E0,
    "leftControl": 0x7000000E0,
    "rightControl": 0x7000000E4,
    "leftShift": 0x7000000E1,
    "rightShift": 0x7000000E5,
    "leftOption": 0x7000000E2,
    "rightOption": 0x7000000E6,
    "leftCommand": 0x7000000E3,
    "rightCommand": 0x7000000E7,
    "fn": 0xFF00000003,
}

_SIDEBAR_ICON_SIZES: dict[str, int] = {
    "small": 1,
    "medium": 2,
    "large": 3,
}


def valid_key_name(name: str) -> bool:
    """Report whether name is a recognized key name for remapping."""
    return name in _HID_KEY_CODES


def key_code(name: str) -> int | None:
    """Return the HID usage code for a key name, or None if unknown."""
    return _HID_KEY_CODES.get(name)


def valid_key_names() -> list[str]:
    """Return all recognized key names, sorted."""
    return sorted(_HID_KEY_CODES)


def valid_sidebar_icon_size(name: str) -> bool:
    """Report whether name is a recognized sidebar icon size."""
    return name in _SIDEBAR_ICON_SIZES


def sidebar_icon_size_value(name: str) -> int | None:
    """Return the numeric size mode for a size name, or None if unknown."""
    return _SIDEBAR_ICON_SIZES.get(name)


def valid_sidebar_icon_sizes() -> list[str]:
    """Return all recognized sidebar icon size names, sorted."""
    return ["large", "medium", "small"]


def valid_menu_bar_spacing(name: str) -> bool:
    """Report whether name is a recognized menu bar spacing mode."""
    return name in ("compact", "default")