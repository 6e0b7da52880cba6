import pytest

from crucible.crucible_core import CrucibleCore, CrucibleError
from crucible.decl import DeclType, DockFolder, State


@pytest.fixture
def core():
    return CrucibleCore("/home/user", [])


def test_file_inline_content(core):
    core.file("~/.gitconfig", {"content": "[user]\n  name = Test", "mode": 0o600})
    assert len(core.declarations) == 1
    d = core.declarations[0]
    assert d.type == DeclType.FILE
    assert d.path == "/home/user/.gitconfig"
    assert d.content == b"[user]\n  name = Test"
    assert d.mode == 0o600


def test_file_source_ref(core):
    core.file("~/.config/fish/config.fish", {"source": "fish/config.fish"})
    assert core.declarations[0].source_file == "fish/config.fish"


def test_file_template_ref(core):
    core.file("~/.config/starship.toml", {"template": "starship.toml.tmpl", "data": {"prompt": ">"}})
    d = core.declarations[0]
    assert d.template_file == "starship.toml.tmpl"
    assert d.template_data["prompt"] == ">"


def test_file_default_mode(core):
    core.file("~/test", {"content": "x"})
    assert core.declarations[0].mode == 0o644


def test_file_no_args(core):
    with pytest.raises(CrucibleError):
        core.file()


def test_file_absent(core):
    core.file("~/.old-config", {"state": "absent"})
    assert len(core.declarations) == 1
    d = core.declarations[0]
    assert d.type == DeclType.FILE
    assert d.state == State.ABSENT
    assert d.path == "/home/user/.old-config"
    assert d.content == b""


def test_dir_basic(core):
    core.dir("~/.config/fish", {"mode": 0o700})
    d = core.declarations[0]
    assert d.type == DeclType.DIR
    assert d.path == "/home/user/.config/fish"
    assert d.mode == 0o700


def test_dir_default_mode(core):
    core.dir("~/.config")
    assert core.declarations[0].mode == 0o700


def test_dir_absent(core):
    core.dir("~/.cache/old", {"state": "absent"})
    d = core.declarations[0]
    assert d.type == DeclType.DIR
    assert d.state == State.ABSENT


def test_symlink_basic(core):
    core.symlink("~/.vimrc", {"target": "~/.config/nvim/init.vim"})
    d = core.declarations[0]
    assert d.type == DeclType.SYMLINK
    assert d.path == "/home/user/.vimrc"
    assert d.link_target == "/home/user/.config/nvim/init.vim"


def test_symlink_no_target(core):
    with pytest.raises(CrucibleError):
        core.symlink("~/.vimrc", {})


def test_symlink_absent(core):
    core.symlink("~/.vimrc", {"state": "absent"})
    d = core.declarations[0]
    assert d.type == DeclType.SYMLINK
    assert d.state == State.ABSENT
    assert d.link_target == ""


def test_brew_formula(core):
    core.brew("coreutils")
    d = core.declarations[0]
    assert d.type == DeclType.PACKAGE
    assert d.package_name == "coreutils"


def test_brew_tap_qualified(core):
    core.brew("ryanwersal/tools/helios")
    assert core.declarations[0].package_name == "ryanwersal/tools/helios"


def test_brew_array(core):
    core.brew(["ripgrep", "fd", "bat"])
    assert [d.package_name for d in core.declarations] == ["ripgrep", "fd", "bat"]
    assert all(d.type == DeclType.PACKAGE for d in core.declarations)


def test_brew_invalid_arg(core):
    with pytest.raises(CrucibleError):
        core.brew(42)


def test_brew_array_non_string(core):
    with pytest.raises(CrucibleError):
        core.brew(["ok", 3])


def test_brew_absent(core):
    core.brew("wget", {"state": "absent"})
    d = core.declarations[0]
    assert d.type == DeclType.PACKAGE
    assert d.state == State.ABSENT
    assert d.package_name == "wget"


def test_brew_latest(core):
    core.brew(["ripgrep", "fd"], {"state": "latest"})
    assert len(core.declarations) == 2
    assert all(d.state == State.LATEST for d in core.declarations)


def test_brew_state_present_explicit(core):
    core.brew("ripgrep", {"state": "present"})
    assert core.declarations[0].state == State.PRESENT


def test_brew_state_invalid(core):
    with pytest.raises(CrucibleError, match="unknown state"):
        core.brew("ripgrep", {"state": "later"})


def test_brew_absent_array(core):
    core.brew(["wget", "curl"], {"state": "absent"})
    assert len(core.declarations) == 2
    assert all(d.state == State.ABSENT for d in core.declarations)


def test_defaults_three_arg(core):
    core.defaults("com.apple.dock", "autohide", True)
    assert len(core.declarations) == 1
    d = core.declarations[0]
    assert d.type == DeclType.DEFAULTS
    assert d.defaults_domain == "com.apple.dock"
    assert d.defaults_key == "autohide"
    assert d.defaults_value is True


def test_defaults_object_form(core):
    core.defaults("com.apple.dock", {"autohide": True, "tilesize": 36})
    assert len(core.declarations) == 2
    found = {d.defaults_key: d for d in core.declarations}
    assert found["autohide"].defaults_domain == "com.apple.dock"
    assert found["autohide"].defaults_value is True
    assert found["tilesize"].defaults_value == 36
    assert isinstance(found["tilesize"].defaults_value, int)


def test_defaults_int_conversion(core):
    core.defaults("com.apple.dock", "tilesize", 42.0)
    value = core.declarations[0].defaults_value
    assert value == 42 and type(value) is int


def test_defaults_fraction_stays_float(core):
    core.defaults("com.apple.dock", "delay", 0.5)
    assert core.declarations[0].defaults_value == 0.5


def test_defaults_absent(core):
    core.defaults("com.apple.dock", "expose-animation-duration", {"state": "absent"})
    d = core.declarations[0]
    assert d.type == DeclType.DEFAULTS
    assert d.state == State.ABSENT
    assert d.defaults_domain == "com.apple.dock"
    assert d.defaults_key == "expose-animation-duration"


def test_defaults_too_few_args(core):
    with pytest.raises(CrucibleError):
        core.defaults("com.apple.dock")


def test_dock_apps_and_folders(core):
    core.dock(
        {
            "apps": ["/Applications/Safari.app", 7],
            "folders": [{"path": "~/Downloads", "view": "grid", "display": "folder"}, "skip"],
        }
    )
    d = core.declarations[0]
    assert d.type == DeclType.DOCK
    assert d.dock_apps == ["/Applications/Safari.app"]
    assert d.dock_folders == [DockFolder(path="/home/user/Downloads", view="grid", display="folder")]


def test_dock_no_args(core):
    with pytest.raises(CrucibleError):
        core.dock()


def test_git_basic(core):
    core.git("~/src/project", {"url": "https://example.com/repo.git", "branch": "main"})
    d = core.declarations[0]
    assert d.type == DeclType.GIT_REPO
    assert d.path == "/home/user/src/project"
    assert d.git_url == "https://example.com/repo.git"
    assert d.git_branch == "main"


def test_git_requires_options(core):
    with pytest.raises(CrucibleError):
        core.git("~/src/project")


def test_declarations_shared_with_caller():
    shared = []
    CrucibleCore("/home/user", shared).brew("fd")
    assert [d.package_name for d in shared] == ["fd"]


@pytest.mark.parametrize(
    "given, expected",
    [
        ("~/.bashrc", "/home/user/.bashrc"),
        ("~", "/home/user"),
        ("/etc/hosts", "/etc/hosts"),
        ("~/a/../b", "/home/user/b"),
    ],
)
def test_expand_path(core, given, expected):
    assert core.expand_path(given) == expected