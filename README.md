# crucible

Building blocks for describing the desired state of a workstation (files,
directories, symlinks, Homebrew packages, macOS defaults, the Dock, fonts,
Mac App Store apps, mise tools, login shell, key remaps, display settings and
install scripts) as a list of declarations, rendering file templates, and
showing progress while actions run.

## Install

    pip install .

For the tests:

    pip install ".[test]"
    pytest

## Declaring state

`crucible.crucible.CrucibleModule` collects `Declaration` objects
(`crucible.decl`) into a list you pass in. Paths that start with `~` are
expanded against the target directory and normalized.

```python
from crucible.crucible import CrucibleModule

declarations = []
c = CrucibleModule("/home/user", declarations)

c.file("~/.gitconfig", {"content": "[user]\n  name = Test", "mode": 0o600})
c.file("~/.config/fish/config.fish", {"source": "fish/config.fish"})
c.dir("~/.config/fish")                       # mode defaults to 0o700
c.symlink("~/.vimrc", {"target": "~/.config/nvim/init.vim"})
c.brew(["ripgrep", "fd", "bat"], {"state": "latest"})
c.defaults("com.apple.dock", {"autohide": True, "tilesize": 36})
c.dock({"apps": ["/Applications/Safari.app"],
        "folders": [{"path": "~/Downloads", "view": "grid"}]})
c.git("~/src/project", {"url": "https://example.com/repo.git", "branch": "main"})
c.font("fonts/Mono.ttf")                      # into ~/Library/Fonts
c.mas(497799835, "Xcode")
c.mise("python", "3.12")
c.shell("/opt/homebrew/bin/zsh")
c.key_remap({"capsLock": "control"})
c.display({"sidebarIconSize": "small", "menuBarSpacing": "compact"})
c.script("tool", {"install": "make install", "check": "tool --version"})

for d in declarations:
    print(d.type, d.state, d.path or d.package_name or d.defaults_key)
```

Most calls accept `{"state": "absent"}` to declare removal. Invalid calls
raise `CrucibleError`. `CrucibleModule.export()` returns the API as a mapping
of the names a script would use (`file`, `keyRemap`, `log`, ...).

`crucible.decl` also holds the `State` and `DeclType` enums, the key-name and
display-setting validators (`valid_key_names`, `key_code`,
`valid_sidebar_icon_sizes`, ...), and a registry of readable type names:
`register_name(DeclType.FILE, "File")` makes `str(DeclType.FILE)` return
`"File"`; unregistered types print as `decl(N)`.

## Entry point and script helpers

- `crucible.loader.Loader(source_dir).entry_point()` returns the path and
  bytes of `crucible.js`, raising `NoScriptError` when it is missing.
- `crucible.shebang.strip_shebang` blanks a leading `#!` line while keeping
  line numbers.
- `crucible.jspath.join` joins and normalizes slash-separated paths, raising
  `TypeError` for non-string segments.
- `crucible.errors.wrap_error` turns a `ScriptException` or
  `ScriptInterrupted` into a `ScriptError` carrying the file name and stack.

## Templates

`crucible.templates.render_template(name, content, data, funcs=None)` renders
a template written in a subset of the `{{ ... }}` syntax: field access
(`.os.name`), literals, function calls, pipelines (`env "EDITOR" | default
"vim"`), parentheses, `if`/`else if`/`else`/`end`, `range`, comments and
`{{-`/`-}}` whitespace trimming. It returns bytes and raises `TemplateError`.
`template_funcs()` supplies the built-ins (`env`, `lookPath`, `default`,
`hasPrefix`, `hasSuffix`, `contains`, `replace`, `lower`, `upper`,
`trimSpace`, `join`); `template_func_names()` lists them sorted.
`merge_template_data(base, user)` overlays user values on base data at the
top level.

## Progress display

`crucible.renderer.Renderer(stream, total, max_lines, term_width=None)` draws
a live view of actions: call `start()`, report with `action_started`,
`action_output` and `action_completed`, then `wait()` for the final frame.
Actions are any objects with `description` (and optionally `needs_sudo`).
`crucible.observer.LogObserver(logger)` writes one log line per event
instead, adding the captured output of errors that provide `output_tail()`.
`crucible.terminal.is_terminal` and `terminal_width` help choose between them.

## What it does not do

The package has no command-line program and no script engine: it does not
run `crucible.js` files, collect system facts, or apply declarations to the
system. It supplies the declaration API, templates and display pieces that
such a tool is built from.