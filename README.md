# argonsync

A library of building blocks for keeping a game project tree in sync with files on disk.

## What is in it

### Virtual file systems (`argonsync.vfs`)

- `argonsync.vfs.filesystem.Vfs` wraps a backend and locks every call to it.
  - `Vfs()` works on the real disk.
  - `Vfs(watch=True)` also watches paths you pass to `watch()`.
  - `Vfs.new_virtual()` keeps everything in memory.
- `argonsync.vfs.std_backend.StdBackend` is the disk backend. `argonsync.vfs.mem_backend.MemBackend` is the memory backend.
- `argonsync.vfs.debouncer.VfsDebouncer` watches directories with `watchdog` and turns the raw notifications into `VfsEvent` values. Each event has an `EventKind` of `CREATE`, `DELETE` or `WRITE`. The events are put on the queue that `receiver()` returns. Between `pause()` and `resume()` it drops events, and for a short quiet period after either call as well.
- Errors are raised as the usual exceptions: `FileNotFoundError`, `IsADirectoryError` and `NotADirectoryError`.

### Middleware (`argonsync.middleware`)

Readers return a pair `(class_name, properties)`. Writers take a property mapping, write the property they handle to the path, and return the properties that are left.

| Module | Functions | What it handles |
|---|---|---|
| `luau` | `read_luau`, `write_luau` | Scripts. Sets `Source`, and `RunContext` for server and client scripts. |
| `txt` | `read_txt`, `write_txt` | `StringValue` instances through their `Value`. |
| `localization` | `read_csv`, `write_csv` | `LocalizationTable` instances. CSV rows are turned into JSON `Contents` and back. |
| `msgpack_lua` | `read_msgpack`, `msgpack_to_lua`, `escape_chars` | MessagePack data turned into a `return ...` Luau module source. |

`argonsync.middleware.kinds` has these:

- `Middleware`, with `Middleware.from_class()` to pick a writer for an instance class.
- `ScriptType`, with `ScriptType.from_middleware()`.
- `RunContext`.

### Sessions (`argonsync.sessions`)

This module keeps a record of running sessions in `~/.argon/sessions.toml`. Each `Session` has a `pid`, and optionally a `host` and a `port`.

- `add` registers a session. Unless it runs asynchronously, the session is removed again on Ctrl-C.
- `get` looks a session up by id, by host or by port. Called with no criteria, it returns the last session.
- The other functions are `get_multiple`, `get_all`, `remove`, `remove_multiple` and `remove_all`.
- Entries whose process no longer exists are pruned in the background after `add`.

### Usage statistics (`argonsync.stats`)

- Counters are kept in memory and added to with `minutes_used`, `files_synced`, `lines_synced`, `projects_created`, `projects_built` and `sessions_started`.
- `save()` merges them into `~/.argon/stats.toml`.
- `track()` starts a background thread that saves every five minutes, and counts a session start.
- When at least an hour has passed since the last upload and the total is above 10, `track()` posts the counters. This happens only if both the `ARGON_TOKEN` and `ARGON_STATS_URL` environment variables are set.

### Workspace scaffolding (`argonsync.workspace`)

- `init(WorkspaceConfig(...))` fills a new project directory from `~/.argon/templates/<template>`. Files that already exist are skipped. It also does the following:
  - handles optional Git, Wally, Selene and docs files;
  - renames `.src` files to `init` in Rojo mode;
  - renames `.luau` files to `.lua` when `use_lua` is set.
- `init_ts(workspace, package_manager)` runs `create roblox-ts` with the given package manager, then adds the template's extras.
- `add_license` fetches licence text from the service named by `ARGON_LICENSE_API`. If it cannot, it fills in the template's fallback text instead.
- `initialize_repo` runs `git init`.
- `copy_dir` copies a template directory with the renames described above.

### Helpers

- `argonsync.program.Program` is a builder for running `git`, a Node package manager, `wally` or the current executable. It has `arg`, `args`, `current_dir`, `message`, `spawn` and `output`. When a program is not installed, it logs an error and returns `None`.
- `argonsync.logger` has these:
  - `init()` sets up log output.
  - `prompt()` asks a yes/no question on the terminal.
  - `PromptTheme` controls how prompts look.
  - `Table` renders a plain-text table.
- `argonsync.util` has these:
  - `Verbosity` and `LogStyle`.
  - Readers for the environment flags: `env_verbosity`, `env_log_style`, `env_backtrace` and `env_yes`.
  - Process helpers: `process_exists` and `kill_process`.
  - `get_username`, `get_argon_dir` and `count_loc_from_properties`.
- `argonsync.server.address` has `is_port_free`, `get_free_port` and `format_address`.

## What it does not do

- There is no command-line program.
- There is no sync server, only the address helpers.
- It does not read project files.
- It does not build an instance tree or snapshots.
- It has no readers for JSON, TOML, YAML, JSON models or binary/XML model files.
- It has no updater.
- It does not create the `~/.argon` directory. Sessions, stats and templates expect it to exist.

## Installation

```
pip install argonsync
```

## Example

```python
from pathlib import Path

from argonsync.middleware.txt import read_txt, write_txt
from argonsync.vfs.filesystem import Vfs

vfs = Vfs.new_virtual()
vfs.create_dir(Path("project"))
vfs.write(Path("project/greeting.txt"), b"hello")

class_name, properties = read_txt(Path("project/greeting.txt"), vfs)
print(class_name, properties["Value"])  # StringValue hello

remaining = write_txt({"Value": "goodbye", "Name": "Greeting"}, Path("project/greeting.txt"), vfs)
print(vfs.read_to_string(Path("project/greeting.txt")))  # goodbye
print(remaining)  # {'Name': 'Greeting'}
```

## Running the tests

```
pip install argonsync[test]
pytest
```