# hooklangs

Building blocks for git hook runners that run hooks written in several
languages. `hooklangs` parses the `language_version` values that hook
configurations use, checks them against installed toolchains, finds or
downloads Node.js toolchains, and reads what the `pygrep` helper script
reports.

## Modules

- `hooklangs.versionreq`: `Version` (semantic versions with pre-release and
  build parts, ordered by semver rules), `VersionReq` (comma separated
  comparators such as `>=3.8, <3.12`; a bare version means `^`),
  `ToolchainInfo` (the version, path and extra data of an installed
  toolchain), `SemverRequest`, `split_version_numbers` and
  `InvalidVersionError`, which every request parser raises for a value it
  cannot understand.
- `hooklangs.python_version`: `PythonRequest` accepts `python`, `python3`,
  `python3.12`, `3.12.3`, wheel-tag style `312`, ranges such as `>=3.12`,
  and paths that exist. `split_wheel_tag_version` turns `[312]` into
  `[3, 12]`.
- `hooklangs.go_version`: `GoVersion` (with or without the `go` prefix) and
  `GoRequest` (`go`, `go1.20`, `1.20.3`, ranges, existing paths).
- `hooklangs.node_version`: `NodeVersion` (a version with an optional LTS
  code name, parsed from `20.1.0-Iron` or from a release record),
  `NodeRequest` (`node12`, `12.18.3`, `lts/Argon`, ranges, existing paths;
  code names match without regard to ASCII case), `lts_from_json` and
  `lts_to_json`.
- `hooklangs.node_installer`: `NodeInstaller` looks under its root for a
  managed toolchain matching the request, then for a `node` on `PATH` with
  `npm` beside it, and otherwise resolves the version from the Node.js
  release index and downloads it. The work is done under a file lock in the
  root. `NodeResult`, `bin_dir`, `lib_dir`, `node_download_name` and
  `find_npm_in_same_directory` are available on their own.
- `hooklangs.toolchain`: `create_symlink_or_copy`, `unpack_archive` (zip,
  tar, tar.gz, tar.xz, tar.bz2; members may not escape the target),
  `strip_component` and `download_and_extract`.
- `hooklangs.pygrep_args`: `PygrepArgs` parses `--ignore-case`/`-i`,
  `--multiline` and `--negate` and turns them into the script's `1`/`0`
  arguments; `parse_status` reads the status JSON a successful run writes to
  stderr, and `parse_script_error` builds the exception for a failed run
  (a `PygrepError` when stderr holds a structured error).
- `hooklangs.printer`: `Printer` with `DEFAULT`, `QUIET`, `VERBOSE` and
  `NO_PROGRESS` modes. Quiet suppresses stdout and stderr; progress is shown
  only in the default mode.

## Installing

```
pip install hooklangs
```

## Examples

Check a Python request against an installed interpreter:

```python
from pathlib import Path
from hooklangs.python_version import PythonRequest
from hooklangs.versionreq import ToolchainInfo, Version

info = ToolchainInfo(
    language_version=Version.parse("3.12.1"),
    toolchain=Path("/usr/bin/python3.12"),
)
assert PythonRequest.parse("python3.12").satisfied_by(info)
assert PythonRequest.parse(">=3.8, <3.12").satisfied_by(info) is False
```

Node.js requests can name an LTS release:

```python
from hooklangs.node_version import NodeRequest, NodeVersion

request = NodeRequest.parse("lts/argon")
assert request.matches(NodeVersion.parse("4.9.1-Argon"), None)
```

Go requests:

```python
from hooklangs.go_version import GoRequest, GoVersion

assert GoRequest.parse("go1.22").matches(GoVersion.parse("go1.22.5"), None)
```

Get a Node.js toolchain in a directory of your choosing:

```python
from pathlib import Path
from hooklangs.node_installer import NodeInstaller
from hooklangs.node_version import NodeRequest

node = NodeInstaller(Path("~/.cache/hooks/tools/node").expanduser()).install(
    NodeRequest.parse("20")
)
print(node.node, node.npm, node.version)
```

Read the arguments of a pygrep hook:

```python
from hooklangs.pygrep_args import PygrepArgs, parse_status

assert PygrepArgs.parse(["-i", "--negate"]).to_args() == ["1", "0", "1"]
assert parse_status('{"code": 1}') == 1
```

## What it does not do

`hooklangs` does not run hooks itself. It has no command line, no
dispatch from a language name to a request parser, and no installer for Go
toolchains, `uv` or Python virtual environments; Docker hooks are not
handled. It parses and matches Go and Python requests, but getting those
toolchains is left to the caller.

## Running the tests

```
pip install -e ".[test]"
pytest
```