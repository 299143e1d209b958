"""Arguments and result parsing for the pygrep helper script."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Iterable

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


@dataclass(frozen=True)
class PygrepArgs:
    """Flags accepted in the `args` of a pygrep hook."""

    ignore_case: bool = False
    multiline: bool = False
    negate: bool = False

    @classmethod
    def parse(cls, args: Iterable[str]) -> PygrepArgs:
        flags = {"ignore_case": False, "multiline": False, "negate": False}
        for arg in args:
            if arg in ("--ignore-case", "-i"):
                flags["ignore_case"] = True
            elif arg == "--multiline":
                flags["multiline"] = True
            elif arg == "--negate":
                flags["negate"] = True
            else:
                raise ValueError(f"Unknown argument: {arg}")
        return cls(**flags)

    def to_args(self) -> list[str]:
        """The flags as positional ``1``/``0`` arguments for the script."""
        return ["1" if flag else "0" for flag in (self.ignore_case, self.multiline, self.negate)]


class PygrepErrorKind(enum.Enum):
    REGEX = "Regex"
    IO = "IO"
    UNKNOWN = "Unknown"


_TEMPLATES = {
    PygrepErrorKind.REGEX: "Failed to parse regex: {}",
    PygrepErrorKind.IO: "IO error: {}",
    PygrepErrorKind.UNKNOWN: "Unknown error: {}",
}


class PygrepError(Exception):
    """An error reported by the pygrep script."""

    def __init__(self, kind: PygrepErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(_TEMPLATES[kind].format(message))


def _structured_error(stderr: str) -> PygrepError | None:
    try:
        data = json.loads(stderr)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    message = data.get("message")
    if not isinstance(message, str):
        return None
    try:
        kind = PygrepErrorKind(data.get("type"))
    except ValueError:
        return None
    return PygrepError(kind, message)


def parse_script_error(stderr: str | bytes, exit_code: int | None) -> Exception:
    """The error for a failed run of the script, built from its stderr."""
    if isinstance(stderr, bytes):
        stderr = stderr.decode(errors="replace")
    code = -1 if exit_code is None else exit_code
    if not stderr.strip():
        return RuntimeError(
            f"Python script failed with exit code {code} but produced no error output"
        )
    structured = _structured_error(stderr)
    if structured is not None:
        return structured
    return RuntimeError(f"Python script failed with exit code {code}: {stderr.strip()}")


def parse_status(stderr: str | bytes) -> int:
    """The hook status reported as JSON on stderr by a successful script run."""
    if isinstance(stderr, bytes):
        stderr = stderr.decode(errors="replace")
    try:
        data = json.loads(stderr)
    except ValueError as exc:
        raise ValueError(
            f"Failed to parse status code JSON from stderr. Stderr content: '{stderr}'"
        ) from exc
    code = data.get("code") if isinstance(data, dict) else None
    if not isinstance(code, int) or isinstance(code, bool):
        return 0
    if not _I32_MIN <= code <= _I32_MAX:
        return 0
    return code