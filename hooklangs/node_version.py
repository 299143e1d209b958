"""Node.js versions and parsing and matching of Node `language_version` requests."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from hooklangs.versionreq import (
    InvalidVersionError,
    ToolchainInfo,
    Version,
    VersionReq,
    split_version_numbers,
)

EXTRA_KEY_LTS = "lts"

_CODE_NAME_RE = re.compile(r"[A-Za-z0-9]*")
_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def lts_from_json(value: Any) -> str | None:
    """Read the ``lts`` field of a Node release: a code name, or ``None`` if not LTS."""
    return value if isinstance(value, str) else None


def lts_to_json(code_name: str | None) -> str | bool:
    """The JSON value for an ``lts`` field: the code name, or ``False``."""
    return code_name if code_name is not None else False


def _path_exists(path: Path) -> bool:
    try:
        return path.exists()
    except (OSError, ValueError):
        return False


@dataclass(frozen=True)
class NodeVersion:
    """A Node.js release version with its optional LTS code name."""

    version: Version = field(default_factory=Version)
    lts: str | None = None

    @classmethod
    def parse(cls, text: str) -> NodeVersion:
        """Parse ``X.Y.Z`` or ``X.Y.Z-codename``; raise ValueError if invalid."""
        version_part, sep, code_name = text.partition("-")
        return cls(Version.parse(version_part), code_name if sep else None)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> NodeVersion:
        """Build from a release record such as ``{"version": "v20.1.0", "lts": false}``."""
        try:
            raw_version = data["version"]
            raw_lts = data["lts"]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"invalid Node release record: {data!r}") from exc
        if not isinstance(raw_version, str):
            raise ValueError(f"invalid Node version: {raw_version!r}")
        text = raw_version.removeprefix("v").strip()
        return cls(Version.parse(text), lts_from_json(raw_lts))

    @property
    def major(self) -> int:
        return self.version.major

    @property
    def minor(self) -> int:
        return self.version.minor

    @property
    def patch(self) -> int:
        return self.version.patch

    def __str__(self) -> str:
        if self.lts is None:
            return str(self.version)
        return f"{self.version}-{self.lts}"


@dataclass(frozen=True)
class NodeRequest:
    """A requested Node.js toolchain.

    The default instance accepts any toolchain. Otherwise exactly one of
    ``version`` (one to three components), ``path``, ``requirement`` or
    ``code_name`` is set.
    """

    version: tuple[int, ...] = ()
    path: Path | None = None
    requirement: VersionReq | None = None
    code_name: str | None = None

    @property
    def is_any(self) -> bool:
        return (
            not self.version
            and self.path is None
            and self.requirement is None
            and self.code_name is None
        )

    @classmethod
    def parse(cls, request: str) -> NodeRequest:
        if not request:
            return cls()
        if request.startswith("node"):
            rest = request[len("node"):]
            if not rest:
                return cls()
            return cls._from_numbers(rest, request)
        if request.startswith("lts/"):
            code_name = request[len("lts/"):]
            if _CODE_NAME_RE.fullmatch(code_name):
                return cls(code_name=code_name)
            raise InvalidVersionError(request)
        try:
            return cls._from_numbers(request, request)
        except InvalidVersionError:
            pass
        try:
            return cls(requirement=VersionReq.parse(request))
        except ValueError:
            pass
        path = Path(request)
        if _path_exists(path):
            return cls(path=path)
        raise InvalidVersionError(request)

    @classmethod
    def _from_numbers(cls, text: str, original: str) -> NodeRequest:
        try:
            numbers = split_version_numbers(text)
        except ValueError:
            raise InvalidVersionError(original) from None
        if not 1 <= len(numbers) <= 3:
            raise InvalidVersionError(original)
        return cls(version=tuple(numbers))

    def matches(self, version: NodeVersion, toolchain: Path | str | None = None) -> bool:
        if self.path is not None:
            return toolchain is not None and Path(toolchain) == self.path
        if self.requirement is not None:
            return self.requirement.matches(version.version)
        if self.code_name is not None:
            return version.lts is not None and (
                version.lts.translate(_ASCII_LOWER)
                == self.code_name.translate(_ASCII_LOWER)
            )
        parts = (version.major, version.minor, version.patch)
        return parts[: len(self.version)] == self.version

    def satisfied_by(self, install_info: ToolchainInfo) -> bool:
        lts: str | None = None
        raw = install_info.get_extra(EXTRA_KEY_LTS)
        if raw is not None:
            try:
                lts = lts_from_json(json.loads(raw))
            except ValueError:
                lts = None
        node_version = NodeVersion(install_info.language_version, lts)
        return self.matches(node_version, install_info.toolchain)