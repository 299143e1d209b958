"""Parsing and matching of Python `language_version` requests."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from hooklangs.versionreq import (
    InvalidVersionError,
    ToolchainInfo,
    VersionReq,
    split_version_numbers,
)

_U32_MAX = 2**32 - 1


def split_wheel_tag_version(version: list[int]) -> list[int]:
    """Turn a wheel-tag style version such as ``[38]`` into ``[3, 8]``.

    The major version is a single digit; the rest is the minor version.
    Anything else is returned unchanged.
    """
    if len(version) != 1:
        return list(version)
    release = str(version[0])
    major, rest = release[0], release[1:]
    if not rest or int(rest) > _U32_MAX:
        return list(version)
    return [int(major), int(rest)]


def _path_exists(path: Path) -> bool:
    try:
        return path.exists()
    except (OSError, ValueError):
        return False


@dataclass(frozen=True)
class PythonRequest:
    """A requested Python interpreter.

    The default instance accepts any interpreter. Otherwise exactly one of
    ``version`` (one to three components), ``path`` or ``requirement`` is set;
    ``raw`` keeps the original text of a requirement.
    """

    version: tuple[int, ...] = ()
    path: Path | None = None
    requirement: VersionReq | None = None
    raw: str = ""

    @classmethod
    def parse(cls, request: str) -> PythonRequest:
        if not request:
            return cls()
        if request.startswith("python"):
            rest = request[len("python"):]
            if not rest:
                return cls()
            return cls._from_numbers(rest, request)
        try:
            return cls._from_numbers(request, request)
        except InvalidVersionError:
            pass
        try:
            return cls(requirement=VersionReq.parse(request), raw=request)
        except ValueError:
            pass
        path = Path(request)
        if _path_exists(path):
            return cls(path=path)
        raise InvalidVersionError(request)

    @classmethod
    def _from_numbers(cls, text: str, original: str) -> PythonRequest:
        try:
            numbers = split_wheel_tag_version(split_version_numbers(text))
        except ValueError:
            raise InvalidVersionError(original) from None
        if not 1 <= len(numbers) <= 3:
            raise InvalidVersionError(original)
        return cls(version=tuple(numbers))

    def satisfied_by(self, install_info: ToolchainInfo) -> bool:
        version = install_info.language_version
        if self.path is not None:
            return self.path == install_info.toolchain
        if self.requirement is not None:
            return self.requirement.matches(version)
        parts = (version.major, version.minor, version.patch)
        return parts[: len(self.version)] == self.version