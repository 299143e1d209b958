"""Go versions and parsing and matching of Go `language_version` requests."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from hooklangs.versionreq import (
    InvalidVersionError,
    ToolchainInfo,
    Version,
    VersionReq,
    split_version_numbers,
)


class GoVersion(Version):
    """A Go release version, written with or without the ``go`` prefix."""

    @classmethod
    def parse(cls, text: str) -> GoVersion:
        return super().parse(text.removeprefix("go").strip())


def _path_exists(path: Path) -> bool:
    try:
        return path.exists()
    except (OSError, ValueError):
        return False


@dataclass(frozen=True)
class GoRequest:
    """A requested Go toolchain.

    The default instance accepts any toolchain. Otherwise exactly one of
    ``version`` (one to three components), ``path`` or ``requirement`` is set;
    ``raw`` keeps the original text of a requirement.
    """

    version: tuple[int, ...] = ()
    path: Path | None = None
    requirement: VersionReq | None = None
    raw: str = ""

    @classmethod
    def parse(cls, request: str) -> GoRequest:
        if not request:
            return cls()
        if request.startswith("go"):
            rest = request[len("go"):]
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
    def _from_numbers(cls, text: str, original: str) -> GoRequest:
        try:
            numbers = split_version_numbers(text)
        except ValueError:
            raise InvalidVersionError(original) from None
        if not 1 <= len(numbers) <= 3:
            raise InvalidVersionError(original)
        return cls(version=tuple(numbers))

    def matches(self, version: Version, toolchain: Path | str | None = None) -> bool:
        if self.path is not None:
            return toolchain is not None and Path(toolchain) == self.path
        if self.requirement is not None:
            return self.requirement.matches(version)
        parts = (version.major, version.minor, version.patch)
        return parts[: len(self.version)] == self.version

    def satisfied_by(self, install_info: ToolchainInfo) -> bool:
        return self.matches(install_info.language_version, install_info.toolchain)