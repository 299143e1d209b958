"""Semantic versions, version requirements and shared language-version helpers."""

from __future__ import annotations

import enum
import functools
import re
from dataclasses import dataclass, field
from pathlib import Path

_U64_MAX = 2**64 - 1
_WILDCARDS = frozenset({"*", "x", "X"})
_IDENTS = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"

_VERSION_RE = re.compile(
    r"(?P<major>0|[1-9][0-9]*)\.(?P<minor>0|[1-9][0-9]*)\.(?P<patch>0|[1-9][0-9]*)"
    rf"(?:-(?P<pre>{_IDENTS}))?(?:\+(?P<build>{_IDENTS}))?"
)
_COMPARATOR_RE = re.compile(
    r"\s*(?P<op>>=|<=|=|>|<|~|\^)?\s*"
    r"(?P<major>[0-9]+|[*xX])(?:\.(?P<minor>[0-9]+|[*xX]))?(?:\.(?P<patch>[0-9]+|[*xX]))?"
    rf"(?:-(?P<pre>{_IDENTS}))?(?:\+(?P<build>{_IDENTS}))?\s*"
)
_U64_RE = re.compile(r"\+?[0-9]+")


def _number(text: str, source: str) -> int:
    value = int(text)
    if value > _U64_MAX:
        raise ValueError(f"number too large in `{source}`")
    return value


def _identifiers(text: str | None, source: str, *, strict: bool) -> tuple[str, ...]:
    if not text:
        return ()
    idents = tuple(text.split("."))
    if strict and any(i.isdigit() and len(i) > 1 and i.startswith("0") for i in idents):
        raise ValueError(f"invalid leading zero in pre-release identifier of `{source}`")
    return idents


def _compare_identifiers(left: tuple[str, ...], right: tuple[str, ...]) -> int:
    for a, b in zip(left, right):
        a_num, b_num = a.isdigit(), b.isdigit()
        if a_num and b_num:
            if int(a) != int(b):
                return -1 if int(a) < int(b) else 1
        elif a_num != b_num:
            return -1 if a_num else 1
        elif a != b:
            return -1 if a < b else 1
    return (len(left) > len(right)) - (len(left) < len(right))


def _compare_pre(left: tuple[str, ...], right: tuple[str, ...]) -> int:
    # A release sorts after any of its pre-releases.
    if not left or not right:
        return (not left) - (not right)
    return _compare_identifiers(left, right)


@functools.total_ordering
@dataclass(frozen=True)
class Version:
    """A semantic version: MAJOR.MINOR.PATCH with optional pre-release and build."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    pre: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> Version:
        match = _VERSION_RE.fullmatch(text)
        if match is None:
            raise ValueError(f"invalid semantic version: `{text}`")
        return cls(
            _number(match["major"], text),
            _number(match["minor"], text),
            _number(match["patch"], text),
            _identifiers(match["pre"], text, strict=True),
            _identifiers(match["build"], text, strict=False),
        )

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre:
            text += "-" + ".".join(self.pre)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def _compare(self, other: Version) -> int:
        mine = (self.major, self.minor, self.patch)
        theirs = (other.major, other.minor, other.patch)
        if mine != theirs:
            return -1 if mine < theirs else 1
        pre = _compare_pre(self.pre, other.pre)
        if pre:
            return pre
        if not self.build or not other.build:
            return bool(self.build) - bool(other.build)
        return _compare_identifiers(self.build, other.build)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._compare(other) < 0


class _Op(enum.Enum):
    EXACT = "="
    GREATER = ">"
    GREATER_EQ = ">="
    LESS = "<"
    LESS_EQ = "<="
    TILDE = "~"
    CARET = "^"
    WILDCARD = "*"


@dataclass(frozen=True)
class _Comparator:
    op: _Op
    major: int
    minor: int | None
    patch: int | None
    pre: tuple[str, ...] = ()

    def matches(self, v: Version) -> bool:
        op = self.op
        if op is _Op.EXACT:
            return self._exact(v)
        if op is _Op.GREATER:
            return self._greater(v)
        if op is _Op.GREATER_EQ:
            return self._exact(v) or self._greater(v)
        if op is _Op.LESS:
            return self._less(v)
        if op is _Op.LESS_EQ:
            return self._exact(v) or self._less(v)
        if op is _Op.TILDE:
            return self._tilde(v)
        if op is _Op.CARET:
            return self._caret(v)
        return v.major == self.major and (self.minor is None or v.minor == self.minor)

    def allows_pre(self, v: Version) -> bool:
        return (
            bool(self.pre)
            and (self.major, self.minor, self.patch) == (v.major, v.minor, v.patch)
        )

    def _exact(self, v: Version) -> bool:
        if v.major != self.major:
            return False
        if self.minor is not None and v.minor != self.minor:
            return False
        if self.patch is not None and v.patch != self.patch:
            return False
        return v.pre == self.pre

    def _greater(self, v: Version) -> bool:
        if v.major != self.major:
            return v.major > self.major
        if self.minor is None:
            return False
        if v.minor != self.minor:
            return v.minor > self.minor
        if self.patch is None:
            return False
        if v.patch != self.patch:
            return v.patch > self.patch
        return _compare_pre(v.pre, self.pre) > 0

    def _less(self, v: Version) -> bool:
        if v.major != self.major:
            return v.major < self.major
        if self.minor is None:
            return False
        if v.minor != self.minor:
            return v.minor < self.minor
        if self.patch is None:
            return False
        if v.patch != self.patch:
            return v.patch < self.patch
        return _compare_pre(v.pre, self.pre) < 0

    def _tilde(self, v: Version) -> bool:
        if v.major != self.major:
            return False
        if self.minor is not None and v.minor != self.minor:
            return False
        if self.patch is not None and v.patch != self.patch:
            return v.patch > self.patch
        return _compare_pre(v.pre, self.pre) >= 0

    def _caret(self, v: Version) -> bool:
        if v.major != self.major:
            return False
        if self.minor is None:
            return True
        if self.patch is None:
            return v.minor >= self.minor if self.major > 0 else v.minor == self.minor
        if self.major > 0:
            if v.minor != self.minor:
                return v.minor > self.minor
            if v.patch != self.patch:
                return v.patch > self.patch
        elif self.minor > 0:
            if v.minor != self.minor:
                return False
            if v.patch != self.patch:
                return v.patch > self.patch
        elif v.minor != self.minor or v.patch != self.patch:
            return False
        return _compare_pre(v.pre, self.pre) >= 0


def _parse_comparator(piece: str, source: str) -> _Comparator | None:
    match = _COMPARATOR_RE.fullmatch(piece)
    if match is None:
        raise ValueError(f"invalid version requirement: `{source}`")

    numbers: list[int] = []
    wildcard = False
    for part in (match["major"], match["minor"], match["patch"]):
        if part is None:
            break
        if part in _WILDCARDS:
            wildcard = True
        elif wildcard:
            raise ValueError(f"unexpected number after wildcard in `{source}`")
        else:
            if len(part) > 1 and part.startswith("0"):
                raise ValueError(f"invalid leading zero in `{source}`")
            numbers.append(_number(part, source))

    pre = _identifiers(match["pre"], source, strict=True)
    if pre and len(numbers) < 3:
        raise ValueError(f"unexpected pre-release in `{source}`")

    op = _Op(match["op"]) if match["op"] else None
    if wildcard:
        if op in (None, _Op.EXACT):
            if not numbers:
                return None
            op = _Op.WILDCARD
        elif not numbers:
            raise ValueError(f"unexpected wildcard after operator in `{source}`")
    elif op is None:
        op = _Op.CARET

    padded = numbers + [None] * (3 - len(numbers))
    return _Comparator(op, padded[0], padded[1], padded[2], pre)


@dataclass(frozen=True)
class VersionReq:
    """A comma separated set of version comparators, all of which must match."""

    comparators: tuple[_Comparator, ...] = ()

    @classmethod
    def parse(cls, text: str) -> VersionReq:
        if not text.strip():
            raise ValueError("empty version requirement")
        parsed = (_parse_comparator(piece, text) for piece in text.split(","))
        return cls(tuple(c for c in parsed if c is not None))

    def matches(self, version: Version) -> bool:
        if not all(c.matches(version) for c in self.comparators):
            return False
        if not version.pre:
            return True
        return any(c.allows_pre(version) for c in self.comparators)


class InvalidVersionError(ValueError):
    """Raised for a `language_version` value that cannot be understood."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid `language_version` value: `{value}`")


@dataclass
class ToolchainInfo:
    """What is known about an installed toolchain environment."""

    language_version: Version = field(default_factory=Version)
    toolchain: Path = field(default_factory=Path)
    extra: dict[str, str] = field(default_factory=dict)

    def get_extra(self, key: str) -> str | None:
        return self.extra.get(key)


def split_version_numbers(version: str) -> list[int]:
    """Split a dotted version into integers; raise ValueError on any bad part."""

    def convert(part: str) -> int:
        if not _U64_RE.fullmatch(part):
            raise ValueError(f"invalid number `{part}` in `{version}`")
        return _number(part, version)

    return [convert(part) for part in version.split(".")]


@dataclass(frozen=True)
class SemverRequest:
    """A plain semantic-version requirement on a language version."""

    requirement: VersionReq

    @classmethod
    def parse(cls, request: str) -> SemverRequest:
        try:
            return cls(VersionReq.parse(request))
        except ValueError:
            raise InvalidVersionError(request) from None

    def satisfied_by(self, install_info: ToolchainInfo) -> bool:
        return self.requirement.matches(install_info.language_version)