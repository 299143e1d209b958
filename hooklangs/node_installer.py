"""Finding, resolving and downloading Node.js toolchains."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import platform
import subprocess
import sys
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from pathlib import Path

from filelock import FileLock

from hooklangs.node_version import NodeRequest, NodeVersion
from hooklangs.toolchain import download_and_extract

logger = logging.getLogger(__name__)

_NODE_INDEX = "https://nodejs.org/dist/index.json"
_NODE_DIST = "https://nodejs.org/dist/"
_IS_WINDOWS = sys.platform == "win32"
_EXE_SUFFIX = ".exe" if _IS_WINDOWS else ""
_NPM_NAMES = ("npm", "npm.cmd", "npm.bat")
_VERSION_SCRIPT = (
    "JSON.stringify({version: process.version, lts: process.release.lts || false})"
)

_ARCHES = {
    "i386": "x86",
    "i486": "x86",
    "i586": "x86",
    "i686": "x86",
    "x86": "x86",
    "x86_64": "x64",
    "amd64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armv7l",
    "armv7": "armv7l",
    "armv6l": "armv7l",
    "arm": "armv7l",
    "s390x": "s390x",
    "ppc": "ppc64",
    "powerpc": "ppc64",
    "ppc64le": "ppc64le",
}
_SYSTEMS = {
    "darwin": "darwin",
    "linux": "linux",
    "windows": "win",
    "aix": "aix",
}


def bin_dir(prefix: Path | str) -> Path:
    """The directory holding executables of a Node prefix."""
    prefix = Path(prefix)
    return prefix if _IS_WINDOWS else prefix / "bin"


def lib_dir(prefix: Path | str) -> Path:
    """The directory holding globally installed packages of a Node prefix."""
    prefix = Path(prefix)
    if _IS_WINDOWS:
        return prefix / "node_modules"
    return prefix / "lib" / "node_modules"


def node_download_name(version: NodeVersion, system: str, machine: str) -> str:
    """The release archive name for a platform as reported by :mod:`platform`."""
    arch = _ARCHES.get(machine.lower())
    if arch is None:
        raise ValueError("Unsupported architecture")
    os_name = _SYSTEMS.get(system.lower())
    if os_name is None:
        raise ValueError("Unsupported OS")
    if os_name == "darwin" and arch == "arm64" and version.major < 16:
        # Native arm64 builds for macOS only exist from Node.js 16 on.
        arch = "x64"
    ext = "zip" if os_name == "win" else "tar.xz"
    return f"node-v{version.version}-{os_name}-{arch}.{ext}"


def _is_executable(path: Path) -> bool:
    if _IS_WINDOWS:
        return path.suffix.lower() in (".exe", ".cmd", ".bat")
    try:
        return path.is_file() and bool(path.stat().st_mode & 0o111)
    except OSError:
        return False


def find_npm_in_same_directory(node_path: Path | str) -> Path | None:
    """The npm executable next to ``node_path``, if there is one."""
    node_path = Path(node_path)
    node_dir = node_path.parent
    for name in _NPM_NAMES:
        npm_path = node_dir / name
        if npm_path.exists() and _is_executable(npm_path):
            logger.debug("Found npm %s in same directory as node %s", npm_path, node_path)
            return npm_path
    logger.debug("npm not found in same directory as node %s", node_path)
    return None


def _which_all(name: str) -> list[Path]:
    found: list[Path] = []
    for directory in os.environ.get("PATH", "").split(os.pathsep):
        if not directory:
            continue
        candidate = Path(directory) / f"{name}{_EXE_SUFFIX}"
        if candidate.is_file() and os.access(candidate, os.X_OK) and candidate not in found:
            found.append(candidate)
    return found


@dataclass(frozen=True)
class NodeResult:
    """A node executable, its npm and the version of node."""

    node: Path
    npm: Path
    version: NodeVersion = field(default_factory=NodeVersion)

    @classmethod
    def from_dir(cls, directory: Path | str) -> NodeResult:
        bins = bin_dir(directory)
        npm_name = "npm.cmd" if _IS_WINDOWS else "npm"
        return cls(bins / f"node{_EXE_SUFFIX}", bins / npm_name)

    def __str__(self) -> str:
        return f"{self.node}@{self.version}"

    def fill_version(self) -> NodeResult:
        """Ask the executable for its version and return a result carrying it."""
        completed = subprocess.run(
            [str(self.node), "-p", _VERSION_SCRIPT], capture_output=True, check=True
        )
        text = completed.stdout.decode(errors="replace")
        try:
            version = NodeVersion.from_json(json.loads(text))
        except ValueError as exc:
            raise ValueError("Failed to parse node version") from exc
        return dataclasses.replace(self, version=version)


class NodeInstaller:
    """Manages Node.js toolchains under one root directory."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def install(self, request: NodeRequest) -> NodeResult:
        """Return a Node.js toolchain matching ``request``, downloading one if needed."""
        self.root.mkdir(parents=True, exist_ok=True)
        with FileLock(str(self.root / ".lock")):
            installed = self.find_installed(request)
            if installed is not None:
                logger.debug("Found installed node %s", installed)
                return installed

            system = self.find_system_node(request)
            if system is not None:
                logger.debug("Using system node %s", system)
                return system

            version = self.resolve_version(request)
            logger.debug("Installing node %s", version)
            return self.download(version)

    def find_installed(self, request: NodeRequest) -> NodeResult | None:
        """The newest toolchain under the root matching ``request``, if any."""
        try:
            entries = list(self.root.iterdir())
        except OSError:
            return None
        installed = []
        for entry in entries:
            if not entry.is_dir():
                continue
            try:
                installed.append((NodeVersion.parse(entry.name), entry))
            except ValueError:
                continue
        installed.sort(key=lambda item: item[0].version, reverse=True)
        for version, path in installed:
            if request.matches(version, path):
                return dataclasses.replace(NodeResult.from_dir(path), version=version)
        return None

    def resolve_version(self, request: NodeRequest) -> NodeVersion:
        """The first released version in the remote index matching ``request``."""
        try:
            versions = self.list_remote_versions()
        except (OSError, ValueError) as exc:
            raise RuntimeError("Failed to list remote versions") from exc
        for version in versions:
            if request.matches(version, None):
                return version
        raise LookupError("Version not found on remote")

    def list_remote_versions(self) -> list[NodeVersion]:
        """All Node.js releases listed on the Node.js website, in index order."""
        with urllib.request.urlopen(_NODE_INDEX) as response:
            records = json.load(response)
        if not isinstance(records, list):
            raise ValueError("Unexpected Node.js release index")
        return [NodeVersion.from_json(record) for record in records]

    def download(self, version: NodeVersion) -> NodeResult:
        """Download and unpack ``version`` under the root."""
        filename = node_download_name(version, platform.system(), platform.machine())
        url = f"{_NODE_DIST}v{version.version}/{filename}"
        target = self.root / str(version)
        try:
            download_and_extract(url, target, filename, self.root)
        except (OSError, ValueError) as exc:
            raise RuntimeError("Failed to download and extract Node.js") from exc
        return dataclasses.replace(NodeResult.from_dir(target), version=version)

    def find_system_node(self, request: NodeRequest) -> NodeResult | None:
        """The first ``node`` on PATH, with npm beside it, matching ``request``."""
        paths = _which_all("node")
        if not paths:
            logger.debug("No node executables found in PATH")
            return None
        for node_path in paths:
            npm_path = find_npm_in_same_directory(node_path)
            if npm_path is None:
                logger.debug("No npm found in same directory as node %s", node_path)
                continue
            try:
                result = NodeResult(node_path, npm_path).fill_version()
            except (OSError, subprocess.CalledProcessError, ValueError) as exc:
                logger.warning("Failed to get version for system node: %s", exc)
                continue
            if request.matches(result.version, result.node):
                logger.debug("Found a matching system node %s", result)
                return result
            logger.debug("System node %s does not match requested version", result)
        logger.debug("No system node matches the requested version %r", request)
        return None