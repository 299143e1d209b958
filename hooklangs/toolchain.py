"""Helpers for placing toolchain files: linking, unpacking and downloading archives."""

from __future__ import annotations

import logging
import os
import shutil
import tarfile
import tempfile
import urllib.error
import urllib.request
import zipfile
from pathlib import Path
from typing import BinaryIO, Union

logger = logging.getLogger(__name__)

_Archive = Union[str, "os.PathLike[str]", BinaryIO]

_TAR_MODES = (
    ((".tar.gz", ".tgz"), "r:gz"),
    ((".tar.xz", ".txz"), "r:xz"),
    ((".tar.bz2", ".tbz2"), "r:bz2"),
    ((".tar",), "r:"),
)


class NonSingularArchiveError(ValueError):
    """Raised when an unpacked archive has no single top-level directory."""


class DownloadError(OSError):
    """Raised when an archive cannot be downloaded."""


def create_symlink_or_copy(source: Path | str, target: Path | str) -> None:
    """Link ``target`` to ``source``, copying the file when a link cannot be made."""
    source, target = Path(source), Path(target)
    if target.is_symlink() or target.exists():
        target.unlink()
    try:
        os.symlink(source, target)
        logger.debug("Created symlink from %s to %s", source, target)
        return
    except OSError as exc:
        logger.debug("Failed to create symlink from %s to %s: %s", source, target, exc)
    logger.debug("Falling back to copy from %s to %s", source, target)
    try:
        shutil.copy2(source, target)
    except OSError as exc:
        raise OSError(f"Failed to copy file from {source} to {target}") from exc


def _within(target: Path, name: str) -> bool:
    root = target.resolve()
    destination = (target / name).resolve()
    return destination == root or root in destination.parents


def _tar_mode(filename: str) -> str | None:
    lowered = filename.lower()
    for suffixes, mode in _TAR_MODES:
        if lowered.endswith(suffixes):
            return mode
    return None


def unpack_archive(archive: _Archive, filename: str, target: Path | str) -> None:
    """Unpack ``archive`` into ``target``; the format is taken from ``filename``."""
    target = Path(target)
    target.mkdir(parents=True, exist_ok=True)

    if filename.lower().endswith(".zip"):
        with zipfile.ZipFile(archive) as bundle:
            for name in bundle.namelist():
                if not _within(target, name):
                    raise ValueError(f"Archive member escapes the target: {name}")
            bundle.extractall(target)
        return

    mode = _tar_mode(filename)
    if mode is None:
        raise ValueError(f"Unsupported archive format: {filename}")

    if isinstance(archive, (str, os.PathLike)):
        opened = tarfile.open(archive, mode)
    else:
        opened = tarfile.open(fileobj=archive, mode=mode)
    with opened as bundle:
        for member in bundle.getmembers():
            if not _within(target, member.name):
                raise ValueError(f"Archive member escapes the target: {member.name}")
        if hasattr(tarfile, "data_filter"):
            bundle.extractall(target, filter="data")
        else:
            bundle.extractall(target)


def strip_component(directory: Path | str) -> Path:
    """Return the only entry of ``directory`` when it is a directory."""
    entries = list(Path(directory).iterdir())
    if len(entries) != 1 or not entries[0].is_dir():
        raise NonSingularArchiveError(
            f"The top-level of the archive must contain only a single directory: {directory}"
        )
    return entries[0]


def _fetch(url: str, destination: BinaryIO) -> None:
    try:
        with urllib.request.urlopen(url) as response:
            status = getattr(response, "status", None)
            if status is not None and not 200 <= status < 300:
                raise DownloadError(f"Failed to download file from {url}: {status}")
            shutil.copyfileobj(response, destination)
    except urllib.error.HTTPError as exc:
        raise DownloadError(f"Failed to download file from {url}: {exc.code}") from exc
    except urllib.error.URLError as exc:
        raise DownloadError(f"Failed to download file from {url}") from exc


def download_and_extract(
    url: str, target: Path | str, filename: str, scratch: Path | str
) -> None:
    """Download the archive at ``url`` and unpack it as the directory ``target``.

    A single top-level directory in the archive is stripped. Work happens in
    ``scratch``, which should be on the same filesystem as ``target``.
    """
    target, scratch = Path(target), Path(scratch)
    scratch.mkdir(parents=True, exist_ok=True)
    temp_dir = Path(tempfile.mkdtemp(dir=scratch))
    try:
        logger.debug("Downloading %s into %s", url, temp_dir)
        with tempfile.TemporaryFile(dir=scratch) as download:
            _fetch(url, download)
            download.seek(0)
            unpack_dir = temp_dir / "unpacked"
            unpack_archive(download, filename, unpack_dir)

        try:
            extracted = strip_component(unpack_dir)
        except NonSingularArchiveError:
            extracted = unpack_dir

        if target.is_dir():
            logger.debug("Removing existing target %s", target)
            shutil.rmtree(target)

        logger.debug("Moving %s to %s", extracted, target)
        os.replace(extracted, target)
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)