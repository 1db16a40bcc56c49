"""Library for locating and reading zoneinfo files.

This package follows the same approach as zoneinfo for finding timezone
data. It first checks the system TZPATH, then falls back to the files
bundled with the tzdata python package.

Common locations:
  /usr/share/zoneinfo - location of zoneinfo files, e.g. "America/New_York"
  /usr/lib/zoneinfo - alternate location for zoneinfo files
  /etc/localtime - symlink to the zoneinfo file of the host timezone
"""

from __future__ import annotations

import asyncio
import logging
import os
import pathlib
import zoneinfo
from collections.abc import Iterable, Iterator
from importlib import resources
from typing import Protocol

from .exceptions import ZoneinfoDirectoryError
from .tzif.tzif import MAGIC

__all__ = [
    "ZoneinfoSource",
    "ZoneinfoDirectory",
    "locate_zoneinfo_directory",
    "read_zoneinfo_file",
    "async_read_zoneinfo_file",
    "list_zoneinfo_files",
]

_LOGGER = logging.getLogger(__name__)

_FALLBACK_DIRS = (
    "/usr/share/zoneinfo",
    "/usr/lib/zoneinfo",
)


def _tzdata_directory() -> str | None:
    """Return the zoneinfo directory bundled with the tzdata package."""
    try:
        zoneinfo_dir = resources.files("tzdata").joinpath("zoneinfo")
    except ModuleNotFoundError:
        return None
    if isinstance(zoneinfo_dir, pathlib.Path):
        return str(zoneinfo_dir)
    return None


def _default_candidates() -> list[str]:
    """Return the directories searched for zoneinfo files, in order."""
    candidates = list(zoneinfo.TZPATH)
    candidates.extend(d for d in _FALLBACK_DIRS if d not in candidates)
    if tzdata_dir := _tzdata_directory():
        candidates.append(tzdata_dir)
    return candidates


def locate_zoneinfo_directory(candidates: Iterable[str] | None = None) -> str:
    """Return the first directory containing zoneinfo files."""
    if candidates is None:
        candidates = _default_candidates()
    for dirname in candidates:
        if os.path.isdir(dirname):
            _LOGGER.debug("Using zoneinfo directory: %s", dirname)
            return dirname
    raise ZoneinfoDirectoryError("tzinfo files not found")


class ZoneinfoSource(Protocol):
    """The filesystem operations needed to load zones by name."""

    @property
    def root(self) -> str:
        """Return the root directory that zone names are relative to."""

    def resolve(self, name: str) -> str:
        """Return the canonical path of a zone, following symlinks.

        Raises OSError when the zone does not exist.
        """

    def read(self, path: str) -> bytes:
        """Return the contents of a resolved zone path."""

    def walk(self) -> Iterator[str]:
        """Yield the relative name of every file below the root."""


class ZoneinfoDirectory:
    """A ZoneinfoSource backed by a directory on the local filesystem."""

    def __init__(self, root: str | None = None) -> None:
        """Initialize ZoneinfoDirectory."""
        if root is None:
            root = locate_zoneinfo_directory()
        self._root = os.path.abspath(root)

    @property
    def root(self) -> str:
        """Return the root directory that zone names are relative to."""
        return self._root

    def resolve(self, name: str) -> str:
        """Return the canonical path of a zone, following symlinks."""
        filepath = os.path.normpath(os.path.join(self._root, name))
        if os.path.commonpath([self._root, filepath]) != self._root:
            raise FileNotFoundError(f"Zone name outside of zoneinfo directory: {name}")
        return os.path.realpath(filepath, strict=True)

    def read(self, path: str) -> bytes:
        """Return the contents of a resolved zone path."""
        with open(path, "rb") as zone_file:
            return zone_file.read()

    def walk(self) -> Iterator[str]:
        """Yield the relative name of every file below the root."""
        for dirpath, dirnames, filenames in os.walk(self._root):
            dirnames.sort()
            for filename in sorted(filenames):
                filepath = os.path.join(dirpath, filename)
                yield pathlib.PurePath(os.path.relpath(filepath, self._root)).as_posix()

    def __repr__(self) -> str:
        """Return the string representation of the directory."""
        return f"ZoneinfoDirectory({self._root!r})"


def read_zoneinfo_file(name: str, root: str | None = None) -> bytes:
    """Read the zoneinfo file for a zone name.

    Raises OSError when the file cannot be read, including names that
    point outside of the zoneinfo directory.
    """
    source = ZoneinfoDirectory(root)
    return source.read(source.resolve(name))


async def async_read_zoneinfo_file(name: str, root: str | None = None) -> bytes:
    """Read the zoneinfo file for a zone name without blocking the event loop."""
    return await asyncio.to_thread(read_zoneinfo_file, name, root)


def _is_tzif_file(filepath: str) -> bool:
    """Return True if the file starts with the TZif magic."""
    with open(filepath, "rb") as zone_file:
        return zone_file.read(len(MAGIC)) == MAGIC


def list_zoneinfo_files(
    dirname: str | None = None, strip_prefix: bool = False
) -> list[str]:
    """Find the paths of all zoneinfo files below a directory.

    This walks the whole tree and reads the start of every file, so it is
    best called once at startup. With strip_prefix the paths are returned
    relative to the directory, e.g. "America/Los_Angeles".
    """
    if dirname is None:
        dirname = locate_zoneinfo_directory()
    dirname = dirname.rstrip("/") or "/"
    if not os.path.isdir(dirname):
        return []

    tzfiles: list[str] = []
    for dirpath, dirnames, filenames in os.walk(dirname):
        dirnames.sort()
        for filename in sorted(filenames):
            filepath = os.path.join(dirpath, filename)
            try:
                if not _is_tzif_file(filepath):
                    continue
            except OSError as err:
                _LOGGER.debug("Skipping unreadable file %s: %s", filepath, err)
                continue
            if strip_prefix:
                relpath = os.path.relpath(filepath, dirname)
                filepath = pathlib.PurePath(relpath).as_posix()
            tzfiles.append(filepath)
    return tzfiles
