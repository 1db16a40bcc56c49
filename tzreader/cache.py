"""Library for caching parsed zoneinfo files.

A ZoneCache loads zones lazily by name, remembering both the parsed record
and failed lookups so that a name only ever touches the filesystem once.
Records are stored by canonical path, so aliases that are symlinks to the
same file share a record.

Precaching walks the whole zoneinfo tree up front and replaces the lazy
lookups with a read-only, case-insensitive snapshot. Once built, the
snapshot is the only thing consulted: zones missing from the walk stay
missing even if a matching file appears later. The zoneinfo database is
assumed to be static for the lifetime of the process, and nothing is ever
invalidated.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from types import MappingProxyType

from .config import ZoneCacheSettings
from .exceptions import ZoneNotFoundError
from .tzif.model import ZoneinfoRecord
from .tzif.tzif import parse_zoneinfo
from .zoneinfo_dir import ZoneinfoDirectory, ZoneinfoSource

__all__ = [
    "ZoneCache",
]

_LOGGER = logging.getLogger(__name__)


class ZoneCache:
    """A process wide store of parsed zoneinfo records."""

    def __init__(
        self,
        source: ZoneinfoSource | None = None,
        settings: ZoneCacheSettings | None = None,
    ) -> None:
        """Initialize ZoneCache."""
        self._settings = settings or ZoneCacheSettings()
        if source is None:
            source = ZoneinfoDirectory(self._settings.zoneinfo_dir)
        self._source = source
        self._lock = threading.Lock()
        # Zone name to canonical path, None when the zone is known to be missing
        self._realnames: dict[str, str | None] = {}
        self._records: dict[str, ZoneinfoRecord] = {}
        self._snapshot: Mapping[str, ZoneinfoRecord] | None = None

    @property
    def source(self) -> ZoneinfoSource:
        """Return the source that zone files are read from."""
        return self._source

    @property
    def is_precached(self) -> bool:
        """Return True once a precache snapshot has been built."""
        return self._snapshot is not None

    def get(self, name: str) -> ZoneinfoRecord:
        """Return the record for a zone name, loading it on first use.

        Raises ZoneNotFoundError when the zone cannot be read or parsed.
        """
        if (record := self._get_cached(name)) is not None:
            return record
        return self._load(name)

    async def async_get(self, name: str) -> ZoneinfoRecord:
        """Return the record for a zone name without blocking the event loop."""
        if (record := self._get_cached(name)) is not None:
            return record
        return await asyncio.to_thread(self._load, name)

    def get_precached(self, name: str) -> ZoneinfoRecord | None:
        """Return the record from the precache snapshot, never reading files."""
        if (snapshot := self._snapshot) is None:
            return None
        return snapshot.get(name.lower())

    def precache(self, canonical_names: list[str] | None = None) -> None:
        """Load every zone below the source root and build the snapshot.

        Files that cannot be read or parsed are skipped. The relative name of
        each loaded zone is appended to canonical_names when provided.
        """
        names = list(self._source.walk())
        _LOGGER.debug("Precaching %s files from %s", len(names), self._source.root)
        with ThreadPoolExecutor(
            max_workers=self._settings.max_concurrency
        ) as executor:
            records = list(executor.map(self._precache_entry, names))
        self._install_snapshot(names, records, canonical_names)

    async def async_precache(self, canonical_names: list[str] | None = None) -> None:
        """Load every zone below the source root without blocking the event loop."""
        names = await asyncio.to_thread(lambda: list(self._source.walk()))
        _LOGGER.debug("Precaching %s files from %s", len(names), self._source.root)
        semaphore = asyncio.Semaphore(self._settings.max_concurrency)

        async def load(name: str) -> ZoneinfoRecord | None:
            async with semaphore:
                return await asyncio.to_thread(self._precache_entry, name)

        records = await asyncio.gather(*(load(name) for name in names))
        self._install_snapshot(names, records, canonical_names)

    def _get_cached(self, name: str) -> ZoneinfoRecord | None:
        """Return a cached record, None if unknown, or raise for a known miss."""
        if (snapshot := self._snapshot) is not None:
            if (record := snapshot.get(name.lower())) is None:
                raise ZoneNotFoundError(f"No such zone: {name}")
            return record
        with self._lock:
            if name not in self._realnames:
                return None
            if (realname := self._realnames[name]) is None:
                raise ZoneNotFoundError(f"No such zone: {name}")
            return self._records[realname]

    def _set_missing(self, name: str) -> None:
        with self._lock:
            self._realnames[name] = None

    def _load(self, name: str) -> ZoneinfoRecord:
        """Read and parse a zone, recording the outcome for the name."""
        _LOGGER.debug("Loading zone: %s", name)
        try:
            realname = self._source.resolve(name)
        except (OSError, ValueError) as err:
            self._set_missing(name)
            raise ZoneNotFoundError(f"No such zone file: {name}") from err

        with self._lock:
            if (record := self._records.get(realname)) is not None:
                self._realnames[name] = realname
                return record

        try:
            content = self._source.read(realname)
        except OSError as err:
            self._set_missing(name)
            raise ZoneNotFoundError(f"Unable to read zone file: {name}") from err

        if (record := parse_zoneinfo(content)) is None:
            self._set_missing(name)
            raise ZoneNotFoundError(f"Failed to parse zone file: {name}")

        with self._lock:
            record = self._records.setdefault(realname, record)
            self._realnames[name] = realname
        return record

    def _precache_entry(self, name: str) -> ZoneinfoRecord | None:
        """Load a zone for the snapshot, reusing a record loaded by name."""
        with self._lock:
            if (realname := self._realnames.get(name)) is not None:
                return self._records[realname]
        try:
            return self._load(name)
        except ZoneNotFoundError as err:
            _LOGGER.debug("Skipping %s while precaching: %s", name, err)
            return None

    def _install_snapshot(
        self,
        names: list[str],
        records: list[ZoneinfoRecord | None],
        canonical_names: list[str] | None,
    ) -> None:
        """Replace lazy lookups with a case-insensitive snapshot."""
        zimap: dict[str, ZoneinfoRecord] = {}
        for name, record in zip(names, records):
            if record is None:
                continue
            if canonical_names is not None:
                canonical_names.append(name)
            zimap[name.lower()] = record
        _LOGGER.debug("Precached %s zones", len(zimap))
        with self._lock:
            self._snapshot = MappingProxyType(zimap)
