"""Library for decoding TZif files.

A TZif file starts with a version 1 header and data block that uses 32-bit
transition times. Version 2 files follow that with a second header and a
data block using 64-bit transition times, which is authoritative. Both
blocks have the same layout:

  header (44 bytes):
    magic (4 bytes) "TZif"
    version (1 byte) NUL or "2"
    unused (15 bytes)
    isutcnt, isstdcnt, leapcnt, timecnt, typecnt, charcnt (4 bytes each)
  data block:
    timecnt transition times (TIME_SIZE bytes each)
    timecnt transition types (1 byte each)
    typecnt local time type records (6 bytes each)
    charcnt time zone designation characters
    leapcnt leap second records (TIME_SIZE + 4 bytes each)
    isstdcnt standard/wall indicators (1 byte each)
    isutcnt UTC/local indicators (1 byte each)

where TIME_SIZE is 4 in version 1 and 8 in version 2. See tzfile(5).
"""

import enum
import logging
from dataclasses import dataclass

from ..exceptions import ZoneinfoParseError, ZoneinfoTruncatedError
from .decoder import read_int32, read_int64, read_string_z
from .model import LeapSecond, OffsetRule, ZoneinfoRecord

__all__ = [
    "parse_zoneinfo",
    "read_tzif",
]

_LOGGER = logging.getLogger(__name__)

MAGIC = b"TZif"

# utoff (4 bytes), dst (1 byte), idx (1 byte)
_LOCAL_TIME_RECORD_SIZE = 6


class _TZifVersion(enum.Enum):
    """Version byte and transition time width of a data block."""

    V1 = (b"\x00", 4)
    V2 = (b"2", 8)

    def __init__(self, version: bytes, time_size: int) -> None:
        self.version = version
        self.time_size = time_size

    def read_time(self, buf: bytes, offset: int) -> int:
        """Read a transition or leap second time from the buffer."""
        if self.time_size == 8:
            return read_int64(buf, offset)
        return read_int32(buf, offset)


_SUPPORTED_VERSIONS = {v.version for v in _TZifVersion}
_COUNT_FIELDS = (
    "ttisgmtcnt",
    "ttisstdcnt",
    "leapcnt",
    "timecnt",
    "typecnt",
    "charcnt",
)


@dataclass
class _Header:
    """TZif _Header information."""

    SIZE = 44  # Total size of the header to read

    magic: bytes
    version: bytes
    ttisgmtcnt: int
    ttisstdcnt: int
    leapcnt: int
    timecnt: int
    typecnt: int
    charcnt: int

    @classmethod
    def from_bytes(cls, buf: bytes, pos: int) -> "_Header":
        """Parse the header found at the specified position."""
        _check_available(buf, pos, _Header.SIZE, "header")
        header = _Header(
            buf[pos : pos + 4],
            buf[pos + 4 : pos + 5],
            *(read_int32(buf, pos + 20 + 4 * i) for i in range(6)),
        )
        if header.magic != MAGIC:
            raise ZoneinfoParseError("zoneinfo file did not contain magic header")
        if header.version not in _SUPPORTED_VERSIONS:
            raise ZoneinfoParseError(
                f"zoneinfo file has unsupported version {header.version!r}"
            )
        for name in _COUNT_FIELDS:
            if getattr(header, name) < 0:
                raise ZoneinfoParseError(f"zoneinfo header has negative {name}")
        return header


def _check_available(buf: bytes, pos: int, size: int, section: str) -> None:
    """Verify the section fits in the buffer before reading it."""
    if pos + size > len(buf):
        raise ZoneinfoTruncatedError(
            f"zoneinfo {section} needs {size} bytes at offset {pos}, "
            f"only {max(len(buf) - pos, 0)} available"
        )


def _read_datablock(
    buf: bytes, pos: int, version: _TZifVersion
) -> tuple[ZoneinfoRecord, int]:
    """Read the header and data block at pos, returning the record and end."""
    header = _Header.from_bytes(buf, pos)
    pos += _Header.SIZE

    # Transition times in ascending order
    size = header.timecnt * version.time_size
    _check_available(buf, pos, size, "transition times")
    ttimes = tuple(
        version.read_time(buf, pos + i * version.time_size)
        for i in range(header.timecnt)
    )
    pos += size

    # Zero-based indices into the local time type records (0 to typecnt-1)
    _check_available(buf, pos, header.timecnt, "transition types")
    types = tuple(buf[pos : pos + header.timecnt])
    pos += header.timecnt

    size = header.typecnt * _LOCAL_TIME_RECORD_SIZE
    _check_available(buf, pos, size, "local time types")
    local_time_types = [
        (
            read_int32(buf, offset),
            bool(buf[offset + 4]),
            buf[offset + 5],
        )
        for offset in range(pos, pos + size, _LOCAL_TIME_RECORD_SIZE)
    ]
    pos += size

    # NUL terminated time zone designation strings
    _check_available(buf, pos, header.charcnt, "designations")
    tz_designations = buf[pos : pos + header.charcnt]
    pos += header.charcnt
    rules = tuple(
        OffsetRule(i, utoff, dst, idx, read_string_z(tz_designations, idx))
        for i, (utoff, dst, idx) in enumerate(local_time_types)
    )

    # Leap second records: occurrence (TIME_SIZE) and correction (4 bytes)
    record_size = version.time_size + 4
    size = header.leapcnt * record_size
    _check_available(buf, pos, size, "leap seconds")
    leaps = tuple(
        LeapSecond(
            version.read_time(buf, offset),
            read_int32(buf, offset + version.time_size),
        )
        for offset in range(pos, pos + size, record_size)
    )
    pos += size

    # Standard/wall indicators then UTC/local indicators
    _check_available(buf, pos, header.ttisstdcnt, "standard/wall indicators")
    ttisstd = tuple(buf[pos : pos + header.ttisstdcnt])
    pos += header.ttisstdcnt
    _check_available(buf, pos, header.ttisgmtcnt, "UTC/local indicators")
    ttisgmt = tuple(buf[pos : pos + header.ttisgmtcnt])
    pos += header.ttisgmtcnt

    record = ZoneinfoRecord(
        magic=header.magic,
        version=header.version,
        ttisgmtcnt=header.ttisgmtcnt,
        ttisstdcnt=header.ttisstdcnt,
        leapcnt=header.leapcnt,
        timecnt=header.timecnt,
        typecnt=header.typecnt,
        charcnt=header.charcnt,
        ttimes=ttimes,
        types=types,
        rules=rules,
        abbrevs=tz_designations.decode("utf-8", errors="replace"),
        leaps=leaps,
        ttisstd=ttisstd,
        ttisgmt=ttisgmt,
    )
    return (record, pos)


def read_tzif(content: bytes) -> ZoneinfoRecord:
    """Read the TZif file and parse and return the timezone records.

    Raises ZoneinfoParseError when the content is not a supported TZif file.
    """
    buf = bytes(content)

    # V1 header and block, present in every file
    (record, pos) = _read_datablock(buf, 0, _TZifVersion.V1)
    if record.version == _TZifVersion.V1.version:
        return record

    # V2 header and block supersede the V1 block
    (record, _) = _read_datablock(buf, pos, _TZifVersion.V2)
    return record


def parse_zoneinfo(content: bytes) -> ZoneinfoRecord | None:
    """Parse TZif content, returning None when it is not valid."""
    try:
        return read_tzif(content)
    except ZoneinfoParseError as err:
        _LOGGER.debug("Rejected zoneinfo content: %s", err)
        return None
