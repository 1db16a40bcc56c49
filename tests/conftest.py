"""Test fixtures."""

from collections.abc import Callable, Sequence
import pathlib
import struct

import pytest

from tzreader.tzif.model import ZoneinfoRecord
from tzreader.tzif.tzif import read_tzif

# America/Jamaica zoneinfo file from mid-2017, edited to add two leap seconds.
# The v1 block has 21 transitions and 3 types, the v2 block 22 and 4.
JAMAICA = bytes(
    [
        0x54, 0x5A, 0x69, 0x66,  # magic
        0x32,  # version "2"
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,  # unused
        0x00, 0x00, 0x00, 0x03,  # isutcnt
        0x00, 0x00, 0x00, 0x03,  # isstdcnt
        0x00, 0x00, 0x00, 0x02,  # leapcnt
        0x00, 0x00, 0x00, 0x15,  # timecnt
        0x00, 0x00, 0x00, 0x03,  # typecnt
        0x00, 0x00, 0x00, 0x0C,  # charcnt
        # v1 transition times
        0x93, 0x0F, 0xB4, 0xFF, 0x07, 0x8D, 0x19, 0x70, 0x09, 0x10, 0xA4, 0x60,
        0x09, 0xAD, 0x94, 0xF0, 0x0A, 0xF0, 0x86, 0x60, 0x0B, 0xE0, 0x85, 0x70,
        0x0C, 0xD9, 0xA2, 0xE0, 0x0D, 0xC0, 0x67, 0x70, 0x0E, 0xB9, 0x84, 0xE0,
        0x0F, 0xA9, 0x83, 0xF0, 0x10, 0x99, 0x66, 0xE0, 0x11, 0x89, 0x65, 0xF0,
        0x12, 0x79, 0x48, 0xE0, 0x13, 0x69, 0x47, 0xF0, 0x14, 0x59, 0x2A, 0xE0,
        0x15, 0x49, 0x29, 0xF0, 0x16, 0x39, 0x0C, 0xE0, 0x17, 0x29, 0x0B, 0xF0,
        0x18, 0x22, 0x29, 0x60, 0x19, 0x08, 0xED, 0xF0, 0x1A, 0x02, 0x0B, 0x60,
        # v1 transition types
        0x01, 0x02, 0x01, 0x02, 0x01, 0x02, 0x01, 0x02, 0x01, 0x02, 0x01, 0x02,
        0x01, 0x02, 0x01, 0x02, 0x01, 0x02, 0x01, 0x02, 0x01,
        # v1 local time types
        0xFF, 0xFF, 0xB8, 0x01, 0x00, 0x00,  # -18431 KMT
        0xFF, 0xFF, 0xB9, 0xB0, 0x00, 0x04,  # -18000 EST
        0xFF, 0xFF, 0xC7, 0xC0, 0x01, 0x08,  # -14400 EDT
        # v1 designations "KMT\0EST\0EDT\0"
        0x4B, 0x4D, 0x54, 0x00, 0x45, 0x53, 0x54, 0x00, 0x45, 0x44, 0x54, 0x00,
        # v1 leap seconds
        0xFF, 0xFF, 0xFF, 0xFE, 0x00, 0x00, 0x00, 0x01,
        0xFF, 0xFF, 0xFF, 0xFF, 0x00, 0x00, 0x00, 0x02,
        # v1 standard/wall and UTC/local indicators
        0x00, 0x00, 0x00,
        0x00, 0x00, 0x00,
        # v2 header at offset 201
        0x54, 0x5A, 0x69, 0x66,  # magic
        0x32,  # version "2"
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
        0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,  # unused
        0x00, 0x00, 0x00, 0x04,  # isutcnt
        0x00, 0x00, 0x00, 0x04,  # isstdcnt
        0x00, 0x00, 0x00, 0x02,  # leapcnt
        0x00, 0x00, 0x00, 0x16,  # timecnt
        0x00, 0x00, 0x00, 0x04,  # typecnt
        0x00, 0x00, 0x00, 0x10,  # charcnt
        # v2 transition times
        0xFF, 0xFF, 0xFF, 0xFF, 0x69, 0x87, 0x23, 0x7F,
        0xFF, 0xFF, 0xFF, 0xFF, 0x93, 0x0F, 0xB4, 0xFF,
        0x00, 0x00, 0x00, 0x00, 0x07, 0x8D, 0x19, 0x70,
        0x00, 0x00, 0x00, 0x00, 0x09, 0x10, 0xA4, 0x60,
        0x00, 0x00, 0x00, 0x00, 0x09, 0xAD, 0x94, 0xF0,
        0x00, 0x00, 0x00, 0x00, 0x0A, 0xF0, 0x86, 0x60,
        0x00, 0x00, 0x00, 0x00, 0x0B, 0xE0, 0x85, 0x70,
        0x00, 0x00, 0x00, 0x00, 0x0C, 0xD9, 0xA2, 0xE0,
        0x00, 0x00, 0x00, 0x00, 0x0D, 0xC0, 0x67, 0x70,
        0x00, 0x00, 0x00, 0x00, 0x0E, 0xB9, 0x84, 0xE0,
        0x00, 0x00, 0x00, 0x00, 0x0F, 0xA9, 0x83, 0xF0,
        0x00, 0x00, 0x00, 0x00, 0x10, 0x99, 0x66, 0xE0,
        0x00, 0x00, 0x00, 0x00, 0x11, 0x89, 0x65, 0xF0,
        0x00, 0x00, 0x00, 0x00, 0x12, 0x79, 0x48, 0xE0,
        0x00, 0x00, 0x00, 0x00, 0x13, 0x69, 0x47, 0xF0,
        0x00, 0x00, 0x00, 0x00, 0x14, 0x59, 0x2A, 0xE0,
        0x00, 0x00, 0x00, 0x00, 0x15, 0x49, 0x29, 0xF0,
        0x00, 0x00, 0x00, 0x00, 0x16, 0x39, 0x0C, 0xE0,
        0x00, 0x00, 0x00, 0x00, 0x17, 0x29, 0x0B, 0xF0,
        0x00, 0x00, 0x00, 0x00, 0x18, 0x22, 0x29, 0x60,
        0x00, 0x00, 0x00, 0x00, 0x19, 0x08, 0xED, 0xF0,
        0x00, 0x00, 0x00, 0x00, 0x1A, 0x02, 0x0B, 0x60,
        # v2 transition types
        0x01, 0x02, 0x03, 0x02, 0x03, 0x02, 0x03, 0x02, 0x03, 0x02, 0x03,
        0x02, 0x03, 0x02, 0x03, 0x02, 0x03, 0x02, 0x03, 0x02, 0x03, 0x02,
        # v2 local time types
        0xFF, 0xFF, 0xB8, 0x01, 0x00, 0x00,  # -18431 LMT
        0xFF, 0xFF, 0xB8, 0x01, 0x00, 0x04,  # -18431 KMT
        0xFF, 0xFF, 0xB9, 0xB0, 0x00, 0x08,  # -18000 EST
        0xFF, 0xFF, 0xC7, 0xC0, 0x01, 0x0C,  # -14400 EDT
        # v2 designations "LMT\0KMT\0EST\0EDT\0"
        0x4C, 0x4D, 0x54, 0x00, 0x4B, 0x4D, 0x54, 0x00,
        0x45, 0x53, 0x54, 0x00, 0x45, 0x44, 0x54, 0x00,
        # v2 leap seconds, two back to back just before 1970-01-01
        0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFE, 0x00, 0x00, 0x00, 0x01,
        0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0x00, 0x00, 0x00, 0x02,
        # v2 standard/wall and UTC/local indicators
        0x00, 0x00, 0x00, 0x00,
        0x00, 0x00, 0x00, 0x00,
        # footer "\nEST5"
        0x0A, 0x45, 0x53, 0x54, 0x35,
    ]
)  # fmt: skip

V2_OFFSET = 201

TzifFactory = Callable[..., bytes]


def _datablock(
    version: bytes,
    time_format: str,
    ttimes: Sequence[int],
    types: Sequence[int],
    rules: Sequence[tuple[int, bool, int]],
    abbrevs: bytes,
    leaps: Sequence[tuple[int, int]],
    ttisstd: bytes,
    ttisgmt: bytes,
) -> bytes:
    """Encode a header and data block."""
    return b"".join(
        [
            struct.pack(
                ">4sc15x6l",
                b"TZif",
                version,
                len(ttisgmt),
                len(ttisstd),
                len(leaps),
                len(ttimes),
                len(rules),
                len(abbrevs),
            ),
            struct.pack(f">{len(ttimes)}{time_format}", *ttimes),
            bytes(types),
            b"".join(struct.pack(">l?B", *rule) for rule in rules),
            abbrevs,
            b"".join(struct.pack(f">{time_format}l", *leap) for leap in leaps),
            ttisstd,
            ttisgmt,
        ]
    )


def make_tzif(
    ttimes: Sequence[int] = (),
    types: Sequence[int] = (),
    rules: Sequence[tuple[int, bool, int]] = ((0, False, 0),),
    abbrevs: bytes = b"UTC\x00",
    leaps: Sequence[tuple[int, int]] = (),
    ttisstd: bytes = b"",
    ttisgmt: bytes = b"",
    version: bytes = b"2",
) -> bytes:
    """Encode a TZif file, with the same data in both blocks for version 2."""
    args = (ttimes, types, rules, abbrevs, leaps, ttisstd, ttisgmt)
    content = _datablock(version, "l", *args)
    if version == b"2":
        content += _datablock(version, "q", *args) + b"\n\n"
    return content


@pytest.fixture(name="jamaica_content")
def mock_jamaica_content() -> bytes:
    """Fixture with the raw Jamaica zone, version 2 with a version 1 block."""
    return JAMAICA


@pytest.fixture(name="jamaica")
def mock_jamaica() -> ZoneinfoRecord:
    """Fixture with the parsed Jamaica zone."""
    return read_tzif(JAMAICA)


@pytest.fixture(name="tzif_factory")
def mock_tzif_factory() -> TzifFactory:
    """Fixture that encodes TZif files."""
    return make_tzif


@pytest.fixture(name="zoneinfo_dir")
def mock_zoneinfo_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    """Fixture that creates a small zoneinfo tree.

    Contains a few zones, an alias symlink, a broken symlink, a file that is
    not TZif and an empty directory.
    """
    root = tmp_path / "zoneinfo"
    (root / "Europe").mkdir(parents=True)
    (root / "America").mkdir()
    (root / "Empty").mkdir()
    (root / "UTC").write_bytes(make_tzif())
    (root / "Europe" / "Sofia").write_bytes(
        make_tzif(
            ttimes=[-781048800, 1679792400],
            types=[0, 1],
            rules=[(7200, False, 0), (10800, True, 4)],
            abbrevs=b"EET\x00EEST\x00",
        )
    )
    (root / "America" / "Jamaica").write_bytes(JAMAICA)
    (root / "Jamaica").symlink_to(root / "America" / "Jamaica")
    (root / "zone.tab").write_text("# not a zoneinfo file\n")
    (root / "Broken").symlink_to(root / "Nonesuch")
    return root
