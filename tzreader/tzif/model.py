"""Data model for the tzif library."""

from collections import namedtuple
from dataclasses import dataclass

NO_TRANSITION = -1
"""Transition index used when a result is not tied to a specific transition."""


LeapSecond = namedtuple("LeapSecond", ["occurrence", "correction"])
"""A correction that needs to be applied to UTC in order to determine TAI.

The occurrence is the time at which the leap-second correction occurs.
The correction is the total number of leap seconds in effect from the
occurrence onwards.
"""


@dataclass(frozen=True)
class OffsetRule:
    """An entry in the local time type table."""

    index: int
    """Position of this rule in the local time type table."""

    utc_offset: int
    """Number of seconds added to UTC to determine local time."""

    is_dst: bool
    """Determines if local time is Daylight Savings Time (else Standard time)."""

    abbrev_index: int
    """Byte offset of the designation in the abbreviation characters."""

    abbrev: str
    """The time zone designation, e.g. EST."""


@dataclass(frozen=True)
class TransitionResult(OffsetRule):
    """The rule in effect at an instant and where it came from."""

    start_at: int
    """Milliseconds since the epoch when the rule took effect, 0 when unknown."""

    transition_index: int
    """Index into the transition times, or NO_TRANSITION."""

    @classmethod
    def from_rule(
        cls, rule: OffsetRule, start_at: int, transition_index: int
    ) -> "TransitionResult":
        """Create a result that attaches a transition to a rule."""
        return cls(
            index=rule.index,
            utc_offset=rule.utc_offset,
            is_dst=rule.is_dst,
            abbrev_index=rule.abbrev_index,
            abbrev=rule.abbrev,
            start_at=start_at,
            transition_index=transition_index,
        )


@dataclass(frozen=True)
class ZoneinfoRecord:
    """The results of parsing the TZif file.

    For a version 2 file this holds only the 64-bit data block. The version 1
    block that precedes it exists for older readers and is discarded.
    """

    magic: bytes
    """The four byte magic, always b"TZif"."""

    version: bytes
    """The version of the files format, b"\\x00" or b"2"."""

    ttisgmtcnt: int
    """The number of UTC/local indicators in the data block."""

    ttisstdcnt: int
    """The number of standard/wall indicators in the data block."""

    leapcnt: int
    """The number of leap second records in the data block."""

    timecnt: int
    """The number of time transitions in the data block."""

    typecnt: int
    """The number of local time type records in the data block."""

    charcnt: int
    """The number of characters for time zone designations in the data block."""

    ttimes: tuple[int, ...]
    """Transition times in seconds since the epoch, in ascending order."""

    types: tuple[int, ...]
    """Index into rules for the local time type of each transition."""

    rules: tuple[OffsetRule, ...]
    """The local time type records."""

    abbrevs: str
    """The raw designation characters, including NUL terminators."""

    leaps: tuple[LeapSecond, ...]

    ttisstd: tuple[int, ...]
    """Raw standard (1) or wall clock (0) flags, one per local time type."""

    ttisgmt: tuple[int, ...]
    """Raw UTC (1) or local time (0) flags, one per local time type."""
