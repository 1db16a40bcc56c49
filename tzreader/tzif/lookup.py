"""Library for finding the offset rule in effect at an instant.

The transition times of a zone are the instants at which the local time
type changes. The rule in effect at an instant is the one referenced by the
latest transition at or before it, and following transitions can be walked
one at a time with `next_tzinfo`.
"""

from __future__ import annotations

import datetime
import logging
import math
from collections.abc import Iterator

from dateutil import parser as date_parser

from .model import NO_TRANSITION, OffsetRule, TransitionResult, ZoneinfoRecord
from .search import search_transitions

__all__ = [
    "Instant",
    "find_tzinfo",
    "next_tzinfo",
    "iter_tzinfo",
    "to_epoch_seconds",
]

_LOGGER = logging.getLogger(__name__)

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.UTC)
_SECOND = datetime.timedelta(seconds=1)

Instant = int | float | datetime.date | str
"""Epoch milliseconds, a date or datetime, or a datetime string."""


def _to_datetime(value: datetime.date | str) -> datetime.datetime:
    """Convert a date, datetime or string to an aware UTC datetime."""
    if isinstance(value, str):
        value = date_parser.parse(value)
    if not isinstance(value, datetime.datetime):
        value = datetime.datetime.combine(value, datetime.time())
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.UTC)
    return value


def to_epoch_seconds(instant: Instant) -> int:
    """Return whole seconds since the epoch, rounding towards negative infinity."""
    if isinstance(instant, bool):
        raise TypeError(f"Unsupported instant type: {type(instant).__name__}")
    if isinstance(instant, float) and not math.isfinite(instant):
        raise ValueError(f"Instant is not a finite number: {instant!r}")
    if isinstance(instant, (int, float)):
        return int(instant // 1000)
    if isinstance(instant, (datetime.date, str)):
        return (_to_datetime(instant) - _EPOCH) // _SECOND
    raise TypeError(f"Unsupported instant type: {type(instant).__name__}")


def _rule_for_type(record: ZoneinfoRecord, type_index: int) -> OffsetRule | None:
    """Return the local time type or None when the index is out of range."""
    if 0 <= type_index < len(record.rules):
        return record.rules[type_index]
    _LOGGER.debug(
        "Transition type %s out of bounds for %s rules", type_index, len(record.rules)
    )
    return None


def _transition_result(
    record: ZoneinfoRecord, transition_index: int
) -> TransitionResult | None:
    """Return the result for the transition at the specified index."""
    if (rule := _rule_for_type(record, record.types[transition_index])) is None:
        return None
    return TransitionResult.from_rule(
        rule, record.ttimes[transition_index] * 1000, transition_index
    )


def find_tzinfo(
    record: ZoneinfoRecord, instant: Instant, first_if_too_old: bool = False
) -> TransitionResult | None:
    """Return the offset rule in effect at the instant.

    A zone without transitions (e.g. UTC) always resolves to its first rule.
    An instant before the first transition resolves to the rule of that
    transition only when first_if_too_old is set, otherwise None.
    """
    seconds = to_epoch_seconds(instant)
    index = search_transitions(record.ttimes, seconds)
    if index >= 0:
        return _transition_result(record, index)

    if not record.ttimes and record.rules:
        return TransitionResult.from_rule(record.rules[0], 0, NO_TRANSITION)

    if first_if_too_old and record.ttimes and record.rules:
        if (rule := _rule_for_type(record, record.types[0])) is None:
            return None
        return TransitionResult.from_rule(rule, 0, NO_TRANSITION)

    return None


def next_tzinfo(
    record: ZoneinfoRecord, current: TransitionResult
) -> TransitionResult | None:
    """Return the rule that takes effect at the transition following current."""
    if current.transition_index < 0:
        return None
    next_index = current.transition_index + 1
    if next_index >= len(record.ttimes):
        return None
    return _transition_result(record, next_index)


def iter_tzinfo(
    record: ZoneinfoRecord, current: TransitionResult
) -> Iterator[TransitionResult]:
    """Yield every transition after current in ascending order."""
    result = next_tzinfo(record, current)
    while result is not None:
        yield result
        result = next_tzinfo(record, result)
