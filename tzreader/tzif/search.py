"""Search over ascending transition times."""

from collections.abc import Sequence

__all__ = [
    "search_transitions",
]

# Window size at which the binary search hands over to a linear scan
_LINEAR_SCAN_WINDOW = 15


def search_transitions(array: Sequence[int], value: int) -> int:
    """Return the index of the largest element not greater than value, else -1.

    Zone files rarely have more than a few hundred transitions, so a binary
    search only narrows down the candidates and a short linear scan finishes.
    """
    lo = 0
    hi = len(array) - 1
    while hi - lo > _LINEAR_SCAN_WINDOW:
        mid = (hi + lo) // 2
        if value < array[mid]:
            hi = mid - 1
        else:
            lo = mid

    # Find the first element larger than value
    while lo <= hi and array[lo] <= value:
        lo += 1

    return lo - 1
