"""Circular lookups over sorted line-index sequences.

Line cycling, hunk cycling and hunk-boundary detection all reduce to
"nearest value before/after X, wrapping around the ends".
"""

from bisect import bisect_left, bisect_right
from typing import Sequence


def prev_index(values: Sequence[int], target: int, inclusive: bool = False) -> int:
    """Return the index of the nearest value before target.

    Args:
        values: Ascending sequence of integers.
        target: Value to search from.
        inclusive: Accept a value equal to target.

    Returns:
        Index of the greatest value < target (<= when inclusive), or the
        last index if every value is past target.

    Raises:
        ValueError: If values is empty.
    """
    if not values:
        raise ValueError("prev_index() on an empty sequence")
    if inclusive:
        pos = bisect_right(values, target)
    else:
        pos = bisect_left(values, target)
    if pos == 0:
        return len(values) - 1
    return pos - 1


def next_index(values: Sequence[int], target: int, inclusive: bool = False) -> int:
    """Return the index of the nearest value after target.

    Args:
        values: Ascending sequence of integers.
        target: Value to search from.
        inclusive: Accept a value equal to target.

    Returns:
        Index of the smallest value > target (>= when inclusive), or 0 if
        no value is past target.

    Raises:
        ValueError: If values is empty.
    """
    if not values:
        raise ValueError("next_index() on an empty sequence")
    if inclusive:
        pos = bisect_left(values, target)
    else:
        pos = bisect_right(values, target)
    if pos == len(values):
        return 0
    return pos
