"""Emptiness Predicate — decides whether a value counts as absent for omit_empty.

Invariants:
    - Pure: depends only on the value's runtime category
    - bool is checked before int (bool subclasses int in Python)
    - Records, datetimes, UUIDs and other opaque values are never empty
"""

from collections.abc import Sized


def is_empty(value: object) -> bool:
    """True when ``value`` is the zero value of its category."""
    if value is None:
        return True
    if isinstance(value, bool):
        return value is False
    if isinstance(value, (int, float)):
        return value == 0
    # str, bytes, list, tuple, dict, set and friends
    if isinstance(value, Sized):
        return len(value) == 0
    return False
