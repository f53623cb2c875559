"""Numeric coercion for untrusted calorie values."""

import math
import numbers
import re
from decimal import Decimal

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?|-?\.\d+")


def coerce_calories(value: object) -> int:
    """Turn any input into a non-negative integer without raising.

    Strings are read up to their first number after dropping thousands
    separators, so ``"250 kcal"`` and ``"1,200"`` parse. Every number goes
    through ``float``; anything out of its range or not finite is 0.
    """
    number = _to_number(value)
    if number is None or not math.isfinite(number):
        return 0
    return max(0, math.floor(number + 0.5))


def _to_number(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real | Decimal):
        try:
            return float(value)
        except (OverflowError, ValueError):
            return None
    if isinstance(value, str):
        match = _NUMBER.search(value.replace(",", ""))
        if match is None:
            return None
        return float(match.group())
    return None
