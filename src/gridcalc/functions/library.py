"""Built-in spreadsheet functions.

Every function takes the ordered list of numbers parsed from a call's
argument list and returns a number, a boolean or a list of numbers.
"""

from __future__ import annotations

import math
import random
from typing import Any, Callable

from gridcalc.formulas.errors import EmptyInputError, InvalidRangeError


def is_even(num: float) -> bool:
    return num % 2 == 0


def sum_values(nums: list[float]) -> float:
    """SUM(...) -- 0 for no arguments."""
    return sum(nums, 0)


def average(nums: list[float]) -> float:
    """AVERAGE(...) -- arithmetic mean of at least one value."""
    if len(nums) == 0:
        raise EmptyInputError("average")
    return sum_values(nums) / len(nums)


def median(nums: list[float]) -> float:
    """MEDIAN(...) -- middle value; the mean of the two middle values for even counts."""
    if len(nums) == 0:
        raise EmptyInputError("median")
    ordered = sorted(nums)
    middle = len(ordered) // 2
    if is_even(len(ordered)):
        return average([ordered[middle - 1], ordered[middle]])
    return ordered[middle]


def random_between(bounds: list[float]) -> float:
    """RANDOM(x, y) -- uniform random integer between x and y inclusive.

    The bounds may be given in either order.  A missing bound (an empty
    cell or argument) parses as NaN and is rejected.
    """
    if len(bounds) != 2 or not all(math.isfinite(n) for n in bounds):
        raise InvalidRangeError("random", bounds)
    low, high = min(bounds), max(bounds)
    return math.floor(random.random() * (high - low + 1)) + low


def number_range(start: float, end: float) -> list[float]:
    """Inclusive run of consecutive numbers from *start* to *end*.

    Returns an empty list when *end* is less than *start*.
    """
    if end < start:
        return []
    return [start + i for i in range(math.floor(end - start) + 1)]


def char_range(start: str, end: str) -> list[str]:
    """Inclusive run of characters from *start* to *end*, by character code.

    >>> char_range("a", "e")
    ['a', 'b', 'c', 'd', 'e']
    """
    return [chr(code) for code in number_range(ord(start[0]), ord(end[0]))]


def _fn_range(nums: list[float]) -> list[float]:
    """RANGE(start, end)."""
    if len(nums) != 2 or not all(math.isfinite(n) for n in nums):
        raise InvalidRangeError("range", nums)
    return number_range(*nums)


def _fn_nodupes(nums: list[float]) -> list[float]:
    """NODUPES(...) -- drop repeats, keeping first occurrences in order."""
    return list(dict.fromkeys(nums))


def _identity(arg: Any) -> Any:
    return arg


SPREADSHEET_FUNCTIONS: dict[str, Callable[[list[float]], Any]] = {
    "sum": sum_values,
    "average": average,
    "median": median,
    "even": lambda nums: [n for n in nums if is_even(n)],
    "someeven": lambda nums: any(is_even(n) for n in nums),
    "everyeven": lambda nums: all(is_even(n) for n in nums),
    "firsttwo": lambda nums: nums[:2],
    "lasttwo": lambda nums: nums[-2:],
    "has2": lambda nums: 2 in nums,
    "increment": lambda nums: [n + 1 for n in nums],
    "random": random_between,
    "range": _fn_range,
    "nodupes": _fn_nodupes,
    # Bare parentheses, e.g. ``(1, 2)``, pass their values through.
    "": _identity,
}
