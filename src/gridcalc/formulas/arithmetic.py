"""Infix arithmetic reduction over formula text.

Arithmetic is evaluated by rewriting: the leftmost ``<number> <op> <number>``
is replaced by its result and the text is scanned again from the start.
Multiplication and division are reduced to a fixed point before addition
and subtraction, which gives the usual operator precedence and strict
left-to-right evaluation among operators of equal precedence.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Callable

# Optionally signed decimal literal.  A leading ``-`` only counts as a sign
# when it does not directly follow another number, so ``1-2`` stays a
# subtraction.  Digits glued to a letter (the row of ``A1``) never start
# a number.
_NUMBER = r"((?:(?<![\w.])-)?(?<![\w.])\d+(?:\.\d*)?)"

HIGH_PRECEDENCE_RE = re.compile(_NUMBER + r"\s*([*/])\s*" + _NUMBER)
LOW_PRECEDENCE_RE = re.compile(_NUMBER + r"\s*([+-])\s*" + _NUMBER)


def _divide(x: float, y: float) -> float:
    """IEEE division: ``x/0`` is a signed infinity, ``0/0`` is NaN."""
    if y == 0:
        if x == 0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
    return x / y


INFIX_OPERATORS: dict[str, Callable[[float, float], float]] = {
    "+": lambda x, y: x + y,
    "-": lambda x, y: x - y,
    "*": lambda x, y: x * y,
    "/": _divide,
}


# ---------------------------------------------------------------------------
# Number text conversions
# ---------------------------------------------------------------------------


def parse_number(text: str) -> float:
    """Parse a numeric literal, returning NaN for anything unparseable.

    Args:
        text: The literal, possibly padded with whitespace.

    Returns:
        The parsed float.
    """
    try:
        return float(text.strip())
    except ValueError:
        return math.nan


def format_number(value: float) -> str:
    """Render a number in canonical decimal form.

    Whole numbers drop the fractional part (``6`` not ``6.0``);
    non-finite values render as ``Infinity``, ``-Infinity`` or ``NaN``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(float(value))
    if "e" in text:
        # Positional form, so the result can be matched again as a literal.
        text = format(Decimal(text), "f")
    return text


# ---------------------------------------------------------------------------
# Reduction passes
# ---------------------------------------------------------------------------


def infix_eval(text: str, pattern: re.Pattern[str]) -> str:
    """Reduce the leftmost infix operation matched by *pattern*.

    Args:
        text: The expression text.
        pattern: A compiled pattern with groups (left, operator, right).

    Returns:
        New text with the first match replaced by its result, or *text*
        itself when nothing matches.
    """

    def _reduce(match: re.Match[str]) -> str:
        left, op, right = match.groups()
        return format_number(INFIX_OPERATORS[op](float(left), float(right)))

    return pattern.sub(_reduce, text, count=1)


def _reduce_to_fixed_point(text: str, pattern: re.Pattern[str]) -> str:
    while True:
        reduced = infix_eval(text, pattern)
        if reduced == text:
            return text
        text = reduced


def reduce_high_precedence(text: str) -> str:
    """Reduce every ``*`` and ``/`` operation, left to right.

    >>> reduce_high_precedence("2 + 3 * 4")
    '2 + 12'
    """
    return _reduce_to_fixed_point(text, HIGH_PRECEDENCE_RE)


def reduce_low_precedence(text: str) -> str:
    """Reduce every ``+`` and ``-`` operation, left to right."""
    return _reduce_to_fixed_point(text, LOW_PRECEDENCE_RE)


def reduce_all_arithmetic(text: str) -> str:
    """Reduce all infix arithmetic, honouring operator precedence.

    >>> reduce_all_arithmetic("2 + 3 * 4")
    '14'
    """
    return reduce_low_precedence(reduce_high_precedence(text))
