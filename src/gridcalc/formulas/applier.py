"""Function-call application over formula text.

A call is ``name(args)`` where *args* is a comma-separated list of numeric
literals.  Only a call with no further ``(`` after it is applied, so
nested calls resolve from the innermost outward over repeated passes.
"""

from __future__ import annotations

import re
from typing import Any

from gridcalc.formulas.arithmetic import (
    LOW_PRECEDENCE_RE,
    format_number,
    infix_eval,
    parse_number,
    reduce_high_precedence,
)
from gridcalc.functions.registry import get_function

# One argument: empty, or a literal with at most a leading sign.  A piece
# like ``8-3`` is still arithmetic, so its call is not ready yet.
_ARGUMENT = r"\s*(?:-?[0-9.]+\s*)?"

FUNCTION_CALL_RE = re.compile(
    r"([a-z0-9]*)\((" + _ARGUMENT + r"(?:," + _ARGUMENT + r")*)\)(?!.*\()",
    re.IGNORECASE,
)


def to_number_list(args: str) -> list[float]:
    """Split a call's argument text into numbers.

    Blank argument text gives an empty list; pieces that are not numbers
    parse as NaN.
    """
    if args.strip() == "":
        return []
    return [parse_number(piece) for piece in args.split(",")]


def format_value(value: Any) -> str:
    """Render a function result as formula text.

    Lists render comma-joined, booleans as ``true``/``false`` and numbers
    in canonical decimal form.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(format_value(item) for item in value)
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def apply_function(name: str, args: str) -> str:
    """Call the function *name* on the argument text *args*.

    Raises:
        UnknownFunctionError: If *name* is not registered.
    """
    fn = get_function(name)
    return format_value(fn(to_number_list(args)))


def apply_functions(text: str) -> str:
    """Run one function-application pass over *text*.

    Multiplication and division are reduced first, then a single
    addition or subtraction, then the innermost function call (if any)
    is replaced by its rendered result.

    >>> apply_functions("sum(1, 2, 3)")
    '6'
    """
    reduced = infix_eval(reduce_high_precedence(text), LOW_PRECEDENCE_RE)
    return FUNCTION_CALL_RE.sub(
        lambda m: apply_function(m.group(1), m.group(2)), reduced, count=1
    )
