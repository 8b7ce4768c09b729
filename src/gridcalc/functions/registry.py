"""Case-insensitive lookup into the spreadsheet function table."""

from __future__ import annotations

from typing import Any, Callable

from gridcalc.formulas.errors import UnknownFunctionError
from gridcalc.functions.library import SPREADSHEET_FUNCTIONS


def get_function(name: str) -> Callable[[list[float]], Any]:
    """Look up a registered function.

    Args:
        name: The function name as written in the formula.

    Returns:
        The callable.

    Raises:
        UnknownFunctionError: If no function is registered under *name*.
            The error keeps the name in its original case.
    """
    key = name.lower()
    if key not in SPREADSHEET_FUNCTIONS:
        raise UnknownFunctionError(name)
    return SPREADSHEET_FUNCTIONS[key]


def function_names() -> list[str]:
    """Return the registered function names, sorted, without the identity entry."""
    return sorted(name for name in SPREADSHEET_FUNCTIONS if name)
