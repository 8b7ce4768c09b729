"""Spreadsheet function library and lookup."""

from gridcalc.functions.library import (
    SPREADSHEET_FUNCTIONS,
    average,
    char_range,
    is_even,
    median,
    number_range,
    random_between,
    sum_values,
)
from gridcalc.functions.registry import function_names, get_function

__all__ = [
    "SPREADSHEET_FUNCTIONS",
    "average",
    "char_range",
    "function_names",
    "get_function",
    "is_even",
    "median",
    "number_range",
    "random_between",
    "sum_values",
]
