"""Spreadsheet formula evaluation by textual rewriting.

Public API::

    from gridcalc.formulas import evaluate, apply_functions, reduce_all_arithmetic
"""

from gridcalc.formulas.errors import (
    CircularReferenceError,
    EmptyInputError,
    FormulaError,
    FormulaFunctionError,
    InvalidRangeError,
    InvalidReferenceError,
    UnknownFunctionError,
)
from gridcalc.formulas.arithmetic import (
    format_number,
    infix_eval,
    reduce_all_arithmetic,
    reduce_high_precedence,
)
from gridcalc.formulas.cells import Cell
from gridcalc.formulas.applier import apply_function, apply_functions
from gridcalc.formulas.references import (
    expand_range,
    expand_ranges,
    expand_references,
    find_references,
)
from gridcalc.formulas.evaluator import DEFAULT_MAX_ITERATIONS, evaluate, evaluate_cycle

__all__ = [
    "Cell",
    "CircularReferenceError",
    "DEFAULT_MAX_ITERATIONS",
    "EmptyInputError",
    "FormulaError",
    "FormulaFunctionError",
    "InvalidRangeError",
    "InvalidReferenceError",
    "UnknownFunctionError",
    "apply_function",
    "apply_functions",
    "evaluate",
    "evaluate_cycle",
    "expand_range",
    "expand_ranges",
    "expand_references",
    "find_references",
    "format_number",
    "infix_eval",
    "reduce_all_arithmetic",
    "reduce_high_precedence",
]
