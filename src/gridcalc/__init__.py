"""gridcalc -- a minimal spreadsheet formula engine."""

__version__ = "0.1.0"

from gridcalc.formulas import (  # noqa: E402
    Cell,
    CircularReferenceError,
    EmptyInputError,
    FormulaError,
    InvalidRangeError,
    InvalidReferenceError,
    UnknownFunctionError,
    evaluate,
)

__all__ = [
    "Cell",
    "CircularReferenceError",
    "EmptyInputError",
    "FormulaError",
    "InvalidRangeError",
    "InvalidReferenceError",
    "UnknownFunctionError",
    "__version__",
    "evaluate",
]
