"""Fixed-point formula evaluator.

A formula is evaluated by rewriting its text in cycles::

    expand ranges -> expand references -> apply functions -> reduce arithmetic

and repeating while a cycle changes the text.  A cell whose text is
itself a formula fragment is resolved the same way: its reference
expands to that fragment and the next cycle reduces it.  No dependency
graph is built.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable

from gridcalc.formulas.applier import apply_functions
from gridcalc.formulas.arithmetic import reduce_all_arithmetic
from gridcalc.formulas.cells import Cell, CellLike, cell_values
from gridcalc.formulas.errors import CircularReferenceError, InvalidReferenceError
from gridcalc.formulas.references import (
    expand_ranges,
    expand_references,
    find_references,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100

# Number of intermediate texts kept for CircularReferenceError messages.
_TRAIL_LENGTH = 4


def evaluate_cycle(text: str, cells: Iterable[CellLike]) -> str:
    """Run one full rewrite cycle over *text* and return the new text."""
    expanded = expand_references(expand_ranges(text), cells)
    return reduce_all_arithmetic(apply_functions(expanded))


def evaluate(
    formula: str,
    cells: Iterable[CellLike],
    *,
    max_iterations: int | None = None,
) -> str:
    """Evaluate formula text against a cell snapshot.

    Args:
        formula: Formula text without the leading ``=``, whitespace
            already stripped.
        cells: The cell snapshot, as :class:`Cell` objects or
            ``{"id": ..., "value": ...}`` mappings.  It is read, never
            modified.
        max_iterations: Cycle budget; defaults to
            ``DEFAULT_MAX_ITERATIONS``.

    Returns:
        The fully reduced text.

    Raises:
        InvalidReferenceError: If a cycle leaves the text unchanged while
            a reference token remains, or the result is empty and the
            formula referenced cells missing from the snapshot.
        CircularReferenceError: If the text keeps changing for
            *max_iterations* cycles.
        FormulaFunctionError: Propagated from function application.
    """
    budget = DEFAULT_MAX_ITERATIONS if max_iterations is None else max_iterations
    if budget < 1:
        raise ValueError(f"max_iterations must be at least 1, got {budget}")

    snapshot = tuple(
        cell if isinstance(cell, Cell) else Cell(id=str(cell["id"]), value=str(cell.get("value") or ""))
        for cell in cells
    )
    known = cell_values(snapshot)
    missing: list[str] = []
    trail: deque[str] = deque(maxlen=_TRAIL_LENGTH)

    text = formula
    for iteration in range(1, budget + 1):
        for ref in find_references(expand_ranges(text)):
            if ref not in known and ref not in missing:
                missing.append(ref)

        result = evaluate_cycle(text, snapshot)
        logger.debug("cycle %d: %r -> %r", iteration, text, result)

        if result == text:
            leftover = find_references(result)
            if leftover:
                raise InvalidReferenceError(list(dict.fromkeys(leftover)), result)
            if result == "" and missing:
                raise InvalidReferenceError(missing, result)
            return result

        trail.append(text)
        text = result

    trail.append(text)
    raise CircularReferenceError(budget, trail)
