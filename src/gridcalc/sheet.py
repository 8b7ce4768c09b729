"""The fixed A1:J99 grid that feeds cell snapshots to the formula evaluator.

A :class:`Sheet` stores the raw text typed into each cell.  Text whose
whitespace-stripped form starts with ``=`` is a formula; everything else
is a literal shown as typed.  Formulas are evaluated on demand against a
fresh snapshot of the whole grid, so every display value is a full
recomputation.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml
from pydantic import BaseModel

from gridcalc.formulas.cells import Cell
from gridcalc.formulas.errors import FormulaError, InvalidReferenceError
from gridcalc.formulas.evaluator import evaluate
from gridcalc.formulas.references import expand_ranges, find_references
from gridcalc.functions.library import char_range, number_range
from gridcalc.logging.events import (
    SELF_REFERENCE,
    EventLevel,
    EventType,
    emit,
    emit_info,
    emit_warning,
    error_code_for,
    make_eval_event,
)

COLUMNS: list[str] = char_range("A", "J")
ROWS: list[int] = number_range(1, 99)

_CELL_ID_RE = re.compile(r"^[A-J][1-9][0-9]?$")
_WHITESPACE_RE = re.compile(r"\s")

ERROR_PREFIX = "#ERROR: "


def cell_ids() -> Iterator[str]:
    """Yield every cell id of the grid, row-major: A1, B1, ..., J1, A2, ..., J99."""
    for row in ROWS:
        for col in COLUMNS:
            yield f"{col}{row}"


def is_valid_cell_id(cell_id: str) -> bool:
    """True for ids like ``A1`` or ``j99`` (letters in either case)."""
    return bool(_CELL_ID_RE.match(cell_id.upper()))


def normalize_cell_id(cell_id: str) -> str:
    """Uppercase and validate a cell id.

    Raises:
        ValueError: If *cell_id* is not on the grid.
    """
    addr = str(cell_id).strip().upper()
    if not _CELL_ID_RE.match(addr):
        raise ValueError(f"Invalid cell address: {cell_id!r}")
    return addr


def strip_formula(text: str) -> str | None:
    """Return the formula body of *text*, or None if it is not a formula.

    All whitespace is removed before checking for the leading ``=``.
    """
    stripped = _WHITESPACE_RE.sub("", text)
    if stripped.startswith("="):
        return stripped[1:]
    return None


def references_itself(cell_id: str, formula: str) -> bool:
    """True if *formula*, once ranges are expanded, mentions *cell_id*."""
    return cell_id.upper() in find_references(expand_ranges(formula))


class UpdateResult(BaseModel):
    """Outcome of a single cell edit."""

    cell_id: str
    text: str
    display: str
    evaluated: bool = False
    error: str | None = None
    error_code: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Sheet:
    """In-memory grid of raw cell text.

    Parameters
    ----------
    cells : Mapping[str, Any] | None
        Initial cell text keyed by id.  Values are converted with ``str``;
        ``None`` clears the cell.
    max_iterations : int | None
        Cycle budget handed to the evaluator.
    """

    def __init__(
        self,
        cells: Mapping[str, Any] | None = None,
        *,
        max_iterations: int | None = None,
    ) -> None:
        self._cells: dict[str, str] = {}
        self.max_iterations = max_iterations
        for cell_id, value in (cells or {}).items():
            self.set(cell_id, value)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: Path, *, max_iterations: int | None = None) -> "Sheet":
        """Load a sheet from a YAML file.

        The file is a mapping of cell id to text, either at top level or
        under a ``cells:`` key::

            cells:
              A1: 5
              B1: 3
              C1: "=A1 + B1"

        Raises:
            ValueError: If the file is not a mapping or names an id off the grid.
        """
        path = Path(path)
        data = yaml.safe_load(path.read_text()) or {}
        if isinstance(data, dict) and isinstance(data.get("cells"), dict):
            data = data["cells"]
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping of cell id to text")
        sheet = cls(data, max_iterations=max_iterations)
        emit_info(
            EventType.sheet_loaded,
            f"Loaded {len(sheet)} cells",
            {"path": str(path), "cell_count": len(sheet)},
        )
        return sheet

    # ------------------------------------------------------------------
    # Cell storage
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, cell_id: object) -> bool:
        return isinstance(cell_id, str) and cell_id.upper() in self._cells

    def get(self, cell_id: str) -> str:
        """Return the raw text of a cell ("" when empty)."""
        return self._cells.get(normalize_cell_id(cell_id), "")

    def set(self, cell_id: str, value: Any) -> None:
        """Store raw text in a cell; empty text or None clears it."""
        addr = normalize_cell_id(cell_id)
        text = "" if value is None else str(value)
        if text == "":
            self._cells.pop(addr, None)
        else:
            self._cells[addr] = text

    def items(self) -> list[tuple[str, str]]:
        """Non-empty cells in grid order."""
        return [(addr, self._cells[addr]) for addr in cell_ids() if addr in self._cells]

    def snapshot(self) -> tuple[Cell, ...]:
        """Immutable view of every grid cell, row-major.

        A formula cell contributes its body in parentheses, so a reference
        to it reduces as a unit inside the referencing formula.
        """
        cells = []
        for addr in cell_ids():
            text = self._cells.get(addr, "")
            formula = strip_formula(text)
            cells.append(Cell(id=addr, value=text if formula is None else f"({formula})"))
        return tuple(cells)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def display(self, cell_id: str) -> str:
        """Return what a cell shows: its literal text or its formula's value.

        Raises:
            InvalidReferenceError: If the formula references its own cell.
            FormulaError: Propagated from evaluation.
        """
        addr = normalize_cell_id(cell_id)
        text = self._cells.get(addr, "")
        formula = strip_formula(text)
        if formula is None:
            return text
        if references_itself(addr, formula):
            raise InvalidReferenceError([addr], formula)
        return evaluate(formula, self.snapshot(), max_iterations=self.max_iterations)

    def update(self, cell_id: str, raw: str) -> UpdateResult:
        """Store an edit and compute the cell's new display value.

        Evaluation errors do not propagate: they are recorded on the result
        (and logged), and the cell keeps the text as typed.
        """
        addr = normalize_cell_id(cell_id)
        self.set(addr, raw)
        formula = strip_formula(raw)
        if formula is None:
            emit_info(EventType.cell_updated, "Literal stored", {"cell_id": addr})
            return UpdateResult(cell_id=addr, text=raw, display=raw)

        if references_itself(addr, formula):
            emit_warning(
                EventType.cell_rejected,
                "Formula references its own cell",
                {"formula": formula, "cell_id": addr},
                error_code=SELF_REFERENCE,
            )
            return UpdateResult(
                cell_id=addr,
                text=raw,
                display=raw,
                error=f"Formula in {addr} references itself",
                error_code=SELF_REFERENCE,
            )

        try:
            value = evaluate(formula, self.snapshot(), max_iterations=self.max_iterations)
        except FormulaError as exc:
            code = error_code_for(exc)
            emit(make_eval_event(
                EventType.eval_failed,
                EventLevel.error,
                str(exc),
                formula=formula,
                cell_id=addr,
                error_code=code,
            ))
            return UpdateResult(
                cell_id=addr, text=raw, display=raw, evaluated=True,
                error=str(exc), error_code=code,
            )

        emit(make_eval_event(
            EventType.eval_completed,
            EventLevel.info,
            "Formula evaluated",
            formula=formula,
            cell_id=addr,
            extra={"result": value},
        ))
        return UpdateResult(cell_id=addr, text=raw, display=value, evaluated=True)

    def evaluate_all(self) -> dict[str, str]:
        """Display value of every non-empty cell, in grid order.

        Cells whose formula fails show ``#ERROR: <message>``.
        """
        results: dict[str, str] = {}
        failures = 0
        for addr, text in self.items():
            try:
                results[addr] = self.display(addr)
            except FormulaError as exc:
                failures += 1
                results[addr] = f"{ERROR_PREFIX}{exc}"
                emit(make_eval_event(
                    EventType.eval_failed,
                    EventLevel.error,
                    str(exc),
                    formula=text,
                    cell_id=addr,
                    error_code=error_code_for(exc),
                ))
        emit_info(
            EventType.sheet_evaluated,
            f"Evaluated {len(results)} cells",
            {"cell_count": len(results), "error_count": failures},
        )
        return results
