"""Cell range and cell reference expansion.

Grid coordinates are a column letter ``A``-``J`` followed by a row number
``1``-``99`` without a leading zero.  Letters match in either case.

- A range token ``A1:B2`` expands to the comma-joined references it
  covers, row by row: ``A1,B1,A2,B2``.
- A reference token ``A1`` expands to the raw text stored in that cell,
  or to empty text if the snapshot has no such cell.
"""

from __future__ import annotations

import re
from typing import Iterable

from gridcalc.formulas.cells import CellLike, cell_values
from gridcalc.functions.library import char_range, number_range

RANGE_RE = re.compile(r"([A-J])([1-9][0-9]?):([A-J])([1-9][0-9]?)", re.IGNORECASE)
REFERENCE_RE = re.compile(r"[A-J][1-9][0-9]?", re.IGNORECASE)


def expand_range(start_col: str, start_row: int, end_col: str, end_row: int) -> list[str]:
    """List the cell ids covered by a rectangular range, row-major.

    Rows and columns are taken in the order written: a range whose end
    precedes its start covers nothing along that axis.

    Args:
        start_col: First column letter.
        start_row: First row number.
        end_col: Last column letter.
        end_row: Last row number.

    Returns:
        Uppercase cell ids, e.g. ``["A1", "B1", "A2", "B2"]`` for ``A1:B2``.
    """
    letters = char_range(start_col.upper(), end_col.upper())
    return [
        f"{letter}{row}"
        for row in number_range(start_row, end_row)
        for letter in letters
    ]


def expand_ranges(text: str) -> str:
    """Replace every range token in *text* with its comma-joined references."""

    def _expand(match: re.Match[str]) -> str:
        start_col, start_row, end_col, end_row = match.groups()
        return ",".join(expand_range(start_col, int(start_row), end_col, int(end_row)))

    return RANGE_RE.sub(_expand, text)


def expand_references(text: str, cells: Iterable[CellLike]) -> str:
    """Replace every reference token in *text* with the referenced cell's text.

    Args:
        text: Formula text, normally already range-expanded.
        cells: The cell snapshot to read from.

    Returns:
        The substituted text.  References to cells absent from the
        snapshot become empty text.
    """
    values = cell_values(cells)
    return REFERENCE_RE.sub(lambda m: values.get(m.group(0).upper(), ""), text)


def find_references(text: str) -> list[str]:
    """Return the reference tokens in *text*, uppercased, in order of appearance."""
    return [token.upper() for token in REFERENCE_RE.findall(text)]
