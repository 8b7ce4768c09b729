"""Cell snapshot model."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Union

from pydantic import BaseModel, ConfigDict


class Cell(BaseModel):
    """One grid cell as seen by the evaluator: its id and raw stored text."""

    model_config = ConfigDict(frozen=True)

    id: str
    value: str = ""


CellLike = Union[Cell, Mapping[str, Any]]


def cell_values(cells: Iterable[CellLike]) -> dict[str, str]:
    """Index a cell snapshot by uppercased id.

    Accepts :class:`Cell` instances or ``{"id": ..., "value": ...}``
    mappings.  When an id appears more than once the first entry wins;
    a missing or ``None`` value reads as empty text.
    """
    values: dict[str, str] = {}
    for cell in cells:
        if isinstance(cell, Cell):
            cell_id, value = cell.id, cell.value
        else:
            cell_id, value = cell["id"], cell.get("value")
        values.setdefault(str(cell_id).upper(), "" if value is None else str(value))
    return values
