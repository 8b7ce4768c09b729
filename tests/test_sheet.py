"""Tests for the A1:J99 grid and its edit handling."""

from __future__ import annotations

from pathlib import Path

import pytest

from gridcalc.formulas.errors import CircularReferenceError, InvalidReferenceError
from gridcalc.sheet import (
    ERROR_PREFIX,
    Sheet,
    cell_ids,
    is_valid_cell_id,
    normalize_cell_id,
    references_itself,
    strip_formula,
)


# ---------------------------------------------------------------------------
# Grid addressing
# ---------------------------------------------------------------------------


class TestCellIds:
    def test_row_major_order(self) -> None:
        ids = list(cell_ids())
        assert len(ids) == 990
        assert ids[:3] == ["A1", "B1", "C1"]
        assert ids[10] == "A2"
        assert ids[-1] == "J99"

    @pytest.mark.parametrize("cell_id", ["A1", "j99", "E50", "b2"])
    def test_valid(self, cell_id: str) -> None:
        assert is_valid_cell_id(cell_id)

    @pytest.mark.parametrize("cell_id", ["K1", "A100", "A0", "1A", "", "AA1"])
    def test_invalid(self, cell_id: str) -> None:
        assert not is_valid_cell_id(cell_id)

    def test_normalize(self) -> None:
        assert normalize_cell_id(" b2 ") == "B2"

    def test_normalize_off_grid(self) -> None:
        with pytest.raises(ValueError, match="Invalid cell address"):
            normalize_cell_id("Z9")


class TestFormulaText:
    def test_strip_formula(self) -> None:
        assert strip_formula(" = A1 + 1 ") == "A1+1"

    def test_literal_is_not_formula(self) -> None:
        assert strip_formula("5") is None
        assert strip_formula("a = b") is None

    def test_references_itself_through_range(self) -> None:
        assert references_itself("B2", "sum(A1:B2)")
        assert references_itself("a1", "A1+1")

    def test_longer_id_is_not_self(self) -> None:
        assert not references_itself("A1", "A10")


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


class TestStorage:
    def test_values_stored_as_text(self) -> None:
        sheet = Sheet({"a1": 5, "B1": "=A1"})
        assert sheet.get("A1") == "5"
        assert sheet.get("b1") == "=A1"
        assert "A1" in sheet
        assert len(sheet) == 2

    def test_empty_clears(self) -> None:
        sheet = Sheet({"A1": "5"})
        sheet.set("A1", "")
        assert "A1" not in sheet
        sheet.set("B1", "x")
        sheet.set("B1", None)
        assert len(sheet) == 0

    def test_off_grid_rejected(self) -> None:
        with pytest.raises(ValueError):
            Sheet({"K1": "1"})

    def test_items_in_grid_order(self) -> None:
        sheet = Sheet({"A2": "3", "B1": "2", "A1": "1"})
        assert [addr for addr, _ in sheet.items()] == ["A1", "B1", "A2"]

    def test_snapshot_covers_grid(self) -> None:
        sheet = Sheet({"A1": "1", "B1": " = A1 + 1"})
        snapshot = sheet.snapshot()
        assert len(snapshot) == 990
        assert snapshot[0].id == "A1"
        assert snapshot[0].value == "1"
        assert snapshot[1].value == "(A1+1)"
        assert snapshot[2].value == ""


# ---------------------------------------------------------------------------
# Display values
# ---------------------------------------------------------------------------


class TestDisplay:
    def test_literal_as_typed(self) -> None:
        assert Sheet({"A1": " hello "}).display("A1") == " hello "

    def test_empty_cell(self) -> None:
        assert Sheet().display("C3") == ""

    def test_formula_chain_keeps_precedence(self) -> None:
        sheet = Sheet({"A1": "2", "B1": "=A1+1", "C1": "=B1*2"})
        assert sheet.display("B1") == "3"
        assert sheet.display("C1") == "6"

    def test_formula_chain_with_repeated_subtraction(self) -> None:
        sheet = Sheet({"A1": "10", "B1": "2", "C1": "3", "D1": "=A1-B1-C1", "E1": "=D1*2"})
        assert sheet.display("D1") == "5"
        assert sheet.display("E1") == "10"

    def test_range_function(self) -> None:
        sheet = Sheet({"A1": "1", "B1": "2", "A2": "3", "B2": "4", "C1": "=sum(A1:B2)"})
        assert sheet.display("C1") == "10"

    def test_reference_to_empty_cell(self) -> None:
        assert Sheet({"A1": "=A10"}).display("A1") == ""

    def test_self_reference(self) -> None:
        with pytest.raises(InvalidReferenceError):
            Sheet({"C1": "=C1"}).display("C1")

    def test_mutual_reference(self) -> None:
        sheet = Sheet({"A1": "=B1", "B1": "=A1"}, max_iterations=3)
        with pytest.raises(CircularReferenceError) as exc_info:
            sheet.display("A1")
        assert exc_info.value.iterations == 3


# ---------------------------------------------------------------------------
# Edits
# ---------------------------------------------------------------------------


class TestUpdate:
    def test_literal(self) -> None:
        sheet = Sheet()
        result = sheet.update("a1", " 7 ")
        assert result.cell_id == "A1"
        assert result.display == " 7 "
        assert result.ok
        assert not result.evaluated
        assert sheet.get("A1") == " 7 "

    def test_formula(self) -> None:
        sheet = Sheet({"A1": "2"})
        result = sheet.update("B1", "= A1 * 3")
        assert result.evaluated
        assert result.display == "6"
        assert sheet.get("B1") == "= A1 * 3"

    def test_later_edit_recomputes(self) -> None:
        sheet = Sheet({"A1": "2", "B1": "=A1*3"})
        sheet.update("A1", "5")
        assert sheet.display("B1") == "15"

    def test_clear(self) -> None:
        sheet = Sheet({"A1": "2"})
        result = sheet.update("A1", "")
        assert result.display == ""
        assert "A1" not in sheet

    def test_self_reference_rejected(self) -> None:
        sheet = Sheet({"A1": "1", "B1": "2", "A2": "3"})
        result = sheet.update("B2", "=sum(A1:B2)")
        assert not result.ok
        assert not result.evaluated
        assert result.error_code == "self_reference"
        assert result.display == "=sum(A1:B2)"
        assert sheet.get("B2") == "=sum(A1:B2)"

    def test_error_recorded_not_raised(self) -> None:
        sheet = Sheet()
        result = sheet.update("A1", "=foo(1)")
        assert result.evaluated
        assert result.error_code == "unknown_function"
        assert "Unknown function: foo" in result.error
        assert result.display == "=foo(1)"

    def test_random_with_empty_bound_recorded(self) -> None:
        result = Sheet({"B1": "5"}).update("C1", "=random(A1,B1)")
        assert not result.ok
        assert result.error_code == "invalid_range"
        assert result.display == "=random(A1,B1)"


# ---------------------------------------------------------------------------
# Whole-sheet evaluation and loading
# ---------------------------------------------------------------------------


class TestEvaluateAll:
    def test_values_and_errors(self) -> None:
        sheet = Sheet({"A1": "1", "B1": "=A1+1", "C1": "=C1", "A2": "text"})
        assert sheet.evaluate_all() == {
            "A1": "1",
            "B1": "2",
            "C1": f"{ERROR_PREFIX}Invalid cell reference: C1",
            "A2": "text",
        }

    def test_empty_sheet(self) -> None:
        assert Sheet().evaluate_all() == {}


class TestLoad:
    def test_cells_key(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.yaml"
        path.write_text('cells:\n  A1: 5\n  B1: 3\n  C1: "=A1 + B1"\n')
        sheet = Sheet.load(path)
        assert sheet.get("A1") == "5"
        assert sheet.display("C1") == "8"

    def test_top_level_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.yaml"
        path.write_text("a1: 1\nb1: '=a1*4'\n")
        assert Sheet.load(path).display("B1") == "4"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.yaml"
        path.write_text("")
        assert len(Sheet.load(path)) == 0

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            Sheet.load(path)

    def test_off_grid_id(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.yaml"
        path.write_text("Z1: 1\n")
        with pytest.raises(ValueError, match="Invalid cell address"):
            Sheet.load(path)

    def test_max_iterations_passed_through(self, tmp_path: Path) -> None:
        path = tmp_path / "sheet.yaml"
        path.write_text("A1: '=B1'\nB1: '=A1'\n")
        sheet = Sheet.load(path, max_iterations=2)
        assert sheet.evaluate_all()["A1"].startswith(f"{ERROR_PREFIX}Circular cell reference")
