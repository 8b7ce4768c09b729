"""Tests for function-call application over formula text."""

from __future__ import annotations

import math

import pytest

from gridcalc.formulas import (
    EmptyInputError,
    InvalidRangeError,
    UnknownFunctionError,
    apply_function,
    apply_functions,
)
from gridcalc.formulas.applier import FUNCTION_CALL_RE, format_value, to_number_list


class TestHelpers:
    def test_to_number_list(self) -> None:
        assert to_number_list("1, 2,3") == [1, 2, 3]

    def test_to_number_list_blank(self) -> None:
        assert to_number_list("") == []
        assert to_number_list("  ") == []

    def test_to_number_list_bad_piece_is_nan(self) -> None:
        values = to_number_list("5,")
        assert values[0] == 5
        assert math.isnan(values[1])

    def test_format_value(self) -> None:
        assert format_value(6.0) == "6"
        assert format_value(True) == "true"
        assert format_value(False) == "false"
        assert format_value([1.0, 2.5, 3.0]) == "1,2.5,3"
        assert format_value([]) == ""

    def test_apply_function(self) -> None:
        assert apply_function("Average", "2, 4") == "3"


class TestApplyFunctions:
    def test_sum(self) -> None:
        assert apply_functions("sum(1, 2, 3)") == "6"

    def test_sum_no_args(self) -> None:
        assert apply_functions("sum()") == "0"

    def test_case_insensitive_name(self) -> None:
        assert apply_functions("SUM(1,2)") == "3"

    def test_unknown_function(self) -> None:
        with pytest.raises(UnknownFunctionError) as exc_info:
            apply_functions("unknown(1,2)")
        assert exc_info.value.func_name == "unknown"

    def test_sequence_result(self) -> None:
        assert apply_functions("range(1,3)") == "1,2,3"
        assert apply_functions("increment(1,2)") == "2,3"

    def test_boolean_result(self) -> None:
        assert apply_functions("someeven(1,3)") == "false"
        assert apply_functions("has2(1,2)") == "true"

    def test_fractional_args(self) -> None:
        assert apply_functions("sum(1.5, 2.25)") == "3.75"

    def test_bare_parentheses_pass_through(self) -> None:
        assert apply_functions("(5)") == "5"

    def test_arithmetic_inside_arguments(self) -> None:
        assert apply_functions("sum(1+2, 3)") == "6"
        assert apply_functions("sum(2*3, 1)") == "7"

    def test_negative_argument(self) -> None:
        assert apply_functions("sum(-2, 5)") == "3"

    def test_innermost_call_first(self) -> None:
        once = apply_functions("sum(1, average(2, 4))")
        assert once == "sum(1, 3)"
        assert apply_functions(once) == "4"

    def test_rightmost_call_first(self) -> None:
        assert apply_functions("sum(1,2) * sum(3,4)") == "sum(1,2) * 7"

    def test_single_low_precedence_step(self) -> None:
        """Without a call, only one addition/subtraction is reduced."""
        assert apply_functions("1 + 2 + 3") == "3 + 3"

    def test_no_call_unchanged(self) -> None:
        assert apply_functions("hello") == "hello"

    def test_errors_propagate(self) -> None:
        with pytest.raises(EmptyInputError):
            apply_functions("median()")
        with pytest.raises(InvalidRangeError):
            apply_functions("random(1)")

    def test_chained_arithmetic_argument_waits(self) -> None:
        """An argument still holding arithmetic is not a call yet."""
        assert apply_functions("sum(10-2-3)") == "sum(8-3)"
        assert apply_functions("(1+2-3)") == "(3-3)"

    def test_empty_argument_piece(self) -> None:
        with pytest.raises(InvalidRangeError):
            apply_functions("random(,5)")


class TestCallPattern:
    @pytest.mark.parametrize("text", ["sum()", "sum(1, -2)", "random(,5)", "(3)", "f(1.5,2.)"])
    def test_ready_calls(self, text: str) -> None:
        assert FUNCTION_CALL_RE.search(text)

    @pytest.mark.parametrize("text", ["sum(8-3)", "sum(2,4-1)", "(A1)", "sum(1)+x(2-1)"])
    def test_not_ready(self, text: str) -> None:
        assert FUNCTION_CALL_RE.search(text) is None
