"""Error types for formula evaluation."""

from __future__ import annotations

from typing import Sequence


class FormulaError(Exception):
    """Base class for all formula-related errors."""


class FormulaFunctionError(FormulaError):
    """A function call that could not be carried out.

    Attributes:
        func_name: The function that caused the error, as written.
    """

    def __init__(self, func_name: str, message: str | None = None) -> None:
        self.func_name = func_name
        msg = message or f"Function failed: {func_name!r}"
        super().__init__(msg)


class UnknownFunctionError(FormulaFunctionError):
    """Function-call syntax names a function that is not registered."""

    def __init__(self, func_name: str) -> None:
        super().__init__(func_name, f"Unknown function: {func_name}")


class EmptyInputError(FormulaFunctionError):
    """An aggregate that needs at least one value was given none."""

    def __init__(self, func_name: str) -> None:
        super().__init__(
            func_name, f"Cannot calculate {func_name} of an empty list"
        )


class InvalidRangeError(FormulaFunctionError):
    """A function expecting a two-number range got some other arity.

    Attributes:
        args_received: The arguments that were passed.
    """

    def __init__(self, func_name: str, args: Sequence[float]) -> None:
        self.args_received = list(args)
        super().__init__(
            func_name,
            f"Invalid range for {func_name}: expected 2 arguments, "
            f"got {len(self.args_received)}",
        )


class InvalidReferenceError(FormulaError):
    """Evaluation settled while still holding unresolved cell references.

    Attributes:
        refs: The reference tokens (uppercased) left in the text, or the
            ids that were missing from the cell snapshot.
        text: The text evaluation settled on.
    """

    def __init__(self, refs: Sequence[str], text: str = "") -> None:
        self.refs = list(refs)
        self.text = text
        msg = "Invalid cell reference"
        if self.refs:
            msg += f": {', '.join(self.refs)}"
        super().__init__(msg)


class CircularReferenceError(FormulaError):
    """Evaluation did not converge within the iteration budget.

    Attributes:
        iterations: Number of cycles that were run.
        trail: The last few intermediate texts, oldest first.
    """

    def __init__(self, iterations: int, trail: Sequence[str] = ()) -> None:
        self.iterations = iterations
        self.trail = list(trail)
        msg = f"Circular cell reference: no convergence after {iterations} iterations"
        if self.trail:
            msg += f" ({' -> '.join(repr(t) for t in self.trail)})"
        super().__init__(msg)
