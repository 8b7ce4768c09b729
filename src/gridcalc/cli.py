"""Command-line interface for gridcalc."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from gridcalc import __version__


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _load_settings(config_dir: str, log_dir: str | None, max_iterations: int | None) -> dict[str, Any]:
    """Load ``gridcalc.yaml``, apply command-line overrides, configure logging."""
    from gridcalc.config import load_config
    from gridcalc.logging.events import configure_from

    try:
        config = load_config(Path(config_dir))
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    if log_dir is not None:
        config["log_dir"] = Path(log_dir)
    if max_iterations is not None:
        config["max_iterations"] = max_iterations
    configure_from(config)
    return config


def _parse_cells(items: tuple[str, ...]) -> dict[str, str]:
    cells: dict[str, str] = {}
    for item in items:
        if "=" not in item:
            raise click.ClickException(f"Invalid --cell format: {item!r}. Use ID=TEXT.")
        k, v = item.split("=", 1)
        cells[k.strip()] = v
    return cells


_common_options = [
    click.option("--config-dir", default=".", type=click.Path(file_okay=False), help="Directory holding gridcalc.yaml."),
    click.option("--log-dir", default=None, type=click.Path(file_okay=False), help="Write NDJSON events under this directory."),
    click.option("--max-iterations", default=None, type=click.IntRange(min=1), help="Evaluation cycle budget."),
]


def common_options(fn):
    for option in reversed(_common_options):
        fn = option(fn)
    return fn


@click.group()
@click.version_option(version=__version__, prog_name="gridcalc")
def main() -> None:
    """gridcalc -- evaluate spreadsheet formulas over an A1:J99 grid."""


# ---------------------------------------------------------------------------
# Eval
# ---------------------------------------------------------------------------


@main.command("eval")
@click.argument("formula")
@click.option("--cell", "cell_items", multiple=True, help="Cell text as ID=TEXT (repeatable).")
@click.option("--sheet", "sheet_file", default=None, type=click.Path(exists=True, dir_okay=False), help="YAML sheet to read cells from.")
@click.option("--json", "as_json", is_flag=True, help="Output result as JSON.")
@common_options
def eval_cmd(
    formula: str,
    cell_items: tuple[str, ...],
    sheet_file: str | None,
    as_json: bool,
    config_dir: str,
    log_dir: str | None,
    max_iterations: int | None,
) -> None:
    """Evaluate FORMULA (a leading '=' is optional) against the given cells."""
    from gridcalc.formulas.errors import FormulaError
    from gridcalc.formulas.evaluator import evaluate
    from gridcalc.logging.events import (
        EventLevel,
        EventType,
        emit,
        error_code_for,
        make_eval_event,
    )
    from gridcalc.sheet import Sheet

    config = _load_settings(config_dir, log_dir, max_iterations)

    try:
        sheet = Sheet.load(Path(sheet_file)) if sheet_file else Sheet()
        for cell_id, text in _parse_cells(cell_items).items():
            sheet.set(cell_id, text)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    body = "".join(formula.split())
    if body.startswith("="):
        body = body[1:]

    try:
        result = evaluate(body, sheet.snapshot(), max_iterations=config["max_iterations"])
    except FormulaError as exc:
        code = error_code_for(exc)
        emit(make_eval_event(EventType.eval_failed, EventLevel.error, str(exc), formula=body, error_code=code))
        if as_json:
            click.echo(json.dumps({"formula": body, "error": str(exc), "error_code": code}, indent=2))
            raise SystemExit(1)
        raise click.ClickException(str(exc)) from exc

    emit(make_eval_event(
        EventType.eval_completed, EventLevel.info, "Formula evaluated",
        formula=body, extra={"result": result},
    ))
    if as_json:
        click.echo(json.dumps({"formula": body, "result": result}, indent=2))
    else:
        click.echo(result)


# ---------------------------------------------------------------------------
# Sheet
# ---------------------------------------------------------------------------


@main.command("sheet")
@click.argument("sheet_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output display values as JSON.")
@common_options
def sheet_cmd(
    sheet_file: str,
    as_json: bool,
    config_dir: str,
    log_dir: str | None,
    max_iterations: int | None,
) -> None:
    """Evaluate every cell of SHEET_FILE and print its display value.

    Exits with status 2 if any cell fails to evaluate.
    """
    from gridcalc.sheet import ERROR_PREFIX, Sheet

    config = _load_settings(config_dir, log_dir, max_iterations)
    try:
        sheet = Sheet.load(Path(sheet_file), max_iterations=config["max_iterations"])
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    results = sheet.evaluate_all()
    if as_json:
        click.echo(json.dumps(results, indent=2))
    else:
        for addr, value in results.items():
            click.echo(f"{addr}\t{value}")

    if any(v.startswith(ERROR_PREFIX) for v in results.values()):
        raise SystemExit(2)


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------


@main.command("functions")
def functions_cmd() -> None:
    """List the available spreadsheet functions."""
    from gridcalc.functions.registry import function_names

    for name in function_names():
        click.echo(name)


if __name__ == "__main__":
    main()
