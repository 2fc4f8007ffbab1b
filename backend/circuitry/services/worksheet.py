"""Worksheet checker — compare learner-entered W.I.R.E. cells against the
solved table."""

from __future__ import annotations

import re

from circuitry.config import get_settings
from circuitry.schemas.problem import PracticeProblem
from circuitry.schemas.solution import SolveResult
from circuitry.schemas.worksheet import (
    CellStatus,
    WorksheetCellResult,
    WorksheetCheckResponse,
    WorksheetEntry,
)
from circuitry.solver.engine import try_solve_practice_problem
from circuitry.units import format_metric_value

NUMBER_PATTERN = re.compile(
    r"(?P<number>[-+]?\d*\.?\d+(?:[eE][-+]?\d+)?)\s*(?P<prefix>[pnuµμmkKMG]?)"
)

SI_PREFIXES = {
    "p": 1e-12,
    "n": 1e-9,
    "u": 1e-6,
    "µ": 1e-6,
    "μ": 1e-6,
    "m": 1e-3,
    "k": 1e3,
    "K": 1e3,
    "M": 1e6,
    "G": 1e9,
}

# Below this magnitude relative error is meaningless; compare absolutely.
NEAR_ZERO = 1e-4
NEAR_ZERO_ABS_TOLERANCE = 1e-3


def parse_entry_value(raw: float | str | None) -> float | None:
    """Read a number from a cell, ignoring units ("24 V", "0.04A").

    A metric prefix right after the number scales it ("40 mA", "1.5k").
    """
    if raw is None:
        return None
    if isinstance(raw, (int, float)):
        return float(raw)

    trimmed = raw.strip()
    if not trimmed:
        return None
    match = NUMBER_PATTERN.search(trimmed)
    if match is None:
        return None
    scale = SI_PREFIXES.get(match.group("prefix"), 1.0)
    return float(match.group("number")) * scale


def within_tolerance(expected: float, actual: float, tolerance: float = 0.01) -> bool:
    absolute_diff = abs(expected - actual)
    if abs(expected) < NEAR_ZERO:
        return absolute_diff <= NEAR_ZERO_ABS_TOLERANCE
    return absolute_diff / abs(expected) <= tolerance


def _check_cell(
    entry: WorksheetEntry,
    solution: SolveResult,
    source_id: str,
    tolerance: float,
) -> WorksheetCellResult:
    metrics = solution.row(entry.row, source_id)
    expected = metrics.get(entry.metric) if metrics is not None else None
    if expected is None:
        return WorksheetCellResult(
            row=entry.row,
            metric=entry.metric,
            status=CellStatus.UNKNOWN_CELL,
            message=f"{entry.row} has no {entry.metric.value} cell",
        )

    submitted = parse_entry_value(entry.value)
    if submitted is None:
        return WorksheetCellResult(
            row=entry.row,
            metric=entry.metric,
            status=CellStatus.UNPARSEABLE,
            expected=expected,
            message=f"Could not read a number from '{entry.value}'",
        )

    if within_tolerance(expected, submitted, tolerance):
        return WorksheetCellResult(
            row=entry.row,
            metric=entry.metric,
            status=CellStatus.CORRECT,
            submitted=submitted,
            expected=expected,
            message=f"{entry.row} {entry.metric.value} is correct",
        )

    return WorksheetCellResult(
        row=entry.row,
        metric=entry.metric,
        status=CellStatus.INCORRECT,
        submitted=submitted,
        expected=expected,
        message=(
            f"{entry.row} {entry.metric.value}: "
            f"{format_metric_value(submitted, entry.metric)} is not within "
            f"{tolerance:.0%} of the expected value"
        ),
    )


def check_worksheet(
    problem: PracticeProblem,
    entries: list[WorksheetEntry],
    tolerance: float | None = None,
) -> WorksheetCheckResponse:
    """Grade worksheet cells for one problem.

    Args:
        problem: The catalog problem being worked.
        entries: Learner-entered cells.
        tolerance: Relative tolerance. Defaults to settings.

    Returns:
        Per-cell results plus whether the target cell was answered correctly
        (None when it was not submitted).
    """
    tolerance = tolerance if tolerance is not None else get_settings().worksheet_tolerance

    attempt = try_solve_practice_problem(problem)
    if not attempt.ok:
        return WorksheetCheckResponse(
            problem_id=problem.id,
            total_count=len(entries),
            solve_error=attempt.error,
        )

    cells = [
        _check_cell(entry, attempt.data, problem.source.id, tolerance)
        for entry in entries
    ]
    correct = sum(1 for cell in cells if cell.status == CellStatus.CORRECT)

    target = problem.target_metric
    target_row = attempt.data.row(target.component_id, problem.source.id)
    target_correct = None
    for cell in cells:
        if target_row is None or cell.metric != target.key:
            continue
        if attempt.data.row(cell.row, problem.source.id) is target_row:
            target_correct = cell.status == CellStatus.CORRECT

    return WorksheetCheckResponse(
        problem_id=problem.id,
        cells=cells,
        correct_count=correct,
        total_count=len(cells),
        all_correct=bool(cells) and correct == len(cells),
        target_correct=target_correct,
    )
