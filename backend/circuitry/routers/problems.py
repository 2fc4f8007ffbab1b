"""Problems router — catalog lookup, solving and worksheet checking."""

from __future__ import annotations

import random

from fastapi import APIRouter, Depends, HTTPException, Query, status

from circuitry.schemas.problem import (
    PracticeDifficulty,
    PracticeProblem,
    PracticeTopology,
    ProblemSummary,
)
from circuitry.schemas.solution import SolveAttempt
from circuitry.schemas.worksheet import WorksheetCheckRequest, WorksheetCheckResponse
from circuitry.services.catalog import ProblemCatalog, get_catalog
from circuitry.services.worksheet import check_worksheet
from circuitry.solver.engine import try_solve_practice_problem

router = APIRouter()


def _get_catalog() -> ProblemCatalog:
    return get_catalog()


def get_rng() -> random.Random:
    return random.Random()


@router.get("/", response_model=list[ProblemSummary])
async def list_problems(
    topology: PracticeTopology | None = Query(None),
    difficulty: PracticeDifficulty | None = Query(None),
    catalog: ProblemCatalog = Depends(_get_catalog),
):
    """List practice problems, optionally filtered."""
    return catalog.list_problems(topology=topology, difficulty=difficulty)


@router.get("/random", response_model=PracticeProblem)
async def random_problem(
    topology: PracticeTopology | None = Query(None),
    catalog: ProblemCatalog = Depends(_get_catalog),
    rng: random.Random = Depends(get_rng),
):
    """Pick a random practice problem."""
    problem = catalog.random_problem(topology=topology, rng=rng)
    if problem is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Problem catalog is empty",
        )
    return problem


@router.get("/presets/{preset}", response_model=PracticeProblem)
async def problem_by_preset(
    preset: str,
    catalog: ProblemCatalog = Depends(_get_catalog),
):
    """Look up the problem linked to a builder preset."""
    problem = catalog.find_by_preset(preset)
    if problem is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No practice problem for preset {preset}",
        )
    return problem


@router.get("/{problem_id}", response_model=PracticeProblem)
async def get_problem(
    problem_id: str,
    catalog: ProblemCatalog = Depends(_get_catalog),
):
    """Get a practice problem definition."""
    return catalog.get(problem_id)


@router.post("/{problem_id}/solve", response_model=SolveAttempt)
async def solve_problem(
    problem_id: str,
    catalog: ProblemCatalog = Depends(_get_catalog),
):
    """Solve the full W.I.R.E. table of a practice problem."""
    return try_solve_practice_problem(catalog.get(problem_id))


@router.post("/{problem_id}/check", response_model=WorksheetCheckResponse)
async def check_problem_worksheet(
    problem_id: str,
    request: WorksheetCheckRequest,
    catalog: ProblemCatalog = Depends(_get_catalog),
):
    """Grade learner-entered worksheet cells."""
    return check_worksheet(
        catalog.get(problem_id),
        request.entries,
        tolerance=request.tolerance,
    )
