"""Solver router — stateless network solving."""

from __future__ import annotations

from fastapi import APIRouter

from circuitry.schemas.solution import SolveAttempt, SolveRequest
from circuitry.solver.engine import try_solve_network

router = APIRouter()


@router.post("/solve", response_model=SolveAttempt)
async def solve_inline(request: SolveRequest):
    """Solve an ad-hoc network. Solver failures come back as ok=false."""
    return try_solve_network(
        request.components,
        request.source,
        request.network,
        request.totals_override,
        target=request.target_metric,
        label="inline",
    )
