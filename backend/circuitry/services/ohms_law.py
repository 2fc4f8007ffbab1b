"""Ohm's-law calculator — any two of voltage, current, resistance."""

from __future__ import annotations

from fastapi import HTTPException, status

from circuitry.schemas.ohms_law import OhmsLawRequest, OhmsLawResponse
from circuitry.schemas.wire import WireMetrics
from circuitry.solver.errors import SolverError
from circuitry.solver.identities import solve_metrics


def calculate_ohms_law(request: OhmsLawRequest) -> OhmsLawResponse:
    provided = [
        value
        for value in (request.voltage, request.current, request.resistance)
        if value is not None
    ]
    if len(provided) != 2:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide exactly two of voltage, current, resistance",
        )

    try:
        metrics = solve_metrics(
            WireMetrics(
                voltage=request.voltage,
                current=request.current,
                resistance=request.resistance,
            )
        )
    except SolverError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.message,
        )

    return OhmsLawResponse(
        voltage=metrics.voltage,
        current=metrics.current,
        resistance=metrics.resistance,
        watts=metrics.watts,
    )
