"""Ohm's-law router — two-of-three calculator."""

from __future__ import annotations

from fastapi import APIRouter

from circuitry.schemas.ohms_law import OhmsLawRequest, OhmsLawResponse
from circuitry.services.ohms_law import calculate_ohms_law

router = APIRouter()


@router.post("", response_model=OhmsLawResponse)
async def ohms_law(request: OhmsLawRequest):
    """Derive the missing quantity and power from any two of V, I, R."""
    return calculate_ohms_law(request)
