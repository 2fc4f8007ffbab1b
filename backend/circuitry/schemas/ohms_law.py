from __future__ import annotations

from pydantic import BaseModel


class OhmsLawRequest(BaseModel):
    """Exactly two of the three must be provided."""

    voltage: float | None = None
    current: float | None = None
    resistance: float | None = None

    model_config = {"allow_inf_nan": False}


class OhmsLawResponse(BaseModel):
    voltage: float
    current: float
    resistance: float
    watts: float
