from __future__ import annotations

from enum import Enum
from pydantic import BaseModel, Field

from circuitry.schemas.solution import SolveIssue
from circuitry.schemas.wire import MetricKey


class CellStatus(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    UNPARSEABLE = "unparseable"
    UNKNOWN_CELL = "unknown_cell"


class WorksheetEntry(BaseModel):
    row: str  # component id, source id, "source" or "totals"
    metric: MetricKey
    value: float | str


class WorksheetCheckRequest(BaseModel):
    entries: list[WorksheetEntry] = Field(default_factory=list)
    tolerance: float | None = Field(
        default=None,
        gt=0,
        le=1,
        description="Relative tolerance; defaults to the configured value",
    )


class WorksheetCellResult(BaseModel):
    row: str
    metric: MetricKey
    status: CellStatus
    submitted: float | None = None
    expected: float | None = None
    message: str


class WorksheetCheckResponse(BaseModel):
    problem_id: str
    cells: list[WorksheetCellResult] = Field(default_factory=list)
    correct_count: int = 0
    total_count: int = 0
    all_correct: bool = False
    target_correct: bool | None = None
    solve_error: SolveIssue | None = None
