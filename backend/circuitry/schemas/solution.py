from __future__ import annotations

from enum import Enum
from pydantic import BaseModel, Field

from circuitry.schemas.problem import (
    CircuitNode,
    PracticeComponent,
    TargetMetricDescriptor,
)
from circuitry.schemas.wire import MetricKey, WireMetrics

TOTALS_ROW = "totals"
SOURCE_ROW = "source"


class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class SolveIssue(BaseModel):
    code: str
    severity: IssueSeverity = IssueSeverity.ERROR
    message: str
    node_ids: list[str] = Field(default_factory=list)
    metric: MetricKey | None = None
    values: list[float] = Field(default_factory=list)
    suggestion: str | None = None


class Derivation(BaseModel):
    """One field filled in by the solver, in the order it was filled."""

    node_id: str
    metric: MetricKey
    value: float
    formula: str
    inputs: list[str] = Field(default_factory=list)
    pass_number: int = 0


class SolveResult(BaseModel):
    totals: WireMetrics
    source: WireMetrics
    components: dict[str, WireMetrics] = Field(default_factory=dict)
    nodes: dict[str, WireMetrics] = Field(default_factory=dict)
    equivalent_resistance: float | None = None
    derivations: list[Derivation] = Field(default_factory=list)
    passes: int = 0

    def row(self, row_id: str, source_id: str | None = None) -> WireMetrics | None:
        """Look up a metrics row the way worksheet cells address them."""
        if row_id == TOTALS_ROW:
            return self.totals
        if row_id == SOURCE_ROW or (source_id is not None and row_id == source_id):
            return self.source
        if row_id in self.components:
            return self.components[row_id]
        return self.nodes.get(row_id)

    def metric_for(
        self, target: TargetMetricDescriptor, source_id: str | None = None
    ) -> float | None:
        metrics = self.row(target.component_id, source_id)
        if metrics is None:
            return None
        return metrics.get(target.key)


class SolveAttempt(BaseModel):
    ok: bool
    data: SolveResult | None = None
    error: SolveIssue | None = None
    partial: SolveResult | None = None
    answer: float | None = None


# ─── Request Schemas ───


class SolveRequest(BaseModel):
    """Solve an ad-hoc network without going through the catalog."""

    source: PracticeComponent
    components: list[PracticeComponent] = Field(default_factory=list)
    network: CircuitNode
    totals_override: WireMetrics | None = None
    target_metric: TargetMetricDescriptor | None = None
