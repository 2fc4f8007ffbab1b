from circuitry.schemas.wire import MetricKey, WireMetrics
from circuitry.schemas.problem import (
    CircuitNode,
    PracticeComponent,
    PracticeProblem,
    TargetMetricDescriptor,
)
from circuitry.schemas.solution import SolveAttempt, SolveIssue, SolveResult

__all__ = [
    "MetricKey",
    "WireMetrics",
    "CircuitNode",
    "PracticeComponent",
    "PracticeProblem",
    "TargetMetricDescriptor",
    "SolveAttempt",
    "SolveIssue",
    "SolveResult",
]
