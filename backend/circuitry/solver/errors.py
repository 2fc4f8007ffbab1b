"""Solver error kinds.

Each kind carries a stable ``code`` and converts to a ``SolveIssue`` so
callers can show a specific message instead of a generic failure.
"""

from __future__ import annotations

from circuitry.schemas.solution import IssueSeverity, SolveIssue, SolveResult
from circuitry.schemas.wire import MetricKey
from circuitry.units import format_metric_value


class SolverError(Exception):
    code = "E_SOLVER"
    suggestion: str | None = None
    partial: SolveResult | None = None

    def __init__(
        self,
        message: str,
        node_ids: list[str] | None = None,
        metric: MetricKey | None = None,
        values: list[float] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.node_ids = node_ids or []
        self.metric = metric
        self.values = values or []

    def to_issue(self) -> SolveIssue:
        return SolveIssue(
            code=self.code,
            severity=IssueSeverity.ERROR,
            message=self.message,
            node_ids=list(self.node_ids),
            metric=self.metric,
            values=list(self.values),
            suggestion=self.suggestion,
        )


class DivisionByZero(SolverError):
    code = "E_DIVISION_BY_ZERO"
    suggestion = "Check for zero-valued resistance, current or voltage givens"

    def __init__(self, node_id: str, metric: MetricKey, formula: str):
        super().__init__(
            f"{node_id}: cannot derive {metric.value} with {formula}, "
            f"the denominator is zero",
            node_ids=[node_id],
            metric=metric,
        )
        self.formula = formula


class ConflictingGivens(SolverError):
    code = "E_CONFLICTING_GIVENS"
    suggestion = "Remove or correct one of the conflicting givens"

    def __init__(
        self,
        node_id: str,
        metric: MetricKey,
        existing: float,
        candidate: float,
        rule: str,
    ):
        super().__init__(
            f"{node_id}: {metric.value} is "
            f"{format_metric_value(existing, metric)} but {rule} gives "
            f"{format_metric_value(candidate, metric)}",
            node_ids=[node_id],
            metric=metric,
            values=[existing, candidate],
        )
        self.existing = existing
        self.candidate = candidate
        self.rule = rule


class UnderDetermined(SolverError):
    code = "E_UNDER_DETERMINED"
    suggestion = "Supply another given for one of the unresolved nodes"

    def __init__(
        self,
        unknowns: list[tuple[str, MetricKey]],
        partial: SolveResult | None = None,
    ):
        cells = ", ".join(f"{node_id}.{metric.value}" for node_id, metric in unknowns)
        node_ids = list(dict.fromkeys(node_id for node_id, _ in unknowns))
        super().__init__(
            f"Could not resolve {len(unknowns)} value(s): {cells}",
            node_ids=node_ids,
            metric=unknowns[0][1] if unknowns else None,
        )
        self.unknowns = unknowns
        self.partial = partial


class MalformedTree(SolverError):
    code = "E_MALFORMED_TREE"
    suggestion = "Fix the circuit definition before solving"

    def __init__(self, message: str, node_ids: list[str] | None = None):
        super().__init__(message, node_ids=node_ids)
