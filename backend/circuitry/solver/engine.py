"""W.I.R.E. Solver Engine — fixed-point constraint propagation.

Pure Python. Deterministic. No I/O.

Solves a series/parallel network for watts, current, resistance and EMF:
  1. Index the tree into slots and seed every given
     (component givens, source givens, totals override on the root)
  2. Repeat passes of the local identity resolver on every slot and the
     structural propagator on every group, plus the source link
  3. Stop when a pass fills nothing; every field only ever goes from
     unknown to known, so this terminates
  4. Report unresolved requested cells as UnderDetermined
  5. Project the slots into the public SolveResult

Input:  components, source, CircuitNode tree, optional totals override
Output: SolveResult, or SolveAttempt(ok=False) from the try_* variants
"""

from __future__ import annotations

import logging

from circuitry.config import get_settings
from circuitry.schemas.problem import (
    CircuitNode,
    PracticeComponent,
    PracticeProblem,
    TargetMetricDescriptor,
)
from circuitry.schemas.solution import SolveAttempt, SolveResult
from circuitry.schemas.wire import MetricKey, WireMetrics
from circuitry.solver.errors import MalformedTree, SolverError, UnderDetermined
from circuitry.solver.identities import resolve_identities
from circuitry.solver.network import Network, Slot, Tolerance
from circuitry.solver.projection import project
from circuitry.solver.structural import link_source, propagate

logger = logging.getLogger(__name__)

FIELDS_PER_SLOT = len(MetricKey)


def default_tolerance() -> Tolerance:
    settings = get_settings()
    return Tolerance(
        rel=settings.solver_rel_tolerance,
        abs=settings.solver_abs_tolerance,
    )


# ═══════════════════════════════════════════════════════════
# Fixed-point driver
# ═══════════════════════════════════════════════════════════


def run_pass(network: Network) -> bool:
    """One sweep over every rule. Returns True if any field was filled."""
    changed = False
    for slot in network.slots:
        changed = resolve_identities(network, slot) or changed
    for slot in network.composites:
        changed = propagate(network, slot) or changed
    changed = link_source(network) or changed
    return changed


def run_to_fixed_point(network: Network) -> int:
    """Run passes until one fills nothing; return the number of passes.

    Each filling pass fills at least one of the 4 × slots fields, so one
    more than that is an upper bound.
    """
    max_passes = FIELDS_PER_SLOT * len(network.slots) + 1
    for pass_number in range(1, max_passes + 1):
        network.pass_number = pass_number
        if not run_pass(network):
            return pass_number
    raise RuntimeError(f"Solver did not settle after {max_passes} passes")


def requested_cells(
    network: Network,
    targets: list[TargetMetricDescriptor] | None = None,
) -> list[tuple[Slot, MetricKey]]:
    """Cells that must be known for a solve to count as resolved.

    Defaults to every metric of every component, the source and the totals.
    """
    if targets is None:
        rows = [*network.component_slots, network.source]
        if network.root not in rows:
            rows.append(network.root)
        return [(slot, metric) for slot in rows for metric in MetricKey]

    cells: list[tuple[Slot, MetricKey]] = []
    for target in targets:
        slot = network.row(target.component_id)
        if slot is None:
            raise MalformedTree(
                f"Target row '{target.component_id}' is not part of the circuit",
                [target.component_id],
            )
        cells.append((slot, target.key))
    return cells


# ═══════════════════════════════════════════════════════════
# Entry points
# ═══════════════════════════════════════════════════════════


def solve_network(
    components: list[PracticeComponent],
    source: PracticeComponent,
    network: CircuitNode,
    totals_override: WireMetrics | None = None,
    *,
    targets: list[TargetMetricDescriptor] | None = None,
    tolerance: Tolerance | None = None,
) -> SolveResult:
    """Solve a network for every W.I.R.E. value.

    Args:
        components: Load components referenced by the tree.
        source: The EMF supply; its metrics equal the root's.
        network: Root of the series/parallel tree.
        totals_override: Measured facts about the whole network.
        targets: Cells that must resolve. Defaults to the full table.
        tolerance: Consistency tolerance. Defaults to settings.

    Returns:
        SolveResult with per-component, source and totals metrics.

    Raises:
        MalformedTree, DivisionByZero, ConflictingGivens, UnderDetermined.
    """
    indexed = Network.build(
        components,
        source,
        network,
        totals_override,
        tolerance or default_tolerance(),
    )
    logger.debug(
        "Solving network: %d slots, %d givens",
        len(indexed.slots),
        len(indexed.derivations),
    )

    passes = run_to_fixed_point(indexed)
    unknowns = indexed.unknown_cells(requested_cells(indexed, targets))
    if unknowns:
        raise UnderDetermined(unknowns, partial=project(indexed, passes))

    logger.debug("Network settled after %d passes", passes)
    return project(indexed, passes)


def try_solve_network(
    components: list[PracticeComponent],
    source: PracticeComponent,
    network: CircuitNode,
    totals_override: WireMetrics | None = None,
    *,
    target: TargetMetricDescriptor | None = None,
    label: str = "network",
) -> SolveAttempt:
    """Like ``solve_network`` but returns failures as structured results.

    With ``target`` only that cell must resolve, and its value is reported
    as ``answer``.
    """
    try:
        result = solve_network(
            components,
            source,
            network,
            totals_override,
            targets=[target] if target is not None else None,
        )
    except SolverError as exc:
        logger.warning("[%s] Solve failed — %s: %s", label, exc.code, exc.message)
        return SolveAttempt(
            ok=False,
            error=exc.to_issue(),
            partial=exc.partial,
        )

    answer = result.metric_for(target, source.id) if target is not None else None
    return SolveAttempt(ok=True, data=result, answer=answer)


def solve_practice_problem(problem: PracticeProblem) -> SolveResult:
    return solve_network(
        problem.components,
        problem.source,
        problem.network,
        problem.totals_givens,
    )


def try_solve_practice_problem(problem: PracticeProblem) -> SolveAttempt:
    """Solve the full worksheet table of a catalog problem."""
    try:
        result = solve_practice_problem(problem)
    except SolverError as exc:
        logger.warning("[%s] Solve failed — %s: %s", problem.id, exc.code, exc.message)
        return SolveAttempt(
            ok=False,
            error=exc.to_issue(),
            partial=exc.partial,
        )

    return SolveAttempt(
        ok=True,
        data=result,
        answer=result.metric_for(problem.target_metric, problem.source.id),
    )
