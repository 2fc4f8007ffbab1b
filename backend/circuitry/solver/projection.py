"""Result projection — extract the public metrics table from solved slots."""

from __future__ import annotations

from circuitry.schemas.solution import SolveResult
from circuitry.solver.network import Network


def project(network: Network, passes: int) -> SolveResult:
    totals = network.root.metrics.model_copy()
    return SolveResult(
        totals=totals,
        source=network.source.metrics.model_copy(),
        components={
            slot.key: slot.metrics.model_copy() for slot in network.component_slots
        },
        nodes={slot.key: slot.metrics.model_copy() for slot in network.composites},
        equivalent_resistance=totals.resistance,
        derivations=list(network.derivations),
        passes=passes,
    )
