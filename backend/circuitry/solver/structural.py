"""Structural propagator — series/parallel composition rules.

Series groups share one current; voltage, resistance and power add.
Parallel groups share one voltage; current and power add, conductance
adds. The source is the whole network seen from its terminals, so its
metrics mirror the root's.

Rules move values both ways between a group and its members: an aggregate
from all members, or the single missing member from the aggregate and the
rest (backward solve).
"""

from __future__ import annotations

from typing import Callable

from circuitry.schemas.wire import MetricKey
from circuitry.solver.errors import ConflictingGivens, DivisionByZero
from circuitry.solver.network import Network, Slot, SlotKind

SOURCE_LINK = "source = network totals"

SERIES_CURRENT = "I_T = I_1 = I_2 = …"
SERIES_VOLTAGE = ("E_T = E_1 + E_2 + …", "E_k = E_T − ΣE_others")
SERIES_RESISTANCE = ("R_T = R_1 + R_2 + …", "R_k = R_T − ΣR_others")
SERIES_WATTS = ("P_T = P_1 + P_2 + …", "P_k = P_T − ΣP_others")

PARALLEL_VOLTAGE = "E_T = E_1 = E_2 = …"
PARALLEL_CURRENT = ("I_T = I_1 + I_2 + …", "I_k = I_T − ΣI_others")
PARALLEL_RESISTANCE = ("1/R_T = 1/R_1 + 1/R_2 + …", "1/R_k = 1/R_T − Σ1/R_others")
PARALLEL_WATTS = ("P_T = P_1 + P_2 + …", "P_k = P_T − ΣP_others")


# ─── Combinators ───


def _sum(values: list[float]) -> float:
    return sum(values)


def _sum_remainder(total: float, others: list[float]) -> float:
    return total - sum(others)


def _reciprocal_sum(values: list[float]) -> float:
    return 1 / sum(1 / value for value in values)


def _reciprocal_remainder(total: float, others: list[float], network: Network) -> float:
    conductance = 1 / total
    others_conductance = sum(1 / value for value in others)
    if network.tolerance.close(conductance, others_conductance):
        # remaining branch would be an open circuit
        raise ZeroDivisionError
    return 1 / (conductance - others_conductance)


# ─── Rule shapes ───


def _share(network: Network, slot: Slot, metric: MetricKey, rule: str) -> bool:
    """One value common to a group and all of its members."""
    value = slot.metrics.get(metric)
    changed = False

    if value is None:
        member = next(
            (child for child in slot.children if child.metrics.is_known(metric)),
            None,
        )
        if member is None:
            return False
        value = member.metrics.get(metric)
        changed = network.assign(slot, metric, value, rule, [member.key])

    for child in slot.children:
        changed = network.assign(child, metric, value, rule, [slot.key]) or changed
    return changed


def _aggregate(
    network: Network,
    slot: Slot,
    metric: MetricKey,
    rules: tuple[str, str],
    combine: Callable[[list[float]], float],
    isolate: Callable[[float, list[float]], float],
) -> bool:
    """Group value from all members, or one missing member from the group."""
    forward_rule, backward_rule = rules
    values = [child.metrics.get(metric) for child in slot.children]
    missing = [child for child, value in zip(slot.children, values) if value is None]
    total = slot.metrics.get(metric)

    if not missing:
        try:
            combined = combine(values)
        except ZeroDivisionError:
            if total is not None:
                return False
            raise DivisionByZero(slot.key, metric, forward_rule)
        return network.assign(
            slot, metric, combined, forward_rule, [child.key for child in slot.children]
        )

    if len(missing) == 1 and total is not None:
        target = missing[0]
        others = [value for value in values if value is not None]
        try:
            value = isolate(total, others)
        except ZeroDivisionError:
            raise DivisionByZero(target.key, metric, backward_rule)
        if metric == MetricKey.RESISTANCE and others and value <= 0:
            # the group total cannot hold the members it already has
            raise ConflictingGivens(
                slot.key, metric, total, combine(others), forward_rule
            )
        inputs = [slot.key] + [child.key for child in slot.children if child is not target]
        return network.assign(target, metric, value, backward_rule, inputs)

    return False


# ─── Group rules ───


def propagate_series(network: Network, slot: Slot) -> bool:
    changed = _share(network, slot, MetricKey.CURRENT, SERIES_CURRENT)
    for metric, rules in (
        (MetricKey.VOLTAGE, SERIES_VOLTAGE),
        (MetricKey.RESISTANCE, SERIES_RESISTANCE),
        (MetricKey.WATTS, SERIES_WATTS),
    ):
        changed = _aggregate(network, slot, metric, rules, _sum, _sum_remainder) or changed
    return changed


def propagate_parallel(network: Network, slot: Slot) -> bool:
    changed = _share(network, slot, MetricKey.VOLTAGE, PARALLEL_VOLTAGE)
    for metric, rules in (
        (MetricKey.CURRENT, PARALLEL_CURRENT),
        (MetricKey.WATTS, PARALLEL_WATTS),
    ):
        changed = _aggregate(network, slot, metric, rules, _sum, _sum_remainder) or changed
    changed = (
        _aggregate(
            network,
            slot,
            MetricKey.RESISTANCE,
            PARALLEL_RESISTANCE,
            _reciprocal_sum,
            lambda total, others: _reciprocal_remainder(total, others, network),
        )
        or changed
    )
    return changed


def propagate(network: Network, slot: Slot) -> bool:
    """Apply the composition rules of one group. Leaves are untouched."""
    if slot.kind == SlotKind.SERIES:
        return propagate_series(network, slot)
    if slot.kind == SlotKind.PARALLEL:
        return propagate_parallel(network, slot)
    return False


def link_source(network: Network) -> bool:
    """Keep the source's metrics equal to the root's, both directions."""
    source, root = network.source, network.root
    changed = False
    for metric in MetricKey:
        value = source.metrics.get(metric)
        if value is not None:
            changed = network.assign(root, metric, value, SOURCE_LINK, [source.key]) or changed
            continue
        value = root.metrics.get(metric)
        if value is not None:
            changed = network.assign(source, metric, value, SOURCE_LINK, [root.key]) or changed
    return changed
