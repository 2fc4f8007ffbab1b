"""Indexed view of a circuit tree for the solver.

The tree is flattened into slots, one per node plus one for the source.
Each slot holds a private ``WireMetrics`` that only ever moves from
unknown to known; the input problem is never mutated.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from circuitry.schemas.problem import (
    CircuitNode,
    ComponentBehavior,
    ComponentNode,
    PracticeComponent,
)
from circuitry.schemas.solution import SOURCE_ROW, TOTALS_ROW, Derivation
from circuitry.schemas.wire import MetricKey, WireMetrics
from circuitry.solver.errors import ConflictingGivens, DivisionByZero, MalformedTree

GIVEN = "given"
TOTALS_OVERRIDE = "totals override"


class SlotKind(str, Enum):
    COMPONENT = "component"
    SERIES = "series"
    PARALLEL = "parallel"
    SOURCE = "source"


@dataclass
class Slot:
    key: str
    kind: SlotKind
    behavior: ComponentBehavior = ComponentBehavior.OHMIC
    metrics: WireMetrics = field(default_factory=WireMetrics)
    children: list[Slot] = field(default_factory=list)

    @property
    def is_composite(self) -> bool:
        return self.kind in (SlotKind.SERIES, SlotKind.PARALLEL)


@dataclass(frozen=True)
class Tolerance:
    rel: float = 1e-9
    abs: float = 1e-12

    def close(self, a: float, b: float) -> bool:
        return math.isclose(a, b, rel_tol=self.rel, abs_tol=self.abs)


class Network:
    def __init__(
        self,
        root: Slot,
        source: Slot,
        tree_slots: list[Slot],
        tolerance: Tolerance | None = None,
    ):
        self.root = root
        self.source = source
        self.tree_slots = tree_slots
        self.tolerance = tolerance or Tolerance()
        self.derivations: list[Derivation] = []
        self.pass_number = 0
        self._by_key = {slot.key: slot for slot in [*tree_slots, source]}

    # ─── Construction ───

    @classmethod
    def build(
        cls,
        components: list[PracticeComponent],
        source: PracticeComponent,
        root: CircuitNode,
        totals_override: WireMetrics | None = None,
        tolerance: Tolerance | None = None,
    ) -> Network:
        """Index the tree and seed every given. Raises ``MalformedTree``."""
        by_id: dict[str, PracticeComponent] = {}
        for component in components:
            if component.id in by_id:
                raise MalformedTree(
                    f"Component id '{component.id}' is used more than once",
                    [component.id],
                )
            by_id[component.id] = component

        if source.id in by_id:
            raise MalformedTree(
                f"Source id '{source.id}' collides with a load component",
                [source.id],
            )

        tree_slots: list[Slot] = []
        placed: set[str] = set()
        used_keys: set[str] = {source.id, TOTALS_ROW, SOURCE_ROW}

        def index(node: CircuitNode, path: str) -> Slot:
            if isinstance(node, ComponentNode):
                component = by_id.get(node.component_id)
                if component is None:
                    raise MalformedTree(
                        f"Tree references unknown component '{node.component_id}'",
                        [node.component_id],
                    )
                if component.id in placed:
                    raise MalformedTree(
                        f"Component '{component.id}' appears more than once in the tree",
                        [component.id],
                    )
                placed.add(component.id)
                slot = Slot(
                    key=component.id,
                    kind=SlotKind.COMPONENT,
                    behavior=component.behavior,
                )
            else:
                key = node.id or f"{node.kind}@{path}"
                if not node.children:
                    raise MalformedTree(
                        f"{node.kind.capitalize()} group '{key}' has no children",
                        [key],
                    )
                if key in used_keys or key in by_id:
                    raise MalformedTree(f"Group id '{key}' is not unique", [key])
                used_keys.add(key)
                children = [
                    index(child, f"{path}.{position}")
                    for position, child in enumerate(node.children)
                ]
                slot = Slot(key=key, kind=SlotKind(node.kind), children=children)
            tree_slots.append(slot)
            return slot

        root_slot = index(root, "root")

        orphans = [component_id for component_id in by_id if component_id not in placed]
        if orphans:
            raise MalformedTree(
                f"Component(s) not placed in the circuit tree: {', '.join(orphans)}",
                orphans,
            )

        source_slot = Slot(key=source.id, kind=SlotKind.SOURCE)
        network = cls(root_slot, source_slot, tree_slots, tolerance)

        for component in components:
            network.seed(network.slot(component.id), component.givens, GIVEN)
        network.seed(source_slot, source.givens, GIVEN)
        if totals_override is not None:
            network.seed(root_slot, totals_override, TOTALS_OVERRIDE)

        return network

    # ─── Lookup ───

    @property
    def slots(self) -> list[Slot]:
        """Every slot: tree nodes leaves-first, then the source."""
        return [*self.tree_slots, self.source]

    @property
    def composites(self) -> list[Slot]:
        return [slot for slot in self.tree_slots if slot.is_composite]

    @property
    def component_slots(self) -> list[Slot]:
        return [slot for slot in self.tree_slots if slot.kind == SlotKind.COMPONENT]

    def slot(self, key: str) -> Slot:
        return self._by_key[key]

    def row(self, row_id: str) -> Slot | None:
        """Resolve a worksheet row id (component, group, source or totals)."""
        if row_id == TOTALS_ROW:
            return self.root
        if row_id == SOURCE_ROW:
            return self.source
        return self._by_key.get(row_id)

    # ─── Mutation ───

    def seed(self, slot: Slot, givens: WireMetrics, origin: str) -> None:
        for key in givens.known_keys():
            self.assign(slot, key, givens.get(key), origin)

    def assign(
        self,
        slot: Slot,
        metric: MetricKey,
        value: float,
        rule: str,
        inputs: Iterable[str] = (),
    ) -> bool:
        """Fill an unknown field, or check a known one against ``value``.

        Returns True only when a previously unknown field was filled.
        """
        if not math.isfinite(value):
            raise DivisionByZero(slot.key, metric, rule)

        existing = slot.metrics.get(metric)
        if existing is None:
            setattr(slot.metrics, metric.value, value)
            self.derivations.append(
                Derivation(
                    node_id=slot.key,
                    metric=metric,
                    value=value,
                    formula=rule,
                    inputs=list(inputs),
                    pass_number=self.pass_number,
                )
            )
            return True

        if not self.tolerance.close(existing, value):
            raise ConflictingGivens(slot.key, metric, existing, value, rule)
        return False

    def unknown_cells(
        self, cells: Iterable[tuple[Slot, MetricKey]]
    ) -> list[tuple[str, MetricKey]]:
        return [
            (slot.key, metric)
            for slot, metric in cells
            if not slot.metrics.is_known(metric)
        ]
