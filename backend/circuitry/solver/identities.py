"""Local identity resolver — Ohm's law and the power identities on one slot.

Each identity reads metrics of a single slot and derives another metric
of the same slot. An identity fires only when all of its inputs are known
and its target is not; with a known target it acts as a consistency check.
The square-root forms only fire: they cannot tell a negative voltage or
current from a positive one.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from circuitry.schemas.problem import ComponentBehavior
from circuitry.schemas.wire import MetricKey, WireMetrics
from circuitry.solver.errors import DivisionByZero
from circuitry.solver.network import GIVEN, Network, Slot, SlotKind, Tolerance

W = MetricKey.WATTS
I = MetricKey.CURRENT  # noqa: E741
R = MetricKey.RESISTANCE
E = MetricKey.VOLTAGE


@dataclass(frozen=True)
class Identity:
    target: MetricKey
    inputs: tuple[MetricKey, ...]
    formula: str
    compute: Callable[..., float | None]
    ohmic_only: bool = False
    # positive root only; never used to check a known value
    sign_blind: bool = False


def _root(value: float) -> float | None:
    """Principal square root; None outside the real domain."""
    if value < 0:
        return None
    return math.sqrt(value)


# Order matters only for which formula is recorded as the derivation.
IDENTITIES: list[Identity] = [
    Identity(E, (I, R), "E = I × R", lambda i, r: i * r, ohmic_only=True),
    Identity(I, (E, R), "I = E / R", lambda e, r: e / r, ohmic_only=True),
    Identity(R, (E, I), "R = E / I", lambda e, i: e / i),
    Identity(W, (E, I), "P = E × I", lambda e, i: e * i),
    Identity(W, (I, R), "P = I² × R", lambda i, r: i * i * r, ohmic_only=True),
    Identity(W, (E, R), "P = E² / R", lambda e, r: e * e / r, ohmic_only=True),
    Identity(E, (W, I), "E = P / I", lambda w, i: w / i),
    Identity(
        E,
        (W, R),
        "E = √(P × R)",
        lambda w, r: _root(w * r),
        ohmic_only=True,
        sign_blind=True,
    ),
    Identity(I, (W, E), "I = P / E", lambda w, e: w / e),
    Identity(
        I,
        (W, R),
        "I = √(P / R)",
        lambda w, r: _root(w / r),
        ohmic_only=True,
        sign_blind=True,
    ),
    Identity(R, (W, I), "R = P / I²", lambda w, i: w / (i * i), ohmic_only=True),
    Identity(R, (E, W), "R = E² / P", lambda e, w: e * e / w, ohmic_only=True),
]


def applicable_identities(behavior: ComponentBehavior) -> list[Identity]:
    """A fixed-voltage part never takes its voltage or current from its
    resistance; it only reports R = E / I once current is known."""
    if behavior == ComponentBehavior.FIXED_VOLTAGE:
        return [identity for identity in IDENTITIES if not identity.ohmic_only]
    return IDENTITIES


def apply_identity(network: Network, slot: Slot, identity: Identity) -> bool:
    args = [slot.metrics.get(key) for key in identity.inputs]
    if any(arg is None for arg in args):
        return False

    target_known = slot.metrics.is_known(identity.target)
    if target_known and identity.sign_blind:
        return False

    try:
        value = identity.compute(*args)
    except ZeroDivisionError:
        if target_known:
            return False
        raise DivisionByZero(slot.key, identity.target, identity.formula)

    if value is None:
        return False

    return network.assign(
        slot,
        identity.target,
        value,
        identity.formula,
        [key.value for key in identity.inputs],
    )


def resolve_identities(network: Network, slot: Slot) -> bool:
    """Run the slot's identities to a local fixed point.

    Returns True if any field of the slot was filled.
    """
    identities = applicable_identities(slot.behavior)
    filled = False

    while True:
        changed = False
        for identity in identities:
            changed = apply_identity(network, slot, identity) or changed
        if not changed:
            return filled
        filled = True


def solve_metrics(
    givens: WireMetrics,
    behavior: ComponentBehavior = ComponentBehavior.OHMIC,
    tolerance: Tolerance | None = None,
) -> WireMetrics:
    """Complete one standalone metrics record using the identities alone.

    Fields that cannot be derived stay None. Raises ``DivisionByZero`` and
    ``ConflictingGivens`` like a network solve.
    """
    slot = Slot(key="metrics", kind=SlotKind.COMPONENT, behavior=behavior)
    network = Network(slot, Slot(key="source", kind=SlotKind.SOURCE), [slot], tolerance)
    network.seed(slot, givens, GIVEN)
    resolve_identities(network, slot)
    return slot.metrics
