"""Unit tests for the local identity resolver."""

import pytest

from circuitry.schemas.problem import ComponentBehavior
from circuitry.schemas.wire import MetricKey, WireMetrics
from circuitry.solver.errors import ConflictingGivens, DivisionByZero
from circuitry.solver.identities import (
    IDENTITIES,
    applicable_identities,
    solve_metrics,
)


# ═══════════════════════════════════════════════════════════
# Ohmic completion
# ═══════════════════════════════════════════════════════════


class TestOhmicCompletion:
    def test_voltage_and_resistance(self):
        metrics = solve_metrics(WireMetrics(voltage=12, resistance=4))
        assert metrics.current == pytest.approx(3)
        assert metrics.watts == pytest.approx(36)

    def test_current_and_resistance(self):
        metrics = solve_metrics(WireMetrics(current=0.04, resistance=150))
        assert metrics.voltage == pytest.approx(6)
        assert metrics.watts == pytest.approx(0.24)

    def test_voltage_and_current_recovers_resistance(self):
        metrics = solve_metrics(WireMetrics(voltage=8.1, current=0.03))
        assert metrics.resistance == pytest.approx(270)

    def test_power_and_resistance_takes_positive_root(self):
        metrics = solve_metrics(WireMetrics(watts=0.96, resistance=600))
        assert metrics.voltage == pytest.approx(24)
        assert metrics.current == pytest.approx(0.04)

    def test_power_and_current(self):
        metrics = solve_metrics(WireMetrics(watts=0.54, current=0.03))
        assert metrics.voltage == pytest.approx(18)
        assert metrics.resistance == pytest.approx(600)

    def test_power_and_voltage(self):
        metrics = solve_metrics(WireMetrics(watts=2.88, voltage=24))
        assert metrics.resistance == pytest.approx(200)
        assert metrics.current == pytest.approx(0.12)

    def test_single_given_stays_partial(self):
        metrics = solve_metrics(WireMetrics(resistance=150))
        assert metrics.known_keys() == [MetricKey.RESISTANCE]

    def test_input_is_not_mutated(self):
        givens = WireMetrics(voltage=12, resistance=4)
        solve_metrics(givens)
        assert givens.current is None
        assert givens.watts is None

    def test_negative_voltage_keeps_its_sign(self):
        metrics = solve_metrics(WireMetrics(voltage=-12, resistance=100))
        assert metrics.current == pytest.approx(-0.12)
        assert metrics.watts == pytest.approx(1.44)

    def test_negative_current_is_consistent_with_power(self):
        metrics = solve_metrics(WireMetrics(current=-0.5, watts=2, resistance=8))
        assert metrics.voltage == pytest.approx(-4)

    def test_square_roots_only_fill_unknowns(self):
        formulas = [identity.formula for identity in IDENTITIES if identity.sign_blind]
        assert formulas == ["E = √(P × R)", "I = √(P / R)"]


# ═══════════════════════════════════════════════════════════
# Fixed-voltage parts
# ═══════════════════════════════════════════════════════════


class TestFixedVoltage:
    def test_resistance_does_not_define_current(self):
        metrics = solve_metrics(
            WireMetrics(voltage=2, resistance=100),
            behavior=ComponentBehavior.FIXED_VOLTAGE,
        )
        assert metrics.current is None
        assert metrics.watts is None

    def test_reports_resistance_once_current_known(self):
        metrics = solve_metrics(
            WireMetrics(voltage=2, current=0.02),
            behavior=ComponentBehavior.FIXED_VOLTAGE,
        )
        assert metrics.resistance == pytest.approx(100)
        assert metrics.watts == pytest.approx(0.04)

    def test_only_power_identities_and_display_resistance(self):
        formulas = {i.formula for i in applicable_identities(ComponentBehavior.FIXED_VOLTAGE)}
        assert "R = E / I" in formulas
        assert "P = E × I" in formulas
        assert "E = I × R" not in formulas
        assert "I = E / R" not in formulas
        assert len(formulas) < len(IDENTITIES)


# ═══════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════


class TestIdentityErrors:
    def test_division_by_zero_current(self):
        with pytest.raises(DivisionByZero) as exc_info:
            solve_metrics(WireMetrics(voltage=5, current=0))
        assert exc_info.value.metric == MetricKey.RESISTANCE
        assert exc_info.value.code == "E_DIVISION_BY_ZERO"

    def test_zero_voltage_is_not_an_error(self):
        metrics = solve_metrics(WireMetrics(voltage=0, current=2))
        assert metrics.resistance == 0
        assert metrics.watts == 0

    def test_conflicting_triplet(self):
        with pytest.raises(ConflictingGivens) as exc_info:
            solve_metrics(WireMetrics(voltage=10, current=2, resistance=100))
        assert exc_info.value.code == "E_CONFLICTING_GIVENS"
        assert len(exc_info.value.values) == 2

    def test_consistent_triplet(self):
        metrics = solve_metrics(WireMetrics(voltage=10, current=0.1, resistance=100))
        assert metrics.watts == pytest.approx(1)
