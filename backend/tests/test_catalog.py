"""Tests for the practice problem catalog."""

import random

import pytest
from fastapi import HTTPException

from circuitry.schemas.problem import PracticeDifficulty, PracticeTopology
from circuitry.services.catalog import ProblemCatalog
from circuitry.solver.engine import try_solve_practice_problem


@pytest.fixture(scope="module")
def catalog() -> ProblemCatalog:
    return ProblemCatalog.from_file()


EXPECTED_ANSWERS = {
    "series-square-01": 0.04,
    "series-voltage-drop-02": 7.05,
    "series-power-03": 2.592,
    "series-measured-current-04": 270.0,
    "series-led-05": 7 / 330,
    "parallel-square-02": 540 / 11,
    "parallel-total-current-02": 0.36,
    "parallel-power-03": 26.25,
    "combo-square-03": 30 / 275 * 2 / 3,
    "combo-series-parallel-02": 12.0,
    "combo-complex-03": 100.0,
}


# ═══════════════════════════════════════════════════════════
# Catalog contents
# ═══════════════════════════════════════════════════════════


class TestCatalogProblems:
    def test_every_problem_solves(self, catalog):
        for problem in catalog.problems:
            attempt = try_solve_practice_problem(problem)
            assert attempt.ok, (problem.id, attempt.error)
            assert attempt.answer is not None, problem.id

    @pytest.mark.parametrize("problem_id,expected", sorted(EXPECTED_ANSWERS.items()))
    def test_target_answers(self, catalog, problem_id, expected):
        attempt = try_solve_practice_problem(catalog.get(problem_id))
        assert attempt.answer == pytest.approx(expected, rel=1e-6)

    def test_every_row_satisfies_power_identity(self, catalog):
        for problem in catalog.problems:
            result = try_solve_practice_problem(problem).data
            for metrics in [result.totals, result.source, *result.components.values()]:
                assert metrics.watts == pytest.approx(metrics.voltage * metrics.current)

    def test_component_labels_are_plain_data(self, catalog):
        led = catalog.get("series-led-05").components[1]
        assert led.label == "LED"
        assert "label" in led.model_dump()
        assert not hasattr(led, "display_label")

    def test_problem_ids_are_unique(self, catalog):
        ids = [problem.id for problem in catalog.problems]
        assert len(ids) == len(set(ids))


# ═══════════════════════════════════════════════════════════
# Lookup
# ═══════════════════════════════════════════════════════════


class TestCatalogLookup:
    def test_get_unknown_raises_404(self, catalog):
        with pytest.raises(HTTPException) as exc_info:
            catalog.get("no-such-problem")
        assert exc_info.value.status_code == 404

    def test_find_unknown_returns_none(self, catalog):
        assert catalog.find("no-such-problem") is None

    def test_preset_lookup(self, catalog):
        problem = catalog.find_by_preset("series_led")
        assert problem is not None
        assert problem.id == "series-led-05"
        assert catalog.find_by_preset("not_a_preset") is None
        assert catalog.find_by_preset(None) is None

    def test_list_filters(self, catalog):
        parallel = catalog.list_problems(topology=PracticeTopology.PARALLEL)
        assert parallel
        assert all(s.topology == PracticeTopology.PARALLEL for s in parallel)

        intro_combo = catalog.list_problems(
            topology=PracticeTopology.COMBINATION,
            difficulty=PracticeDifficulty.INTRO,
        )
        assert [s.id for s in intro_combo] == ["combo-complex-03"]

    def test_list_without_filters(self, catalog):
        assert len(catalog.list_problems()) == len(catalog.problems)


# ═══════════════════════════════════════════════════════════
# Random selection
# ═══════════════════════════════════════════════════════════


class TestRandomProblem:
    def test_seeded_rng_is_deterministic(self, catalog):
        first = catalog.random_problem(rng=random.Random(42))
        second = catalog.random_problem(rng=random.Random(42))
        assert first.id == second.id

    def test_topology_filter(self, catalog):
        rng = random.Random(3)
        for _ in range(20):
            problem = catalog.random_problem(PracticeTopology.SERIES, rng)
            assert problem.topology == PracticeTopology.SERIES

    def test_empty_pool_falls_back_to_default(self, catalog):
        series_only = ProblemCatalog(
            [p for p in catalog.problems if p.topology == PracticeTopology.SERIES]
        )
        problem = series_only.random_problem(PracticeTopology.PARALLEL, random.Random(1))
        assert problem.id == series_only.default().id

    def test_empty_catalog(self):
        empty = ProblemCatalog([])
        assert empty.default() is None
        assert empty.random_problem() is None
