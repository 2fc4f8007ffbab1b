"""Problem catalog — practice problems loaded from a JSON file."""

from __future__ import annotations

import json
import logging
import random
from functools import lru_cache
from pathlib import Path

from fastapi import HTTPException, status

from circuitry.config import get_settings
from circuitry.schemas.problem import (
    PracticeDifficulty,
    PracticeProblem,
    PracticeTopology,
    ProblemSummary,
)

logger = logging.getLogger(__name__)

CATALOG_PATH = Path(__file__).parent.parent / "data" / "practice_problems.json"


class ProblemCatalog:
    def __init__(self, problems: list[PracticeProblem]):
        self.problems = list(problems)
        self._by_id = {problem.id: problem for problem in self.problems}
        self._by_preset = {
            problem.preset_hint: problem
            for problem in self.problems
            if problem.preset_hint
        }

    @classmethod
    def from_file(cls, path: Path | str = CATALOG_PATH) -> ProblemCatalog:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        problems = [
            PracticeProblem.model_validate(item) for item in raw.get("problems", [])
        ]
        logger.info("Loaded %d practice problems from %s", len(problems), path)
        return cls(problems)

    def list_problems(
        self,
        topology: PracticeTopology | None = None,
        difficulty: PracticeDifficulty | None = None,
    ) -> list[ProblemSummary]:
        return [
            ProblemSummary(
                id=problem.id,
                title=problem.title,
                topology=problem.topology,
                difficulty=problem.difficulty,
                target_question=problem.target_question,
                concept_tags=problem.concept_tags,
                preset_hint=problem.preset_hint,
            )
            for problem in self.problems
            if (topology is None or problem.topology == topology)
            and (difficulty is None or problem.difficulty == difficulty)
        ]

    def find(self, problem_id: str) -> PracticeProblem | None:
        return self._by_id.get(problem_id)

    def get(self, problem_id: str) -> PracticeProblem:
        problem = self.find(problem_id)
        if problem is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Practice problem {problem_id} not found",
            )
        return problem

    def find_by_preset(self, preset: str | None) -> PracticeProblem | None:
        if not preset:
            return None
        return self._by_preset.get(preset)

    def default(self) -> PracticeProblem | None:
        return self.problems[0] if self.problems else None

    def random_problem(
        self,
        topology: PracticeTopology | None = None,
        rng: random.Random | None = None,
    ) -> PracticeProblem | None:
        """Pick a problem, optionally of one topology.

        An empty pool falls back to the default problem.
        """
        if not self.problems:
            return None

        pool = (
            [problem for problem in self.problems if problem.topology == topology]
            if topology is not None
            else self.problems
        )
        if not pool:
            return self.default()

        return (rng or random.Random()).choice(pool)


@lru_cache()
def get_catalog() -> ProblemCatalog:
    settings = get_settings()
    return ProblemCatalog.from_file(settings.problem_catalog_path or CATALOG_PATH)
