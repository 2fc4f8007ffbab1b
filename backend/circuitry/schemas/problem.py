"""Practice problem definitions: components, the series/parallel tree,
and catalog metadata."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from circuitry.schemas.wire import MetricKey, WireMetrics


class ComponentRole(str, Enum):
    SOURCE = "source"
    LOAD = "load"


class ComponentBehavior(str, Enum):
    OHMIC = "ohmic"  # resistance defines the part
    FIXED_VOLTAGE = "fixed_voltage"  # forward drop defines the part (LED)


class PracticeComponent(BaseModel):
    id: str = Field(..., min_length=1)
    label: str | None = None
    role: ComponentRole = ComponentRole.LOAD
    behavior: ComponentBehavior = ComponentBehavior.OHMIC
    givens: WireMetrics = Field(default_factory=WireMetrics)
    notes: str | None = None


# ─── Circuit tree ───


class ComponentNode(BaseModel):
    kind: Literal["component"] = "component"
    component_id: str


class SeriesNode(BaseModel):
    kind: Literal["series"] = "series"
    id: str | None = None
    label: str | None = None
    children: list[CircuitNode] = Field(default_factory=list)


class ParallelNode(BaseModel):
    kind: Literal["parallel"] = "parallel"
    id: str | None = None
    label: str | None = None
    children: list[CircuitNode] = Field(default_factory=list)


CircuitNode = Annotated[
    Union[ComponentNode, SeriesNode, ParallelNode],
    Field(discriminator="kind"),
]

SeriesNode.model_rebuild()
ParallelNode.model_rebuild()


# ─── Catalog records ───


class PracticeTopology(str, Enum):
    SERIES = "series"
    PARALLEL = "parallel"
    COMBINATION = "combination"


class PracticeDifficulty(str, Enum):
    INTRO = "intro"
    STANDARD = "standard"
    CHALLENGE = "challenge"


class TargetMetricDescriptor(BaseModel):
    """The (row, metric) cell an exercise ultimately asks for.

    ``component_id`` is a component id, the source id, ``"source"``,
    ``"totals"`` or a composite node id.
    """

    component_id: str
    key: MetricKey


class PracticeProblem(BaseModel):
    id: str
    title: str
    topology: PracticeTopology
    difficulty: PracticeDifficulty
    prompt: str
    target_question: str
    target_metric: TargetMetricDescriptor
    concept_tags: list[str] = Field(default_factory=list)
    source: PracticeComponent
    components: list[PracticeComponent]
    network: CircuitNode
    totals_givens: WireMetrics | None = None
    preset_hint: str | None = None


class ProblemSummary(BaseModel):
    id: str
    title: str
    topology: PracticeTopology
    difficulty: PracticeDifficulty
    target_question: str
    concept_tags: list[str] = Field(default_factory=list)
    preset_hint: str | None = None
