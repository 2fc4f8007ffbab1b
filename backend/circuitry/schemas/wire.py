from __future__ import annotations

from enum import Enum
from pydantic import BaseModel


class MetricKey(str, Enum):
    WATTS = "watts"
    CURRENT = "current"
    RESISTANCE = "resistance"
    VOLTAGE = "voltage"


class WireMetrics(BaseModel):
    """Watts, current, resistance and EMF for one point of a circuit.

    Each field is either a known float or None. A solved record has all
    four known.
    """

    watts: float | None = None
    current: float | None = None
    resistance: float | None = None
    voltage: float | None = None

    model_config = {"allow_inf_nan": False}

    def get(self, key: MetricKey | str) -> float | None:
        return getattr(self, MetricKey(key).value)

    def is_known(self, key: MetricKey | str) -> bool:
        return self.get(key) is not None

    def known_keys(self) -> list[MetricKey]:
        return [key for key in MetricKey if self.is_known(key)]

    def unknown_keys(self) -> list[MetricKey]:
        return [key for key in MetricKey if not self.is_known(key)]

    def is_complete(self) -> bool:
        return not self.unknown_keys()
