"""Display formatting for W.I.R.E. quantities."""

from __future__ import annotations

import math

from circuitry.schemas.wire import MetricKey

METRIC_UNITS: dict[MetricKey, str] = {
    MetricKey.WATTS: "W",
    MetricKey.CURRENT: "A",
    MetricKey.RESISTANCE: "Ω",
    MetricKey.VOLTAGE: "V",
}

METRIC_PRECISION: dict[MetricKey, int] = {
    MetricKey.WATTS: 2,
    MetricKey.CURRENT: 3,
    MetricKey.RESISTANCE: 2,
    MetricKey.VOLTAGE: 2,
}

MISSING = "—"


def format_number(value: float | None, digits: int = 2) -> str:
    """Fixed-point rendering with fewer decimals for large magnitudes."""
    if value is None or not math.isfinite(value):
        return MISSING

    magnitude = abs(value)
    if magnitude >= 1000:
        applied = 1
    elif magnitude >= 100:
        applied = min(digits, 1)
    elif magnitude >= 10:
        applied = min(digits, 2)
    else:
        applied = digits

    return f"{value:.{applied}f}"


def format_metric_value(value: float | None, key: MetricKey | str) -> str:
    key = MetricKey(key)
    if value is None or not math.isfinite(value):
        return MISSING
    return f"{format_number(value, METRIC_PRECISION[key])} {METRIC_UNITS[key]}"
