"""
Regression diff engine.

This module compares the tracked metrics of two snapshots and classifies
each change. Every tracked metric is a duration, so a larger value is slower.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_DOWN, ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Iterable, Optional

import numpy as np

from .storage import Snapshot

DEFAULT_TRACKED_METRICS: tuple[str, ...] = (
    "first-contentful-paint",
    "first-meaningful-paint",
    "speed-index",
    "estimated-input-latency",
    "total-blocking-time",
    "max-potential-fid",
    "time-to-first-byte",
    "first-cpu-idle",
    "interactive",
)

_TWO_PLACES = Decimal("0.01")


class Direction(str, Enum):
    """Direction of a metric change."""

    FASTER = "faster"
    SLOWER = "slower"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class MetricDelta:
    """Change of one metric between a baseline and a current snapshot."""

    metric_key: str
    from_value: float
    to_value: float
    percent_change: float
    direction: Direction


@dataclass
class ComparisonConfig:
    """Configuration for comparison operations."""

    tracked_metrics: tuple[str, ...] = field(default=DEFAULT_TRACKED_METRICS)

    def __post_init__(self):
        # Accept lists from config files; duplicates would emit a delta twice
        self.tracked_metrics = tuple(dict.fromkeys(self.tracked_metrics))


def round2(value: float) -> float:
    """Round to two decimal places, halves towards positive infinity."""
    rounding = ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    rounded = float(Decimal(repr(value)).quantize(_TWO_PLACES, rounding=rounding))
    # Normalise -0.0
    return rounded + 0.0


def percent_change(from_value: float, to_value: float) -> Optional[float]:
    """Percentage change from ``from_value`` to ``to_value``.

    Returns None when the change is undefined (zero or non-finite baseline).
    """
    if from_value == 0:
        return None
    change = ((to_value - from_value) / from_value) * 100
    if not math.isfinite(change):
        return None
    return round2(change)


def classify(change: float) -> Direction:
    """Classify a percentage change."""
    if change > 0:
        return Direction.SLOWER
    if change < 0:
        return Direction.FASTER
    return Direction.UNCHANGED


def _numeric(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class Comparator:
    """Computes metric deltas between two snapshots."""

    def __init__(self, config: Optional[ComparisonConfig] = None):
        self.config = config or ComparisonConfig()

    def diff(self, baseline: Snapshot, current: Snapshot) -> list[MetricDelta]:
        """Compare ``current`` against ``baseline``.

        Deltas follow the order of the tracked metric vocabulary. Metrics
        missing from either side, or with a zero baseline, are omitted.
        """
        return self.diff_metrics(baseline.metrics, current.metrics)

    def diff_metrics(
        self, from_metrics: dict[str, Any], to_metrics: dict[str, Any]
    ) -> list[MetricDelta]:
        """Compare two plain metric mappings."""
        deltas = []
        for key in self.config.tracked_metrics:
            from_value = from_metrics.get(key)
            to_value = to_metrics.get(key)
            if not (_numeric(from_value) and _numeric(to_value)):
                continue

            change = percent_change(from_value, to_value)
            if change is None:
                continue

            deltas.append(
                MetricDelta(
                    metric_key=key,
                    from_value=from_value,
                    to_value=to_value,
                    percent_change=change,
                    direction=classify(change),
                )
            )
        return deltas

    def get_summary_stats(self, deltas: Iterable[MetricDelta]) -> dict[str, Any]:
        """Get summary statistics for a list of metric deltas."""
        deltas = list(deltas)
        changes = np.array([d.percent_change for d in deltas], dtype=float)

        counts = {direction.value: 0 for direction in Direction}
        for delta in deltas:
            counts[delta.direction.value] += 1

        return {
            "total": len(deltas),
            **counts,
            "mean_change": round2(float(changes.mean())) if changes.size else 0.0,
            "worst_change": float(changes.max()) if changes.size else 0.0,
            "regressed": [d.metric_key for d in deltas if d.direction is Direction.SLOWER],
        }


def diff(
    baseline: Snapshot,
    current: Snapshot,
    tracked_metrics: Optional[Iterable[str]] = None,
) -> list[MetricDelta]:
    """Compare two snapshots with the default or the given metric vocabulary."""
    config = ComparisonConfig()
    if tracked_metrics is not None:
        config = ComparisonConfig(tracked_metrics=tuple(tracked_metrics))
    return Comparator(config).diff(baseline, current)
