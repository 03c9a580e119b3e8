"""
Human-readable output for metric deltas.

Lines are written to a :class:`rich.console.Console` so colours are dropped
automatically when output is not a terminal.
"""
from __future__ import annotations

from typing import Iterable, Mapping, Optional

from rich.console import Console
from rich.text import Text

from .comparator import Direction, MetricDelta

NO_COMPARISON_MESSAGE = "No comparison available"
NO_COMPARABLE_METRICS_MESSAGE = "No comparable metrics"

_DIRECTION_COLOURS: dict[Direction, str] = {
    Direction.SLOWER: "red",
    Direction.FASTER: "green",
    Direction.UNCHANGED: "white",
}


def format_percent(value: float) -> str:
    """Absolute percentage without trailing zeros: 20.0 -> '20', 12.30 -> '12.3'."""
    text = f"{abs(value):.2f}".rstrip("0").rstrip(".")
    return f"{text}%"


def describe_delta(delta: MetricDelta) -> str:
    """Describe a delta as e.g. '12.34% slower' or 'unchanged'."""
    if delta.direction is Direction.UNCHANGED:
        return Direction.UNCHANGED.value
    return f"{format_percent(delta.percent_change)} {delta.direction.value}"


def format_delta(delta: MetricDelta, title: Optional[str] = None) -> str:
    """One line for a delta, e.g. 'First Contentful Paint is 20% slower'."""
    return f"{title or delta.metric_key} is {describe_delta(delta)}"


def render_deltas(
    console: Console,
    deltas: Iterable[MetricDelta],
    titles: Optional[Mapping[str, str]] = None,
) -> int:
    """Print one coloured line per delta and return the number printed."""
    titles = titles or {}
    count = 0
    for delta in deltas:
        line = format_delta(delta, titles.get(delta.metric_key))
        console.print(Text(line, style=_DIRECTION_COLOURS[delta.direction]))
        count += 1
    return count


def render_no_comparison(console: Console) -> None:
    console.print(Text(NO_COMPARISON_MESSAGE, style="dim"))


def render_no_comparable_metrics(console: Console) -> None:
    console.print(Text(NO_COMPARABLE_METRICS_MESSAGE, style="dim"))
