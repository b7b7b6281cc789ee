"""Numeric reading of free-form metric values.

Models report metric values as strings like ``"$150.20"``, ``"25.4x"``,
``"12%"`` or ``"Industry Avg 28.0"``, or as plain numbers. Nothing here
raises: a value without a number reads as None and the caller falls back to
showing the raw text.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional, Union

from overunder.models.chat import StockMetric

_NUMBER_RE = re.compile(r"-?\d+(\.\d+)?")

# Labels where a higher company value is the favourable side of the bar
INVERSE_METRIC_KEYWORDS = ("dividend", "yield", "margin", "growth")

# Bar scale headroom over the larger of value/benchmark
SCALE_PADDING = 1.5
DEFAULT_SCALE = 10.0


def parse_value(value: Union[str, int, float, None]) -> Optional[float]:
    """Read the first number out of a metric value.

    >>> parse_value("$1,150.20")
    1150.2
    >>> parse_value("N/A") is None
    True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None

    match = _NUMBER_RE.search(str(value).replace(",", ""))
    if match is None:
        return None
    return float(match.group(0))


def is_inverse_metric(label: str) -> bool:
    """True when a higher value is the favourable reading (yields, margins)."""
    lowered = label.lower()
    return any(keyword in lowered for keyword in INVERSE_METRIC_KEYWORDS)


def _clamp_pct(number: float) -> float:
    return min(max(number, 0.0), 100.0)


@dataclass(frozen=True)
class MetricBar:
    """Positions of a company value and its benchmark on a 0-100 track."""
    value: float
    benchmark: float
    scale: float
    value_pct: float
    benchmark_pct: float
    inverse: bool


def metric_bar(metric: StockMetric) -> Optional[MetricBar]:
    """Lay out a metric on a range bar.

    Returns None when either the value or the benchmark has no number in it,
    in which case the metric should be shown as plain text.
    """
    value = parse_value(metric.value)
    benchmark = parse_value(metric.benchmark)
    if value is None or benchmark is None:
        return None

    scale = max(value, benchmark) * SCALE_PADDING or DEFAULT_SCALE

    return MetricBar(
        value=value,
        benchmark=benchmark,
        scale=scale,
        value_pct=_clamp_pct(value / scale * 100),
        benchmark_pct=_clamp_pct(benchmark / scale * 100),
        inverse=is_inverse_metric(metric.label),
    )
