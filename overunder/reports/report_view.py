"""Display-ready view of a parsed report.

The extractor only checks a report's shape, so scores can be out of range
and enum-like strings can be anything the model wrote. This module maps
them onto safe values for rendering.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from overunder.models.chat import (
    GroundingCitation,
    MetricSignal,
    Recommendation,
    StockMetric,
    StockReportData,
    ValuationStatus,
)
from overunder.reports.metric_values import MetricBar, metric_bar

TOTAL_STARS = 5
TITLE_LIMIT = 30


def normalize_signal(signal: object) -> MetricSignal:
    """Map a raw metric signal to the enum; unknown values read as neutral."""
    try:
        return MetricSignal(str(signal).strip().lower())
    except ValueError:
        return MetricSignal.NEUTRAL


def _match_label(enum_cls, raw: object):
    wanted = " ".join(str(raw).split()).lower()
    for member in enum_cls:
        if member.value.lower() == wanted:
            return member
    return None


def normalize_valuation(status: object) -> Optional[ValuationStatus]:
    """Map a raw valuation status to the enum, or None if unrecognised."""
    return _match_label(ValuationStatus, status)


def normalize_recommendation(recommendation: object) -> Optional[Recommendation]:
    """Map a raw recommendation (e.g. "strong buy") to the enum, or None."""
    return _match_label(Recommendation, recommendation)


def confidence_stars(score: object) -> int:
    """Convert a 0-100 confidence score to 0-5 stars."""
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return 0
    if not math.isfinite(score):
        return 0
    # Half-up rounding, 50 reads as 3 stars
    stars = math.floor(score / 100 * TOTAL_STARS + 0.5)
    return max(0, min(TOTAL_STARS, stars))


def shorten_title(title: str, limit: int = TITLE_LIMIT) -> str:
    """Cut a title to ``limit`` characters, adding an ellipsis when cut."""
    return title[:limit] + "..." if len(title) > limit else title


@dataclass(frozen=True)
class MetricView:
    metric: StockMetric
    signal: MetricSignal
    bar: Optional[MetricBar]

    @property
    def has_bar(self) -> bool:
        return self.bar is not None


@dataclass(frozen=True)
class CitationView:
    title: str
    uri: str


@dataclass(frozen=True)
class ReportView:
    report: StockReportData
    recommendation: Optional[Recommendation]
    valuation: Optional[ValuationStatus]
    stars: int
    metrics: list[MetricView] = field(default_factory=list)


def build_metric_view(metric: StockMetric) -> MetricView:
    return MetricView(
        metric=metric,
        signal=normalize_signal(metric.signal),
        bar=metric_bar(metric),
    )


def build_report_view(report: StockReportData) -> ReportView:
    return ReportView(
        report=report,
        recommendation=normalize_recommendation(report.recommendation),
        valuation=normalize_valuation(report.valuation_status),
        stars=confidence_stars(report.confidence_score),
        metrics=[build_metric_view(m) for m in report.metrics],
    )


def build_citation_views(citations: Optional[list[GroundingCitation]]) -> list[CitationView]:
    return [
        CitationView(title=shorten_title(c.title), uri=c.uri)
        for c in citations or []
    ]
