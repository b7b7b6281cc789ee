"""Report extraction and display helpers."""

from .report_extractor import (
    REPORT_FALLBACK_TEXT,
    ExtractionResult,
    extract_report,
)
from .metric_values import MetricBar, metric_bar, parse_value
from .report_view import (
    ReportView,
    build_report_view,
    confidence_stars,
    normalize_recommendation,
    normalize_signal,
    normalize_valuation,
)

__all__ = [
    # Extractor
    "extract_report",
    "ExtractionResult",
    "REPORT_FALLBACK_TEXT",
    # Metric values
    "parse_value",
    "metric_bar",
    "MetricBar",
    # View
    "build_report_view",
    "ReportView",
    "confidence_stars",
    "normalize_recommendation",
    "normalize_signal",
    "normalize_valuation",
]
