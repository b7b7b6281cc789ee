"""Chat session and valuation report models."""

from .chat import (
    ChatMessage,
    ChatSession,
    GroundingCitation,
    MetricSignal,
    Recommendation,
    StockMetric,
    StockReportData,
    User,
    ValuationStatus,
)

__all__ = [
    # Chat
    "User",
    "ChatSession",
    "ChatMessage",
    "GroundingCitation",
    # Report
    "StockReportData",
    "StockMetric",
    "Recommendation",
    "ValuationStatus",
    "MetricSignal",
]
