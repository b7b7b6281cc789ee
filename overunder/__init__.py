"""OverUnder: conversational stock valuation reports with persisted chat sessions."""

__version__ = "0.1.0"
