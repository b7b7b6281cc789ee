"""Pull a structured valuation report out of free-form model text.

The model is instructed to wrap its report JSON in a fence labelled
``json_report``::

    Here is my analysis.
    ```json_report
    {"symbol": "AAPL", ...}
    ```

Only the first such fence is considered. Ordinary code fences
(```` ```json ````, ```` ```python ````) are left alone.
"""

import json
import re
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from overunder.errors import ReportParseError
from overunder.models.chat import StockReportData
from overunder.utils.logger import get_logger

logger = get_logger(__name__)

REPORT_FENCE_LABEL = "json_report"
REPORT_FALLBACK_TEXT = "Here is the valuation report based on the latest market data."

_REPORT_FENCE_RE = re.compile(
    r"```" + REPORT_FENCE_LABEL + r"\s*([\s\S]*?)\s*```"
)


@dataclass(frozen=True)
class ExtractionResult:
    """Display text plus the parsed report, if any."""
    clean_text: str
    report_data: Optional[StockReportData] = None

    @property
    def is_report(self) -> bool:
        return self.report_data is not None


def parse_report_payload(payload: str) -> StockReportData:
    """Parse the inner content of a report fence.

    Raises:
        ReportParseError: payload is not JSON or not shaped like a report
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ReportParseError(f"invalid JSON: {e}") from e

    try:
        return StockReportData.model_validate(data)
    except ValidationError as e:
        raise ReportParseError(
            f"{e.error_count()} structural error(s): {e.errors()[0]['msg']}"
        ) from e


def extract_report(text: str) -> ExtractionResult:
    """Split a model reply into display text and an optional report.

    - No report fence: the text is returned verbatim.
    - Valid fence: the fence is cut out and the rest trimmed; an empty
      remainder is replaced by ``REPORT_FALLBACK_TEXT``.
    - Malformed fence: the failure is logged and the original, uncut text
      is returned without a report.
    """
    match = _REPORT_FENCE_RE.search(text)
    if match is None:
        return ExtractionResult(clean_text=text)

    try:
        report = parse_report_payload(match.group(1))
    except ReportParseError as e:
        logger.warning("Failed to parse stock report payload: {}", e)
        return ExtractionResult(clean_text=text)

    start, end = match.span()
    clean_text = (text[:start] + text[end:]).strip()
    if not clean_text:
        clean_text = REPORT_FALLBACK_TEXT

    logger.debug("Extracted report for {}", report.symbol)
    return ExtractionResult(clean_text=clean_text, report_data=report)
