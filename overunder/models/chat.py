"""Chat and valuation report models.

Python attributes are snake_case; the persisted/wire form uses the
camelCase aliases (``companyName``, ``lastModified`` ...). Use
``to_record()`` for the stored dict and ``model_validate`` to read one back.
"""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


# -- Report vocabulary ----------------------------------------

class Recommendation(str, Enum):
    STRONG_BUY = "Strong Buy"
    BUY = "Buy"
    HOLD = "Hold"
    SELL = "Sell"
    STRONG_SELL = "Strong Sell"


class ValuationStatus(str, Enum):
    UNDERVALUED = "Undervalued"
    OVERVALUED = "Overvalued"
    FAIRLY_VALUED = "Fairly Valued"


class MetricSignal(str, Enum):
    UNDERVALUED = "undervalued"
    OVERVALUED = "overvalued"
    NEUTRAL = "neutral"


MetricValue = Union[str, int, float]


class _Record(BaseModel):
    model_config = {"populate_by_name": True, "frozen": True}

    def to_record(self) -> dict:
        """Serialize with camelCase keys, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# -- Report payload -------------------------------------------

class StockMetric(_Record):
    """One metric compared against its benchmark.

    ``signal`` is kept as the raw string the model produced; callers that
    need the enum go through ``reports.report_view.normalize_signal``.
    """

    model_config = {"extra": "allow"}

    label: str
    value: MetricValue
    benchmark: MetricValue
    signal: str
    explanation: str


class StockReportData(_Record):
    """Structured valuation report embedded in a model reply.

    Only the shape is checked. Out-of-range confidence scores and unknown
    recommendation/status strings are accepted as-is, and unknown keys are
    preserved so a parsed report dumps back to its source object.
    """

    model_config = {"extra": "allow"}

    symbol: str
    company_name: str = Field(alias="companyName")
    current_price: MetricValue = Field(alias="currentPrice")
    recommendation: str
    valuation_status: str = Field(alias="valuationStatus")
    confidence_score: Union[int, float] = Field(alias="confidenceScore")
    summary: str
    metrics: list[StockMetric]
    risk_factors: list[str] = Field(alias="riskFactors")


class GroundingCitation(_Record):
    title: str
    uri: str


# -- Chat -----------------------------------------------------

class User(_Record):
    id: str
    name: str
    email: str
    avatar_url: Optional[str] = Field(default=None, alias="avatarUrl")


class ChatMessage(_Record):
    id: str
    role: Literal["user", "model"]
    text: str = ""
    is_report: Optional[bool] = Field(default=None, alias="isReport")
    report_data: Optional[StockReportData] = Field(default=None, alias="reportData")
    is_loading: Optional[bool] = Field(default=None, alias="isLoading")
    grounding_urls: Optional[list[GroundingCitation]] = Field(
        default=None, alias="groundingUrls"
    )

    @model_validator(mode="after")
    def _check_report_flags(self) -> "ChatMessage":
        if self.is_report and self.report_data is None:
            raise ValueError("isReport requires reportData")
        if self.is_loading and self.report_data is not None:
            raise ValueError("a loading placeholder cannot carry reportData")
        return self


class ChatSession(_Record):
    id: str
    user_id: str = Field(alias="userId")
    title: str
    messages: list[ChatMessage] = Field(default_factory=list)
    created_at: int = Field(alias="createdAt")
    last_modified: int = Field(alias="lastModified")
