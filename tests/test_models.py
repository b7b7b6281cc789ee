"""Tests for chat and report models."""

import pytest
from pydantic import ValidationError

from overunder.models.chat import (
    ChatMessage,
    ChatSession,
    StockReportData,
    User,
)


def _report_payload() -> dict:
    return {
        "symbol": "MSFT",
        "companyName": "Microsoft Corporation",
        "currentPrice": "$410.00",
        "recommendation": "Hold",
        "valuationStatus": "Fairly Valued",
        "confidenceScore": 70,
        "summary": "Fairly priced.",
        "metrics": [
            {
                "label": "P/E Ratio",
                "value": 35.2,
                "benchmark": "Industry Avg 30.1",
                "signal": "overvalued",
                "explanation": "Premium to peers.",
            }
        ],
        "riskFactors": ["Regulation"],
    }


class TestUser:
    def test_camel_case_record(self):
        user = User(id="u1", name="Ann", email="ann@example.com", avatar_url="http://a/b.png")

        assert user.to_record() == {
            "id": "u1",
            "name": "Ann",
            "email": "ann@example.com",
            "avatarUrl": "http://a/b.png",
        }

    def test_avatar_optional(self):
        user = User.model_validate({"id": "u1", "name": "Ann", "email": "a@b.c"})
        assert user.avatar_url is None
        assert "avatarUrl" not in user.to_record()


class TestStockReportData:
    def test_parses_camel_case(self):
        report = StockReportData.model_validate(_report_payload())

        assert report.company_name == "Microsoft Corporation"
        assert report.confidence_score == 70
        assert report.metrics[0].value == 35.2
        assert report.metrics[0].benchmark == "Industry Avg 30.1"

    def test_dump_matches_source(self):
        payload = _report_payload()
        payload["sector"] = "Technology"

        report = StockReportData.model_validate(payload)

        assert report.model_dump(by_alias=True) == payload

    def test_missing_field_rejected(self):
        payload = _report_payload()
        del payload["metrics"]

        with pytest.raises(ValidationError):
            StockReportData.model_validate(payload)

    def test_immutable(self):
        report = StockReportData.model_validate(_report_payload())
        with pytest.raises(ValidationError):
            report.symbol = "AAPL"


class TestChatMessage:
    def test_report_flag_requires_data(self):
        with pytest.raises(ValidationError):
            ChatMessage(id="m1", role="model", text="x", is_report=True)

    def test_loading_cannot_carry_report(self):
        report = StockReportData.model_validate(_report_payload())
        with pytest.raises(ValidationError):
            ChatMessage(id="m1", role="model", is_loading=True, report_data=report)

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            ChatMessage(id="m1", role="system", text="x")

    def test_record_omits_unset_fields(self):
        message = ChatMessage(id="m1", role="user", text="hi")
        assert message.to_record() == {"id": "m1", "role": "user", "text": "hi"}


class TestChatSession:
    def test_record_round_trip(self):
        report = StockReportData.model_validate(_report_payload())
        session = ChatSession(
            id="s1",
            user_id="u1",
            title="MSFT",
            messages=[
                ChatMessage(id="m1", role="user", text="MSFT?"),
                ChatMessage(id="m2", role="model", text="Report", is_report=True, report_data=report),
            ],
            created_at=1,
            last_modified=2,
        )

        record = session.to_record()

        assert record["userId"] == "u1"
        assert record["lastModified"] == 2
        assert record["messages"][1]["reportData"]["symbol"] == "MSFT"
        assert ChatSession.model_validate(record) == session
