"""Tests for numeric reading of metric values."""

import pytest

from overunder.models.chat import StockMetric
from overunder.reports.metric_values import (
    DEFAULT_SCALE,
    is_inverse_metric,
    metric_bar,
    parse_value,
)


def _metric(label="P/E Ratio", value="20", benchmark="25") -> StockMetric:
    return StockMetric(
        label=label,
        value=value,
        benchmark=benchmark,
        signal="neutral",
        explanation="",
    )


class TestParseValue:
    @pytest.mark.parametrize("raw, expected", [
        ("$150.20", 150.2),
        ("25.4x", 25.4),
        ("12%", 12.0),
        ("Industry Avg 28.0", 28.0),
        ("$1,234.50", 1234.5),
        ("-3.5%", -3.5),
        ("0", 0.0),
        ("0.00x", 0.0),
        (42, 42.0),
        (0.75, 0.75),
        ("P/E 15 vs 20", 15.0),
    ])
    def test_parsable(self, raw, expected):
        assert parse_value(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [
        "N/A",
        "",
        "negative earnings",
        None,
        True,
        float("nan"),
        float("inf"),
    ])
    def test_unparsable(self, raw):
        assert parse_value(raw) is None


class TestInverseMetric:
    @pytest.mark.parametrize("label", [
        "Dividend Yield", "Net Margin", "Revenue Growth", "FCF yield",
    ])
    def test_inverse(self, label):
        assert is_inverse_metric(label)

    @pytest.mark.parametrize("label", ["P/E Ratio", "PEG Ratio", "P/B Ratio"])
    def test_standard(self, label):
        assert not is_inverse_metric(label)


class TestMetricBar:
    def test_positions(self):
        """Scale is 1.5x the larger value."""
        bar = metric_bar(_metric(value="20", benchmark="30"))

        assert bar.scale == pytest.approx(45.0)
        assert bar.value_pct == pytest.approx(20 / 45 * 100)
        assert bar.benchmark_pct == pytest.approx(30 / 45 * 100)
        assert not bar.inverse

    def test_inverse_flag(self):
        bar = metric_bar(_metric(label="Dividend Yield", value="2%", benchmark="3%"))
        assert bar.inverse

    def test_zero_values_use_default_scale(self):
        bar = metric_bar(_metric(value="0", benchmark=0))

        assert bar.scale == DEFAULT_SCALE
        assert bar.value_pct == 0.0
        assert bar.benchmark_pct == 0.0

    def test_negative_value_clamped(self):
        bar = metric_bar(_metric(value="-5", benchmark="10"))

        assert bar.value_pct == 0.0
        assert 0.0 <= bar.benchmark_pct <= 100.0

    @pytest.mark.parametrize("value, benchmark", [
        ("N/A", "25"),
        ("20", "not meaningful"),
        ("N/A", "N/A"),
    ])
    def test_unparsable_gives_no_bar(self, value, benchmark):
        assert metric_bar(_metric(value=value, benchmark=benchmark)) is None
