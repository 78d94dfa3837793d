"""Unit tests for the analysis metrics."""

import pytest

from metrics.analysis import (
    AnalysisMetrics,
    analysis_metrics,
    record_medication_alerts,
    record_parse_outcome,
    snapshot,
    time_request,
)


class TestTimeRequest:
    """Test the timing context manager."""

    def test_completed(self) -> None:
        with time_request("analysis"):
            pass

        assert analysis_metrics.count("analysis_requests_total", endpoint="analysis", status="completed") == 1
        assert analysis_metrics.latency("analysis").count == 1
        assert "analysis" in snapshot()["latency"]

    def test_failed(self) -> None:
        with pytest.raises(RuntimeError):
            with time_request("summarize"):
                raise RuntimeError("boom")

        assert analysis_metrics.count("analysis_requests_total", endpoint="summarize", status="failed") == 1
        assert analysis_metrics.count("analysis_errors_total", endpoint="summarize", code="RuntimeError") == 1
        assert analysis_metrics.latency("summarize").count == 1


class TestCounters:
    """Test counter helpers."""

    def test_parse_outcome(self) -> None:
        record_parse_outcome("parsed")
        record_parse_outcome("parsed")
        record_parse_outcome("empty")

        assert analysis_metrics.count("analysis_parse_total", outcome="parsed") == 2
        assert analysis_metrics.count("analysis_parse_total", outcome="empty") == 1

    def test_medication_alerts_zero_not_recorded(self) -> None:
        record_medication_alerts(0)
        assert analysis_metrics.count("analysis_medication_alerts_total") == 0
        assert snapshot()["counters"] == []

        record_medication_alerts(3)
        assert analysis_metrics.count("analysis_medication_alerts_total") == 3


class TestAnalysisMetrics:
    """Test the metrics store."""

    def test_tags_distinguish_series(self) -> None:
        local = AnalysisMetrics()
        local.increment("c", a="1")
        local.increment("c", 5, a="2")

        assert local.count("c", a="1") == 1
        assert local.count("c", a="2") == 5
        assert local.count("c") == 0

    def test_latency_window(self) -> None:
        local = AnalysisMetrics(latency_window=3)
        for value in (10.0, 40.0, 20.0, 30.0):
            local.observe_latency("history", value)

        summary = local.latency("history")
        assert summary.count == 3
        assert summary.avg_ms == 30.0
        assert summary.max_ms == 40.0
        assert summary.last_ms == 30.0

    def test_unknown_endpoint_latency(self) -> None:
        assert AnalysisMetrics().latency("analysis").count == 0

    def test_reset(self) -> None:
        local = AnalysisMetrics()
        local.increment("c")
        local.observe_latency("analysis", 5.0)
        local.reset()

        assert local.snapshot() == {"counters": [], "latency": {}}
