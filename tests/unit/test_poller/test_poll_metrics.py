"""Unit tests for poll metrics."""

from wait_for_green.poller.metrics import PollMetrics
from wait_for_green.status.models import AggregateStatus, PollOutcome, ReportSource


class TestPollMetrics:
    """Tests for PollMetrics."""

    def setup_method(self) -> None:
        """Reset metrics before each test."""
        PollMetrics.reset()

    def test_singleton(self) -> None:
        """get_instance returns the same object until reset."""
        first = PollMetrics.get_instance()
        assert PollMetrics.get_instance() is first
        PollMetrics.reset()
        assert PollMetrics.get_instance() is not first

    def test_to_dict(self) -> None:
        """Recorded values are exported."""
        metrics = PollMetrics()
        metrics.record_attempt(12.5)
        metrics.record_attempt(7.5)
        metrics.record_aggregate(ReportSource.CHECK_RUNS, AggregateStatus.PENDING)
        metrics.record_outcome(PollOutcome.SUCCEEDED)

        assert metrics.to_dict() == {
            "attempts_total": 2,
            "attempt_duration_ms_total": 20.0,
            "aggregates": {"checks:pending": 1},
            "outcomes": {"succeeded": 1},
        }

    def test_prometheus_format(self) -> None:
        """Prometheus export includes labelled counters."""
        metrics = PollMetrics()
        metrics.record_attempt(1.0)
        metrics.record_aggregate(ReportSource.COMMIT_STATUSES, AggregateStatus.FAILURE)
        metrics.record_outcome(PollOutcome.FAILED)

        output = metrics.to_prometheus_format()

        assert "poll_attempts_total 1" in output
        assert 'poll_aggregates_total{source="statuses",status="failure"} 1' in output
        assert 'poll_outcomes_total{outcome="failed"} 1' in output
