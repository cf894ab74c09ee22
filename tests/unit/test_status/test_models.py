"""Unit tests for status aggregation models."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from wait_for_green.status.models import (
    AggregateStatus,
    AggregationKey,
    CheckRunReport,
    ClassifiedReport,
    NormalizedStatus,
    PollOutcome,
    PollResult,
    RawReport,
    ReportSource,
    SourceEvaluation,
)


class TestRawReport:
    """Tests for RawReport."""

    def test_naive_timestamp_assumed_utc(self) -> None:
        """Naive timestamps compare with aware ones."""
        report = RawReport(name="ci", state="success", timestamp=datetime(2024, 1, 1))
        assert report.timestamp is not None
        assert report.timestamp.utcoffset() is not None

    def test_frozen(self) -> None:
        """Reports are immutable."""
        report = RawReport(name="ci", state="success")
        with pytest.raises(ValidationError):
            report.state = "failure"  # type: ignore[misc]

    def test_check_run_requires_suite(self) -> None:
        """Check runs must name their check suite."""
        with pytest.raises(ValidationError):
            CheckRunReport(name="build", state="success")  # type: ignore[call-arg]


class TestAggregationKey:
    """Tests for AggregationKey."""

    def test_label_without_suite(self) -> None:
        """Commit status keys are just the context."""
        assert AggregationKey("ci/lint").label() == "ci/lint"

    def test_label_with_suite(self) -> None:
        """Check run keys mention the suite."""
        assert AggregationKey("build", 42).label() == "build (suite 42)"

    def test_suite_distinguishes_keys(self) -> None:
        """Same name in different suites are different keys."""
        assert AggregationKey("build", 1) != AggregationKey("build", 2)


class TestSourceEvaluation:
    """Tests for SourceEvaluation."""

    def test_breakdown(self) -> None:
        """Breakdown maps labels to status values."""
        key = AggregationKey("build", 3)
        evaluation = SourceEvaluation(
            source=ReportSource.CHECK_RUNS,
            aggregate=AggregateStatus.PENDING,
            reports={
                key: ClassifiedReport(
                    key=key, timestamp=None, status=NormalizedStatus.PENDING
                )
            },
        )
        assert evaluation.breakdown() == {"build (suite 3)": "pending"}


class TestPollResult:
    """Tests for PollResult."""

    def test_attempts_must_be_positive(self) -> None:
        """A result always follows at least one attempt."""
        with pytest.raises(ValidationError):
            PollResult(
                success=False,
                outcome=PollOutcome.TIMED_OUT,
                attempts=0,
                checks=AggregateStatus.PENDING,
                statuses=AggregateStatus.SUCCESS,
            )
