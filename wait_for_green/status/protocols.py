"""Protocol interfaces for the aggregation engine's collaborators."""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from wait_for_green.status.models import (
    AggregateStatus,
    CheckRunReport,
    RawReport,
    SourceEvaluation,
)


@runtime_checkable
class ReportSink(Protocol):
    """Destination for warnings and human-readable progress.

    Injected into the engine instead of writing to process-wide state,
    so aggregation can be tested without capturing output.
    """

    def warning(self, event: str, **fields: Any) -> None:
        """Surface a recoverable condition."""
        ...

    def attempt(
        self,
        attempt: int,
        checks: AggregateStatus,
        statuses: AggregateStatus,
    ) -> None:
        """Report the aggregates computed by one polling attempt."""
        ...

    def source_summary(self, attempt: int, evaluation: SourceEvaluation) -> None:
        """Report the per-key breakdown of one source for one attempt."""
        ...


@runtime_checkable
class ReportFetcher(Protocol):
    """Fetches raw reports for a revision.

    Implementations raise on network, authentication or response-shape
    failures; the poll loop does not retry them.
    """

    def fetch_commit_statuses(self, revision: str) -> Sequence[RawReport]:
        """Fetch every commit status reported for a revision."""
        ...

    def fetch_check_runs(self, revision: str) -> Sequence[CheckRunReport]:
        """Fetch every check run reported for a revision."""
        ...


def resolve_sink(sink: ReportSink | None) -> ReportSink:
    """Return the given sink, or the structlog-backed default."""
    if sink is not None:
        return sink

    # Import here to avoid a circular import with the observability package
    from wait_for_green.observability.sink import LoggingSink

    return LoggingSink()
