"""Deduplication of repeated reports for the same aggregation key.

Platforms keep every report ever posted for a revision: a re-run check
or an updated commit status appears alongside the stale entry. Only the
report with the latest timestamp per key takes part in reduction.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from wait_for_green.status.models import (
    AggregationKey,
    ClassifiedReport,
    NormalizedStatus,
)
from wait_for_green.status.protocols import ReportSink, resolve_sink


@dataclass
class DeduplicationResult:
    """Result of deduplicating one source's reports.

    Attributes:
        reports: Surviving report per aggregation key.
        original_count: Reports received.
        dropped_count: Reports dropped for lack of a timestamp.
        superseded_count: Reports replaced by a later one.
    """

    reports: dict[AggregationKey, ClassifiedReport] = field(default_factory=dict)
    original_count: int = 0
    dropped_count: int = 0
    superseded_count: int = 0

    @property
    def statuses(self) -> dict[AggregationKey, NormalizedStatus]:
        """Surviving normalized status per key."""
        return {key: report.status for key, report in self.reports.items()}


def deduplicate(
    reports: Iterable[ClassifiedReport],
    sink: ReportSink | None = None,
) -> DeduplicationResult:
    """Keep the most recent report per aggregation key.

    A report replaces the current survivor only when its timestamp is
    strictly later, so on equal timestamps the first report seen in feed
    order wins. Reports without a timestamp cannot be ordered and are
    dropped with a warning.

    Args:
        reports: Classified reports in feed order.
        sink: Destination for missing-timestamp warnings.

    Returns:
        DeduplicationResult with one report per key.
    """
    result = DeduplicationResult()

    for report in reports:
        result.original_count += 1

        if report.timestamp is None:
            result.dropped_count += 1
            resolve_sink(sink).warning(
                "report_missing_timestamp",
                name=report.key.label(),
                status=report.status.value,
            )
            continue

        current = result.reports.get(report.key)
        if current is None:
            result.reports[report.key] = report
            continue

        result.superseded_count += 1
        # current always carries a timestamp; untimed reports never get stored
        if current.timestamp is not None and report.timestamp > current.timestamp:
            result.reports[report.key] = report

    return result
