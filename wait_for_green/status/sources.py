"""Per-source evaluation: filter, classify, deduplicate, reduce.

Each polling attempt evaluates the commit-statuses feed and the
check-runs feed independently. Everything derived here is rebuilt from
the fetched reports on every call.
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

import structlog

from wait_for_green.status.classifier import classify_check_run, classify_commit_status
from wait_for_green.status.deduper import deduplicate
from wait_for_green.status.ignore import should_ignore
from wait_for_green.status.models import (
    AggregationKey,
    CheckRunReport,
    ClassifiedReport,
    NormalizedStatus,
    RawReport,
    ReportSource,
    SourceEvaluation,
)
from wait_for_green.status.protocols import ReportSink, resolve_sink
from wait_for_green.status.reducer import reduce_statuses


logger = structlog.get_logger()

R = TypeVar("R", bound=RawReport)

Classifier = Callable[[str, str | None, ReportSink | None], NormalizedStatus]


def _evaluate(
    source: ReportSource,
    reports: Iterable[R],
    key_for: Callable[[R], AggregationKey],
    classify: Classifier,
    ignore_rule: str,
    sink: ReportSink,
) -> SourceEvaluation:
    classified: list[ClassifiedReport] = []
    ignored = 0

    for report in reports:
        if should_ignore(ignore_rule, report.name):
            ignored += 1
            continue
        classified.append(
            ClassifiedReport(
                key=key_for(report),
                timestamp=report.timestamp,
                status=classify(report.state, report.name, sink),
                url=report.url,
            )
        )

    deduped = deduplicate(classified, sink)
    aggregate = reduce_statuses(deduped.statuses, sink)

    logger.debug(
        "source_evaluated",
        component="engine",
        source=source.value,
        aggregate=aggregate.value,
        reports=deduped.original_count + ignored,
        ignored=ignored,
        dropped=deduped.dropped_count,
        superseded=deduped.superseded_count,
    )

    return SourceEvaluation(
        source=source,
        aggregate=aggregate,
        reports=deduped.reports,
        ignored_count=ignored,
        dropped_count=deduped.dropped_count,
    )


def evaluate_commit_statuses(
    reports: Iterable[RawReport],
    ignore_rule: str = "",
    sink: ReportSink | None = None,
) -> SourceEvaluation:
    """Evaluate the commit-statuses feed of a revision.

    Args:
        reports: Commit status reports in feed order.
        ignore_rule: Rule consumed by ``should_ignore``.
        sink: Destination for warnings.

    Returns:
        SourceEvaluation keyed by context name.
    """
    return _evaluate(
        ReportSource.COMMIT_STATUSES,
        reports,
        lambda report: AggregationKey(report.name),
        classify_commit_status,
        ignore_rule,
        resolve_sink(sink),
    )


def evaluate_check_runs(
    reports: Iterable[CheckRunReport],
    ignore_rule: str = "",
    sink: ReportSink | None = None,
) -> SourceEvaluation:
    """Evaluate the check-runs feed of a revision.

    Runs are keyed by (name, check suite id) so a re-run in a new suite
    is tracked separately from the stale run in the old one.

    Args:
        reports: Check run reports in feed order.
        ignore_rule: Rule consumed by ``should_ignore``.
        sink: Destination for warnings.

    Returns:
        SourceEvaluation keyed by check name and suite.
    """
    return _evaluate(
        ReportSource.CHECK_RUNS,
        reports,
        lambda report: AggregationKey(report.name, report.check_suite_id),
        classify_check_run,
        ignore_rule,
        resolve_sink(sink),
    )
