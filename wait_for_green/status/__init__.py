"""Status aggregation engine.

Reduces commit statuses and check runs reported for a revision into
one aggregate verdict per source.
"""

from wait_for_green.status.classifier import classify_check_run, classify_commit_status
from wait_for_green.status.deduper import DeduplicationResult, deduplicate
from wait_for_green.status.ignore import should_ignore
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
from wait_for_green.status.protocols import ReportFetcher, ReportSink
from wait_for_green.status.reducer import reduce_statuses
from wait_for_green.status.sources import evaluate_check_runs, evaluate_commit_statuses


__all__ = [
    "AggregateStatus",
    "AggregationKey",
    "CheckRunReport",
    "ClassifiedReport",
    "DeduplicationResult",
    "NormalizedStatus",
    "PollOutcome",
    "PollResult",
    "RawReport",
    "ReportFetcher",
    "ReportSink",
    "ReportSource",
    "SourceEvaluation",
    "classify_check_run",
    "classify_commit_status",
    "deduplicate",
    "evaluate_check_runs",
    "evaluate_commit_statuses",
    "reduce_statuses",
    "should_ignore",
]
