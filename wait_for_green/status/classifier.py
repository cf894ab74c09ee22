"""Classification of raw platform states into normalized statuses."""

from typing import Final

from wait_for_green.status.models import NormalizedStatus
from wait_for_green.status.protocols import ReportSink, resolve_sink


COMMIT_STATUS_STATES: Final[dict[str, NormalizedStatus]] = {
    "success": NormalizedStatus.SUCCESS,
    "failure": NormalizedStatus.FAILURE,
    "pending": NormalizedStatus.PENDING,
}

# Keyed by conclusion once a run has finished, by status before that
CHECK_RUN_STATES: Final[dict[str, NormalizedStatus]] = {
    "success": NormalizedStatus.SUCCESS,
    "neutral": NormalizedStatus.SUCCESS,
    "failure": NormalizedStatus.FAILURE,
    "timed_out": NormalizedStatus.FAILURE,
    "pending": NormalizedStatus.PENDING,
    "action_required": NormalizedStatus.PENDING,
    "queued": NormalizedStatus.PENDING,
    "in_progress": NormalizedStatus.PENDING,
    "skipped": NormalizedStatus.SKIPPED,
    "canceled": NormalizedStatus.CANCELED,
    "cancelled": NormalizedStatus.CANCELED,
}


def _classify(
    table: dict[str, NormalizedStatus],
    raw: str,
    kind: str,
    name: str | None,
    sink: ReportSink | None,
) -> NormalizedStatus:
    status = table.get(raw)
    if status is not None:
        return status

    resolve_sink(sink).warning("unknown_status", kind=kind, raw_state=raw, name=name)
    return NormalizedStatus.UNKNOWN


def classify_commit_status(
    raw: str,
    name: str | None = None,
    sink: ReportSink | None = None,
) -> NormalizedStatus:
    """Map a commit status state to a normalized status.

    Unrecognized states (including ``error``) map to UNKNOWN and are
    surfaced as a warning; this never raises.

    Args:
        raw: Raw commit status state.
        name: Context name, included in the warning.
        sink: Destination for the warning.

    Returns:
        Normalized status.
    """
    return _classify(COMMIT_STATUS_STATES, raw, "commit_status", name, sink)


def classify_check_run(
    raw: str,
    name: str | None = None,
    sink: ReportSink | None = None,
) -> NormalizedStatus:
    """Map a check run conclusion (or status) to a normalized status.

    Args:
        raw: Conclusion if the run has one, otherwise its status.
        name: Check name, included in the warning.
        sink: Destination for the warning.

    Returns:
        Normalized status.
    """
    return _classify(CHECK_RUN_STATES, raw, "check_run", name, sink)
