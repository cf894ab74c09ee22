"""Reduction of per-key statuses into one aggregate verdict."""

from collections.abc import Mapping

from wait_for_green.status.models import (
    AggregateStatus,
    AggregationKey,
    NormalizedStatus,
)
from wait_for_green.status.protocols import ReportSink, resolve_sink


_FAILING = frozenset({NormalizedStatus.FAILURE, NormalizedStatus.CANCELED})
_PASSING = frozenset({NormalizedStatus.SUCCESS, NormalizedStatus.SKIPPED})


def reduce_statuses(
    statuses: Mapping[AggregationKey, NormalizedStatus],
    sink: ReportSink | None = None,
) -> AggregateStatus:
    """Combine per-key statuses by fixed precedence.

    1. Any FAILURE or CANCELED -> FAILURE.
    2. Any PENDING -> PENDING.
    3. Only SUCCESS or SKIPPED, or nothing at all -> SUCCESS.
    4. Otherwise an UNKNOWN survived -> UNKNOWN, with a warning carrying
       the full per-key breakdown.

    Args:
        statuses: Surviving status per aggregation key.
        sink: Destination for the unknown-aggregate warning.

    Returns:
        Aggregate status.
    """
    values = set(statuses.values())

    if values & _FAILING:
        return AggregateStatus.FAILURE

    if NormalizedStatus.PENDING in values:
        return AggregateStatus.PENDING

    if values <= _PASSING:
        return AggregateStatus.SUCCESS

    resolve_sink(sink).warning(
        "unknown_aggregate",
        breakdown={key.label(): status.value for key, status in statuses.items()},
    )
    return AggregateStatus.UNKNOWN
