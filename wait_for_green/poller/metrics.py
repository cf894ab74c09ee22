"""Metrics collection for polling sessions."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock

from wait_for_green.status.models import AggregateStatus, PollOutcome, ReportSource


# Module-level singleton state
_metrics_instance: "PollMetrics | None" = None
_metrics_lock: Lock = Lock()


@dataclass
class PollMetrics:
    """Thread-safe metrics for polling sessions.

    Tracks attempts, aggregates per source, and terminal outcomes.
    Use get_instance() for singleton access.
    """

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    attempts_total: int = 0

    # Aggregates by (source, status)
    aggregates: Counter[tuple[str, str]] = field(default_factory=Counter)

    # Terminal outcomes
    outcomes: Counter[str] = field(default_factory=Counter)

    attempt_duration_ms_total: float = 0.0

    @classmethod
    def get_instance(cls) -> "PollMetrics":
        """Get the singleton instance (thread-safe).

        Returns:
            The shared PollMetrics instance.
        """
        global _metrics_instance  # noqa: PLW0603
        if _metrics_instance is None:
            with _metrics_lock:
                if _metrics_instance is None:
                    _metrics_instance = cls()
        return _metrics_instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (for testing)."""
        global _metrics_instance  # noqa: PLW0603
        with _metrics_lock:
            _metrics_instance = None

    def record_attempt(self, duration_ms: float) -> None:
        """Record one completed attempt.

        Args:
            duration_ms: Time spent fetching and reducing both sources.
        """
        with self._lock:
            self.attempts_total += 1
            self.attempt_duration_ms_total += duration_ms

    def record_aggregate(self, source: ReportSource, status: AggregateStatus) -> None:
        """Record the aggregate computed for a source.

        Args:
            source: Reporting source.
            status: Its aggregate status.
        """
        with self._lock:
            self.aggregates[(source.value, status.value)] += 1

    def record_outcome(self, outcome: PollOutcome) -> None:
        """Record how a polling session terminated.

        Args:
            outcome: Terminating reason.
        """
        with self._lock:
            self.outcomes[outcome.value] += 1

    def to_prometheus_format(self) -> str:
        """Export metrics in Prometheus text format.

        Returns:
            Prometheus-formatted metrics string.
        """
        lines: list[str] = []

        with self._lock:
            lines.append("# HELP poll_attempts_total Total polling attempts")
            lines.append("# TYPE poll_attempts_total counter")
            lines.append(f"poll_attempts_total {self.attempts_total}")

            lines.append("# HELP poll_aggregates_total Aggregates by source and status")
            lines.append("# TYPE poll_aggregates_total counter")
            for (source, status), count in sorted(self.aggregates.items()):
                lines.append(
                    f'poll_aggregates_total{{source="{source}",status="{status}"}} '
                    f"{count}"
                )

            lines.append("# HELP poll_outcomes_total Polling sessions by outcome")
            lines.append("# TYPE poll_outcomes_total counter")
            for outcome, count in sorted(self.outcomes.items()):
                lines.append(f'poll_outcomes_total{{outcome="{outcome}"}} {count}')

        return "\n".join(lines)

    def to_dict(self) -> dict[str, object]:
        """Export metrics as dictionary.

        Returns:
            Dictionary representation of all metrics.
        """
        with self._lock:
            return {
                "attempts_total": self.attempts_total,
                "attempt_duration_ms_total": round(self.attempt_duration_ms_total, 2),
                "aggregates": {f"{s}:{t}": c for (s, t), c in self.aggregates.items()},
                "outcomes": dict(self.outcomes),
            }
