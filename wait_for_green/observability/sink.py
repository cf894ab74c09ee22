"""Default report sink backed by structlog."""

from collections.abc import Callable
from threading import Lock
from typing import Any

import structlog

from wait_for_green.status.models import (
    AggregateStatus,
    ReportSource,
    SourceEvaluation,
)


logger = structlog.get_logger()


def format_attempt_line(
    attempt: int,
    checks: AggregateStatus,
    statuses: AggregateStatus,
) -> str:
    """Format the human-readable line printed after each attempt."""
    return f"attempt {attempt}: checks={checks.value}, statuses={statuses.value}"


class LoggingSink:
    """Routes engine warnings and progress to structlog.

    Optionally echoes the attempt line through a callable (the CLI passes
    ``click.echo``) and keeps the most recent evaluation of each source
    so a summary can be rendered once polling ends.
    """

    def __init__(
        self,
        echo: Callable[[str], None] | None = None,
        run_id: str = "",
    ) -> None:
        """Initialize the sink.

        Args:
            echo: Optional callable receiving each attempt line.
            run_id: Run identifier for logging.
        """
        self._echo = echo
        self._lock = Lock()
        self._latest: dict[ReportSource, tuple[int, SourceEvaluation]] = {}
        self._log = logger.bind(component="engine", run_id=run_id)

    def warning(self, event: str, **fields: Any) -> None:
        """Log a recoverable condition at warning level."""
        self._log.warning(event, **fields)

    def attempt(
        self,
        attempt: int,
        checks: AggregateStatus,
        statuses: AggregateStatus,
    ) -> None:
        """Log, and optionally echo, the attempt line."""
        line = format_attempt_line(attempt, checks, statuses)
        self._log.info(
            "poll_attempt",
            attempt=attempt,
            checks=checks.value,
            statuses=statuses.value,
        )
        if self._echo is not None:
            self._echo(line)

    def source_summary(self, attempt: int, evaluation: SourceEvaluation) -> None:
        """Log the per-key breakdown and remember it as the latest."""
        self._log.debug(
            "source_summary",
            attempt=attempt,
            source=evaluation.source.value,
            aggregate=evaluation.aggregate.value,
            breakdown=evaluation.breakdown(),
        )
        with self._lock:
            self._latest[evaluation.source] = (attempt, evaluation)

    def latest(self) -> list[tuple[int, SourceEvaluation]]:
        """Return the most recent evaluation per source, checks first."""
        with self._lock:
            return [
                self._latest[source]
                for source in (ReportSource.CHECK_RUNS, ReportSource.COMMIT_STATUSES)
                if source in self._latest
            ]
