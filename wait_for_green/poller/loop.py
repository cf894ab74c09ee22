"""Polling loop that re-evaluates both sources until a verdict."""

import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

import structlog

from wait_for_green.poller.metrics import PollMetrics
from wait_for_green.poller.state_machine import PollStateMachine
from wait_for_green.status.models import (
    AggregateStatus,
    PollOutcome,
    PollResult,
    SourceEvaluation,
)
from wait_for_green.status.protocols import ReportFetcher, ReportSink, resolve_sink
from wait_for_green.status.sources import evaluate_check_runs, evaluate_commit_statuses


logger = structlog.get_logger()


class PollLoop:
    """Polls a revision's check runs and commit statuses.

    Each attempt fetches and reduces both sources concurrently, then:
    - both SUCCESS -> stop with success
    - either FAILURE -> stop with failure
    - otherwise retry after the interval, or time out on the last attempt

    UNKNOWN never ends the loop by itself; it is retried like PENDING.
    Fetch errors are not retried and propagate out of ``run``.
    """

    def __init__(  # noqa: PLR0913
        self,
        fetcher: ReportFetcher,
        revision: str,
        check_interval: float = 10,
        max_attempts: int = 1000,
        ignored_checks: str = "",
        sink: ReportSink | None = None,
        sleep: Callable[[float], None] = time.sleep,
        metrics: PollMetrics | None = None,
        run_id: str = "",
    ) -> None:
        """Initialize the poll loop.

        Args:
            fetcher: Source of raw reports.
            revision: Revision to poll.
            check_interval: Seconds to wait between attempts.
            max_attempts: Attempts before timing out.
            ignored_checks: Ignore rule applied to both sources.
            sink: Destination for warnings and progress.
            sleep: Sleep function, injectable for tests.
            metrics: Optional metrics instance.
            run_id: Run identifier for logging.
        """
        if max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {max_attempts}"
            raise ValueError(msg)
        if check_interval < 0:
            msg = f"check_interval must not be negative, got {check_interval}"
            raise ValueError(msg)

        self._fetcher = fetcher
        self._revision = revision
        self._check_interval = check_interval
        self._max_attempts = max_attempts
        self._ignored_checks = ignored_checks
        self._sink = resolve_sink(sink)
        self._sleep = sleep
        self._metrics = metrics or PollMetrics.get_instance()
        self._run_id = run_id
        self._log = logger.bind(
            component="poller",
            run_id=run_id,
            revision=revision,
        )

    def run(self) -> PollResult:
        """Poll until a verdict is reached or attempts run out.

        Returns:
            PollResult describing the verdict.

        Raises:
            Exception: Whatever the fetcher raised; no result is produced.
        """
        state_machine = PollStateMachine(self._revision, self._run_id)
        self._log.info(
            "poll_started",
            check_interval=self._check_interval,
            max_attempts=self._max_attempts,
            ignored_checks=self._ignored_checks or None,
        )

        while True:
            attempt = state_machine.begin_attempt()
            checks, statuses = self._run_attempt(attempt)

            if (
                checks.aggregate == AggregateStatus.SUCCESS
                and statuses.aggregate == AggregateStatus.SUCCESS
            ):
                state_machine.to_succeeded()
                return self._finish(PollOutcome.SUCCEEDED, attempt, checks, statuses)

            if AggregateStatus.FAILURE in (checks.aggregate, statuses.aggregate):
                state_machine.to_failed()
                self._sink.warning(
                    "poll_failed",
                    attempt=attempt,
                    checks=checks.aggregate.value,
                    statuses=statuses.aggregate.value,
                )
                return self._finish(PollOutcome.FAILED, attempt, checks, statuses)

            if attempt >= self._max_attempts:
                state_machine.to_timed_out()
                self._sink.warning(
                    "poll_timed_out",
                    attempts=attempt,
                    checks=checks.aggregate.value,
                    statuses=statuses.aggregate.value,
                )
                return self._finish(PollOutcome.TIMED_OUT, attempt, checks, statuses)

            self._sleep(self._check_interval)

    def _run_attempt(self, attempt: int) -> tuple[SourceEvaluation, SourceEvaluation]:
        """Fetch and reduce both sources for one attempt.

        Args:
            attempt: 1-based attempt number.

        Returns:
            Tuple of (check-runs evaluation, commit-statuses evaluation).
        """
        start_time = time.monotonic()

        with ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="wait-for-green"
        ) as executor:
            checks_future = executor.submit(self._evaluate_check_runs)
            statuses_future = executor.submit(self._evaluate_commit_statuses)
            try:
                checks = checks_future.result()
                statuses = statuses_future.result()
            except Exception as e:
                self._log.error(
                    "attempt_failed",
                    attempt=attempt,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

        duration_ms = (time.monotonic() - start_time) * 1000
        self._metrics.record_attempt(duration_ms)
        for evaluation in (checks, statuses):
            self._metrics.record_aggregate(evaluation.source, evaluation.aggregate)
            self._sink.source_summary(attempt, evaluation)

        self._sink.attempt(attempt, checks.aggregate, statuses.aggregate)
        return checks, statuses

    def _evaluate_check_runs(self) -> SourceEvaluation:
        reports = self._fetcher.fetch_check_runs(self._revision)
        return evaluate_check_runs(reports, self._ignored_checks, self._sink)

    def _evaluate_commit_statuses(self) -> SourceEvaluation:
        reports = self._fetcher.fetch_commit_statuses(self._revision)
        return evaluate_commit_statuses(reports, self._ignored_checks, self._sink)

    def _finish(
        self,
        outcome: PollOutcome,
        attempt: int,
        checks: SourceEvaluation,
        statuses: SourceEvaluation,
    ) -> PollResult:
        self._metrics.record_outcome(outcome)
        result = PollResult(
            success=outcome == PollOutcome.SUCCEEDED,
            outcome=outcome,
            attempts=attempt,
            checks=checks.aggregate,
            statuses=statuses.aggregate,
        )
        self._log.info(
            "poll_finished",
            outcome=outcome.value,
            success=result.success,
            attempts=attempt,
        )
        return result
