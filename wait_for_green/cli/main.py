"""CLI commands for waiting on a revision to become green."""

import sys
import uuid

import click
import structlog

from wait_for_green.github.client import GitHubClient
from wait_for_green.github.errors import GitHubFetchError
from wait_for_green.observability.logging import bind_run_context, configure_logging
from wait_for_green.observability.sink import LoggingSink
from wait_for_green.poller.loop import PollLoop
from wait_for_green.poller.metrics import PollMetrics
from wait_for_green.settings.app import ActionSettings, load_settings
from wait_for_green.settings.errors import ConfigurationError
from wait_for_green.summary.outputs import ActionOutputs
from wait_for_green.summary.renderer import SummaryRenderer


logger = structlog.get_logger()

COMPONENT_CLI = "cli"
OUTPUT_SUCCESS = "success"


def _setup_logging(
    run_id: str, json_logs: bool, verbose: bool
) -> structlog.typing.FilteringBoundLogger:
    """Set up logging and return a bound logger.

    Args:
        run_id: Unique run identifier.
        json_logs: Whether to emit JSON logs.
        verbose: Whether to log at DEBUG level.

    Returns:
        Bound logger with run context.
    """
    configure_logging(verbose=verbose, json_format=json_logs)
    bind_run_context(run_id)
    return logger.bind(component=COMPONENT_CLI)  # type: ignore[no-any-return]


def _load_or_exit(
    log: structlog.typing.FilteringBoundLogger, **overrides: object
) -> ActionSettings:
    """Load settings, printing every field error and exiting on failure."""
    try:
        return load_settings(**overrides)
    except ConfigurationError as e:
        log.warning("config_invalid", errors=e.errors)
        click.echo("Configuration validation failed:", err=True)
        for formatted in e.formatted():
            click.echo(f"  - {formatted}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version="2.0.0")
def cli() -> None:
    """Wait for commit statuses and check runs to become green."""


@cli.command()
@click.option("--token", default=None, help="GitHub token (INPUT_TOKEN).")
@click.option(
    "--commit",
    default=None,
    help="Revision to check (INPUT_COMMIT, falls back to GITHUB_SHA).",
)
@click.option(
    "--repository",
    default=None,
    help="Repository as owner/repo (GITHUB_REPOSITORY).",
)
@click.option(
    "--ignored-checks",
    default=None,
    help="Comma-separated names, or a /regex/, to leave out.",
)
@click.option(
    "--check-interval",
    default=None,
    help="Seconds between attempts (default: 10).",
)
@click.option(
    "--max-attempts",
    default=None,
    help="Attempts before timing out (default: 1000).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Output logs in JSON format.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose logging.",
)
def run(  # noqa: PLR0913
    token: str | None,
    commit: str | None,
    repository: str | None,
    ignored_checks: str | None,
    check_interval: str | None,
    max_attempts: str | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Poll until the revision is green, red, or attempts run out.

    Sets the 'success' step output to true or false. Exits non-zero only
    on configuration or fetch errors.
    """
    run_id = str(uuid.uuid4())
    log = _setup_logging(run_id, json_logs, verbose)

    # Numeric options stay strings so the settings layer reports bad values
    settings = _load_or_exit(
        log,
        token=token,
        commit=commit,
        repository=repository,
        ignored_checks=ignored_checks,
        check_interval=check_interval,
        max_attempts=max_attempts,
    )
    revision = settings.revision or ""
    bind_run_context(run_id, repository=settings.repository, revision=revision)
    log.info(
        "wait_started",
        check_interval=settings.check_interval,
        max_attempts=settings.max_attempts,
        ignored_checks=settings.ignored_checks or None,
    )

    sink = LoggingSink(echo=click.echo, run_id=run_id)
    outputs = ActionOutputs(
        output_path=settings.output_path,
        step_summary_path=settings.step_summary_path,
        run_id=run_id,
    )
    metrics = PollMetrics.get_instance()

    try:
        with GitHubClient(
            token=settings.token,
            repository=settings.repository,
            api_url=settings.api_url,
            run_id=run_id,
        ) as client:
            result = PollLoop(
                fetcher=client,
                revision=revision,
                check_interval=settings.check_interval,
                max_attempts=settings.max_attempts,
                ignored_checks=settings.ignored_checks,
                sink=sink,
                metrics=metrics,
                run_id=run_id,
            ).run()
    except GitHubFetchError as e:
        log.error("wait_aborted", **e.to_dict())
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    outputs.set_output(OUTPUT_SUCCESS, "true" if result.success else "false")
    latest = sink.latest()
    if latest:
        outputs.append_summary(SummaryRenderer().render(latest))

    log.info(
        "wait_finished",
        success=result.success,
        outcome=result.outcome.value,
        attempts=result.attempts,
        metrics=metrics.to_dict(),
    )


@cli.command()
@click.option("--token", default=None, help="GitHub token (INPUT_TOKEN).")
@click.option("--commit", default=None, help="Revision to check.")
@click.option("--repository", default=None, help="Repository as owner/repo.")
@click.option("--ignored-checks", default=None, help="Ignore rule.")
@click.option("--check-interval", default=None, help="Seconds between attempts.")
@click.option("--max-attempts", default=None, help="Attempts before timing out.")
def validate(  # noqa: PLR0913
    token: str | None,
    commit: str | None,
    repository: str | None,
    ignored_checks: str | None,
    check_interval: str | None,
    max_attempts: str | None,
) -> None:
    """Validate inputs without contacting GitHub."""
    run_id = str(uuid.uuid4())
    log = _setup_logging(run_id, json_logs=False, verbose=False)

    settings = _load_or_exit(
        log,
        token=token,
        commit=commit,
        repository=repository,
        ignored_checks=ignored_checks,
        check_interval=check_interval,
        max_attempts=max_attempts,
    )

    click.echo("Configuration is valid.")
    click.echo(f"  repository:     {settings.repository}")
    click.echo(f"  revision:       {settings.revision}")
    click.echo(f"  ignored checks: {settings.ignored_checks or '(none)'}")
    click.echo(f"  check interval: {settings.check_interval}s")
    click.echo(f"  max attempts:   {settings.max_attempts}")


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
