"""Structured logging for the action.

Logs go to stderr so that stdout carries only the attempt lines shown in
the workflow log.
"""

import logging
import sys
from typing import TextIO

import structlog


# Loggers of the HTTP stack, which report every request at INFO
_HTTP_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    verbose: bool = False,
    json_format: bool = True,
    output: TextIO = sys.stderr,
) -> None:
    """Configure structlog for the action.

    Args:
        verbose: Log at DEBUG instead of INFO, including HTTP requests.
        json_format: Emit JSON lines instead of console output.
        output: Output stream (default: stderr).
    """
    level = logging.DEBUG if verbose else logging.INFO

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=output.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=output, level=logging.WARNING)
    for name in _HTTP_LOGGERS:
        logging.getLogger(name).setLevel(level if verbose else logging.WARNING)


def bind_run_context(run_id: str, **fields: str) -> None:
    """Bind the run id and extra fields to every log line.

    Args:
        run_id: Unique run identifier.
        **fields: Additional context such as ``repository`` or ``revision``.
    """
    structlog.contextvars.bind_contextvars(run_id=run_id, **fields)
