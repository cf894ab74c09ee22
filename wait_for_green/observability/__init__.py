"""Observability module for logging and the default report sink."""

from wait_for_green.observability.logging import bind_run_context, configure_logging
from wait_for_green.observability.sink import LoggingSink, format_attempt_line


__all__ = [
    "LoggingSink",
    "bind_run_context",
    "configure_logging",
    "format_attempt_line",
]
