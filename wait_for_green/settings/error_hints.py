"""Error hints for action input validation errors.

Provides user-friendly hints with actionable remediation steps
for common validation errors.
"""

from typing import Final


# Mapping of error types to user-friendly hints
ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This input is required. Set it in the workflow step or environment.",
    "int_parsing": "This input must be an integer (whole number).",
    "int_type": "This input must be an integer (whole number).",
    "greater_than_equal": "The value is too small. Check the minimum allowed.",
    "string_too_short": "The value must not be empty.",
    "value_error": "Check the value format.",
}

# Input-specific hints for more context
FIELD_HINTS: Final[dict[str, str]] = {
    "token": "Pass a token, e.g. 'token: ${{ secrets.GITHUB_TOKEN }}'.",
    "commit": "Pass the commit input or run inside GitHub Actions where GITHUB_SHA is set.",
    "repository": "Must be 'owner/repo'; GITHUB_REPOSITORY provides it on Actions runners.",
    "api_url": "Must be an HTTP/HTTPS URL (e.g. 'https://api.github.com').",
    "ignored_checks": "Use a comma-separated list of names, or a regex wrapped in slashes (e.g. '/^lint/').",
    "check_interval": "Must be a whole number of seconds, 0 or more.",
    "max_attempts": "Must be a whole number, 1 or more.",
}

# Environment variable names map onto input names in error locations
_LOCATION_ALIASES: Final[dict[str, str]] = {
    "input_token": "token",
    "github_token": "token",
    "input_commit": "commit",
    "github_sha": "commit",
    "github_repository": "repository",
    "github_api_url": "api_url",
    "input_ignored_checks": "ignored_checks",
    "input_check_interval": "check_interval",
    "input_max_attempts": "max_attempts",
}


def input_name(location: str) -> str:
    """Translate an error location such as ``INPUT_TOKEN`` to its input name.

    Args:
        location: Field name or environment variable name.

    Returns:
        The input name, or the location unchanged when it is not an alias.
    """
    return _LOCATION_ALIASES.get(location.lower(), location)


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error.

    Args:
        error_type: The Pydantic error type (e.g., 'missing', 'int_parsing').
        field_name: Optional input name for input-specific hints.

    Returns:
        A user-friendly hint string.
    """
    if field_name:
        simple_field = input_name(field_name.split(".")[-1]).lower()
        if simple_field in FIELD_HINTS:
            return FIELD_HINTS[simple_field]

    return ERROR_HINTS.get(
        error_type, "Check the action documentation for valid values."
    )


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Format a validation error with optional hint.

    Args:
        location: The error location (e.g., 'check_interval').
        message: The original error message.
        error_type: The error type.
        include_hint: Whether to include a hint.

    Returns:
        Formatted error string.
    """
    base = f"{location}: {message}"
    if include_hint:
        hint = get_error_hint(error_type, location)
        return f"{base}\n    Hint: {hint}"
    return base
