"""Ignore rules for status contexts and check names.

A rule is either a comma-separated list of exact names
(``"lint,docs"``) or a regular expression wrapped in slashes
(``"/^lint.*/"``). Regular expressions are searched, not anchored.
"""

import re
from functools import lru_cache


REGEX_DELIMITER = "/"


def is_regex_rule(rule: str) -> bool:
    """Check whether a rule is a slash-delimited regular expression."""
    return (
        len(rule) >= 2  # noqa: PLR2004
        and rule.startswith(REGEX_DELIMITER)
        and rule.endswith(REGEX_DELIMITER)
    )


@lru_cache(maxsize=32)
def compile_rule(rule: str) -> re.Pattern[str]:
    """Compile the pattern inside a slash-delimited rule.

    Raises:
        re.error: If the pattern is not a valid regular expression.
    """
    return re.compile(rule[1:-1])


@lru_cache(maxsize=32)
def _split_rule(rule: str) -> frozenset[str]:
    return frozenset(part.strip() for part in rule.split(","))


def should_ignore(rule: str, name: str) -> bool:
    """Decide whether a named report is excluded from aggregation.

    Args:
        rule: Configured ignore rule, possibly empty.
        name: Context or check name.

    Returns:
        True if the report must be dropped before aggregation.
    """
    if not rule:
        return False

    if is_regex_rule(rule):
        return compile_rule(rule).search(name) is not None

    return name in _split_rule(rule)
