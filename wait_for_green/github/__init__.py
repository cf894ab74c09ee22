"""GitHub REST client for commit statuses and check runs."""

from wait_for_green.github.client import (
    GitHubClient,
    parse_check_run,
    parse_commit_status,
    parse_repository,
    parse_timestamp,
)
from wait_for_green.github.errors import FetchErrorClass, GitHubFetchError


__all__ = [
    "FetchErrorClass",
    "GitHubClient",
    "GitHubFetchError",
    "parse_check_run",
    "parse_commit_status",
    "parse_repository",
    "parse_timestamp",
]
