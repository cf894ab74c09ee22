"""Shared fixtures."""

import pytest

from wait_for_green.poller.metrics import PollMetrics


# Variables read by the settings layer
ACTION_ENV_VARS = (
    "INPUT_TOKEN",
    "GITHUB_TOKEN",
    "INPUT_COMMIT",
    "GITHUB_SHA",
    "GITHUB_REPOSITORY",
    "GITHUB_API_URL",
    "INPUT_IGNORED_CHECKS",
    "INPUT_CHECK_INTERVAL",
    "INPUT_MAX_ATTEMPTS",
    "GITHUB_OUTPUT",
    "GITHUB_STEP_SUMMARY",
)


@pytest.fixture(autouse=True)
def clean_action_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Isolate tests from the runner's own GitHub Actions environment."""
    for name in ACTION_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_metrics() -> None:
    """Start every test with fresh poll metrics."""
    PollMetrics.reset()
