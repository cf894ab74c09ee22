"""Unit tests for the GitHub REST client."""

from collections.abc import Callable
from datetime import UTC, datetime

import httpx
import pytest

from wait_for_green.github.client import (
    GitHubClient,
    parse_check_run,
    parse_commit_status,
    parse_repository,
    parse_timestamp,
)
from wait_for_green.github.errors import FetchErrorClass, GitHubFetchError


API = "https://api.github.com"
STATUSES_PATH = "/repos/octo/widgets/commits/abc123/statuses"
CHECK_RUNS_PATH = "/repos/octo/widgets/commits/abc123/check-runs"


def _status(
    context: str, state: str, updated_at: str = "2024-06-13T12:00:00Z"
) -> dict:
    return {
        "context": context,
        "state": state,
        "updated_at": updated_at,
        "target_url": f"https://ci.example.com/{context}",
    }


def _check_run(
    name: str,
    status: str = "completed",
    conclusion: str | None = "success",
    suite: int = 1,
) -> dict:
    return {
        "name": name,
        "status": status,
        "conclusion": conclusion,
        "started_at": "2024-06-13T11:55:00Z",
        "completed_at": "2024-06-13T12:00:00Z" if conclusion else None,
        "html_url": f"https://github.com/octo/widgets/runs/{name}",
        "check_suite": {"id": suite},
    }


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> GitHubClient:
    return GitHubClient(
        token="ghp_test",
        repository="octo/widgets",
        api_url=API,
        transport=httpx.MockTransport(handler),
    )


class TestParsers:
    """Tests for payload parsing helpers."""

    def test_parse_repository(self) -> None:
        """owner/repo is split into its parts."""
        assert parse_repository("octo/widgets") == ("octo", "widgets")

    @pytest.mark.parametrize("value", ["widgets", "/widgets", "octo/", "a/b/c"])
    def test_parse_repository_rejects_invalid(self, value: str) -> None:
        """Anything but owner/repo is rejected."""
        with pytest.raises(ValueError, match="owner/repo"):
            parse_repository(value)

    def test_parse_timestamp(self) -> None:
        """Z-suffixed timestamps parse as UTC."""
        assert parse_timestamp("2024-06-13T12:00:00Z") == datetime(
            2024, 6, 13, 12, 0, tzinfo=UTC
        )

    @pytest.mark.parametrize("value", [None, "", "yesterday", 42])
    def test_parse_timestamp_invalid(self, value: object) -> None:
        """Missing or garbled timestamps become None."""
        assert parse_timestamp(value) is None

    def test_parse_commit_status(self) -> None:
        """Commit statuses are keyed by context."""
        report = parse_commit_status(_status("ci/jenkins", "pending"))

        assert report.name == "ci/jenkins"
        assert report.state == "pending"
        assert report.url == "https://ci.example.com/ci/jenkins"
        assert report.timestamp is not None

    def test_parse_commit_status_missing_context(self) -> None:
        """A status without context is malformed."""
        with pytest.raises(ValueError, match="context"):
            parse_commit_status({"state": "success"})

    def test_parse_check_run_prefers_conclusion(self) -> None:
        """The conclusion wins over the status once present."""
        report = parse_check_run(_check_run("build", conclusion="failure", suite=7))

        assert report.state == "failure"
        assert report.check_suite_id == 7
        assert report.timestamp == datetime(2024, 6, 13, 12, 0, tzinfo=UTC)

    def test_parse_check_run_in_progress(self) -> None:
        """Unfinished runs fall back to the status and start time."""
        report = parse_check_run(
            _check_run("build", status="in_progress", conclusion=None)
        )

        assert report.state == "in_progress"
        assert report.timestamp == datetime(2024, 6, 13, 11, 55, tzinfo=UTC)

    def test_parse_check_run_details_url_fallback(self) -> None:
        """details_url is used when html_url is absent."""
        payload = _check_run("build")
        del payload["html_url"]
        payload["details_url"] = "https://ci.example.com/build"

        assert parse_check_run(payload).url == "https://ci.example.com/build"

    def test_parse_check_run_requires_suite(self) -> None:
        """A run without a check suite id is malformed."""
        payload = _check_run("build")
        del payload["check_suite"]

        with pytest.raises(ValueError, match="check_suite.id"):
            parse_check_run(payload)


class TestGitHubClient:
    """Tests for GitHubClient."""

    def test_fetch_commit_statuses(self) -> None:
        """Statuses are fetched with auth headers and page size."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, json=[_status("ci", "success"), _status("lint", "failure")]
            )

        with _client(handler) as client:
            reports = client.fetch_commit_statuses("abc123")

        assert [r.name for r in reports] == ["ci", "lint"]
        assert len(seen) == 1
        request = seen[0]
        assert request.url.path == STATUSES_PATH
        assert request.url.params["per_page"] == "100"
        assert request.headers["Authorization"] == "Bearer ghp_test"
        assert request.headers["X-GitHub-Api-Version"] == "2022-11-28"

    def test_fetch_check_runs(self) -> None:
        """Check runs are unwrapped from the check_runs key."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "total_count": 2,
                    "check_runs": [_check_run("build"), _check_run("lint", suite=2)],
                },
            )

        with _client(handler) as client:
            reports = client.fetch_check_runs("abc123")

        assert [(r.name, r.check_suite_id) for r in reports] == [
            ("build", 1),
            ("lint", 2),
        ]
        assert seen[0].url.path == CHECK_RUNS_PATH
        assert seen[0].url.params["filter"] == "all"

    def test_follows_pagination(self) -> None:
        """Every page linked by rel=next is fetched."""
        next_url = f"{API}{STATUSES_PATH}?per_page=100&page=2"

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json=[_status("deploy", "pending")])
            return httpx.Response(
                200,
                json=[_status("ci", "success")],
                headers={"Link": f'<{next_url}>; rel="next"'},
            )

        with _client(handler) as client:
            reports = client.fetch_commit_statuses("abc123")

        assert [r.name for r in reports] == ["ci", "deploy"]

    @pytest.mark.parametrize(
        ("status_code", "headers", "expected"),
        [
            (401, {}, FetchErrorClass.AUTH),
            (403, {}, FetchErrorClass.AUTH),
            (403, {"x-ratelimit-remaining": "0"}, FetchErrorClass.RATE_LIMITED),
            (429, {}, FetchErrorClass.RATE_LIMITED),
            (404, {}, FetchErrorClass.HTTP_4XX),
            (502, {}, FetchErrorClass.HTTP_5XX),
        ],
    )
    def test_http_errors(
        self, status_code: int, headers: dict[str, str], expected: FetchErrorClass
    ) -> None:
        """Error responses are classified."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                status_code, json={"message": "nope"}, headers=headers
            )

        with _client(handler) as client, pytest.raises(GitHubFetchError) as exc_info:
            client.fetch_commit_statuses("abc123")

        assert exc_info.value.error_class == expected
        assert exc_info.value.status_code == status_code

    def test_auth_error_mentions_token(self) -> None:
        """Authentication errors point at the token input."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"message": "Bad credentials"})

        with _client(handler) as client, pytest.raises(GitHubFetchError) as exc_info:
            client.fetch_check_runs("abc123")

        assert "token" in exc_info.value.message

    def test_timeout(self) -> None:
        """Timeouts are classified as network timeouts."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with _client(handler) as client, pytest.raises(GitHubFetchError) as exc_info:
            client.fetch_commit_statuses("abc123")

        assert exc_info.value.error_class == FetchErrorClass.NETWORK_TIMEOUT

    def test_connection_error(self) -> None:
        """Connection failures are classified."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with _client(handler) as client, pytest.raises(GitHubFetchError) as exc_info:
            client.fetch_check_runs("abc123")

        assert exc_info.value.error_class == FetchErrorClass.CONNECTION_ERROR

    def test_invalid_json(self) -> None:
        """A non-JSON body is a malformed response."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>oops</html>")

        with _client(handler) as client, pytest.raises(GitHubFetchError) as exc_info:
            client.fetch_commit_statuses("abc123")

        assert exc_info.value.error_class == FetchErrorClass.MALFORMED_RESPONSE

    def test_unexpected_shape(self) -> None:
        """A check-runs page without the list is a malformed response."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"total_count": 0})

        with _client(handler) as client, pytest.raises(GitHubFetchError) as exc_info:
            client.fetch_check_runs("abc123")

        assert exc_info.value.error_class == FetchErrorClass.MALFORMED_RESPONSE

    def test_malformed_item(self) -> None:
        """An item missing required fields is a malformed response."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"state": "success"}])

        with _client(handler) as client, pytest.raises(GitHubFetchError) as exc_info:
            client.fetch_commit_statuses("abc123")

        assert exc_info.value.error_class == FetchErrorClass.MALFORMED_RESPONSE
        assert STATUSES_PATH in exc_info.value.message

    def test_rejects_invalid_repository(self) -> None:
        """The repository is validated up front."""
        with pytest.raises(ValueError):
            GitHubClient(token="t", repository="not-a-repo")
