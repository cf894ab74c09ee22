"""GitHub REST client fetching commit statuses and check runs.

API documentation:
- https://docs.github.com/en/rest/commits/statuses
- https://docs.github.com/en/rest/checks/runs
"""

import time
from collections.abc import Callable
from datetime import datetime
from types import TracebackType
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
import structlog

from wait_for_green.github.constants import (
    AUTH_ERROR_HINT,
    CHECK_RUNS_PATH,
    COMMIT_STATUSES_PATH,
    DEFAULT_TIMEOUT_SECONDS,
    GITHUB_ACCEPT,
    GITHUB_API_BASE_URL,
    GITHUB_API_VERSION,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_FORBIDDEN,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
    HTTP_STATUS_UNAUTHORIZED,
    PER_PAGE,
    RATE_LIMIT_REMAINING_HEADER,
    USER_AGENT,
)
from wait_for_green.github.errors import FetchErrorClass, GitHubFetchError
from wait_for_green.status.models import CheckRunReport, RawReport


logger = structlog.get_logger()

R = TypeVar("R", bound=RawReport)


def parse_repository(repository: str) -> tuple[str, str]:
    """Split an ``owner/repo`` string.

    Args:
        repository: Repository in ``owner/repo`` form.

    Returns:
        Tuple of (owner, repo).

    Raises:
        ValueError: If the string is not in ``owner/repo`` form.
    """
    owner, sep, repo = repository.strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        msg = f"Repository must be in 'owner/repo' form, got '{repository}'"
        raise ValueError(msg)
    return owner, repo


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp from the API.

    Args:
        value: Raw field value.

    Returns:
        Parsed datetime, or None when absent or unparseable.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_commit_status(payload: Any) -> RawReport:
    """Convert one commit status object into a RawReport.

    Args:
        payload: Commit status JSON object.

    Returns:
        RawReport keyed by the status context.

    Raises:
        ValueError: If required fields are missing.
    """
    if not isinstance(payload, dict):
        msg = "Expected commit status object"
        raise ValueError(msg)

    context = payload.get("context")
    state = payload.get("state")
    if not isinstance(context, str) or not isinstance(state, str):
        msg = "Commit status is missing 'context' or 'state'"
        raise ValueError(msg)

    return RawReport(
        name=context,
        state=state,
        timestamp=parse_timestamp(payload.get("updated_at")),
        url=payload.get("target_url") or None,
    )


def parse_check_run(payload: Any) -> CheckRunReport:
    """Convert one check run object into a CheckRunReport.

    The conclusion is only populated once a run has finished, so the
    status is used until then. Likewise the completion time falls back
    to the start time.

    Args:
        payload: Check run JSON object.

    Returns:
        CheckRunReport keyed by name and check suite.

    Raises:
        ValueError: If required fields are missing.
    """
    if not isinstance(payload, dict):
        msg = "Expected check run object"
        raise ValueError(msg)

    name = payload.get("name")
    state = payload.get("conclusion") or payload.get("status")
    suite = payload.get("check_suite")
    suite_id = suite.get("id") if isinstance(suite, dict) else None
    if not isinstance(name, str) or not isinstance(state, str):
        msg = "Check run is missing 'name' or both 'conclusion' and 'status'"
        raise ValueError(msg)
    if not isinstance(suite_id, int):
        msg = f"Check run '{name}' is missing 'check_suite.id'"
        raise ValueError(msg)

    return CheckRunReport(
        name=name,
        state=state,
        timestamp=parse_timestamp(
            payload.get("completed_at") or payload.get("started_at")
        ),
        url=payload.get("html_url") or payload.get("details_url") or None,
        check_suite_id=suite_id,
    )


class GitHubClient:
    """Fetches commit statuses and check runs for a revision.

    One ``httpx.Client`` is shared by both fetches; they may run on
    different threads. Errors are raised as GitHubFetchError and never
    retried.
    """

    def __init__(  # noqa: PLR0913
        self,
        token: str,
        repository: str,
        api_url: str = GITHUB_API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
        run_id: str = "",
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: Token sent as a Bearer credential.
            repository: Repository in ``owner/repo`` form.
            api_url: REST API base URL (differs on GitHub Enterprise Server).
            timeout: Per-request timeout in seconds.
            transport: Optional transport for dependency injection.
            run_id: Run identifier for logging.
        """
        self._owner, self._repo = parse_repository(repository)
        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={
                "Accept": GITHUB_ACCEPT,
                "Authorization": f"Bearer {token}",
                "User-Agent": USER_AGENT,
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            },
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )
        self._log = logger.bind(
            component="github",
            run_id=run_id,
            repository=f"{self._owner}/{self._repo}",
        )

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def fetch_commit_statuses(self, revision: str) -> list[RawReport]:
        """Fetch every commit status posted for a revision.

        Args:
            revision: Commit SHA, branch or tag.

        Returns:
            Commit status reports in feed order.

        Raises:
            GitHubFetchError: On any request or response failure.
        """
        path = self._path(COMMIT_STATUSES_PATH, revision)
        payloads = self._get_paginated(path, items_key=None)
        reports = self._parse_all(path, payloads, parse_commit_status)
        self._log.debug(
            "commit_statuses_fetched", revision=revision, count=len(reports)
        )
        return reports

    def fetch_check_runs(self, revision: str) -> list[CheckRunReport]:
        """Fetch every check run reported for a revision.

        Args:
            revision: Commit SHA, branch or tag.

        Returns:
            Check run reports in feed order.

        Raises:
            GitHubFetchError: On any request or response failure.
        """
        path = self._path(CHECK_RUNS_PATH, revision)
        # filter=all keeps superseded runs so they can be deduplicated here
        payloads = self._get_paginated(
            path, items_key="check_runs", params={"filter": "all"}
        )
        reports = self._parse_all(path, payloads, parse_check_run)
        self._log.debug(
            "check_runs_fetched", revision=revision, count=len(reports)
        )
        return reports

    def _path(self, template: str, revision: str) -> str:
        return template.format(
            owner=quote(self._owner, safe=""),
            repo=quote(self._repo, safe=""),
            ref=quote(revision, safe="/"),
        )

    def _parse_all(
        self,
        path: str,
        payloads: list[Any],
        parse: Callable[[Any], R],
    ) -> list[R]:
        reports: list[R] = []
        for payload in payloads:
            try:
                reports.append(parse(payload))
            except ValueError as e:
                raise GitHubFetchError(
                    FetchErrorClass.MALFORMED_RESPONSE,
                    f"Unexpected item from {path}: {e}",
                ) from e
        return reports

    def _get_paginated(
        self,
        path: str,
        items_key: str | None,
        params: dict[str, str | int] | None = None,
    ) -> list[Any]:
        """GET every page of a list endpoint.

        Args:
            path: API path relative to the base URL.
            items_key: Key holding the list when pages are objects.
            params: Extra query parameters for the first page.

        Returns:
            Concatenated items of all pages.

        Raises:
            GitHubFetchError: On any request or response failure.
        """
        items: list[Any] = []
        url: str | None = path
        query: dict[str, str | int] | None = {**(params or {}), "per_page": PER_PAGE}
        pages = 0

        while url is not None:
            start_time = time.monotonic()
            response = self._request(url, query)
            pages += 1
            self._log.debug(
                "page_fetched",
                path=path,
                page=pages,
                status_code=response.status_code,
                duration_ms=round((time.monotonic() - start_time) * 1000, 2),
            )

            page = self._decode(response)
            if items_key is not None:
                page = page.get(items_key) if isinstance(page, dict) else None
            if not isinstance(page, list):
                raise GitHubFetchError(
                    FetchErrorClass.MALFORMED_RESPONSE,
                    f"Expected a list of items from {path}",
                    url=str(response.url),
                    status_code=response.status_code,
                )
            items.extend(page)

            # The next link already carries every query parameter
            url = response.links.get("next", {}).get("url")
            query = None

        return items

    def _request(
        self, url: str, params: dict[str, str | int] | None
    ) -> httpx.Response:
        try:
            response = self._client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise GitHubFetchError(
                FetchErrorClass.NETWORK_TIMEOUT, f"Request timed out: {e}", url=url
            ) from e
        except httpx.ConnectError as e:
            raise GitHubFetchError(
                FetchErrorClass.CONNECTION_ERROR, f"Connection failed: {e}", url=url
            ) from e
        except httpx.HTTPError as e:
            raise GitHubFetchError(
                FetchErrorClass.UNKNOWN, f"Request failed: {e}", url=url
            ) from e

        error = self._classify_http_error(response)
        if error is not None:
            self._log.warning("fetch_failed", **error.to_dict())
            raise error
        return response

    def _classify_http_error(self, response: httpx.Response) -> GitHubFetchError | None:
        """Classify an HTTP status code as an error.

        Args:
            response: HTTP response.

        Returns:
            GitHubFetchError if the status indicates an error, None otherwise.
        """
        status_code = response.status_code
        url = str(response.url)

        if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
            return None

        rate_limit_exhausted = response.headers.get(RATE_LIMIT_REMAINING_HEADER) == "0"
        if status_code == HTTP_STATUS_TOO_MANY_REQUESTS or (
            status_code == HTTP_STATUS_FORBIDDEN and rate_limit_exhausted
        ):
            return GitHubFetchError(
                FetchErrorClass.RATE_LIMITED,
                f"Rate limited ({status_code})",
                url=url,
                status_code=status_code,
            )

        if status_code in (HTTP_STATUS_UNAUTHORIZED, HTTP_STATUS_FORBIDDEN):
            return GitHubFetchError(
                FetchErrorClass.AUTH,
                f"HTTP {status_code} from GitHub. {AUTH_ERROR_HINT}",
                url=url,
                status_code=status_code,
            )

        if HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
            return GitHubFetchError(
                FetchErrorClass.HTTP_4XX,
                f"Client error ({status_code})",
                url=url,
                status_code=status_code,
            )

        if status_code >= HTTP_STATUS_SERVER_ERROR_MIN:
            return GitHubFetchError(
                FetchErrorClass.HTTP_5XX,
                f"Server error ({status_code})",
                url=url,
                status_code=status_code,
            )

        return GitHubFetchError(
            FetchErrorClass.UNKNOWN,
            f"Unexpected status ({status_code})",
            url=url,
            status_code=status_code,
        )

    def _decode(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise GitHubFetchError(
                FetchErrorClass.MALFORMED_RESPONSE,
                f"Failed to parse JSON response: {e}",
                url=str(response.url),
                status_code=response.status_code,
            ) from e
