"""Error types for the GitHub REST client."""

from enum import Enum


class FetchErrorClass(str, Enum):
    """Classification of fetch errors.

    - NETWORK_TIMEOUT: Request timed out
    - CONNECTION_ERROR: Could not establish connection
    - AUTH: 401/403 from the API
    - RATE_LIMITED: 429, or 403 with an exhausted rate limit
    - HTTP_4XX: Other client error
    - HTTP_5XX: Server error
    - MALFORMED_RESPONSE: Body is not JSON or has an unexpected shape
    - UNKNOWN: Unclassified error
    """

    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    AUTH = "AUTH"
    RATE_LIMITED = "RATE_LIMITED"
    HTTP_4XX = "HTTP_4XX"
    HTTP_5XX = "HTTP_5XX"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    UNKNOWN = "UNKNOWN"


class GitHubFetchError(Exception):
    """Fatal error fetching reports from GitHub.

    Never retried: it terminates the poll loop.
    """

    def __init__(
        self,
        error_class: FetchErrorClass,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize the fetch error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            url: Request URL, if one was sent.
            status_code: HTTP status code, if a response arrived.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.url = url
        self.status_code = status_code

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "url": self.url,
            "status_code": self.status_code,
        }
