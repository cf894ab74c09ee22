"""Constants for the GitHub REST client."""

GITHUB_API_BASE_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_ACCEPT = "application/vnd.github+json"

COMMIT_STATUSES_PATH = "/repos/{owner}/{repo}/commits/{ref}/statuses"
CHECK_RUNS_PATH = "/repos/{owner}/{repo}/commits/{ref}/check-runs"

# GitHub's maximum page size for both endpoints
PER_PAGE = 100

DEFAULT_TIMEOUT_SECONDS = 30.0
USER_AGENT = "wait-for-green/2.0"

# HTTP status codes
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_UNAUTHORIZED = 401
HTTP_STATUS_FORBIDDEN = 403
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_SERVER_ERROR_MIN = 500

RATE_LIMIT_REMAINING_HEADER = "x-ratelimit-remaining"

AUTH_ERROR_HINT = (
    "Authentication failed. Check that the token input is set and has "
    "read access to checks and commit statuses of the repository."
)
