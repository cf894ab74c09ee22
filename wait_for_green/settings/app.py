"""Action settings powered by Pydantic BaseSettings."""

import re
from pathlib import Path
from typing import Annotated, Any

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wait_for_green.github.client import parse_repository
from wait_for_green.github.constants import GITHUB_API_BASE_URL
from wait_for_green.settings.errors import ConfigurationError
from wait_for_green.status.ignore import compile_rule, is_regex_rule


DEFAULT_CHECK_INTERVAL = 10
DEFAULT_MAX_ATTEMPTS = 1000


class ActionSettings(BaseSettings):
    """Inputs of the action, read from the runner environment.

    GitHub Actions exposes ``with:`` inputs as ``INPUT_<NAME>`` variables;
    runner-provided variables such as ``GITHUB_REPOSITORY`` fill the rest.
    Keyword arguments (CLI options) take precedence over the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    token: Annotated[str, Field(min_length=1)] = Field(
        validation_alias=AliasChoices("INPUT_TOKEN", "GITHUB_TOKEN"),
    )
    commit: str | None = Field(default=None, validation_alias="INPUT_COMMIT")
    github_sha: str | None = Field(default=None, validation_alias="GITHUB_SHA")
    repository: str = Field(validation_alias="GITHUB_REPOSITORY")
    api_url: str = Field(
        default=GITHUB_API_BASE_URL,
        validation_alias="GITHUB_API_URL",
    )
    ignored_checks: str = Field(
        default="",
        validation_alias="INPUT_IGNORED_CHECKS",
    )
    check_interval: Annotated[int, Field(ge=0)] = Field(
        default=DEFAULT_CHECK_INTERVAL,
        validation_alias="INPUT_CHECK_INTERVAL",
    )
    max_attempts: Annotated[int, Field(ge=1)] = Field(
        default=DEFAULT_MAX_ATTEMPTS,
        validation_alias="INPUT_MAX_ATTEMPTS",
    )
    output_path: Path | None = Field(default=None, validation_alias="GITHUB_OUTPUT")
    step_summary_path: Path | None = Field(
        default=None, validation_alias="GITHUB_STEP_SUMMARY"
    )

    @field_validator(
        "commit", "github_sha", "output_path", "step_summary_path", mode="before"
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat blank inputs as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("check_interval", mode="before")
    @classmethod
    def default_check_interval(cls, v: Any) -> Any:
        """Fall back to the default interval for a blank input."""
        if isinstance(v, str) and not v.strip():
            return DEFAULT_CHECK_INTERVAL
        return v

    @field_validator("max_attempts", mode="before")
    @classmethod
    def default_max_attempts(cls, v: Any) -> Any:
        """Fall back to the default attempt count for a blank input."""
        if isinstance(v, str) and not v.strip():
            return DEFAULT_MAX_ATTEMPTS
        return v

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, v: str) -> str:
        """Ensure the repository is in ``owner/repo`` form."""
        parse_repository(v)
        return v.strip()

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Ensure the API URL is an HTTP(S) URL."""
        if not v.startswith(("http://", "https://")):
            msg = f"API URL must start with http:// or https://, got '{v}'"
            raise ValueError(msg)
        return v.rstrip("/")

    @field_validator("ignored_checks")
    @classmethod
    def validate_ignored_checks(cls, v: str) -> str:
        """Ensure a slash-delimited ignore rule compiles."""
        if is_regex_rule(v):
            try:
                compile_rule(v)
            except re.error as e:
                msg = f"Invalid regex pattern: {e}"
                raise ValueError(msg) from e
        return v

    @property
    def revision(self) -> str | None:
        """Revision to poll: the commit input, else the runner's SHA."""
        return self.commit or self.github_sha


def _variable_name(field_name: str) -> str:
    """Return the variable a field is read from first, e.g. ``INPUT_TOKEN``.

    Overrides are passed under this name so they replace the environment
    value for the same key instead of competing with it.
    """
    alias = ActionSettings.model_fields[field_name].validation_alias
    if isinstance(alias, AliasChoices):
        alias = alias.choices[0]
    return alias if isinstance(alias, str) else field_name


def load_settings(**overrides: Any) -> ActionSettings:
    """Load and validate settings before polling starts.

    Args:
        **overrides: Values taking precedence over the environment;
            None values are ignored.

    Returns:
        Validated settings with a resolved revision.

    Raises:
        ConfigurationError: If any input is missing or invalid.
    """
    values = {
        _variable_name(key): value
        for key, value in overrides.items()
        if value is not None
    }

    try:
        settings = ActionSettings(**values)
    except ValidationError as e:
        raise ConfigurationError.from_validation_error(e) from e

    if settings.revision is None:
        raise ConfigurationError(
            [
                {
                    "loc": "commit",
                    "msg": "Neither the commit input nor GITHUB_SHA is set",
                    "type": "missing",
                }
            ]
        )

    return settings
