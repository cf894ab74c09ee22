"""Configuration errors."""

from typing import Any

from pydantic import ValidationError

from wait_for_green.settings.error_hints import format_validation_error, input_name


class ConfigurationError(Exception):
    """Raised when action inputs are missing or invalid.

    Carries one entry per offending field with ``loc``, ``msg`` and
    ``type`` keys, mirroring pydantic's error dictionaries.
    """

    def __init__(self, errors: list[dict[str, str]]) -> None:
        """Initialize the configuration error.

        Args:
            errors: Field errors with loc/msg/type keys.
        """
        self.errors = errors
        super().__init__(
            "Invalid configuration: "
            + "; ".join(f"{error['loc']}: {error['msg']}" for error in errors)
        )

    @classmethod
    def from_validation_error(cls, error: ValidationError) -> "ConfigurationError":
        """Create a ConfigurationError from a pydantic ValidationError.

        Args:
            error: The validation error to convert.

        Returns:
            ConfigurationError instance.
        """
        errors: list[dict[str, str]] = []
        for detail in error.errors():
            loc: tuple[Any, ...] = detail.get("loc", ())
            location = ".".join(str(part) for part in loc)
            errors.append(
                {
                    "loc": input_name(location) if location else "settings",
                    "msg": str(detail.get("msg", "")),
                    "type": str(detail.get("type", "unknown")),
                }
            )
        return cls(errors)

    def formatted(self, *, include_hint: bool = True) -> list[str]:
        """Format each field error for display.

        Args:
            include_hint: Whether to append a remediation hint.

        Returns:
            One formatted string per field error.
        """
        return [
            format_validation_error(
                location=error["loc"],
                message=error["msg"],
                error_type=error["type"],
                include_hint=include_hint,
            )
            for error in self.errors
        ]
