"""Unit tests for error hints."""

import pytest

from wait_for_green.settings.error_hints import (
    ERROR_HINTS,
    FIELD_HINTS,
    format_validation_error,
    get_error_hint,
    input_name,
)


class TestGetErrorHint:
    """Tests for get_error_hint function."""

    @pytest.mark.unit
    def test_returns_hint_for_known_error_type(self) -> None:
        """Known error types return their hints."""
        hint = get_error_hint("missing")
        assert hint == ERROR_HINTS["missing"]
        assert "required" in hint.lower()

    @pytest.mark.unit
    def test_returns_default_for_unknown_error_type(self) -> None:
        """Unknown error types return the default hint."""
        hint = get_error_hint("some_unknown_error_type")
        assert "documentation" in hint.lower()

    @pytest.mark.unit
    def test_field_specific_hint_takes_precedence(self) -> None:
        """Input-specific hints override error type hints."""
        hint = get_error_hint("int_parsing", field_name="check_interval")
        assert hint == FIELD_HINTS["check_interval"]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("location", "field_name"),
        [
            ("INPUT_TOKEN", "token"),
            ("GITHUB_SHA", "commit"),
            ("GITHUB_REPOSITORY", "repository"),
            ("INPUT_MAX_ATTEMPTS", "max_attempts"),
        ],
    )
    def test_environment_names_map_to_inputs(
        self, location: str, field_name: str
    ) -> None:
        """Variable names in error locations resolve to input hints."""
        assert get_error_hint("missing", field_name=location) == FIELD_HINTS[field_name]

    @pytest.mark.unit
    def test_extracts_simple_field_name_from_path(self) -> None:
        """The last segment of a dotted location is used."""
        hint = get_error_hint("value_error", field_name="settings.ignored_checks")
        assert hint == FIELD_HINTS["ignored_checks"]


class TestFormatValidationError:
    """Tests for format_validation_error function."""

    @pytest.mark.unit
    def test_formats_error_with_hint(self) -> None:
        """Hints are appended on their own line."""
        formatted = format_validation_error(
            location="token",
            message="Field required",
            error_type="missing",
        )
        assert formatted.startswith("token: Field required")
        assert "\n    Hint: " in formatted
        assert "secrets.GITHUB_TOKEN" in formatted

    @pytest.mark.unit
    def test_formats_error_without_hint(self) -> None:
        """Hints can be left out."""
        formatted = format_validation_error(
            location="max_attempts",
            message="Input should be greater than or equal to 1",
            error_type="greater_than_equal",
            include_hint=False,
        )
        assert formatted == "max_attempts: Input should be greater than or equal to 1"


class TestInputName:
    """Tests for input_name."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("location", "expected"),
        [
            ("INPUT_CHECK_INTERVAL", "check_interval"),
            ("GITHUB_TOKEN", "token"),
            ("max_attempts", "max_attempts"),
            ("GITHUB_OUTPUT", "GITHUB_OUTPUT"),
        ],
    )
    def test_maps_variables_to_inputs(self, location: str, expected: str) -> None:
        """Known variable names map to inputs; others pass through."""
        assert input_name(location) == expected
