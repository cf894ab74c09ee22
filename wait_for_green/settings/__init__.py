"""Action settings loading."""

from wait_for_green.settings.app import ActionSettings, load_settings
from wait_for_green.settings.errors import ConfigurationError


__all__ = ["ActionSettings", "ConfigurationError", "load_settings"]
