"""Error taxonomy for config loading and lint dispatch."""

from __future__ import annotations


class ConfigLoadError(Exception):
    """A config file exists but could not be turned into a usable config.

    ``message`` is user-facing and is surfaced verbatim as the config
    error diagnostic.
    """

    def __init__(self, message: str, path: str) -> None:
        self.message = message
        self.path = path
        super().__init__(message)


class ConfigParseError(ConfigLoadError):
    """Raised when the config file does not contain a JSON object."""


class ConfigReadError(ConfigLoadError):
    """Raised on any I/O failure other than the file being absent."""


class StaleResultError(Exception):
    """Raised when a lint result arrives for a document that is no longer active."""

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        super().__init__(f"Lint failed as {file_path} is not active.")


class LintBackendError(Exception):
    """Raised when the lint worker fails or returns an unreadable report."""
