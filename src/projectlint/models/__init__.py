"""Pydantic domain models for projectlint."""

from projectlint.models.diagnostics import (
    CONFIG_ERROR_POSITION,
    Diagnostic,
    LintRequest,
    Position,
    RawFinding,
    ScanResult,
    Severity,
)
from projectlint.models.document import TextDocument
from projectlint.models.errors import (
    ConfigLoadError,
    ConfigParseError,
    ConfigReadError,
    LintBackendError,
    StaleResultError,
)

__all__ = [
    "CONFIG_ERROR_POSITION",
    "ConfigLoadError",
    "ConfigParseError",
    "ConfigReadError",
    "Diagnostic",
    "LintBackendError",
    "LintRequest",
    "Position",
    "RawFinding",
    "ScanResult",
    "Severity",
    "StaleResultError",
    "TextDocument",
]
