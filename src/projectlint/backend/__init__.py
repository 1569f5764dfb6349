"""Lint worker backends."""

from projectlint.backend.base import LintBackend
from projectlint.backend.html_validate import HtmlValidateCliBackend, parse_report

__all__ = ["HtmlValidateCliBackend", "LintBackend", "parse_report"]
