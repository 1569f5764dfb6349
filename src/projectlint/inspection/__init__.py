"""Host-facing inspector registration."""

from projectlint.inspection.registry import InspectionRegistry, Inspector, LintPreferences

__all__ = ["InspectionRegistry", "Inspector", "LintPreferences"]
