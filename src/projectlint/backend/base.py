"""Abstract lint backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from projectlint.models.diagnostics import LintRequest, RawFinding


class LintBackend(ABC):
    """A worker that runs the HTML rule engine over one document."""

    @abstractmethod
    async def lint(self, request: LintRequest) -> list[RawFinding]: ...
