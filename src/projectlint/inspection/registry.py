"""Inspector registration and the lint on/off preference."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from projectlint.models.diagnostics import ScanResult

logger = logging.getLogger(__name__)

ScanFunction = Callable[[str, str], Awaitable[ScanResult | None]]
RunListener = Callable[[str], None]


@dataclass(frozen=True)
class Inspector:
    """A named code inspector as seen by the inspection host."""

    name: str
    scan_file_async: ScanFunction
    can_inspect: Callable[[str], bool]


class InspectionRegistry:
    """Registry of inspectors per language id, plus re-run requests."""

    def __init__(self) -> None:
        self._inspectors: dict[str, list[Inspector]] = {}
        self._run_listeners: list[RunListener] = []

    def register(self, language_id: str, inspector: Inspector) -> Inspector:
        """Register *inspector* for *language_id*, replacing one of the same name."""
        existing = self._inspectors.setdefault(language_id, [])
        existing[:] = [i for i in existing if i.name != inspector.name]
        existing.append(inspector)
        return inspector

    def inspectors_for(self, language_id: str) -> list[Inspector]:
        return list(self._inspectors.get(language_id, []))

    def get(self, language_id: str, name: str) -> Inspector:
        """Look up an inspector.  Raises ``KeyError`` if it is not registered."""
        for inspector in self._inspectors.get(language_id, []):
            if inspector.name == name:
                return inspector
        raise KeyError(f"No inspector '{name}' registered for '{language_id}'")

    def on_run_requested(self, listener: RunListener) -> None:
        self._run_listeners.append(listener)

    def request_run(self, name: str) -> None:
        """Ask the host to re-run the named inspector on the current document."""
        logger.debug("Re-run requested for %s", name)
        for listener in list(self._run_listeners):
            listener(name)


class LintPreferences:
    """The user-toggleable ``disabled`` preference."""

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._listeners: list[Callable[[bool], None]] = []

    @property
    def disabled(self) -> bool:
        return self._disabled

    def set_disabled(self, disabled: bool) -> None:
        if disabled == self._disabled:
            return
        self._disabled = disabled
        for listener in list(self._listeners):
            listener(disabled)

    def on_change(self, listener: Callable[[bool], None]) -> None:
        self._listeners.append(listener)
