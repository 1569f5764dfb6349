"""Dispatches lint requests to the backend and positions the findings."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from projectlint.backend.base import LintBackend
from projectlint.models.diagnostics import (
    CONFIG_ERROR_POSITION,
    Diagnostic,
    LintRequest,
    RawFinding,
    ScanResult,
    Severity,
)
from projectlint.models.document import TextDocument
from projectlint.models.errors import StaleResultError
from projectlint.service.project_context import ProjectContext

logger = logging.getLogger(__name__)


def config_error_result(message: str) -> ScanResult:
    """The single diagnostic reported while the project config is unusable."""
    return ScanResult(
        errors=[Diagnostic(pos=CONFIG_ERROR_POSITION, message=message, type=Severity.ERROR)]
    )


def to_diagnostic(finding: RawFinding, document: TextDocument) -> Diagnostic:
    return Diagnostic(
        pos=document.pos_from_index(finding.start),
        end_pos=document.pos_from_index(finding.end),
        message=f"{finding.message} ({finding.rule_id})",
        type=Severity.from_backend(finding.severity),
        more_info_url=finding.rule_url,
    )


class LintDispatcher:
    """Runs the backend for the active document and drops stale results.

    Switching the active document cancels every in-flight backend call made
    for another path; such a scan raises ``StaleResultError``.  Results that
    still arrive for a document that is no longer active are rejected the
    same way.
    """

    def __init__(
        self,
        backend: LintBackend,
        project_context: Callable[[], ProjectContext | None],
    ) -> None:
        self._backend = backend
        self._project_context = project_context
        self._active: TextDocument | None = None
        self._inflight: dict[str, set[asyncio.Task]] = {}

    @property
    def active_document(self) -> TextDocument | None:
        return self._active

    def set_active_document(self, document: TextDocument | None) -> None:
        """Make *document* the foreground document and cancel stale scans."""
        self._active = document
        active_path = document.path if document is not None else None
        for path, tasks in list(self._inflight.items()):
            if path == active_path:
                continue
            for task in tasks:
                if not task.done():
                    logger.debug("Cancelling lint of %s: no longer active", path)
                    task.cancel()

    def cancel_all(self) -> None:
        """Cancel every in-flight backend call.  Safe to call from any thread."""
        for tasks in list(self._inflight.values()):
            for task in list(tasks):
                if not task.done():
                    task.get_loop().call_soon_threadsafe(task.cancel)

    def _build_request(self, text: str, file_path: str) -> LintRequest | ScanResult:
        context = self._project_context()
        if context is None:
            return LintRequest(text=text, file_path=file_path)
        if context.config_error:
            return config_error_result(context.config_error)
        return LintRequest(
            text=text,
            file_path=file_path,
            generation=context.generation,
            config=context.snapshot_config(),
        )

    async def scan(self, text: str, file_path: str) -> ScanResult | None:
        """Lint *text* of *file_path*.

        Returns ``None`` when there is nothing to report.  Raises
        ``StaleResultError`` when *file_path* stopped being the active
        document before the backend answered.
        """
        request = self._build_request(text, file_path)
        if isinstance(request, ScanResult):
            return request

        task = asyncio.ensure_future(self._backend.lint(request))
        pending = self._inflight.setdefault(file_path, set())
        pending.add(task)
        try:
            findings = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            raise StaleResultError(file_path) from None
        finally:
            pending.discard(task)
            if not pending and self._inflight.get(file_path) is pending:
                del self._inflight[file_path]

        active = self._active
        if active is None or active.path != file_path:
            logger.debug("Dropping lint result for %s: no longer active", file_path)
            raise StaleResultError(file_path)

        if not findings:
            return None
        # Offsets index into the text that was linted, not the focused text.
        document = TextDocument(path=file_path, text=text)
        return ScanResult(errors=[to_diagnostic(f, document) for f in findings])
