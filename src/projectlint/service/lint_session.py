"""One host window's lint state: open project, inspector and event handlers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

from projectlint.backend.base import LintBackend
from projectlint.config.loader import ConfigLoader
from projectlint.inspection.registry import InspectionRegistry, Inspector, LintPreferences
from projectlint.models.diagnostics import ScanResult
from projectlint.models.document import TextDocument
from projectlint.service.change_router import ConfigChangeRouter
from projectlint.service.dispatcher import LintDispatcher
from projectlint.service.project_context import ProjectContext
from projectlint.service.reloader import ConfigReloader
from projectlint.service.watcher import ProjectWatcher

logger = logging.getLogger(__name__)

HTML_LINT_NAME = "HTMLValidator"
LANGUAGE_ID = "html"


class LintSession:
    """Handles project-open, file-change and preference events for one host.

    Opening a project retires the previous ``ProjectContext`` and starts a
    config reload for a fresh one; reloads run as background tasks on the
    current event loop.  The registered inspector scans through the
    ``LintDispatcher`` and is gated by the ``disabled`` preference.
    """

    def __init__(
        self,
        backend: LintBackend,
        *,
        registry: InspectionRegistry | None = None,
        preferences: LintPreferences | None = None,
        loader: ConfigLoader | None = None,
        reloader: ConfigReloader | None = None,
        watch: bool = False,
    ) -> None:
        self.registry = registry or InspectionRegistry()
        self.preferences = preferences or LintPreferences()
        self.backend = backend
        self.run_requests = 0
        self._context: ProjectContext | None = None
        self._documents: dict[Path, str] = {}
        loader = loader or ConfigLoader(text_source=self._open_document_text)
        self._reloader = reloader or ConfigReloader(loader, on_published=self.request_run)
        self.dispatcher = LintDispatcher(backend, lambda: self._context)
        self.router = ConfigChangeRouter(
            lambda: self.project_root, self.reload, file_name=loader.file_name
        )
        self._watch = watch
        self._watcher: ProjectWatcher | None = None
        self._reloads: set[asyncio.Task] = set()
        self._closed = False

        self.inspector = self.registry.register(
            LANGUAGE_ID,
            Inspector(name=HTML_LINT_NAME, scan_file_async=self.scan, can_inspect=self.can_inspect),
        )
        self.registry.on_run_requested(self._count_run)
        self.preferences.on_change(lambda _disabled: self.request_run())

    # -- state ---------------------------------------------------------------

    @property
    def context(self) -> ProjectContext | None:
        return self._context

    @property
    def project_root(self) -> Path | None:
        return self._context.root if self._context is not None else None

    @property
    def closed(self) -> bool:
        return self._closed

    def request_run(self) -> None:
        self.registry.request_run(HTML_LINT_NAME)

    def _count_run(self, name: str) -> None:
        if name == HTML_LINT_NAME:
            self.run_requests += 1

    # -- project events ------------------------------------------------------

    def open_project(self, root: str | Path) -> asyncio.Task:
        """Switch to the project at *root* and start loading its config."""
        if self._context is not None:
            self._context.close()
        self._context = ProjectContext(root)
        logger.info("Opened project %s", self._context.root)
        if self._watch:
            self._restart_watcher()
        return self._start_reload(self._context)

    def reload(self) -> asyncio.Task | None:
        """Start a config reload for the open project, if any."""
        context = self._context
        if context is None:
            return None
        return self._start_reload(context)

    def _start_reload(self, context: ProjectContext) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(self._reloader.reload(context))
        self._reloads.add(task)
        task.add_done_callback(self._reloads.discard)
        return task

    async def wait_for_reloads(self) -> None:
        """Wait until every reload started so far has finished."""
        while self._reloads:
            await asyncio.gather(*list(self._reloads), return_exceptions=True)

    def project_files_changed(
        self,
        changed_path: str | Path | None = None,
        added: Iterable[str | Path] | None = None,
        removed: Iterable[str | Path] | None = None,
    ) -> bool:
        """Handle a file-change notification; True if it triggered a reload."""
        return self.router.handle(changed_path, added, removed)

    def _restart_watcher(self) -> None:
        if self._watcher is not None:
            self._watcher.stop()
        self._watcher = ProjectWatcher(self._context.root, self.project_files_changed)
        self._watcher.start()

    # -- inspection ----------------------------------------------------------

    def can_inspect(self, _path: str) -> bool:
        return not self.preferences.disabled

    def set_active_document(self, path: str, text: str | None = None) -> None:
        """Focus *path*; without *text* the last text sent for it is kept."""
        if text is not None:
            self._documents[Path(path)] = text
        current = self._documents.get(Path(path), "")
        self.dispatcher.set_active_document(TextDocument(path=path, text=current))

    def close_document(self, path: str) -> None:
        """Forget the editor text of *path*; the config loader reads disk again."""
        self._documents.pop(Path(path), None)

    async def _open_document_text(self, path: Path) -> str | None:
        return self._documents.get(path)

    async def scan(self, text: str, path: str) -> ScanResult | None:
        """Scan the foreground document *path* with content *text*."""
        self.set_active_document(path, text)
        return await self.dispatcher.scan(text, path)

    # -- teardown ------------------------------------------------------------

    def close(self) -> None:
        """Retire the project context and cancel outstanding work.

        May be called from a thread other than the one running the loop.
        """
        if self._closed:
            return
        self._closed = True
        if self._context is not None:
            self._context.close()
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None
        self.dispatcher.cancel_all()
        for task in list(self._reloads):
            if not task.done():
                task.get_loop().call_soon_threadsafe(task.cancel)
