"""Project directory watcher feeding file-change notifications to a session.

watchdog delivers events on its observer thread; they are translated into
``(changed_path, added, removed)`` triples and handed to the event loop
with ``call_soon_threadsafe``.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

ChangeNotification = tuple[str | None, list[str], list[str]]
ChangeCallback = Callable[[str | None, list[str], list[str]], object]


def translate_event(event: FileSystemEvent) -> ChangeNotification | None:
    """Map a watchdog event onto a ``(changed, added, removed)`` notification."""
    if event.is_directory:
        return None
    src = os.fsdecode(event.src_path)
    if event.event_type == EVENT_TYPE_MODIFIED:
        return src, [], []
    if event.event_type == EVENT_TYPE_CREATED:
        return None, [src], []
    if event.event_type == EVENT_TYPE_DELETED:
        return None, [], [src]
    if event.event_type == EVENT_TYPE_MOVED:
        return None, [os.fsdecode(event.dest_path)], [src]
    # opened/closed events carry no change
    return None


class _ProjectEventHandler(FileSystemEventHandler):
    def __init__(self, loop: asyncio.AbstractEventLoop, callback: ChangeCallback) -> None:
        super().__init__()
        self._loop = loop
        self._callback = callback

    def on_any_event(self, event: FileSystemEvent) -> None:
        notification = translate_event(event)
        if notification is None:
            return
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._callback, *notification)


class ProjectWatcher:
    """Watches the top level of one project directory."""

    def __init__(
        self,
        root: str | Path,
        callback: ChangeCallback,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.root = Path(root)
        self._callback = callback
        self._loop = loop
        self._observer: Observer | None = None

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        if self._observer is not None:
            logger.warning("Watcher for %s already running", self.root)
            return
        loop = self._loop or asyncio.get_running_loop()
        observer = Observer()
        observer.schedule(
            _ProjectEventHandler(loop, self._callback), str(self.root), recursive=False
        )
        observer.daemon = True
        observer.start()
        self._observer = observer
        logger.info("Watching %s for config changes", self.root)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join(timeout=5)
        self._observer = None
        logger.info("Stopped watching %s", self.root)
