"""Tests for the watchdog-based project watcher."""

from __future__ import annotations

import asyncio
from pathlib import Path

from watchdog.events import (
    DirCreatedEvent,
    FileClosedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from projectlint.config.loader import CONFIG_FILE_NAME
from projectlint.service.lint_session import LintSession
from projectlint.service.watcher import ProjectWatcher, translate_event
from tests.conftest import SAMPLE_CONFIG, FakeBackend, write_config


class TestTranslateEvent:
    def test_modified(self) -> None:
        assert translate_event(FileModifiedEvent("/p/a.html")) == ("/p/a.html", [], [])

    def test_created(self) -> None:
        assert translate_event(FileCreatedEvent("/p/a.html")) == (None, ["/p/a.html"], [])

    def test_deleted(self) -> None:
        assert translate_event(FileDeletedEvent("/p/a.html")) == (None, [], ["/p/a.html"])

    def test_moved(self) -> None:
        event = FileMovedEvent("/p/old.json", "/p/.htmlvalidate.json")
        assert translate_event(event) == (None, ["/p/.htmlvalidate.json"], ["/p/old.json"])

    def test_directory_ignored(self) -> None:
        assert translate_event(DirCreatedEvent("/p/sub")) is None

    def test_closed_ignored(self) -> None:
        assert translate_event(FileClosedEvent("/p/a.html")) is None


async def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = asyncio.get_running_loop().time() + timeout
    while asyncio.get_running_loop().time() < deadline:
        if predicate():
            return True
        await asyncio.sleep(0.05)
    return predicate()


class TestProjectWatcher:
    async def test_reports_config_creation(self, project_dir: Path) -> None:
        seen: list[tuple] = []
        watcher = ProjectWatcher(project_dir, lambda *args: seen.append(args))
        watcher.start()
        try:
            assert watcher.running
            write_config(project_dir, SAMPLE_CONFIG)
            config = str(project_dir / CONFIG_FILE_NAME)
            assert await _wait_for(
                lambda: any(config in (args[0], *args[1]) for args in seen)
            )
        finally:
            watcher.stop()
        assert not watcher.running

    async def test_stop_is_idempotent(self, project_dir: Path) -> None:
        watcher = ProjectWatcher(project_dir, lambda *args: None)
        watcher.stop()
        watcher.start()
        watcher.stop()
        watcher.stop()
        assert not watcher.running

    async def test_watching_session_reloads_on_edit(self, project_dir: Path) -> None:
        session = LintSession(FakeBackend(), watch=True)
        try:
            await session.open_project(project_dir)
            assert session.context.config is None

            write_config(project_dir, SAMPLE_CONFIG)
            assert await _wait_for(lambda: session.context.config is not None)
            await session.wait_for_reloads()
            assert session.context.snapshot_config() == SAMPLE_CONFIG
        finally:
            session.close()
