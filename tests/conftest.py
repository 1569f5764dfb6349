"""Shared test fixtures for projectlint."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import pytest

from projectlint.backend.base import LintBackend
from projectlint.config.loader import CONFIG_FILE_NAME, ConfigLoader
from projectlint.models.diagnostics import LintRequest, RawFinding
from projectlint.service.lint_session import LintSession
from projectlint.service.session_manager import SessionManager

SAMPLE_CONFIG: dict[str, Any] = {
    "extends": ["html-validate:recommended"],
    "rules": {"close-order": "error", "void-style": "off"},
}

SAMPLE_HTML = """\
<!DOCTYPE html>
<html>
  <body>
    <p>Hello</div>
  </body>
</html>
"""


class FakeBackend(LintBackend):
    """Records requests and answers with canned findings.

    With a ``gate`` the backend blocks until the test sets it.
    """

    def __init__(
        self, findings: list[RawFinding] | None = None, gate: asyncio.Event | None = None
    ) -> None:
        self.findings = list(findings or [])
        self.gate = gate
        self.requests: list[LintRequest] = []
        self.started = asyncio.Event()

    async def lint(self, request: LintRequest) -> list[RawFinding]:
        self.requests.append(request)
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        return list(self.findings)


class ControlledLoader(ConfigLoader):
    """Loader whose every call blocks on its own gate.

    ``outcomes`` maps a directory to the results handed out for it in call
    order: a dict (config), ``None`` (no file) or an exception to raise.
    """

    def __init__(self, outcomes: dict[Path, list[Any]]) -> None:
        super().__init__()
        self._outcomes = {Path(k): list(v) for k, v in outcomes.items()}
        self.calls: list[tuple[Path, asyncio.Event]] = []

    async def load(self, directory: str | Path) -> dict[str, Any] | None:
        gate = asyncio.Event()
        self.calls.append((Path(directory), gate))
        outcome = self._outcomes[Path(directory)].pop(0)
        await gate.wait()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def release(self, index: int) -> None:
        self.calls[index][1].set()


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run up to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def write_config(root: Path, content: dict[str, Any] | str, name: str = CONFIG_FILE_NAME) -> Path:
    path = root / name
    path.write_text(content if isinstance(content, str) else json.dumps(content))
    return path


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def other_project_dir(tmp_path: Path) -> Path:
    root = tmp_path / "other"
    root.mkdir()
    return root


@pytest.fixture
def loader() -> ConfigLoader:
    return ConfigLoader()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def session_manager() -> SessionManager:
    """SessionManager with long TTL and no cleanup thread (for tests)."""
    return SessionManager(lambda: LintSession(FakeBackend()), ttl_seconds=3600, cleanup_interval=9999)
