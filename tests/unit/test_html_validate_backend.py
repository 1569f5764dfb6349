"""Tests for the html-validate CLI backend (subprocess is faked)."""

from __future__ import annotations

import asyncio
import json
import os
from typing import Any

import pytest

from projectlint.backend import html_validate
from projectlint.backend.html_validate import (
    DEFAULT_CONFIG,
    HtmlValidateCliBackend,
    parse_report,
)
from projectlint.models.diagnostics import LintRequest
from projectlint.models.errors import LintBackendError

REPORT = [
    {
        "filePath": "/site/index.html",
        "errorCount": 1,
        "warningCount": 1,
        "messages": [
            {
                "ruleId": "close-order",
                "severity": 2,
                "message": "Unexpected close-tag, expected opening tag.",
                "offset": 44,
                "size": 6,
                "line": 4,
                "column": 13,
                "ruleUrl": "https://html-validate.org/rules/close-order.html",
            },
            {
                "ruleId": "no-trailing-whitespace",
                "severity": 1,
                "message": "Trailing whitespace",
                "offset": 10,
                "size": 2,
            },
        ],
    }
]


class FakeProcess:
    def __init__(
        self,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
        delay: float = 0.0,
        on_communicate: Any = None,
    ) -> None:
        self._stdout = stdout.encode()
        self._stderr = stderr.encode()
        self.returncode = returncode
        self._delay = delay
        self._on_communicate = on_communicate
        self.stdin_data: bytes | None = None
        self.killed = False
        self.waited = False

    async def communicate(self, data: bytes | None = None) -> tuple[bytes, bytes]:
        self.stdin_data = data
        if self._on_communicate is not None:
            self._on_communicate()
        if self._delay:
            await asyncio.sleep(self._delay)
        return self._stdout, self._stderr

    def kill(self) -> None:
        self.killed = True

    async def wait(self) -> int:
        self.waited = True
        return self.returncode


class SpawnRecorder:
    def __init__(self, process: FakeProcess | None = None) -> None:
        self.process = process
        self.args: tuple[str, ...] = ()

    async def __call__(self, *args: str, **kwargs: Any) -> FakeProcess:
        self.args = args
        if self.process is None:
            raise FileNotFoundError(args[0])
        return self.process

    def option(self, name: str) -> str:
        return self.args[self.args.index(name) + 1]


@pytest.fixture
def request_body() -> LintRequest:
    return LintRequest(
        text="<p>hello</p>",
        file_path="/site/index.html",
        generation=3,
        config={"rules": {"close-order": "error"}},
    )


def _patch_spawn(monkeypatch: pytest.MonkeyPatch, recorder: SpawnRecorder) -> None:
    monkeypatch.setattr(html_validate.asyncio, "create_subprocess_exec", recorder)


class TestParseReport:
    def test_findings_in_report_order(self) -> None:
        findings = parse_report(json.dumps(REPORT))
        assert [f.rule_id for f in findings] == ["close-order", "no-trailing-whitespace"]
        first = findings[0]
        assert (first.start, first.end) == (44, 50)
        assert first.severity == 2
        assert first.rule_url == "https://html-validate.org/rules/close-order.html"
        assert findings[1].rule_url is None

    def test_empty_output(self) -> None:
        assert parse_report("") == []
        assert parse_report("  \n") == []

    def test_no_messages(self) -> None:
        assert parse_report(json.dumps([{"filePath": "x", "messages": []}])) == []

    def test_missing_rule_id(self) -> None:
        report = [{"messages": [{"severity": 2, "message": "Parse error", "offset": 0}]}]
        [finding] = parse_report(json.dumps(report))
        assert finding.rule_id == "unknown"
        assert finding.end == 0

    def test_invalid_json(self) -> None:
        with pytest.raises(LintBackendError, match="invalid JSON"):
            parse_report("Error: something exploded")

    def test_not_a_list(self) -> None:
        with pytest.raises(LintBackendError, match="not a list"):
            parse_report(json.dumps({"messages": []}))


class TestHtmlValidateCliBackend:
    async def test_runs_cli_with_stdin(
        self, monkeypatch: pytest.MonkeyPatch, request_body: LintRequest
    ) -> None:
        process = FakeProcess(stdout=json.dumps(REPORT), returncode=1)
        spawn = SpawnRecorder(process)
        _patch_spawn(monkeypatch, spawn)

        findings = await HtmlValidateCliBackend().lint(request_body)

        assert len(findings) == 2
        assert spawn.args[0] == "html-validate"
        assert spawn.option("--formatter") == "json"
        assert spawn.option("--stdin-filename") == "/site/index.html"
        assert "--stdin" in spawn.args
        assert process.stdin_data == b"<p>hello</p>"

    async def test_executable_with_arguments(
        self, monkeypatch: pytest.MonkeyPatch, request_body: LintRequest
    ) -> None:
        spawn = SpawnRecorder(FakeProcess(stdout="[]"))
        _patch_spawn(monkeypatch, spawn)
        await HtmlValidateCliBackend(executable="npx html-validate").lint(request_body)
        assert spawn.args[:2] == ("npx", "html-validate")

    async def test_config_passed_through_temp_file(
        self, monkeypatch: pytest.MonkeyPatch, request_body: LintRequest
    ) -> None:
        seen: dict[str, Any] = {}
        spawn = SpawnRecorder()

        def capture() -> None:
            with open(spawn.option("--config"), encoding="utf-8") as handle:
                seen["config"] = json.load(handle)

        spawn.process = FakeProcess(stdout="[]", on_communicate=capture)
        _patch_spawn(monkeypatch, spawn)

        await HtmlValidateCliBackend().lint(request_body)

        assert seen["config"] == {"rules": {"close-order": "error"}}
        assert not os.path.exists(spawn.option("--config"))

    async def test_default_config_without_project_config(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        seen: dict[str, Any] = {}
        spawn = SpawnRecorder()

        def capture() -> None:
            with open(spawn.option("--config"), encoding="utf-8") as handle:
                seen["config"] = json.load(handle)

        spawn.process = FakeProcess(stdout="[]", on_communicate=capture)
        _patch_spawn(monkeypatch, spawn)

        await HtmlValidateCliBackend().lint(LintRequest(text="", file_path="/a.html"))
        assert seen["config"] == DEFAULT_CONFIG

    async def test_empty_project_config_passed_as_is(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        seen: dict[str, Any] = {}
        spawn = SpawnRecorder()

        def capture() -> None:
            with open(spawn.option("--config"), encoding="utf-8") as handle:
                seen["config"] = json.load(handle)

        spawn.process = FakeProcess(stdout="[]", on_communicate=capture)
        _patch_spawn(monkeypatch, spawn)

        await HtmlValidateCliBackend().lint(
            LintRequest(text="", file_path="/a.html", config={})
        )
        assert seen["config"] == {}

    async def test_missing_executable(
        self, monkeypatch: pytest.MonkeyPatch, request_body: LintRequest
    ) -> None:
        spawn = SpawnRecorder(None)
        _patch_spawn(monkeypatch, spawn)
        with pytest.raises(LintBackendError, match="not found in PATH"):
            await HtmlValidateCliBackend().lint(request_body)
        assert not os.path.exists(spawn.option("--config"))

    async def test_crash_without_report(
        self, monkeypatch: pytest.MonkeyPatch, request_body: LintRequest
    ) -> None:
        process = FakeProcess(stderr="Cannot find module", returncode=2)
        _patch_spawn(monkeypatch, SpawnRecorder(process))
        with pytest.raises(LintBackendError, match="exited with 2: Cannot find module"):
            await HtmlValidateCliBackend().lint(request_body)

    async def test_timeout_kills_worker(
        self, monkeypatch: pytest.MonkeyPatch, request_body: LintRequest
    ) -> None:
        process = FakeProcess(stdout="[]", delay=5)
        _patch_spawn(monkeypatch, SpawnRecorder(process))
        with pytest.raises(LintBackendError, match="timed out"):
            await HtmlValidateCliBackend(timeout=0.01).lint(request_body)
        assert process.killed

    async def test_cancellation_kills_worker(
        self, monkeypatch: pytest.MonkeyPatch, request_body: LintRequest
    ) -> None:
        process = FakeProcess(stdout="[]", delay=5)
        spawn = SpawnRecorder(process)
        _patch_spawn(monkeypatch, spawn)

        task = asyncio.create_task(HtmlValidateCliBackend().lint(request_body))
        for _ in range(50):
            if process.stdin_data is not None:
                break
            await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert process.killed
        assert process.waited
        assert not os.path.exists(spawn.option("--config"))
